"""Hu moment invariants — the secondary feature space.

7 numbers invariant to translation, rotation, scale. Used when the caller
does not supply its own secondary descriptor for the query.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.contour import as_contour
from leafsight.utils.geometry import hu_moments

HU_DIM = 7


def hu_descriptor(points) -> NDArray[np.float64]:
    """Log-scaled Hu moments of a contour's boundary point set."""
    contour = as_contour(points)
    return hu_moments(contour)
