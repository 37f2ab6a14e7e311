"""Distance engine — scaled Euclidean distances and Shepard smoothing.

One feature space at a time: the query vector is compared against every
reference row, the raw distances are multiplied by the space's calibration
factor, then re-estimated by inverse-distance weighting:

    d'_j = sum_i(w_i * d_i) / sum_i(w_i),    w_i = 1 / d_i**power

Exact matches (d_i == 0) keep their raw zero distance and are left out of
the weighted sum, so no NaN or inf is ever produced.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from leafsight.engine.errors import DimensionMismatchError


def euclidean_distances(
    query,
    references,
    factor: float = 1.0,
) -> NDArray[np.float64]:
    """``factor * ||ref_i - query||`` for every reference row."""
    q = np.asarray(query, dtype=np.float64).ravel()
    refs = np.asarray(references, dtype=np.float64)
    if refs.size == 0:
        return np.empty(0, dtype=np.float64)
    if refs.ndim == 1:
        refs = refs.reshape(1, -1)

    if refs.ndim != 2 or refs.shape[1] != len(q):
        raise DimensionMismatchError(
            f"query has length {len(q)} but reference rows have shape {refs.shape}",
            stage="distance",
        )
    return factor * cdist(q.reshape(1, -1), refs, metric="euclidean")[0]


def shepard_smooth(distances, power: float = 2.0) -> NDArray[np.float64]:
    """Inverse-distance-weighted re-estimate of each distance."""
    d = np.abs(np.asarray(distances, dtype=np.float64))
    out = d.copy()
    exact = d == 0.0
    if exact.all():
        return out

    nonzero = d[~exact]
    weights = 1.0 / nonzero**power
    consensus = float(np.sum(weights * nonzero) / np.sum(weights))

    out[~exact] = consensus
    return out
