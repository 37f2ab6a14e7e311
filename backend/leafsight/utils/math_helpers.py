"""Math helpers — log-transform, RMS. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def log_transform(values: NDArray[np.float64]) -> NDArray[np.float64]:
    """sign(v) * log10(1 + |v|). Used for Hu moment comparison."""
    return np.sign(values) * np.log10(1 + np.abs(values))


def rms_distance(a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
    """Root-mean-square point-to-point distance between two (m, 2) arrays."""
    diffs = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.mean(np.sum(diffs**2, axis=1))))
