"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from leafsight.utils.math_helpers import log_transform


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Compute centroid of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def squared_extent(points: NDArray[np.float64]) -> float:
    """Squared diagonal of the bounding box."""
    if len(points) == 0:
        return 0.0
    span = np.ptp(points, axis=0)
    return float(np.sum(span**2))


def hu_moments(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Compute 7 Hu moment invariants from a point set (binary image approximation).

    Uses log-transform: sign(h) * log10(1 + |h|) for distance computation.
    """
    if len(points) < 3:
        return np.zeros(7)

    # Center the points
    cx, cy = centroid(points)
    x = points[:, 0] - cx
    y = points[:, 1] - cy

    def mu(p: int, q: int) -> float:
        return float(np.sum(x**p * y**q))

    m00 = float(len(points))

    # Scale normalization against the second-order spread so the result does
    # not depend on the contour's size.
    spread = mu(2, 0) + mu(0, 2)
    if spread < 1e-12:
        return np.zeros(7)
    s = np.sqrt(spread / m00)

    def eta(p: int, q: int) -> float:
        return mu(p, q) / (m00 * s ** (p + q))

    e20 = eta(2, 0)
    e02 = eta(0, 2)
    e11 = eta(1, 1)
    e30 = eta(3, 0)
    e03 = eta(0, 3)
    e21 = eta(2, 1)
    e12 = eta(1, 2)

    h1 = e20 + e02
    h2 = (e20 - e02) ** 2 + 4 * e11**2
    h3 = (e30 - 3 * e12) ** 2 + (3 * e21 - e03) ** 2
    h4 = (e30 + e12) ** 2 + (e21 + e03) ** 2
    h5 = (e30 - 3 * e12) * (e30 + e12) * ((e30 + e12) ** 2 - 3 * (e21 + e03) ** 2) + (
        3 * e21 - e03
    ) * (e21 + e03) * (3 * (e30 + e12) ** 2 - (e21 + e03) ** 2)
    h6 = (e20 - e02) * ((e30 + e12) ** 2 - (e21 + e03) ** 2) + 4 * e11 * (e30 + e12) * (
        e21 + e03
    )
    h7 = (3 * e21 - e03) * (e30 + e12) * ((e30 + e12) ** 2 - 3 * (e21 + e03) ** 2) - (
        e30 - 3 * e12
    ) * (e21 + e03) * (3 * (e30 + e12) ** 2 - (e21 + e03) ** 2)

    return log_transform(np.array([h1, h2, h3, h4, h5, h6, h7]))
