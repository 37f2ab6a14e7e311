"""Scalar shape measurements stored alongside reference entries.

ImageJ-style definitions:
    circularity = 4π·area / perimeter²           circle = 1.0
    aspect_ratio = major / minor axis of the fitted ellipse
    roundness   = 4·area / (π·major²)
    solidity    = area / convex hull area
"""

from __future__ import annotations

import math

import numpy as np
from scipy.spatial import ConvexHull, QhullError
from shapely.geometry import Polygon

from leafsight.engine.contour import as_contour

MEASUREMENT_KEYS = ("area", "perimeter", "circularity", "aspect_ratio", "roundness", "solidity")


def _ellipse_axes(points: np.ndarray, area: float) -> tuple[float, float]:
    """Major/minor axis lengths of the ellipse with the same second moments and area."""
    centered = points - np.mean(points, axis=0)
    cov = np.cov(centered.T)
    eigenvalues = np.sort(np.linalg.eigvalsh(cov))[::-1]
    if eigenvalues[-1] <= 1e-12:
        return (0.0, 0.0)
    ratio = math.sqrt(eigenvalues[0] / eigenvalues[-1])
    # area = π/4 · major · minor, major = ratio · minor
    minor = math.sqrt(4.0 * area / (math.pi * ratio))
    return (ratio * minor, minor)


def shape_measurements(points) -> dict[str, float]:
    contour = as_contour(points)
    polygon = Polygon(contour)
    area = float(abs(polygon.area))
    perimeter = float(polygon.exterior.length)

    circularity = 4 * math.pi * area / perimeter**2 if perimeter > 1e-10 else 0.0

    major, minor = _ellipse_axes(np.asarray(contour), area)
    aspect_ratio = major / minor if minor > 1e-10 else 0.0
    roundness = 4 * area / (math.pi * major**2) if major > 1e-10 else 0.0

    try:
        hull_area = float(ConvexHull(contour).volume)  # In 2D, volume = area
    except QhullError:
        hull_area = 0.0
    solidity = area / hull_area if hull_area > 1e-10 else 0.0

    return {
        "area": round(area, 4),
        "perimeter": round(perimeter, 4),
        "circularity": round(circularity, 4),
        "aspect_ratio": round(aspect_ratio, 4),
        "roundness": round(roundness, 4),
        "solidity": round(solidity, 4),
    }
