"""Contour validation and loading — the entry point for every request."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.errors import MalformedContourError

# A closed ring needs at least a triangle.
MIN_POINTS = 3


def as_contour(points: Any) -> NDArray[np.float64]:
    """Validate ``points`` and return them as a read-only (m, 2) float array.

    Raises MalformedContourError for anything that is not an ordered ring of
    at least 3 distinct finite points.
    """
    try:
        arr = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedContourError(f"contour is not numeric: {e}", stage="contour") from e

    if arr.ndim != 2 or arr.shape[1] != 2:
        raise MalformedContourError(
            f"contour must be an (m, 2) array, got shape {arr.shape}", stage="contour"
        )
    if len(arr) < MIN_POINTS:
        raise MalformedContourError(
            f"contour needs at least {MIN_POINTS} points, got {len(arr)}", stage="contour"
        )
    if not np.all(np.isfinite(arr)):
        raise MalformedContourError("contour contains NaN or infinite values", stage="contour")

    distinct = len(np.unique(arr, axis=0))
    if distinct < MIN_POINTS:
        raise MalformedContourError(
            f"contour has only {distinct} distinct points", stage="contour"
        )

    arr.setflags(write=False)
    return arr


def load_contour(path: str | Path) -> NDArray[np.float64]:
    """Read an x,y contour from a CSV/whitespace text file.

    A non-numeric first line is treated as a header and skipped.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if lines and not _is_numeric_row(lines[0]):
        lines = lines[1:]

    rows = [ln.replace(",", " ").split()[:2] for ln in lines]
    return as_contour(rows)


def _is_numeric_row(line: str) -> bool:
    try:
        [float(v) for v in line.replace(",", " ").split()]
    except ValueError:
        return False
    return True
