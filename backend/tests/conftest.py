"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from leafsight.engine.efd import extract_signature
from leafsight.engine.moments import hu_descriptor
from leafsight.engine.reference import ReferenceEntry, ReferenceSet


def regular_polygon(n: int, radius: float = 1.0, center=(0.0, 0.0)) -> np.ndarray:
    """Vertices of a regular n-gon, counter-clockwise, starting on the +x axis."""
    t = 2 * np.pi * np.arange(n) / n
    return np.column_stack([center[0] + radius * np.cos(t), center[1] + radius * np.sin(t)])


def lobed(n: int = 64, lobes: int = 3, depth: float = 0.3, wobble: float = 0.1) -> np.ndarray:
    """Star-like closed contour r(t) = 1 + depth·cos(lobes·t) + wobble·sin(5t)."""
    t = 2 * np.pi * np.arange(n) / n
    r = 1.0 + depth * np.cos(lobes * t) + wobble * np.sin(5 * t)
    return np.column_stack([r * np.cos(t), r * np.sin(t)])


def ellipse(n: int = 64, a: float = 2.0, b: float = 1.0) -> np.ndarray:
    t = 2 * np.pi * np.arange(n) / n
    return np.column_stack([a * np.cos(t), b * np.sin(t)])


def similarity_transform(
    points: np.ndarray,
    angle: float = 0.0,
    scale: float = 1.0,
    offset=(0.0, 0.0),
) -> np.ndarray:
    """Rotate by ``angle`` radians, scale uniformly, then translate."""
    c, s = np.cos(angle), np.sin(angle)
    rot = np.array([[c, -s], [s, c]])
    return scale * points @ rot.T + np.asarray(offset)


# Leaves of three "species": trefoil, pentafoil and ellipse-like shapes,
# each with small shape variations.
SPECIES = {
    "trefoil": [lobed(lobes=3, depth=d) for d in (0.28, 0.30, 0.32)],
    "pentafoil": [lobed(lobes=5, depth=d, wobble=0.0) for d in (0.18, 0.20, 0.22)],
    "oval": [ellipse(a=a) for a in (1.8, 2.0, 2.2)],
}

N_HARMONICS = 12


def make_entry(label: str, contour: np.ndarray, n_harmonics: int = N_HARMONICS) -> ReferenceEntry:
    sig = extract_signature(contour, n_harmonics)
    return ReferenceEntry.create(label=label, efd=sig.normalized, hu=hu_descriptor(contour))


@pytest.fixture
def hexagon() -> np.ndarray:
    return regular_polygon(6)


@pytest.fixture
def star() -> np.ndarray:
    return lobed()


@pytest.fixture
def reference_set() -> ReferenceSet:
    return ReferenceSet(
        make_entry(label, contour) for label, contours in SPECIES.items() for contour in contours
    )
