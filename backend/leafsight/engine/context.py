"""Per-request state flowing through the classification pipeline.

A context is created for one request and discarded afterwards; the only
shared object is the read-only ReferenceSet it borrows.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.classifier import ClassificationResult
from leafsight.engine.efd import ShapeSignature


@dataclass(frozen=True)
class ClassificationRequest:
    """What a caller submits: a contour plus optional overrides."""

    contour: Any
    n_harmonics: int | None = None
    # Secondary descriptor for the same subject; computed from the contour when None
    hu: Sequence[float] | None = None
    k: int | None = None


@dataclass
class ClassificationContext:
    """Intermediate results of one classification run."""

    request: ClassificationRequest
    contour: NDArray[np.float64] | None = None
    signature: ShapeSignature | None = None
    # Query vector per kind ("efd", "hu")
    vectors: dict[str, NDArray[np.float64]] = field(default_factory=dict)
    # Smoothed distances per feature space id
    distances: dict[str, NDArray[np.float64]] = field(default_factory=dict)
    result: ClassificationResult | None = None

    # --- Pipeline metadata ---
    completed_stages: list[str] = field(default_factory=list)
    timings_ms: dict[str, float] = field(default_factory=dict)
