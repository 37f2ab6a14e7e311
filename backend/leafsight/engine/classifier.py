"""k-nearest-neighbour classifier over fused feature-space distances.

1. Fusion   — combined distance per reference = sum over feature spaces.
2. Ranking  — ascending combined distance; equal distances keep table order.
3. Vote     — label counts over the first k neighbours.
4. Majority — unique top count wins; a count tie goes to the tied label with
              the smallest mean combined distance inside the top-k window.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.errors import DimensionMismatchError, InsufficientReferenceDataError

logger = logging.getLogger(__name__)

MAJORITY = "majority"
TIE_BREAK = "tie_break"


@dataclass(frozen=True)
class RankedNeighbor:
    label: str
    distance: float
    # Row position in the reference table
    index: int = 0


def by_distance(neighbor: RankedNeighbor) -> tuple[float, int]:
    """Sort key: combined distance, then reference-table order."""
    return (neighbor.distance, neighbor.index)


@dataclass(frozen=True)
class ClassificationResult:
    label: str
    neighbors: tuple[RankedNeighbor, ...]
    # MAJORITY or TIE_BREAK
    resolution: str
    votes: Mapping[str, int] = field(default_factory=dict)
    # Smoothed distances per feature space, in reference-table order
    per_space: Mapping[str, NDArray[np.float64]] = field(default_factory=dict)

    @property
    def k(self) -> int:
        return len(self.neighbors)


def fuse(distance_maps: Mapping[str, Sequence[float]]) -> NDArray[np.float64]:
    """Equal-weight sum of per-space distances."""
    if not distance_maps:
        raise ValueError("at least one feature space is required")

    arrays = {sid: np.asarray(d, dtype=np.float64) for sid, d in distance_maps.items()}
    lengths = {sid: len(a) for sid, a in arrays.items()}
    if len(set(lengths.values())) > 1:
        raise DimensionMismatchError(
            f"feature spaces disagree on reference count: {lengths}", stage="classify"
        )
    return np.sum(np.vstack(list(arrays.values())), axis=0)


def rank(labels: Sequence[str], combined: Sequence[float]) -> tuple[RankedNeighbor, ...]:
    if len(labels) != len(combined):
        raise DimensionMismatchError(
            f"{len(labels)} labels but {len(combined)} distances", stage="classify"
        )
    neighbors = [
        RankedNeighbor(label=label, distance=float(d), index=i)
        for i, (label, d) in enumerate(zip(labels, combined))
    ]
    return tuple(sorted(neighbors, key=by_distance))


def majority_vote(top_k: Sequence[RankedNeighbor]) -> tuple[str, str]:
    """Return (label, MAJORITY | TIE_BREAK) for an already-ranked window."""
    if not top_k:
        raise InsufficientReferenceDataError("no neighbours to vote on", stage="classify")

    # Counter keeps first-seen order, i.e. rank order
    counts = Counter(n.label for n in top_k)
    best = max(counts.values())
    tied = [label for label, c in counts.items() if c == best]

    if len(tied) == 1:
        return tied[0], MAJORITY

    means: dict[str, float] = {}
    for label in tied:
        dists = [n.distance for n in top_k if n.label == label]
        if not dists:
            raise RuntimeError(f"tied label '{label}' has no occurrences in the top-k window")
        means[label] = sum(dists) / len(dists)

    logger.debug("Count tie at %d between %s, mean distances %s", best, tied, means)
    # min() keeps the first (highest-ranked) label on equal means
    winner = min(tied, key=lambda label: means[label])
    return winner, TIE_BREAK


def classify(
    labels: Sequence[str],
    distance_maps: Mapping[str, Sequence[float]],
    k: int,
) -> ClassificationResult:
    """Fuse, rank and vote over the k nearest reference entries."""
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    n = len(labels)
    if n == 0:
        raise InsufficientReferenceDataError("reference set is empty", stage="classify")
    if k > n:
        raise InsufficientReferenceDataError(
            f"k={k} exceeds the {n} available reference entries", stage="classify"
        )

    combined = fuse(distance_maps)
    if len(combined) != n:
        raise DimensionMismatchError(
            f"{n} labels but {len(combined)} distances per feature space", stage="classify"
        )

    ranked = rank(labels, combined)
    top_k = ranked[:k]
    label, resolution = majority_vote(top_k)

    return ClassificationResult(
        label=label,
        neighbors=top_k,
        resolution=resolution,
        votes=dict(Counter(nb.label for nb in top_k)),
        per_space={sid: np.asarray(d, dtype=np.float64) for sid, d in distance_maps.items()},
    )
