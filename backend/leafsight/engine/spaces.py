"""Feature-space registry — every space the classifier fuses is registered here.

Usage:
    registry.register(FeatureSpace(id="efd", factor=EFD_FACTOR, vector="efd"))

A space names which query/reference vector it compares and the calibration
factor applied to its raw Euclidean distances. Distances from all registered
spaces are summed with equal weight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from leafsight.engine.config import EFD_FACTOR, HU_FACTOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureSpace:
    id: str
    factor: float
    # Attribute name on ReferenceEntry / query vectors
    vector: str
    description: str = ""


class FeatureSpaceRegistry:
    """Ordered registry of feature spaces."""

    def __init__(self) -> None:
        self._spaces: dict[str, FeatureSpace] = {}

    def register(self, space: FeatureSpace) -> None:
        if space.id in self._spaces:
            raise ValueError(f"Duplicate feature space ID: {space.id}")
        self._spaces[space.id] = space
        logger.debug("Registered feature space %s (factor=%g)", space.id, space.factor)

    def get(self, space_id: str) -> FeatureSpace:
        return self._spaces[space_id]

    def all(self) -> list[FeatureSpace]:
        return list(self._spaces.values())

    @property
    def count(self) -> int:
        return len(self._spaces)


def default_registry() -> FeatureSpaceRegistry:
    """EFD shape signature + Hu moment descriptor."""
    reg = FeatureSpaceRegistry()
    reg.register(
        FeatureSpace(
            id="efd",
            factor=EFD_FACTOR,
            vector="efd",
            description="Normalized elliptic Fourier descriptors",
        )
    )
    reg.register(
        FeatureSpace(
            id="hu",
            factor=HU_FACTOR,
            vector="hu",
            description="Log-scaled Hu moment invariants",
        )
    )
    return reg
