"""Error kinds raised by the classification core.

Every error can carry the pipeline ``stage`` it was raised in so callers can
tell which step failed without parsing the message.
"""

from __future__ import annotations


class LeafSightError(Exception):
    """Base class for all LeafSight errors."""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {msg}"
        return msg


class MalformedContourError(LeafSightError, ValueError):
    """Contour has fewer than 3 (distinct) points or is not an (m, 2) array."""


class DegenerateContourError(LeafSightError, ValueError):
    """First harmonic has zero amplitude, so the EFD cannot be normalized."""


class DimensionMismatchError(LeafSightError, ValueError):
    """Query and reference vectors disagree in length."""


class InsufficientReferenceDataError(LeafSightError, ValueError):
    """Reference set is empty or smaller than k."""


class ReferenceStoreError(LeafSightError):
    """Reference table could not be read or written."""
