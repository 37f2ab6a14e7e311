"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContourRequest(BaseModel):
    contour: list[tuple[float, float]] = Field(
        ..., description="Closed contour as ordered (x, y) points"
    )
    n_harmonics: int | None = Field(
        default=None, ge=2, description="Harmonic count (defaults to server setting)"
    )


class ClassifyRequest(ContourRequest):
    hu: list[float] | None = Field(
        default=None,
        description="Secondary descriptor; computed from the contour when omitted",
    )
    k: int | None = Field(default=None, ge=1, description="Number of nearest neighbours")


class ReferenceAddRequest(ContourRequest):
    label: str = Field(..., min_length=1, description="Class label of the reference leaf")
    hu: list[float] | None = Field(
        default=None,
        description="Secondary descriptor; computed from the contour when omitted",
    )
