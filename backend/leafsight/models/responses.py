"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    feature_spaces: list[str] = Field(default_factory=list)


class SignatureResponse(BaseModel):
    n_points: int
    n_harmonics: int
    centroid: tuple[float, float]
    # [ax, ay, bx, by] per harmonic
    coefficients: list[list[float]]
    efd: list[float]
    normalized: list[float]
    hu: list[float]
    measurements: dict[str, float] = Field(default_factory=dict)


class ReconstructResponse(BaseModel):
    points: list[tuple[float, float]]
    rms_error: float


class NeighborOut(BaseModel):
    label: str
    distance: float
    index: int


class ClassifyResponse(BaseModel):
    label: str
    resolution: str
    k: int
    neighbors: list[NeighborOut]
    votes: dict[str, int] = Field(default_factory=dict)
    processing_time_ms: float = 0.0
    stage_timings_ms: dict[str, float] = Field(default_factory=dict)


class ReferencesResponse(BaseModel):
    count: int
    labels: list[str]
    efd_dimension: int
    hu_dimension: int


class ReferenceAddResponse(BaseModel):
    label: str
    count: int
