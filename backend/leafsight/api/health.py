"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from leafsight.engine.spaces import default_registry
from leafsight.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        feature_spaces=[s.id for s in default_registry().all()],
    )
