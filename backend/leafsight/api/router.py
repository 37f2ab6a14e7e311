"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from leafsight.api import classify, health, references, signature

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(signature.router)
api_router.include_router(classify.router)
api_router.include_router(references.router)
