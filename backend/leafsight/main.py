"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leafsight.config import settings
from leafsight.engine.errors import (
    DegenerateContourError,
    DimensionMismatchError,
    InsufficientReferenceDataError,
    LeafSightError,
    MalformedContourError,
    ReferenceStoreError,
)

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.leafsight_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)

# Domain error → HTTP status
_STATUS = {
    MalformedContourError: 422,
    DegenerateContourError: 422,
    DimensionMismatchError: 422,
    InsufficientReferenceDataError: 409,
    ReferenceStoreError: 500,
}


async def _leafsight_error(request: Request, exc: LeafSightError) -> JSONResponse:
    status = next((code for cls, code in _STATUS.items() if isinstance(exc, cls)), 500)
    logger.info("%s %s -> %d %s", request.method, request.url.path, status, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__, "stage": exc.stage},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="LeafSight",
        description="Leaf contour classification — elliptic Fourier descriptors + k-NN",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LeafSightError, _leafsight_error)

    from leafsight.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
