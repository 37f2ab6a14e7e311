"""POST /api/classify — full contour → label pipeline."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from leafsight.dependencies import get_pipeline
from leafsight.engine.context import ClassificationRequest
from leafsight.engine.pipeline import ClassificationPipeline
from leafsight.models.requests import ClassifyRequest
from leafsight.models.responses import ClassifyResponse, NeighborOut

router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse)
def classify(
    req: ClassifyRequest,
    pipeline: ClassificationPipeline = Depends(get_pipeline),
) -> ClassifyResponse:
    start = time.perf_counter()

    ctx = pipeline.run_context(
        ClassificationRequest(
            contour=req.contour,
            n_harmonics=req.n_harmonics,
            hu=req.hu,
            k=req.k,
        )
    )
    result = ctx.result

    elapsed = (time.perf_counter() - start) * 1000

    return ClassifyResponse(
        label=result.label,
        resolution=result.resolution,
        k=result.k,
        neighbors=[
            NeighborOut(label=n.label, distance=n.distance, index=n.index)
            for n in result.neighbors
        ],
        votes=dict(result.votes),
        processing_time_ms=round(elapsed, 1),
        stage_timings_ms=ctx.timings_ms,
    )
