"""POST /api/signature, /api/reconstruct — descriptor extraction only."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from leafsight.config import Settings
from leafsight.dependencies import get_settings
from leafsight.engine.contour import as_contour
from leafsight.engine.efd import extract_signature, reconstruct_contour, reconstruction_error
from leafsight.engine.measurements import shape_measurements
from leafsight.engine.moments import hu_descriptor
from leafsight.models.requests import ContourRequest
from leafsight.models.responses import ReconstructResponse, SignatureResponse

router = APIRouter()


def _harmonics(req: ContourRequest, cfg: Settings) -> int:
    return req.n_harmonics if req.n_harmonics is not None else cfg.n_harmonics


@router.post("/signature", response_model=SignatureResponse)
def signature(req: ContourRequest, cfg: Settings = Depends(get_settings)) -> SignatureResponse:
    contour = as_contour(req.contour)
    sig = extract_signature(contour, _harmonics(req, cfg))
    coeffs = sig.coefficients

    return SignatureResponse(
        n_points=coeffs.n_points,
        n_harmonics=coeffs.n_harmonics,
        centroid=coeffs.centroid,
        coefficients=coeffs.as_rows(),
        efd=[float(v) for v in sig.efd],
        normalized=[float(v) for v in sig.normalized],
        hu=[float(v) for v in hu_descriptor(contour)],
        measurements=shape_measurements(contour),
    )


@router.post("/reconstruct", response_model=ReconstructResponse)
def reconstruct(req: ContourRequest, cfg: Settings = Depends(get_settings)) -> ReconstructResponse:
    contour = as_contour(req.contour)
    n_harmonics = _harmonics(req, cfg)
    sig = extract_signature(contour, n_harmonics)
    points = reconstruct_contour(sig.coefficients)

    return ReconstructResponse(
        points=[(float(x), float(y)) for x, y in points],
        rms_error=round(reconstruction_error(contour, n_harmonics), 6),
    )
