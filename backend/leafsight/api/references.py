"""GET/POST /api/references — inspect and extend the reference table."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from leafsight.config import Settings
from leafsight.dependencies import (
    get_reference_set,
    get_reference_store,
    get_settings,
    invalidate_reference_set,
)
from leafsight.engine.contour import as_contour
from leafsight.engine.efd import extract_signature
from leafsight.engine.measurements import shape_measurements
from leafsight.engine.moments import hu_descriptor
from leafsight.engine.reference import CsvReferenceStore, ReferenceEntry, ReferenceSet
from leafsight.models.requests import ReferenceAddRequest
from leafsight.models.responses import ReferenceAddResponse, ReferencesResponse

router = APIRouter()


@router.get("/references", response_model=ReferencesResponse)
def list_references(refs: ReferenceSet = Depends(get_reference_set)) -> ReferencesResponse:
    return ReferencesResponse(
        count=len(refs),
        labels=sorted(set(refs.labels)),
        efd_dimension=refs.dimension("efd"),
        hu_dimension=refs.dimension("hu"),
    )


@router.post("/references", response_model=ReferenceAddResponse, status_code=201)
def add_reference(
    req: ReferenceAddRequest,
    store: CsvReferenceStore = Depends(get_reference_store),
    cfg: Settings = Depends(get_settings),
) -> ReferenceAddResponse:
    contour = as_contour(req.contour)
    n_harmonics = req.n_harmonics if req.n_harmonics is not None else cfg.n_harmonics
    sig = extract_signature(contour, n_harmonics)
    hu = req.hu if req.hu is not None else hu_descriptor(contour)

    store.append(
        ReferenceEntry.create(
            label=req.label,
            efd=sig.normalized,
            hu=hu,
            measurements=shape_measurements(contour),
        )
    )
    invalidate_reference_set()
    return ReferenceAddResponse(label=req.label, count=len(store.load()))
