"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException

from leafsight.config import Settings, settings
from leafsight.engine.pipeline import ClassificationPipeline
from leafsight.engine.reference import CsvReferenceStore, ReferenceSet


def get_settings() -> Settings:
    return settings


def get_reference_store(cfg: Settings = Depends(get_settings)) -> CsvReferenceStore:
    if not cfg.reference_db:
        raise HTTPException(status_code=503, detail="No reference database configured")
    return CsvReferenceStore(cfg.reference_db)


@lru_cache(maxsize=4)
def _load_reference_set(path: str) -> ReferenceSet:
    return CsvReferenceStore(path).load()


def get_reference_set(
    store: CsvReferenceStore = Depends(get_reference_store),
) -> ReferenceSet:
    """Reference table, loaded once and shared read-only between requests."""
    try:
        return _load_reference_set(str(store.path))
    except FileNotFoundError as e:
        raise HTTPException(status_code=503, detail=f"Reference database not found: {e}") from e


def invalidate_reference_set() -> None:
    _load_reference_set.cache_clear()


def get_pipeline(
    references: ReferenceSet = Depends(get_reference_set),
    cfg: Settings = Depends(get_settings),
) -> ClassificationPipeline:
    return ClassificationPipeline(references, cfg.classifier_config())
