"""LeafSight shape classification engine."""

from leafsight.engine.classifier import ClassificationResult, RankedNeighbor, classify
from leafsight.engine.config import ClassifierConfig
from leafsight.engine.context import ClassificationRequest
from leafsight.engine.efd import HarmonicCoefficients, ShapeSignature, extract_signature
from leafsight.engine.pipeline import ClassificationPipeline
from leafsight.engine.reference import CsvReferenceStore, ReferenceEntry, ReferenceSet

__all__ = [
    "ClassificationPipeline",
    "ClassificationRequest",
    "ClassificationResult",
    "ClassifierConfig",
    "CsvReferenceStore",
    "HarmonicCoefficients",
    "RankedNeighbor",
    "ReferenceEntry",
    "ReferenceSet",
    "ShapeSignature",
    "classify",
    "extract_signature",
]
