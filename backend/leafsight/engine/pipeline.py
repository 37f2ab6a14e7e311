"""Pipeline orchestrator — contour → signature → distances → vote.

Stages run in a fixed order and stop at the first failure. Errors propagate
unchanged, tagged with the stage that raised them.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np

from leafsight.engine.classifier import ClassificationResult, classify
from leafsight.engine.config import ClassifierConfig
from leafsight.engine.context import ClassificationContext, ClassificationRequest
from leafsight.engine.contour import as_contour
from leafsight.engine.diagnostics import format_report
from leafsight.engine.distance import euclidean_distances, shepard_smooth
from leafsight.engine.efd import extract_signature
from leafsight.engine.errors import LeafSightError
from leafsight.engine.moments import hu_descriptor
from leafsight.engine.reference import ReferenceSet
from leafsight.engine.spaces import FeatureSpaceRegistry, default_registry

logger = logging.getLogger(__name__)


def _given(value: int | None, default: int) -> int:
    return value if value is not None else default


class ClassificationPipeline:
    """Classifies contours against one borrowed reference set."""

    def __init__(
        self,
        references: ReferenceSet,
        config: ClassifierConfig | None = None,
        spaces: FeatureSpaceRegistry | None = None,
    ) -> None:
        self.references = references
        self.config = config or ClassifierConfig()
        self.spaces = spaces or default_registry()

    def run(self, request: ClassificationRequest) -> ClassificationResult:
        """Run every stage for one request and return the predicted label."""
        return self.run_context(request).result

    def run_context(self, request: ClassificationRequest) -> ClassificationContext:
        """Like run(), but keep the intermediate results and stage timings."""
        start = time.perf_counter()
        ctx = ClassificationContext(request=request)

        with self._stage(ctx, "contour"):
            ctx.contour = as_contour(request.contour)

        with self._stage(ctx, "signature"):
            n_harmonics = _given(request.n_harmonics, self.config.n_harmonics)
            ctx.signature = extract_signature(ctx.contour, n_harmonics)
            ctx.vectors["efd"] = np.asarray(ctx.signature.normalized)

        with self._stage(ctx, "descriptor"):
            if request.hu is not None:
                ctx.vectors["hu"] = np.asarray(request.hu, dtype=np.float64)
            else:
                ctx.vectors["hu"] = hu_descriptor(ctx.contour)

        with self._stage(ctx, "distance"):
            self._distances(ctx)

        with self._stage(ctx, "classify"):
            ctx.result = classify(
                self.references.labels,
                ctx.distances,
                _given(request.k, self.config.k),
            )

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Classified as '%s' (%s) against %d references in %.1fms",
            ctx.result.label,
            ctx.result.resolution,
            len(self.references),
            total,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("\n%s", format_report(ctx.result))
        return ctx

    def _distances(self, ctx: ClassificationContext) -> None:
        for space in self.spaces.all():
            query = ctx.vectors[space.vector]
            self.references.check_query(space.vector, len(query))
            factor = self.config.factor_for(space.id, space.factor)
            raw = euclidean_distances(query, self.references.matrix(space.vector), factor)
            if self.config.shepard_smoothing:
                ctx.distances[space.id] = shepard_smooth(raw, self.config.shepard_power)
            else:
                ctx.distances[space.id] = raw

    @contextmanager
    def _stage(self, ctx: ClassificationContext, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        except LeafSightError as e:
            if e.stage is None:
                e.stage = name
            logger.warning("  %s FAILED: %s", name, e)
            raise
        elapsed = (time.perf_counter() - t0) * 1000
        ctx.completed_stages.append(name)
        ctx.timings_ms[name] = round(elapsed, 3)
        logger.debug("  %s completed in %.1fms", name, elapsed)
