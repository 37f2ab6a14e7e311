"""End-to-end tests for the classification pipeline."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from leafsight.engine.classifier import MAJORITY
from leafsight.engine.config import ClassifierConfig
from leafsight.engine.context import ClassificationRequest
from leafsight.engine.errors import (
    DegenerateContourError,
    DimensionMismatchError,
    InsufficientReferenceDataError,
    MalformedContourError,
)
from leafsight.engine.pipeline import ClassificationPipeline
from leafsight.engine.reference import ReferenceSet
from tests.conftest import N_HARMONICS, SPECIES, lobed, similarity_transform

RAW = ClassifierConfig(n_harmonics=N_HARMONICS, k=3, shepard_smoothing=False)
SMOOTHED = ClassifierConfig(n_harmonics=N_HARMONICS, k=3)


def test_unseen_trefoil_is_classified_by_majority(reference_set):
    pipeline = ClassificationPipeline(reference_set, RAW)
    result = pipeline.run(ClassificationRequest(contour=lobed(lobes=3, depth=0.29)))

    assert result.label == "trefoil"
    assert result.resolution == MAJORITY
    assert result.votes == {"trefoil": 3}
    assert [n.label for n in result.neighbors] == ["trefoil"] * 3


def test_transformed_copy_matches_its_source(reference_set):
    query = similarity_transform(SPECIES["oval"][1], angle=1.1, scale=3.0, offset=(40, -7))
    pipeline = ClassificationPipeline(reference_set, RAW)
    result = pipeline.run(ClassificationRequest(contour=query, k=1))

    assert result.label == "oval"
    assert result.neighbors[0].index == 7
    assert result.neighbors[0].distance == pytest.approx(0.0, abs=1e-6)


def test_exact_copy_keeps_zero_distance_after_smoothing(reference_set):
    pipeline = ClassificationPipeline(reference_set, SMOOTHED)
    result = pipeline.run(ClassificationRequest(contour=SPECIES["pentafoil"][0], k=1))

    assert result.label == "pentafoil"
    assert result.neighbors[0].distance == 0.0
    assert result.neighbors[0].index == 3


def test_context_records_stages(reference_set):
    pipeline = ClassificationPipeline(reference_set, RAW)
    ctx = pipeline.run_context(ClassificationRequest(contour=lobed(lobes=5, depth=0.2)))

    assert ctx.completed_stages == ["contour", "signature", "descriptor", "distance", "classify"]
    assert set(ctx.timings_ms) == set(ctx.completed_stages)
    assert len(ctx.vectors["efd"]) == N_HARMONICS - 2
    assert len(ctx.vectors["hu"]) == 7
    assert set(ctx.distances) == {"efd", "hu"}
    assert all(len(d) == len(reference_set) for d in ctx.distances.values())


def test_caller_supplied_hu_vector_is_used(reference_set):
    hu = reference_set[0].hu
    pipeline = ClassificationPipeline(reference_set, RAW)
    ctx = pipeline.run_context(ClassificationRequest(contour=lobed(lobes=3, depth=0.29), hu=hu))

    np.testing.assert_array_equal(ctx.vectors["hu"], hu)
    assert ctx.distances["hu"][0] == 0.0


def test_config_factor_scales_distances(reference_set):
    query = ClassificationRequest(contour=lobed(lobes=3, depth=0.29))
    base = ClassificationPipeline(reference_set, RAW).run_context(query)
    scaled = ClassificationPipeline(
        reference_set,
        ClassifierConfig(n_harmonics=N_HARMONICS, k=3, efd_factor=10.0, shepard_smoothing=False),
    ).run_context(query)

    np.testing.assert_allclose(scaled.distances["efd"], 10.0 * base.distances["efd"])
    np.testing.assert_allclose(scaled.distances["hu"], base.distances["hu"])


class TestFailures:
    def test_malformed_contour(self, reference_set):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with pytest.raises(MalformedContourError) as exc_info:
            pipeline.run(ClassificationRequest(contour=[(0, 0), (1, 1)]))
        assert exc_info.value.stage == "contour"

    def test_degenerate_contour(self, reference_set):
        pipeline = ClassificationPipeline(reference_set, RAW)
        contour = [(0, 0), (1, 0), (0, 0), (0, 1)]
        with pytest.raises(DegenerateContourError) as exc_info:
            pipeline.run(ClassificationRequest(contour=contour, n_harmonics=3))
        assert exc_info.value.stage == "signature"

    def test_harmonic_count_must_match_table(self, reference_set):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with pytest.raises(DimensionMismatchError) as exc_info:
            pipeline.run(ClassificationRequest(contour=lobed(), n_harmonics=8))
        assert exc_info.value.stage == "distance"

    def test_hu_length_must_match_table(self, reference_set):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with pytest.raises(DimensionMismatchError) as exc_info:
            pipeline.run(ClassificationRequest(contour=lobed(), hu=[1.0, 2.0, 3.0]))
        assert exc_info.value.stage == "distance"

    def test_empty_reference_set(self):
        pipeline = ClassificationPipeline(ReferenceSet([]), RAW)
        with pytest.raises(InsufficientReferenceDataError):
            pipeline.run(ClassificationRequest(contour=lobed()))

    @pytest.mark.parametrize("override", [{"k": 0}, {"n_harmonics": 0}])
    def test_explicit_zero_is_not_replaced_by_default(self, reference_set, override):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with pytest.raises(ValueError, match=">= 1"):
            pipeline.run(ClassificationRequest(contour=lobed(lobes=3, depth=0.29), **override))

    def test_k_larger_than_table(self, reference_set):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with pytest.raises(InsufficientReferenceDataError) as exc_info:
            pipeline.run(ClassificationRequest(contour=lobed(), k=20))
        assert exc_info.value.stage == "classify"

    def test_failure_is_logged_with_stage(self, reference_set, caplog):
        pipeline = ClassificationPipeline(reference_set, RAW)
        with caplog.at_level(logging.WARNING, logger="leafsight.engine.pipeline"):
            with pytest.raises(MalformedContourError):
                pipeline.run(ClassificationRequest(contour=[(0, 0)]))
        assert "contour FAILED" in caplog.text


def test_debug_report_is_logged(reference_set, caplog):
    pipeline = ClassificationPipeline(reference_set, RAW)
    with caplog.at_level(logging.DEBUG, logger="leafsight.engine.pipeline"):
        pipeline.run(ClassificationRequest(contour=lobed(lobes=3, depth=0.29)))

    assert "Classified as 'trefoil'" in caplog.text
    assert "K = 3 CLOSEST MATCHES" in caplog.text
    assert "Predicted class: trefoil" in caplog.text
