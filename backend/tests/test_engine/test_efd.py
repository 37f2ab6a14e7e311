"""Tests for the elliptic Fourier descriptor extractor."""

from __future__ import annotations

import numpy as np
import pytest

from leafsight.engine.efd import (
    efd_magnitudes,
    elliptic_fourier_coefficients,
    extract_signature,
    reconstruct_contour,
    reconstruction_error,
)
from leafsight.engine.errors import DegenerateContourError, MalformedContourError
from tests.conftest import lobed, regular_polygon, similarity_transform


def _square(n_per_side: int = 16) -> np.ndarray:
    s = np.linspace(0.0, 1.0, n_per_side, endpoint=False)
    return np.vstack([
        np.column_stack([s, np.zeros_like(s)]),
        np.column_stack([np.ones_like(s), s]),
        np.column_stack([1.0 - s, np.ones_like(s)]),
        np.column_stack([np.zeros_like(s), 1.0 - s]),
    ])


def test_hexagon_signature_fixed_point(hexagon):
    sig = extract_signature(hexagon, 4)
    assert len(sig.normalized) == 2
    # Harmonics 2 and 3 vanish for a regular hexagon sampled at its vertices
    assert sig.normalized == pytest.approx([0.0, 0.0], abs=1e-9)
    # The reference harmonic always normalizes to 2
    assert sig.efd[1] == pytest.approx(2.0)


def test_signature_length_is_n_harmonics_minus_two(star):
    for n in (2, 5, 12, 30):
        assert len(extract_signature(star, n).normalized) == n - 2


def test_centroid_from_zeroth_harmonic():
    coeffs = elliptic_fourier_coefficients(regular_polygon(8, center=(3.0, -4.0)), 4)
    assert coeffs.centroid == pytest.approx((3.0, -4.0))


@pytest.mark.parametrize(
    "angle,scale,offset",
    [
        (0.0, 1.0, (25.0, -7.0)),
        (0.9, 1.0, (0.0, 0.0)),
        (0.0, 0.05, (0.0, 0.0)),
        (2.3, 17.5, (-120.0, 44.0)),
    ],
)
def test_signature_invariant_to_similarity_transforms(star, angle, scale, offset):
    base = extract_signature(star, 16).normalized
    moved = extract_signature(similarity_transform(star, angle, scale, offset), 16).normalized
    np.testing.assert_allclose(moved, base, atol=1e-9)


def test_round_trip_preserves_signature(star):
    coeffs = elliptic_fourier_coefficients(star, 10)
    rebuilt = reconstruct_contour(coeffs)
    assert rebuilt.shape == star.shape

    original = extract_signature(star, 10).normalized
    again = extract_signature(rebuilt, 10).normalized
    np.testing.assert_allclose(again, original, atol=1e-9)


def test_reconstruction_error_shrinks_with_more_harmonics():
    square = _square()
    m = len(square)
    errors = [reconstruction_error(square, n) for n in range(2, m // 2 + 1)]

    for prev, nxt in zip(errors, errors[1:]):
        assert nxt <= prev + 1e-12
    assert errors[-1] < errors[0] / 10


def test_band_limited_contour_reconstructs_exactly():
    # r(t) = 1 + 0.3 cos 3t + 0.1 sin 5t only has content up to harmonic 6
    star = lobed(n=64)
    assert reconstruction_error(star, 7) == pytest.approx(0.0, abs=1e-9)


def test_reconstruct_to_different_point_count(star):
    coeffs = elliptic_fourier_coefficients(star, 8)
    dense = reconstruct_contour(coeffs, n_points=256)
    assert dense.shape == (256, 2)


def test_degenerate_first_harmonic_raises():
    # x[0] == x[2] and y[0] == y[2] → the cosine part of harmonic 1 is zero
    contour = [(0.0, 0.0), (1.0, 0.0), (0.0, 0.0), (0.0, 1.0)]
    with pytest.raises(DegenerateContourError) as exc_info:
        extract_signature(contour, 2)
    assert exc_info.value.stage == "signature"


def test_signature_never_contains_nan(star):
    sig = extract_signature(star, 30)
    assert np.all(np.isfinite(sig.efd))


@pytest.mark.parametrize(
    "points",
    [
        [(0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0), (0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)],
        [(0.0, 0.0), (1.0, float("nan")), (0.0, 1.0)],
        "not a contour",
    ],
)
def test_malformed_contours_rejected(points):
    with pytest.raises(MalformedContourError):
        extract_signature(points, 4)


def test_invalid_harmonic_counts(star):
    with pytest.raises(ValueError):
        elliptic_fourier_coefficients(star, 0)
    with pytest.raises(ValueError):
        efd_magnitudes(elliptic_fourier_coefficients(star, 1))


def test_too_many_harmonics_warns_but_computes(hexagon, caplog):
    with caplog.at_level("WARNING", logger="leafsight.engine.efd"):
        sig = extract_signature(hexagon, 5)
    assert len(sig.normalized) == 3
    assert "redundant" in caplog.text


def test_coefficients_are_read_only(star):
    coeffs = elliptic_fourier_coefficients(star, 4)
    with pytest.raises(ValueError):
        coeffs.ax[0] = 1.0
