"""Elliptic Fourier Descriptors (EFD).

Decompose a closed contour into harmonic (cosine, sine) amplitudes for the x
and y coordinate sequences, then normalize every harmonic against harmonic 1
so the resulting magnitudes are invariant to translation, rotation and scale.

    ax[k] = 2/m * sum_i x[i] cos(2*pi*k*i/m)     bx[k] = 2/m * sum_i x[i] sin(...)
    ay[k] = 2/m * sum_i y[i] cos(2*pi*k*i/m)     by[k] = 2/m * sum_i y[i] sin(...)

    efd[k] = sqrt((ax[k]^2 + ay[k]^2) / denomA) + sqrt((bx[k]^2 + by[k]^2) / denomB)

Index 0 only encodes the centroid and index 1 is always 2.0 after
normalization, so the comparable signature is ``efd[2:]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.contour import as_contour
from leafsight.engine.errors import DegenerateContourError
from leafsight.utils.geometry import squared_extent
from leafsight.utils.math_helpers import rms_distance

logger = logging.getLogger(__name__)

# Harmonic 1 is the normalization reference.
_REFERENCE_HARMONIC = 1
# Number of leading descriptors dropped from the normalized signature.
_DROPPED = 2
# Relative to the contour's squared extent.
_DEGENERATE_EPSILON = 1e-12


def _frozen(values: NDArray[np.float64]) -> NDArray[np.float64]:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class HarmonicCoefficients:
    """Cosine/sine amplitudes per harmonic for the x and y sequences."""

    ax: NDArray[np.float64]
    ay: NDArray[np.float64]
    bx: NDArray[np.float64]
    by: NDArray[np.float64]
    # Point count of the source contour (m)
    n_points: int
    # Squared bbox diagonal of the source contour, used as the zero reference
    extent: float = 0.0

    @property
    def n_harmonics(self) -> int:
        return len(self.ax)

    @property
    def centroid(self) -> tuple[float, float]:
        return (float(self.ax[0] / 2.0), float(self.ay[0] / 2.0))

    def as_rows(self) -> list[list[float]]:
        """[ax, ay, bx, by] per harmonic."""
        return [
            [float(self.ax[k]), float(self.ay[k]), float(self.bx[k]), float(self.by[k])]
            for k in range(self.n_harmonics)
        ]


@dataclass(frozen=True)
class ShapeSignature:
    """EFD magnitudes for one contour plus the normalized comparison vector."""

    coefficients: HarmonicCoefficients
    efd: NDArray[np.float64]

    @property
    def normalized(self) -> NDArray[np.float64]:
        return self.efd[_DROPPED:]

    def __len__(self) -> int:
        return len(self.normalized)


def elliptic_fourier_coefficients(points, n_harmonics: int) -> HarmonicCoefficients:
    """Harmonic decomposition of a closed contour.

    ``n_harmonics`` should not exceed ``m // 2``; beyond that the harmonics
    alias onto lower ones and add no information.
    """
    if n_harmonics < 1:
        raise ValueError(f"n_harmonics must be >= 1, got {n_harmonics}")

    contour = as_contour(points)
    m = len(contour)
    if n_harmonics > m // 2:
        logger.warning(
            "n_harmonics=%d exceeds m/2=%d for a %d-point contour; "
            "higher harmonics are redundant",
            n_harmonics,
            m // 2,
            m,
        )

    # phase[k, i] = 2*pi*k*i/m
    phase = np.outer(np.arange(n_harmonics), np.arange(m)) * (2.0 * np.pi / m)
    cos_p = np.cos(phase)
    sin_p = np.sin(phase)
    x = contour[:, 0]
    y = contour[:, 1]
    scale = 2.0 / m

    return HarmonicCoefficients(
        ax=_frozen(scale * (cos_p @ x)),
        ay=_frozen(scale * (cos_p @ y)),
        bx=_frozen(scale * (sin_p @ x)),
        by=_frozen(scale * (sin_p @ y)),
        n_points=m,
        extent=squared_extent(contour),
    )


def efd_magnitudes(coeffs: HarmonicCoefficients) -> NDArray[np.float64]:
    """Per-harmonic magnitudes normalized against harmonic 1."""
    if coeffs.n_harmonics <= _REFERENCE_HARMONIC:
        raise ValueError(
            f"need at least {_REFERENCE_HARMONIC + 1} harmonics to normalize, "
            f"got {coeffs.n_harmonics}"
        )

    r = _REFERENCE_HARMONIC
    denom_a = float(coeffs.ax[r] ** 2 + coeffs.ay[r] ** 2)
    denom_b = float(coeffs.bx[r] ** 2 + coeffs.by[r] ** 2)

    zero = _DEGENERATE_EPSILON * coeffs.extent
    if denom_a <= zero or denom_b <= zero:
        raise DegenerateContourError(
            f"first harmonic has zero amplitude (denomA={denom_a:.3g}, denomB={denom_b:.3g})",
            stage="signature",
        )

    cos_part = np.sqrt((coeffs.ax**2 + coeffs.ay**2) / denom_a)
    sin_part = np.sqrt((coeffs.bx**2 + coeffs.by**2) / denom_b)
    return _frozen(cos_part + sin_part)


def extract_signature(points, n_harmonics: int) -> ShapeSignature:
    """Contour → normalized EFD signature (length ``n_harmonics - 2``)."""
    coeffs = elliptic_fourier_coefficients(points, n_harmonics)
    efd = efd_magnitudes(coeffs)
    logger.debug(
        "EFD signature: m=%d, nFD=%d, efd[1]=%.4f",
        coeffs.n_points,
        coeffs.n_harmonics,
        efd[_REFERENCE_HARMONIC],
    )
    return ShapeSignature(coefficients=coeffs, efd=efd)


def reconstruct_contour(
    coeffs: HarmonicCoefficients,
    n_points: int | None = None,
) -> NDArray[np.float64]:
    """Inverse transform: rebuild an (m, 2) contour from its harmonics."""
    m = n_points or coeffs.n_points
    if m < 1:
        raise ValueError(f"n_points must be >= 1, got {m}")

    phase = np.outer(np.arange(m), np.arange(1, coeffs.n_harmonics)) * (2.0 * np.pi / m)
    cos_p = np.cos(phase)
    sin_p = np.sin(phase)

    x = coeffs.ax[0] / 2.0 + cos_p @ coeffs.ax[1:] + sin_p @ coeffs.bx[1:]
    y = coeffs.ay[0] / 2.0 + cos_p @ coeffs.ay[1:] + sin_p @ coeffs.by[1:]
    return np.column_stack([x, y])


def reconstruction_error(points, n_harmonics: int) -> float:
    """RMS distance between a contour and its ``n_harmonics`` reconstruction."""
    contour = as_contour(points)
    coeffs = elliptic_fourier_coefficients(contour, n_harmonics)
    return rms_distance(contour, reconstruct_contour(coeffs))
