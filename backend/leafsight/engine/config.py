"""Classifier configuration — calibration constants and k-NN parameters."""

from __future__ import annotations

from dataclasses import dataclass

# ── Per-feature-space calibration ──
# Multiplies the raw Euclidean distance so that the spaces are comparable
# before fusion. EFD magnitudes are already normalized against harmonic 1.
EFD_FACTOR = 1.0
# Log-scaled contour Hu moments land in the same range as EFD magnitudes.
# Raw (un-logged) image moments need a much smaller factor, around 2e-8.
HU_FACTOR = 1.0

# Harmonics per signature: 30 keeps 28 discriminative descriptors.
DEFAULT_HARMONICS = 30
DEFAULT_K = 5
# Shepard weights are 1 / d**power.
SHEPARD_POWER = 2.0


@dataclass(frozen=True)
class ClassifierConfig:
    """Controls signature extraction and the k-NN vote."""

    n_harmonics: int = DEFAULT_HARMONICS
    k: int = DEFAULT_K

    efd_factor: float = EFD_FACTOR
    hu_factor: float = HU_FACTOR

    shepard_power: float = SHEPARD_POWER
    # When off, raw scaled distances go straight into fusion.
    shepard_smoothing: bool = True

    def factor_for(self, space_id: str, default: float) -> float:
        """Configured calibration factor for a feature space."""
        return {"efd": self.efd_factor, "hu": self.hu_factor}.get(space_id, default)
