"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from leafsight.engine.config import (
    DEFAULT_HARMONICS,
    DEFAULT_K,
    EFD_FACTOR,
    HU_FACTOR,
    ClassifierConfig,
)


class Settings(BaseSettings):
    leafsight_env: str = "development"
    leafsight_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Reference table (CSV); empty = classification disabled
    reference_db: str = ""

    # Classifier
    default_k: int = DEFAULT_K
    n_harmonics: int = DEFAULT_HARMONICS
    efd_factor: float = EFD_FACTOR
    hu_factor: float = HU_FACTOR
    shepard_smoothing: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def classifier_config(self) -> ClassifierConfig:
        return ClassifierConfig(
            n_harmonics=self.n_harmonics,
            k=self.default_k,
            efd_factor=self.efd_factor,
            hu_factor=self.hu_factor,
            shepard_smoothing=self.shepard_smoothing,
        )


settings = Settings()
