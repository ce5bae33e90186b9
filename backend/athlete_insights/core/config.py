"""Application configuration settings."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "AthleteInsights"
    app_version: str = "0.1.0"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Readiness bands (floor -> target); resting HR is lower-is-better
    readiness_hrv_floor_ms: float = 35.0
    readiness_hrv_target_ms: float = 45.0
    readiness_rhr_floor_bpm: float = 75.0
    readiness_rhr_target_bpm: float = 65.0
    readiness_sleep_floor_hours: float = 6.5
    readiness_sleep_target_hours: float = 7.5
    readiness_spo2_floor_pct: float = 94.0
    readiness_spo2_target_pct: float = 96.0

    # Readiness weights (relative, normalized over present fields)
    readiness_weight_hrv: float = 1.0
    readiness_weight_rhr: float = 1.0
    readiness_weight_sleep: float = 1.0
    readiness_weight_spo2: float = 1.0

    # Sleep
    recommended_sleep_hours: float = 8.0

    # Cohort
    recency_warn_days: int = 3
    cohort_fetch_concurrency: int = 8

    # Genetics
    trait_neutral_score: int = 50

    # Biometric provider
    biometric_provider_url: Optional[str] = None
    biometric_provider_timeout_seconds: float = 10.0

    # Observability
    metrics_backend: str = "inmemory"  # "inmemory" | "prometheus"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Warns if the cohort fetch concurrency is not usable.
    """
    settings = Settings()

    if settings.cohort_fetch_concurrency < 1:
        logger.warning(
            "cohort_fetch_concurrency=%s is not positive, falling back to 1",
            settings.cohort_fetch_concurrency,
        )
        settings.cohort_fetch_concurrency = 1

    return settings
