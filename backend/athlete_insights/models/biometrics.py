"""Biometric records and values derived from them."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Fields that count as "the device reported something" for a record
SIGNAL_FIELDS = (
    "hrv_ms",
    "resting_hr_bpm",
    "avg_hr_bpm",
    "deep_sleep_pct",
    "rem_sleep_pct",
    "duration_hours",
    "spo2_pct",
    "respiratory_rate",
    "temperature_c",
    "training_load_pct",
)


class BiometricRecord(BaseModel):
    """One nightly wearable record.

    ``date`` is the report date the sleep episode is attributed to. Several
    records may share a date (main sleep plus naps). ``onset_time`` and
    ``wake_time`` are local "HH:MM" strings; ``duration_hours`` is the device's
    own total, used when the clock times are unusable.
    """

    model_config = ConfigDict(frozen=True)

    athlete_id: Optional[str] = None
    date: date
    onset_time: Optional[str] = None
    wake_time: Optional[str] = None
    duration_hours: Optional[float] = None

    hrv_ms: Optional[float] = None
    resting_hr_bpm: Optional[float] = None
    avg_hr_bpm: Optional[float] = None
    spo2_pct: Optional[float] = None
    respiratory_rate: Optional[float] = None
    temperature_c: Optional[float] = None
    training_load_pct: Optional[float] = None

    deep_sleep_pct: Optional[float] = None
    rem_sleep_pct: Optional[float] = None
    light_sleep_pct: Optional[float] = None

    def has_signal(self) -> bool:
        """True when at least one biometric value is present and positive."""
        return any((getattr(self, name) or 0) > 0 for name in SIGNAL_FIELDS)


class SleepDay(BaseModel):
    """Total reconstructed sleep for one report date."""

    date: date
    total_hours: float = Field(ge=0)


class ReadinessScore(BaseModel):
    """Composite 0-100 readiness for one athlete."""

    athlete_id: Optional[str]
    date: Optional[date]
    value: float = Field(ge=0, le=100)
