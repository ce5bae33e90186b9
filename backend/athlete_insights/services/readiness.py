"""Readiness scoring service.

Blends HRV, resting heart rate, sleep hours and SpO2 into a 0-100 readiness
value. Field weighting is configuration; the selection rule (latest non-zero
score wins) is fixed.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Literal, Optional, Sequence

from athlete_insights.core.config import Settings, get_settings
from athlete_insights.core.errors import MissingFieldError
from athlete_insights.models.biometrics import BiometricRecord, ReadinessScore
from athlete_insights.services.sleep import aggregate_by_date, record_sleep_hours

logger = logging.getLogger(__name__)

ReadinessField = Literal["hrv", "resting_hr", "sleep", "spo2"]

LoadTrend = Literal["insufficient_data", "increasing", "decreasing", "stable", "new"]


@dataclass(frozen=True)
class FieldBand:
    """Linear normalization band.

    ``floor`` maps to 0 and ``target`` to 1. When floor > target the field is
    lower-is-better (resting HR).
    """

    floor: float
    target: float

    def normalize(self, value: float) -> float:
        span = self.target - self.floor
        if span == 0:
            return 1.0 if value >= self.target else 0.0
        return min(1.0, max(0.0, (value - self.floor) / span))


def _default_bands() -> dict[str, FieldBand]:
    return {
        "hrv": FieldBand(35.0, 45.0),
        "resting_hr": FieldBand(75.0, 65.0),
        "sleep": FieldBand(6.5, 7.5),
        "spo2": FieldBand(94.0, 96.0),
    }


def _default_weights() -> dict[str, float]:
    return {"hrv": 1.0, "resting_hr": 1.0, "sleep": 1.0, "spo2": 1.0}


@dataclass(frozen=True)
class ReadinessConfig:
    """Bands and relative weights for each readiness input."""

    bands: dict[str, FieldBand] = field(default_factory=_default_bands)
    weights: dict[str, float] = field(default_factory=_default_weights)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ReadinessConfig":
        s = settings or get_settings()
        return cls(
            bands={
                "hrv": FieldBand(s.readiness_hrv_floor_ms, s.readiness_hrv_target_ms),
                "resting_hr": FieldBand(s.readiness_rhr_floor_bpm, s.readiness_rhr_target_bpm),
                "sleep": FieldBand(s.readiness_sleep_floor_hours, s.readiness_sleep_target_hours),
                "spo2": FieldBand(s.readiness_spo2_floor_pct, s.readiness_spo2_target_pct),
            },
            weights={
                "hrv": s.readiness_weight_hrv,
                "resting_hr": s.readiness_weight_rhr,
                "sleep": s.readiness_weight_sleep,
                "spo2": s.readiness_weight_spo2,
            },
        )


def _require(value: Optional[float], name: str) -> float:
    """Return a usable reading or raise MissingFieldError for absent/zero."""
    if value is None or value <= 0:
        raise MissingFieldError(name)
    return float(value)


def _inputs(record: BiometricRecord, sleep_hours: Optional[float]) -> dict[str, Optional[float]]:
    return {
        "hrv": record.hrv_ms,
        "resting_hr": record.resting_hr_bpm,
        "sleep": sleep_hours if sleep_hours is not None else record.duration_hours,
        "spo2": record.spo2_pct,
    }


def score_day(
    record: BiometricRecord,
    sleep_hours: Optional[float] = None,
    config: Optional[ReadinessConfig] = None,
) -> float:
    """Readiness for a single day.

    Args:
        record: The day's biometrics.
        sleep_hours: Reconstructed sleep for the record's date. Falls back to
            the record's own ``duration_hours``.
        config: Bands and weights.

    Returns:
        0-100, one decimal. Absent or zero fields are left out of the blend;
        0 when nothing usable is present.
    """
    config = config or ReadinessConfig()

    weighted = 0.0
    total_weight = 0.0
    for name, raw in _inputs(record, sleep_hours).items():
        weight = config.weights.get(name, 0.0)
        if weight <= 0:
            continue
        try:
            value = _require(raw, name)
        except MissingFieldError:
            continue
        weighted += weight * config.bands[name].normalize(value)
        total_weight += weight

    if total_weight == 0:
        return 0.0
    return round(weighted / total_weight * 100, 1)


def latest_nonzero_index(values: Sequence[float]) -> Optional[int]:
    """Index of the most recent (last) value > 0, or None."""
    for index in range(len(values) - 1, -1, -1):
        if values[index] > 0:
            return index
    return None


def latest_nonzero(values: Sequence[float]) -> float:
    """First value > 0 scanning from the most recent (last) element backward."""
    index = latest_nonzero_index(values)
    return values[index] if index is not None else 0.0


# Per-record readings merged across same-date segments
READING_FIELDS = ("hrv_ms", "resting_hr_bpm", "spo2_pct")


def _segment_rank(record: BiometricRecord) -> tuple:
    # Longest segment first; the rest only makes the order total
    return (
        -record_sleep_hours(record),
        record.onset_time or "",
        record.wake_time or "",
        tuple(-(getattr(record, name) or 0.0) for name in READING_FIELDS),
    )


def merge_day(records: Sequence[BiometricRecord], sleep_hours: float) -> BiometricRecord:
    """Collapse one report date's segments into a single record.

    Each reading comes from the longest segment that has it, so the result
    does not depend on input order. ``duration_hours`` is the date's
    reconstructed sleep total.
    """
    ranked = sorted(records, key=_segment_rank)
    update: dict[str, Optional[float]] = {"duration_hours": sleep_hours}
    for name in READING_FIELDS:
        update[name] = next(
            (getattr(r, name) for r in ranked if (getattr(r, name) or 0) > 0),
            None,
        )
    return ranked[0].model_copy(update=update)


def readiness_series(
    records: Iterable[BiometricRecord],
    config: Optional[ReadinessConfig] = None,
) -> list[tuple[date, float]]:
    """Readiness per report date, oldest first.

    Segments sharing a date (main sleep plus naps) are scored once, on the
    merged readings and the reconstructed sleep total for that date.
    """
    records = list(records)
    by_date: dict[date, list[BiometricRecord]] = defaultdict(list)
    for r in records:
        by_date[r.date].append(r)

    series: list[tuple[date, float]] = []
    for day in aggregate_by_date(records):
        merged = merge_day(by_date[day.date], day.total_hours)
        series.append((day.date, score_day(merged, day.total_hours, config)))
    return series


def display_readiness(
    records: Iterable[BiometricRecord],
    athlete_id: Optional[str] = None,
    config: Optional[ReadinessConfig] = None,
) -> ReadinessScore:
    """Readiness to display for an athlete: the latest non-zero day.

    A stale sync that produced an empty latest record does not report 0%.
    """
    series = readiness_series(records, config)
    index = latest_nonzero_index([value for _, value in series])
    if index is None:
        return ReadinessScore(athlete_id=athlete_id, date=None, value=0.0)
    day, value = series[index]
    return ReadinessScore(athlete_id=athlete_id, date=day, value=value)


def training_load_trend(records: Sequence[BiometricRecord]) -> tuple[LoadTrend, float]:
    """Week-over-week training load direction.

    Args:
        records: Series ordered oldest first.

    Returns:
        (trend, value) where value is the change in mean load, or the
        current 7-day mean when no previous week exists.
    """
    if len(records) < 7:
        return "insufficient_data", 0.0

    def mean_load(window: Sequence[BiometricRecord]) -> float:
        return sum(r.training_load_pct or 0 for r in window) / len(window)

    current = mean_load(records[-7:])
    if len(records) >= 14:
        change = current - mean_load(records[-14:-7])
        if change > 5:
            return "increasing", change
        if change < -5:
            return "decreasing", change
        return "stable", change

    return "new", current
