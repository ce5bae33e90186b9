"""Sleep reconstruction service.

Turns fragmented per-segment sleep timestamps (main sleep plus naps) into total
sleep hours per report date, and derives the secondary sleep indicators shown
on the sleep screens (debt, efficiency, consistency, quality).
"""

import logging
import statistics
from collections import defaultdict
from datetime import date
from typing import Iterable, Literal, Optional

from athlete_insights.core.errors import ParseError
from athlete_insights.models.biometrics import BiometricRecord, SleepDay

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
MINUTES_PER_DAY = HOURS_PER_DAY * 60

# Devices write "00:00" when no timestamp was recorded
NOT_RECORDED = "00:00"

ConsistencyLevel = Literal["high", "moderate", "low"]


def _clock_to_minutes(value: str) -> int:
    """Parse a strict "HH:MM" string into minutes since midnight."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ParseError(f"Not a clock time: {value!r}")
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ParseError(f"Not a clock time: {value!r}") from exc
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ParseError(f"Clock time out of range: {value!r}")
    return hours * 60 + minutes


def parse_clock_time(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight, or None when the time is absent.

    Missing, empty, "00:00" and malformed strings are all treated as absent.
    """
    if not value or value.strip() in ("", NOT_RECORDED):
        return None
    try:
        return _clock_to_minutes(value)
    except ParseError as e:
        logger.debug(f"Ignoring clock time: {e}")
        return None


def duration_hours(
    onset: Optional[str],
    wake: Optional[str],
    fallback: Optional[float] = None,
) -> float:
    """Duration of one sleep segment in hours.

    Args:
        onset: Sleep onset "HH:MM".
        wake: Wake "HH:MM".
        fallback: Device-reported duration, used when either time is absent.

    Returns:
        Hours in [0, 24). A wake earlier than onset crosses midnight.
    """
    onset_min = parse_clock_time(onset)
    wake_min = parse_clock_time(wake)

    if onset_min is not None and wake_min is not None:
        minutes = wake_min - onset_min
        if minutes < 0:
            minutes += MINUTES_PER_DAY
        return minutes / 60

    if fallback is None or fallback <= 0:
        return 0.0
    if fallback >= HOURS_PER_DAY:
        logger.debug(f"Ignoring device duration of {fallback}h, not a single segment")
        return 0.0
    return float(fallback)


def record_sleep_hours(record: BiometricRecord) -> float:
    """Sleep hours contributed by a single record."""
    return duration_hours(record.onset_time, record.wake_time, record.duration_hours)


def sleep_for_date(records: Iterable[BiometricRecord], day: date) -> float:
    """Total sleep attributed to ``day`` across every segment dated that day."""
    return sum((record_sleep_hours(r) for r in records if r.date == day), 0.0)


def aggregate_by_date(records: Iterable[BiometricRecord]) -> list[SleepDay]:
    """Group segments by report date and sum them, oldest date first."""
    totals: dict[date, float] = defaultdict(float)
    for r in records:
        totals[r.date] += record_sleep_hours(r)

    return [SleepDay(date=d, total_hours=totals[d]) for d in sorted(totals)]


# -------------------------------------------------------------------------
# Secondary indicators
# -------------------------------------------------------------------------


def sleep_debt(hours: float, recommended: float = 8.0) -> float:
    """Shortfall against the recommendation; never negative."""
    return max(0.0, recommended - hours)


def time_in_bed_hours(record: BiometricRecord) -> float:
    """Time in bed from onset/wake, else device duration plus 30 min to fall asleep."""
    onset_min = parse_clock_time(record.onset_time)
    wake_min = parse_clock_time(record.wake_time)
    if onset_min is not None and wake_min is not None:
        return duration_hours(record.onset_time, record.wake_time)
    return (record.duration_hours or 0.0) + 0.5


def sleep_efficiency(hours: float, time_in_bed: float) -> float:
    """Percentage of time in bed actually asleep."""
    if hours <= 0 or time_in_bed <= 0:
        return 0.0
    return hours / time_in_bed * 100


def sleep_consistency(records: Iterable[BiometricRecord]) -> Optional[float]:
    """Average std-dev (minutes) of onset and wake times.

    Only records with both times recorded count. Returns None with fewer
    than two such records.
    """
    onsets: list[int] = []
    wakes: list[int] = []
    for r in records:
        onset_min = parse_clock_time(r.onset_time)
        wake_min = parse_clock_time(r.wake_time)
        if onset_min is None or wake_min is None:
            continue
        onsets.append(onset_min)
        wakes.append(wake_min)

    if len(onsets) < 2:
        return None
    return (statistics.pstdev(onsets) + statistics.pstdev(wakes)) / 2


def consistency_level(stddev_minutes: float) -> ConsistencyLevel:
    """Bucket a consistency std-dev."""
    if stddev_minutes <= 15:
        return "high"
    if stddev_minutes <= 45:
        return "moderate"
    return "low"


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def sleep_quality_score(
    hours: float,
    efficiency_pct: float,
    deep_pct: float,
    rem_pct: float,
    recommended: float = 8.0,
) -> int:
    """Composite 0-100 sleep quality.

    Weights: duration 35%, efficiency 30%, deep 20%, REM 15%. Efficiency is
    judged against 90%, deep against 20%, REM against 18%.
    """
    duration_factor = _clamp01((hours or 0) / (recommended or 8.0))
    efficiency_factor = _clamp01((efficiency_pct or 0) / 90)
    deep_factor = _clamp01((deep_pct or 0) / 20)
    rem_factor = _clamp01((rem_pct or 0) / 18)

    score = (
        duration_factor * 0.35
        + efficiency_factor * 0.30
        + deep_factor * 0.20
        + rem_factor * 0.15
    )
    return round(score * 100)
