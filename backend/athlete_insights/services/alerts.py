"""Alert classification collaborator.

The cohort view only consumes the tag produced here. Any object satisfying
``AlertClassifier`` can be injected; ``RuleBasedAlertClassifier`` is the
default rule set.
"""

import logging
from typing import Optional, Protocol, Sequence

from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.models.team import AlertBucket, Athlete
from athlete_insights.services.sleep import parse_clock_time

logger = logging.getLogger(__name__)

NO_DATA = "no_data"

# Fixed tag -> bucket mapping; unmapped tags (e.g. no_data) are not tallied
TAG_BUCKETS: dict[str, AlertBucket] = {
    "inflammation": AlertBucket.HIGH,
    "airway": AlertBucket.HIGH,
    "circadian": AlertBucket.MEDIUM,
    "nutrition": AlertBucket.MEDIUM,
    "green": AlertBucket.OPTIMAL,
}


def bucket_for_tag(tag: Optional[str]) -> Optional[AlertBucket]:
    """Bucket an alert tag falls into, or None."""
    if not tag:
        return None
    return TAG_BUCKETS.get(tag)


class AlertClassifier(Protocol):
    """Returns one alert tag per athlete."""

    def classify(self, athlete: Athlete, records: Sequence[BiometricRecord]) -> str:
        ...


def _ratio_change(previous: Optional[float], current: Optional[float]) -> Optional[float]:
    if not previous or current is None:
        return None
    return (current - previous) / previous


class RuleBasedAlertClassifier:
    """Default recovery alert rules over the latest two nights."""

    def classify(self, athlete: Athlete, records: Sequence[BiometricRecord]) -> str:
        if not records:
            return NO_DATA

        ordered = sorted(records, key=lambda r: r.date)
        latest = ordered[-1]

        if len(ordered) >= 2:
            prev = ordered[-2]
            hrv_change = _ratio_change(prev.hrv_ms, latest.hrv_ms)
            rhr_change = _ratio_change(prev.resting_hr_bpm, latest.resting_hr_bpm)
            hrv_drop = hrv_change is not None and -hrv_change > 0.15
            rhr_rise = rhr_change is not None and rhr_change > 0.05
        else:
            hrv_drop = (latest.hrv_ms or 0) < 40
            rhr_rise = (latest.resting_hr_bpm or 0) > 70

        temp_high = (latest.temperature_c or 0) >= 37.0
        spo2_low = latest.spo2_pct is not None and latest.spo2_pct <= 94
        deep_low = latest.deep_sleep_pct is not None and latest.deep_sleep_pct < 17
        rem_low = latest.rem_sleep_pct is not None and latest.rem_sleep_pct < 16
        resp_high = (latest.respiratory_rate or 0) >= 17

        onset = parse_clock_time(latest.onset_time)
        sleep_late = onset is not None and onset >= 23 * 60 + 30

        if hrv_drop and rhr_rise and temp_high and spo2_low:
            tag = "inflammation"
        elif hrv_drop and deep_low and sleep_late:
            tag = "circadian"
        elif hrv_drop and rem_low and not temp_high:
            tag = "nutrition"
        elif spo2_low and resp_high:
            tag = "airway"
        else:
            tag = "green"

        logger.debug(f"Athlete {athlete.athlete_id} classified as {tag}")
        return tag
