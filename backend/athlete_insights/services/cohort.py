"""Cohort aggregation service.

Builds the team view from per-athlete biometric histories. Each athlete is
computed independently; a failed fetch or computation for one athlete is
replaced by an unknown-state row and never aborts the rest of the cohort.
"""

import asyncio
import logging
import time
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from athlete_insights.core.config import Settings, get_settings
from athlete_insights.core.errors import UpstreamFetchError
from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.models.team import (
    AlertBucket,
    AlertCounts,
    Athlete,
    AthleteMetric,
    RecencyStatus,
    TeamStatsSummary,
)
from athlete_insights.observability import get_metrics_backend
from athlete_insights.services.alerts import (
    NO_DATA,
    AlertClassifier,
    RuleBasedAlertClassifier,
    bucket_for_tag,
)
from athlete_insights.services.providers import BiometricHistoryProvider
from athlete_insights.services.readiness import ReadinessConfig, display_readiness
from athlete_insights.services.sleep import record_sleep_hours, sleep_for_date

logger = logging.getLogger(__name__)


def filter_valid(records: Iterable[BiometricRecord]) -> list[BiometricRecord]:
    """Records carrying at least one positive biometric value."""
    return [r for r in records if r is not None and r.date and r.has_signal()]


def latest_record(records: Sequence[BiometricRecord]) -> Optional[BiometricRecord]:
    """Most recent valid record."""
    valid = filter_valid(records)
    if not valid:
        return None
    return max(valid, key=lambda r: r.date)


def last_synced_date(records: Iterable[BiometricRecord]) -> Optional[date]:
    """Most recent date on which the device reported a heart rate."""
    dates = [
        r.date
        for r in records
        if (r.avg_hr_bpm or 0) > 0 or (r.resting_hr_bpm or 0) > 0
    ]
    return max(dates) if dates else None


def classify_recency(
    last_synced: Optional[date],
    today: date,
    warn_days: int = 3,
) -> RecencyStatus:
    """Same day is fresh, up to ``warn_days`` old is warn, older or unknown is stale."""
    if last_synced is None:
        return RecencyStatus.STALE
    age = (today - last_synced).days
    if age <= 0:
        return RecencyStatus.FRESH
    if age <= warn_days:
        return RecencyStatus.WARN
    return RecencyStatus.STALE


def resting_hr_proxy(records: Iterable[BiometricRecord]) -> Optional[float]:
    """Heart rate from the latest sleep-bearing record, avg preferred over resting."""
    sleep_bearing = [r for r in records if record_sleep_hours(r) > 0]
    if not sleep_bearing:
        return None
    latest = max(sleep_bearing, key=lambda r: r.date)
    if (latest.avg_hr_bpm or 0) > 0:
        return latest.avg_hr_bpm
    if (latest.resting_hr_bpm or 0) > 0:
        return latest.resting_hr_bpm
    return None


def build_athlete_metric(
    athlete: Athlete,
    records: Sequence[BiometricRecord],
    alert_tag: str,
    today: date,
    config: Optional[ReadinessConfig] = None,
    warn_days: int = 3,
) -> AthleteMetric:
    """Compute one athlete's row of the team view."""
    valid = filter_valid(records)
    latest = latest_record(valid)
    # Clock-only naps carry no readings but still count toward the day's sleep
    readiness = display_readiness(records, athlete_id=athlete.athlete_id, config=config)
    synced = last_synced_date(valid)

    # Naps dated the latest report date count toward the displayed sleep
    sleep_hours = sleep_for_date(records, latest.date) if latest else 0.0

    return AthleteMetric(
        athlete=athlete,
        latest=latest,
        alert_tag=alert_tag or NO_DATA,
        readiness_score=readiness.value,
        sleep_hours=sleep_hours,
        last_synced_date=synced,
        recency=classify_recency(synced, today, warn_days),
        resting_hr=resting_hr_proxy(valid),
    )


def unknown_athlete_metric(athlete: Athlete, error: Optional[str] = None) -> AthleteMetric:
    """Zero/unknown-state row substituted for an athlete that could not be computed."""
    return AthleteMetric(
        athlete=athlete,
        latest=None,
        alert_tag=NO_DATA,
        readiness_score=0.0,
        sleep_hours=0.0,
        last_synced_date=None,
        recency=RecencyStatus.STALE,
        resting_hr=None,
        error=error,
    )


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_team(
    metrics: Sequence[AthleteMetric],
    today: date,
    warn_days: int = 3,
) -> TeamStatsSummary:
    """Fold per-athlete rows into the team summary.

    Averages only include athletes with a latest record and a readiness above
    zero, so athletes that have not synced yet do not drag the team down.
    """
    contributing = [m for m in metrics if m.latest is not None and m.readiness_score > 0]

    synced = [m.last_synced_date for m in metrics if m.last_synced_date is not None]
    team_synced = max(synced) if synced else None

    counts = {bucket: 0 for bucket in AlertBucket}
    for m in metrics:
        bucket = bucket_for_tag(m.alert_tag)
        if bucket is not None:
            counts[bucket] += 1

    return TeamStatsSummary(
        total_athletes=len(metrics),
        avg_hrv=_mean([m.latest.hrv_ms or 0.0 for m in contributing]),
        avg_sleep=_mean([m.sleep_hours for m in contributing]),
        avg_readiness=_mean([m.readiness_score for m in contributing]),
        last_synced_date=team_synced,
        recency=classify_recency(team_synced, today, warn_days),
        alert_counts=AlertCounts(
            high=counts[AlertBucket.HIGH],
            medium=counts[AlertBucket.MEDIUM],
            optimal=counts[AlertBucket.OPTIMAL],
        ),
        athlete_metrics=list(metrics),
    )


def _safe_metric(
    athlete: Athlete,
    records: Sequence[BiometricRecord],
    alert_tag: Optional[str],
    classifier: AlertClassifier,
    today: date,
    config: ReadinessConfig,
    warn_days: int,
) -> AthleteMetric:
    try:
        tag = alert_tag if alert_tag is not None else classifier.classify(athlete, filter_valid(records))
        return build_athlete_metric(athlete, records, tag, today, config, warn_days)
    except Exception as e:
        logger.warning(f"Failed to compute metrics for athlete {athlete.athlete_id}: {e}")
        return unknown_athlete_metric(athlete, str(e))


def aggregate_histories(
    roster: Sequence[Athlete],
    histories: Mapping[str, Sequence[BiometricRecord]],
    alert_tags: Optional[Mapping[str, str]] = None,
    today: Optional[date] = None,
    classifier: Optional[AlertClassifier] = None,
    settings: Optional[Settings] = None,
) -> TeamStatsSummary:
    """Team summary over already-fetched histories.

    An athlete with no entry in ``histories`` is treated as a failed fetch.
    Tags in ``alert_tags`` take precedence over the classifier.
    """
    settings = settings or get_settings()
    today = today or date.today()
    classifier = classifier or RuleBasedAlertClassifier()
    config = ReadinessConfig.from_settings(settings)
    alert_tags = alert_tags or {}

    metrics: list[AthleteMetric] = []
    for athlete in roster:
        if athlete.athlete_id not in histories:
            error = UpstreamFetchError(athlete.athlete_id, "no history supplied")
            logger.warning(str(error))
            metrics.append(unknown_athlete_metric(athlete, str(error)))
            continue
        metrics.append(
            _safe_metric(
                athlete,
                histories[athlete.athlete_id],
                alert_tags.get(athlete.athlete_id),
                classifier,
                today,
                config,
                settings.recency_warn_days,
            )
        )

    return summarize_team(metrics, today, settings.recency_warn_days)


class CohortAggregator:
    """Fetches per-athlete histories concurrently and builds the team view."""

    def __init__(
        self,
        provider: BiometricHistoryProvider,
        classifier: Optional[AlertClassifier] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize cohort aggregator.

        Args:
            provider: Biometric-history collaborator.
            classifier: Alert-tag collaborator.
            settings: Application settings.
        """
        self.provider = provider
        self.classifier = classifier or RuleBasedAlertClassifier()
        self.settings = settings or get_settings()
        self.config = ReadinessConfig.from_settings(self.settings)
        self.metrics = get_metrics_backend()
        self._provider_name = type(provider).__name__

    async def build_team_stats(
        self,
        roster: Sequence[Athlete],
        today: Optional[date] = None,
    ) -> TeamStatsSummary:
        """Build the team summary for ``roster``.

        Args:
            roster: Athletes in the cohort.
            today: Reference date for recency (defaults to today).

        Returns:
            Summary with one row per roster entry, in roster order.
        """
        today = today or date.today()
        semaphore = asyncio.Semaphore(max(1, self.settings.cohort_fetch_concurrency))

        async def run(athlete: Athlete) -> AthleteMetric:
            async with semaphore:
                return await self._athlete_metric(athlete, today)

        metrics = await asyncio.gather(*(run(a) for a in roster))

        summary = summarize_team(metrics, today, self.settings.recency_warn_days)
        failed = sum(1 for m in metrics if m.error)
        logger.info(
            f"Team stats built for {summary.total_athletes} athletes "
            f"({failed} failed, avg readiness {summary.avg_readiness:.1f})"
        )
        return summary

    async def _athlete_metric(self, athlete: Athlete, today: date) -> AthleteMetric:
        start = time.perf_counter()
        try:
            records = await self.provider.get_history(athlete.athlete_id)
        except Exception as e:
            self._observe(False, start)
            logger.warning(f"History fetch failed for athlete {athlete.athlete_id}: {e}")
            return unknown_athlete_metric(athlete, str(e))
        self._observe(True, start)

        return _safe_metric(
            athlete,
            records,
            None,
            self.classifier,
            today,
            self.config,
            self.settings.recency_warn_days,
        )

    def _observe(self, success: bool, start: float) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        self.metrics.observe_provider_fetch(self._provider_name, success, duration_ms)
