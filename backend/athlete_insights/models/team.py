"""Roster and team-level summary models."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from athlete_insights.models.biometrics import BiometricRecord


class RecencyStatus(str, Enum):
    """How recently an athlete's device reported."""

    FRESH = "fresh"
    WARN = "warn"
    STALE = "stale"


class AlertBucket(str, Enum):
    """Severity bucket an alert tag is tallied into."""

    HIGH = "high"
    MEDIUM = "medium"
    OPTIMAL = "optimal"


class Athlete(BaseModel):
    """Roster entry."""

    athlete_id: str
    name: str = ""


class AthleteMetric(BaseModel):
    """Per-athlete row of the team view."""

    athlete: Athlete
    latest: Optional[BiometricRecord] = None
    alert_tag: str = "no_data"
    readiness_score: float = 0.0
    sleep_hours: float = 0.0
    last_synced_date: Optional[date] = None
    recency: RecencyStatus = RecencyStatus.STALE
    resting_hr: Optional[float] = None
    error: Optional[str] = None


class AlertCounts(BaseModel):
    """Tally of athletes per alert bucket."""

    high: int = 0
    medium: int = 0
    optimal: int = 0


class TeamStatsSummary(BaseModel):
    """Cohort-level aggregation."""

    total_athletes: int = Field(ge=0)
    avg_hrv: float = 0.0
    avg_sleep: float = 0.0
    avg_readiness: float = 0.0
    last_synced_date: Optional[date] = None
    recency: RecencyStatus = RecencyStatus.STALE
    alert_counts: AlertCounts = Field(default_factory=AlertCounts)
    athlete_metrics: list[AthleteMetric] = Field(default_factory=list)
