"""Data models for AthleteInsights."""

from athlete_insights.models.biometrics import BiometricRecord, ReadinessScore, SleepDay
from athlete_insights.models.genetics import (
    GeneObservation,
    Impact,
    ImpactAnalysis,
    TraitDefinition,
    TraitScore,
)
from athlete_insights.models.team import (
    AlertBucket,
    AlertCounts,
    Athlete,
    AthleteMetric,
    RecencyStatus,
    TeamStatsSummary,
)

__all__ = [
    # Biometrics
    "BiometricRecord",
    "SleepDay",
    "ReadinessScore",
    # Team
    "Athlete",
    "AthleteMetric",
    "AlertBucket",
    "AlertCounts",
    "RecencyStatus",
    "TeamStatsSummary",
    # Genetics
    "GeneObservation",
    "Impact",
    "ImpactAnalysis",
    "TraitDefinition",
    "TraitScore",
]
