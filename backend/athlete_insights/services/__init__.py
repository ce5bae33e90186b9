"""Service layer for AthleteInsights.

Services contain the derived-metrics computations: sleep reconstruction,
readiness, cohort aggregation and genetic trait scoring.
"""

from athlete_insights.services.alerts import AlertClassifier, RuleBasedAlertClassifier
from athlete_insights.services.cohort import CohortAggregator, aggregate_histories
from athlete_insights.services.genetics import (
    GeneCatalog,
    compute_trait_score,
    get_gene_catalog,
    normalize_genetic_payload,
    score_athlete_traits,
    score_traits,
)
from athlete_insights.services.providers import (
    HttpBiometricProvider,
    InMemoryBiometricProvider,
    InMemoryGeneticProvider,
)
from athlete_insights.services.readiness import ReadinessConfig, display_readiness
from athlete_insights.services.sleep import aggregate_by_date, duration_hours

__all__ = [
    "AlertClassifier",
    "RuleBasedAlertClassifier",
    "CohortAggregator",
    "aggregate_histories",
    "GeneCatalog",
    "compute_trait_score",
    "get_gene_catalog",
    "normalize_genetic_payload",
    "score_athlete_traits",
    "score_traits",
    "HttpBiometricProvider",
    "InMemoryBiometricProvider",
    "InMemoryGeneticProvider",
    "ReadinessConfig",
    "display_readiness",
    "aggregate_by_date",
    "duration_hours",
]
