"""Team view endpoints.

Paths:
  POST /api/v1/team/stats - cohort summary over posted histories
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from athlete_insights.core.config import get_settings
from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.models.team import Athlete, TeamStatsSummary
from athlete_insights.services.alerts import RuleBasedAlertClassifier
from athlete_insights.services.cohort import CohortAggregator, aggregate_histories
from athlete_insights.services.providers import InMemoryBiometricProvider

router = APIRouter()


# -------------------------------------------------------------------------
# Request Models
# -------------------------------------------------------------------------


class TeamStatsRequest(BaseModel):
    """Roster plus per-athlete histories.

    Athletes missing from ``histories`` are reported in an unknown state.
    ``alert_tags`` overrides the rule-based classifier per athlete.
    """

    roster: list[Athlete]
    histories: dict[str, list[BiometricRecord]] = Field(default_factory=dict)
    alert_tags: Optional[dict[str, str]] = None
    today: Optional[date] = None


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.post("/stats", response_model=TeamStatsSummary)
async def team_stats(request: TeamStatsRequest) -> TeamStatsSummary:
    """Aggregate the team view.

    Without explicit alert tags the histories are run through the same
    concurrent aggregator used against live providers; fetch outcomes are
    recorded in the metrics backend.
    """
    settings = get_settings()
    if request.alert_tags:
        return aggregate_histories(
            request.roster,
            request.histories,
            alert_tags=request.alert_tags,
            today=request.today,
            classifier=RuleBasedAlertClassifier(),
            settings=settings,
        )

    aggregator = CohortAggregator(InMemoryBiometricProvider(request.histories), settings=settings)
    return await aggregator.build_team_stats(request.roster, today=request.today)
