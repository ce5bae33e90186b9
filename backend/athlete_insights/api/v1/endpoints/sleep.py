"""Sleep reconstruction endpoints.

Paths:
  POST /api/v1/sleep/days    - total sleep per report date
  POST /api/v1/sleep/summary - per-date debt/efficiency/quality plus consistency
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from athlete_insights.core.config import get_settings
from athlete_insights.models.biometrics import BiometricRecord, SleepDay
from athlete_insights.services.sleep import (
    aggregate_by_date,
    consistency_level,
    sleep_consistency,
    sleep_debt,
    sleep_efficiency,
    sleep_quality_score,
    time_in_bed_hours,
)

router = APIRouter()


# -------------------------------------------------------------------------
# Request / Response Models
# -------------------------------------------------------------------------


class SleepRecordsRequest(BaseModel):
    """Raw sleep segments for one athlete."""

    records: list[BiometricRecord] = Field(default_factory=list)


class SleepNight(BaseModel):
    """Secondary indicators for one report date."""

    date: date
    total_hours: float
    debt_hours: float
    efficiency_pct: float
    quality_score: int


class SleepSummaryResponse(BaseModel):
    """Per-date indicators and overall schedule consistency."""

    nights: list[SleepNight]
    consistency_minutes: Optional[float] = None
    consistency_level: Optional[str] = None


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.post("/days", response_model=list[SleepDay])
async def sleep_days(request: SleepRecordsRequest) -> list[SleepDay]:
    """Reconstruct total sleep per report date, oldest first."""
    return aggregate_by_date(request.records)


@router.post("/summary", response_model=SleepSummaryResponse)
async def sleep_summary(request: SleepRecordsRequest) -> SleepSummaryResponse:
    """Derive debt, efficiency and quality per date.

    Stage percentages come from the first segment of each date that has them.
    """
    settings = get_settings()
    recommended = settings.recommended_sleep_hours

    nights: list[SleepNight] = []
    for day in aggregate_by_date(request.records):
        segments = [r for r in request.records if r.date == day.date]
        in_bed = sum(time_in_bed_hours(r) for r in segments)
        staged = next((r for r in segments if r.deep_sleep_pct or r.rem_sleep_pct), None)
        efficiency = sleep_efficiency(day.total_hours, in_bed)

        nights.append(
            SleepNight(
                date=day.date,
                total_hours=round(day.total_hours, 2),
                debt_hours=round(sleep_debt(day.total_hours, recommended), 2),
                efficiency_pct=round(efficiency, 1),
                quality_score=sleep_quality_score(
                    day.total_hours,
                    efficiency,
                    staged.deep_sleep_pct if staged else 0.0,
                    staged.rem_sleep_pct if staged else 0.0,
                    recommended,
                ),
            )
        )

    consistency = sleep_consistency(request.records)
    return SleepSummaryResponse(
        nights=nights,
        consistency_minutes=round(consistency, 1) if consistency is not None else None,
        consistency_level=consistency_level(consistency) if consistency is not None else None,
    )
