"""Readiness endpoints.

Paths:
  POST /api/v1/readiness        - displayed readiness (latest non-zero day)
  POST /api/v1/readiness/series - per-day readiness and training load trend
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from athlete_insights.core.config import get_settings
from athlete_insights.models.biometrics import BiometricRecord, ReadinessScore
from athlete_insights.services.readiness import (
    ReadinessConfig,
    display_readiness,
    readiness_series,
    training_load_trend,
)

router = APIRouter()


# -------------------------------------------------------------------------
# Request / Response Models
# -------------------------------------------------------------------------


class ReadinessRequest(BaseModel):
    """Biometric history for one athlete."""

    athlete_id: Optional[str] = None
    records: list[BiometricRecord] = Field(default_factory=list)


class ReadinessPoint(BaseModel):
    """Readiness for one report date."""

    date: date
    value: float


class ReadinessSeriesResponse(BaseModel):
    """Readiness history plus week-over-week load direction."""

    athlete_id: Optional[str]
    points: list[ReadinessPoint]
    load_trend: str
    load_value: float


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.post("", response_model=ReadinessScore)
async def readiness(request: ReadinessRequest) -> ReadinessScore:
    """Readiness to display for an athlete.

    Returns the most recent non-zero daily score, so a latest record with no
    usable readings does not show as 0%.
    """
    config = ReadinessConfig.from_settings(get_settings())
    return display_readiness(request.records, athlete_id=request.athlete_id, config=config)


@router.post("/series", response_model=ReadinessSeriesResponse)
async def readiness_history(request: ReadinessRequest) -> ReadinessSeriesResponse:
    """Per-day readiness, oldest first."""
    config = ReadinessConfig.from_settings(get_settings())
    series = readiness_series(request.records, config)
    trend, value = training_load_trend(sorted(request.records, key=lambda r: r.date))

    return ReadinessSeriesResponse(
        athlete_id=request.athlete_id,
        points=[ReadinessPoint(date=d, value=v) for d, v in series],
        load_trend=trend,
        load_value=round(value, 1),
    )
