"""Genetic trait endpoints.

Paths:
  POST /api/v1/genetics/traits    - squad trait scores (or caller-defined traits)
  POST /api/v1/genetics/health    - health subcategory scores with coverage
  POST /api/v1/genetics/breakdown - observation count per impact
"""

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from athlete_insights.models.genetics import TraitDefinition, TraitScore
from athlete_insights.services.gene_catalog import HEALTH_CATEGORIES
from athlete_insights.services.genetics import (
    impact_breakdown,
    normalize_genetic_payload,
    score_traits,
)

router = APIRouter()


# -------------------------------------------------------------------------
# Request / Response Models
# -------------------------------------------------------------------------


class GeneticSummariesRequest(BaseModel):
    """Raw per-category genetic summaries.

    Each summary's ``genes`` may be a mapping, a list of ``{gene, genotype}``
    pairs, a list of ``{key, value}`` pairs, or a JSON string of one of those.
    """

    summaries: list[dict[str, Any]] = Field(default_factory=list)
    traits: Optional[list[TraitDefinition]] = None


class ImpactBreakdownResponse(BaseModel):
    """Observation counts per impact."""

    total: int
    beneficial: int
    neutral: int
    challenging: int
    unknown: int


# -------------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------------


@router.post("/traits", response_model=list[TraitScore])
async def trait_scores(request: GeneticSummariesRequest) -> list[TraitScore]:
    """Score traits (squad traits unless ``traits`` is given)."""
    observations = normalize_genetic_payload(request.summaries)
    return score_traits(observations, request.traits)


@router.post("/health", response_model=list[TraitScore])
async def health_category_scores(request: GeneticSummariesRequest) -> list[TraitScore]:
    """Score every health subcategory, including ones with no genes present."""
    observations = normalize_genetic_payload(request.summaries)
    return score_traits(observations, HEALTH_CATEGORIES)


@router.post("/breakdown", response_model=ImpactBreakdownResponse)
async def breakdown(request: GeneticSummariesRequest) -> ImpactBreakdownResponse:
    """Count observations by impact classification."""
    observations = normalize_genetic_payload(request.summaries)
    counts = {impact.value: n for impact, n in impact_breakdown(observations).items()}
    return ImpactBreakdownResponse(total=len(observations), **counts)
