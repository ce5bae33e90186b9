"""Genetic observation and trait models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Impact(str, Enum):
    """Impact classification of one (gene, genotype) pair."""

    BENEFICIAL = "beneficial"
    NEUTRAL = "neutral"
    CHALLENGING = "challenging"
    UNKNOWN = "unknown"

    @property
    def weight(self) -> int:
        """Contribution to a trait score: +1, 0 or -1."""
        if self is Impact.BENEFICIAL:
            return 1
        if self is Impact.CHALLENGING:
            return -1
        return 0


class ImpactAnalysis(BaseModel):
    """Catalog verdict for a genotype."""

    model_config = ConfigDict(frozen=True)

    impact: Impact
    description: str


class GeneObservation(BaseModel):
    """One genotype call, keyed by normalized gene symbol."""

    model_config = ConfigDict(frozen=True)

    gene: str  # normalized key
    symbol: str  # spelling as received
    genotype: str
    category: str = "Unknown"


class TraitDefinition(BaseModel):
    """Named list of genes contributing to one composite score."""

    name: str
    genes: list[str]


class TraitScore(BaseModel):
    """0-100 score for one trait with clamped coverage counters."""

    name: str
    score: int = Field(ge=0, le=100)
    beneficial_count: int = 0
    challenging_count: int = 0
    genes_present: int = 0
    genes_defined: int = 0
