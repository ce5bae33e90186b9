"""Genetic trait scoring service.

Turns heterogeneous genotype payloads into ``GeneObservation`` values once at
ingestion, classifies each (gene, genotype) pair against the reference catalog,
and folds named trait gene lists into a 0-100 score.
"""

import json
import logging
import math
import re
from collections import Counter
from typing import Any, Iterable, Mapping, Optional, Sequence

from athlete_insights.core.config import get_settings
from athlete_insights.core.errors import ParseError, UnknownGeneError, UpstreamFetchError
from athlete_insights.models.genetics import (
    GeneObservation,
    Impact,
    ImpactAnalysis,
    TraitDefinition,
    TraitScore,
)
from athlete_insights.services.gene_catalog import CATEGORY_TABLES, SQUAD_TRAITS
from athlete_insights.services.providers import GeneticProfileProvider

logger = logging.getLogger(__name__)

UNKNOWN_ANALYSIS = ImpactAnalysis(impact=Impact.UNKNOWN, description="Analysis not available")

DEFAULT_GENOTYPE = "default"

_WHITESPACE = re.compile(r"\s+")

_GENE_KEYS = ("gene", "Gene", "GENE", "rsid", "Rsid", "RSID")
_GENOTYPE_KEYS = ("genotype", "Genotype", "GENOTYPE")


def normalize_gene_symbol(symbol: str) -> str:
    """Identity key for a gene symbol: case-folded with all whitespace removed."""
    return _WHITESPACE.sub("", str(symbol)).casefold()


def _first(mapping: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _value_ci(mapping: Mapping[str, Any], name: str) -> Any:
    """Case-insensitive key lookup."""
    for key, value in mapping.items():
        if isinstance(key, str) and key.lower() == name:
            return value
    return None


def _is_metadata_key(key: str) -> bool:
    return key.startswith("$") or key.lower() == "id"


def _gene_pairs(genes: Any) -> list[tuple[str, str]]:
    """Flatten one ``genes`` payload into (symbol, genotype) pairs.

    Raises:
        ParseError: If the payload is not one of the supported shapes.
    """
    if isinstance(genes, str):
        try:
            genes = json.loads(genes)
        except json.JSONDecodeError as e:
            raise ParseError(f"Genes payload is not valid JSON: {e}") from e

    pairs: list[tuple[str, str]] = []
    if isinstance(genes, Mapping):
        for key, value in genes.items():
            if isinstance(value, (Mapping, list)):
                continue
            pairs.append((str(key), value))
    elif isinstance(genes, list):
        for item in genes:
            if not isinstance(item, Mapping):
                continue
            symbol = _first(item, _GENE_KEYS)
            genotype = _first(item, _GENOTYPE_KEYS)
            if symbol is None:
                symbol = _value_ci(item, "key")
                genotype = _value_ci(item, "value")
            if symbol is not None:
                pairs.append((str(symbol), genotype))
    elif genes is not None:
        raise ParseError(f"Unsupported genes payload type: {type(genes).__name__}")

    return [
        (symbol.strip(), str(genotype).strip())
        for symbol, genotype in pairs
        if symbol.strip()
        and not _is_metadata_key(symbol.strip())
        and genotype is not None
        and str(genotype).strip()
    ]


def normalize_genetic_payload(summaries: Iterable[Mapping[str, Any]]) -> list[GeneObservation]:
    """Normalize raw category summaries into gene observations.

    Each summary carries a category and a genes payload shaped as a mapping, a
    list of ``{gene, genotype}`` pairs, a list of ``{key, value}`` pairs, or a
    JSON string of one of those. Malformed summaries are skipped. Observations
    are deduplicated per (gene, category); the first one wins.
    """
    observations: list[GeneObservation] = []
    seen: set[tuple[str, str]] = set()

    for summary in summaries or []:
        if not isinstance(summary, Mapping):
            logger.debug(f"Skipping non-mapping genetic summary: {summary!r}")
            continue

        category = summary.get("category") or summary.get("Category") or "Unknown"
        genes = summary.get("genes", summary.get("Genes"))
        try:
            pairs = _gene_pairs(genes)
        except ParseError as e:
            logger.debug(f"Skipping genetic summary for {category}: {e}")
            continue

        for symbol, genotype in pairs:
            key = normalize_gene_symbol(symbol)
            if (key, category) in seen:
                continue
            seen.add((key, category))
            observations.append(
                GeneObservation(gene=key, symbol=symbol, genotype=genotype, category=str(category))
            )

    return observations


class GeneCatalog:
    """Reference genotype tables grouped by category.

    A gene may appear in several categories. Lookups go to the observation's
    home category first and then to every table in catalog order.
    """

    def __init__(self, tables: Optional[Mapping[str, Mapping[str, tuple]]] = None):
        """Initialize gene catalog.

        Args:
            tables: ``{category: {symbol: (rsid, {genotype: (impact, description)})}}``.
        """
        self._tables: dict[str, dict[str, dict[str, ImpactAnalysis]]] = {}
        self._names: dict[str, str] = {}

        for category, genes in (tables if tables is not None else CATEGORY_TABLES).items():
            table: dict[str, dict[str, ImpactAnalysis]] = {}
            for symbol, (_rsid, genotypes) in genes.items():
                analyses = {
                    genotype: ImpactAnalysis(impact=Impact(impact), description=description)
                    for genotype, (impact, description) in genotypes.items()
                }
                table[normalize_gene_symbol(symbol)] = analyses
                # "PER3 VNTR" is also reachable as "PER3"
                alias = normalize_gene_symbol(symbol.split()[0])
                table.setdefault(alias, analyses)
            category_key = normalize_gene_symbol(category)
            self._tables[category_key] = table
            self._names[category_key] = category

    @property
    def categories(self) -> list[str]:
        return list(self._names.values())

    def _match(
        self,
        category_key: str,
        gene: str,
        genotype: str,
    ) -> Optional[ImpactAnalysis]:
        analyses = self._tables.get(category_key, {}).get(gene)
        if not analyses:
            return None
        if genotype in analyses:
            return analyses[genotype]
        folded = genotype.casefold()
        for candidate, analysis in analyses.items():
            if candidate.casefold() == folded:
                return analysis
        return analyses.get(DEFAULT_GENOTYPE)

    def lookup(
        self,
        gene: str,
        genotype: str,
        home_category: Optional[str] = None,
    ) -> ImpactAnalysis:
        """Catalog analysis for a genotype call.

        Raises:
            UnknownGeneError: If no table has an entry for the pair.
        """
        key = normalize_gene_symbol(gene)
        genotype = str(genotype).strip()

        if home_category:
            analysis = self._match(normalize_gene_symbol(home_category), key, genotype)
            if analysis is not None:
                return analysis

        for category_key in self._tables:
            analysis = self._match(category_key, key, genotype)
            if analysis is not None:
                return analysis

        raise UnknownGeneError(gene, genotype)

    def resolve_impact(
        self,
        gene: str,
        genotype: str,
        home_category: Optional[str] = None,
    ) -> ImpactAnalysis:
        """Like ``lookup`` but unknown pairs resolve to an ``unknown`` analysis."""
        try:
            return self.lookup(gene, genotype, home_category)
        except UnknownGeneError as e:
            logger.debug(str(e))
            return UNKNOWN_ANALYSIS


_default_catalog: Optional[GeneCatalog] = None


def get_gene_catalog() -> GeneCatalog:
    """Return the shared reference catalog."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = GeneCatalog()
    return _default_catalog


def present_observations(
    observations: Iterable[GeneObservation],
    gene_list: Iterable[str],
) -> list[GeneObservation]:
    """First observation per gene whose normalized symbol is in ``gene_list``."""
    wanted = {normalize_gene_symbol(g) for g in gene_list}
    present: dict[str, GeneObservation] = {}
    for obs in observations:
        key = normalize_gene_symbol(obs.gene)
        if key in wanted and key not in present:
            present[key] = obs
    return list(present.values())


def _impacts(
    present: Iterable[GeneObservation],
    catalog: GeneCatalog,
) -> list[Impact]:
    return [catalog.resolve_impact(o.gene, o.genotype, o.category).impact for o in present]


def _rescale(impacts: Sequence[Impact], neutral: int) -> int:
    if not impacts:
        return neutral
    avg = sum(i.weight for i in impacts) / len(impacts)
    # Half-up so 62.5 -> 63 rather than banker's rounding
    return int(math.floor((avg + 1) * 50 + 0.5))


def compute_trait_score(
    observations: Iterable[GeneObservation],
    gene_list: Iterable[str],
    catalog: Optional[GeneCatalog] = None,
) -> int:
    """0-100 score for a gene list; the neutral prior when no gene is present."""
    catalog = catalog or get_gene_catalog()
    present = present_observations(observations, gene_list)
    return _rescale(_impacts(present, catalog), get_settings().trait_neutral_score)


def score_trait(
    observations: Iterable[GeneObservation],
    trait: TraitDefinition,
    catalog: Optional[GeneCatalog] = None,
) -> TraitScore:
    """Score one trait with clamped coverage counters.

    ``genes_present`` never exceeds ``genes_defined``, and the beneficial plus
    challenging counts never exceed ``genes_present``, even when the payload
    carries one gene under several raw spellings.
    """
    catalog = catalog or get_gene_catalog()
    present = present_observations(observations, trait.genes)
    impacts = _impacts(present, catalog)

    genes_defined = len(trait.genes)
    genes_present = min(len(present), genes_defined)
    beneficial = min(impacts.count(Impact.BENEFICIAL), genes_present)
    challenging = min(impacts.count(Impact.CHALLENGING), max(genes_present - beneficial, 0))

    return TraitScore(
        name=trait.name,
        score=_rescale(impacts, get_settings().trait_neutral_score),
        beneficial_count=beneficial,
        challenging_count=challenging,
        genes_present=genes_present,
        genes_defined=genes_defined,
    )


def score_traits(
    observations: Iterable[GeneObservation],
    traits: Optional[Sequence[TraitDefinition]] = None,
    catalog: Optional[GeneCatalog] = None,
) -> list[TraitScore]:
    """Score each trait in order (squad traits by default)."""
    observations = list(observations)
    traits = SQUAD_TRAITS if traits is None else traits
    return [score_trait(observations, trait, catalog) for trait in traits]


def impact_breakdown(
    observations: Iterable[GeneObservation],
    catalog: Optional[GeneCatalog] = None,
) -> dict[Impact, int]:
    """Number of observations per impact classification."""
    catalog = catalog or get_gene_catalog()
    counts = Counter(
        catalog.resolve_impact(o.gene, o.genotype, o.category).impact for o in observations
    )
    return {impact: counts.get(impact, 0) for impact in Impact}


def neutral_trait_scores(traits: Sequence[TraitDefinition]) -> list[TraitScore]:
    """Neutral-prior scores for athletes with no usable genetic profile."""
    neutral = get_settings().trait_neutral_score
    return [
        TraitScore(name=t.name, score=neutral, genes_defined=len(t.genes))
        for t in traits
    ]


async def score_athlete_traits(
    provider: GeneticProfileProvider,
    athlete_id: str,
    traits: Optional[Sequence[TraitDefinition]] = None,
    catalog: Optional[GeneCatalog] = None,
) -> list[TraitScore]:
    """Fetch one athlete's genetic profile and score it.

    A failed fetch yields neutral scores instead of raising.
    """
    traits = SQUAD_TRAITS if traits is None else traits
    try:
        summaries = await provider.get_profile(athlete_id)
    except UpstreamFetchError as e:
        logger.warning(f"Genetic profile unavailable for athlete {athlete_id}: {e}")
        return neutral_trait_scores(traits)

    observations = normalize_genetic_payload(summaries)
    logger.debug(f"Normalized {len(observations)} gene observations for athlete {athlete_id}")
    return score_traits(observations, traits, catalog)
