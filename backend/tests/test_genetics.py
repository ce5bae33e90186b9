"""Tests for genetic trait scoring."""

import pytest

from athlete_insights.core.errors import UnknownGeneError
from athlete_insights.models.genetics import GeneObservation, Impact, TraitDefinition
from athlete_insights.services.gene_catalog import HEALTH_CATEGORIES, SQUAD_TRAITS
from athlete_insights.services.genetics import (
    GeneCatalog,
    compute_trait_score,
    get_gene_catalog,
    impact_breakdown,
    normalize_gene_symbol,
    normalize_genetic_payload,
    present_observations,
    score_athlete_traits,
    score_trait,
    score_traits,
)
from athlete_insights.services.providers import InMemoryGeneticProvider


def _obs(gene: str, genotype: str, category: str = "Unknown") -> GeneObservation:
    return GeneObservation(
        gene=normalize_gene_symbol(gene),
        symbol=gene,
        genotype=genotype,
        category=category,
    )


@pytest.fixture
def catalog() -> GeneCatalog:
    return get_gene_catalog()


class TestNormalizeSymbol:
    """Tests for gene identity keys."""

    def test_case_and_whitespace_collapse(self):
        """Test spelling variants share one key."""
        assert normalize_gene_symbol("COMT") == normalize_gene_symbol(" comt ")
        assert normalize_gene_symbol("MTHFR C677T") == "mthfrc677t"


class TestNormalizePayload:
    """Tests for ingesting heterogeneous genetic payloads."""

    def test_all_shapes(self, genetic_summaries):
        """Test mapping, gene/genotype pairs and key/value pairs."""
        observations = normalize_genetic_payload(genetic_summaries)

        by_gene = {o.gene: o for o in observations}
        assert set(by_gene) == {"actn3", "ace", "ppargc1a", "bdnf", "col1a1", "gdf5"}
        assert by_gene["bdnf"].genotype == "Met/Met"
        assert by_gene["bdnf"].category == "Recovery & Adaptation"
        assert by_gene["gdf5"].genotype == "TC"

    def test_metadata_keys_dropped(self, genetic_summaries):
        """Test "$"-prefixed and id keys are not genes."""
        genes = {o.gene for o in normalize_genetic_payload(genetic_summaries)}
        assert "$type" not in genes
        assert "id" not in genes

    def test_json_string_genes(self):
        """Test a JSON-encoded genes payload."""
        observations = normalize_genetic_payload(
            [{"category": "Mental Health", "genes": '[{"Key": "COMT", "Value": "GG"}]'}]
        )
        assert [(o.gene, o.genotype) for o in observations] == [("comt", "GG")]

    def test_malformed_summary_skipped(self):
        """Test a bad summary does not stop the others."""
        observations = normalize_genetic_payload(
            [
                {"category": "Mental Health", "genes": "{not json"},
                {"category": "Metabolic Health", "genes": 42},
                "not a summary",
                {"category": "Injury Risk", "genes": {"COL5A1": "CC"}},
            ]
        )
        assert [o.gene for o in observations] == ["col5a1"]

    def test_dedup_per_gene_and_category(self):
        """Test aliased spellings collapse within a category."""
        observations = normalize_genetic_payload(
            [
                {"category": "Mental Health", "genes": [
                    {"gene": "COMT", "genotype": "GG"},
                    {"gene": "comt ", "genotype": "AA"},
                ]},
                {"category": "Core Sleep markers", "genes": {"COMT": "GA"}},
            ]
        )

        assert len(observations) == 2
        assert observations[0].genotype == "GG"

    def test_missing_category_defaults(self):
        """Test summaries without a category."""
        observations = normalize_genetic_payload([{"genes": {"ACE": "II"}}])
        assert observations[0].category == "Unknown"


class TestResolveImpact:
    """Tests for catalog lookups."""

    def test_home_category_wins(self, catalog):
        """Test the same genotype reads differently per category."""
        power = catalog.resolve_impact("ACE", "DD", "Power and Strength")
        cardio = catalog.resolve_impact("ACE", "DD", "Cardiovascular markers")
        assert power.impact == Impact.BENEFICIAL
        assert cardio.impact == Impact.CHALLENGING

    def test_falls_back_to_other_categories(self, catalog):
        """Test a gene outside its home table is found elsewhere."""
        analysis = catalog.resolve_impact("APOE", "E4/E4", "Power and Strength")
        assert analysis.impact == Impact.CHALLENGING

    def test_unknown_pair(self, catalog):
        """Test an uncatalogued gene resolves to unknown."""
        analysis = catalog.resolve_impact("XYZ1", "AA")
        assert analysis.impact == Impact.UNKNOWN
        assert analysis.description == "Analysis not available"

    def test_lookup_raises_for_unknown(self, catalog):
        """Test the strict lookup raises."""
        with pytest.raises(UnknownGeneError):
            catalog.lookup("ACTN3", "ZZ")

    def test_default_genotype_entry(self, catalog):
        """Test genes with a default entry accept any call."""
        assert catalog.resolve_impact("GSK3B", "AT").impact == Impact.NEUTRAL

    def test_genotype_case_and_alias(self, catalog):
        """Test case-insensitive genotypes and short gene aliases."""
        assert catalog.resolve_impact("actn3", "rr").impact == Impact.BENEFICIAL
        assert catalog.resolve_impact("PER3", "4/4").impact == Impact.BENEFICIAL

    def test_custom_tables(self):
        """Test a catalog built from caller tables."""
        catalog = GeneCatalog({"Test": {"ABC": ("rs1", {"AA": ("challenging", "bad")})}})
        assert catalog.categories == ["Test"]
        assert catalog.resolve_impact("abc", "AA").impact == Impact.CHALLENGING


class TestTraitScore:
    """Tests for composite trait scores."""

    def test_no_genes_present_is_neutral(self, catalog):
        """Test the neutral prior."""
        assert compute_trait_score([], ["ACE", "ACTN3"], catalog) == 50
        assert compute_trait_score([_obs("COMT", "GG")], [], catalog) == 50

    def test_all_beneficial(self, catalog):
        """Test every gene beneficial scores 100."""
        observations = [_obs("ACTN3", "RR"), _obs("COMT", "GG")]
        assert compute_trait_score(observations, ["ACTN3", "COMT"], catalog) == 100

    def test_all_challenging(self, catalog):
        """Test every gene challenging scores 0."""
        observations = [_obs("COL1A1", "TT"), _obs("COL5A1", "TT")]
        assert compute_trait_score(observations, ["COL1A1", "COL5A1"], catalog) == 0

    def test_half_and_half(self, catalog):
        """Test one beneficial and one challenging gene."""
        observations = [_obs("COL1A1", "GG"), _obs("COL5A1", "TT")]
        assert compute_trait_score(observations, ["COL1A1", "COL5A1"], catalog) == 50

    def test_unknown_counts_as_neutral(self, catalog):
        """Test unknown genotypes pull toward the middle without failing."""
        observations = [_obs("COL1A1", "GG"), _obs("COL5A1", "??")]
        assert compute_trait_score(observations, ["COL1A1", "COL5A1"], catalog) == 75

    def test_rounds_half_up(self, catalog):
        """Test 62.5 rounds to 63."""
        observations = [
            _obs("ACTN3", "RR", "Power and Strength"),
            _obs("ACE", "ID", "Power and Strength"),
            _obs("AGT", "CT", "Power and Strength"),
            _obs("CKM", "AG", "Power and Strength"),
        ]
        assert compute_trait_score(observations, ["ACTN3", "ACE", "AGT", "CKM"], catalog) == 63

    def test_present_observations_dedupe(self):
        """Test one gene reported under several spellings counts once."""
        observations = [_obs("COMT", "GG", "Mental Health"), _obs(" comt", "AA", "Core Sleep markers")]
        present = present_observations(observations, ["Comt"])
        assert len(present) == 1
        assert present[0].genotype == "GG"


class TestTraitCounters:
    """Tests for coverage counters."""

    def test_counts(self, genetic_summaries, catalog):
        """Test counters for one squad trait."""
        observations = normalize_genetic_payload(genetic_summaries)
        recovery = next(t for t in SQUAD_TRAITS if t.name == "Recovery Capacity")

        score = score_trait(observations, recovery, catalog)

        assert score.score == 50
        assert score.beneficial_count == 1
        assert score.challenging_count == 1
        assert score.genes_present == 2
        assert score.genes_defined == 4

    def test_aliased_genes_never_exceed_defined(self, catalog):
        """Test duplicate raw names cannot push present above defined."""
        trait = TraitDefinition(name="Dopamine", genes=["COMT"])
        observations = normalize_genetic_payload(
            [
                {"category": "Mental Health", "genes": {"COMT": "GG"}},
                {"category": "Core Sleep markers", "genes": {"comt": "GG"}},
                {"category": "Recovery & Adaptation", "genes": {" C O M T ": "GG"}},
            ]
        )

        score = score_trait(observations, trait, catalog)

        assert score.genes_present <= score.genes_defined == 1
        assert score.beneficial_count + score.challenging_count <= score.genes_present

    def test_health_categories_invariant(self, genetic_summaries, catalog):
        """Test every health category respects the coverage invariant."""
        observations = normalize_genetic_payload(genetic_summaries)
        for score in score_traits(observations, HEALTH_CATEGORIES, catalog):
            assert 0 <= score.score <= 100
            assert score.genes_present <= score.genes_defined
            assert score.beneficial_count + score.challenging_count <= score.genes_present

    def test_squad_traits_by_default(self, genetic_summaries, catalog):
        """Test default trait set and ordering."""
        scores = score_traits(normalize_genetic_payload(genetic_summaries), catalog=catalog)

        assert [s.name for s in scores] == [t.name for t in SQUAD_TRAITS]
        by_name = {s.name: s.score for s in scores}
        assert by_name["Scrum/Collision Power"] == 100
        assert by_name["Tissue Integrity Risk"] == 25
        assert by_name["Concussion/Contact Risk"] == 50

    def test_impact_breakdown(self, genetic_summaries, catalog):
        """Test observation counts per impact."""
        counts = impact_breakdown(normalize_genetic_payload(genetic_summaries), catalog)
        assert counts[Impact.BENEFICIAL] == 3
        assert counts[Impact.CHALLENGING] == 2
        assert counts[Impact.NEUTRAL] == 1
        assert counts[Impact.UNKNOWN] == 0


class TestScoreAthleteTraits:
    """Tests for provider-backed scoring."""

    async def test_scores_profile(self, genetic_summaries):
        """Test a fetched profile is normalized and scored."""
        provider = InMemoryGeneticProvider({"a1": genetic_summaries})
        scores = await score_athlete_traits(provider, "a1")
        assert {s.name: s.score for s in scores}["Scrum/Collision Power"] == 100

    async def test_missing_profile_is_neutral(self):
        """Test a failed fetch yields neutral scores."""
        provider = InMemoryGeneticProvider({})
        scores = await score_athlete_traits(provider, "ghost")

        assert len(scores) == len(SQUAD_TRAITS)
        assert all(s.score == 50 for s in scores)
        assert all(s.genes_present == 0 for s in scores)
