"""Error taxonomy for the derived-metrics layer.

These are raised at the seams (clock parsing, payload parsing, provider calls,
catalog lookups) and resolved inside the services into neutral values.
"""


class InsightsError(Exception):
    """Base exception for derived-metrics errors."""

    pass


class MissingFieldError(InsightsError):
    """A required biometric field is absent."""

    def __init__(self, field: str):
        super().__init__(f"Missing biometric field: {field}")
        self.field = field


class ParseError(InsightsError):
    """A clock time or genotype payload could not be parsed."""

    pass


class UpstreamFetchError(InsightsError):
    """A collaborator call (biometric or genetic provider) failed."""

    def __init__(self, athlete_id: str, message: str):
        super().__init__(f"Fetch failed for athlete {athlete_id}: {message}")
        self.athlete_id = athlete_id


class UnknownGeneError(InsightsError):
    """A (gene, genotype) pair is not present in any catalog table."""

    def __init__(self, gene: str, genotype: str):
        super().__init__(f"No analysis for {gene} ({genotype})")
        self.gene = gene
        self.genotype = genotype
