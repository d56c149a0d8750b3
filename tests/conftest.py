"""Pytest configuration and fixtures."""

import pytest

from allelecheck.models.annotation import RawProviderAnnotation
from allelecheck.models.position import GenomicPosition


class MockProvider:
    """In-memory annotation provider.

    Responses are keyed by the canonical positional form of the queried
    position; a missing key or a None value is answered as not found.
    """

    def __init__(self, alleles: dict[str, tuple[str, str] | None], order=None):
        self.alleles = alleles
        self.order = order or (lambda responses: responses)
        self.lookup_calls: list[tuple[GenomicPosition, dict]] = []
        self.batch_calls: list[tuple[list[GenomicPosition], dict]] = []

    def answer(self, position: GenomicPosition) -> RawProviderAnnotation:
        actual = self.alleles.get(str(position))
        if actual is None:
            return RawProviderAnnotation(position=position, succeeded=False, error_message="not found")
        return RawProviderAnnotation(
            position=position,
            succeeded=True,
            actual_alleles=actual,
            annotation={"most_severe_consequence": "missense_variant"},
        )

    async def lookup(self, position, isoform_override_source=None, token_map=None, fields=None):
        self.lookup_calls.append(
            (position, {"isoform_override_source": isoform_override_source, "token_map": token_map, "fields": fields})
        )
        return self.answer(position)

    async def lookup_batch(self, positions, isoform_override_source=None, token_map=None, fields=None):
        self.batch_calls.append(
            (list(positions), {"isoform_override_source": isoform_override_source, "token_map": token_map, "fields": fields})
        )
        return self.order([self.answer(position) for position in positions])


@pytest.fixture
def make_provider():
    """Factory for mock providers."""
    return MockProvider


@pytest.fixture
def reference_alleles():
    """Provider alleles around 5:138163255-138163256, where the reference is TC."""
    return {
        "5,138163256,138163256,C,T": ("C", "T"),
        "5,138163256,138163256,C,-": ("C", "-"),
        "5,138163256,138163256,A,-": ("C", "-"),
        "5,138163255,138163256,TC,-": ("TC", "-"),
        "5,138163255,138163256,CC,-": ("TC", "-"),
        "5,138163255,138163256,CCCC,-": ("TC", "-"),
        "5,138163255,138163256,-,T": ("-", "T"),
        "5,138163255,138163256,-,TT": ("-", "TT"),
        "5,138163255,138163256,-,-": ("-", "-"),
        "5,138163256,138163256,A,T": ("C", "T"),
        "5,138163256,138163256,C,TT": ("C", "TT"),
        "5,138163256,138163256,A,TT": ("C", "TT"),
        "5,138163255,138163256,TC,A": ("TC", "A"),
        "5,138163255,138163256,TA,G": ("TC", "G"),
        "5,138163255,138163256,TC,TC": ("TC", "TC"),
        "5,138163255,138163256,TC,TT": ("TC", "TT"),
        "5,138163255,138163256,TC,GG": ("TC", "GG"),
        "5,138163255,138163256,CC,TC": ("TC", "TC"),
        "5,138163255,138163256,CC,TT": ("TC", "TT"),
        "5,138163255,138163256,CC,GG": ("TC", "GG"),
        "5,138163255,138163256,CCCC,TT": ("TC", "TT"),
        # HGVS queries, keyed by their parsed positions
        "5,138163255,138163256,,TT": ("TC", "TT"),
        "5,138163255,138163256,,-": ("TC", "-"),
        "5,138163256,138163256,,-": ("C", "-"),
        "5,138163255,138163256,,": ("TC", "GA"),
    }


@pytest.fixture
def sample_position():
    """Sample genomic position for testing."""
    from allelecheck.models.position import Allele

    return GenomicPosition(
        chromosome="5",
        start=138163256,
        end=138163256,
        reference_allele=Allele.explicit("C"),
        variant_allele=Allele.explicit("T"),
    )
