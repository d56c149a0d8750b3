"""Shared parser capability and notation dispatch."""

from typing import Protocol

from allelecheck.models.position import Allele, Notation, ParsedQuery, VariantType


class NotationParser(Protocol):
    """Anything that turns a query string into a genomic position."""

    notation: Notation

    def parse(self, query: str) -> ParsedQuery:
        """Parse query text; raises MalformedNotationError / UnsupportedNotationError."""
        ...

    def format(self, parsed: ParsedQuery) -> str:
        """Canonical re-serialization of a parsed query in this notation."""
        ...


def infer_variant_type(reference: Allele, variant: Allele) -> VariantType:
    """Classify a reference/variant pair given in positional form."""
    if reference.is_empty:
        return VariantType.INSERTION
    if variant.is_empty:
        return VariantType.DELETION
    if len(reference.sequence) == 1 and len(variant.sequence) == 1:
        return VariantType.SUBSTITUTION
    return VariantType.DELETION_INSERTION


def get_parser(notation: Notation) -> NotationParser:
    """Return the parser for a notation."""
    # Local imports keep the parser modules independent of this dispatcher
    from allelecheck.notation.hgvs import HgvsNotationParser
    from allelecheck.notation.positional import PositionalNotationParser

    if notation == Notation.GENOMIC_LOCATION:
        return PositionalNotationParser()
    if notation == Notation.HGVS:
        return HgvsNotationParser()
    raise ValueError(f"Unknown notation: {notation}")
