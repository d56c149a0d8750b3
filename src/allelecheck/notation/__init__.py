"""Notation parsers for genomic-location and HGVS queries."""

from allelecheck.notation.base import NotationParser, get_parser, infer_variant_type
from allelecheck.notation.hgvs import HgvsNotationParser, parse_hgvs
from allelecheck.notation.positional import PositionalNotationParser, parse_genomic_location

__all__ = [
    "NotationParser",
    "get_parser",
    "infer_variant_type",
    "HgvsNotationParser",
    "PositionalNotationParser",
    "parse_hgvs",
    "parse_genomic_location",
]
