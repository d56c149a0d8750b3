"""Parser for positional (comma-separated) genomic locations.

Format: ``chromosome,start,end,reference,variant`` e.g. ``5,138163256,138163256,C,T``.
``-`` is the empty-sequence marker (``-`` reference for insertions, ``-``
variant for deletions). There is no way to leave the reference unspecified.
"""

import logging
import re

from pydantic import ValidationError

from allelecheck.exceptions import MalformedNotationError
from allelecheck.models.position import Allele, GenomicPosition, Notation, ParsedQuery
from allelecheck.notation.base import infer_variant_type

logger = logging.getLogger(__name__)


class PositionalNotationParser:
    """Parses and formats comma-separated genomic locations."""

    notation = Notation.GENOMIC_LOCATION
    FIELD_COUNT = 5
    SEPARATOR = ","
    COORDINATE_PATTERN = re.compile(r"[0-9]+")

    def parse(self, query: str) -> ParsedQuery:
        fields = [field.strip() for field in query.strip().split(self.SEPARATOR)]
        if len(fields) != self.FIELD_COUNT or not all(fields):
            raise MalformedNotationError(query, f"Expected {self.FIELD_COUNT} non-empty comma-separated fields")

        chromosome, start_text, end_text, reference_token, variant_token = fields
        if not all(self.COORDINATE_PATTERN.fullmatch(text) for text in (start_text, end_text)):
            raise MalformedNotationError(query, "Coordinates must be plain decimal integers")
        start = int(start_text)
        end = int(end_text)

        try:
            reference = Allele.from_token(reference_token)
            variant = Allele.from_token(variant_token)
            position = GenomicPosition(
                chromosome=chromosome,
                start=start,
                end=end,
                reference_allele=reference,
                variant_allele=variant,
                original_input=query,
            )
        except ValidationError as e:
            raise MalformedNotationError(query, f"Invalid genomic location ({e.errors()[0]['msg']})") from e

        parsed = ParsedQuery(position=position, variant_type=infer_variant_type(reference, variant))
        logger.debug(f"Parsed genomic location {query!r} as {parsed.variant_type.value}")
        return parsed

    def from_position(self, position: GenomicPosition) -> ParsedQuery:
        """Wrap an already-built position, enforcing the positional alleles."""
        if position.reference_allele.is_unspecified or position.variant_allele.is_unspecified:
            raise MalformedNotationError(str(position), "Genomic locations require explicit or '-' alleles")
        return ParsedQuery(
            position=position,
            variant_type=infer_variant_type(position.reference_allele, position.variant_allele),
        )

    def format(self, parsed: ParsedQuery) -> str:
        return str(parsed.position)


def parse_genomic_location(query: str) -> GenomicPosition:
    """Parse a comma-separated genomic location into a position.

    Examples:
        >>> str(parse_genomic_location('5,138163255,138163256,-,T'))
        '5,138163255,138163256,-,T'
    """
    return PositionalNotationParser().parse(query).position
