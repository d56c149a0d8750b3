"""Parser for HGVS genomic descriptors.

Supported edits (``chromosome:g.<edit>``):
- Substitution: 138163256C>T
- Deletion: 138163255_138163256del, 138163256delC
- Insertion: 138163255_138163256insT
- Deletion-insertion: 138163255_138163256delTCinsTT, 138163255_138163256delinsTT
- Inversion: 138163255_138163256inv

A deletion or deletion-insertion without reference bases leaves the reference
UNSPECIFIED, which bypasses verification. Duplications, methylation and
fully specified alleles are rejected as unsupported.
"""

import logging
import re

from pydantic import ValidationError

from allelecheck.exceptions import MalformedNotationError, UnsupportedNotationError
from allelecheck.models.position import Allele, GenomicPosition, Notation, ParsedQuery, VariantType

logger = logging.getLogger(__name__)

_BASES = r"[ACGTNacgtn]"
_INTERVAL = r"^(?P<start>[0-9]+)(?:_(?P<end>[0-9]+))?"


class HgvsNotationParser:
    """Parses and formats HGVS genomic (g.) descriptors."""

    notation = Notation.HGVS

    GENOMIC_PATTERN = re.compile(r"^(?P<chromosome>[^:\s]+):g\.(?P<edit>\S+)$")
    SUBSTITUTION_PATTERN = re.compile(rf"^(?P<start>[0-9]+)(?P<ref>{_BASES}*)>(?P<var>{_BASES}*)$")
    DELINS_PATTERN = re.compile(rf"{_INTERVAL}del(?P<ref>{_BASES}*)ins(?P<var>{_BASES}*)$")
    DELETION_PATTERN = re.compile(rf"{_INTERVAL}del(?P<ref>{_BASES}*)$")
    INSERTION_PATTERN = re.compile(rf"{_INTERVAL}ins(?P<var>{_BASES}*)$")
    INVERSION_PATTERN = re.compile(rf"{_INTERVAL}inv(?P<ref>{_BASES}*)$")

    # Recognized HGVS edits that are out of scope
    UNSUPPORTED_EDITS = {
        "dup": re.compile(r"dup"),
        "methylation": re.compile(r"\|(?:gom|lom|met=)"),
        "fully specified allele": re.compile(r"=|\["),
    }

    def parse(self, query: str) -> ParsedQuery:
        text = query.strip()
        match = self.GENOMIC_PATTERN.match(text)
        if not match:
            raise MalformedNotationError(query, "Expected HGVS genomic notation 'chromosome:g.<edit>'")

        chromosome = match.group("chromosome")
        edit = match.group("edit")
        if not (edit[0].isascii() and edit[0].isdigit()):
            raise MalformedNotationError(query, "HGVS edit must start with a position")

        for label, pattern in self.UNSUPPORTED_EDITS.items():
            if pattern.search(edit):
                raise UnsupportedNotationError(query, f"Unsupported HGVS edit type ({label})")

        parsed = self._parse_edit(query, chromosome, edit)
        if parsed is None:
            raise UnsupportedNotationError(query, "Unrecognized HGVS edit")

        logger.debug(f"Parsed HGVS {query!r} as {parsed.variant_type.value}")
        return parsed

    def _parse_edit(self, query: str, chromosome: str, edit: str) -> ParsedQuery | None:
        match = self.SUBSTITUTION_PATTERN.match(edit)
        if match:
            ref, var = match.group("ref"), match.group("var")
            if not ref:
                raise MalformedNotationError(query, "Substitution requires a reference allele")
            if len(ref) != 1 or len(var) != 1:
                raise MalformedNotationError(query, "Substitution alleles must be single bases")
            start = int(match.group("start"))
            return self._build(
                query, chromosome, start, start, Allele.explicit(ref), Allele.explicit(var),
                VariantType.SUBSTITUTION,
            )

        match = self.DELINS_PATTERN.match(edit)
        if match:
            start, end = self._interval(match)
            var = match.group("var")
            return self._build(
                query, chromosome, start, end,
                self._optional_reference(match.group("ref")),
                Allele.explicit(var) if var else Allele.unspecified(),
                VariantType.DELETION_INSERTION,
                invalid_reason=None if var else "Deletion-insertion has no inserted bases",
            )

        match = self.DELETION_PATTERN.match(edit)
        if match:
            start, end = self._interval(match)
            return self._build(
                query, chromosome, start, end,
                self._optional_reference(match.group("ref")),
                Allele.empty(),
                VariantType.DELETION,
            )

        match = self.INSERTION_PATTERN.match(edit)
        if match:
            start, end = self._flanking_interval(query, match, "Insertion")
            var = match.group("var")
            return self._build(
                query, chromosome, start, end,
                Allele.empty(),
                Allele.explicit(var) if var else Allele.unspecified(),
                VariantType.INSERTION,
                invalid_reason=None if var else "Insertion has no inserted bases",
            )

        match = self.INVERSION_PATTERN.match(edit)
        if match:
            start, end = self._interval(match)
            if start == end:
                raise MalformedNotationError(query, "Inversion requires a range")
            ref = match.group("ref")
            return self._build(
                query, chromosome, start, end,
                self._optional_reference(ref),
                Allele.unspecified(),
                VariantType.INVERSION,
                invalid_reason="Inversion cannot carry a reference allele" if ref else None,
            )

        return None

    @staticmethod
    def _interval(match: re.Match) -> tuple[int, int]:
        start = int(match.group("start"))
        end = int(match.group("end")) if match.group("end") else start
        return start, end

    def _flanking_interval(self, query: str, match: re.Match, label: str) -> tuple[int, int]:
        if not match.group("end"):
            raise MalformedNotationError(query, f"{label} requires two flanking positions")
        start, end = self._interval(match)
        if end != start + 1:
            raise MalformedNotationError(query, f"{label} flanking positions must be adjacent")
        return start, end

    @staticmethod
    def _optional_reference(token: str) -> Allele:
        return Allele.explicit(token) if token else Allele.unspecified()

    @staticmethod
    def _build(
        query: str,
        chromosome: str,
        start: int,
        end: int,
        reference: Allele,
        variant: Allele,
        variant_type: VariantType,
        invalid_reason: str | None = None,
    ) -> ParsedQuery:
        try:
            position = GenomicPosition(
                chromosome=chromosome,
                start=start,
                end=end,
                reference_allele=reference,
                variant_allele=variant,
                original_input=query,
            )
        except ValidationError as e:
            raise MalformedNotationError(query, f"Invalid HGVS interval ({e.errors()[0]['msg']})") from e
        return ParsedQuery(position=position, variant_type=variant_type, invalid_reason=invalid_reason)

    def format(self, parsed: ParsedQuery) -> str:
        position = parsed.position
        ref = str(position.reference_allele) if position.reference_allele.is_explicit else ""
        var = str(position.variant_allele) if position.variant_allele.is_explicit else ""
        if position.start == position.end:
            interval = f"{position.start}"
        else:
            interval = f"{position.start}_{position.end}"

        if parsed.variant_type == VariantType.SUBSTITUTION:
            edit = f"{position.start}{ref}>{var}"
        elif parsed.variant_type == VariantType.DELETION:
            edit = f"{interval}del{ref}"
        elif parsed.variant_type == VariantType.INSERTION:
            edit = f"{interval}ins{var}"
        elif parsed.variant_type == VariantType.DELETION_INSERTION:
            edit = f"{interval}del{ref}ins{var}"
        else:
            edit = f"{interval}inv{ref}"
        return f"{position.chromosome}:g.{edit}"


def parse_hgvs(query: str) -> GenomicPosition:
    """Parse an HGVS genomic descriptor into a position.

    Examples:
        >>> parse_hgvs('5:g.138163256del').reference_allele.is_unspecified
        True
    """
    return HgvsNotationParser().parse(query).position
