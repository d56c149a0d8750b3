"""Genomic position models.

A reference allele has three distinct states and they must never collapse:
- EXPLICIT: the caller named the bases ("TC")
- EMPTY: the caller asserted there are no bases ("-", pure insertion)
- UNSPECIFIED: the caller made no claim (HGVS "del" without bases)

Verification is bypassed for UNSPECIFIED, while EMPTY is checked like any
other sequence.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from allelecheck.constants import EMPTY_SEQUENCE_MARKER, NUCLEOTIDES, UNSPECIFIED_MARKER


class AlleleKind(str, Enum):
    """State of an allele as asserted by the caller."""

    EXPLICIT = "explicit"
    EMPTY = "empty"
    UNSPECIFIED = "unspecified"


class Notation(str, Enum):
    """Query notations accepted by the verified annotation engine."""

    GENOMIC_LOCATION = "genomic_location"
    HGVS = "hgvs"


class VariantType(str, Enum):
    """Mutation types understood by the notation parsers."""

    SUBSTITUTION = "substitution"
    DELETION = "deletion"
    INSERTION = "insertion"
    DELETION_INSERTION = "deletion_insertion"
    INVERSION = "inversion"


class Allele(BaseModel):
    """An allele: explicit bases, the empty-sequence marker, or unspecified."""

    model_config = ConfigDict(frozen=True)

    kind: AlleleKind
    sequence: str = ""

    @model_validator(mode="after")
    def check_sequence(self) -> "Allele":
        if self.kind == AlleleKind.EXPLICIT:
            if not self.sequence:
                raise ValueError("Explicit allele requires at least one base")
            invalid = sorted(set(self.sequence) - NUCLEOTIDES)
            if invalid:
                raise ValueError(f"Invalid nucleotide characters in allele: {''.join(invalid)}")
        elif self.sequence:
            raise ValueError(f"{self.kind.value} allele cannot carry a sequence")
        return self

    @classmethod
    def explicit(cls, sequence: str) -> "Allele":
        return cls(kind=AlleleKind.EXPLICIT, sequence=sequence)

    @classmethod
    def empty(cls) -> "Allele":
        return cls(kind=AlleleKind.EMPTY)

    @classmethod
    def unspecified(cls) -> "Allele":
        return cls(kind=AlleleKind.UNSPECIFIED)

    @classmethod
    def from_token(cls, token: str) -> "Allele":
        """Build an allele from a notation token ('-' means empty)."""
        if token == EMPTY_SEQUENCE_MARKER:
            return cls.empty()
        return cls.explicit(token)

    @property
    def is_explicit(self) -> bool:
        return self.kind == AlleleKind.EXPLICIT

    @property
    def is_empty(self) -> bool:
        return self.kind == AlleleKind.EMPTY

    @property
    def is_unspecified(self) -> bool:
        return self.kind == AlleleKind.UNSPECIFIED

    def __str__(self) -> str:
        if self.kind == AlleleKind.EMPTY:
            return EMPTY_SEQUENCE_MARKER
        if self.kind == AlleleKind.UNSPECIFIED:
            return UNSPECIFIED_MARKER
        return self.sequence


class GenomicPosition(BaseModel):
    """Canonical variant descriptor: interval plus reference/variant alleles.

    Coordinates are 1-based and inclusive. For a pure insertion the interval
    spans the two flanking bases and the reference allele is EMPTY.

    Equality and hashing ignore ``original_input`` so that two queries for the
    same variant correlate to the same provider response.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "chromosome": "5",
                "start": 138163256,
                "end": 138163256,
                "reference_allele": {"kind": "explicit", "sequence": "C"},
                "variant_allele": {"kind": "explicit", "sequence": "T"},
            }
        },
    )

    chromosome: str = Field(..., min_length=1, description="Chromosome identifier (e.g., 5, X)")
    start: int = Field(..., ge=1, description="1-based inclusive start coordinate")
    end: int = Field(..., ge=1, description="1-based inclusive end coordinate")
    reference_allele: Allele = Field(..., description="Asserted reference allele")
    variant_allele: Allele = Field(..., description="Proposed variant allele")
    original_input: str | None = Field(None, description="Verbatim caller query, echoed back only")

    @model_validator(mode="after")
    def check_interval(self) -> "GenomicPosition":
        if self.start > self.end:
            raise ValueError(f"Start position {self.start} is after end position {self.end}")
        return self

    @property
    def identity(self) -> tuple[str, int, int, Allele, Allele]:
        return (self.chromosome, self.start, self.end, self.reference_allele, self.variant_allele)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenomicPosition):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        return f"{self.chromosome},{self.start},{self.end},{self.reference_allele},{self.variant_allele}"


class ParsedQuery(BaseModel):
    """Result of parsing a query in either notation.

    ``invalid_reason`` is set when the query parsed but can never be verified
    (insertion without inserted bases, inversion carrying a reference token).
    Such queries finalize as unsuccessful without a provider lookup.
    """

    model_config = ConfigDict(frozen=True)

    position: GenomicPosition
    variant_type: VariantType
    invalid_reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.invalid_reason is None
