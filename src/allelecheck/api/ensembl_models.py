"""Pydantic models for Ensembl REST API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class SequenceRegion(BaseModel):
    """Reference sequence returned by /sequence/region."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    query: str | None = None  # Echoed region, present on POST responses
    seq: str
    molecule: str | None = None


class TranscriptConsequence(BaseModel):
    """Per-transcript consequence from VEP."""

    model_config = ConfigDict(extra="allow")

    transcript_id: str | None = None
    gene_id: str | None = None
    gene_symbol: str | None = None
    consequence_terms: list[str] = Field(default_factory=list)
    impact: str | None = None
    hgvsc: str | None = None
    hgvsp: str | None = None
    canonical: int | None = None
    biotype: str | None = None


class VEPAnnotation(BaseModel):
    """Single VEP result for one input variant.

    Unknown keys are kept so the full payload can be returned to callers.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    input: str | None = None
    assembly_name: str | None = None
    seq_region_name: str | None = None
    start: int | None = None
    end: int | None = None
    strand: int | None = None
    allele_string: str | None = None
    most_severe_consequence: str | None = None
    transcript_consequences: list[TranscriptConsequence] = Field(default_factory=list)
    colocated_variants: list[dict[str, Any]] = Field(default_factory=list)

    def to_payload(self, fields: list[str] | None = None) -> dict[str, Any]:
        """Dump to a plain dict, keeping only the requested top-level fields."""
        payload = self.model_dump(exclude_none=True)
        if fields:
            payload = {key: value for key, value in payload.items() if key in fields}
        return payload


# POST endpoints and VEP GET return JSON arrays
SequenceRegionList = TypeAdapter(list[SequenceRegion])
VEPAnnotationList = TypeAdapter(list[VEPAnnotation])
