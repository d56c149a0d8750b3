"""Annotation models exchanged with the provider and returned to callers."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from allelecheck.models.position import GenomicPosition


class FailureReason(str, Enum):
    """Why a verified annotation was marked unsuccessful."""

    PROVIDER_FAILED = "provider_failed"
    REFERENCE_MISMATCH = "reference_mismatch"
    INVALID_QUERY = "invalid_query"
    NO_OP_EDIT = "no_op_edit"


class RawProviderAnnotation(BaseModel):
    """Provider output for one position.

    ``position`` is the query the provider says it answered; batch responses
    are matched back to queries by position equality, not by list index.
    """

    model_config = ConfigDict(frozen=True)

    position: GenomicPosition = Field(..., description="Query echoed by the provider")
    succeeded: bool = Field(..., description="Whether the provider resolved the query")
    actual_alleles: tuple[str, str] | None = Field(
        None, description="(reference, variant) over the query interval, '-' for no bases"
    )
    annotation: dict[str, Any] = Field(default_factory=dict, description="Opaque provider payload")
    error_message: str | None = Field(None, description="Provider error for unresolved queries")

    @model_validator(mode="after")
    def check_alleles_present(self) -> "RawProviderAnnotation":
        if self.succeeded and self.actual_alleles is None:
            raise ValueError("Successful provider annotation requires actual alleles")
        if not self.succeeded and self.actual_alleles is not None:
            raise ValueError("Unsuccessful provider annotation cannot carry actual alleles")
        return self

    @property
    def actual_reference(self) -> str | None:
        return self.actual_alleles[0] if self.actual_alleles else None

    @property
    def actual_variant(self) -> str | None:
        return self.actual_alleles[1] if self.actual_alleles else None


class VerifiedAnnotation(BaseModel):
    """Annotation after reference-allele verification.

    Either fully successful (allele string and payload present) or
    unsuccessful with a failure reason and nothing else.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "original_query": "5,138163255,138163256,TC,TT",
                "variant": "5,138163255,138163256,TC,TT",
                "successfully_annotated": True,
                "allele_string": "C/T",
            }
        }
    )

    original_query: str = Field(..., description="Caller's query, echoed verbatim")
    variant: str = Field(..., description="Canonical form of the query")
    successfully_annotated: bool = Field(..., description="Final verdict after verification")
    allele_string: str | None = Field(None, description="Minimal 'reference/variant' allele string")
    annotation: dict[str, Any] | None = Field(None, description="Provider payload for successful annotations")
    failure_reason: FailureReason | None = Field(None, description="Reason for an unsuccessful annotation")

    @model_validator(mode="after")
    def check_consistency(self) -> "VerifiedAnnotation":
        if self.successfully_annotated:
            if self.allele_string is None or self.failure_reason is not None:
                raise ValueError("Successful annotation needs an allele string and no failure reason")
        elif self.allele_string is not None or self.annotation is not None or self.failure_reason is None:
            raise ValueError("Unsuccessful annotation needs a failure reason and no allele data")
        return self

    def to_report(self) -> str:
        """Simple report output."""
        report = f"\nQuery: {self.original_query} | Variant: {self.variant}\n"
        if not self.successfully_annotated:
            report += f"Annotated: no | Reason: {self.failure_reason.value}\n"
            return report

        report += f"Annotated: yes | Allele string: {self.allele_string}\n"

        # Add the headline consequence if the provider gave one
        consequence = (self.annotation or {}).get("most_severe_consequence")
        if consequence:
            report += f"Most severe consequence: {consequence}\n"

        return report

    @classmethod
    def success(
        cls, original_query: str, variant: str, allele_string: str, annotation: dict[str, Any]
    ) -> "VerifiedAnnotation":
        return cls(
            original_query=original_query,
            variant=variant,
            successfully_annotated=True,
            allele_string=allele_string,
            annotation=annotation,
        )

    @classmethod
    def failure(cls, original_query: str, variant: str, reason: FailureReason) -> "VerifiedAnnotation":
        return cls(
            original_query=original_query,
            variant=variant,
            successfully_annotated=False,
            failure_reason=reason,
        )
