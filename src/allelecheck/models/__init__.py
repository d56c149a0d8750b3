"""Data models for AlleleCheck."""

from allelecheck.models.annotation import FailureReason, RawProviderAnnotation, VerifiedAnnotation
from allelecheck.models.position import (
    Allele,
    AlleleKind,
    GenomicPosition,
    Notation,
    ParsedQuery,
    VariantType,
)
from allelecheck.models.validation import GoldStandardEntry, ValidationMetrics, ValidationResult

__all__ = [
    "Allele",
    "AlleleKind",
    "GenomicPosition",
    "Notation",
    "ParsedQuery",
    "VariantType",
    "RawProviderAnnotation",
    "VerifiedAnnotation",
    "FailureReason",
    "GoldStandardEntry",
    "ValidationResult",
    "ValidationMetrics",
]
