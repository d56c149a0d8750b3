"""Validation and benchmarking models.

CONCEPTUAL OVERVIEW:
===================

A verifier is only trustworthy if its verdicts agree with curated
expectations. Each gold standard entry pairs a query with the verdict an
expert expects (successful or not) and, for successful annotations, the
minimal allele string.

1. BINARY CORRECTNESS
   - Did we accept or reject exactly as expected?
   - For accepted queries, does the reduced allele string match?

2. CONFUSION COUNTS
   - False accepts are the dangerous error: a wrong reference allele that
     slipped through verification.
   - False rejects lose valid annotations but never report wrong data.

3. FAILURE ANALYSIS
   - Every miss is kept with its query and failure reason for review.
"""

from pydantic import BaseModel, Field

from allelecheck.models.annotation import FailureReason
from allelecheck.models.position import Notation


class GoldStandardEntry(BaseModel):
    """Expected verification outcome for one query."""

    query: str
    notation: Notation = Notation.GENOMIC_LOCATION
    expected_successfully_annotated: bool
    expected_allele_string: str | None = None
    notes: str | None = None


class ValidationResult(BaseModel):
    """Outcome of comparing one verified annotation to its gold standard entry."""

    query: str
    notation: Notation
    expected_successfully_annotated: bool
    predicted_successfully_annotated: bool
    expected_allele_string: str | None = None
    predicted_allele_string: str | None = None
    failure_reason: FailureReason | None = None
    error: str | None = None  # Parse error raised instead of an annotation

    @property
    def is_correct(self) -> bool:
        if self.error is not None:
            return False
        if self.expected_successfully_annotated != self.predicted_successfully_annotated:
            return False
        if self.expected_successfully_annotated:
            return self.expected_allele_string == self.predicted_allele_string
        return True

    @property
    def is_false_accept(self) -> bool:
        return self.predicted_successfully_annotated and not self.expected_successfully_annotated

    @property
    def is_false_reject(self) -> bool:
        return self.expected_successfully_annotated and not self.predicted_successfully_annotated


class ValidationMetrics(BaseModel):
    """Aggregate verification metrics over a gold standard dataset."""

    total_cases: int = 0
    correct_predictions: int = 0
    accuracy: float = 0.0
    true_accepts: int = 0
    true_rejects: int = 0
    false_accepts: int = 0
    false_rejects: int = 0
    allele_string_mismatches: int = 0
    errors: int = 0
    failure_analysis: list[dict[str, str]] = Field(default_factory=list)

    def add_result(self, result: ValidationResult) -> None:
        """Add a validation result and update the counts."""
        self.total_cases += 1

        if result.error is not None:
            self.errors += 1
        elif result.is_false_accept:
            self.false_accepts += 1
        elif result.is_false_reject:
            self.false_rejects += 1
        elif result.predicted_successfully_annotated:
            self.true_accepts += 1
            if result.expected_allele_string != result.predicted_allele_string:
                self.allele_string_mismatches += 1
        else:
            self.true_rejects += 1

        if result.is_correct:
            self.correct_predictions += 1
        else:
            self.failure_analysis.append(
                {
                    "query": result.query,
                    "notation": result.notation.value,
                    "expected": _verdict(result.expected_successfully_annotated, result.expected_allele_string),
                    "predicted": _verdict(result.predicted_successfully_annotated, result.predicted_allele_string),
                    "reason": result.error or (result.failure_reason.value if result.failure_reason else ""),
                }
            )

    def calculate(self, results: list[ValidationResult]) -> None:
        """Calculate overall metrics from results."""
        if not results:
            return

        for result in results:
            self.add_result(result)

        if self.total_cases > 0:
            self.accuracy = self.correct_predictions / self.total_cases

    def to_report(self) -> str:
        """Generate a formatted validation report."""
        lines = [
            "=" * 80,
            "VERIFICATION VALIDATION REPORT",
            "=" * 80,
            f"\nTotal Cases: {self.total_cases}",
            f"Correct Predictions: {self.correct_predictions}",
            f"Overall Accuracy: {self.accuracy:.2%}",
            f"\n{'-' * 80}",
            "VERDICT COUNTS",
            f"{'-' * 80}",
            f"  True accepts: {self.true_accepts}",
            f"  True rejects: {self.true_rejects}",
            f"  False accepts: {self.false_accepts}",
            f"  False rejects: {self.false_rejects}",
            f"  Allele string mismatches: {self.allele_string_mismatches}",
            f"  Errors: {self.errors}",
        ]

        if self.failure_analysis:
            lines.append(f"\n{'-' * 80}")
            lines.append(f"FAILURE ANALYSIS ({len(self.failure_analysis)} errors)")
            lines.append(f"{'-' * 80}")
            for idx, failure in enumerate(self.failure_analysis[:10], 1):  # Show top 10
                lines.append(f"\n{idx}. {failure['query']} ({failure['notation']})")
                lines.append(f"   Expected: {failure['expected']} | Predicted: {failure['predicted']}")
                if failure["reason"]:
                    lines.append(f"   Reason: {failure['reason']}")

            if len(self.failure_analysis) > 10:
                lines.append(f"\n... and {len(self.failure_analysis) - 10} more errors")

        lines.append(f"\n{'=' * 80}")
        return "\n".join(lines)


def _verdict(successful: bool, allele_string: str | None) -> str:
    if successful:
        return f"annotated {allele_string}"
    return "not annotated"
