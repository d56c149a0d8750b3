"""Tests for data models."""

import pytest
from pydantic import ValidationError

from allelecheck.models.annotation import FailureReason, RawProviderAnnotation, VerifiedAnnotation
from allelecheck.models.position import Allele, AlleleKind, GenomicPosition, Notation
from allelecheck.models.validation import GoldStandardEntry, ValidationMetrics, ValidationResult


class TestAllele:
    """Tests for the three-state Allele model."""

    def test_states_are_distinct(self):
        """Test that explicit, empty and unspecified never compare equal."""
        explicit = Allele.explicit("C")
        empty = Allele.empty()
        unspecified = Allele.unspecified()

        assert explicit.kind == AlleleKind.EXPLICIT
        assert empty.kind == AlleleKind.EMPTY
        assert unspecified.kind == AlleleKind.UNSPECIFIED
        assert len({explicit, empty, unspecified}) == 3

    def test_rendering(self):
        """Test string forms of each state."""
        assert str(Allele.explicit("TC")) == "TC"
        assert str(Allele.empty()) == "-"
        assert str(Allele.unspecified()) == ""

    def test_from_token(self):
        """Test that '-' is the empty marker and anything else is explicit."""
        assert Allele.from_token("-").is_empty
        assert Allele.from_token("tc").sequence == "tc"

    def test_case_preserved(self):
        """Test that lowercase bases are kept as given."""
        assert Allele.explicit("tc") != Allele.explicit("TC")

    @pytest.mark.parametrize("sequence", ["", "TX", "T-C", "--"])
    def test_invalid_explicit(self, sequence):
        """Test that explicit alleles need nucleotide bases."""
        with pytest.raises(ValidationError):
            Allele.explicit(sequence)

    def test_empty_cannot_carry_sequence(self):
        """Test that only explicit alleles have bases."""
        with pytest.raises(ValidationError):
            Allele(kind=AlleleKind.EMPTY, sequence="C")

    def test_frozen(self):
        """Test that alleles are immutable."""
        allele = Allele.explicit("C")
        with pytest.raises(ValidationError):
            allele.sequence = "T"


class TestGenomicPosition:
    """Tests for GenomicPosition model."""

    def test_creation(self, sample_position):
        """Test creating a position."""
        assert sample_position.chromosome == "5"
        assert sample_position.start == sample_position.end == 138163256
        assert str(sample_position) == "5,138163256,138163256,C,T"

    def test_equality_ignores_original_input(self, sample_position):
        """Test that equality and hashing skip the echoed query."""
        other = sample_position.model_copy(update={"original_input": "5, 138163256, 138163256, C, T"})

        assert other == sample_position
        assert hash(other) == hash(sample_position)
        assert len({other, sample_position}) == 1

    def test_alleles_participate_in_equality(self, sample_position):
        """Test that an unspecified reference differs from an explicit one."""
        other = sample_position.model_copy(update={"reference_allele": Allele.unspecified()})

        assert other != sample_position

    def test_start_after_end(self):
        """Test that inverted intervals are rejected."""
        with pytest.raises(ValidationError):
            GenomicPosition(
                chromosome="5",
                start=138163257,
                end=138163256,
                reference_allele=Allele.explicit("C"),
                variant_allele=Allele.explicit("T"),
            )

    def test_coordinates_must_be_positive(self):
        """Test that coordinates are 1-based."""
        with pytest.raises(ValidationError):
            GenomicPosition(
                chromosome="5",
                start=0,
                end=1,
                reference_allele=Allele.explicit("C"),
                variant_allele=Allele.explicit("T"),
            )

    def test_unspecified_renders_blank(self):
        """Test the canonical form of an unspecified reference."""
        position = GenomicPosition(
            chromosome="5",
            start=138163256,
            end=138163256,
            reference_allele=Allele.unspecified(),
            variant_allele=Allele.empty(),
        )

        assert str(position) == "5,138163256,138163256,,-"


class TestAnnotationModels:
    """Tests for provider and verified annotation models."""

    def test_raw_annotation_requires_alleles_on_success(self, sample_position):
        """Test that successful provider answers carry alleles."""
        with pytest.raises(ValidationError):
            RawProviderAnnotation(position=sample_position, succeeded=True)

    def test_raw_annotation_rejects_alleles_on_failure(self, sample_position):
        """Test that failed provider answers carry no alleles."""
        with pytest.raises(ValidationError):
            RawProviderAnnotation(position=sample_position, succeeded=False, actual_alleles=("C", "T"))

    def test_raw_annotation_accessors(self, sample_position):
        """Test reference and variant accessors."""
        raw = RawProviderAnnotation(position=sample_position, succeeded=True, actual_alleles=("C", "T"))

        assert raw.actual_reference == "C"
        assert raw.actual_variant == "T"

    def test_success(self):
        """Test a successful verified annotation."""
        annotation = VerifiedAnnotation.success("q", "v", "C/T", {"id": "x"})

        assert annotation.successfully_annotated
        assert annotation.failure_reason is None
        assert "C/T" in annotation.to_report()

    def test_failure_has_no_allele_data(self):
        """Test an unsuccessful verified annotation."""
        annotation = VerifiedAnnotation.failure("q", "v", FailureReason.REFERENCE_MISMATCH)

        assert not annotation.successfully_annotated
        assert annotation.allele_string is None
        assert annotation.annotation is None
        assert "reference_mismatch" in annotation.to_report()

    def test_partial_population_rejected(self):
        """Test that an unsuccessful annotation cannot carry an allele string."""
        with pytest.raises(ValidationError):
            VerifiedAnnotation(
                original_query="q",
                variant="v",
                successfully_annotated=False,
                allele_string="C/T",
                failure_reason=FailureReason.REFERENCE_MISMATCH,
            )

        with pytest.raises(ValidationError):
            VerifiedAnnotation(original_query="q", variant="v", successfully_annotated=True)


class TestValidationModels:
    """Tests for validation models."""

    def test_gold_standard_entry_defaults(self):
        """Test gold standard entry defaults to genomic locations."""
        entry = GoldStandardEntry(query="5,138163256,138163256,C,T", expected_successfully_annotated=True)

        assert entry.notation == Notation.GENOMIC_LOCATION
        assert entry.expected_allele_string is None

    def test_validation_result_correct(self):
        """Test correct validation result."""
        result = ValidationResult(
            query="5,138163256,138163256,C,T",
            notation=Notation.GENOMIC_LOCATION,
            expected_successfully_annotated=True,
            predicted_successfully_annotated=True,
            expected_allele_string="C/T",
            predicted_allele_string="C/T",
        )

        assert result.is_correct
        assert not result.is_false_accept
        assert not result.is_false_reject

    def test_validation_result_allele_mismatch(self):
        """Test that a wrong allele string is incorrect."""
        result = ValidationResult(
            query="5,138163255,138163256,TC,TT",
            notation=Notation.GENOMIC_LOCATION,
            expected_successfully_annotated=True,
            predicted_successfully_annotated=True,
            expected_allele_string="C/T",
            predicted_allele_string="TC/TT",
        )

        assert not result.is_correct

    def test_validation_result_false_accept(self):
        """Test false accept detection."""
        result = ValidationResult(
            query="5,138163256,138163256,A,T",
            notation=Notation.GENOMIC_LOCATION,
            expected_successfully_annotated=False,
            predicted_successfully_annotated=True,
            predicted_allele_string="C/T",
        )

        assert not result.is_correct
        assert result.is_false_accept

    def test_validation_metrics(self):
        """Test metrics calculation."""
        results = [
            ValidationResult(
                query="a",
                notation=Notation.GENOMIC_LOCATION,
                expected_successfully_annotated=True,
                predicted_successfully_annotated=True,
                expected_allele_string="C/T",
                predicted_allele_string="C/T",
            ),
            ValidationResult(
                query="b",
                notation=Notation.GENOMIC_LOCATION,
                expected_successfully_annotated=False,
                predicted_successfully_annotated=False,
                failure_reason=FailureReason.REFERENCE_MISMATCH,
            ),
            ValidationResult(
                query="c",
                notation=Notation.HGVS,
                expected_successfully_annotated=True,
                predicted_successfully_annotated=False,
                expected_allele_string="C/-",
                failure_reason=FailureReason.PROVIDER_FAILED,
            ),
            ValidationResult(
                query="d",
                notation=Notation.HGVS,
                expected_successfully_annotated=True,
                predicted_successfully_annotated=False,
                error="Malformed",
            ),
        ]

        metrics = ValidationMetrics()
        metrics.calculate(results)

        assert metrics.total_cases == 4
        assert metrics.correct_predictions == 2
        assert metrics.accuracy == 0.5
        assert metrics.true_accepts == 1
        assert metrics.true_rejects == 1
        assert metrics.false_rejects == 1
        assert metrics.errors == 1
        assert len(metrics.failure_analysis) == 2
        assert metrics.failure_analysis[0]["reason"] == "provider_failed"

        report = metrics.to_report()
        assert "VERIFICATION VALIDATION REPORT" in report
        assert "Overall Accuracy: 50.00%" in report
