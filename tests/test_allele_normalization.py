"""Tests for allele normalization utilities."""

import pytest

from allelecheck.utils.allele_normalization import AlleleReducer, reduce_allele_string, reverse_complement


class TestAlleleReducer:
    """Tests for AlleleReducer class."""

    def test_common_prefix_length(self):
        """Test leading run detection."""
        assert AlleleReducer.common_prefix_length("TC", "TT") == 1
        assert AlleleReducer.common_prefix_length("TC", "GG") == 0
        assert AlleleReducer.common_prefix_length("ATG", "ATGC") == 3

    def test_common_suffix_length(self):
        """Test trailing run detection."""
        assert AlleleReducer.common_suffix_length("TC", "GC") == 1
        assert AlleleReducer.common_suffix_length("TC", "GG") == 0

    def test_exemptions(self):
        """Test which pairs are reported verbatim."""
        assert AlleleReducer.is_exempt("-", "T")
        assert AlleleReducer.is_exempt("TC", "-")
        assert AlleleReducer.is_exempt("TC", "TC")
        assert not AlleleReducer.is_exempt("TC", "TT")

    def test_prefix_stripped_before_suffix(self):
        """Test that the leading run is stripped first."""
        # Stripping the suffix first would give AT/AG
        assert AlleleReducer.reduce("ATT", "AGT") == ("T", "G")

    def test_side_stripped_to_nothing(self):
        """Test that an emptied side is rendered as the empty marker."""
        assert AlleleReducer.reduce("ATG", "ATGC") == ("-", "C")
        assert AlleleReducer.reduce("CAT", "AT") == ("C", "-")


class TestReduceAlleleString:
    """Tests for reduce_allele_string."""

    @pytest.mark.parametrize(
        "reference,variant,expected",
        [
            ("C", "T", "C/T"),
            ("TC", "TT", "C/T"),
            ("TC", "GG", "TC/GG"),
            ("TC", "GC", "T/G"),
            ("TC", "TC", "TC/TC"),
            ("C", "-", "C/-"),
            ("TC", "-", "TC/-"),
            ("-", "TT", "-/TT"),
            ("-", "-", "-/-"),
            ("C", "TT", "C/TT"),
            ("TC", "A", "TC/A"),
        ],
    )
    def test_reduction(self, reference, variant, expected):
        """Test minimal allele strings."""
        assert reduce_allele_string(reference, variant) == expected

    def test_case_sensitive(self):
        """Test that case differences are not treated as shared bases."""
        assert reduce_allele_string("tc", "TT") == "tc/TT"


class TestReverseComplement:
    """Tests for reverse_complement."""

    def test_reverse_complement(self):
        """Test reverse complement with case preserved."""
        assert reverse_complement("TC") == "GA"
        assert reverse_complement("acgN") == "Ncgt"
