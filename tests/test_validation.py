"""Tests for validation framework."""

import json

import pytest

from allelecheck.models.annotation import FailureReason
from allelecheck.models.position import Notation
from allelecheck.models.validation import GoldStandardEntry
from allelecheck.validation.validator import Validator


class TestValidator:
    """Tests for Validator."""

    def test_load_gold_standard_list_format(self, tmp_path, make_provider):
        """Test loading gold standard from list format."""
        gold_standard_data = [
            {
                "query": "5,138163256,138163256,C,T",
                "expected_successfully_annotated": True,
                "expected_allele_string": "C/T",
                "notes": "Test",
            }
        ]

        gold_standard_path = tmp_path / "gold_standard.json"
        with open(gold_standard_path, "w") as f:
            json.dump(gold_standard_data, f)

        validator = Validator(make_provider({}))

        entries = validator.load_gold_standard(gold_standard_path)

        assert len(entries) == 1
        assert entries[0].query == "5,138163256,138163256,C,T"
        assert entries[0].notation == Notation.GENOMIC_LOCATION

    def test_load_gold_standard_dict_format(self, tmp_path, make_provider):
        """Test loading gold standard from dict format, skipping invalid entries."""
        gold_standard_data = {
            "entries": [
                {
                    "query": "5:g.138163256del",
                    "notation": "hgvs",
                    "expected_successfully_annotated": True,
                    "expected_allele_string": "C/-",
                },
                {"query": "missing verdict"},
            ]
        }

        gold_standard_path = tmp_path / "gold_standard.json"
        with open(gold_standard_path, "w") as f:
            json.dump(gold_standard_data, f)

        validator = Validator(make_provider({}))

        entries = validator.load_gold_standard(gold_standard_path)

        assert len(entries) == 1
        assert entries[0].notation == Notation.HGVS

    def test_load_gold_standard_not_found(self, make_provider):
        """Test loading non-existent gold standard."""
        validator = Validator(make_provider({}))

        with pytest.raises(FileNotFoundError):
            validator.load_gold_standard("nonexistent.json")

    def test_load_gold_standard_invalid_json(self, tmp_path, make_provider):
        """Test loading invalid JSON."""
        gold_standard_path = tmp_path / "invalid.json"
        with open(gold_standard_path, "w") as f:
            f.write("invalid json{")

        validator = Validator(make_provider({}))

        with pytest.raises(ValueError):
            validator.load_gold_standard(gold_standard_path)

    @pytest.mark.asyncio
    async def test_validate_single_correct(self, make_provider, reference_alleles):
        """Test validating a single correct verdict."""
        validator = Validator(make_provider(reference_alleles))
        entry = GoldStandardEntry(
            query="5,138163255,138163256,TC,TT",
            expected_successfully_annotated=True,
            expected_allele_string="C/T",
        )

        result = await validator.validate_single(entry)

        assert result.is_correct
        assert result.predicted_allele_string == "C/T"

    @pytest.mark.asyncio
    async def test_validate_single_incorrect(self, make_provider, reference_alleles):
        """Test validating a false reject."""
        validator = Validator(make_provider(reference_alleles))
        entry = GoldStandardEntry(
            query="5,138163256,138163256,A,T",
            expected_successfully_annotated=True,
            expected_allele_string="A/T",
        )

        result = await validator.validate_single(entry)

        assert not result.is_correct
        assert result.is_false_reject
        assert result.failure_reason == FailureReason.REFERENCE_MISMATCH

    @pytest.mark.asyncio
    async def test_validate_single_parse_error(self, make_provider):
        """Test that parse errors are captured on the result."""
        validator = Validator(make_provider({}))
        entry = GoldStandardEntry(query="5:g.138163256dup", notation=Notation.HGVS, expected_successfully_annotated=False)

        result = await validator.validate_single(entry)

        assert result.error is not None
        assert not result.is_correct

    @pytest.mark.asyncio
    async def test_validate_dataset(self, make_provider, reference_alleles, tmp_path):
        """Test validating a mixed-notation dataset."""
        validator = Validator(make_provider(reference_alleles))
        entries = [
            GoldStandardEntry(
                query="5,138163256,138163256,C,T",
                expected_successfully_annotated=True,
                expected_allele_string="C/T",
            ),
            GoldStandardEntry(query="5,138163256,138163256,A,T", expected_successfully_annotated=False),
            GoldStandardEntry(
                query="5:g.138163256del",
                notation=Notation.HGVS,
                expected_successfully_annotated=True,
                expected_allele_string="C/-",
            ),
            GoldStandardEntry(
                query="5:g.138163255_138163256delCCinsTT",
                notation=Notation.HGVS,
                expected_successfully_annotated=True,
                expected_allele_string="C/T",
            ),
        ]

        metrics = await validator.validate_dataset(entries, max_concurrent=2)

        assert metrics.total_cases == 4
        assert metrics.correct_predictions == 3
        assert metrics.false_rejects == 1
        assert metrics.accuracy == 0.75
        assert len(validator.last_results) == 4

        output_path = tmp_path / "results.json"
        validator.save_results(metrics, validator.last_results, output_path)

        with open(output_path) as f:
            saved = json.load(f)
        assert saved["metrics"]["total_cases"] == 4
        assert [r["is_correct"] for r in saved["results"]] == [True, True, True, False]

    def test_engines_share_provider(self, make_provider):
        """Test one engine per notation over a single provider."""
        provider = make_provider({})
        validator = Validator(provider)

        hgvs_engine = validator.engine_for(Notation.HGVS)

        assert validator.engine_for(Notation.HGVS) is hgvs_engine
        assert validator.engine_for(Notation.GENOMIC_LOCATION).provider is provider
