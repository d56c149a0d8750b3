"""Validator for benchmarking verification verdicts against a gold standard.

ARCHITECTURE:
    Gold Standard (JSON) → Validator → VerifiedAnnotationEngine → ValidationMetrics

Runs verified annotation against curated expectations and computes accuracy
plus false accept / false reject counts.

Key Design:
- Semaphore for concurrency control
- Flexible input: list or dict-wrapped JSON
- One engine per notation, sharing a single provider
"""

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from allelecheck.api.provider import AnnotationProvider
from allelecheck.engine import VerifiedAnnotationEngine
from allelecheck.exceptions import NotationError
from allelecheck.models.position import Notation
from allelecheck.models.validation import GoldStandardEntry, ValidationMetrics, ValidationResult

logger = logging.getLogger(__name__)


class Validator:
    """Validator for benchmarking verification against a gold standard dataset."""

    def __init__(self, provider: AnnotationProvider) -> None:
        """Initialize the validator.

        Args:
            provider: Annotation provider shared by the per-notation engines
        """
        self.provider = provider
        self._engines: dict[Notation, VerifiedAnnotationEngine] = {}
        self.last_results: list[ValidationResult] = []

    def engine_for(self, notation: Notation) -> VerifiedAnnotationEngine:
        if notation not in self._engines:
            self._engines[notation] = VerifiedAnnotationEngine(self.provider, notation=notation)
        return self._engines[notation]

    def load_gold_standard(self, path: str | Path) -> list[GoldStandardEntry]:
        """Load gold standard dataset from JSON file.

        Args:
            path: Path to gold standard JSON file

        Returns:
            List of gold standard entries

        Raises:
            FileNotFoundError: If file does not exist
            ValueError: If JSON is invalid
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Gold standard file not found: {path}")

        logger.info(f"Loading gold standard from {path}")

        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in gold standard file: {str(e)}")

        # Handle both list and dict with "entries" key
        if isinstance(data, dict) and "entries" in data:
            entries_data = data["entries"]
        elif isinstance(data, list):
            entries_data = data
        else:
            raise ValueError("Invalid gold standard format")

        entries = []
        skipped = 0
        for idx, entry_data in enumerate(entries_data):
            try:
                entries.append(GoldStandardEntry(**entry_data))
            except (ValidationError, TypeError) as e:
                skipped += 1
                query = entry_data.get('query', '?') if isinstance(entry_data, dict) else '?'
                logger.warning(f"Skipping entry {idx} ({query}): {e}")

        if skipped:
            logger.warning(f"Skipped {skipped} invalid entries out of {len(entries_data)}")
        logger.info(f"Loaded {len(entries)} valid gold standard entries")

        return entries

    async def validate_single(self, entry: GoldStandardEntry) -> ValidationResult:
        """Validate a single gold standard entry.

        Parse errors are recorded on the result instead of being raised.
        """
        engine = self.engine_for(entry.notation)
        try:
            annotation = await engine.get_annotation(entry.query)
        except NotationError as e:
            return ValidationResult(
                query=entry.query,
                notation=entry.notation,
                expected_successfully_annotated=entry.expected_successfully_annotated,
                predicted_successfully_annotated=False,
                expected_allele_string=entry.expected_allele_string,
                error=str(e),
            )

        return ValidationResult(
            query=entry.query,
            notation=entry.notation,
            expected_successfully_annotated=entry.expected_successfully_annotated,
            predicted_successfully_annotated=annotation.successfully_annotated,
            expected_allele_string=entry.expected_allele_string,
            predicted_allele_string=annotation.allele_string,
            failure_reason=annotation.failure_reason,
        )

    async def validate_dataset(
        self,
        gold_standard: list[GoldStandardEntry],
        max_concurrent: int = 3,
    ) -> ValidationMetrics:
        """Validate all entries in gold standard dataset.

        Args:
            gold_standard: List of gold standard entries
            max_concurrent: Maximum concurrent validations

        Returns:
            Overall validation metrics
        """
        logger.info(f"Starting validation of {len(gold_standard)} entries")

        semaphore = asyncio.Semaphore(max_concurrent)

        async def validate_with_semaphore(entry: GoldStandardEntry) -> ValidationResult:
            async with semaphore:
                return await self.validate_single(entry)

        tasks = [validate_with_semaphore(entry) for entry in gold_standard]
        self.last_results = list(await asyncio.gather(*tasks))

        metrics = ValidationMetrics()
        metrics.calculate(self.last_results)

        logger.info(
            f"Validation complete: {metrics.correct_predictions}/{metrics.total_cases} "
            f"correct ({metrics.accuracy:.1%})"
        )

        return metrics

    def save_results(
        self,
        metrics: ValidationMetrics,
        results: list[ValidationResult],
        output_path: str | Path,
    ) -> None:
        """Save validation results to JSON file.

        Args:
            metrics: Validation metrics
            results: List of validation results
            output_path: Path to save results
        """
        output_path = Path(output_path)

        output_data = {
            "metrics": metrics.model_dump(mode="json"),
            "results": [
                {**result.model_dump(mode="json"), "is_correct": result.is_correct}
                for result in results
            ],
        }

        with open(output_path, "w") as f:
            json.dump(output_data, f, indent=2)

        logger.info(f"Saved validation results to {output_path}")
