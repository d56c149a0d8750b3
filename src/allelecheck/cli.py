"""Command-line interface for AlleleCheck.

ARCHITECTURE:
    CLI Commands → VerifiedAnnotationEngine/Validator → JSON Output

Workflows: annotate (single), batch (one provider call), validate (benchmarking),
reduce (offline allele string reduction)

Key Design:
- Typer framework for auto-help and type validation
- asyncio.run() bridges sync CLI → async engine
- Flexible I/O: stdout or JSON file output
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from allelecheck.api.ensembl import EnsemblClient
from allelecheck.engine import VerifiedAnnotationEngine
from allelecheck.exceptions import NotationError, ProviderError
from allelecheck.models.position import Notation
from allelecheck.utils.allele_normalization import reduce_allele_string
from allelecheck.validation.validator import Validator

load_dotenv()

app = typer.Typer(
    name="allelecheck",
    help="Reference-verified variant annotation",
    add_completion=False,
)


def _parse_tokens(tokens: list[str]) -> dict[str, str]:
    token_map = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{token}'", param_hint="--token")
        token_map[key] = value
    return token_map


@app.command()
def annotate(
    query: str = typer.Argument(..., help="Query, e.g. 5,138163255,138163256,TC,TT or 5:g.138163256C>T"),
    hgvs: bool = typer.Option(False, "--hgvs", help="Parse the query as genomic HGVS"),
    isoform_override: Optional[str] = typer.Option(
        None, "--isoform-override", "-i", help="Transcript set (refseq, mane, canonical, ensembl)"
    ),
    token: List[str] = typer.Option([], "--token", "-t", help="Extra provider option KEY=VALUE"),
    field: List[str] = typer.Option([], "--field", "-f", help="Annotation field to keep"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSON file"),
    log: bool = typer.Option(True, "--log/--no-log", help="Enable verification decision logging"),
) -> None:
    """Annotate a single variant after verifying its reference allele."""
    token_map = _parse_tokens(token)
    notation = Notation.HGVS if hgvs else Notation.GENOMIC_LOCATION

    async def run_annotation() -> None:
        print(f"\nAnnotating {query}...")

        async with VerifiedAnnotationEngine(EnsemblClient(), notation=notation, enable_logging=log) as engine:
            annotation = await engine.get_annotation(
                query,
                isoform_override_source=isoform_override,
                token_map=token_map or None,
                fields=field or None,
            )

            print(annotation.to_report())

            if output:
                output_data = annotation.model_dump(mode="json")
                with open(output, "w") as f:
                    json.dump(output_data, f, indent=2)
                print(f"Saved to {output}")

    try:
        asyncio.run(run_annotation())
    except NotationError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def batch(
    input_file: Path = typer.Argument(..., help="Input JSON file with a list of queries"),
    hgvs: bool = typer.Option(False, "--hgvs", help="Parse the queries as genomic HGVS"),
    output: Path = typer.Option("results.json", "--output", "-o", help="Output file"),
    log: bool = typer.Option(True, "--log/--no-log", help="Enable verification decision logging"),
) -> None:
    """Batch annotate multiple variants with a single provider request."""

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}")
        raise typer.Exit(1)

    notation = Notation.HGVS if hgvs else Notation.GENOMIC_LOCATION

    async def run_batch() -> None:
        with open(input_file, "r") as f:
            queries = json.load(f)

        if not isinstance(queries, list) or not all(isinstance(q, str) for q in queries):
            print("Error: Input file must contain a JSON list of query strings")
            raise typer.Exit(1)

        print(f"\nLoaded {len(queries)} queries from {input_file}")

        async with VerifiedAnnotationEngine(EnsemblClient(), notation=notation, enable_logging=log) as engine:
            print(f"Annotating {len(queries)} queries...")
            annotations = await engine.get_annotations(queries)

            output_data = [annotation.model_dump(mode="json") for annotation in annotations]
            with open(output, "w") as f:
                json.dump(output_data, f, indent=2)

            annotated = sum(1 for annotation in annotations if annotation.successfully_annotated)
            print(f"\nSuccessfully annotated {annotated}/{len(queries)} queries")
            print(f"Results saved to {output}")

            # Simple failure counts
            reason_counts = {}
            for annotation in annotations:
                if annotation.failure_reason:
                    reason = annotation.failure_reason.value
                    reason_counts[reason] = reason_counts.get(reason, 0) + 1

            if reason_counts:
                print("\nFailure Reasons:")
                for reason, count in sorted(reason_counts.items()):
                    print(f"  {reason}: {count}")

    try:
        asyncio.run(run_batch())
    except (NotationError, ProviderError) as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def validate(
    gold_standard: Path = typer.Argument(..., help="Gold standard JSON file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    max_concurrent: int = typer.Option(3, "--max-concurrent", "-c", help="Max concurrent"),
) -> None:
    """Validate verification verdicts against a gold standard."""

    if not gold_standard.exists():
        print(f"Error: Gold standard file not found: {gold_standard}")
        raise typer.Exit(1)

    async def run_validation() -> None:
        async with EnsemblClient() as client:
            validator = Validator(client)

            entries = validator.load_gold_standard(gold_standard)
            print(f"\nLoaded {len(entries)} gold standard entries")

            print("Running validation...")
            metrics = await validator.validate_dataset(entries, max_concurrent=max_concurrent)

            print(metrics.to_report())

            if output:
                validator.save_results(metrics, validator.last_results, output)
                print(f"\nDetailed results saved to {output}")

    try:
        asyncio.run(run_validation())
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def reduce(
    reference: str = typer.Argument(..., help="Reference allele, '-' for none"),
    variant: str = typer.Argument(..., help="Variant allele, '-' for none"),
) -> None:
    """Reduce a reference/variant pair to its minimal allele string."""
    print(reduce_allele_string(reference, variant))


@app.command()
def version() -> None:
    """Show version information."""
    from allelecheck import __version__
    print(f"AlleleCheck version {__version__}")


if __name__ == "__main__":
    app()
