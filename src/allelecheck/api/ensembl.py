"""Ensembl REST client acting as the annotation provider.

ARCHITECTURE:
    GenomicPosition → /sequence/region (reference bases) → /vep/region (annotation) → RawProviderAnnotation

The reference bases come straight from the Ensembl reference genome, so the
engine can check the caller's asserted reference against them.

Key Design:
- Async HTTP with connection pooling (httpx.AsyncClient)
- Retry with exponential backoff (tenacity)
- Structured parsing to typed response models
- Context manager for session cleanup
- 400/404 mean "not found" and yield succeeded=False; anything else that
  keeps failing, or any reply that does not parse, raises ProviderUnavailableError
"""

import logging
import os
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from allelecheck.api.ensembl_models import (
    SequenceRegion,
    SequenceRegionList,
    VEPAnnotation,
    VEPAnnotationList,
)
from allelecheck.constants import (
    EMPTY_SEQUENCE_MARKER,
    ENSEMBL_BASE_URL,
    ENSEMBL_DEFAULT_TIMEOUT,
    ENSEMBL_MAX_POST_SIZE,
    ENSEMBL_SPECIES,
    ENV_ENSEMBL_URL,
    ENV_TIMEOUT,
    ISOFORM_OVERRIDE_OPTIONS,
    NOT_FOUND_STATUS_CODES,
)
from allelecheck.exceptions import ProviderUnavailableError
from allelecheck.models.annotation import RawProviderAnnotation
from allelecheck.models.position import GenomicPosition
from allelecheck.utils.allele_normalization import reverse_complement

logger = logging.getLogger(__name__)


class EnsemblClient:
    """Client for the Ensembl REST API.

    Resolves the reference allele for each queried interval and fetches the
    VEP annotation for the requested edit applied to that reference.

    API Documentation: https://rest.ensembl.org/
    """

    HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}
    INVERSION_ALLELE = "INV"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        species: str = ENSEMBL_SPECIES,
    ) -> None:
        """Initialize the Ensembl client.

        Args:
            base_url: REST server root; defaults to $ALLELECHECK_ENSEMBL_URL or rest.ensembl.org
            timeout: Request timeout in seconds; defaults to $ALLELECHECK_TIMEOUT or 30
            species: Ensembl species name
        """
        self.base_url = (base_url or os.environ.get(ENV_ENSEMBL_URL) or ENSEMBL_BASE_URL).rstrip("/")
        if timeout is None:
            timeout = float(os.environ.get(ENV_TIMEOUT, ENSEMBL_DEFAULT_TIMEOUT))
        self.timeout = timeout
        self.species = species
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "EnsemblClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout, headers=self.HEADERS)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=self.HEADERS)
        return self._client

    @retry(
        retry=retry_if_exception_type((httpx.HTTPError, httpx.TimeoutException)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any | None:
        """Execute a request against the Ensembl REST API.

        Returns:
            Decoded JSON, or None when Ensembl reports the query as not found

        Raises:
            httpx.HTTPError: If the request keeps failing after retries
        """
        client = self._get_client()
        response = await client.request(method, f"{self.base_url}{path}", params=params, json=json_body)

        if response.status_code in NOT_FOUND_STATUS_CODES:
            logger.debug(f"Ensembl {method} {path} returned {response.status_code}: {response.text[:200]}")
            return None

        response.raise_for_status()
        return response.json()

    @staticmethod
    def region(position: GenomicPosition) -> str:
        """Sequence region string for a position's interval."""
        return f"{position.chromosome}:{position.start}..{position.end}:1"

    @staticmethod
    def vep_coordinates(position: GenomicPosition) -> tuple[int, int]:
        """VEP start/end; insertions use Ensembl's start = end + 1 convention."""
        if position.reference_allele.is_empty:
            return position.end, position.start
        return position.start, position.end

    def actual_variant(self, position: GenomicPosition, actual_reference: str) -> str:
        """Variant allele over the queried interval given the real reference."""
        if position.variant_allele.is_unspecified:
            return reverse_complement(actual_reference)
        return str(position.variant_allele)

    def vep_input(self, position: GenomicPosition, actual_reference: str, variant_id: str) -> str:
        """Ensembl default-format input line: chrom start end allele strand id."""
        start, end = self.vep_coordinates(position)
        if position.variant_allele.is_unspecified:
            allele = self.INVERSION_ALLELE
        else:
            allele = f"{actual_reference}/{position.variant_allele}"
        return f"{position.chromosome} {start} {end} {allele} + {variant_id}"

    @staticmethod
    def vep_options(
        isoform_override_source: str | None, token_map: dict[str, str] | None
    ) -> dict[str, Any]:
        """VEP request options for an isoform override source plus caller tokens."""
        options: dict[str, Any] = {}
        if isoform_override_source:
            source = isoform_override_source.lower()
            if source in ISOFORM_OVERRIDE_OPTIONS:
                options.update(ISOFORM_OVERRIDE_OPTIONS[source])
            else:
                logger.warning(f"Unknown isoform override source '{isoform_override_source}', using defaults")
        if token_map:
            options.update(token_map)
        return options

    @staticmethod
    def _not_found(position: GenomicPosition, message: str) -> RawProviderAnnotation:
        return RawProviderAnnotation(position=position, succeeded=False, error_message=message)

    async def _fetch_reference(self, position: GenomicPosition) -> str | None:
        if position.reference_allele.is_empty:
            return EMPTY_SEQUENCE_MARKER

        data = await self._request("GET", f"/sequence/region/{self.species}/{self.region(position)}")
        if data is None:
            return None
        return SequenceRegion.model_validate(data).seq

    async def _fetch_references(self, positions: list[GenomicPosition]) -> dict[str, str]:
        regions = sorted({self.region(p) for p in positions if not p.reference_allele.is_empty})
        if not regions:
            return {}

        data = await self._request(
            "POST", f"/sequence/region/{self.species}", json_body={"regions": regions}
        )
        sequences = SequenceRegionList.validate_python(data or [])
        return {sequence.query: sequence.seq for sequence in sequences if sequence.query}

    async def lookup(
        self,
        position: GenomicPosition,
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> RawProviderAnnotation:
        """Look up one position.

        Args:
            position: Query position
            isoform_override_source: Transcript set to annotate against (refseq, mane, canonical)
            token_map: Extra VEP options forwarded verbatim
            fields: Top-level annotation fields to keep

        Returns:
            Raw annotation; succeeded=False when Ensembl cannot resolve the query

        Raises:
            ProviderUnavailableError: If Ensembl cannot be reached or its reply is malformed
        """
        options = self.vep_options(isoform_override_source, token_map)
        try:
            actual_reference = await self._fetch_reference(position)
            if actual_reference is None:
                return self._not_found(position, "Reference sequence not available")

            start, end = self.vep_coordinates(position)
            allele = (
                self.INVERSION_ALLELE
                if position.variant_allele.is_unspecified
                else str(position.variant_allele)
            )
            data = await self._request(
                "GET",
                f"/vep/{self.species}/region/{position.chromosome}:{start}-{end}:1/{allele}",
                params=options or None,
            )
            annotations = VEPAnnotationList.validate_python(data or [])
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            raise ProviderUnavailableError(f"Ensembl request failed for {position}: {e}") from e

        if not annotations:
            return self._not_found(position, "VEP returned no annotation")

        annotation = annotations[0]
        return RawProviderAnnotation(
            position=position,
            succeeded=True,
            actual_alleles=(actual_reference, self.actual_variant(position, actual_reference)),
            annotation=annotation.to_payload(fields),
        )

    async def lookup_batch(
        self,
        positions: list[GenomicPosition],
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> list[RawProviderAnnotation]:
        """Look up many positions with POST requests, chunked to the Ensembl limit.

        Results follow VEP's response order, which is not guaranteed to match
        the input; unresolved positions are appended as unsuccessful.
        """
        options = self.vep_options(isoform_override_source, token_map)
        results: list[RawProviderAnnotation] = []
        for offset in range(0, len(positions), ENSEMBL_MAX_POST_SIZE):
            chunk = positions[offset:offset + ENSEMBL_MAX_POST_SIZE]
            try:
                results.extend(await self._lookup_chunk(chunk, options, fields))
            except (httpx.HTTPError, ValidationError, ValueError) as e:
                raise ProviderUnavailableError(f"Ensembl batch request failed: {e}") from e
        return results

    async def _lookup_chunk(
        self,
        positions: list[GenomicPosition],
        options: dict[str, Any],
        fields: list[str] | None,
    ) -> list[RawProviderAnnotation]:
        sequences = await self._fetch_references(positions)

        pending: dict[str, tuple[GenomicPosition, str]] = {}
        lines: list[str] = []
        for idx, position in enumerate(positions):
            if position.reference_allele.is_empty:
                actual_reference = EMPTY_SEQUENCE_MARKER
            else:
                actual_reference = sequences.get(self.region(position))
            if actual_reference is None:
                continue
            variant_id = f"q{idx}"
            pending[variant_id] = (position, actual_reference)
            lines.append(self.vep_input(position, actual_reference, variant_id))

        annotations: list[VEPAnnotation] = []
        if lines:
            data = await self._request(
                "POST", f"/vep/{self.species}/region", params=options or None, json_body={"variants": lines}
            )
            annotations = VEPAnnotationList.validate_python(data or [])

        results: list[RawProviderAnnotation] = []
        answered: set[str] = set()
        for annotation in annotations:
            if annotation.id not in pending or annotation.id in answered:
                logger.warning(f"Ignoring unexpected VEP result with id {annotation.id!r}")
                continue
            position, actual_reference = pending[annotation.id]
            answered.add(annotation.id)
            results.append(
                RawProviderAnnotation(
                    position=position,
                    succeeded=True,
                    actual_alleles=(actual_reference, self.actual_variant(position, actual_reference)),
                    annotation=annotation.to_payload(fields),
                )
            )

        for idx, position in enumerate(positions):
            variant_id = f"q{idx}"
            if variant_id not in answered:
                message = "VEP returned no annotation" if variant_id in pending else "Reference sequence not available"
                results.append(self._not_found(position, message))

        return results

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
