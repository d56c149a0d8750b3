"""Verified annotation engine combining notation parsing, provider lookup and verification.

ARCHITECTURE:
    Query → NotationParser → AnnotationProvider → verify_reference_allele → reduce_allele_string → VerifiedAnnotation

One engine per notation; the engine depends only on the parser capability
and the provider protocol.

Key Design:
- Async context manager for the provider's HTTP session lifecycle
- Parse errors propagate; reference mismatches and provider failures become
  unsuccessful annotations, never exceptions
- One provider call per batch; responses are matched back to queries by
  position, not by index, because providers may reorder them
- Stateless with no shared state
"""

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from allelecheck.api.provider import AnnotationProvider
from allelecheck.constants import ACCEPT_NOOP_EDITS_GENOMIC_LOCATION, ACCEPT_NOOP_EDITS_HGVS
from allelecheck.exceptions import CorrelationError, ProviderError
from allelecheck.models.annotation import FailureReason, RawProviderAnnotation, VerifiedAnnotation
from allelecheck.models.position import GenomicPosition, Notation, ParsedQuery
from allelecheck.notation import get_parser
from allelecheck.utils.allele_normalization import reduce_allele_string
from allelecheck.utils.logging_config import get_logger
from allelecheck.verification import VerificationVerdict, is_noop_edit, verify_reference_allele

logger = logging.getLogger(__name__)

NOOP_EDIT_DEFAULTS: dict[Notation, bool] = {
    Notation.GENOMIC_LOCATION: ACCEPT_NOOP_EDITS_GENOMIC_LOCATION,
    Notation.HGVS: ACCEPT_NOOP_EDITS_HGVS,
}

Query = str | GenomicPosition


def correlate_responses(
    positions: Sequence[GenomicPosition], responses: Sequence[RawProviderAnnotation]
) -> Mapping[GenomicPosition, RawProviderAnnotation]:
    """Match batch responses to the requested positions.

    Every requested position must be answered exactly once, and nothing else
    may be answered.

    Raises:
        CorrelationError: On a duplicate, unrequested or missing response
    """
    requested = set(positions)
    by_position: dict[GenomicPosition, RawProviderAnnotation] = {}
    for response in responses:
        if response.position not in requested:
            raise CorrelationError(f"Provider answered unrequested position {response.position}")
        if response.position in by_position:
            raise CorrelationError(f"Provider answered position {response.position} more than once")
        by_position[response.position] = response

    missing = [position for position in positions if position not in by_position]
    if missing:
        shown = ", ".join(str(position) for position in missing[:5])
        raise CorrelationError(f"Provider did not answer {len(missing)} position(s): {shown}")

    return MappingProxyType(by_position)


class VerifiedAnnotationEngine:
    """
    Engine for verified variant annotation.

    Parses queries in one notation, looks them up with the provider and only
    reports an annotation as successful when the caller's reference allele
    matches the provider's reference genome.
    """

    def __init__(
        self,
        provider: AnnotationProvider | None = None,
        notation: Notation = Notation.GENOMIC_LOCATION,
        accept_noop_edits: bool | None = None,
        enable_logging: bool = False,
    ):
        if provider is None:
            from allelecheck.api.ensembl import EnsemblClient
            provider = EnsemblClient()
        self.provider = provider
        self.notation = Notation(notation)
        self.parser = get_parser(self.notation)
        if accept_noop_edits is None:
            accept_noop_edits = NOOP_EDIT_DEFAULTS[self.notation]
        self.accept_noop_edits = accept_noop_edits
        self.decision_logger = get_logger() if enable_logging else None

    @classmethod
    def for_genomic_locations(cls, provider: AnnotationProvider | None = None, **kwargs: Any) -> "VerifiedAnnotationEngine":
        return cls(provider, notation=Notation.GENOMIC_LOCATION, **kwargs)

    @classmethod
    def for_hgvs(cls, provider: AnnotationProvider | None = None, **kwargs: Any) -> "VerifiedAnnotationEngine":
        return cls(provider, notation=Notation.HGVS, **kwargs)

    async def __aenter__(self):
        """Open the provider's HTTP session if it has one."""
        if hasattr(self.provider, "__aenter__"):
            await self.provider.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the provider's HTTP session to prevent resource leaks."""
        if hasattr(self.provider, "__aexit__"):
            await self.provider.__aexit__(exc_type, exc_val, exc_tb)

    def _parse(self, query: Query) -> tuple[str, ParsedQuery]:
        """Return the caller-visible query key and the parsed query."""
        if isinstance(query, GenomicPosition):
            if self.notation != Notation.GENOMIC_LOCATION:
                raise TypeError(f"{self.notation.value} engine only accepts query strings")
            return query.original_input or str(query), self.parser.from_position(query)
        return query, self.parser.parse(query)

    async def get_annotation(
        self,
        query: Query,
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> VerifiedAnnotation:
        """Annotate and verify a single query.

        Args:
            query: Query text, or a GenomicPosition for genomic-location engines
            isoform_override_source: Passed through to the provider
            token_map: Passed through to the provider
            fields: Passed through to the provider

        Returns:
            VerifiedAnnotation; unsuccessful when verification fails

        Raises:
            MalformedNotationError: If the query does not parse
            UnsupportedNotationError: If the query uses an unsupported edit type
        """
        original_query, parsed = self._parse(query)
        request_id = self._log_request([original_query], batch=False)

        raw = None
        if parsed.is_valid:
            try:
                raw = await self.provider.lookup(
                    parsed.position,
                    isoform_override_source=isoform_override_source,
                    token_map=token_map,
                    fields=fields,
                )
            except ProviderError as e:
                logger.warning(f"Provider lookup failed for {original_query}: {e}")
                self._log_error(request_id, [original_query], e)

        return self._finalize(request_id, original_query, parsed, raw)

    async def get_annotations(
        self,
        queries: Sequence[Query],
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> list[VerifiedAnnotation]:
        """Annotate and verify a batch of queries with a single provider call.

        Results are returned in the order the queries were submitted,
        whatever order the provider answers in.

        Raises:
            MalformedNotationError: If any query does not parse
            UnsupportedNotationError: If any query uses an unsupported edit type
            CorrelationError: If provider responses cannot be matched one-to-one
        """
        parsed_queries = [self._parse(query) for query in queries]
        original_queries = [original_query for original_query, _ in parsed_queries]
        request_id = self._log_request(original_queries, batch=True)

        # Distinct positions in submission order; equal positions share a response
        positions = list(dict.fromkeys(parsed.position for _, parsed in parsed_queries if parsed.is_valid))

        by_position: Mapping[GenomicPosition, RawProviderAnnotation] = MappingProxyType({})
        if positions:
            try:
                responses = await self.provider.lookup_batch(
                    positions,
                    isoform_override_source=isoform_override_source,
                    token_map=token_map,
                    fields=fields,
                )
            except ProviderError as e:
                logger.warning(f"Provider batch lookup failed for {len(positions)} positions: {e}")
                self._log_error(request_id, original_queries, e)
            else:
                try:
                    by_position = correlate_responses(positions, responses)
                except CorrelationError as e:
                    self._log_error(request_id, original_queries, e)
                    raise

        return [
            self._finalize(request_id, original_query, parsed, by_position.get(parsed.position))
            for original_query, parsed in parsed_queries
        ]

    def _verify(
        self, original_query: str, parsed: ParsedQuery, raw: RawProviderAnnotation | None
    ) -> VerifiedAnnotation:
        variant = self.parser.format(parsed)

        if not parsed.is_valid:
            logger.debug(f"{original_query}: {parsed.invalid_reason}")
            return VerifiedAnnotation.failure(original_query, variant, FailureReason.INVALID_QUERY)

        if raw is None or not raw.succeeded:
            return VerifiedAnnotation.failure(original_query, variant, FailureReason.PROVIDER_FAILED)

        actual_reference, actual_variant = raw.actual_alleles
        verdict = verify_reference_allele(parsed.position.reference_allele, actual_reference)
        if verdict == VerificationVerdict.REJECTED:
            logger.debug(
                f"{original_query}: asserted reference {parsed.position.reference_allele} "
                f"does not match {actual_reference}"
            )
            return VerifiedAnnotation.failure(original_query, variant, FailureReason.REFERENCE_MISMATCH)

        if not self.accept_noop_edits and is_noop_edit(actual_reference, actual_variant):
            return VerifiedAnnotation.failure(original_query, variant, FailureReason.NO_OP_EDIT)

        return VerifiedAnnotation.success(
            original_query,
            variant,
            reduce_allele_string(actual_reference, actual_variant),
            raw.annotation,
        )

    def _finalize(
        self,
        request_id: str | None,
        original_query: str,
        parsed: ParsedQuery,
        raw: RawProviderAnnotation | None,
    ) -> VerifiedAnnotation:
        result = self._verify(original_query, parsed, raw)
        if self.decision_logger and request_id:
            reference = parsed.position.reference_allele
            self.decision_logger.log_decision(
                request_id,
                result,
                asserted_reference=None if reference.is_unspecified else str(reference),
                actual_alleles=raw.actual_alleles if raw else None,
            )
        return result

    def _log_request(self, queries: list[str], batch: bool) -> str | None:
        if self.decision_logger:
            return self.decision_logger.log_request(self.notation.value, queries, batch)
        return None

    def _log_error(self, request_id: str | None, queries: list[str], error: Exception) -> None:
        if self.decision_logger and request_id:
            self.decision_logger.log_error(request_id, queries, error)
