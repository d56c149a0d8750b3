"""Annotation provider contract.

The verified annotation engine depends only on this protocol. Any object with
these two coroutines can act as the provider; EnsemblClient is the bundled one.

Batch responses may come back in any order. Providers signal "could not
resolve" either by returning ``succeeded=False`` or by raising a
ProviderError subclass.
"""

from typing import Protocol

from allelecheck.models.annotation import RawProviderAnnotation
from allelecheck.models.position import GenomicPosition


class AnnotationProvider(Protocol):
    """Source of reference alleles and annotation payloads."""

    async def lookup(
        self,
        position: GenomicPosition,
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> RawProviderAnnotation:
        ...

    async def lookup_batch(
        self,
        positions: list[GenomicPosition],
        isoform_override_source: str | None = None,
        token_map: dict[str, str] | None = None,
        fields: list[str] | None = None,
    ) -> list[RawProviderAnnotation]:
        ...
