"""Annotation provider contract and API clients."""

from allelecheck.api.ensembl import EnsemblClient
from allelecheck.api.provider import AnnotationProvider

__all__ = ["AnnotationProvider", "EnsemblClient"]
