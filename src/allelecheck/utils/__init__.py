"""Utility functions."""

from allelecheck.utils.allele_normalization import (
    AlleleReducer,
    reduce_allele_string,
    reverse_complement,
)

__all__ = [
    'AlleleReducer',
    'reduce_allele_string',
    'reverse_complement',
]
