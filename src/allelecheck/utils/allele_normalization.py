"""Allele normalization utilities.

Providers may report an allele pair spanning the whole queried interval even
when only part of it changed (TC/TT for a single C>T). Minimal-representation
reduction trims the unchanged flanking bases:

- TC/TT -> C/T (shared leading T)
- TC/GG -> TC/GG (nothing shared)
- C/-   -> C/- (empty side, reported as-is)
- TC/TC -> TC/TC (no-op edit, reported as-is rather than trimmed to nothing)
"""

from allelecheck.constants import COMPLEMENT, EMPTY_SEQUENCE_MARKER


class AlleleReducer:
    """Reduces reference/variant allele pairs to their minimal representation."""

    EMPTY = EMPTY_SEQUENCE_MARKER

    @staticmethod
    def common_prefix_length(reference: str, variant: str) -> int:
        length = 0
        for ref_base, var_base in zip(reference, variant):
            if ref_base != var_base:
                break
            length += 1
        return length

    @staticmethod
    def common_suffix_length(reference: str, variant: str) -> int:
        length = 0
        for ref_base, var_base in zip(reversed(reference), reversed(variant)):
            if ref_base != var_base:
                break
            length += 1
        return length

    @classmethod
    def is_exempt(cls, reference: str, variant: str) -> bool:
        """Pairs reported verbatim: either side empty, or a no-op edit."""
        return reference == cls.EMPTY or variant == cls.EMPTY or reference == variant

    @classmethod
    def reduce(cls, reference: str, variant: str) -> tuple[str, str]:
        """Strip the common leading run, then the common trailing run of what remains.

        Returns:
            (reference, variant) with '-' for a side stripped to nothing
        """
        if cls.is_exempt(reference, variant):
            return reference, variant

        prefix = cls.common_prefix_length(reference, variant)
        reference, variant = reference[prefix:], variant[prefix:]

        suffix = cls.common_suffix_length(reference, variant)
        if suffix:
            reference, variant = reference[:-suffix], variant[:-suffix]

        return reference or cls.EMPTY, variant or cls.EMPTY


# Convenience functions for common operations

def reduce_allele_string(reference: str, variant: str) -> str:
    """Reduce a reference/variant pair to its minimal 'reference/variant' string.

    Args:
        reference: Provider reference allele ('-' for none)
        variant: Provider variant allele ('-' for none)

    Returns:
        Minimal allele string

    Examples:
        >>> reduce_allele_string('TC', 'TT')
        'C/T'

        >>> reduce_allele_string('TC', 'GG')
        'TC/GG'

        >>> reduce_allele_string('TC', 'TC')
        'TC/TC'

        >>> reduce_allele_string('C', '-')
        'C/-'
    """
    reduced_reference, reduced_variant = AlleleReducer.reduce(reference, variant)
    return f"{reduced_reference}/{reduced_variant}"


def reverse_complement(sequence: str) -> str:
    """Reverse complement of a nucleotide sequence, preserving case.

    Examples:
        >>> reverse_complement('TCA')
        'TGA'
    """
    return "".join(COMPLEMENT[base] for base in reversed(sequence))
