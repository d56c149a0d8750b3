"""Reference allele verification.

The provider's reference genome is authoritative. A caller's asserted
reference allele is accepted only if it equals the provider's reference over
the same interval exactly: same length, same characters, same case. There is
no partial credit; a two-base claim matching one base is rejected outright.
"""

from enum import Enum

from allelecheck.constants import EMPTY_SEQUENCE_MARKER
from allelecheck.models.position import Allele


class VerificationVerdict(str, Enum):
    """Outcome of comparing an asserted reference allele to the provider's."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


def verify_reference_allele(asserted: Allele, actual_reference: str) -> VerificationVerdict:
    """Verify an asserted reference allele against the provider's reference.

    Args:
        asserted: Reference allele from the caller's query
        actual_reference: Provider reference over the same interval ('-' for none)

    Returns:
        ACCEPTED if the caller made no claim or the claim matches exactly,
        REJECTED otherwise

    Examples:
        >>> verify_reference_allele(Allele.explicit('TC'), 'TC')
        <VerificationVerdict.ACCEPTED: 'accepted'>

        >>> verify_reference_allele(Allele.explicit('CC'), 'TC')
        <VerificationVerdict.REJECTED: 'rejected'>

        >>> verify_reference_allele(Allele.unspecified(), 'TC')
        <VerificationVerdict.ACCEPTED: 'accepted'>
    """
    if asserted.is_unspecified:
        return VerificationVerdict.ACCEPTED
    if str(asserted) == actual_reference:
        return VerificationVerdict.ACCEPTED
    return VerificationVerdict.REJECTED


def is_noop_edit(actual_reference: str, actual_variant: str) -> bool:
    """Check whether the provider's alleles describe an edit that changes nothing.

    Only explicit sequences count; an empty pair ('-'/'-') is not an edit of any bases.
    """
    return actual_reference == actual_variant and actual_reference != EMPTY_SEQUENCE_MARKER
