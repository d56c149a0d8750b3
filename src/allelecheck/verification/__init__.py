"""Reference allele verification."""

from allelecheck.verification.verifier import VerificationVerdict, is_noop_edit, verify_reference_allele

__all__ = ["VerificationVerdict", "is_noop_edit", "verify_reference_allele"]
