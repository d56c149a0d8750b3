"""Gold-standard validation of verification verdicts."""

from allelecheck.validation.validator import Validator

__all__ = ["Validator"]
