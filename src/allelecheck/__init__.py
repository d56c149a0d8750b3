"""AlleleCheck: reference-allele verification for genomic variant annotation."""

__version__ = "0.1.0"
