"""Centralized constants for AlleleCheck.

This module consolidates the hardcoded values used across the codebase:
- Allele markers and nucleotide alphabet
- Ensembl REST endpoints and request limits
- Transcript-set options for isoform overrides
- Per-notation verification policy defaults

Centralizing these makes maintenance easier and ensures consistency.
"""

# =============================================================================
# ALLELE MARKERS
# =============================================================================
# The empty-sequence marker denotes "no bases" (pure insertion reference,
# pure deletion variant). The unspecified marker is never written in either
# notation; it renders as an empty string.

EMPTY_SEQUENCE_MARKER: str = "-"
UNSPECIFIED_MARKER: str = ""

NUCLEOTIDES: frozenset[str] = frozenset("ACGTNacgtn")

COMPLEMENT: dict[str, str] = {
    "A": "T", "T": "A", "C": "G", "G": "C", "N": "N",
    "a": "t", "t": "a", "c": "g", "g": "c", "n": "n",
}


# =============================================================================
# ENSEMBL REST
# =============================================================================
# https://rest.ensembl.org - reference sequence and VEP annotation endpoints

ENSEMBL_BASE_URL: str = "https://rest.ensembl.org"
ENSEMBL_SPECIES: str = "human"
ENSEMBL_DEFAULT_TIMEOUT: float = 30.0

# Ensembl rejects POST bodies with more than 200 variants/regions
ENSEMBL_MAX_POST_SIZE: int = 200

# Environment overrides (loaded from .env by the CLI)
ENV_ENSEMBL_URL: str = "ALLELECHECK_ENSEMBL_URL"
ENV_TIMEOUT: str = "ALLELECHECK_TIMEOUT"

# HTTP statuses meaning "query understood, nothing to annotate"
NOT_FOUND_STATUS_CODES: set[int] = {400, 404}


# =============================================================================
# ISOFORM OVERRIDES
# =============================================================================
# Maps an isoform override source to the VEP options selecting that transcript set

ISOFORM_OVERRIDE_OPTIONS: dict[str, dict[str, int]] = {
    "refseq": {"refseq": 1},
    "mane": {"mane": 1},
    "canonical": {"canonical": 1},
    "ensembl": {},
}


# =============================================================================
# VERIFICATION POLICY
# =============================================================================
# Whether a verified no-op edit (reference == variant) counts as a successful
# annotation. The two notations disagree upstream, so each keeps its own default.

ACCEPT_NOOP_EDITS_GENOMIC_LOCATION: bool = True
ACCEPT_NOOP_EDITS_HGVS: bool = False
