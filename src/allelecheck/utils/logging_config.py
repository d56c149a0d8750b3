"""Logging configuration for AlleleCheck verification decisions.

Provides structured logging of verification verdicts for auditing and debugging.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from allelecheck.models.annotation import VerifiedAnnotation


class VerificationDecisionLogger:
    """Logger for verification decisions with structured output."""

    def __init__(self, log_dir: Path | None = None, enable_file_logging: bool = True):
        """Initialize the verification decision logger.

        Args:
            log_dir: Directory for log files. Defaults to ./logs
            enable_file_logging: Whether to write logs to files
        """
        self.logger = logging.getLogger("allelecheck.decisions")
        self.logger.setLevel(logging.INFO)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        # JSONL records are written straight to the file handler's stream
        self.file_handler = None
        if enable_file_logging:
            if log_dir is None:
                log_dir = Path("./logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d")
            log_file = log_dir / f"verification_decisions_{timestamp}.jsonl"

            self.file_handler = logging.FileHandler(log_file)
            self.file_handler.setLevel(logging.DEBUG)
            self.file_handler.setFormatter(logging.Formatter('%(message)s'))
            self.file_handler.addFilter(lambda record: record.levelno == logging.DEBUG)
            self.logger.addHandler(self.file_handler)

            self.log_file = log_file
            self.logger.info(f"Verification decision logging enabled: {log_file}")
        else:
            self.log_file = None

    def _write(self, log_entry: dict) -> None:
        if self.file_handler:
            self.file_handler.stream.write(json.dumps(log_entry) + '\n')
            self.file_handler.flush()

    def log_request(self, notation: str, queries: list[str], batch: bool) -> str:
        """Log a verification request.

        Returns:
            Request ID for tracking
        """
        request_id = f"{notation}_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}"

        self._write({
            "timestamp": datetime.now().isoformat(),
            "event_type": "verification_request",
            "request_id": request_id,
            "input": {
                "notation": notation,
                "batch": batch,
                "query_count": len(queries),
                "queries": queries,
            },
        })

        if batch:
            self.logger.info(f"Verification Request: {len(queries)} {notation} queries (batch)")
        else:
            self.logger.info(f"Verification Request: {queries[0]} ({notation})")

        return request_id

    def log_decision(
        self,
        request_id: str,
        result: VerifiedAnnotation,
        asserted_reference: str | None,
        actual_alleles: tuple[str, str] | None,
    ) -> None:
        """Log the final verdict for one query."""

        self._write({
            "timestamp": datetime.now().isoformat(),
            "event_type": "verification_decision",
            "request_id": request_id,
            "output": {
                "original_query": result.original_query,
                "variant": result.variant,
                "asserted_reference": asserted_reference,
                "actual_alleles": list(actual_alleles) if actual_alleles else None,
                "successfully_annotated": result.successfully_annotated,
                "allele_string": result.allele_string,
                "failure_reason": result.failure_reason.value if result.failure_reason else None,
            },
        })

        if result.successfully_annotated:
            self.logger.info(f"Verified: {result.original_query} → {result.allele_string}")
        else:
            self.logger.info(f"Rejected: {result.original_query} ({result.failure_reason.value})")

    def log_error(self, request_id: str, queries: list[str], error: Exception) -> None:
        """Log a provider or correlation error."""

        self._write({
            "timestamp": datetime.now().isoformat(),
            "event_type": "verification_error",
            "request_id": request_id,
            "input": {"queries": queries},
            "error": {
                "type": type(error).__name__,
                "message": str(error),
            },
        })

        self.logger.error(f"Verification Error: {len(queries)} queries - {error}")


# Global logger instance
_global_logger: VerificationDecisionLogger | None = None


def get_logger(log_dir: Path | None = None, enable_file_logging: bool = True) -> VerificationDecisionLogger:
    """Get or create the global verification decision logger."""
    global _global_logger

    if _global_logger is None:
        _global_logger = VerificationDecisionLogger(log_dir=log_dir, enable_file_logging=enable_file_logging)

    return _global_logger


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _global_logger
    _global_logger = None
