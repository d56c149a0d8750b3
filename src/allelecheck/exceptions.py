"""Exception hierarchy for AlleleCheck.

Notation errors surface to the caller. Provider errors are mapped to
unsuccessful annotations by the engine. Correlation errors mean the provider
broke the batch contract and are always raised.
"""


class AlleleCheckError(Exception):
    """Base exception for AlleleCheck."""

    pass


class NotationError(AlleleCheckError, ValueError):
    """Raised when a variant query cannot be turned into a genomic position."""

    def __init__(self, query: str, message: str) -> None:
        self.query = query
        super().__init__(f"{message}: {query!r}")


class MalformedNotationError(NotationError):
    """Query text does not match the notation's grammar."""

    pass


class UnsupportedNotationError(NotationError):
    """Query uses a recognized but unsupported mutation type (e.g. dup)."""

    pass


class ProviderError(AlleleCheckError):
    """Exception raised by an annotation provider."""

    pass


class ProviderUnavailableError(ProviderError):
    """Provider could not be reached or kept failing after retries."""

    pass


class ProviderLookupFailedError(ProviderError):
    """Provider answered but could not resolve the query."""

    pass


class CorrelationError(AlleleCheckError):
    """Batch responses could not be matched one-to-one with the queries."""

    pass
