from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ConfigurationError(DomainError):
    """Startup configuration is missing or invalid; fatal to the process."""


class SwapRequestValidationError(DomainError):
    """Swap request body is malformed."""


class QuoteExpiredError(DomainError):
    """Client presented a quote past its validUntil."""


class UpstreamQuoteError(DomainError):
    """Aggregator unreachable, timed out, or returned an unusable response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
