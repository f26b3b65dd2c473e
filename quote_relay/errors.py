"""
Exception taxonomy for the quote request handler.

Every error carries the HTTP status code and the user-facing message the
handler should return.  Anything not derived from ``QuoteRelayError`` is
treated as an unexpected server error.
"""

from __future__ import annotations


class QuoteRelayError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(QuoteRelayError):
    """Required MailerSend environment variables are missing."""

    status_code = 500
    default_message = "Server not configured. Missing env vars."


class InvalidQuoteError(QuoteRelayError):
    """Malformed JSON or a missing / invalid form field."""

    status_code = 400
    default_message = "Bad JSON"


class RateLimitError(QuoteRelayError):
    """Too many submissions from one client inside the window."""

    status_code = 429
    default_message = "Too many requests. Please try again later."

    def __init__(self, message: str | None = None, *, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class ProviderError(QuoteRelayError):
    """MailerSend answered with a non-2xx status."""

    status_code = 500
    default_message = "Email send failed. Please try again later."

    def __init__(self, message: str | None = None, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class TransportError(QuoteRelayError):
    """MailerSend could not be reached at all."""

    status_code = 500
    default_message = "Network error sending email. Please try again later."
