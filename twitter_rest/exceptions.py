"""
Domain specific exception hierarchy for the twitter_rest package.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from twitter_rest.models import ErrorList
    from twitter_rest.rate_limit import RateLimitInfo


class TwitterRestError(Exception):
    """Base exception for all library errors."""


class ConfigurationError(TwitterRestError):
    """Raised when required configuration or credentials are missing."""


class AuthenticationError(TwitterRestError):
    """Raised when the request signer cannot produce credentials."""


class MissingPaginationCursor(TwitterRestError):
    """Raised when search metadata carries no usable ``next_results`` cursor."""


# ---------------------------------------------------------------------------
# Decoder errors
# ---------------------------------------------------------------------------


class DecodeError(TwitterRestError, ValueError):
    """Raised when a JSON document cannot be decoded."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnrecognizedToken(DecodeError):
    """Raised when a byte cannot start (or follow) a JSON value."""

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        before: bytes = b"",
        current: bytes = b"",
        after: bytes = b"",
    ) -> None:
        super().__init__(message, position=position)
        self.before = before
        self.current = current
        self.after = after


class UnterminatedString(DecodeError):
    """Raised when the input ends before a closing quote."""


class BadNumberCharacter(DecodeError):
    """Raised when a number token contains an unexpected byte."""


class MissingSeparator(DecodeError):
    """Raised when a ``,``/``:`` or collection closer is missing."""


class BadEscapeSequence(DecodeError):
    """Raised for an unknown or truncated backslash escape in a string."""


class UnexpectedEndOfInput(DecodeError):
    """Raised when the input ends where a value was expected."""


class UnmarshalTypeError(DecodeError):
    """Raised when the decoded root cannot be assigned into the given sink."""


# ---------------------------------------------------------------------------
# Response classification errors
# ---------------------------------------------------------------------------


class ClassifiedError(TwitterRestError):
    """Base for every failure reported while parsing an API response."""


class TransportError(ClassifiedError):
    """Raised when sending a request or reading/decompressing a body fails."""


class ApiResponseError(ClassifiedError):
    """Raised when the Twitter API returns its structured error payload."""

    def __init__(self, errors: "ErrorList", *, status_code: int) -> None:
        super().__init__(errors.message())
        self.errors = errors
        self.status_code = status_code
        entries = errors.errors()
        self.code: int | None = entries[0].code if entries else None


class RateLimitExceeded(ClassifiedError):
    """Raised when the Twitter API enforces a rate limit (HTTP 429)."""

    def __init__(
        self,
        rate_limit: "RateLimitInfo",
        *,
        media_rate_limit: "RateLimitInfo | None" = None,
    ) -> None:
        super().__init__(
            f"Rate limit: {rate_limit.limit}, Remaining: {rate_limit.remaining}, "
            f"Reset: {rate_limit.reset_at}"
        )
        self.rate_limit = rate_limit
        self.media_rate_limit = media_rate_limit

    @property
    def limit(self) -> int | None:
        return self.rate_limit.limit

    @property
    def remaining(self) -> int | None:
        return self.rate_limit.remaining

    @property
    def reset_at(self) -> datetime | None:
        return self.rate_limit.reset_at


class ResponseError(ClassifiedError):
    """Raised when a failure body is not the API's structured error schema."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(
            f"Unable to handle response (status code {status_code}): `{body}`"
        )
        self.status_code = status_code
        self.body = body
