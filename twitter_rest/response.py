"""
Response handling: body reading and classification by status code.

:meth:`APIResponse.parse` yields exactly one outcome per response:

* 200/201/202: the decoded body (``None`` when the body is empty),
* 204: ``None`` without touching the body,
* 429: :class:`RateLimitExceeded` built from the rate limit headers,
* anything else: :class:`ApiResponseError` when the body is the API's
  ``{"errors": [...]}`` payload, otherwise :class:`ResponseError` carrying the
  body text verbatim.

A failure reading or decompressing the body is raised as
:class:`TransportError` before any of the above is considered.
"""

from __future__ import annotations

import gzip
import zlib
from datetime import datetime
from typing import Any, Mapping, Protocol

import requests
import urllib3
from requests.structures import CaseInsensitiveDict

from twitter_rest.decoder import decode, unmarshal
from twitter_rest.exceptions import (
    ApiResponseError,
    ClassifiedError,
    DecodeError,
    RateLimitExceeded,
    ResponseError,
    TransportError,
)
from twitter_rest.models import ErrorList
from twitter_rest.rate_limit import MEDIA, PRIMARY, RateLimitInfo
from twitter_rest.values import Value

STATUS_OK = 200
STATUS_CREATED = 201
STATUS_ACCEPTED = 202
STATUS_NO_CONTENT = 204
STATUS_INVALID = 400
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOTFOUND = 404
STATUS_LIMIT = 429
STATUS_GATEWAY = 502

SUCCESS_STATUSES = frozenset({STATUS_OK, STATUS_CREATED, STATUS_ACCEPTED})
ERROR_STATUSES = frozenset(
    {STATUS_INVALID, STATUS_UNAUTHORIZED, STATUS_FORBIDDEN, STATUS_NOTFOUND, STATUS_GATEWAY}
)

_BODY_READ_ERRORS = (OSError, EOFError, zlib.error, urllib3.exceptions.HTTPError)


class BodyStream(Protocol):
    """Readable byte stream carrying the (possibly compressed) body."""

    def read(self) -> bytes:
        ...

    def close(self) -> None:
        ...


class WireBody:
    """
    Exposes a streamed :class:`requests.Response` body exactly as sent.

    requests would otherwise inflate gzip bodies itself; reading the raw
    stream with ``decode_content=False`` leaves that to :class:`APIResponse`.
    """

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    def read(self) -> bytes:
        return self._response.raw.read(decode_content=False) or b""

    def close(self) -> None:
        self._response.close()


def is_gzip(headers: Mapping[str, str]) -> bool:
    return "gzip" in CaseInsensitiveDict(headers).get("Content-Encoding", "").lower()


class APIResponse:
    """
    Status code, headers and unread body of one API call.

    Only one of :meth:`parse` and :meth:`read_body` may be called; the body is
    drained and closed by whichever runs.
    """

    def __init__(
        self,
        status_code: int,
        headers: Mapping[str, str] | None = None,
        body: BodyStream | None = None,
        *,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers: CaseInsensitiveDict[str] = CaseInsensitiveDict(headers or {})
        self.url = url
        self._body = body
        self._consumed = False

    @classmethod
    def from_requests(cls, response: requests.Response) -> "APIResponse":
        return cls(
            response.status_code,
            response.headers,
            WireBody(response),
            url=response.url,
        )

    def __repr__(self) -> str:
        return f"APIResponse(status_code={self.status_code}, url={self.url!r})"

    def __enter__(self) -> "APIResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- rate limit headers ----------------------------------------------

    def rate_limit_info(self) -> RateLimitInfo:
        return RateLimitInfo.from_headers(self.headers, PRIMARY)

    def media_rate_limit_info(self) -> RateLimitInfo:
        return RateLimitInfo.from_headers(self.headers, MEDIA)

    def has_rate_limit(self) -> bool:
        """False when the (optional) rate limit headers are missing."""

        return self.rate_limit_info().is_present()

    def rate_limit(self) -> int:
        """Requests allowed per window; ``0`` when the header is missing."""

        return self.rate_limit_info().limit or 0

    def rate_limit_remaining(self) -> int:
        return self.rate_limit_info().remaining or 0

    def rate_limit_reset(self) -> datetime | None:
        return self.rate_limit_info().reset_at

    def has_media_rate_limit(self) -> bool:
        return self.media_rate_limit_info().is_present()

    def media_rate_limit(self) -> int:
        return self.media_rate_limit_info().limit or 0

    def media_rate_limit_remaining(self) -> int:
        return self.media_rate_limit_info().remaining or 0

    def media_rate_limit_reset(self) -> datetime | None:
        return self.media_rate_limit_info().reset_at

    # -- body ---------------------------------------------------------------

    def read_body(self) -> str:
        """Return the body as text, or ``""`` when it cannot be read."""

        try:
            return self._read_body().decode("utf-8", "replace")
        except TransportError:
            return ""

    def parse(self, sink: Any = None) -> Value:
        """
        Classify the response and decode a successful body.

        ``sink`` (a typed view, mutable mapping or mutable sequence) receives
        the decoded root value; the value is returned either way.

        Raises:
            TransportError: the body could not be read or decompressed.
            DecodeError: a success body is not valid JSON.
            RateLimitExceeded, ApiResponseError, ResponseError: see module docs.
        """

        if self.status_code == STATUS_NO_CONTENT:
            self.close()
            return None
        body = self._read_body()
        return classify(self.status_code, self.headers, body, sink)

    def close(self) -> None:
        if self._body is not None:
            self._body.close()
        self._consumed = True

    def _read_body(self) -> bytes:
        if self._consumed:
            raise TransportError("Response body has already been consumed.")
        self._consumed = True

        body = self._body
        if body is None:
            return b""
        try:
            data = body.read()
            if is_gzip(self.headers):
                data = gzip.decompress(data)
            return data
        except _BODY_READ_ERRORS as exc:
            raise TransportError(f"Unable to read response body: {exc}") from exc
        finally:
            body.close()


def classify(
    status_code: int,
    headers: Mapping[str, str],
    body: bytes,
    sink: Any = None,
) -> Value:
    """
    Map an already-read response onto its outcome.

    Pure function of its arguments: classifying the same response twice gives
    the same result.
    """

    if status_code in SUCCESS_STATUSES:
        if not body:
            return None
        if sink is not None:
            return unmarshal(body, sink)
        return decode(body)

    if status_code == STATUS_NO_CONTENT:
        return None

    if status_code == STATUS_LIMIT:
        # the body is consumed but never parsed
        media = RateLimitInfo.from_headers(headers, MEDIA)
        raise RateLimitExceeded(
            RateLimitInfo.from_headers(headers, PRIMARY),
            media_rate_limit=media if media.is_present() else None,
        )

    # ERROR_STATUSES and any status outside the table
    raise error_from_body(status_code, body)


def error_from_body(status_code: int, body: bytes) -> ClassifiedError:
    """Prefer the structured error payload, falling back to the opaque body."""

    text = body.decode("utf-8", "replace")
    try:
        value = decode(body)
    except DecodeError:
        return ResponseError(status_code, text)
    if not ErrorList.matches(value):
        return ResponseError(status_code, text)
    return ApiResponseError(ErrorList(value), status_code=status_code)


__all__ = [
    "APIResponse",
    "BodyStream",
    "ERROR_STATUSES",
    "SUCCESS_STATUSES",
    "STATUS_ACCEPTED",
    "STATUS_CREATED",
    "STATUS_FORBIDDEN",
    "STATUS_GATEWAY",
    "STATUS_INVALID",
    "STATUS_LIMIT",
    "STATUS_NO_CONTENT",
    "STATUS_NOTFOUND",
    "STATUS_OK",
    "STATUS_UNAUTHORIZED",
    "WireBody",
    "classify",
    "error_from_body",
    "is_gzip",
]
