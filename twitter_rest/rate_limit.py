"""
Rate limit metadata parsed from Twitter response headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, NamedTuple

from requests.structures import CaseInsensitiveDict

H_LIMIT = "X-Rate-Limit-Limit"
H_LIMIT_REMAIN = "X-Rate-Limit-Remaining"
H_LIMIT_RESET = "X-Rate-Limit-Reset"
H_MEDIA_LIMIT = "X-MediaRateLimit-Limit"
H_MEDIA_LIMIT_REMAIN = "X-MediaRateLimit-Remaining"
H_MEDIA_LIMIT_RESET = "X-MediaRateLimit-Reset"


class RateLimitHeaders(NamedTuple):
    """Names of the three headers describing one rate limit window."""

    limit: str
    remaining: str
    reset: str


PRIMARY = RateLimitHeaders(H_LIMIT, H_LIMIT_REMAIN, H_LIMIT_RESET)
MEDIA = RateLimitHeaders(H_MEDIA_LIMIT, H_MEDIA_LIMIT_REMAIN, H_MEDIA_LIMIT_RESET)


def _parse_uint(value: str | None) -> int | None:
    if value is None:
        return None
    value = value.strip()
    if not value.isascii() or not value.isdigit():
        return None
    return int(value)


def _parse_epoch(value: str | None) -> datetime | None:
    seconds = _parse_uint(value)
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Beyond the platform time_t range; treated as absent.
        return None


@dataclass(frozen=True, slots=True)
class RateLimitInfo:
    """
    One rate limit window.

    Each field is ``None`` when its header was absent or unparsable, so a
    missing header can be told apart from a real zero.
    """

    limit: int | None = None
    remaining: int | None = None
    reset_at: datetime | None = None

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        family: RateLimitHeaders = PRIMARY,
    ) -> "RateLimitInfo":
        """Parse a header family; lookups are case-insensitive."""

        lookup = CaseInsensitiveDict(headers)
        return cls(
            limit=_parse_uint(lookup.get(family.limit)),
            remaining=_parse_uint(lookup.get(family.remaining)),
            reset_at=_parse_epoch(lookup.get(family.reset)),
        )

    def is_present(self) -> bool:
        """True when the limit header was sent."""

        return self.limit is not None

    def is_exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def seconds_until_reset(self, now: datetime | None = None) -> float | None:
        return compute_backoff(self, now=now)


def compute_backoff(info: RateLimitInfo, now: datetime | None = None) -> float | None:
    """
    Seconds until the window resets, clamped at zero.

    Returns ``None`` when the reset time is unknown. Deciding whether to wait
    is left to the caller.
    """

    if info.reset_at is None:
        return None
    now = now or datetime.now(timezone.utc)
    delta = (info.reset_at - now).total_seconds()
    return max(delta, 0.0)


__all__ = [
    "H_LIMIT",
    "H_LIMIT_REMAIN",
    "H_LIMIT_RESET",
    "H_MEDIA_LIMIT",
    "H_MEDIA_LIMIT_REMAIN",
    "H_MEDIA_LIMIT_RESET",
    "MEDIA",
    "PRIMARY",
    "RateLimitHeaders",
    "RateLimitInfo",
    "compute_backoff",
]
