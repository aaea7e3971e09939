"""
Coercing field readers over decoded maps.

Every reader takes a mapping and a key and returns the field converted to the
requested type. A missing key or an incompatible value yields the documented
fallback instead of raising; one bad field never aborts reading a payload.

Coercion rules:

* ``string_value`` renders ints, floats and booleans as text
  (``"1234"``, ``"12.5"``, ``"true"``).
* ``float64_value`` widens ints.
* ``int64_value`` truncates floats toward zero. This loses precision for
  large values; read ``float64_value`` when that matters.
* ``int32_value`` narrows ints (and truncated floats) that fit in 32 bits and
  returns :data:`AMBIGUOUS_INT32` when they do not.
* Booleans are never treated as numbers.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from twitter_rest.values import Array, Map

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
AMBIGUOUS_INT32 = -1

# Returned for missing or unparsable timestamps.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
         "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
        start=1,
    )
}

_TIMESTAMP_RE = re.compile(
    r"""
    (?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)\s
    (?P<month>[A-Z][a-z]{2})\s
    (?P<day>\d{2})\s
    (?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})\s
    (?P<tz_sign>[+-])(?P<tz_hours>\d{2})(?P<tz_minutes>\d{2})\s
    (?P<year>\d{4})$
    """,
    re.VERBOSE,
)


def array_value(m: Mapping[str, Any], key: str) -> Array:
    """Return the list at ``key`` or ``[]``."""

    value = m.get(key)
    return value if isinstance(value, list) else []


def bool_value(m: Mapping[str, Any], key: str) -> bool:
    """Return the boolean at ``key`` or ``False``."""

    value = m.get(key)
    return value if isinstance(value, bool) else False


def int32_value(m: Mapping[str, Any], key: str) -> int:
    """Return the 32-bit integer at ``key``; ``0`` when absent or not numeric."""

    value = m.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return AMBIGUOUS_INT32
        value = math.trunc(value)
    if INT32_MIN <= value <= INT32_MAX:
        return value
    return AMBIGUOUS_INT32


def int64_value(m: Mapping[str, Any], key: str) -> int:
    """Return the integer at ``key``, truncating floats; ``0`` otherwise."""

    value = m.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return math.trunc(value)
    return 0


def float64_value(m: Mapping[str, Any], key: str) -> float:
    """Return the float at ``key``, widening ints; ``0.0`` otherwise."""

    value = m.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def map_value(m: Mapping[str, Any], key: str) -> Map:
    """Return the dict at ``key`` or a fresh empty dict."""

    value = m.get(key)
    return value if isinstance(value, dict) else {}


def string_value(m: Mapping[str, Any], key: str) -> str:
    """Return the text at ``key``, rendering numbers and booleans; ``""`` otherwise."""

    value = m.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return ""


def id_value(m: Mapping[str, Any], key: str = "id_str", fallback_key: str = "id") -> int:
    """
    Return a numeric id, preferring the string form.

    Twitter sends ids both as ``id`` (a number) and ``id_str``; the string is
    authoritative. Unparsable ids yield ``0``.
    """

    text = string_value(m, key)
    if text.isascii() and text.isdigit():
        return int(text)
    return max(int64_value(m, fallback_key), 0)


def parse_timestamp(text: str) -> datetime:
    """
    Parse Twitter's ``created_at`` format, e.g. ``Thu Sep 20 20:08:32 +0000 2012``.

    Month names are matched against a fixed English table so the result does
    not depend on the process locale. Unparsable input yields :data:`ZERO_TIME`.
    """

    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        return ZERO_TIME

    month = _MONTHS.get(match["month"])
    if month is None:
        return ZERO_TIME

    offset = timedelta(hours=int(match["tz_hours"]), minutes=int(match["tz_minutes"]))
    if match["tz_sign"] == "-":
        offset = -offset

    try:
        return datetime(
            int(match["year"]),
            month,
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            tzinfo=timezone(offset),
        )
    except ValueError:
        return ZERO_TIME


def time_value(m: Mapping[str, Any], key: str) -> datetime:
    """Return the timestamp at ``key`` or :data:`ZERO_TIME`."""

    return parse_timestamp(string_value(m, key))


__all__ = [
    "AMBIGUOUS_INT32",
    "INT32_MAX",
    "INT32_MIN",
    "array_value",
    "bool_value",
    "float64_value",
    "id_value",
    "int32_value",
    "int64_value",
    "ZERO_TIME",
    "map_value",
    "parse_timestamp",
    "string_value",
    "time_value",
]
