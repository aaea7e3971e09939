"""Query parameter helpers shared by the services."""

from __future__ import annotations

from typing import Any


def compact(**params: Any) -> dict[str, Any]:
    """Drop unset parameters and render booleans the way the API expects."""

    result: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[key] = value
    return result
