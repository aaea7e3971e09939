"""
Dynamic value model produced by the decoder.

A decoded document is a tree of plain Python objects:

    str | int | float | bool | None | list[Value] | dict[str, Value]

``int`` and ``float`` stay distinct: a number token without a fraction or
exponent decodes to ``int``. Equality and ``repr`` are the structural ones the
builtins already provide.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Union

Primitive = Union[str, int, float, bool, None]
Value = Union[Primitive, List["Value"], Dict[str, "Value"]]
Array = List[Value]
Map = Dict[str, Value]


class ValueKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOL = "bool"
    NULL = "null"
    ARRAY = "array"
    MAP = "map"


def kind_of(value: object) -> ValueKind:
    """Return the variant tag of a decoded value."""

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.MAP
    raise TypeError(f"{type(value)!r} is not a decoded JSON value.")


__all__ = ["Array", "Map", "Primitive", "Value", "ValueKind", "kind_of"]
