"""
Single-pass JSON decoder tuned for Twitter payloads.

Differences from :mod:`json`:

* Numbers without a fraction or exponent always come back as ``int``, so
  64-bit tweet ids survive untouched while ``1.0`` stays a ``float``.
* Booleans and ``null`` are matched case-insensitively.
* The cursor only moves forward, with one byte of lookahead. Collections end
  through a private control signal raised when the matching closer is seen,
  which the collection reader catches; it never escapes :func:`decode`.
"""

from __future__ import annotations

import re
from typing import Any, MutableMapping, MutableSequence, Union

from twitter_rest.exceptions import (
    BadEscapeSequence,
    BadNumberCharacter,
    DecodeError,
    MissingSeparator,
    UnexpectedEndOfInput,
    UnmarshalTypeError,
    UnrecognizedToken,
    UnterminatedString,
)
from twitter_rest.values import Array, Map, Value, kind_of

Source = Union[bytes, bytearray, memoryview, str]

CONTEXT_WINDOW = 10

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_MINUS = ord("-")
_PLUS = ord("+")
_DOT = ord(".")
_COMMA = ord(",")
_COLON = ord(":")
_OPEN_MAP = ord("{")
_CLOSE_MAP = ord("}")
_OPEN_ARRAY = ord("[")
_CLOSE_ARRAY = ord("]")

_WHITESPACE = frozenset(b" \t\n\r")
_DIGITS = frozenset(b"0123456789")
_EXPONENT = frozenset(b"eE")
_NUMBER_END = frozenset(b",}] \t\n\r")

_STRING_SPECIAL = re.compile(rb'["\\]')
_HEX4 = re.compile(rb"[0-9a-fA-F]{4}")

_SIMPLE_ESCAPES = {
    ord('"'): '"',
    ord("\\"): "\\",
    ord("/"): "/",
    ord("b"): "\b",
    ord("f"): "\f",
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}


class _EndOfCollection(Exception):
    """Control signal: the closer of the enclosing collection was consumed."""


class _EndOfMap(_EndOfCollection):
    pass


class _EndOfArray(_EndOfCollection):
    pass


_TERMINATORS: dict[int, type[_EndOfCollection]] = {
    _CLOSE_MAP: _EndOfMap,
    _CLOSE_ARRAY: _EndOfArray,
}


class _Scanner:
    """Cursor over one input buffer. One instance per decode call."""

    __slots__ = ("data", "i", "end")

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.i = 0
        self.end = len(data)

    def decode(self) -> Value:
        self._skip_whitespace()
        if self.i >= self.end:
            raise UnexpectedEndOfInput("Empty JSON document.", position=0)
        value = self._read_value()
        self._skip_whitespace()
        if self.i < self.end:
            raise self._unrecognized("Trailing data after JSON document")
        return value

    # -- dispatch ---------------------------------------------------------

    def _read_value(self, closer: int | None = None) -> Value:
        self._skip_whitespace()
        if self.i >= self.end:
            raise UnexpectedEndOfInput(
                "Input ended where a value was expected.", position=self.i
            )

        c = self.data[self.i]
        if c == _QUOTE:
            return self._read_string()
        if c == _MINUS or c in _DIGITS:
            return self._read_number()
        if c == _OPEN_MAP:
            return self._read_map()
        if c == _OPEN_ARRAY:
            return self._read_array()
        if c in b"tTfF":
            return self._read_bool()
        if c in b"nN":
            return self._read_null()
        if closer is not None and c == closer:
            self.i += 1
            raise _TERMINATORS[closer]()
        raise self._unrecognized("Unrecognized type")

    # -- productions ------------------------------------------------------

    def _read_string(self) -> str:
        data = self.data
        opening = self.i
        pos = opening + 1
        chunks: list[str] = []
        while True:
            match = _STRING_SPECIAL.search(data, pos)
            if match is None:
                raise UnterminatedString("No string terminator.", position=opening)
            j = match.start()
            if j > pos:
                chunks.append(data[pos:j].decode("utf-8", "replace"))
            if data[j] == _QUOTE:
                self.i = j + 1
                return "".join(chunks)
            pos = self._read_escape(j, chunks)

    def _read_escape(self, at: int, chunks: list[str]) -> int:
        """Decode the escape starting at backslash ``at``; return the next index."""

        data = self.data
        if at + 1 >= self.end:
            raise UnterminatedString("No string terminator.", position=at)

        code = data[at + 1]
        if code != ord("u"):
            try:
                chunks.append(_SIMPLE_ESCAPES[code])
            except KeyError:
                raise BadEscapeSequence(
                    f"Unknown escape sequence '\\{chr(code)}'.", position=at
                ) from None
            return at + 2

        point = self._read_hex4(at + 2)
        following = at + 6
        if 0xD800 <= point <= 0xDBFF and data[following : following + 2] == b"\\u":
            low = self._read_hex4(following + 2)
            if 0xDC00 <= low <= 0xDFFF:
                point = 0x10000 + ((point - 0xD800) << 10) + (low - 0xDC00)
                following += 6
        chunks.append(chr(point))
        return following

    def _read_hex4(self, at: int) -> int:
        digits = self.data[at : at + 4]
        if _HEX4.fullmatch(digits) is None:
            raise BadEscapeSequence("Malformed \\u escape sequence.", position=at - 2)
        return int(digits, 16)

    def _read_number(self) -> int | float:
        data = self.data
        start = i = self.i
        if data[i] == _MINUS:
            i += 1

        fractional = False
        exponent = False
        while i < self.end:
            c = data[i]
            if c in _DIGITS:
                pass
            elif c == _DOT and not fractional and not exponent:
                fractional = True
            elif c in _EXPONENT and not exponent:
                exponent = True
            elif c in (_MINUS, _PLUS) and data[i - 1] in _EXPONENT:
                pass
            elif c in _NUMBER_END:
                break
            else:
                raise BadNumberCharacter(
                    f"Bad num char: {chr(c)!r}", position=i
                )
            i += 1

        token = data[start:i]
        self.i = i
        try:
            if fractional or exponent:
                return float(token)
            return int(token)
        except ValueError:
            raise BadNumberCharacter(
                f"Malformed number {token.decode('ascii', 'replace')!r}.",
                position=start,
            ) from None

    def _read_map(self) -> Map:
        self.i += 1
        result: Map = {}
        try:
            key = self._read_key(allow_close=True)
            while True:
                self._read_colon()
                # duplicate keys: last write wins
                result[key] = self._read_value()
                self._read_separator(_CLOSE_MAP)
                key = self._read_key(allow_close=False)
        except _EndOfMap:
            return result

    def _read_array(self) -> Array:
        self.i += 1
        result: Array = []
        try:
            result.append(self._read_value(closer=_CLOSE_ARRAY))
            while True:
                self._read_separator(_CLOSE_ARRAY)
                result.append(self._read_value())
        except _EndOfArray:
            return result

    def _read_bool(self) -> bool:
        i = self.i
        if self.data[i : i + 4].lower() == b"true":
            self.i += 4
            return True
        if self.data[i : i + 5].lower() == b"false":
            self.i += 5
            return False
        raise self._unrecognized("Could not parse boolean")

    def _read_null(self) -> None:
        if self.data[self.i : self.i + 4].lower() == b"null":
            self.i += 4
            return None
        raise self._unrecognized("Could not parse null")

    # -- separators -------------------------------------------------------

    def _read_key(self, *, allow_close: bool) -> str:
        self._skip_whitespace()
        if self.i >= self.end:
            raise UnexpectedEndOfInput("Input ended inside a map.", position=self.i)
        c = self.data[self.i]
        if c == _QUOTE:
            return self._read_string()
        if allow_close and c == _CLOSE_MAP:
            self.i += 1
            raise _EndOfMap()
        raise self._unrecognized("Expected a string map key")

    def _read_colon(self) -> None:
        self._skip_whitespace()
        if self.i < self.end and self.data[self.i] == _COLON:
            self.i += 1
            return
        raise MissingSeparator("No colon after map key.", position=self.i)

    def _read_separator(self, closer: int) -> None:
        self._skip_whitespace()
        if self.i < self.end:
            c = self.data[self.i]
            if c == _COMMA:
                self.i += 1
                return
            if c == closer:
                self.i += 1
                raise _TERMINATORS[closer]()
        raise MissingSeparator(
            f"No comma or '{chr(closer)}' after collection element.",
            position=self.i,
        )

    def _skip_whitespace(self) -> None:
        data, i, end = self.data, self.i, self.end
        while i < end and data[i] in _WHITESPACE:
            i += 1
        self.i = i

    def _unrecognized(self, message: str) -> UnrecognizedToken:
        i = self.i
        before = self.data[max(0, i - CONTEXT_WINDOW) : i]
        current = self.data[i : i + 1]
        after = self.data[i + 1 : i + 1 + CONTEXT_WINDOW]
        text = (
            f"{message} in {before.decode('utf-8', 'replace')} "
            f"-->{current.decode('utf-8', 'replace')}<-- "
            f"{after.decode('utf-8', 'replace')}"
        )
        return UnrecognizedToken(
            text, position=i, before=before, current=current, after=after
        )


def decode(data: Source) -> Value:
    """
    Decode exactly one JSON document into a dynamic value tree.

    Raises:
        DecodeError: on malformed input. Nothing partially decoded is returned.
    """

    if isinstance(data, str):
        data = data.encode("utf-8")
    elif not isinstance(data, bytes):
        data = bytes(data)

    try:
        return _Scanner(data).decode()
    except RecursionError:
        raise DecodeError("JSON document is nested too deeply.") from None


def unmarshal(data: Source, sink: Any) -> Value:
    """
    Decode ``data`` and assign the root value into ``sink``.

    ``sink`` may be a typed view, a mutable mapping or a mutable sequence; its
    previous contents are replaced. A ``null`` document leaves the sink alone.
    The decoded value is also returned.
    """

    value = decode(data)
    assign(value, sink)
    return value


def assign(value: Value, sink: Any) -> None:
    """Shallow-assign a decoded root into a caller-owned sink."""

    if value is None:
        return

    # typed views expose their backing container as ``raw``
    target = getattr(sink, "raw", sink)
    if isinstance(target, MutableMapping):
        if not isinstance(value, dict):
            raise UnmarshalTypeError(
                f"Cannot assign a JSON {kind_of(value).value} into a mapping."
            )
        target.clear()
        target.update(value)
    elif isinstance(target, MutableSequence):
        if not isinstance(value, list):
            raise UnmarshalTypeError(
                f"Cannot assign a JSON {kind_of(value).value} into a sequence."
            )
        target[:] = value
    else:
        raise UnmarshalTypeError(
            f"Need a mutable mapping or sequence, got {type(sink)!r}."
        )


__all__ = ["CONTEXT_WINDOW", "assign", "decode", "unmarshal"]
