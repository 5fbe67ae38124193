"""Parse Clarity value text back into values.

Accepts everything `ClarityValue.repr_clarity()` produces plus the long
``(tuple (key value) ...)`` form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .errors import ClarinetError, ErrorCode
from .values import (
    AsciiValue,
    BoolValue,
    BuffValue,
    ClarityValue,
    IntValue,
    ListValue,
    OptionalValue,
    PrincipalValue,
    ResponseValue,
    TupleValue,
    UIntValue,
    Utf8Value,
)

_DELIMS = "(){},: \t\r\n"


def hex_to_bytes(value: str) -> bytes:
    if not isinstance(value, str):
        raise ClarinetError(ErrorCode.INVALID_TYPE, "hex value must be string")
    v = value[2:] if value.startswith(("0x", "0X")) else value
    if v == "":
        return b""
    try:
        return bytes.fromhex(v)
    except ValueError:
        raise ClarinetError(ErrorCode.INVALID_FORMAT, f"invalid hex: {value!r}") from None


@dataclass
class Reader:
    text: str
    pos: int = 0

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in " \t\r\n":
            self.pos += 1

    def peek(self) -> str:
        self.skip_ws()
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise ClarinetError(
                ErrorCode.INVALID_FORMAT, f"expected {ch!r} at {self.pos} in {self.text!r}"
            )
        self.pos += 1

    def atom(self) -> str:
        self.skip_ws()
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMS:
            self.pos += 1
        if start == self.pos:
            raise ClarinetError(ErrorCode.INVALID_FORMAT, f"expected atom at {start} in {self.text!r}")
        return self.text[start:self.pos]

    def string(self) -> str:
        self.expect('"')
        out: List[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            self.pos += 1
            if ch == "\\":
                if self.pos >= len(self.text):
                    break
                out.append(self.text[self.pos])
                self.pos += 1
            elif ch == '"':
                return "".join(out)
            else:
                out.append(ch)
        raise ClarinetError(ErrorCode.INVALID_FORMAT, "unterminated string")


def _read_value(r: Reader) -> ClarityValue:
    ch = r.peek()
    if ch == "":
        raise ClarinetError(ErrorCode.INVALID_FORMAT, "unexpected end of input")
    if ch == "(":
        return _read_form(r)
    if ch == "{":
        return _read_tuple_braces(r)
    if ch == '"':
        return AsciiValue(r.string())
    if r.text.startswith('u"', r.pos):
        r.pos += 1
        return Utf8Value(r.string())
    if ch == "'":
        r.pos += 1
        return PrincipalValue(r.atom())
    return _read_atom(r.atom())


_UINT_RE = re.compile(r"u[0-9]+")
_INT_RE = re.compile(r"-?[0-9]+")


def _read_atom(token: str) -> ClarityValue:
    if token == "true":
        return BoolValue(True)
    if token == "false":
        return BoolValue(False)
    if token == "none":
        return OptionalValue(None)
    if token.startswith(("0x", "0X")):
        return BuffValue(hex_to_bytes(token))
    if _UINT_RE.fullmatch(token):
        return UIntValue(int(token[1:]))
    if _INT_RE.fullmatch(token):
        return IntValue(int(token))
    if token.startswith("S") and len(token) > 4:
        return PrincipalValue(token)
    raise ClarinetError(ErrorCode.INVALID_FORMAT, f"unrecognized token {token!r}")


def _read_form(r: Reader) -> ClarityValue:
    r.expect("(")
    head = r.atom()
    if head in ("ok", "err"):
        inner = _read_value(r)
        r.expect(")")
        return ResponseValue(head == "ok", inner)
    if head == "some":
        inner = _read_value(r)
        r.expect(")")
        return OptionalValue(inner)
    if head == "list":
        items = []
        while r.peek() != ")":
            if r.peek() == "":
                raise ClarinetError(ErrorCode.INVALID_FORMAT, "unterminated list")
            items.append(_read_value(r))
        r.expect(")")
        return ListValue(tuple(items))
    if head == "tuple":
        fields = {}
        while r.peek() != ")":
            r.expect("(")
            key = r.atom()
            fields[key] = _read_value(r)
            r.expect(")")
        r.expect(")")
        return TupleValue(fields)
    raise ClarinetError(ErrorCode.INVALID_FORMAT, f"unknown form ({head} ...)")


def _read_tuple_braces(r: Reader) -> TupleValue:
    r.expect("{")
    fields = {}
    while r.peek() != "}":
        key = r.atom()
        r.expect(":")
        fields[key] = _read_value(r)
        if r.peek() == ",":
            r.pos += 1
        elif r.peek() != "}":
            raise ClarinetError(ErrorCode.INVALID_FORMAT, "expected ',' or '}' in tuple")
    r.expect("}")
    return TupleValue(fields)


def parse_value(text: str) -> ClarityValue:
    """Parse a single Clarity value; trailing input is an error."""
    r = Reader(text)
    value = _read_value(r)
    if r.peek() != "":
        raise ClarinetError(ErrorCode.INVALID_FORMAT, f"trailing input in {text!r}")
    return value
