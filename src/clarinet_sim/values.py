"""Clarity value model.

Every value renders to its canonical Clarity text with ``repr_clarity()``,
the same form the harness prints in receipts (``u2``, ``(ok u2)``,
``0x0001``). Range checks happen at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from .config import INT_MAX, INT_MIN, MAX_BUFF_SIZE, UINT_MAX
from .errors import ClarinetError, ErrorCode


class ClarityValue:
    """Base class for all Clarity values."""

    type_name = "value"

    def repr_clarity(self) -> str:
        raise NotImplementedError

    def to_python(self) -> object:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.repr_clarity()


@dataclass(frozen=True)
class UIntValue(ClarityValue):
    value: int
    type_name = "uint"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ClarinetError(ErrorCode.INVALID_TYPE, "uint requires an integer")
        if self.value < 0 or self.value > UINT_MAX:
            raise ClarinetError(ErrorCode.VALUE_OUT_OF_RANGE, f"uint out of range: {self.value}")

    def repr_clarity(self) -> str:
        return f"u{self.value}"

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class IntValue(ClarityValue):
    value: int
    type_name = "int"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ClarinetError(ErrorCode.INVALID_TYPE, "int requires an integer")
        if self.value < INT_MIN or self.value > INT_MAX:
            raise ClarinetError(ErrorCode.VALUE_OUT_OF_RANGE, f"int out of range: {self.value}")

    def repr_clarity(self) -> str:
        return str(self.value)

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class BoolValue(ClarityValue):
    value: bool
    type_name = "bool"

    def repr_clarity(self) -> str:
        return "true" if self.value else "false"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class BuffValue(ClarityValue):
    value: bytes
    type_name = "buff"

    def __post_init__(self) -> None:
        if len(self.value) > MAX_BUFF_SIZE:
            raise ClarinetError(ErrorCode.VALUE_OUT_OF_RANGE, "buff exceeds max size")

    def repr_clarity(self) -> str:
        return "0x" + self.value.hex()

    def to_python(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class AsciiValue(ClarityValue):
    value: str
    type_name = "string-ascii"

    def __post_init__(self) -> None:
        if any(not (0x20 <= ord(c) <= 0x7E or c in "\t\n\r") for c in self.value):
            raise ClarinetError(ErrorCode.INVALID_TYPE, "string-ascii must be printable ascii")

    def repr_clarity(self) -> str:
        return '"' + _escape(self.value) + '"'

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class Utf8Value(ClarityValue):
    value: str
    type_name = "string-utf8"

    def repr_clarity(self) -> str:
        return 'u"' + _escape(self.value) + '"'

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class PrincipalValue(ClarityValue):
    """Standard (``ST...``) or contract (``ST....name``) principal."""

    value: str
    type_name = "principal"

    def __post_init__(self) -> None:
        address = self.value.split(".", 1)[0]
        if not address.startswith("S") or len(address) < 5:
            raise ClarinetError(ErrorCode.INVALID_ADDRESS, f"invalid principal: {self.value}")

    @property
    def is_contract(self) -> bool:
        return "." in self.value

    def repr_clarity(self) -> str:
        return "'" + self.value

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class ListValue(ClarityValue):
    items: Tuple[ClarityValue, ...] = ()
    type_name = "list"

    def repr_clarity(self) -> str:
        if not self.items:
            return "(list)"
        return "(list " + " ".join(v.repr_clarity() for v in self.items) + ")"

    def to_python(self) -> list:
        return [v.to_python() for v in self.items]


@dataclass(frozen=True)
class TupleValue(ClarityValue):
    fields: Dict[str, ClarityValue] = field(default_factory=dict)
    type_name = "tuple"

    def __hash__(self) -> int:
        return hash(tuple(sorted((k, v) for k, v in self.fields.items())))

    def repr_clarity(self) -> str:
        parts = [f"{k}: {self.fields[k].repr_clarity()}" for k in sorted(self.fields)]
        return "{" + ", ".join(parts) + "}"

    def to_python(self) -> dict:
        return {k: v.to_python() for k, v in self.fields.items()}


@dataclass(frozen=True)
class OptionalValue(ClarityValue):
    """``none`` when ``inner`` is None, ``(some inner)`` otherwise."""

    inner: Union[ClarityValue, None] = None
    type_name = "optional"

    @property
    def is_some(self) -> bool:
        return self.inner is not None

    def repr_clarity(self) -> str:
        if self.inner is None:
            return "none"
        return f"(some {self.inner.repr_clarity()})"

    def to_python(self) -> object:
        return None if self.inner is None else self.inner.to_python()


@dataclass(frozen=True)
class ResponseValue(ClarityValue):
    ok: bool
    inner: ClarityValue
    type_name = "response"

    def repr_clarity(self) -> str:
        tag = "ok" if self.ok else "err"
        return f"({tag} {self.inner.repr_clarity()})"

    def to_python(self) -> object:
        return self.inner.to_python()


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _coerce(value: object) -> ClarityValue:
    if isinstance(value, ClarityValue):
        return value
    raise ClarinetError(ErrorCode.INVALID_TYPE, f"not a clarity value: {value!r}")


class TypeConstructors:
    """Typed argument constructors, published as ``types``.

    Names follow Clarity type names, so several shadow Python builtins as
    attributes (``types.int``, ``types.list``); that is only visible through
    the instance.
    """

    @staticmethod
    def uint(value: int) -> UIntValue:
        return UIntValue(value)

    @staticmethod
    def int(value: int) -> IntValue:
        return IntValue(value)

    @staticmethod
    def bool(value: bool) -> BoolValue:
        return BoolValue(bool(value))

    @staticmethod
    def buff(value: Union[bytes, bytearray, str]) -> BuffValue:
        if isinstance(value, str):
            from .parser import hex_to_bytes

            return BuffValue(hex_to_bytes(value))
        return BuffValue(bytes(value))

    @staticmethod
    def ascii(value: str) -> AsciiValue:
        return AsciiValue(value)

    @staticmethod
    def utf8(value: str) -> Utf8Value:
        return Utf8Value(value)

    @staticmethod
    def principal(value: str) -> PrincipalValue:
        return PrincipalValue(value[1:] if value.startswith("'") else value)

    @staticmethod
    def list(items) -> ListValue:
        return ListValue(tuple(_coerce(v) for v in items))

    @staticmethod
    def tuple(fields: dict) -> TupleValue:
        return TupleValue({str(k): _coerce(v) for k, v in fields.items()})

    @staticmethod
    def some(value: ClarityValue) -> OptionalValue:
        return OptionalValue(_coerce(value))

    @staticmethod
    def none() -> OptionalValue:
        return OptionalValue(None)

    @staticmethod
    def ok(value: ClarityValue) -> ResponseValue:
        return ResponseValue(True, _coerce(value))

    @staticmethod
    def err(value: ClarityValue) -> ResponseValue:
        return ResponseValue(False, _coerce(value))


types = TypeConstructors()
