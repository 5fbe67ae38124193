"""Chained assertion helpers for receipt results and events.

    block.receipts[0].result.expect_ok().expect_uint(2)

Every helper raises `ExpectationError` (an ``AssertionError``) on mismatch,
so a failed expectation aborts the test the same way a bare ``assert`` does.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from .errors import ExpectationError
from .parser import hex_to_bytes, parse_value
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


class ClarityResult:
    """A Clarity value with expectation helpers."""

    __slots__ = ("value",)

    def __init__(self, value: Union[ClarityValue, str]):
        if isinstance(value, str):
            value = parse_value(value)
        self.value = value

    def __str__(self) -> str:
        return self.value.repr_clarity()

    def __repr__(self) -> str:
        return f"ClarityResult({self.value.repr_clarity()})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ClarityResult):
            return self.value == other.value
        if isinstance(other, str):
            return self.value.repr_clarity() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def _require(self, cls: type, label: str) -> Any:
        if not isinstance(self.value, cls):
            raise ExpectationError(label, self.value.repr_clarity())
        return self.value

    # --- Wrappers ---

    def expect_ok(self) -> "ClarityResult":
        v = self._require(ResponseValue, "(ok ...)")
        if not v.ok:
            raise ExpectationError("(ok ...)", v.repr_clarity())
        return ClarityResult(v.inner)

    def expect_err(self) -> "ClarityResult":
        v = self._require(ResponseValue, "(err ...)")
        if v.ok:
            raise ExpectationError("(err ...)", v.repr_clarity())
        return ClarityResult(v.inner)

    def expect_some(self) -> "ClarityResult":
        v = self._require(OptionalValue, "(some ...)")
        if v.inner is None:
            raise ExpectationError("(some ...)", v.repr_clarity())
        return ClarityResult(v.inner)

    def expect_none(self) -> None:
        v = self._require(OptionalValue, "none")
        if v.inner is not None:
            raise ExpectationError("none", v.repr_clarity())

    # --- Primitives ---

    def expect_uint(self, expected: int) -> int:
        v = self._require(UIntValue, f"u{expected}")
        if v.value != expected:
            raise ExpectationError(f"u{expected}", v.repr_clarity())
        return v.value

    def expect_int(self, expected: int) -> int:
        v = self._require(IntValue, str(expected))
        if v.value != expected:
            raise ExpectationError(str(expected), v.repr_clarity())
        return v.value

    def expect_bool(self, expected: bool) -> bool:
        label = "true" if expected else "false"
        v = self._require(BoolValue, label)
        if v.value != expected:
            raise ExpectationError(label, v.repr_clarity())
        return v.value

    def expect_buff(self, expected: Union[bytes, bytearray, List[int]]) -> bytes:
        expected = bytes(expected)
        label = "0x" + expected.hex()
        v = self._require(BuffValue, label)
        if v.value != expected:
            raise ExpectationError(label, v.repr_clarity())
        return v.value

    def expect_ascii(self, expected: str) -> str:
        label = AsciiValue(expected).repr_clarity()
        v = self._require(AsciiValue, label)
        if v.value != expected:
            raise ExpectationError(label, v.repr_clarity())
        return v.value

    def expect_utf8(self, expected: str) -> str:
        label = Utf8Value(expected).repr_clarity()
        v = self._require(Utf8Value, label)
        if v.value != expected:
            raise ExpectationError(label, v.repr_clarity())
        return v.value

    def expect_principal(self, expected: str) -> str:
        expected = expected[1:] if expected.startswith("'") else expected
        v = self._require(PrincipalValue, "'" + expected)
        if v.value != expected:
            raise ExpectationError("'" + expected, v.repr_clarity())
        return v.value

    # --- Composites ---

    def expect_list(self) -> List["ClarityResult"]:
        v = self._require(ListValue, "(list ...)")
        return [ClarityResult(item) for item in v.items]

    def expect_tuple(self) -> Dict[str, "ClarityResult"]:
        v = self._require(TupleValue, "{...}")
        return {k: ClarityResult(item) for k, item in v.fields.items()}


def expect_buff(text: str, expected: Union[bytes, bytearray, List[int]]) -> bytes:
    """Assert that Clarity hex text (``0x...``) decodes to ``expected``."""
    actual = hex_to_bytes(text)
    expected = bytes(expected)
    if actual != expected:
        raise ExpectationError("0x" + expected.hex(), text)
    return actual


class EventList(list):
    """Receipt events with lookup-style expectations.

    Each ``expect_*`` returns the matching event payload and fails if no
    event of that kind carries the expected fields.
    """

    def _find(self, kind: str, label: str, **fields: object) -> Dict[str, Any]:
        for event in self:
            if event.get("type") != kind:
                continue
            payload = event[kind]
            if all(payload.get(k) == v for k, v in fields.items()):
                return payload
        seen = [e.get("type") for e in self]
        raise ExpectationError(f"{label} {fields}", f"events {seen}")

    def expect_stx_transfer_event(self, amount: int, sender: str, recipient: str) -> Dict[str, Any]:
        return self._find(
            "stx_transfer_event", "stx transfer",
            amount=amount, sender=sender, recipient=recipient,
        )

    def expect_fungible_token_transfer_event(
        self, amount: int, sender: str, recipient: str, asset_id: str
    ) -> Dict[str, Any]:
        return self._find(
            "ft_transfer_event", "ft transfer",
            amount=amount, sender=sender, recipient=recipient, asset_identifier=asset_id,
        )

    def expect_fungible_token_mint_event(
        self, amount: int, recipient: str, asset_id: str
    ) -> Dict[str, Any]:
        return self._find(
            "ft_mint_event", "ft mint",
            amount=amount, recipient=recipient, asset_identifier=asset_id,
        )

    def expect_print_event(
        self, contract_identifier: str, value: Union[ClarityValue, str]
    ) -> Dict[str, Any]:
        text = value if isinstance(value, str) else value.repr_clarity()
        return self._find(
            "contract_event", "print",
            contract_identifier=contract_identifier, topic="print", value=text,
        )
