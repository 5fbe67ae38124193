"""STX transfer transactions (stx-transfer? semantics)."""

from __future__ import annotations

from copy import deepcopy
from typing import List

from ..config import (
    ERR_STX_INSUFFICIENT_BALANCE,
    ERR_STX_NON_POSITIVE_AMOUNT,
    ERR_STX_SAME_SENDER_RECIPIENT,
    STX_SYMBOL,
    UINT_MAX,
)
from ..errors import ClarinetError, ErrorCode
from ..types import ChainState, Transaction, TransferStxPayload
from ..values import BoolValue, ResponseValue, UIntValue


def transfer_stx(
    state: ChainState, amount: int, sender: str, recipient: str, events: List[dict]
) -> ResponseValue:
    """Move STX in place; failures are ``(err uN)`` responses, not exceptions."""
    if amount <= 0:
        return ResponseValue(False, UIntValue(ERR_STX_NON_POSITIVE_AMOUNT))
    if sender == recipient:
        return ResponseValue(False, UIntValue(ERR_STX_SAME_SENDER_RECIPIENT))

    ledger = state.assets.setdefault(STX_SYMBOL, {})
    if ledger.get(sender, 0) < amount:
        return ResponseValue(False, UIntValue(ERR_STX_INSUFFICIENT_BALANCE))
    if ledger.get(recipient, 0) + amount > UINT_MAX:
        raise ClarinetError(ErrorCode.ARITHMETIC_OVERFLOW, "recipient balance overflow")

    ledger[sender] -= amount
    ledger[recipient] = ledger.get(recipient, 0) + amount
    events.append(
        {
            "type": "stx_transfer_event",
            "stx_transfer_event": {
                "sender": sender,
                "recipient": recipient,
                "amount": amount,
            },
        }
    )
    return ResponseValue(True, BoolValue(True))


def verify(state: ChainState, tx: Transaction) -> None:
    p = tx.payload
    if not isinstance(p, TransferStxPayload):
        raise ClarinetError(ErrorCode.INVALID_ARGUMENT, "transfer_stx payload expected")
    if isinstance(p.amount, bool) or not isinstance(p.amount, int):
        raise ClarinetError(ErrorCode.INVALID_AMOUNT, "amount must be an integer")
    if p.amount > UINT_MAX:
        raise ClarinetError(ErrorCode.INVALID_AMOUNT, "amount exceeds uint max")
    if not p.recipient.startswith("S"):
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, f"invalid recipient: {p.recipient}")


def apply(state: ChainState, tx: Transaction, block_height: int) -> tuple[ChainState, ResponseValue, list]:
    next_state = deepcopy(state)
    events: List[dict] = []
    result = transfer_stx(next_state, tx.payload.amount, tx.sender, tx.payload.recipient, events)
    return next_state, result, events
