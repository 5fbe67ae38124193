"""State transition entrypoints for the simulated chain."""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import replace
from typing import Sequence

from blake3 import blake3

from .errors import ClarinetError, ErrorCode
from .expect import ClarityResult, EventList
from .types import Block, ChainState, ReadOnlyFn, Receipt, Transaction, TransactionType
from .tx import contract_call as tx_contract_call
from .tx import deploy as tx_deploy
from .tx import transfer as tx_transfer
from .values import ClarityValue, ResponseValue

logger = logging.getLogger(__name__)

_HANDLERS = {
    TransactionType.CONTRACT_CALL: tx_contract_call,
    TransactionType.TRANSFER_STX: tx_transfer,
    TransactionType.DEPLOY_CONTRACT: tx_deploy,
}


def _handler(tx: Transaction):
    handler = _HANDLERS.get(tx.tx_type)
    if handler is None:
        raise ClarinetError(ErrorCode.NOT_IMPLEMENTED, f"apply not implemented for {tx.tx_type}")
    return handler


def _verify_common(state: ChainState, tx: Transaction) -> None:
    if tx.sender not in state.accounts:
        raise ClarinetError(ErrorCode.ACCOUNT_NOT_FOUND, f"sender not found: {tx.sender}")


def _payload_repr(tx: Transaction) -> str:
    p = tx.payload
    if tx.tx_type == TransactionType.CONTRACT_CALL:
        args = " ".join(a.repr_clarity() for a in p.args)
        return f"{p.contract}.{p.function}({args})"
    if tx.tx_type == TransactionType.TRANSFER_STX:
        return f"{p.amount}->{p.recipient}"
    return f"{p.name}:{p.contract_cls.__module__}.{p.contract_cls.__qualname__}"


def compute_txid(tx: Transaction, nonce: int) -> str:
    data = f"{tx.tx_type.value}|{tx.sender}|{nonce}|{_payload_repr(tx)}"
    return blake3(data.encode()).hexdigest()


def verify_tx(state: ChainState, tx: Transaction) -> None:
    """Stateless + stateful verification; raises `ClarinetError`."""
    _verify_common(state, tx)
    _handler(tx).verify(state, tx)


def apply_tx(state: ChainState, tx: Transaction, block_height: int) -> tuple[ChainState, Receipt]:
    """Apply a tx and build its receipt.

    Failed-tx semantics:
    - Invalid tx (unknown sender/contract/function, bad arguments): raises
    - ``(err ...)`` response: state unchanged, events dropped, nonce advances
    """
    verify_tx(state, tx)

    nonce = state.nonces.get(tx.sender, 0)
    txid = compute_txid(tx, nonce)

    working, result, events = _handler(tx).apply(state, tx, block_height)
    committed = not (isinstance(result, ResponseValue) and not result.ok)
    if not committed:
        working = deepcopy(state)
        events = []

    working.nonces[tx.sender] = nonce + 1
    return working, Receipt(result=ClarityResult(result), events=EventList(events), txid=txid)


def apply_block(state: ChainState, txs: Sequence[Transaction]) -> tuple[ChainState, Block]:
    """Apply a block worth of transactions in order.

    Each transaction stands alone: an ``(err ...)`` receipt does not reject
    the block. The block is mined at ``block_height + 1``.
    """
    height = state.block_height + 1
    working = state
    receipts = []
    for tx in txs:
        working, receipt = apply_tx(working, tx, height)
        receipts.append(receipt)

    h = blake3(state.last_block_hash.encode())
    h.update(height.to_bytes(8, "big"))
    for r in receipts:
        h.update(bytes.fromhex(r.txid))
    block_hash = h.hexdigest()

    working = replace(working, block_height=height, last_block_hash=block_hash)
    logger.debug("mined block %d with %d transactions", height, len(receipts))
    return working, Block(height=height, receipts=receipts, hash=block_hash)


def mine_empty_blocks(state: ChainState, count: int) -> ChainState:
    if count < 0:
        raise ClarinetError(ErrorCode.INVALID_BLOCK_HEIGHT, "block count must be non-negative")
    working = state
    for _ in range(count):
        working, _block = apply_block(working, [])
    return working


def call_read_only(
    state: ChainState,
    contract: str,
    function: str,
    args: Sequence[ClarityValue],
    sender: str,
) -> ReadOnlyFn:
    """Evaluate a function against a throwaway copy of ``state``."""
    if sender not in state.accounts:
        raise ClarinetError(ErrorCode.ACCOUNT_NOT_FOUND, f"sender not found: {sender}")
    working = deepcopy(state)
    identifier = tx_contract_call.resolve_contract(working, contract)
    result, events = tx_contract_call.invoke(
        working, identifier, function, list(args), sender, state.block_height, read_only=False
    )
    return ReadOnlyFn(result=ClarityResult(result), events=EventList(events))
