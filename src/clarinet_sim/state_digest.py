"""Canonical state digest.

Assets, contract storage, nonces and block height are encoded in sorted
order and hashed with BLAKE3-256. Two states with the same digest are
observably identical to a test.
"""
from __future__ import annotations

from blake3 import blake3

from .types import ChainState


def _u64_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "big", signed=False)


def _str(value: str) -> bytes:
    data = value.encode()
    return _u64_be(len(data)) + data


def compute_state_digest(state: ChainState) -> str:
    buf = bytearray()
    buf += _u64_be(state.block_height)

    for symbol in sorted(state.assets):
        buf += _str(symbol)
        ledger = state.assets[symbol]
        for owner in sorted(ledger):
            buf += _str(owner)
            buf += int(ledger[owner]).to_bytes(16, "big", signed=False)

    for identifier in sorted(state.contracts):
        contract = state.contracts[identifier]
        buf += _str(identifier)
        for name in sorted(contract.storage):
            buf += _str(name)
            buf += _str(contract.storage[name].repr_clarity())

    for sender in sorted(state.nonces):
        buf += _str(sender)
        buf += _u64_be(state.nonces[sender])

    return blake3(bytes(buf)).hexdigest()
