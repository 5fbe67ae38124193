"""c32check addresses and devnet account derivation."""

from __future__ import annotations

import pytest

from clarinet_sim.address import (
    C32_ALPHABET,
    c32_address,
    c32_decode,
    c32_encode,
    contract_identifier,
    decode_address,
    derive_address,
    is_valid_address,
)
from clarinet_sim.config import C32_VERSION_MAINNET_SINGLESIG, C32_VERSION_TESTNET_SINGLESIG
from clarinet_sim.errors import ClarinetError, ErrorCode


def test_c32_encode_known_values() -> None:
    assert c32_encode(b"") == ""
    assert c32_encode(b"\x00") == "0"
    assert c32_encode(b"\x1f") == "Z"
    assert c32_encode(b"\x20") == "10"
    assert c32_encode(b"\x00\x00\x01") == "001"


def test_c32_decode_inverts_encode() -> None:
    data = bytes(range(1, 21))
    assert c32_decode(c32_encode(data), 20) == data


def test_c32_decode_accepts_crockford_aliases() -> None:
    assert c32_decode("O1", 1) == c32_decode("01", 1)
    assert c32_decode("il", 1) == c32_decode("11", 1)


def test_address_prefixes() -> None:
    h = bytes(20)
    assert c32_address(C32_VERSION_TESTNET_SINGLESIG, h).startswith("ST")
    assert c32_address(C32_VERSION_MAINNET_SINGLESIG, h).startswith("SP")
    assert all(c in C32_ALPHABET for c in c32_address(26, h)[1:])


def test_decode_address() -> None:
    h = bytes(range(20))
    address = c32_address(C32_VERSION_TESTNET_SINGLESIG, h)
    assert decode_address(address) == (C32_VERSION_TESTNET_SINGLESIG, h)


def test_checksum_mismatch() -> None:
    address = derive_address("wallet_1")
    last = address[-1]
    tampered = address[:-1] + ("0" if last != "0" else "1")
    assert not is_valid_address(tampered)
    with pytest.raises(ClarinetError) as exc:
        decode_address(tampered)
    assert exc.value.code == ErrorCode.INVALID_ADDRESS


def test_derived_accounts_are_deterministic_and_distinct() -> None:
    names = ["deployer"] + [f"wallet_{i}" for i in range(1, 10)]
    first = [derive_address(n) for n in names]
    assert first == [derive_address(n) for n in names]
    assert len(set(first)) == len(names)
    assert all(a.startswith("ST") and is_valid_address(a) for a in first)


def test_invalid_hash_length() -> None:
    with pytest.raises(ClarinetError):
        c32_address(26, b"\x00" * 19)


@pytest.mark.parametrize("name", ["", "9lives", "has space", "x" * 41])
def test_invalid_contract_names(name) -> None:
    with pytest.raises(ClarinetError) as exc:
        contract_identifier("ST1", name)
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_contract_identifier() -> None:
    assert contract_identifier("ST1ABC", "my-counter_2") == "ST1ABC.my-counter_2"
