"""c32check addresses and deterministic devnet account derivation."""

from __future__ import annotations

import hashlib

from blake3 import blake3

from .config import C32_VERSION_TESTNET_SINGLESIG, MAX_CONTRACT_NAME_LENGTH
from .errors import ClarinetError, ErrorCode

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_C32_INDEX = {c: i for i, c in enumerate(C32_ALPHABET)}


def c32_encode(data: bytes) -> str:
    """Crockford base32 encode, one leading ``0`` per leading zero byte."""
    n = int.from_bytes(data, "big")
    out = []
    while n > 0:
        n, r = divmod(n, 32)
        out.append(C32_ALPHABET[r])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return "0" * leading + "".join(reversed(out))


def c32_decode(text: str, size: int) -> bytes:
    text = text.upper().replace("O", "0").replace("L", "1").replace("I", "1")
    n = 0
    for ch in text:
        if ch not in _C32_INDEX:
            raise ClarinetError(ErrorCode.INVALID_ADDRESS, f"invalid c32 character {ch!r}")
        n = n * 32 + _C32_INDEX[ch]
    if n.bit_length() > size * 8:
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, "c32 payload too long")
    return n.to_bytes(size, "big")


def _checksum(version: int, data: bytes) -> bytes:
    digest = hashlib.sha256(hashlib.sha256(bytes([version]) + data).digest()).digest()
    return digest[:4]


def c32_address(version: int, hash160: bytes) -> str:
    if len(hash160) != 20:
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, "hash160 must be 20 bytes")
    if not 0 <= version < 32:
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, "address version out of range")
    return "S" + C32_ALPHABET[version] + c32_encode(hash160 + _checksum(version, hash160))


def decode_address(address: str) -> tuple[int, bytes]:
    """Return ``(version, hash160)``; checksum mismatches are rejected."""
    if len(address) < 5 or address[0] != "S" or address[1] not in _C32_INDEX:
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, f"invalid address: {address}")
    version = _C32_INDEX[address[1]]
    raw = c32_decode(address[2:], 24)
    hash160, check = raw[:20], raw[20:]
    if _checksum(version, hash160) != check:
        raise ClarinetError(ErrorCode.INVALID_ADDRESS, f"checksum mismatch: {address}")
    return version, hash160


def is_valid_address(address: str) -> bool:
    try:
        decode_address(address)
    except ClarinetError:
        return False
    return True


def derive_address(name: str, version: int = C32_VERSION_TESTNET_SINGLESIG) -> str:
    """Deterministic address for a named devnet account."""
    digest = blake3(b"clarinet-sim/account/" + name.encode()).digest()
    return c32_address(version, digest[:20])


def contract_identifier(deployer: str, name: str) -> str:
    if not name or len(name) > MAX_CONTRACT_NAME_LENGTH:
        raise ClarinetError(ErrorCode.INVALID_FORMAT, f"invalid contract name: {name!r}")
    if not (name[0].isalpha() and all(c.isalnum() or c in "-_" for c in name)):
        raise ClarinetError(ErrorCode.INVALID_FORMAT, f"invalid contract name: {name!r}")
    return f"{deployer}.{name}"
