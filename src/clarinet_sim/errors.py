"""Error codes and exceptions for the simulated chain harness."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    VALIDATION = 0x01
    STATE = 0x04
    CONTRACT = 0x05
    CONFIG = 0x06
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Validation
    INVALID_FORMAT = 0x0100
    INVALID_TYPE = 0x0102
    INVALID_AMOUNT = 0x0105
    INVALID_ADDRESS = 0x0106
    INVALID_ARGUMENT = 0x0107
    VALUE_OUT_OF_RANGE = 0x0108

    # State
    ACCOUNT_NOT_FOUND = 0x0400
    INVALID_BLOCK_HEIGHT = 0x0401

    # Contract
    CONTRACT_NOT_FOUND = 0x0500
    CONTRACT_EXISTS = 0x0501
    FUNCTION_NOT_FOUND = 0x0502
    READ_ONLY_VIOLATION = 0x0503
    INVALID_RETURN = 0x0504
    ARITHMETIC_OVERFLOW = 0x0505

    # Config
    INVALID_CONFIG = 0x0600

    # Internal
    NOT_IMPLEMENTED = 0xFF01

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self >> 8)


@dataclass(frozen=True)
class ClarinetError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"

    @property
    def category(self) -> ErrorCategory:
        return self.code.category


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen.
_EXCEPTION_ATTRS = frozenset(
    ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
)
_frozen_setattr = ClarinetError.__setattr__


def _clarinet_error_setattr(self: ClarinetError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


ClarinetError.__setattr__ = _clarinet_error_setattr  # type: ignore[method-assign]


class ExpectationError(AssertionError):
    """Raised by the chained expectation helpers on a mismatch."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected}, got {actual}")
