"""Contract base class and call context.

A contract is a `Contract` subclass. Data vars are declared with their
initial values, and callable functions are methods marked `@public` or
`@read_only`::

    class Counter(Contract):
        name = "counter"
        data_vars = {"counter": UIntValue(1)}

        @public
        def increment(self, ctx: CallContext, step: UIntValue) -> ResponseValue:
            ...

Method names are exposed with underscores turned into hyphens, so
``read_counter`` is called as ``read-counter``.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, List, Optional, Tuple

from ..config import STX_SYMBOL, UINT_MAX
from ..errors import ClarinetError, ErrorCode
from ..tx.transfer import transfer_stx
from ..types import ChainState
from ..values import BoolValue, ClarityValue, ResponseValue, UIntValue

PUBLIC = "public"
READ_ONLY = "read_only"

ERR_FT_INSUFFICIENT_BALANCE = 1
ERR_FT_SAME_SENDER_RECIPIENT = 2
ERR_FT_NON_POSITIVE_AMOUNT = 3

_TRUE = BoolValue(True)


def public(fn: Callable) -> Callable:
    fn._clarity_access = PUBLIC
    return fn


def read_only(fn: Callable) -> Callable:
    fn._clarity_access = READ_ONLY
    return fn


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    access: str
    method_name: str
    params: Tuple[Tuple[str, type], ...]


class Contract:
    """Base class for simulated contracts."""

    name: ClassVar[str] = ""
    data_vars: ClassVar[Dict[str, ClarityValue]] = {}
    fungible_tokens: ClassVar[Tuple[str, ...]] = ()
    functions: ClassVar[Dict[str, FunctionSpec]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        functions: Dict[str, FunctionSpec] = {}
        for base in reversed(cls.__mro__[1:]):
            functions.update(getattr(base, "functions", {}))
        for attr, member in vars(cls).items():
            access = getattr(member, "_clarity_access", None)
            if access is None:
                continue
            hints = typing.get_type_hints(member)
            params = []
            for pname in member.__code__.co_varnames[2:member.__code__.co_argcount]:
                ptype = hints.get(pname)
                if not (isinstance(ptype, type) and issubclass(ptype, ClarityValue)):
                    raise TypeError(f"{cls.__name__}.{attr}: parameter {pname} needs a Clarity type")
                params.append((pname, ptype))
            fname = attr.replace("_", "-")
            functions[fname] = FunctionSpec(fname, access, attr, tuple(params))
        cls.functions = functions

    @classmethod
    def function(cls, name: str) -> FunctionSpec:
        spec = cls.functions.get(name)
        if spec is None:
            raise ClarinetError(
                ErrorCode.FUNCTION_NOT_FOUND, f"{cls.name or cls.__name__} has no function {name!r}"
            )
        return spec


class CallContext:
    """Execution context handed to every contract function."""

    def __init__(
        self,
        state: ChainState,
        contract_id: str,
        sender: str,
        block_height: int,
        read_only: bool,
        events: List[dict],
        contract_caller: Optional[str] = None,
    ):
        self.state = state
        self.contract_id = contract_id
        self.sender = sender
        self.contract_caller = contract_caller or sender
        self.block_height = block_height
        self.read_only = read_only
        self.events = events

    @property
    def contract_name(self) -> str:
        return self.contract_id.split(".", 1)[1]

    def _check_writable(self, what: str) -> None:
        if self.read_only:
            raise ClarinetError(
                ErrorCode.READ_ONLY_VIOLATION, f"{what} not allowed in read-only context"
            )

    # --- Data vars ---

    def get_var(self, name: str) -> ClarityValue:
        storage = self.state.contracts[self.contract_id].storage
        if name not in storage:
            raise ClarinetError(ErrorCode.INVALID_ARGUMENT, f"unknown data var {name!r}")
        return storage[name]

    def set_var(self, name: str, value: ClarityValue) -> None:
        self._check_writable("var-set")
        storage = self.state.contracts[self.contract_id].storage
        if name not in storage:
            raise ClarinetError(ErrorCode.INVALID_ARGUMENT, f"unknown data var {name!r}")
        if type(storage[name]) is not type(value):
            raise ClarinetError(
                ErrorCode.INVALID_TYPE,
                f"data var {name!r} holds {storage[name].type_name}, got {value.type_name}",
            )
        storage[name] = value

    # --- Events ---

    def print(self, value: ClarityValue) -> ClarityValue:
        self.events.append(
            {
                "type": "contract_event",
                "contract_event": {
                    "contract_identifier": self.contract_id,
                    "topic": "print",
                    "value": value.repr_clarity(),
                },
            }
        )
        return value

    # --- Assets ---

    def stx_transfer(self, amount: int, sender: str, recipient: str) -> ResponseValue:
        self._check_writable("stx-transfer?")
        return transfer_stx(self.state, amount, sender, recipient, self.events)

    def stx_get_balance(self, owner: str) -> int:
        return self.state.assets.get(STX_SYMBOL, {}).get(owner, 0)

    def _token_symbol(self, token: str) -> str:
        if token not in self.state.contracts[self.contract_id].contract_cls.fungible_tokens:
            raise ClarinetError(ErrorCode.INVALID_ARGUMENT, f"unknown fungible token {token!r}")
        return f".{self.contract_name}.{token}"

    def _asset_identifier(self, token: str) -> str:
        return f"{self.contract_id}::{token}"

    def ft_get_balance(self, token: str, owner: str) -> int:
        return self.state.assets.get(self._token_symbol(token), {}).get(owner, 0)

    def ft_mint(self, token: str, amount: int, recipient: str) -> ResponseValue:
        self._check_writable("ft-mint?")
        symbol = self._token_symbol(token)
        if amount <= 0:
            return ResponseValue(False, UIntValue(ERR_FT_NON_POSITIVE_AMOUNT))
        ledger = self.state.assets.setdefault(symbol, {})
        if ledger.get(recipient, 0) + amount > UINT_MAX:
            raise ClarinetError(ErrorCode.ARITHMETIC_OVERFLOW, "ft balance overflow")
        ledger[recipient] = ledger.get(recipient, 0) + amount
        self.events.append(
            {
                "type": "ft_mint_event",
                "ft_mint_event": {
                    "asset_identifier": self._asset_identifier(token),
                    "recipient": recipient,
                    "amount": amount,
                },
            }
        )
        return ResponseValue(True, _TRUE)

    def ft_transfer(self, token: str, amount: int, sender: str, recipient: str) -> ResponseValue:
        self._check_writable("ft-transfer?")
        symbol = self._token_symbol(token)
        if amount <= 0:
            return ResponseValue(False, UIntValue(ERR_FT_NON_POSITIVE_AMOUNT))
        if sender == recipient:
            return ResponseValue(False, UIntValue(ERR_FT_SAME_SENDER_RECIPIENT))
        ledger = self.state.assets.setdefault(symbol, {})
        if ledger.get(sender, 0) < amount:
            return ResponseValue(False, UIntValue(ERR_FT_INSUFFICIENT_BALANCE))
        ledger[sender] -= amount
        ledger[recipient] = ledger.get(recipient, 0) + amount
        self.events.append(
            {
                "type": "ft_transfer_event",
                "ft_transfer_event": {
                    "asset_identifier": self._asset_identifier(token),
                    "sender": sender,
                    "recipient": recipient,
                    "amount": amount,
                },
            }
        )
        return ResponseValue(True, _TRUE)
