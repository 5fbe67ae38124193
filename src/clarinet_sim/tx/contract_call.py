"""Contract call transactions and the shared function invoker."""

from __future__ import annotations

from copy import deepcopy
from typing import List, Sequence

from ..contracts.base import PUBLIC, CallContext
from ..errors import ClarinetError, ErrorCode
from ..types import ChainState, ContractCallPayload, Transaction
from ..values import ClarityValue, ResponseValue


def resolve_contract(state: ChainState, contract: str) -> str:
    """Resolve ``name`` against the deployer, or accept a full ``addr.name``."""
    if "." in contract:
        identifier = contract[1:] if contract.startswith("'") else contract
    elif state.deployer is not None:
        identifier = f"{state.deployer}.{contract}"
    else:
        identifier = contract
    if identifier not in state.contracts:
        raise ClarinetError(ErrorCode.CONTRACT_NOT_FOUND, f"contract not found: {contract}")
    return identifier


def _check_args(spec, args: Sequence[ClarityValue]) -> None:
    if len(args) != len(spec.params):
        raise ClarinetError(
            ErrorCode.INVALID_ARGUMENT,
            f"{spec.name} expects {len(spec.params)} arguments, got {len(args)}",
        )
    for (pname, ptype), arg in zip(spec.params, args):
        if not isinstance(arg, ptype):
            got = getattr(arg, "type_name", type(arg).__name__)
            raise ClarinetError(
                ErrorCode.INVALID_ARGUMENT,
                f"{spec.name}: argument {pname} expects {ptype.type_name}, got {got}",
            )


def invoke(
    state: ChainState,
    identifier: str,
    function: str,
    args: Sequence[ClarityValue],
    sender: str,
    block_height: int,
    read_only: bool,
) -> tuple[ClarityValue, List[dict]]:
    """Run a contract function against ``state`` in place."""
    contract = state.contracts[identifier]
    spec = contract.contract_cls.function(function)
    _check_args(spec, args)

    events: List[dict] = []
    ctx = CallContext(
        state=state,
        contract_id=identifier,
        sender=sender,
        block_height=block_height,
        read_only=read_only or spec.access != PUBLIC,
        events=events,
    )
    instance = contract.contract_cls()
    result = getattr(instance, spec.method_name)(ctx, *args)

    if not isinstance(result, ClarityValue):
        raise ClarinetError(ErrorCode.INVALID_RETURN, f"{function} returned {type(result).__name__}")
    if spec.access == PUBLIC and not isinstance(result, ResponseValue):
        raise ClarinetError(ErrorCode.INVALID_RETURN, f"public function {function} must return a response")
    return result, events


def verify(state: ChainState, tx: Transaction) -> None:
    p = tx.payload
    if not isinstance(p, ContractCallPayload):
        raise ClarinetError(ErrorCode.INVALID_ARGUMENT, "contract_call payload expected")
    identifier = resolve_contract(state, p.contract)
    spec = state.contracts[identifier].contract_cls.function(p.function)
    if spec.access != PUBLIC:
        raise ClarinetError(ErrorCode.INVALID_ARGUMENT, f"{p.function} is not a public function")
    _check_args(spec, p.args)


def apply(state: ChainState, tx: Transaction, block_height: int) -> tuple[ChainState, ClarityValue, list]:
    next_state = deepcopy(state)
    p = tx.payload
    identifier = resolve_contract(next_state, p.contract)
    result, events = invoke(
        next_state, identifier, p.function, p.args, tx.sender, block_height, read_only=False
    )
    return next_state, result, events
