"""Contract deployment transactions."""

from __future__ import annotations

from copy import deepcopy

from ..address import contract_identifier
from ..contracts.base import Contract
from ..errors import ClarinetError, ErrorCode
from ..types import ChainState, ContractState, DeployContractPayload, Transaction
from ..values import BoolValue, ResponseValue


def verify(state: ChainState, tx: Transaction) -> None:
    p = tx.payload
    if not isinstance(p, DeployContractPayload):
        raise ClarinetError(ErrorCode.INVALID_ARGUMENT, "deploy_contract payload expected")
    if not (isinstance(p.contract_cls, type) and issubclass(p.contract_cls, Contract)):
        raise ClarinetError(ErrorCode.INVALID_TYPE, "contract class must subclass Contract")

    identifier = contract_identifier(tx.sender, p.name)
    if identifier in state.contracts:
        raise ClarinetError(ErrorCode.CONTRACT_EXISTS, f"contract already deployed: {identifier}")


def deploy(state: ChainState, name: str, contract_cls: type, deployer: str, block_height: int) -> str:
    """Register a contract in place and return its identifier."""
    identifier = contract_identifier(deployer, name)
    state.contracts[identifier] = ContractState(
        identifier=identifier,
        deployer=deployer,
        contract_cls=contract_cls,
        storage=dict(contract_cls.data_vars),
        deployed_at=block_height,
    )
    return identifier


def apply(state: ChainState, tx: Transaction, block_height: int) -> tuple[ChainState, ResponseValue, list]:
    next_state = deepcopy(state)
    p = tx.payload
    deploy(next_state, p.name, p.contract_cls, tx.sender, block_height)
    return next_state, ResponseValue(True, BoolValue(True)), []
