"""Chain handle and transaction builders used by tests."""

from __future__ import annotations

import importlib
import logging
from typing import List, Sequence, Type

from .address import derive_address
from .config import DEPLOYER_NAME, INITIAL_BLOCK_HEIGHT, STX_SYMBOL, SessionConfig
from .contracts.base import Contract
from .errors import ClarinetError, ErrorCode
from .state_digest import compute_state_digest
from .state_transition import apply_block, call_read_only, mine_empty_blocks
from .tx.deploy import deploy
from .types import (
    Account,
    AssetsMap,
    Block,
    ChainState,
    ContractCallPayload,
    DeployContractPayload,
    EmptyBlock,
    ReadOnlyFn,
    Transaction,
    TransactionType,
    TransferStxPayload,
)
from .values import ClarityValue

logger = logging.getLogger(__name__)


class Tx:
    """Transaction builders."""

    @staticmethod
    def contract_call(
        contract: str, function: str, args: Sequence[ClarityValue], sender: str
    ) -> Transaction:
        return Transaction(
            tx_type=TransactionType.CONTRACT_CALL,
            sender=sender,
            payload=ContractCallPayload(contract=contract, function=function, args=list(args)),
        )

    @staticmethod
    def transfer_stx(amount: int, recipient: str, sender: str) -> Transaction:
        return Transaction(
            tx_type=TransactionType.TRANSFER_STX,
            sender=sender,
            payload=TransferStxPayload(amount=amount, recipient=recipient),
        )

    @staticmethod
    def deploy_contract(name: str, contract_cls: Type, sender: str) -> Transaction:
        return Transaction(
            tx_type=TransactionType.DEPLOY_CONTRACT,
            sender=sender,
            payload=DeployContractPayload(name=name, contract_cls=contract_cls),
        )


class Chain:
    """Handle over a simulated chain session.

    All mutation goes through `mine_block` / `mine_empty_block`; every other
    method is a query.
    """

    def __init__(self, state: ChainState):
        self.state = state

    @property
    def block_height(self) -> int:
        return self.state.block_height

    def mine_block(self, transactions: Sequence[Transaction]) -> Block:
        self.state, block = apply_block(self.state, list(transactions))
        return block

    def mine_empty_block(self, count: int = 1) -> EmptyBlock:
        self.state = mine_empty_blocks(self.state, count)
        return EmptyBlock(block_height=self.state.block_height)

    def mine_empty_block_until(self, target_block_height: int) -> EmptyBlock:
        if target_block_height < self.state.block_height:
            raise ClarinetError(
                ErrorCode.INVALID_BLOCK_HEIGHT,
                f"chain tip {self.state.block_height} is already past {target_block_height}",
            )
        return self.mine_empty_block(target_block_height - self.state.block_height)

    def call_read_only_fn(
        self, contract: str, function: str, args: Sequence[ClarityValue], sender: str
    ) -> ReadOnlyFn:
        return call_read_only(self.state, contract, function, args, sender)

    def get_assets_maps(self) -> AssetsMap:
        return AssetsMap(
            assets={symbol: dict(ledger) for symbol, ledger in self.state.assets.items()}
        )

    def state_digest(self) -> str:
        return compute_state_digest(self.state)


def load_contract_class(path: str) -> Type:
    """Import ``package.module:ClassName``."""
    module_name, sep, cls_name = path.partition(":")
    if not sep or not cls_name:
        raise ClarinetError(ErrorCode.INVALID_CONFIG, f"contract path must be module:Class, got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ClarinetError(ErrorCode.INVALID_CONFIG, f"cannot import {module_name}: {exc}") from exc
    cls = getattr(module, cls_name, None)
    if not (isinstance(cls, type) and issubclass(cls, Contract)):
        raise ClarinetError(ErrorCode.INVALID_CONFIG, f"{path} is not a Contract subclass")
    return cls


def new_session(config: SessionConfig) -> tuple[Chain, List[Account]]:
    """Build a fresh genesis chain: funded accounts, then contract deployments."""
    state = ChainState(block_height=0)
    accounts: List[Account] = []
    by_name = {}
    for entry in config.accounts:
        account = Account(name=entry.name, address=derive_address(entry.name), balance=entry.balance)
        accounts.append(account)
        by_name[entry.name] = account
        state.accounts[account.address] = account
        state.assets.setdefault(STX_SYMBOL, {})[account.address] = entry.balance

    if accounts:
        state.deployer = by_name.get(DEPLOYER_NAME, accounts[0]).address

    for contract in config.contracts:
        deployer = by_name.get(contract.deployer)
        if deployer is None:
            raise ClarinetError(ErrorCode.ACCOUNT_NOT_FOUND, f"unknown deployer {contract.deployer!r}")
        identifier = deploy(
            state, contract.name, load_contract_class(contract.path), deployer.address, 0
        )
        logger.debug("deployed %s at genesis", identifier)

    state.block_height = INITIAL_BLOCK_HEIGHT
    return Chain(state), accounts
