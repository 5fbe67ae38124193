"""Core types for the simulated chain.

Accounts, transactions, blocks and receipts are plain dataclasses; contract
storage lives in `ContractState` and every asset balance (STX included) lives
in `ChainState.assets`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Type

from .expect import ClarityResult, EventList
from .values import ClarityValue


class TransactionType(Enum):
    CONTRACT_CALL = "contract_call"
    TRANSFER_STX = "transfer_stx"
    DEPLOY_CONTRACT = "deploy_contract"


@dataclass
class Account:
    name: str
    address: str
    balance: int = 0


@dataclass
class ContractCallPayload:
    contract: str
    function: str
    args: List[ClarityValue] = field(default_factory=list)


@dataclass
class TransferStxPayload:
    amount: int
    recipient: str


@dataclass
class DeployContractPayload:
    name: str
    contract_cls: Type


@dataclass
class Transaction:
    tx_type: TransactionType
    sender: str
    payload: object


@dataclass
class Receipt:
    result: ClarityResult
    events: EventList = field(default_factory=EventList)
    txid: str = ""

    @property
    def success(self) -> bool:
        v = self.result.value
        return getattr(v, "ok", False) is True


@dataclass
class Block:
    height: int
    receipts: List[Receipt] = field(default_factory=list)
    hash: str = ""


@dataclass
class EmptyBlock:
    block_height: int


@dataclass
class ReadOnlyFn:
    result: ClarityResult
    events: EventList = field(default_factory=EventList)


@dataclass
class AssetsMap:
    assets: Dict[str, Dict[str, int]] = field(default_factory=dict)


# --- Contract ---


@dataclass
class ContractState:
    identifier: str
    deployer: str
    contract_cls: Type
    storage: Dict[str, ClarityValue] = field(default_factory=dict)
    deployed_at: int = 0


# --- ChainState ---


@dataclass
class ChainState:
    block_height: int = 0
    accounts: Dict[str, Account] = field(default_factory=dict)
    # symbol -> address -> balance; "STX" is the native asset.
    assets: Dict[str, Dict[str, int]] = field(default_factory=dict)
    contracts: Dict[str, ContractState] = field(default_factory=dict)
    nonces: Dict[str, int] = field(default_factory=dict)
    deployer: Optional[str] = None
    last_block_hash: str = ""
