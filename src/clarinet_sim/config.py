"""Session configuration and chain constants for the simulated devnet.

Constants mirror the Clarinet devnet defaults (`settings/Devnet.toml`).
`SessionConfig` can be built from the environment or a YAML manifest.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .errors import ErrorCode, ClarinetError

# Chain
INITIAL_BLOCK_HEIGHT = 1
STX_SYMBOL = "STX"
DEFAULT_BALANCE = 1_000_000
DEPLOYER_NAME = "deployer"
DEFAULT_ACCOUNT_NAMES = ["deployer"] + [f"wallet_{i}" for i in range(1, 10)]

# Address versions (c32check)
C32_VERSION_MAINNET_SINGLESIG = 22
C32_VERSION_TESTNET_SINGLESIG = 26

# Value limits
UINT_MAX = (1 << 128) - 1
INT_MIN = -(1 << 127)
INT_MAX = (1 << 127) - 1
MAX_BUFF_SIZE = 1_048_576
MAX_CONTRACT_NAME_LENGTH = 40

# STX transfer error codes (stx-transfer? semantics)
ERR_STX_INSUFFICIENT_BALANCE = 1
ERR_STX_SAME_SENDER_RECIPIENT = 2
ERR_STX_NON_POSITIVE_AMOUNT = 3

# Default contracts deployed at genesis (name -> "module:Class")
DEFAULT_CONTRACTS = {
    "counter": "clarinet_sim.contracts.counter:Counter",
}


@dataclass
class AccountConfig:
    """Genesis account entry."""
    name: str
    balance: int = DEFAULT_BALANCE


@dataclass
class ContractConfig:
    """Genesis contract deployment entry."""
    name: str
    path: str
    deployer: str = DEPLOYER_NAME


def _entries(data: dict, key: str) -> List[dict]:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise ClarinetError(ErrorCode.INVALID_CONFIG, f"{key} must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ClarinetError(ErrorCode.INVALID_CONFIG, f"{key} entries must be mappings")
    return entries


@dataclass
class SessionConfig:
    """Configuration for building test sessions and running them."""
    accounts: List[AccountConfig] = field(default_factory=list)
    contracts: List[ContractConfig] = field(default_factory=list)

    manifest_path: Optional[str] = None
    report_dir: Optional[str] = None

    stop_on_first_failure: bool = False
    verbose: bool = False

    @classmethod
    def default(cls) -> "SessionConfig":
        return cls(
            accounts=[AccountConfig(name=n) for n in DEFAULT_ACCOUNT_NAMES],
            contracts=[
                ContractConfig(name=name, path=path)
                for name, path in DEFAULT_CONTRACTS.items()
            ],
        )

    @classmethod
    def from_env(cls) -> "SessionConfig":
        """Load configuration from environment variables."""
        manifest = os.environ.get("CLARINET_MANIFEST")
        config = cls.from_manifest(manifest) if manifest else cls.default()

        config.report_dir = os.environ.get("CLARINET_REPORT_DIR") or None
        config.verbose = os.environ.get("CLARINET_VERBOSE", "").lower() in ("true", "1", "yes")
        config.stop_on_first_failure = os.environ.get(
            "CLARINET_STOP_ON_FIRST_FAILURE", ""
        ).lower() in ("true", "1", "yes")

        return config

    @classmethod
    def from_manifest(cls, path: str) -> "SessionConfig":
        """Load accounts and contracts from a YAML manifest.

        Example::

            accounts:
              - name: deployer
                balance: 1000000
              - name: wallet_1
            contracts:
              - name: counter
                path: clarinet_sim.contracts.counter:Counter
        """
        manifest = Path(path)
        if not manifest.is_file():
            raise ClarinetError(ErrorCode.INVALID_CONFIG, f"manifest not found: {path}")

        with open(manifest) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ClarinetError(ErrorCode.INVALID_CONFIG, "manifest must be a mapping")

        accounts = []
        for entry in _entries(data, "accounts"):
            if "name" not in entry:
                raise ClarinetError(ErrorCode.INVALID_CONFIG, "account entry missing name")
            try:
                balance = int(entry.get("balance", DEFAULT_BALANCE))
            except (TypeError, ValueError):
                raise ClarinetError(
                    ErrorCode.INVALID_CONFIG, f"invalid balance for {entry['name']!r}"
                ) from None
            if balance < 0:
                raise ClarinetError(ErrorCode.INVALID_CONFIG, "account balance negative")
            accounts.append(AccountConfig(name=str(entry["name"]), balance=balance))

        contracts = []
        for entry in _entries(data, "contracts"):
            if "name" not in entry or "path" not in entry:
                raise ClarinetError(ErrorCode.INVALID_CONFIG, "contract entry needs name and path")
            contracts.append(
                ContractConfig(
                    name=str(entry["name"]),
                    path=str(entry["path"]),
                    deployer=str(entry.get("deployer", DEPLOYER_NAME)),
                )
            )

        if not accounts:
            accounts = [AccountConfig(name=n) for n in DEFAULT_ACCOUNT_NAMES]

        names = [a.name for a in accounts]
        if len(set(names)) != len(names):
            raise ClarinetError(ErrorCode.INVALID_CONFIG, "duplicate account name")
        for c in contracts:
            if c.deployer not in names:
                raise ClarinetError(
                    ErrorCode.INVALID_CONFIG, f"unknown deployer {c.deployer!r} for {c.name}"
                )

        return cls(accounts=accounts, contracts=contracts, manifest_path=str(manifest))
