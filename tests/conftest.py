"""Shared fixtures: a fresh genesis session per test."""

from __future__ import annotations

from typing import Iterator

import pytest

from clarinet_sim.chain import Chain, new_session
from clarinet_sim.config import SessionConfig
from clarinet_sim.harness import Clarinet
from clarinet_sim.types import Account


@pytest.fixture
def session() -> tuple[Chain, list[Account]]:
    return new_session(SessionConfig.default())


@pytest.fixture
def chain(session) -> Chain:
    return session[0]


@pytest.fixture
def accounts(session) -> list[Account]:
    return session[1]


@pytest.fixture
def registry() -> Iterator[type[Clarinet]]:
    """Empty test registry, restored afterwards."""
    saved = Clarinet.registered()
    Clarinet.clear()
    yield Clarinet
    Clarinet.clear()
    Clarinet._registry.extend(saved)
