"""Counter contract scenarios across multiple blocks."""

from __future__ import annotations

import asyncio

import pytest

from clarinet_sim.chain import Tx
from clarinet_sim.contracts.counter import ERR_COUNTER_UNDERFLOW
from clarinet_sim.errors import ClarinetError, ErrorCode
from clarinet_sim.expect import expect_buff
from clarinet_sim.values import types


def _increments(sender_addrs: list[str], steps: list[int]) -> list:
    return [
        Tx.contract_call("counter", "increment", [types.uint(step)], sender)
        for sender, step in zip(sender_addrs, steps)
    ]


def test_increments_across_multiple_blocks(chain, accounts) -> None:
    a0, a1, a2 = (a.address for a in accounts[:3])

    block = chain.mine_block(_increments([a0, a1, a2], [1, 4, 10]))
    assert block.height == 2
    block.receipts[0].result.expect_ok().expect_uint(2)
    block.receipts[1].result.expect_ok().expect_uint(6)
    block.receipts[2].result.expect_ok().expect_uint(16)

    block = chain.mine_block(_increments([a0, a0, a0], [1, 4, 10]))
    assert block.height == 3
    block.receipts[0].result.expect_ok().expect_uint(17)
    block.receipts[1].result.expect_ok().expect_uint(21)
    block.receipts[2].result.expect_ok().expect_uint(31)

    result = chain.get_assets_maps()
    assert result.assets["STX"][a0] == 1_000_000

    call = chain.call_read_only_fn("counter", "read-counter", [], a0)
    call.result.expect_ok().expect_uint(31)
    assert chain.block_height == 3

    expect_buff("0x0001020304", bytes([0, 1, 2, 3, 4]))


def test_registered_async_scenario(registry) -> None:
    """Same scenario driven through the registry and async runner."""

    async def scenario(chain, accounts) -> None:
        block = chain.mine_block(_increments([a.address for a in accounts[:3]], [1, 4, 10]))
        assert block.height == 2
        assert [r.result.expect_ok().expect_uint(v) for r, v in zip(block.receipts, [2, 6, 16])]
        block = chain.mine_block(_increments([accounts[0].address] * 3, [1, 4, 10]))
        assert block.height == 3
        block.receipts[2].result.expect_ok().expect_uint(31)
        chain.call_read_only_fn(
            "counter", "read-counter", [], accounts[0].address
        ).result.expect_ok().expect_uint(31)

    registry.test(name="counter increments", fn=scenario)
    report = registry.run()

    assert report.ok
    assert report.total_passed == 1
    assert report.test_results[0].block_height == 3


def test_initial_counter_value(chain, accounts) -> None:
    call = chain.call_read_only_fn("counter", "read-counter", [], accounts[0].address)
    call.result.expect_ok().expect_uint(1)


def test_receipts_follow_submission_order(chain, accounts) -> None:
    steps = [10, 1, 4]
    block = chain.mine_block(_increments([accounts[0].address] * 3, steps))
    assert [r.result.expect_ok().expect_uint(v) for r, v in zip(block.receipts, [11, 12, 16])]


def test_increment_emits_print_event(chain, accounts) -> None:
    block = chain.mine_block(_increments([accounts[1].address], [4]))
    receipt = block.receipts[0]
    assert receipt.success
    contract_id = f"{accounts[0].address}.counter"
    event = receipt.events.expect_print_event(
        contract_id,
        types.tuple({
            "object": types.ascii("counter"),
            "action": types.ascii("incremented"),
            "value": types.uint(5),
        }),
    )
    assert event["value"] == '{action: "incremented", object: "counter", value: u5}'


def test_decrement_underflow_is_err_and_rolls_back(chain, accounts) -> None:
    sender = accounts[0].address
    block = chain.mine_block([
        Tx.contract_call("counter", "decrement", [types.uint(5)], sender),
        Tx.contract_call("counter", "decrement", [types.uint(1)], sender),
    ])
    block.receipts[0].result.expect_err().expect_uint(ERR_COUNTER_UNDERFLOW)
    assert not block.receipts[0].success
    assert len(block.receipts[0].events) == 0
    block.receipts[1].result.expect_ok().expect_uint(0)

    call = chain.call_read_only_fn("counter", "read-counter", [], sender)
    call.result.expect_ok().expect_uint(0)


def test_read_only_call_does_not_mutate(chain, accounts) -> None:
    chain.mine_block(_increments([accounts[0].address], [3]))
    digest = chain.state_digest()
    height = chain.block_height

    for _ in range(3):
        chain.call_read_only_fn("counter", "read-counter", [], accounts[1].address)

    assert chain.state_digest() == digest
    assert chain.block_height == height


def test_read_only_call_of_public_function_is_discarded(chain, accounts) -> None:
    call = chain.call_read_only_fn("counter", "increment", [types.uint(9)], accounts[0].address)
    call.result.expect_ok().expect_uint(10)
    chain.call_read_only_fn(
        "counter", "read-counter", [], accounts[0].address
    ).result.expect_ok().expect_uint(1)


def test_read_counter_is_not_callable_as_transaction(chain, accounts) -> None:
    with pytest.raises(ClarinetError) as exc:
        chain.mine_block([Tx.contract_call("counter", "read-counter", [], accounts[0].address)])
    assert exc.value.code == ErrorCode.INVALID_ARGUMENT


def test_increment_rejects_wrong_argument_type(chain, accounts) -> None:
    with pytest.raises(ClarinetError) as exc:
        chain.mine_block([
            Tx.contract_call("counter", "increment", [types.int(1)], accounts[0].address)
        ])
    assert exc.value.code == ErrorCode.INVALID_ARGUMENT
    assert chain.block_height == 1


def test_increment_overflow_is_runtime_error(chain, accounts) -> None:
    max_step = (1 << 128) - 1
    with pytest.raises(ClarinetError) as exc:
        chain.mine_block([
            Tx.contract_call("counter", "increment", [types.uint(max_step)], accounts[0].address)
        ])
    assert exc.value.code == ErrorCode.ARITHMETIC_OVERFLOW


def test_example_scenario_module_passes(registry) -> None:
    """The shipped example registers a passing test."""
    from pathlib import Path

    from clarinet_sim.cli import import_test_module

    path = Path(__file__).resolve().parent.parent / "examples" / "counter" / "tests" / "counter_test.py"
    import_test_module(str(path))
    cases = registry.registered()
    assert len(cases) == 1

    report = registry.run(cases=cases)
    assert report.ok, report.test_results[0].error


def test_scenario_runs_on_plain_event_loop(chain, accounts) -> None:
    async def scenario() -> int:
        block = chain.mine_block(_increments([accounts[0].address], [1]))
        return block.height

    assert asyncio.run(scenario()) == 2
