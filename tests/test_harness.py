"""Registry, async runner and reports."""

from __future__ import annotations

import json

from clarinet_sim.chain import Tx
from clarinet_sim.config import SessionConfig
from clarinet_sim.reporter import ERROR, FAILED, PASSED, ReportGenerator
from clarinet_sim.values import types


async def _passing(chain, accounts) -> None:
    block = chain.mine_block([
        Tx.contract_call("counter", "increment", [types.uint(1)], accounts[0].address)
    ])
    block.receipts[0].result.expect_ok().expect_uint(2)


async def _failing(chain, accounts) -> None:
    block = chain.mine_block([
        Tx.contract_call("counter", "increment", [types.uint(1)], accounts[0].address)
    ])
    block.receipts[0].result.expect_ok().expect_uint(99)


async def _harness_error(chain, accounts) -> None:
    chain.call_read_only_fn("missing", "read", [], accounts[0].address)


async def _crash(chain, accounts) -> None:
    raise RuntimeError("boom")


def test_register_with_fn_keyword(registry) -> None:
    returned = registry.test(name="passes", fn=_passing)
    assert returned is _passing
    assert [c.name for c in registry.registered()] == ["passes"]


def test_register_as_decorator(registry) -> None:
    @registry.test(name="decorated")
    async def decorated(chain, accounts) -> None:
        assert chain.block_height == 1

    @registry.test()
    async def unnamed(chain, accounts) -> None:
        assert len(accounts) == 10

    @registry.test
    async def bare(chain, accounts) -> None:
        assert accounts[0].name == "deployer"

    assert [c.name for c in registry.registered()] == ["decorated", "unnamed", "bare"]
    assert bare.__name__ == "bare"
    assert registry.run().ok


def test_each_test_gets_a_fresh_session(registry) -> None:
    registry.test(name="first", fn=_passing)
    registry.test(name="second", fn=_passing)
    report = registry.run()
    assert report.total_passed == 2
    assert [r.block_height for r in report.test_results] == [2, 2]


def test_outcomes_are_classified(registry) -> None:
    registry.test(name="pass", fn=_passing)
    registry.test(name="fail", fn=_failing)
    registry.test(name="harness-error", fn=_harness_error)
    registry.test(name="crash", fn=_crash)

    report = registry.run()
    statuses = {r.name: r.status for r in report.test_results}
    assert statuses == {"pass": PASSED, "fail": FAILED, "harness-error": ERROR, "crash": ERROR}
    assert not report.ok
    assert (report.total_passed, report.total_failed, report.total_errors) == (1, 1, 2)

    by_name = {r.name: r for r in report.test_results}
    assert "expected u99, got u2" in by_name["fail"].error
    assert by_name["harness-error"].error_code == "CONTRACT_NOT_FOUND"
    assert by_name["harness-error"].error_category == "CONTRACT"
    assert by_name["crash"].error_category is None
    assert by_name["crash"].error == "RuntimeError: boom"


def test_stop_on_first_failure(registry) -> None:
    registry.test(name="fail", fn=_failing)
    registry.test(name="pass", fn=_passing)
    config = SessionConfig.default()
    config.stop_on_first_failure = True

    report = registry.run(config)
    assert report.total_tests == 1
    assert report.skipped_tests == 1


def test_sync_test_functions_are_accepted(registry) -> None:
    def sync_test(chain, accounts) -> None:
        assert chain.block_height == 1

    registry.test(name="sync", fn=sync_test)
    assert registry.run().ok


def test_reports_written(registry, tmp_path) -> None:
    registry.test(name="pass", fn=_passing)
    report = registry.run()

    reporter = ReportGenerator(str(tmp_path / "out"))
    json_path = reporter.write_json_report(report)
    summary_path = reporter.write_summary(report)

    data = json.loads(open(json_path).read())
    assert data["total_passed"] == 1
    assert data["test_results"][0]["name"] == "pass"
    assert "1 passed, 0 failed" in open(summary_path).read()
    assert report.pass_rate == 100.0


def test_reporter_without_dir(registry) -> None:
    registry.test(name="pass", fn=_passing)
    report = registry.run()
    reporter = ReportGenerator(None)
    assert reporter.write_json_report(report) is None
    assert "* pass ... ok" in reporter.format_summary(report)
