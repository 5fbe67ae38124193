"""Test registry and async runner.

    Clarinet.test(
        name="counter can be incremented",
        fn=counter_test,
    )

Each registered test gets a fresh genesis session (accounts funded,
contracts deployed, block height 1) and is awaited on its own event loop
turn; tests never share chain state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

from .chain import Chain, new_session
from .config import SessionConfig
from .errors import ClarinetError
from .reporter import ERROR, FAILED, PASSED, ReportGenerator, RunReport, TestResult
from .types import Account

logger = logging.getLogger(__name__)

TestFn = Callable[[Chain, List[Account]], Awaitable[None]]


@dataclass
class TestCase:
    name: str
    fn: TestFn

    __test__ = False


class Clarinet:
    """Process-wide registry of chain tests."""

    _registry: List[TestCase] = []

    @classmethod
    def test(cls, name: Union[str, TestFn, None] = None, fn: Optional[TestFn] = None):
        """Register ``fn`` under ``name``; without ``fn``, acts as a decorator.

        Both ``@Clarinet.test`` and ``@Clarinet.test(name=...)`` are accepted.
        """
        if callable(name) and fn is None:
            fn, name = name, None

        def register(f: TestFn) -> TestFn:
            test_name = name or f.__name__
            if any(c.name == test_name for c in cls._registry):
                logger.warning(f"Test {test_name!r} registered twice")
            cls._registry.append(TestCase(name=test_name, fn=f))
            return f

        if fn is not None:
            return register(fn)
        return register

    @classmethod
    def registered(cls) -> List[TestCase]:
        return list(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()

    @classmethod
    def run(
        cls,
        config: Optional[SessionConfig] = None,
        cases: Optional[List[TestCase]] = None,
    ) -> RunReport:
        """Run registered tests (or ``cases``) to completion."""
        config = config or SessionConfig.default()
        return asyncio.run(run_tests(cases if cases is not None else cls.registered(), config))


async def run_test(case: TestCase, config: SessionConfig) -> TestResult:
    """Run a single test in a fresh session."""
    start_time = time.time()
    chain: Optional[Chain] = None

    def _result(
        status: str, error: Optional[str] = None, exc: Optional[ClarinetError] = None
    ) -> TestResult:
        return TestResult(
            name=case.name,
            status=status,
            execution_time_ms=(time.time() - start_time) * 1000,
            block_height=chain.block_height if chain is not None else None,
            error=error,
            error_code=exc.code.name if exc is not None else None,
            error_category=exc.category.name if exc is not None else None,
        )

    try:
        chain, accounts = new_session(config)
        outcome = case.fn(chain, accounts)
        if inspect.isawaitable(outcome):
            await outcome
    except AssertionError as e:
        return _result(FAILED, str(e) or "assertion failed")
    except ClarinetError as e:
        logger.debug(f"Harness error in {case.name}", exc_info=True)
        return _result(ERROR, str(e), e)
    except Exception as e:
        logger.exception(f"Error running test {case.name}")
        return _result(ERROR, f"{type(e).__name__}: {e}")

    return _result(PASSED)


async def run_tests(cases: List[TestCase], config: SessionConfig) -> RunReport:
    """Run tests sequentially, honoring stop-on-first-failure."""
    reporter = ReportGenerator(config.report_dir)
    start_time = time.time()

    results = []
    for case in cases:
        result = await run_test(case, config)
        results.append(result)

        status = "PASS" if result.passed else result.status.upper()
        logger.info(f"  [{status}] {result.name}")

        if not result.passed and config.stop_on_first_failure:
            break

    return reporter.generate_report(
        test_results=results,
        registered=len(cases),
        execution_time_ms=(time.time() - start_time) * 1000,
    )
