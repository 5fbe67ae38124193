"""
Report generation for harness test runs.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

PASSED = "passed"
FAILED = "failed"
ERROR = "error"


@dataclass
class TestResult:
    """Result of a single registered test."""
    name: str
    status: str
    execution_time_ms: float
    block_height: Optional[int] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    error_category: Optional[str] = None

    __test__ = False

    @property
    def passed(self) -> bool:
        return self.status == PASSED


@dataclass
class RunReport:
    """Complete harness run report."""
    timestamp: str
    total_tests: int
    total_passed: int
    total_failed: int
    total_errors: int
    skipped_tests: int
    execution_time_ms: float
    test_results: List[TestResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.total_failed == 0 and self.total_errors == 0

    @property
    def pass_rate(self) -> float:
        if self.total_tests == 0:
            return 0.0
        return self.total_passed / self.total_tests * 100


class ReportGenerator:
    """Generates harness run reports."""

    def __init__(self, result_dir: Optional[str] = None):
        """
        Initialize report generator.

        Args:
            result_dir: Directory to write reports to; None disables file output
        """
        self.result_dir = result_dir
        if result_dir:
            os.makedirs(result_dir, exist_ok=True)

    def generate_report(
        self,
        test_results: List[TestResult],
        registered: int,
        execution_time_ms: float,
    ) -> RunReport:
        """
        Aggregate test results into a report.

        Args:
            test_results: Results of the tests that ran
            registered: Number of registered tests (not run ones count as skipped)
            execution_time_ms: Total execution time

        Returns:
            RunReport object
        """
        return RunReport(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            total_tests=len(test_results),
            total_passed=sum(1 for r in test_results if r.status == PASSED),
            total_failed=sum(1 for r in test_results if r.status == FAILED),
            total_errors=sum(1 for r in test_results if r.status == ERROR),
            skipped_tests=registered - len(test_results),
            execution_time_ms=execution_time_ms,
            test_results=test_results,
        )

    def write_json_report(
        self,
        report: RunReport,
        filename: str = "clarinet-report.json",
    ) -> Optional[str]:
        """Write the report as JSON; returns the path, or None without a result dir."""
        if not self.result_dir:
            return None
        path = os.path.join(self.result_dir, filename)
        with open(path, "w") as f:
            json.dump(asdict(report), f, indent=2)
        return path

    def format_summary(self, report: RunReport) -> str:
        lines = []
        for r in report.test_results:
            marker = {PASSED: "ok", FAILED: "FAILED", ERROR: "ERROR"}[r.status]
            lines.append(f"* {r.name} ... {marker} ({r.execution_time_ms:.0f}ms)")
            if r.error:
                lines.append(f"    {r.error}")
        lines.append("")
        lines.append(
            f"{report.total_passed} passed, {report.total_failed} failed, "
            f"{report.total_errors} errors, {report.skipped_tests} skipped "
            f"({report.execution_time_ms:.0f}ms)"
        )
        return "\n".join(lines)

    def write_summary(
        self,
        report: RunReport,
        filename: str = "summary.txt",
    ) -> Optional[str]:
        if not self.result_dir:
            return None
        path = os.path.join(self.result_dir, filename)
        with open(path, "w") as f:
            f.write(self.format_summary(report) + "\n")
        return path
