#!/usr/bin/env python3
"""
clarinet-sim command line.

`clarinet-sim test` imports ``*_test.py`` modules, which register tests
through `Clarinet.test`, then runs every registered test against a fresh
simulated chain.
"""

import glob
import importlib.util
import logging
import os
import sys
from typing import List, Optional, Tuple

import click
from blake3 import blake3

from .chain import new_session
from .config import SessionConfig
from .errors import ClarinetError
from .harness import Clarinet
from .reporter import ReportGenerator

logger = logging.getLogger(__name__)


def find_test_files(paths: Tuple[str, ...]) -> List[str]:
    """Expand files and directories into ``*_test.py`` module paths."""
    files = []
    for path in paths:
        if os.path.isfile(path):
            files.append(path)
            continue
        files.extend(glob.glob(os.path.join(path, "**", "*_test.py"), recursive=True))
    return sorted(set(files))


def module_name_for(path: str) -> str:
    """Module name unique per file, so equal basenames in different dirs coexist."""
    stem = os.path.splitext(os.path.basename(path))[0]
    digest = blake3(os.path.abspath(path).encode()).hexdigest()[:12]
    return f"clarinet_sim_tests.{stem}_{digest}"


def import_test_module(path: str) -> None:
    module_name = module_name_for(path)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise click.ClickException(f"Cannot import test module {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)


def _load_config(manifest: Optional[str]) -> SessionConfig:
    try:
        config = SessionConfig.from_env()
        if manifest:
            loaded = SessionConfig.from_manifest(manifest)
            loaded.report_dir = config.report_dir
            loaded.verbose = config.verbose
            loaded.stop_on_first_failure = config.stop_on_first_failure
            config = loaded
    except ClarinetError as e:
        raise click.ClickException(str(e))
    return config


@click.group()
def main() -> None:
    """Simulated chain test harness."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


@main.command()
@click.argument("paths", nargs=-1)
@click.option(
    "--manifest",
    default=None,
    help="YAML manifest declaring accounts and contracts",
)
@click.option(
    "--report-dir",
    default=None,
    help="Directory to write JSON report and summary",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--stop-on-failure",
    is_flag=True,
    help="Stop on first test failure",
)
def test(
    paths: Tuple[str, ...],
    manifest: Optional[str],
    report_dir: Optional[str],
    verbose: bool,
    stop_on_failure: bool,
) -> None:
    """Run registered chain tests found under PATHS (default: tests)."""

    # Load config from environment, then override with CLI args
    config = _load_config(manifest)
    if report_dir:
        config.report_dir = report_dir
    if verbose:
        config.verbose = True
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if stop_on_failure:
        config.stop_on_first_failure = True

    test_files = find_test_files(paths or ("tests",))
    if not test_files:
        logger.error(f"No test files found in {', '.join(paths or ('tests',))}")
        sys.exit(1)

    logger.info(f"Found {len(test_files)} test files")
    for path in test_files:
        import_test_module(path)

    cases = Clarinet.registered()
    logger.info(f"Running {len(cases)} tests")
    report = Clarinet.run(config, cases)

    reporter = ReportGenerator(config.report_dir)
    reporter.write_json_report(report)
    reporter.write_summary(report)
    click.echo(reporter.format_summary(report))

    sys.exit(0 if report.ok else 1)


@main.command()
@click.option(
    "--manifest",
    default=None,
    help="YAML manifest declaring accounts and contracts",
)
def accounts(manifest: Optional[str]) -> None:
    """List genesis accounts with their addresses and balances."""
    config = _load_config(manifest)
    try:
        _chain, session_accounts = new_session(config)
    except ClarinetError as e:
        raise click.ClickException(str(e))
    for account in session_accounts:
        click.echo(f"{account.name:<12} {account.address} {account.balance}")


if __name__ == "__main__":
    main()
