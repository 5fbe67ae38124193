"""clarinet-sim command line."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from click.testing import CliRunner

from clarinet_sim.cli import find_test_files, import_test_module, main, module_name_for

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "counter" / "tests"

FAILING_TEST = """\
from clarinet_sim.harness import Clarinet


async def broken(chain, accounts):
    chain.call_read_only_fn("counter", "read-counter", [], accounts[0].address).result.expect_ok().expect_uint(7)


Clarinet.test(name="broken", fn=broken)
"""


def test_find_test_files(tmp_path) -> None:
    (tmp_path / "nested").mkdir()
    (tmp_path / "a_test.py").write_text("")
    (tmp_path / "nested" / "b_test.py").write_text("")
    (tmp_path / "helper.py").write_text("")
    files = find_test_files((str(tmp_path),))
    assert [Path(f).name for f in files] == ["a_test.py", "b_test.py"]


def test_cli_runs_example(registry, tmp_path) -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["test", str(EXAMPLE), "--report-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "1 passed, 0 failed" in result.output

    report = json.loads((tmp_path / "clarinet-report.json").read_text())
    assert report["total_passed"] == 1
    assert (tmp_path / "summary.txt").exists()


def test_cli_failing_test_exit_code(registry, tmp_path) -> None:
    path = tmp_path / "broken_test.py"
    path.write_text(FAILING_TEST)
    result = CliRunner().invoke(main, ["test", str(path)])
    assert result.exit_code == 1
    assert "broken ... FAILED" in result.output


def test_cli_no_test_files(registry, tmp_path) -> None:
    result = CliRunner().invoke(main, ["test", str(tmp_path)])
    assert result.exit_code == 1


def test_cli_bad_manifest(registry, tmp_path) -> None:
    result = CliRunner().invoke(main, ["test", str(EXAMPLE), "--manifest", str(tmp_path / "nope.yaml")])
    assert result.exit_code != 0
    assert "INVALID_CONFIG" in result.output


def test_cli_accounts() -> None:
    result = CliRunner().invoke(main, ["accounts"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 10
    assert lines[0].startswith("deployer")
    assert lines[0].endswith("1000000")


def test_same_basename_in_different_dirs(registry, tmp_path) -> None:
    paths = []
    for sub in ("a", "b"):
        (tmp_path / sub).mkdir()
        path = tmp_path / sub / "counter_test.py"
        path.write_text(
            "from clarinet_sim.harness import Clarinet\n\n\n"
            "async def check(chain, accounts):\n"
            "    assert chain.block_height == 1\n\n\n"
            f"Clarinet.test(name={sub!r}, fn=check)\n"
        )
        paths.append(str(path))

    assert module_name_for(paths[0]) != module_name_for(paths[1])
    for path in paths:
        import_test_module(path)
    assert [c.name for c in registry.registered()] == ["a", "b"]
    assert all(module_name_for(p) in sys.modules for p in paths)
