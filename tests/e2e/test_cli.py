"""End-to-end CLI coverage for the commands exposed by lib_live_config.

The tests run the documented workflows (dump, get, validate, metadata
lookups) through Click's runner and through ``main`` so the shared exit code
handling of ``lib_cli_exit_tools`` is exercised as well.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import lib_cli_exit_tools

from lib_live_config import ConfigKeyError, MultiError, cli


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


@pytest.fixture
def files(tmp_path: Path) -> list[Path]:
    base = tmp_path / "base.json"
    base.write_text('{"db": {"host": "localhost", "port": 5432}, "feature": {"enabled": "yes"}}', encoding="utf-8")
    override = tmp_path / "override.toml"
    override.write_text('[db]\nhost = "db.internal"\nratio = 0.5\n', encoding="utf-8")
    return [base, override]


def _file_args(paths: list[Path]) -> list[str]:
    args: list[str] = []
    for path in paths:
        args += ["--file", str(path)]
    return args


def test_cli_env_prefix() -> None:
    result = _runner().invoke(cli.cli, ["env-prefix", "config-kit"])
    assert result.exit_code == 0
    assert result.output.strip() == "CONFIG_KIT"


def test_cli_dump_merges_files_in_order(files: list[Path]) -> None:
    result = _runner().invoke(cli.cli, ["dump", *_file_args(files), "--indent", "2"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["db"] == {"host": "db.internal", "port": 5432, "ratio": 0.5}
    assert "\n  " in result.output


def test_cli_dump_includes_environment(files: list[Path], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLITEST_DB__PORT", "6543")
    result = _runner().invoke(cli.cli, ["dump", *_file_args(files), "--env-prefix", "CLITEST"])
    assert result.exit_code == 0
    assert json.loads(result.output)["db"]["port"] == "6543"


@pytest.mark.parametrize(
    ("key", "value_type", "expected"),
    [
        ("db.host", "string", "db.internal"),
        ("db.port", "int", "5432"),
        ("db.ratio", "float", "0.5"),
        ("feature.enabled", "bool", "true"),
        ("db", "raw", '{"host": "db.internal", "port": 5432, "ratio": 0.5}'),
    ],
)
def test_cli_get_typed(files: list[Path], key: str, value_type: str, expected: str) -> None:
    result = _runner().invoke(cli.cli, ["get", key, *_file_args(files), "--type", value_type])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == expected


def test_cli_get_missing_key_fails(files: list[Path]) -> None:
    result = _runner().invoke(cli.cli, ["get", "db.password", *_file_args(files)])
    assert result.exit_code != 0
    assert isinstance(result.exception, ConfigKeyError)


def test_cli_validate(files: list[Path]) -> None:
    ok = _runner().invoke(cli.cli, ["validate", "db.host", "db.port", *_file_args(files)])
    assert ok.exit_code == 0
    assert "2 key(s) present" in ok.output

    first = _runner().invoke(cli.cli, ["validate", "db.host", "a", "b", *_file_args(files)])
    assert isinstance(first.exception, ConfigKeyError)

    every = _runner().invoke(cli.cli, ["validate", "a", "b", *_file_args(files), "--all"])
    assert isinstance(every.exception, MultiError)
    assert len(every.exception) == 2


def test_cli_watch_requires_a_file() -> None:
    result = _runner().invoke(cli.cli, ["watch"])
    assert result.exit_code == 2
    assert "at least one --file" in result.output


def test_cli_version() -> None:
    result = _runner().invoke(cli.cli, ["--version"])
    assert result.exit_code == 0
    assert "lib_live_config version" in result.output


def test_cli_info_runs() -> None:
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "lib_live_config" in result.output


def test_main_returns_zero_on_success(files: list[Path], capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["get", "db.port", *_file_args(files), "--type", "int"])
    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "5432"


def test_main_reports_failures_with_nonzero_exit(files: list[Path]) -> None:
    exit_code = cli.main(["get", "missing.key", *_file_args(files)])
    assert exit_code != 0


def test_main_restores_traceback_flag(files: list[Path]) -> None:
    previous = lib_cli_exit_tools.config.traceback
    cli.main(["--traceback", "get", "db.host", *_file_args(files)])
    assert lib_cli_exit_tools.config.traceback == previous
