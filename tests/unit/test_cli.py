"""Unit tests for the CLI entry point."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from testgate import __version__
from testgate.main import cli

SAMPLE_MODULE = '''
from testgate import context_field, preconditions, run_if


class Never:
    def satisfy(self):
        return False


class Broken:
    def setup(self):
        raise RuntimeError("no database")

    def teardown(self):
        pass


class SampleSuite:
    def test_passes(self):
        pass

    def test_fails(self):
        raise AssertionError("wrong answer")

    @run_if(Never)
    def test_gated(self):
        pass

    @preconditions(Broken)
    def test_needs_database(self):
        pass


@run_if(Never)
class GatedSuite:
    def test_anything(self):
        pass


class PassingSuite:
    def test_ok(self):
        pass


class BadDeclarationSuite:
    @preconditions("no-such-precondition")
    def test_x(self):
        pass
'''


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sample_module(temp_dir: Path, clean_env: None) -> Iterator[str]:
    """Importable module with test classes, plus an isolated user home."""
    (temp_dir / "testgate_cli_sample.py").write_text(SAMPLE_MODULE)
    (temp_dir / "testgate.yaml").write_text("verbosity: warning\n")
    sys.path.insert(0, str(temp_dir))
    try:
        with patch("pathlib.Path.home", return_value=temp_dir / "home"):
            yield "testgate_cli_sample"
    finally:
        sys.path.remove(str(temp_dir))
        sys.modules.pop("testgate_cli_sample", None)


def test_version_output(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_output(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "run" in result.output
    assert "checkers" in result.output


class TestRunCommand:
    """Tests for `testgate run`."""

    def test_json_summary(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "-q",
                "--config",
                str(temp_dir / "testgate.yaml"),
                "run",
                f"{sample_module}:SampleSuite",
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 1
        rows = {row["test"].split("(")[0]: row for row in json.loads(result.output)}
        assert rows["test_passes"]["status"] == "passed"
        assert rows["test_fails"]["status"] == "failed"
        assert rows["test_fails"]["errors"] == ["AssertionError: wrong answer"]
        assert rows["test_gated"]["status"] == "skipped"
        assert rows["test_gated"]["reason"] == "skipped_method"
        assert rows["test_needs_database"]["errors"] == [
            "RuntimeError: no database"
        ]

    def test_all_passing_exits_zero(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--config",
                str(temp_dir / "testgate.yaml"),
                "run",
                f"{sample_module}:PassingSuite",
                f"{sample_module}:GatedSuite",
            ],
        )

        assert result.exit_code == 0
        assert "1 passed, 0 failed, 1 skipped" in result.output

    def test_declaration_error_exits_two(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--config",
                str(temp_dir / "testgate.yaml"),
                "run",
                f"{sample_module}:BadDeclarationSuite",
            ],
        )

        assert result.exit_code == 2
        assert "no-such-precondition" in result.output

    def test_unknown_class_is_usage_error(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--config",
                str(temp_dir / "testgate.yaml"),
                "run",
                f"{sample_module}:Missing",
            ],
        )

        assert result.exit_code == 2
        assert "'Missing' is not a class" in result.output


class TestCheckCommands:
    """Tests for `testgate checkers` and `testgate check`."""

    def test_checkers_lists_builtins(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--config", str(temp_dir / "testgate.yaml"), "checkers"]
        )

        assert result.exit_code == 0
        for name in ("os", "env", "executable", "python", "tmpdir", "environ"):
            assert name in result.output

    def test_check_satisfied(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        with patch.dict("os.environ", {"TESTGATE_CLI_FLAG": "on"}):
            result = cli_runner.invoke(
                cli,
                [
                    "--config",
                    str(temp_dir / "testgate.yaml"),
                    "check",
                    "env",
                    "TESTGATE_CLI_FLAG",
                    "on",
                ],
            )

        assert result.exit_code == 0
        assert "env: satisfied" in result.output

    def test_check_not_satisfied(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--config",
                str(temp_dir / "testgate.yaml"),
                "check",
                "python",
                "99.0",
            ],
        )

        assert result.exit_code == 1
        assert "not satisfied" in result.output

    def test_check_unknown_checker(
        self, cli_runner: CliRunner, sample_module: str, temp_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--config", str(temp_dir / "testgate.yaml"), "check", "nope"]
        )

        assert result.exit_code == 2
        assert "Unknown checker 'nope'" in result.output


def test_invalid_config_exits_two(
    cli_runner: CliRunner, sample_module: str, temp_dir: Path
) -> None:
    config = temp_dir / "testgate.yaml"
    config.write_text("verbosity: loud\n")

    result = cli_runner.invoke(cli, ["--config", str(config), "checkers"])

    assert result.exit_code == 2
    assert "Field: verbosity" in result.output


def test_missing_explicit_config_is_usage_error(
    cli_runner: CliRunner, temp_dir: Path
) -> None:
    result = cli_runner.invoke(
        cli, ["--config", str(temp_dir / "missing.yaml"), "checkers"]
    )

    assert result.exit_code == 2
    assert "does not exist" in result.output
