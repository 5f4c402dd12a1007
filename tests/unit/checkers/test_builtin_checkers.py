"""Unit tests for the built-in checkers."""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from testgate.checkers import (
    EnvironmentVariableChecker,
    ExecutableChecker,
    OperatingSystemChecker,
    PythonVersionChecker,
    create_checker,
)


class TestOperatingSystemChecker:
    """Tests for OperatingSystemChecker."""

    @pytest.mark.parametrize(
        ("system", "target", "expected"),
        [
            ("Linux", "linux", True),
            ("Darwin", "mac", True),
            ("Windows", "win", True),
            ("Linux", "mac", False),
            ("Darwin", "win", False),
            ("Darwin", "darwin", True),
            ("Windows", "windows", True),
        ],
    )
    def test_single_target(self, system: str, target: str, expected: bool) -> None:
        with patch("platform.system", return_value=system):
            assert OperatingSystemChecker(target).satisfy() is expected

    def test_darwin_platform_string_does_not_match_windows(self) -> None:
        with (
            patch("platform.system", return_value="Darwin"),
            patch("platform.platform", return_value="Darwin-23.4.0-arm64-arm-64bit"),
        ):
            assert OperatingSystemChecker("win").satisfy() is False

    def test_match_is_case_insensitive(self) -> None:
        with patch("platform.system", return_value="Linux"):
            assert OperatingSystemChecker("LINUX").satisfy() is True

    def test_several_targets_match_any(self) -> None:
        checker = create_checker(OperatingSystemChecker, ("mac", "linux"))

        with patch("platform.system", return_value="Linux"):
            assert checker.satisfy() is True
        with patch("platform.system", return_value="Windows"):
            assert checker.satisfy() is False

    def test_unknown_system_matches_its_own_name(self) -> None:
        with patch("platform.system", return_value="FreeBSD"):
            assert OperatingSystemChecker("freebsd").satisfy() is True
            assert OperatingSystemChecker("linux").satisfy() is False

    def test_constants(self) -> None:
        assert OperatingSystemChecker.MAC == "mac"
        assert OperatingSystemChecker.LINUX == "linux"
        assert OperatingSystemChecker.WINDOWS == "win"


class TestEnvironmentVariableChecker:
    """Tests for EnvironmentVariableChecker."""

    def test_set_variable(self) -> None:
        with patch.dict("os.environ", {"TESTGATE_FLAG": "1"}):
            assert EnvironmentVariableChecker("TESTGATE_FLAG").satisfy() is True

    def test_unset_or_empty_variable(self) -> None:
        with patch.dict("os.environ", {"TESTGATE_FLAG": ""}):
            assert EnvironmentVariableChecker("TESTGATE_FLAG").satisfy() is False
            assert EnvironmentVariableChecker("TESTGATE_MISSING").satisfy() is False

    def test_expected_value(self) -> None:
        checker = create_checker(EnvironmentVariableChecker, ("TESTGATE_DB", "pg"))

        with patch.dict("os.environ", {"TESTGATE_DB": "pg"}):
            assert checker.satisfy() is True
        with patch.dict("os.environ", {"TESTGATE_DB": "sqlite"}):
            assert checker.satisfy() is False

    def test_too_many_arguments(self) -> None:
        with pytest.raises(ValueError, match="optional value"):
            EnvironmentVariableChecker(("A", "B", "C"))


class TestExecutableChecker:
    """Tests for ExecutableChecker."""

    def test_all_found(self) -> None:
        with patch("shutil.which", return_value="/usr/bin/tool"):
            assert ExecutableChecker(("git", "gh")).satisfy() is True

    def test_one_missing(self) -> None:
        def which(name: str) -> str | None:
            return None if name == "gh" else f"/usr/bin/{name}"

        with patch("shutil.which", side_effect=which):
            assert ExecutableChecker(("git", "gh")).satisfy() is False
            assert ExecutableChecker("git").satisfy() is True


class TestPythonVersionChecker:
    """Tests for PythonVersionChecker."""

    def test_current_version_is_satisfied(self) -> None:
        current = f"{sys.version_info.major}.{sys.version_info.minor}"

        assert PythonVersionChecker(current).satisfy() is True

    def test_future_version_is_not_satisfied(self) -> None:
        assert PythonVersionChecker("99.0").satisfy() is False

    def test_old_major_version_is_satisfied(self) -> None:
        assert PythonVersionChecker("3").satisfy() is True

    def test_invalid_version(self) -> None:
        with pytest.raises(ValueError, match="Invalid Python version"):
            PythonVersionChecker("three")
