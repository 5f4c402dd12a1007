"""CLI context and exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from testgate.config import TestgateConfig

__all__ = ["ExitCode", "CLIContext"]


class ExitCode(IntEnum):
    """Exit codes for the testgate CLI.

    - 0 when every test passed or was skipped
    - 1 when a test failed or a checker is not satisfied
    - 2 when a declaration or configuration error aborted the run
    """

    SUCCESS = 0
    FAILURE = 1
    DECLARATION_ERROR = 2


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by subcommands.

    Attributes:
        config: Loaded configuration.
        config_path: Config file given with --config, if any.
        verbosity: Count of -v flags.
        quiet: Whether -q was given.
    """

    config: TestgateConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
