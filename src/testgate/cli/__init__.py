"""CLI utilities for testgate.

This package provides the CLI context, exit codes, target loading and the
subcommands registered on the ``testgate`` group.
"""

from __future__ import annotations

from testgate.cli.context import CLIContext, ExitCode
from testgate.cli.targets import load_targets

__all__ = [
    "CLIContext",
    "ExitCode",
    "load_targets",
]
