"""Checkers: pluggable predicates that gate test classes and methods.

Components:
- factory: the Checker capability and create_checker
- builtin: checkers registered by name (os, env, executable, python)
"""

from __future__ import annotations

# Import builtin module to register the built-in checkers
from testgate.checkers import builtin as _builtin  # noqa: F401
from testgate.checkers.builtin import (
    EnvironmentVariableChecker,
    ExecutableChecker,
    OperatingSystemChecker,
    PythonVersionChecker,
)
from testgate.checkers.factory import Checker, create_checker

__all__ = [
    "Checker",
    "create_checker",
    "EnvironmentVariableChecker",
    "ExecutableChecker",
    "OperatingSystemChecker",
    "PythonVersionChecker",
]
