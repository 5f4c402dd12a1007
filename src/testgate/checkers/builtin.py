"""Built-in checkers.

Each checker is registered with the global checker registry so that tests
can gate on it by name, e.g. ``@run_if("os", "linux")``.

Checker Catalog:
- os: the platform matches one of the given operating systems
- env: an environment variable is set (optionally to a given value)
- executable: every named executable is on PATH
- python: the running interpreter is at least the given version
"""

from __future__ import annotations

import os
import platform
import shutil
import sys

from testgate.logging import get_logger
from testgate.registry import checker_registry

__all__ = [
    "OperatingSystemChecker",
    "EnvironmentVariableChecker",
    "ExecutableChecker",
    "PythonVersionChecker",
]

logger = get_logger(__name__)


def _as_tuple(value: str | tuple[str, ...]) -> tuple[str, ...]:
    return (value,) if isinstance(value, str) else tuple(value)


@checker_registry.register("os")
class OperatingSystemChecker:
    """Satisfied when the running operating system is one of the targets.

    ``platform.system()`` is mapped to one of the ``mac``, ``linux`` and
    ``win`` tokens before comparing, so ``"win"`` never matches ``Darwin``.
    Targets are case-insensitive and accept the same aliases
    (``"darwin"``, ``"macos"``, ``"windows"``).
    """

    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "win"

    _ALIASES = {
        "darwin": MAC,
        "macos": MAC,
        "osx": MAC,
        "windows": WINDOWS,
    }

    def __init__(self, targets: str | tuple[str, ...]) -> None:
        self.targets = tuple(self.normalize(t) for t in _as_tuple(targets))

    @classmethod
    def normalize(cls, name: str) -> str:
        name = name.strip().lower()
        return cls._ALIASES.get(name, name)

    def satisfy(self) -> bool:
        return self.normalize(platform.system()) in self.targets


@checker_registry.register("env")
class EnvironmentVariableChecker:
    """Satisfied when a variable is set and, optionally, equals a value.

    One argument checks that the variable is set and non-empty; two
    arguments ``(name, expected)`` also compare the value.
    """

    def __init__(self, spec: str | tuple[str, ...]) -> None:
        parts = _as_tuple(spec)
        if len(parts) > 2:
            raise ValueError(
                f"env checker takes a name and an optional value, got {parts}"
            )
        self.name = parts[0]
        self.expected = parts[1] if len(parts) == 2 else None

    def satisfy(self) -> bool:
        value = os.environ.get(self.name)
        if self.expected is None:
            return bool(value)
        return value == self.expected


@checker_registry.register("executable")
class ExecutableChecker:
    """Satisfied when every named executable is found on PATH."""

    def __init__(self, names: str | tuple[str, ...]) -> None:
        self.names = _as_tuple(names)

    def satisfy(self) -> bool:
        missing = [name for name in self.names if shutil.which(name) is None]
        if missing:
            logger.debug("executables_missing", missing=missing)
        return not missing


@checker_registry.register("python")
class PythonVersionChecker:
    """Satisfied when the interpreter is at least ``minimum`` (e.g. "3.12")."""

    def __init__(self, minimum: str) -> None:
        try:
            self.minimum = tuple(int(part) for part in minimum.split("."))
        except ValueError:
            raise ValueError(f"Invalid Python version: {minimum!r}") from None

    def satisfy(self) -> bool:
        return sys.version_info[: len(self.minimum)] >= self.minimum
