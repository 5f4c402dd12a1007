"""Built-in preconditions.

Catalog:
- tmpdir: a fresh temporary directory for the test
- environ: environment variables taken from the test's context mapping
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path

from testgate.logging import get_logger
from testgate.registry import precondition_registry

__all__ = ["TemporaryDirectoryPrecondition", "EnvironmentPrecondition"]

logger = get_logger(__name__)


@precondition_registry.register("tmpdir")
class TemporaryDirectoryPrecondition:
    """Creates a temporary directory on setup and removes it on teardown.

    Attributes:
        path: The directory, available between setup and teardown.
    """

    def __init__(self) -> None:
        self.path: Path | None = None

    def setup(self) -> None:
        self.path = Path(tempfile.mkdtemp(prefix="testgate-"))

    def teardown(self) -> None:
        if self.path is not None:
            shutil.rmtree(self.path)
            self.path = None


@precondition_registry.register("environ")
class EnvironmentPrecondition:
    """Applies a mapping of environment variables for the test's duration.

    The mapping is the test's context value. Variables that existed before
    setup get their old value back on teardown; the others are removed.
    """

    def __init__(self, variables: Mapping[str, str]) -> None:
        if not isinstance(variables, Mapping):
            raise TypeError(
                f"environ precondition needs a mapping context, got "
                f"{type(variables).__name__}"
            )
        self.variables = dict(variables)
        self._saved: dict[str, str | None] = {}

    def setup(self) -> None:
        for name, value in self.variables.items():
            self._saved[name] = os.environ.get(name)
            os.environ[name] = str(value)
        logger.debug("environment_applied", variables=sorted(self.variables))

    def teardown(self) -> None:
        for name, previous in self._saved.items():
            if previous is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = previous
        self._saved.clear()
