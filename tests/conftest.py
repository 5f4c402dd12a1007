from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest

from testgate.engine import RecordingNotifier
from testgate.registry import ComponentRegistry


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test run.

    Logs go to stderr at WARNING so they do not mix with test stdout.
    """
    from testgate.logging import clear_context, configure_logging

    configure_logging(level=logging.WARNING)
    yield
    clear_context()


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Temporary directory; restores the working directory afterwards."""
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all TESTGATE_ environment variables for the test."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("TESTGATE_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def checkers() -> ComponentRegistry:
    """An empty checker registry, isolated from the built-ins."""
    return ComponentRegistry("checker")


@pytest.fixture
def precondition_types() -> ComponentRegistry:
    """An empty precondition registry, isolated from the built-ins."""
    return ComponentRegistry("precondition")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def calls() -> list[str]:
    """Shared call log for recording checkers and preconditions."""
    return []


@pytest.fixture
def make_precondition(calls: list[str]):
    """Factory for precondition types that log into ``calls``.

    Each instance logs ``<name>.init`` (with the context when one is
    accepted), ``<name>.setup`` and ``<name>.teardown``.
    """

    def factory(
        name: str,
        *,
        fail_setup: bool = False,
        fail_teardown: bool = False,
        takes_context: bool = False,
    ) -> type:
        class RecordingPrecondition:
            def setup(self) -> None:
                calls.append(f"{name}.setup")
                if fail_setup:
                    raise RuntimeError(f"{name} setup failed")

            def teardown(self) -> None:
                calls.append(f"{name}.teardown")
                if fail_teardown:
                    raise RuntimeError(f"{name} teardown failed")

        if takes_context:

            def __init__(self, context: object) -> None:
                self.context = context
                calls.append(f"{name}.init({context!r})")

        else:

            def __init__(self) -> None:
                self.context = None
                calls.append(f"{name}.init")

        RecordingPrecondition.__init__ = __init__
        RecordingPrecondition.__qualname__ = name
        return RecordingPrecondition

    return factory


@pytest.fixture
def make_checker(calls: list[str]):
    """Factory for checker types that log construction and queries."""

    def factory(name: str, result: bool = True) -> type:
        class RecordingChecker:
            def __init__(self, value: object = None) -> None:
                self.value = value
                calls.append(f"{name}.init({value!r})")

            def satisfy(self) -> bool:
                calls.append(f"{name}.satisfy")
                return result

        RecordingChecker.__qualname__ = name
        return RecordingChecker

    return factory
