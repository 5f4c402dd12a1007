"""Host framework seam: discovery, instantiation and body execution.

The engine decides whether and how a test is wrapped; the host owns the
test instance and runs the body. :class:`DefaultHost` speaks both
``unittest.TestCase`` and plain pytest-style classes.
"""

from __future__ import annotations

import unittest
from typing import Any, Protocol

from testgate.engine.notifier import Description, Failure, RunNotifier

__all__ = ["HostFramework", "DefaultHost"]


class HostFramework(Protocol):
    """What the engine needs from a host test framework."""

    def list_test_methods(self, test_class: type) -> list[str]: ...

    def create_test(self, test_class: type, method_name: str) -> Any: ...

    def run_test(
        self,
        test: Any,
        method_name: str,
        notifier: RunNotifier,
        description: Description,
    ) -> None: ...


class _NotifierResult(unittest.TestResult):
    """Forwards the unittest outcome of one test to a RunNotifier.

    Expected failures count as passes; unexpected successes are failures.
    A skipped test gets ``ignored`` in place of ``finished``.
    """

    def __init__(self, notifier: RunNotifier, description: Description) -> None:
        super().__init__()
        self._notifier = notifier
        self._description = description
        self._ignored = False

    def _fire_failure(self, exception: BaseException) -> None:
        self._notifier.fire_failure(Failure(self._description, exception))

    def startTest(self, test: unittest.TestCase) -> None:
        super().startTest(test)
        self._notifier.fire_started(self._description)

    def stopTest(self, test: unittest.TestCase) -> None:
        super().stopTest(test)
        if not self._ignored:
            self._notifier.fire_finished(self._description)

    def addError(self, test: unittest.TestCase, err: Any) -> None:
        super().addError(test, err)
        self._fire_failure(err[1])

    def addFailure(self, test: unittest.TestCase, err: Any) -> None:
        super().addFailure(test, err)
        self._fire_failure(err[1])

    def addSubTest(
        self, test: unittest.TestCase, subtest: unittest.TestCase, err: Any
    ) -> None:
        super().addSubTest(test, subtest, err)
        if err is not None:
            self._fire_failure(err[1])

    def addSkip(self, test: unittest.TestCase, reason: str) -> None:
        super().addSkip(test, reason)
        self._ignored = True
        self._notifier.fire_ignored(self._description)

    def addUnexpectedSuccess(self, test: unittest.TestCase) -> None:
        super().addUnexpectedSuccess(test)
        self._fire_failure(
            AssertionError(
                f"{self._description.display_name} is marked as an expected "
                "failure but passed"
            )
        )


class DefaultHost:
    """Host that runs unittest-style and plain test classes.

    - ``unittest.TestCase`` subclasses are built as ``cls(method_name)`` and
      run through ``TestCase.run``, so fixtures, cleanups, skip decorators
      and expected failures behave as they do under unittest.
    - Other classes are built as ``cls()`` and wrapped in
      ``setup_method``/``teardown_method`` when defined.

    A started test ends with finished, or with ignored when it is skipped.
    A body or fixture error fires a failure in between.
    """

    def __init__(self, method_prefix: str = "test") -> None:
        self._loader = unittest.TestLoader()
        self._loader.testMethodPrefix = method_prefix

    @property
    def method_prefix(self) -> str:
        return self._loader.testMethodPrefix

    def list_test_methods(self, test_class: type) -> list[str]:
        """Names of the test methods of ``test_class``, sorted."""
        return list(self._loader.getTestCaseNames(test_class))

    def create_test(self, test_class: type, method_name: str) -> Any:
        if issubclass(test_class, unittest.TestCase):
            return test_class(method_name)
        return test_class()

    def run_test(
        self,
        test: Any,
        method_name: str,
        notifier: RunNotifier,
        description: Description,
    ) -> None:
        if isinstance(test, unittest.TestCase):
            test.run(_NotifierResult(notifier, description))
            return

        notifier.fire_started(description)
        try:
            self._run_plain(test, method_name)
        except unittest.SkipTest:
            notifier.fire_ignored(description)
            return
        except Exception as e:
            notifier.fire_failure(Failure(description, e))
        notifier.fire_finished(description)

    def _run_plain(self, test: Any, method_name: str) -> None:
        method = getattr(test, method_name)
        setup = getattr(test, "setup_method", None)
        teardown = getattr(test, "teardown_method", None)
        if setup is not None:
            setup(method)
        try:
            method()
        finally:
            if teardown is not None:
                teardown(method)
