"""Execution engine: gating, precondition chains and body hand-off.

For every test method of a class, :class:`GatedClassRunner`:

1. Skips it when the class gate denies (evaluated once per class).
2. Skips it when its own gate denies.
3. Asks the host for a test instance; a construction error is reported as
   a failure of that test.
4. Resolves the context and builds a fresh precondition chain.
5. Sets preconditions up in declaration order, stopping at the first error.
6. Hands the test to the host when every setup succeeded. Otherwise the
   setup error is reported as the test's failure.
7. Tears down every precondition whose setup succeeded, in declaration
   order, collecting each teardown error separately.
8. Reports every collected teardown error as an additional failure.

Declaration errors (bad checkers, preconditions or context bindings)
propagate out of ``run_method``; everything raised by test code is
reported through the notifier.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from testgate.engine.gating import Gate
from testgate.engine.host import DefaultHost, HostFramework
from testgate.engine.notifier import Description, Failure, RunNotifier
from testgate.logging import get_logger
from testgate.metadata import ClassPlan
from testgate.preconditions.chain import build_chain
from testgate.preconditions.context import resolve_context
from testgate.registry import (
    ComponentRegistry,
    checker_registry,
    precondition_registry,
)

__all__ = [
    "OutcomeStatus",
    "ExecutionOutcome",
    "GatedClassRunner",
    "run_classes",
]

logger = get_logger(__name__)


class OutcomeStatus(str, Enum):
    SKIPPED_CLASS = "skipped_class"
    SKIPPED_METHOD = "skipped_method"
    RAN = "ran"


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """What the engine did with one test method.

    The body's own pass/fail result travels through the notifier; this
    records only what the engine itself observed.

    Attributes:
        description: The test method.
        status: Skipped by the class gate, by the method gate, or ran.
        setup_error: First precondition setup error, if any.
        teardown_errors: Every precondition teardown error, in order.
    """

    description: Description
    status: OutcomeStatus
    setup_error: BaseException | None = None
    teardown_errors: tuple[BaseException, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.status is not OutcomeStatus.RAN


class GatedClassRunner:
    """Runs the test methods of one class through gating and preconditions.

    The class is planned and its class-level gate evaluated once, when the
    runner is created.

    Example:
        ```python
        notifier = RecordingNotifier()
        runner = GatedClassRunner(DatabaseSuite)
        outcomes = runner.run(notifier)
        ```

    Raises:
        DeclarationError: From ``__init__`` when the class declarations or
            the class-level checker are invalid.
    """

    def __init__(
        self,
        test_class: type,
        *,
        host: HostFramework | None = None,
        checker_registry: ComponentRegistry = checker_registry,
        precondition_registry: ComponentRegistry = precondition_registry,
    ) -> None:
        self._test_class = test_class
        self._host = host if host is not None else DefaultHost()
        self._gate = Gate(checker_registry)
        self._precondition_registry = precondition_registry
        self._plan = ClassPlan.build(
            test_class, self._host.list_test_methods(test_class)
        )
        self._log = logger.bind(
            test_class=f"{test_class.__module__}.{test_class.__qualname__}"
        )
        self._class_allowed = self._gate.should_run(self._plan.gating)
        if not self._class_allowed:
            self._log.info("class_skipped", methods=len(self._plan.methods))

    @property
    def test_class(self) -> type:
        return self._test_class

    @property
    def plan(self) -> ClassPlan:
        return self._plan

    @property
    def class_allowed(self) -> bool:
        return self._class_allowed

    def run(
        self,
        notifier: RunNotifier,
        method_names: Iterable[str] | None = None,
    ) -> list[ExecutionOutcome]:
        """Run methods one after another.

        Args:
            notifier: Receiver of lifecycle events.
            method_names: Methods to run; defaults to every planned method.

        Returns:
            One outcome per method, in run order.
        """
        if method_names is None:
            method_names = list(self._plan.methods)
        return [self.run_method(name, notifier) for name in method_names]

    def run_method(
        self, method_name: str, notifier: RunNotifier
    ) -> ExecutionOutcome:
        """Gate, wrap and run a single test method."""
        description = Description(self._test_class, method_name)
        log = self._log.bind(method=method_name)

        if not self._class_allowed:
            notifier.fire_ignored(description)
            return ExecutionOutcome(description, OutcomeStatus.SKIPPED_CLASS)

        method_plan = self._plan.method(method_name)
        if not self._gate.should_run(method_plan.gating):
            log.info("method_skipped")
            notifier.fire_ignored(description)
            return ExecutionOutcome(description, OutcomeStatus.SKIPPED_METHOD)

        try:
            test = self._host.create_test(self._test_class, method_name)
        except Exception as e:
            log.warning("test_construction_failed", error=repr(e))
            notifier.fire_started(description)
            notifier.fire_failure(Failure(description, e))
            notifier.fire_finished(description)
            return ExecutionOutcome(description, OutcomeStatus.RAN)

        context = resolve_context(method_plan.context_binding, test)
        chain = build_chain(
            method_plan.preconditions, context, self._precondition_registry
        )

        succeeded, setup_error = self._set_up(chain, log)
        try:
            if setup_error is None:
                self._host.run_test(test, method_name, notifier, description)
            else:
                notifier.fire_started(description)
                notifier.fire_failure(Failure(description, setup_error))
        finally:
            teardown_errors = self._tear_down(chain[:succeeded], log)

        for error in teardown_errors:
            notifier.fire_failure(Failure(description, error))
        if setup_error is not None:
            notifier.fire_finished(description)

        return ExecutionOutcome(
            description,
            OutcomeStatus.RAN,
            setup_error=setup_error,
            teardown_errors=tuple(teardown_errors),
        )

    def _set_up(
        self, chain: Sequence[Any], log: Any
    ) -> tuple[int, BaseException | None]:
        """Set up ``chain`` in order.

        Returns:
            How many preconditions were set up successfully, and the error
            that stopped the chain (None when all succeeded).
        """
        for index, precondition in enumerate(chain):
            try:
                precondition.setup()
            except Exception as e:
                log.warning(
                    "precondition_setup_failed",
                    precondition=type(precondition).__qualname__,
                    index=index,
                    error=repr(e),
                )
                return index, e
        return len(chain), None

    def _tear_down(self, chain: Sequence[Any], log: Any) -> list[BaseException]:
        # Forward order, same as setup.
        errors: list[BaseException] = []
        for precondition in chain:
            try:
                precondition.teardown()
            except Exception as e:
                log.warning(
                    "precondition_teardown_failed",
                    precondition=type(precondition).__qualname__,
                    error=repr(e),
                )
                errors.append(e)
        return errors


def run_classes(
    test_classes: Iterable[type],
    notifier: RunNotifier,
    *,
    host: HostFramework | None = None,
) -> list[ExecutionOutcome]:
    """Run several classes sequentially with the global registries."""
    outcomes: list[ExecutionOutcome] = []
    for test_class in test_classes:
        outcomes.extend(GatedClassRunner(test_class, host=host).run(notifier))
    return outcomes
