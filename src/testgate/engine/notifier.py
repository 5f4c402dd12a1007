"""Lifecycle notification protocol.

The engine reports every test through four events addressed to a
:class:`Description`: started, failure, finished and ignored. Skipped tests
get ``ignored`` and never ``finished``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from testgate.logging import get_logger

__all__ = [
    "Description",
    "Failure",
    "EventKind",
    "LifecycleEvent",
    "RunNotifier",
    "RecordingNotifier",
]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Description:
    """Identity of one test method.

    Attributes:
        test_class: The test class.
        method_name: Name of the test method.
    """

    test_class: type
    method_name: str

    @property
    def class_name(self) -> str:
        return f"{self.test_class.__module__}.{self.test_class.__qualname__}"

    @property
    def display_name(self) -> str:
        return f"{self.method_name}({self.class_name})"

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True, slots=True)
class Failure:
    """An exception attributed to a test."""

    description: Description
    exception: BaseException

    @property
    def message(self) -> str:
        return f"{type(self.exception).__name__}: {self.exception}"


class EventKind(str, Enum):
    STARTED = "started"
    FAILURE = "failure"
    FINISHED = "finished"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class LifecycleEvent:
    """One recorded notification.

    Attributes:
        kind: Which lifecycle event this is.
        description: The test it is addressed to.
        exception: The failure's exception, for FAILURE events only.
        timestamp: Unix timestamp when the event was recorded.
    """

    kind: EventKind
    description: Description
    exception: BaseException | None = None
    timestamp: float = field(default_factory=time.time)


class RunNotifier(Protocol):
    """Receiver of test lifecycle events."""

    def fire_started(self, description: Description) -> None: ...

    def fire_failure(self, failure: Failure) -> None: ...

    def fire_finished(self, description: Description) -> None: ...

    def fire_ignored(self, description: Description) -> None: ...


class RecordingNotifier:
    """Notifier that keeps every event in order and logs it.

    Example:
        ```python
        notifier = RecordingNotifier()
        GatedClassRunner(DatabaseSuite).run(notifier)
        for failure in notifier.failures:
            print(failure.description, failure.message)
        ```
    """

    def __init__(self) -> None:
        self.events: list[LifecycleEvent] = []

    def _record(
        self,
        kind: EventKind,
        description: Description,
        exception: BaseException | None = None,
    ) -> None:
        self.events.append(LifecycleEvent(kind, description, exception))
        logger.debug(
            f"test_{kind.value}",
            test=description.display_name,
            error=repr(exception) if exception is not None else None,
        )

    def fire_started(self, description: Description) -> None:
        self._record(EventKind.STARTED, description)

    def fire_failure(self, failure: Failure) -> None:
        self._record(EventKind.FAILURE, failure.description, failure.exception)

    def fire_finished(self, description: Description) -> None:
        self._record(EventKind.FINISHED, description)

    def fire_ignored(self, description: Description) -> None:
        self._record(EventKind.IGNORED, description)

    @property
    def failures(self) -> list[Failure]:
        return [
            Failure(event.description, event.exception)
            for event in self.events
            if event.kind is EventKind.FAILURE and event.exception is not None
        ]

    def kinds_for(self, description: Description) -> list[EventKind]:
        """Event kinds addressed to ``description``, in order."""
        return [e.kind for e in self.events if e.description == description]

    def descriptions(self) -> list[Description]:
        """Every distinct description seen, in first-seen order."""
        seen: dict[Description, None] = {}
        for event in self.events:
            seen.setdefault(event.description, None)
        return list(seen)
