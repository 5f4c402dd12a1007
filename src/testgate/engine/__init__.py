"""Execution engine for gated, precondition-wrapped tests.

Components:
- notifier: Description, Failure and the lifecycle notification protocol
- host: the host framework seam and DefaultHost
- gating: Gate, evaluating class- and method-level checkers
- runner: GatedClassRunner and ExecutionOutcome
"""

from __future__ import annotations

from testgate.engine.gating import Gate
from testgate.engine.host import DefaultHost, HostFramework
from testgate.engine.notifier import (
    Description,
    EventKind,
    Failure,
    LifecycleEvent,
    RecordingNotifier,
    RunNotifier,
)
from testgate.engine.runner import (
    ExecutionOutcome,
    GatedClassRunner,
    OutcomeStatus,
    run_classes,
)

__all__ = [
    # Notifier
    "Description",
    "EventKind",
    "Failure",
    "LifecycleEvent",
    "RecordingNotifier",
    "RunNotifier",
    # Host
    "DefaultHost",
    "HostFramework",
    # Gating
    "Gate",
    # Runner
    "ExecutionOutcome",
    "GatedClassRunner",
    "OutcomeStatus",
    "run_classes",
]
