"""testgate - conditional test execution with gating and precondition chains."""

from __future__ import annotations

from testgate.checkers import Checker, create_checker
from testgate.engine import (
    Description,
    ExecutionOutcome,
    GatedClassRunner,
    OutcomeStatus,
    RecordingNotifier,
    run_classes,
)
from testgate.metadata import (
    GatingSpec,
    PreconditionSpec,
    context_field,
    context_provider,
    preconditions,
    run_if,
)
from testgate.preconditions import Precondition
from testgate.registry import checker_registry, precondition_registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Checker",
    "Description",
    "ExecutionOutcome",
    "GatedClassRunner",
    "GatingSpec",
    "OutcomeStatus",
    "Precondition",
    "PreconditionSpec",
    "RecordingNotifier",
    "checker_registry",
    "context_field",
    "context_provider",
    "create_checker",
    "precondition_registry",
    "preconditions",
    "run_classes",
    "run_if",
]
