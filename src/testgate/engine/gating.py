"""Class- and method-level gating."""

from __future__ import annotations

from testgate.checkers.factory import create_checker
from testgate.exceptions import CheckerDeclarationError, DeclarationError
from testgate.logging import get_logger
from testgate.metadata import GatingSpec
from testgate.registry import ComponentRegistry, checker_registry, resolve

__all__ = ["Gate"]

logger = get_logger(__name__)


class Gate:
    """Answers "should this run?" for a gating spec.

    A fresh checker is built for every call; nothing is cached here. The
    class runner caches the class-level answer itself.
    """

    def __init__(self, registry: ComponentRegistry = checker_registry) -> None:
        self._registry = registry

    def should_run(self, spec: GatingSpec | None) -> bool:
        """Evaluate ``spec``.

        Args:
            spec: The declared gate, or None.

        Returns:
            True when there is no gate or its checker is satisfied.

        Raises:
            CheckerDeclarationError: If the checker cannot be resolved,
                constructed or queried.
        """
        if spec is None:
            return True

        try:
            checker_type = resolve(spec.checker, self._registry)
        except DeclarationError as e:
            raise CheckerDeclarationError(
                e.message, checker=spec.checker, arguments=spec.arguments
            ) from e

        checker = create_checker(checker_type, spec.arguments)
        try:
            allowed = bool(checker.satisfy())
        except Exception as e:
            raise CheckerDeclarationError(
                f"Checker {checker_type.__qualname__} failed: {e}",
                checker=checker_type,
                arguments=spec.arguments,
            ) from e

        logger.debug(
            "gate_evaluated",
            checker=checker_type.__qualname__,
            arguments=list(spec.arguments),
            allowed=allowed,
        )
        return allowed
