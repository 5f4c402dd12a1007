"""The Checker capability and the factory that builds checkers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from testgate.exceptions import CheckerDeclarationError

__all__ = ["Checker", "create_checker"]


@runtime_checkable
class Checker(Protocol):
    """Decides whether a gated class or method is allowed to run.

    ``satisfy`` inspects ambient state (platform, environment, installed
    tools) and must not touch the test fixture or have side effects.

    Example:
        >>> class FeatureFlagChecker:
        ...     def __init__(self, flag: str) -> None:
        ...         self.flag = flag
        ...     def satisfy(self) -> bool:
        ...         return self.flag in ENABLED_FLAGS
    """

    def satisfy(self) -> bool: ...


def create_checker(checker_type: type, arguments: Sequence[str] = ()) -> Any:
    """Construct a checker from its declared string arguments.

    A ``from_arguments(arguments)`` classmethod on the type always receives
    the whole argument tuple. Otherwise the constructor is picked by
    argument count:

    - no arguments: ``checker_type()``
    - one argument: ``checker_type(arguments[0])``
    - two or more: ``checker_type(arguments)`` with the tuple as one value

    Args:
        checker_type: The checker class.
        arguments: Declared string arguments.

    Returns:
        A new checker instance.

    Raises:
        CheckerDeclarationError: If the constructor does not accept that
            shape, raises, or returns something without ``satisfy``.
    """
    arguments = tuple(arguments)
    name = getattr(checker_type, "__qualname__", repr(checker_type))
    try:
        factory = getattr(checker_type, "from_arguments", None)
        if factory is not None:
            checker = factory(arguments)
        elif not arguments:
            checker = checker_type()
        elif len(arguments) == 1:
            checker = checker_type(arguments[0])
        else:
            checker = checker_type(arguments)
    except Exception as e:
        raise CheckerDeclarationError(
            f"Cannot construct checker {name} with arguments {list(arguments)}: {e}",
            checker=checker_type,
            arguments=arguments,
        ) from e

    if not isinstance(checker, Checker):
        raise CheckerDeclarationError(
            f"{name} does not provide satisfy()",
            checker=checker_type,
            arguments=arguments,
        )
    return checker
