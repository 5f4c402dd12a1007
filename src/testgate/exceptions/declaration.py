"""Fatal configuration errors raised from test declarations.

A declaration error means a test class was declared incorrectly: a checker
or precondition that cannot be constructed, an unknown registry name, two
gating decorators on one method, or a context field that cannot be read.
These are never reported as test failures. They propagate immediately out
of the current test's processing and abort it.

Exception Hierarchy:
    DeclarationError
    ├── DuplicateDeclarationError
    ├── CheckerDeclarationError
    ├── PreconditionDeclarationError
    └── ContextResolutionError
"""

from __future__ import annotations

from typing import Any

from testgate.exceptions.base import TestgateError

__all__ = [
    "DeclarationError",
    "DuplicateDeclarationError",
    "CheckerDeclarationError",
    "PreconditionDeclarationError",
    "ContextResolutionError",
]


class DeclarationError(TestgateError):
    """A test class, method or field was declared incorrectly.

    Attributes:
        message: Human-readable error message.
        target: The class, function or type the declaration is attached to.
    """

    def __init__(self, message: str, target: Any = None) -> None:
        self.target = target
        super().__init__(message)


class DuplicateDeclarationError(DeclarationError):
    """The same kind of metadata was declared twice on one target."""


class CheckerDeclarationError(DeclarationError):
    """A checker could not be constructed or queried.

    Attributes:
        checker: The checker type (or registered name) being resolved.
        arguments: The string arguments it was declared with.
    """

    def __init__(
        self,
        message: str,
        checker: Any = None,
        arguments: tuple[str, ...] = (),
    ) -> None:
        self.checker = checker
        self.arguments = arguments
        super().__init__(message, target=checker)


class PreconditionDeclarationError(DeclarationError):
    """A precondition could not be constructed.

    Attributes:
        precondition: The precondition type (or registered name).
    """

    def __init__(self, message: str, precondition: Any = None) -> None:
        self.precondition = precondition
        super().__init__(message, target=precondition)


class ContextResolutionError(DeclarationError):
    """The context binding of a test class could not be read.

    Attributes:
        test_class: The class that declares the binding.
        field_name: Name of the bound field or provider method.
    """

    def __init__(
        self,
        message: str,
        test_class: type | None = None,
        field_name: str | None = None,
    ) -> None:
        self.test_class = test_class
        self.field_name = field_name
        super().__init__(message, target=test_class)
