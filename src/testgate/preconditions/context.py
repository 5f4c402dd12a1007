"""Context bindings: values handed from a test instance to its preconditions.

A test class marks at most one attribute as its context source, either as a
plain field::

    class DatabaseSuite:
        _connection = context_field()

        def __init__(self) -> None:
            self._connection = make_connection()

or as an accessor method::

    class DatabaseSuite:
        @context_provider
        def connection(self) -> Connection:
            return make_connection()

The engine reads the value from the live test instance once per test and
passes it to every precondition that accepts a context.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from testgate.exceptions import ContextResolutionError, DuplicateDeclarationError

__all__ = [
    "ContextBinding",
    "context_field",
    "context_provider",
    "find_context_binding",
    "resolve_context",
]

_MISSING = object()


class ContextBinding:
    """Descriptor marking a class attribute as the context source.

    Field bindings store the per-instance value in the instance ``__dict__``
    and read back ``default`` until something is assigned. Provider bindings
    call the decorated method.
    """

    def __init__(
        self,
        provider: Callable[[Any], Any] | None = None,
        *,
        default: Any = None,
    ) -> None:
        self.provider = provider
        self.default = default
        self.name: str | None = getattr(provider, "__name__", None)
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self.provider is not None:
            return self.provider.__get__(instance, owner)
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.provider is not None:
            raise AttributeError(f"context provider '{self.name}' is read-only")
        instance.__dict__[self.name] = value

    def read(self, instance: Any) -> Any:
        """Read the bound value from ``instance``."""
        if self.provider is not None:
            return self.provider(instance)
        value = instance.__dict__.get(self.name, _MISSING)
        return self.default if value is _MISSING else value

    def __repr__(self) -> str:
        kind = "provider" if self.provider is not None else "field"
        return f"<ContextBinding {kind} {self.name!r}>"


def context_field(default: Any = None) -> Any:
    """Declare a field whose value is injected into preconditions."""
    return ContextBinding(default=default)


def context_provider(method: Callable[[Any], Any]) -> Any:
    """Declare a method whose return value is injected into preconditions."""
    return ContextBinding(provider=method)


def find_context_binding(declaring_class: type) -> ContextBinding | None:
    """Find the context binding declared directly on ``declaring_class``.

    Bindings on base classes are ignored.

    Raises:
        DuplicateDeclarationError: If the class declares more than one.
    """
    found = [
        value for value in vars(declaring_class).values()
        if isinstance(value, ContextBinding)
    ]
    if len(found) > 1:
        names = ", ".join(binding.name or "?" for binding in found)
        raise DuplicateDeclarationError(
            f"{declaring_class.__qualname__} declares more than one context "
            f"binding: {names}",
            target=declaring_class,
        )
    return found[0] if found else None


def resolve_context(binding: ContextBinding | None, instance: Any) -> Any:
    """Read the context value for one test invocation.

    Returns:
        The bound value, or None when there is no binding.

    Raises:
        ContextResolutionError: If reading the value fails.
    """
    if binding is None:
        return None
    try:
        return binding.read(instance)
    except Exception as e:
        raise ContextResolutionError(
            f"Failed to read context '{binding.name}' from "
            f"{type(instance).__qualname__}: {e}",
            test_class=binding.owner,
            field_name=binding.name,
        ) from e
