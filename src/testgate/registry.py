"""Registries of named checkers and preconditions.

Declarations may reference a checker or precondition either by type or by
a stable string identifier. Identifiers are resolved through an explicit
registration map instead of importing types dynamically.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from testgate.exceptions import DeclarationError
from testgate.logging import get_logger

__all__ = [
    "ComponentRegistry",
    "checker_registry",
    "precondition_registry",
    "resolve",
]

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


class ComponentRegistry:
    """Catalog of component types keyed by name.

    Example:
        ```python
        registry = ComponentRegistry("checker")

        @registry.register("os")
        class OperatingSystemChecker:
            ...

        registry.get("os")  # OperatingSystemChecker
        ```
    """

    def __init__(self, kind: str) -> None:
        """Initialize an empty registry.

        Args:
            kind: What is being registered, used in error messages.
        """
        self.kind = kind
        self._components: dict[str, type] = {}

    def register(self, name: str) -> Callable[[T], T]:
        """Register a class under ``name``. Use as a class decorator.

        Raises:
            ValueError: If ``name`` is already registered.
        """

        def decorator(component: T) -> T:
            self.register_component(name, component)
            return component

        return decorator

    def register_component(self, name: str, component: type) -> None:
        """Register ``component`` under ``name``.

        Raises:
            ValueError: If ``name`` is already registered.
        """
        if name in self._components:
            raise ValueError(
                f"{self.kind.capitalize()} '{name}' is already registered"
            )
        self._components[name] = component
        logger.debug(f"Registered {self.kind}: {name}")

    def get(self, name: str) -> type:
        """Look up a component by name.

        Raises:
            KeyError: If no component with this name exists.
        """
        if name not in self._components:
            available = ", ".join(sorted(self._components))
            raise KeyError(
                f"Unknown {self.kind} '{name}'. Available: {available or '(none)'}"
            )
        return self._components[name]

    def has(self, name: str) -> bool:
        return name in self._components

    def list_names(self) -> list[str]:
        return sorted(self._components)

    def items(self) -> Iterator[tuple[str, type]]:
        """Iterate over ``(name, type)`` pairs sorted by name."""
        for name in self.list_names():
            yield name, self._components[name]

    def clear(self) -> None:
        """Remove every registration. Primarily useful for testing."""
        self._components.clear()


def resolve(reference: Any, registry: ComponentRegistry) -> type:
    """Turn a declared reference into a component type.

    Args:
        reference: A type, or the registered name of one.
        registry: Registry used for string references.

    Returns:
        The referenced type.

    Raises:
        DeclarationError: If the name is unknown or the reference is neither
            a string nor a type.
    """
    if isinstance(reference, str):
        try:
            return registry.get(reference)
        except KeyError as e:
            raise DeclarationError(e.args[0], target=reference) from e
    if isinstance(reference, type):
        return reference
    raise DeclarationError(
        f"Expected a {registry.kind} type or registered name, got {reference!r}",
        target=reference,
    )


# Global registries; built-in components register themselves on import.
checker_registry = ComponentRegistry("checker")
precondition_registry = ComponentRegistry("precondition")
