"""Declarative gating and precondition metadata.

Test classes declare what they need with decorators:

    @run_if("os", "linux")
    class DatabaseSuite:
        connection = context_field()

        def __init__(self) -> None:
            self.connection = {"DB_URL": "sqlite://"}

        @run_if(ExecutableChecker, "psql", "pg_dump")
        @preconditions("environ", SchemaPrecondition)
        def test_backup(self) -> None:
            ...

Decorators only record frozen specs on their target. ``ClassPlan.build``
then scans a class once, at load time, into an explicit table that the
engine reads for every method it runs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from testgate.exceptions import DeclarationError, DuplicateDeclarationError
from testgate.preconditions.context import (
    ContextBinding,
    context_field,
    context_provider,
    find_context_binding,
)

__all__ = [
    "GatingSpec",
    "PreconditionSpec",
    "MethodPlan",
    "ClassPlan",
    "run_if",
    "preconditions",
    "context_field",
    "context_provider",
    "get_gating_spec",
    "get_precondition_spec",
]

GATING_ATTR = "__testgate_gating__"
PRECONDITIONS_ATTR = "__testgate_preconditions__"

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True, slots=True)
class GatingSpec:
    """Reference to a checker plus the string arguments it is built with.

    Attributes:
        checker: Checker type, or its name in the checker registry.
        arguments: Ordered string arguments, possibly empty.
    """

    checker: type | str
    arguments: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PreconditionSpec:
    """Ordered precondition types (or registered names) for one method."""

    preconditions: tuple[type | str, ...] = ()


def _attach(target: Any, attr: str, spec: Any, what: str) -> None:
    # vars() so a spec inherited from a base class does not count
    if attr in vars(target):
        name = getattr(target, "__qualname__", repr(target))
        raise DuplicateDeclarationError(
            f"{name} already declares {what}; at most one is allowed",
            target=target,
        )
    setattr(target, attr, spec)


def run_if(checker: type | str, *arguments: str) -> Callable[[F], F]:
    """Run the decorated class or test method only if ``checker`` is satisfied.

    Args:
        checker: Checker type or registered checker name.
        *arguments: String arguments passed to the checker's constructor.

    Raises:
        DeclarationError: If an argument is not a string.
        DuplicateDeclarationError: If the target is already gated.
    """
    for argument in arguments:
        if not isinstance(argument, str):
            raise DeclarationError(
                f"run_if arguments must be strings, got {argument!r}",
                target=checker,
            )
    spec = GatingSpec(checker=checker, arguments=tuple(arguments))

    def decorator(target: F) -> F:
        _attach(target, GATING_ATTR, spec, "a run_if gate")
        return target

    return decorator


def preconditions(*precondition_types: type | str) -> Callable[[F], F]:
    """Wrap the decorated test method in an ordered precondition chain.

    Raises:
        DuplicateDeclarationError: If the method already declares
            preconditions.
    """
    spec = PreconditionSpec(preconditions=tuple(precondition_types))

    def decorator(target: F) -> F:
        _attach(target, PRECONDITIONS_ATTR, spec, "preconditions")
        return target

    return decorator


def get_gating_spec(target: Any) -> GatingSpec | None:
    """Return the gate declared directly on ``target``, if any."""
    if isinstance(target, type):
        return vars(target).get(GATING_ATTR)
    return getattr(target, GATING_ATTR, None)


def get_precondition_spec(target: Any) -> PreconditionSpec | None:
    return getattr(target, PRECONDITIONS_ATTR, None)


@dataclass(frozen=True, slots=True)
class MethodPlan:
    """Everything the engine needs to know about one test method.

    Attributes:
        name: Method name.
        gating: Method-level gate, or None to always run.
        preconditions: Declared chain, or None for a no-op chain.
        declaring_class: Class in the MRO that defines the method.
        context_binding: Binding declared on ``declaring_class``, if any.
    """

    name: str
    gating: GatingSpec | None
    preconditions: PreconditionSpec | None
    declaring_class: type
    context_binding: ContextBinding | None = None


def _declaring_class(test_class: type, method_name: str) -> type:
    for klass in test_class.__mro__:
        if method_name in vars(klass):
            return klass
    raise DeclarationError(
        f"{test_class.__qualname__} has no method '{method_name}'",
        target=test_class,
    )


@dataclass(frozen=True, slots=True)
class ClassPlan:
    """Load-time table of the gating and precondition metadata of a class.

    Attributes:
        test_class: The planned class.
        gating: Class-level gate declared on ``test_class`` itself.
        methods: Plans keyed by method name, in discovery order.
    """

    test_class: type
    gating: GatingSpec | None
    methods: dict[str, MethodPlan] = field(default_factory=dict)

    @classmethod
    def build(cls, test_class: type, method_names: Iterable[str]) -> ClassPlan:
        """Scan ``test_class`` once for every declaration the engine uses.

        Raises:
            DeclarationError: If a method does not exist.
            DuplicateDeclarationError: If a class declares two context
                bindings.
        """
        methods: dict[str, MethodPlan] = {}
        bindings: dict[type, ContextBinding | None] = {}
        for name in method_names:
            declaring = _declaring_class(test_class, name)
            if declaring not in bindings:
                bindings[declaring] = find_context_binding(declaring)
            function = vars(declaring)[name]
            methods[name] = MethodPlan(
                name=name,
                gating=get_gating_spec(function),
                preconditions=get_precondition_spec(function),
                declaring_class=declaring,
                context_binding=bindings[declaring],
            )
        return cls(
            test_class=test_class,
            gating=get_gating_spec(test_class),
            methods=methods,
        )

    def method(self, name: str) -> MethodPlan:
        """Return the plan for ``name``.

        Raises:
            DeclarationError: If ``name`` was not planned.
        """
        try:
            return self.methods[name]
        except KeyError:
            raise DeclarationError(
                f"'{name}' is not a planned test method of "
                f"{self.test_class.__qualname__}",
                target=self.test_class,
            ) from None
