"""Building the precondition chain of a test method."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from testgate.exceptions import DeclarationError, PreconditionDeclarationError
from testgate.logging import get_logger
from testgate.registry import ComponentRegistry, precondition_registry, resolve

if TYPE_CHECKING:
    from testgate.metadata import PreconditionSpec

__all__ = [
    "Precondition",
    "accepts_context",
    "create_precondition",
    "build_chain",
]

logger = get_logger(__name__)


@runtime_checkable
class Precondition(Protocol):
    """Resource set up before a test body and torn down after it.

    Either method may raise; the engine reports the error as a failure of
    the test it wraps.
    """

    def setup(self) -> None: ...

    def teardown(self) -> None: ...


_VALUE_PARAMETER_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


def accepts_context(precondition_type: type) -> bool:
    """Whether the type's constructor takes a positional value parameter."""
    try:
        signature = inspect.signature(precondition_type)
    except (TypeError, ValueError):
        return False
    return any(
        parameter.kind in _VALUE_PARAMETER_KINDS
        for parameter in signature.parameters.values()
    )


def create_precondition(precondition_type: type, context: Any = None) -> Any:
    """Construct one precondition.

    A ``from_context(context)`` classmethod on the type always wins. Without
    one, the context is passed to the constructor when it is not None and
    the constructor accepts a value; otherwise the no-argument constructor
    is used.

    Raises:
        PreconditionDeclarationError: If construction fails or the result
            lacks ``setup``/``teardown``.
    """
    name = getattr(precondition_type, "__qualname__", repr(precondition_type))
    try:
        factory = getattr(precondition_type, "from_context", None)
        if factory is not None:
            precondition = factory(context)
        elif context is not None and accepts_context(precondition_type):
            precondition = precondition_type(context)
        else:
            precondition = precondition_type()
    except Exception as e:
        raise PreconditionDeclarationError(
            f"Cannot construct precondition {name}: {e}",
            precondition=precondition_type,
        ) from e

    if not isinstance(precondition, Precondition):
        raise PreconditionDeclarationError(
            f"{name} does not provide setup() and teardown()",
            precondition=precondition_type,
        )
    return precondition


def build_chain(
    spec: PreconditionSpec | None,
    context: Any = None,
    registry: ComponentRegistry = precondition_registry,
) -> list[Any]:
    """Construct fresh preconditions for one test invocation, in order.

    Args:
        spec: The method's declared chain; None means no preconditions.
        context: Resolved context value, or None.
        registry: Registry for preconditions referenced by name.

    Returns:
        Preconditions in declaration order; empty for a no-op chain.

    Raises:
        PreconditionDeclarationError: If a reference cannot be resolved or
            constructed.
    """
    if spec is None:
        return []
    chain = []
    for reference in spec.preconditions:
        try:
            precondition_type = resolve(reference, registry)
        except DeclarationError as e:
            raise PreconditionDeclarationError(
                e.message, precondition=reference
            ) from e
        chain.append(create_precondition(precondition_type, context))
    logger.debug(
        "precondition_chain_built",
        preconditions=[type(p).__qualname__ for p in chain],
        has_context=context is not None,
    )
    return chain
