"""Preconditions: setup/teardown resources chained around a test body.

Components:
- context: context bindings and the resolver that reads them
- chain: the Precondition capability and the chain builder
- builtin: preconditions registered by name (tmpdir, environ)
"""

from __future__ import annotations

# Import builtin module to register the built-in preconditions
from testgate.preconditions import builtin as _builtin  # noqa: F401
from testgate.preconditions.builtin import (
    EnvironmentPrecondition,
    TemporaryDirectoryPrecondition,
)
from testgate.preconditions.chain import (
    Precondition,
    accepts_context,
    build_chain,
    create_precondition,
)
from testgate.preconditions.context import (
    ContextBinding,
    context_field,
    context_provider,
    find_context_binding,
    resolve_context,
)

__all__ = [
    # Chain
    "Precondition",
    "accepts_context",
    "build_chain",
    "create_precondition",
    # Context
    "ContextBinding",
    "context_field",
    "context_provider",
    "find_context_binding",
    "resolve_context",
    # Built-ins
    "EnvironmentPrecondition",
    "TemporaryDirectoryPrecondition",
]
