"""testgate exception hierarchy.

All exceptions can be imported from this package:
    from testgate.exceptions import CheckerDeclarationError, ConfigError
"""

from __future__ import annotations

from testgate.exceptions.base import TestgateError
from testgate.exceptions.config import ConfigError
from testgate.exceptions.declaration import (
    CheckerDeclarationError,
    ContextResolutionError,
    DeclarationError,
    DuplicateDeclarationError,
    PreconditionDeclarationError,
)

__all__ = [
    # Base
    "TestgateError",
    # Config
    "ConfigError",
    # Declarations
    "DeclarationError",
    "DuplicateDeclarationError",
    "CheckerDeclarationError",
    "PreconditionDeclarationError",
    "ContextResolutionError",
]
