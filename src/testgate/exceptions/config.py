from __future__ import annotations

from typing import Any

from testgate.exceptions.base import TestgateError


class ConfigError(TestgateError):
    """Raised when testgate settings cannot be loaded or validated.

    This covers YAML parsing failures in ``testgate.yaml`` and pydantic
    validation errors for settings values. It is unrelated to errors in how
    a test class is declared; those are :class:`DeclarationError`.

    Attributes:
        message: Human-readable error message.
        field: Optional dotted field name that caused the error.
        value: Optional value that failed validation.

    Example:
        ```python
        raise ConfigError(
            "Invalid configuration: Input should be 'error', 'warning', ...",
            field="verbosity",
            value="loud",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
