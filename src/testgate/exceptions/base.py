from __future__ import annotations


class TestgateError(Exception):
    """Base exception class for all testgate errors.

    Catching ``TestgateError`` at the command-line boundary handles every
    error raised by testgate itself while letting exceptions from test code
    and the host framework propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.
    """

    # Keep pytest from collecting the exception hierarchy as test classes.
    __test__ = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
