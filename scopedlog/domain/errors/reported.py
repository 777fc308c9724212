"""Synthetic exception for errors that only arrive as text."""

from __future__ import annotations


class ReportedError(Exception):
    """An error reconstructed from a message and a formatted stack trace.

    Some callers report failures as a message plus an already formatted
    stack string instead of an exception object. This type carries both so
    the error serializer can emit the original stack verbatim.

    Attributes:
        stack: The stack trace text exactly as reported.
    """

    def __init__(self, message: str, stack: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stack = stack
