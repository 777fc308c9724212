"""Canonical log record produced by the message normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CanonicalLogRecord:
    """One normalized log call, ready to hand to a logger handle.

    Attributes:
        level: Severity method to call on the handle.
        fields: Structured fields. Never contains the message text.
        message: Human-readable message, or None when the call carried only
            structured data (or only an error).
        interpolation_args: Values for printf-style placeholders in
            ``message``, in order.
    """

    level: str
    fields: dict[str, Any] = field(default_factory=dict)
    message: str | None = None
    interpolation_args: tuple[Any, ...] = ()

    def emit_args(self) -> tuple[Any, ...]:
        """Positional arguments for ``getattr(handle, level)(...)``."""
        return (self.fields, self.message, *self.interpolation_args)
