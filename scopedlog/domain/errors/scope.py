"""Scope and configuration errors.

These are the only conditions the logging core surfaces to callers.
Normalizing a log call never raises; these errors describe misuse of the
request scope or of the module lifecycle.
"""

from __future__ import annotations

from scopedlog.domain.exceptions import ScopedLogError


class OutOfRequestScopeError(ScopedLogError):
    """Raised when request-only operations run outside a request extent.

    Binding extra fields has no meaningful target without an active
    request store, and silently dropping them would break correlation of
    every record that follows.
    """

    DEFAULT_MESSAGE: str = "unable to assign extra fields out of request scope"

    def __init__(self, owner: str = "ScopedLogger", message: str | None = None) -> None:
        """Initialize OutOfRequestScopeError.

        Args:
            owner: Name of the component that was called out of scope.
            message: Optional custom message.
        """
        self.owner = owner
        super().__init__(f"{owner}: {message or self.DEFAULT_MESSAGE}")


class LoggerNotConfiguredError(ScopedLogError):
    """Raised when a logger is resolved before logging was configured."""

    pass


class UnknownLoggerLabelError(ScopedLogError):
    """Raised when a labelled logger binding was never built.

    Labels must be declared (via ``request_logger``) before the logger
    module materializes its bindings.
    """

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(
            f"No logger binding for label {label!r}; declare request_logger({label!r}) "
            "before installing the logger module"
        )
