"""Context-resolving logger facade.

A ScopedLogger carries a label (typically the name of the subsystem using
it) and resolves, on every call, the logger of the current request. Outside
requests it falls back to the process-wide root logger.

Usage:
    class PaymentService:
        def __init__(self, logger: ScopedLogger) -> None:
            self._logger = logger

        async def charge(self, order_id: str) -> None:
            self._logger.with_fields({"order_id": order_id})
            self._logger.info("charging order")
            # -> {"context": "PaymentService", "order_id": "...", "event": "charging order", ...}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scopedlog.application.observability.context import get_active_store
from scopedlog.application.observability.root_logger import (
    ensure_root_logger,
    initialize_root_logger,
)
from scopedlog.application.services.log_fields import as_fields, error_message, is_structured
from scopedlog.config.logger_params import LoggerParams
from scopedlog.domain.errors.scope import OutOfRequestScopeError
from scopedlog.domain.ports.logger_handle import LoggerHandle


class ScopedLogger:
    """Labelled facade over the request-scoped logger.

    Calls accept either ``(message, *args)`` or
    ``(obj, message=None, *args)`` where ``obj`` is a mapping, a dataclass
    or an exception.

    Attributes:
        label: Value merged under the context field of every record.
    """

    def __init__(self, params: LoggerParams, root: LoggerHandle | None = None) -> None:
        """Initialize ScopedLogger.

        Args:
            params: Module parameters.
            root: Root handle to offer as the process-wide fallback. The
                first handle ever offered wins.
        """
        self._label = ""
        self._context_field = params.context_field_name
        self._error_field = params.error_field_name
        self._assign_response = params.assign_to_response_logger
        self._transport = params.transport
        if root is not None:
            initialize_root_logger(root)

    @property
    def label(self) -> str:
        return self._label

    def set_label(self, value: str) -> None:
        """Set the label merged into every subsequent record."""
        self._label = value

    @property
    def handle(self) -> LoggerHandle:
        """The request logger if a request is active, else the root logger.

        The root is built from the transport options on first use when no
        handle was offered.
        """
        store = get_active_store()
        if store is not None:
            return store.logger
        return ensure_root_logger(self._transport)

    def trace(self, *args: Any) -> None:
        self._call("trace", args)

    def debug(self, *args: Any) -> None:
        self._call("debug", args)

    def info(self, *args: Any) -> None:
        self._call("info", args)

    def warn(self, *args: Any) -> None:
        self._call("warn", args)

    def error(self, *args: Any) -> None:
        self._call("error", args)

    def fatal(self, *args: Any) -> None:
        self._call("fatal", args)

    warning = warn
    critical = fatal

    def with_fields(self, fields: Mapping[str, Any]) -> None:
        """Bind ``fields`` to every later record of the current request.

        The request's primary logger is replaced by a child carrying the
        fields. When response assignment is enabled the response logger
        gets the same fields in place, so the completion record has them.

        Args:
            fields: Fields to bind.

        Raises:
            OutOfRequestScopeError: If called outside a request.
        """
        store = get_active_store()
        if store is None:
            raise OutOfRequestScopeError(type(self).__name__)
        store.logger = store.logger.with_fields(fields)
        if self._assign_response and store.response_logger is not None:
            store.response_logger.set_bindings(fields)

    def _split(self, args: tuple[Any, ...]) -> tuple[dict[str, Any], Any, tuple[Any, ...]]:
        """Split call arguments into (fields, message, interpolation args)."""
        label_fields = {self._context_field: self._label} if self._label else {}
        if not args:
            return label_fields, None, ()

        first, rest = args[0], args[1:]
        if isinstance(first, BaseException):
            fields = {**label_fields, self._error_field: first}
        elif is_structured(first):
            # Caller fields take precedence over the label
            fields = {**label_fields, **as_fields(first)}
        else:
            return label_fields, str(first), rest

        message = rest[0] if rest else None
        return fields, message, rest[1:]

    def _call(self, level: str, args: tuple[Any, ...]) -> None:
        fields, message, interpolation = self._split(args)
        if message is None:
            error = fields.get(self._error_field)
            if isinstance(error, BaseException):
                message = error_message(error)
        elif not isinstance(message, str):
            message = str(message)
        getattr(self.handle, level)(fields, message, *interpolation)
