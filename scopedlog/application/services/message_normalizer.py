"""Message normalizer and the ``Logger`` facade.

Application code logs the way it is used to, with any of these shapes::

    logger.info("user %s logged in", "alice", "AuthService")
    logger.info("login attempt", {"user_id": 7}, "AuthService")
    logger.error(exc)
    logger.debug({"cache": "miss", "key": key})

``normalize`` reduces every shape to one CanonicalLogRecord and the facade
hands it to the logger active for the current request (or to the root
logger outside requests).

Normalization rules, in order:
1. A non-empty parameter list always loses its last element, which is
   recorded under the context field.
2. If the new last parameter is a mapping that no placeholder consumes, it
   is merged into the fields; otherwise every remaining parameter is an
   interpolation argument.
3. The message itself decides the shape of the record: exception, legacy
   stack-string report, structured object, or plain text.

Normalization never raises: anything unrecognized is stringified.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from scopedlog.application.services.log_fields import as_fields, error_message, is_structured
from scopedlog.config.logger_params import DEFAULT_CONTEXT_FIELD_NAME, DEFAULT_ERROR_FIELD_NAME
from scopedlog.domain.errors.reported import ReportedError
from scopedlog.domain.models.log_record import CanonicalLogRecord

if TYPE_CHECKING:
    from scopedlog.application.services.scoped_logger import ScopedLogger
    from scopedlog.config.logger_params import LoggerParams

# printf-style markers that consume one argument each; a lone '%' does not
PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(r"%[sdjo]")

# A formatted stack: JavaScript-style "\n    at fn (file:1:1)" frames or
# Python traceback "\n  File "x.py", line 1" frames.
STACK_TRACE_PATTERN: re.Pattern[str] = re.compile(r"\n\s*(?:at |File \")")


def count_placeholders(message: Any) -> int:
    """Count interpolation placeholders in a string message (0 otherwise)."""
    if not isinstance(message, str):
        return 0
    return len(PLACEHOLDER_PATTERN.findall(message))


def is_interpolated(message: Any, obj_index: int) -> bool:
    """Whether the parameter at ``obj_index`` is consumed by a placeholder.

    Args:
        message: The log message.
        obj_index: Position of the parameter in the interpolation list.

    Returns:
        True if the message has a placeholder for that position.
    """
    return obj_index < count_placeholders(message)


def is_legacy_stack_contract(level: str, message: Any, params: list[Any]) -> bool:
    """Detect an error reported as ``(message, formatted_stack)``.

    Framework-compatibility glue: some exception handlers report failures
    as ``logger.error(text, stack_string)`` instead of passing the
    exception. Only that exact shape is recognized.

    Args:
        level: Severity of the call.
        message: The log message.
        params: Parameters left after context extraction.

    Returns:
        True if the call matches the legacy shape.
    """
    return (
        level == "error"
        and isinstance(message, str)
        and len(params) == 1
        and isinstance(params[0], str)
        and STACK_TRACE_PATTERN.search(params[0]) is not None
    )


def normalize(
    level: str,
    message: Any,
    *optional_params: Any,
    context_field: str = DEFAULT_CONTEXT_FIELD_NAME,
    error_field: str = DEFAULT_ERROR_FIELD_NAME,
) -> CanonicalLogRecord:
    """Reduce one log call to a CanonicalLogRecord.

    Args:
        level: Severity of the call.
        message: String, structured object, exception or any other value.
        *optional_params: Interpolation values, an optional object to merge,
            and (always last) the call-site context.
        context_field: Field receiving the trailing context value.
        error_field: Field receiving exceptions.

    Returns:
        The normalized record.
    """
    fields: dict[str, Any] = {}

    params = list(optional_params)
    if params:
        fields[context_field] = params.pop()

    maybe_fields = params[-1] if params else None
    if isinstance(maybe_fields, Mapping) and not is_interpolated(message, len(params) - 1):
        interpolation = tuple(params[:-1])
        fields.update(as_fields(maybe_fields))
    else:
        interpolation = tuple(params)

    if isinstance(message, BaseException):
        fields[error_field] = message
        return CanonicalLogRecord(level, fields, error_message(message), interpolation)

    if is_legacy_stack_contract(level, message, params):
        fields[error_field] = ReportedError(message, stack=params[0])
        return CanonicalLogRecord(level, fields)

    if is_structured(message):
        return CanonicalLogRecord(level, {**fields, **as_fields(message)}, None, interpolation)

    return CanonicalLogRecord(level, fields, str(message), interpolation)


class Logger:
    """Drop-in logger for application code.

    Accepts free-form calls (see module docstring) and routes them to the
    logger of the current request. Inject it with
    ``Depends(get_logger)`` or take it from ``LoggerModule.logger``.
    """

    def __init__(self, logger: ScopedLogger, params: LoggerParams) -> None:
        """Initialize Logger.

        Args:
            logger: Facade used to resolve the active handle.
            params: Module parameters (context and error field names).
        """
        self._logger = logger
        self._context_field = params.context_field_name
        self._error_field = params.error_field_name

    def trace(self, message: Any, *optional_params: Any) -> None:
        self._call("trace", message, *optional_params)

    def debug(self, message: Any, *optional_params: Any) -> None:
        self._call("debug", message, *optional_params)

    def info(self, message: Any, *optional_params: Any) -> None:
        self._call("info", message, *optional_params)

    def warn(self, message: Any, *optional_params: Any) -> None:
        self._call("warn", message, *optional_params)

    def error(self, message: Any, *optional_params: Any) -> None:
        self._call("error", message, *optional_params)

    def fatal(self, message: Any, *optional_params: Any) -> None:
        self._call("fatal", message, *optional_params)

    # Aliases for call sites written against stdlib or framework loggers
    verbose = trace
    log = info
    warning = warn
    critical = fatal

    def exception(self, message: Any, *optional_params: Any) -> None:
        """Log at error level, attaching the exception being handled.

        Outside an ``except`` block this is a plain ``error`` call.
        """
        record = self._normalize("error", message, *optional_params)
        handled = sys.exc_info()[1]
        if handled is not None and self._error_field not in record.fields:
            record.fields[self._error_field] = handled
        self._emit(record)

    def _normalize(self, level: str, message: Any, *optional_params: Any) -> CanonicalLogRecord:
        return normalize(
            level,
            message,
            *optional_params,
            context_field=self._context_field,
            error_field=self._error_field,
        )

    def _call(self, level: str, message: Any, *optional_params: Any) -> None:
        self._emit(self._normalize(level, message, *optional_params))

    def _emit(self, record: CanonicalLogRecord) -> None:
        error = record.fields.get(self._error_field)
        if record.message is None and isinstance(error, BaseException):
            record = replace(record, message=error_message(error))
        getattr(self._logger.handle, record.level)(*record.emit_args())
