"""structlog processors used by scopedlog handles.

- ``interpolate_message`` applies printf-style arguments to the message.
- ``serialize_error`` turns the exception under the error key into a
  JSON-friendly ``{type, message, stack}`` mapping.
- ``ensure_event`` gives console output an event even for message-less
  records.
"""

from __future__ import annotations

import json
import math
import re
import traceback
from collections.abc import Sequence
from typing import Any

from structlog.typing import EventDict, Processor, WrappedLogger

# Key under which handles pass interpolation values to the processor chain
POSITIONAL_ARGS_KEY = "positional_args"

_FORMAT_PATTERN: re.Pattern[str] = re.compile(r"%[sdjoO%]")


def _format_number(value: Any) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "NaN"
    if math.isnan(number) or math.isinf(number):
        return str(number)
    return str(math.floor(number))


def _format_json(value: Any) -> str:
    try:
        return json.dumps(value, default=str)
    except ValueError:
        # Circular references
        return '"[Circular]"'


def format_message(template: str, args: Sequence[Any]) -> str:
    """Apply printf-style ``args`` to ``template``.

    Supported markers: ``%s`` (str), ``%d`` (integer), ``%j``/``%o``/``%O``
    (JSON) and ``%%`` (literal percent). Markers without a matching
    argument are left as they are; surplus arguments are ignored.

    Args:
        template: Message with placeholders.
        args: Values to substitute, in order.

    Returns:
        The formatted message.
    """
    if not args:
        return template

    index = 0

    def _substitute(match: re.Match[str]) -> str:
        nonlocal index
        marker = match.group(0)
        if marker == "%%":
            return "%"
        if index >= len(args):
            return marker
        value = args[index]
        index += 1
        if marker == "%s":
            return str(value)
        if marker == "%d":
            return _format_number(value)
        return _format_json(value)

    return _FORMAT_PATTERN.sub(_substitute, template)


def interpolate_message(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Format the event with the positional arguments passed by the handle."""
    args = event_dict.pop(POSITIONAL_ARGS_KEY, ())
    event = event_dict.get("event")
    if args and isinstance(event, str):
        event_dict["event"] = format_message(event, args)
    return event_dict


def error_to_dict(error: BaseException) -> dict[str, Any]:
    """Serialize an exception.

    An exception that already carries a formatted ``stack`` string (see
    ReportedError) keeps it verbatim.

    Args:
        error: The exception.

    Returns:
        Mapping with ``type``, ``message`` and ``stack``.
    """
    stack = getattr(error, "stack", None)
    if not isinstance(stack, str):
        stack = "".join(traceback.format_exception(error)).rstrip()
    return {
        "type": type(error).__name__,
        "message": str(error),
        "stack": stack,
    }


def serialize_error(error_key: str = "err") -> Processor:
    """Build a processor serializing the exception under ``error_key``.

    Args:
        error_key: Field holding exceptions.

    Returns:
        The processor.
    """

    def _serialize(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        error = event_dict.get(error_key)
        if isinstance(error, BaseException):
            event_dict[error_key] = error_to_dict(error)
        return event_dict

    return _serialize


def ensure_event(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("event", "")
    return event_dict
