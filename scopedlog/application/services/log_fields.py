"""Helpers deciding what counts as structured data in a log call."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any


def is_structured(value: Any) -> bool:
    """Whether ``value`` is merged into fields rather than printed.

    Mappings, lists, tuples and dataclass instances are structured. ``None``
    is too: it merges as nothing. Exceptions are handled separately by the
    callers.
    """
    if value is None or isinstance(value, Mapping | list | tuple):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def as_fields(value: Any) -> dict[str, Any]:
    """Shallow field view of a structured value.

    Args:
        value: A value for which ``is_structured`` is true.

    Returns:
        A new dict. Sequences map their indices (as strings) to items.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    if isinstance(value, list | tuple):
        return {str(index): item for index, item in enumerate(value)}
    return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}


def error_message(error: BaseException) -> str:
    """Message text for an exception, ``"Error"`` when it has none."""
    return str(error) or "Error"
