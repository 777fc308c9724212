"""
Pytest configuration and shared fixtures for scopedlog tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- RecordingHandle stands in for a real transport wherever the output
  format does not matter
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
import structlog

from scopedlog.application.observability.root_logger import reset_root_logger
from scopedlog.config.logger_params import LoggerParams, TransportOptions


@dataclass
class Record:
    """One call received by a RecordingHandle."""

    level: str
    fields: dict[str, Any]
    message: str | None
    args: tuple[Any, ...]
    handle: RecordingHandle


@dataclass(eq=False)
class RecordingHandle:
    """LoggerHandle keeping every call in memory.

    Children created with ``with_fields`` share the parent's record list and
    merge their bindings into the recorded fields, like a real transport.
    """

    bindings: dict[str, Any] = field(default_factory=dict)
    records: list[Record] = field(default_factory=list)

    def _record(self, level: str, fields: Mapping[str, Any], message: str | None, args: tuple) -> None:
        self.records.append(Record(level, {**self.bindings, **fields}, message, args, self))

    def trace(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("trace", fields, message, args)

    def debug(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("debug", fields, message, args)

    def info(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("info", fields, message, args)

    def warn(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("warn", fields, message, args)

    def error(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("error", fields, message, args)

    def fatal(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> None:
        self._record("fatal", fields, message, args)

    def with_fields(self, fields: Mapping[str, Any]) -> RecordingHandle:
        return RecordingHandle({**self.bindings, **fields}, self.records)


def read_json_lines(stream: io.StringIO) -> list[dict[str, Any]]:
    """Parse every JSON line written to ``stream``."""
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Reset the root logger cell and global structlog config around each test."""
    reset_root_logger()
    yield
    reset_root_logger()
    structlog.reset_defaults()


@pytest.fixture
def recorder() -> RecordingHandle:
    return RecordingHandle()


@pytest.fixture
def log_stream() -> io.StringIO:
    """In-memory destination for JSON log lines."""
    return io.StringIO()


@pytest.fixture
def params() -> LoggerParams:
    """Module parameters with every level enabled."""
    return LoggerParams(transport=TransportOptions(level="trace", environment="production"))


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from scopedlog import __version__

    return __version__


@pytest.fixture
def make_recorder() -> type[RecordingHandle]:
    """The RecordingHandle class, for tests needing several independent handles."""
    return RecordingHandle


@pytest.fixture
def read_logs(log_stream: io.StringIO) -> Callable[[], list[dict[str, Any]]]:
    """Callable returning the records written to ``log_stream`` so far."""
    return lambda: read_json_lines(log_stream)
