"""Unit tests for the structlog-backed logger handles.

Output is rendered to an in-memory stream and parsed back as JSON lines.
"""

import io
import json

import pytest
import structlog

from scopedlog.config.logger_params import TransportOptions
from scopedlog.domain.ports.logger_handle import LoggerHandle
from scopedlog.infrastructure.observability.logging import (
    ScopedBoundLogger,
    build_processors,
    configure_structlog,
    create_root_logger,
    make_scoped_bound_logger,
)


def make_root(stream: io.StringIO, **options) -> ScopedBoundLogger:
    options.setdefault("environment", "production")
    options.setdefault("level", "info")
    return create_root_logger(TransportOptions(stream=stream, **options))


class TestScopedBoundLogger:
    """Tests for JSON records written by root handles."""

    def test_record_shape(self, log_stream: io.StringIO, read_logs) -> None:
        root = make_root(log_stream)

        root.info({"user_id": 7}, "user %s logged in", "alice")

        [record] = read_logs()
        assert record["event"] == "user alice logged in"
        assert record["user_id"] == 7
        assert record["level"] == "info"
        assert "timestamp" in record
        assert "positional_args" not in record

    def test_implements_handle_protocol(self, log_stream: io.StringIO) -> None:
        assert isinstance(make_root(log_stream), LoggerHandle)

    def test_message_optional(self, log_stream: io.StringIO, read_logs) -> None:
        make_root(log_stream).info({"cache": "miss"})

        [record] = read_logs()
        assert record["cache"] == "miss"
        assert "event" not in record

    def test_filters_below_level(self, log_stream: io.StringIO, read_logs) -> None:
        root = make_root(log_stream, level="warn")

        root.debug({}, "hidden")
        root.info({}, "hidden")
        root.error({}, "shown")

        assert [r["event"] for r in read_logs()] == ["shown"]
        assert root.is_enabled("fatal") is True
        assert root.is_enabled("info") is False

    def test_trace_and_fatal_levels(self, log_stream: io.StringIO, read_logs) -> None:
        root = make_root(log_stream, level="trace")

        root.trace({}, "fine detail")
        root.fatal({}, "going down")

        assert [r["level"] for r in read_logs()] == ["trace", "fatal"]

    def test_with_fields_binds_on_child_only(self, log_stream: io.StringIO, read_logs) -> None:
        root = make_root(log_stream)
        child = root.with_fields({"req_id": "r-1"})

        child.info({}, "from child")
        root.info({}, "from root")

        from_child, from_root = read_logs()
        assert from_child["req_id"] == "r-1"
        assert "req_id" not in from_root
        assert type(child) is type(root)

    def test_call_fields_override_bindings(self, log_stream: io.StringIO, read_logs) -> None:
        child = make_root(log_stream).with_fields({"context": "Bound"})

        child.info({"context": "Call"}, "x")

        assert read_logs()[0]["context"] == "Call"

    def test_with_fields_accepts_non_string_keys(self, log_stream: io.StringIO, read_logs) -> None:
        child = make_root(log_stream).with_fields({1: "a", "tenant": "acme"})

        child.info({}, "bound")

        [record] = read_logs()
        assert record["1"] == "a"
        assert record["tenant"] == "acme"

    def test_serializes_errors(self, log_stream: io.StringIO, read_logs) -> None:
        make_root(log_stream).error({"err": ValueError("bad")}, "failed")

        err = read_logs()[0]["err"]
        assert err["type"] == "ValueError"
        assert err["message"] == "bad"
        assert "ValueError: bad" in err["stack"]

    def test_custom_error_key(self, log_stream: io.StringIO, read_logs) -> None:
        root = make_root(log_stream, custom_attribute_keys={"err": "error"})

        root.error({"error": ValueError("bad")}, "failed")

        assert read_logs()[0]["error"]["type"] == "ValueError"

    def test_development_renders_console(self, log_stream: io.StringIO) -> None:
        root = make_root(log_stream, environment="development")

        root.info({"user_id": 7}, "hello %s", "world")
        root.info({"only": "fields"})

        output = log_stream.getvalue()
        assert "hello world" in output
        assert "user_id" in output
        assert "only" in output
        with pytest.raises(json.JSONDecodeError):
            json.loads(output.splitlines()[0])


class TestRootFactory:
    """Tests for create_root_logger and the filtering classes."""

    def test_prebuilt_logger_is_returned(self, recorder) -> None:
        assert create_root_logger(TransportOptions(logger=recorder)) is recorder

    def test_filtering_classes_are_cached(self) -> None:
        assert make_scoped_bound_logger("debug") is make_scoped_bound_logger("DEBUG")
        assert make_scoped_bound_logger("warning") is make_scoped_bound_logger("warn")
        assert make_scoped_bound_logger("info") is not make_scoped_bound_logger("error")

    def test_root_uses_filtering_class(self, log_stream: io.StringIO) -> None:
        root = make_root(log_stream, level="error")

        assert isinstance(root, ScopedBoundLogger)
        assert type(root) is make_scoped_bound_logger("error")

    def test_renderer_depends_on_environment(self) -> None:
        assert isinstance(build_processors("production")[-1], structlog.processors.JSONRenderer)
        assert isinstance(build_processors("development")[-1], structlog.dev.ConsoleRenderer)


class TestConfigureStructlog:
    """Tests for the global structlog configuration."""

    def test_production_json(self, log_stream: io.StringIO, read_logs) -> None:
        configure_structlog(environment="production", level="info", stream=log_stream)

        structlog.get_logger().info("service_started", port=8000)

        [record] = read_logs()
        assert record["event"] == "service_started"
        assert record["port"] == 8000
        assert record["level"] == "info"

    def test_level_filtering(self, log_stream: io.StringIO, read_logs) -> None:
        configure_structlog(environment="production", level="error", stream=log_stream)

        log = structlog.get_logger()
        log.info("hidden")
        log.error("shown")

        assert [r["event"] for r in read_logs()] == ["shown"]

    def test_level_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, log_stream: io.StringIO, read_logs
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        configure_structlog(environment="production", stream=log_stream)

        log = structlog.get_logger()
        log.info("hidden")
        log.warning("shown")

        assert [r["event"] for r in read_logs()] == ["shown"]

    def test_errors_serialized(self, log_stream: io.StringIO, read_logs) -> None:
        configure_structlog(environment="production", level="info", stream=log_stream)

        structlog.get_logger().error("failed", err=RuntimeError("x"))

        assert read_logs()[0]["err"]["type"] == "RuntimeError"
