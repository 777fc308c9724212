"""Unit tests for the context-resolving ScopedLogger facade."""

import asyncio

import pytest

from scopedlog.application.observability.context import arun, store_scope
from scopedlog.application.observability.root_logger import (
    get_root_logger,
    initialize_root_logger,
    is_root_logger_initialized,
)
from scopedlog.application.services.scoped_logger import ScopedLogger
from scopedlog.config.logger_params import LoggerParams, TransportOptions
from scopedlog.domain.errors.scope import OutOfRequestScopeError
from scopedlog.domain.models.store import Store
from scopedlog.infrastructure.observability.response_logger import ResponseLogger


def labelled(params: LoggerParams, label: str) -> ScopedLogger:
    logger = ScopedLogger(params)
    logger.set_label(label)
    return logger


class TestCallShapes:
    """Tests for how call arguments become records."""

    @pytest.fixture(autouse=True)
    def root(self, recorder) -> None:
        initialize_root_logger(recorder)

    def test_unlabelled_message(self, params: LoggerParams, recorder) -> None:
        ScopedLogger(params).info("hello")

        [record] = recorder.records
        assert record.fields == {}
        assert record.message == "hello"
        assert record.args == ()

    def test_label_and_interpolation(self, params: LoggerParams, recorder) -> None:
        labelled(params, "PaymentService").info("charging %s", "order-1")

        [record] = recorder.records
        assert record.fields == {"context": "PaymentService"}
        assert record.message == "charging %s"
        assert record.args == ("order-1",)

    def test_fields_object_first(self, params: LoggerParams, recorder) -> None:
        labelled(params, "Svc").debug({"attempt": 2}, "retry %d", 2)

        [record] = recorder.records
        assert record.level == "debug"
        assert record.fields == {"context": "Svc", "attempt": 2}
        assert record.message == "retry %d"
        assert record.args == (2,)

    def test_caller_fields_override_label(self, params: LoggerParams, recorder) -> None:
        labelled(params, "Svc").info({"context": "Override"}, "msg")

        assert recorder.records[0].fields == {"context": "Override"}

    def test_exception_first_uses_its_text(self, params: LoggerParams, recorder) -> None:
        error = ValueError("card declined")

        labelled(params, "Svc").error(error)

        [record] = recorder.records
        assert record.fields == {"context": "Svc", "err": error}
        assert record.message == "card declined"

    def test_exception_with_message(self, params: LoggerParams, recorder) -> None:
        error = ValueError("card declined")

        ScopedLogger(params).error(error, "charge failed for %s", "order-1")

        [record] = recorder.records
        assert record.fields == {"err": error}
        assert record.message == "charge failed for %s"
        assert record.args == ("order-1",)

    def test_no_arguments(self, params: LoggerParams, recorder) -> None:
        ScopedLogger(params).info()

        [record] = recorder.records
        assert record.fields == {}
        assert record.message is None

    @pytest.mark.parametrize(
        ("method", "level"),
        [
            ("trace", "trace"),
            ("debug", "debug"),
            ("info", "info"),
            ("warn", "warn"),
            ("warning", "warn"),
            ("error", "error"),
            ("fatal", "fatal"),
            ("critical", "fatal"),
        ],
    )
    def test_level_methods(self, params: LoggerParams, recorder, method: str, level: str) -> None:
        getattr(ScopedLogger(params), method)("message")

        assert recorder.records[0].level == level


class TestLabels:
    """Tests for label isolation between facades."""

    def test_labels_never_cross(self, params: LoggerParams, recorder) -> None:
        initialize_root_logger(recorder)
        first = labelled(params, "L1")
        second = labelled(params, "L2")

        with store_scope(Store(logger=recorder)):
            first.info("one")
            second.info("two")
            first.info("three")

        assert [r.fields["context"] for r in recorder.records] == ["L1", "L2", "L1"]

    def test_set_label_changes_later_records(self, params: LoggerParams, recorder) -> None:
        initialize_root_logger(recorder)
        logger = ScopedLogger(params)

        logger.info("before")
        logger.set_label("Late")
        logger.info("after")

        assert logger.label == "Late"
        assert recorder.records[0].fields == {}
        assert recorder.records[1].fields == {"context": "Late"}

    def test_custom_context_field(self, recorder) -> None:
        params = LoggerParams(transport=TransportOptions(level="info"), context_field_name="component")
        initialize_root_logger(recorder)

        labelled(params, "Svc").info("hi")

        assert recorder.records[0].fields == {"component": "Svc"}


class TestHandleResolution:
    """Tests for resolving the request logger versus the root logger."""

    def test_root_when_no_request(self, params: LoggerParams, recorder) -> None:
        initialize_root_logger(recorder)

        assert ScopedLogger(params).handle is recorder

    def test_store_logger_inside_request(self, params: LoggerParams, recorder, make_recorder) -> None:
        initialize_root_logger(recorder)
        request_log = make_recorder()

        with store_scope(Store(logger=request_log)):
            assert ScopedLogger(params).handle is request_log

    def test_unconfigured_root_is_built_from_transport(self, log_stream, read_logs) -> None:
        params = LoggerParams(
            transport=TransportOptions(level="info", environment="production", stream=log_stream)
        )

        ScopedLogger(params).info({"job": "warmup"}, "nobody configured")

        [record] = read_logs()
        assert record["event"] == "nobody configured"
        assert record["job"] == "warmup"
        assert is_root_logger_initialized() is True

    def test_offered_root_beats_built_root(self, log_stream, read_logs, recorder) -> None:
        params = LoggerParams(transport=TransportOptions(stream=log_stream))

        ScopedLogger(params, root=recorder).info("kept in memory")

        assert read_logs() == []
        assert recorder.records[0].message == "kept in memory"

    def test_first_offered_root_wins(self, params: LoggerParams, make_recorder) -> None:
        first = make_recorder()
        second = make_recorder()

        ScopedLogger(params, root=first)
        ScopedLogger(params, root=second)

        assert get_root_logger() is first


class TestWithFields:
    """Tests for binding fields to the rest of a request."""

    def test_out_of_scope_raises(self, params: LoggerParams, recorder) -> None:
        initialize_root_logger(recorder)

        with pytest.raises(OutOfRequestScopeError, match="unable to assign extra fields out of request scope"):
            ScopedLogger(params).with_fields({"user_id": 7})

    def test_binds_for_every_facade_of_the_request(
        self, params: LoggerParams, make_recorder
    ) -> None:
        request_log = make_recorder()
        store = Store(logger=request_log)

        with store_scope(store):
            labelled(params, "Auth").with_fields({"user_id": 7})
            labelled(params, "Orders").info("placed")

        assert store.logger is not request_log
        [record] = request_log.records
        assert record.fields == {"user_id": 7, "context": "Orders"}

    def test_response_logger_updated_when_enabled(self, make_recorder) -> None:
        params = LoggerParams(
            transport=TransportOptions(level="info"), assign_to_response_logger=True
        )
        response_log = ResponseLogger(make_recorder())
        store = Store(logger=make_recorder(), response_logger=response_log)

        with store_scope(store):
            ScopedLogger(params).with_fields({"tenant": "acme"})

        response_log.info({}, "request completed")
        assert response_log.handle.records[0].fields == {"tenant": "acme"}

    def test_response_logger_untouched_when_disabled(self, params: LoggerParams, make_recorder) -> None:
        response_log = ResponseLogger(make_recorder())
        store = Store(logger=make_recorder(), response_logger=response_log)

        with store_scope(store):
            ScopedLogger(params).with_fields({"tenant": "acme"})

        response_log.info({}, "request completed")
        assert response_log.handle.records[0].fields == {}

    @pytest.mark.asyncio
    async def test_concurrent_requests_stay_isolated(self, params: LoggerParams, make_recorder) -> None:
        """Fields bound by one request never show up in another."""
        sink = make_recorder()
        logger = labelled(params, "Worker")

        async def handle_request(request_id: str, delay: float) -> None:
            logger.with_fields({"request_id": request_id})
            await asyncio.sleep(delay)
            logger.info("done")

        await asyncio.gather(
            arun(Store(logger=sink), handle_request, "A", 0.02),
            arun(Store(logger=sink), handle_request, "B", 0.0),
        )

        by_request = {r.fields["request_id"]: r for r in sink.records}
        assert set(by_request) == {"A", "B"}
        assert all(r.fields == {"request_id": r.fields["request_id"], "context": "Worker"} for r in sink.records)

    @pytest.mark.asyncio
    async def test_spawned_tasks_share_request_store(self, params: LoggerParams, make_recorder) -> None:
        sink = make_recorder()
        logger = ScopedLogger(params)

        async def child() -> None:
            logger.info("from child task")

        async def handle_request() -> None:
            logger.with_fields({"request_id": "A"})
            await asyncio.create_task(child())

        await arun(Store(logger=sink), handle_request)

        assert sink.records[0].fields == {"request_id": "A"}
