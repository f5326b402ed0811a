"""Tests for structured logging module."""

import json
import logging

import pytest

from typeforge.logging import (
    ForgeLogger,
    LogContext,
    LogFormat,
    StructuredFormatter,
    TextFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger("typeforge")
    level, handlers = root.level, list(root.handlers)
    yield root
    root.setLevel(level)
    root.handlers[:] = handlers


def make_record(msg: str, context: LogContext | None = None) -> logging.LogRecord:
    record = logging.LogRecord("typeforge.test", logging.INFO, __file__, 1, msg, (), None)
    if context is not None:
        record.context = context
    return record


class TestLogContext:
    """Tests for LogContext."""

    def test_default_context(self):
        ctx = LogContext()
        assert ctx.component == ""
        assert ctx.operation == ""
        assert ctx.namespace == ""
        assert ctx.extra == {}

    def test_with_extra(self):
        ctx = LogContext(component="factory", namespace="app")
        new_ctx = ctx.with_extra(type="app.Widget", members=3)

        assert new_ctx.component == "factory"
        assert new_ctx.namespace == "app"
        assert new_ctx.extra == {"type": "app.Widget", "members": 3}
        # Receiver unchanged
        assert ctx.extra == {}


class TestForgeLogger:
    """Tests for ForgeLogger."""

    def test_create_logger(self):
        logger = ForgeLogger("test_component")
        assert logger.context.component == "test_component"

    def test_with_context(self):
        logger = ForgeLogger("test").with_context(model="Person")
        assert logger.context.extra["model"] == "Person"

    def test_with_operation(self):
        logger = ForgeLogger("test").with_operation("new_type")

        assert logger.context.operation == "new_type"
        assert logger.context.component == "test"

    def test_with_namespace(self):
        logger = ForgeLogger("test").with_operation("bake").with_namespace("app")

        assert logger.context.namespace == "app"
        assert logger.context.operation == "bake"

    def test_logging_levels(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="typeforge.test_levels"):
            logger = ForgeLogger("test_levels")

            logger.debug("debug message")
            logger.info("info message")
            logger.warning("warning message")
            logger.error("error message")

        assert "debug message" in caplog.text
        assert "info message" in caplog.text
        assert "warning message" in caplog.text
        assert "error message" in caplog.text

    def test_disabled_level_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="typeforge.test_quiet"):
            ForgeLogger("test_quiet").debug("hidden")

        assert "hidden" not in caplog.text

    def test_context_attached_to_record(self, caplog):
        with caplog.at_level(logging.INFO, logger="typeforge.test_ctx"):
            ForgeLogger("test_ctx").with_operation("bake").info("done", type="app.Widget")

        record = caplog.records[-1]
        assert record.context.operation == "bake"
        assert record.context.extra == {"type": "app.Widget"}

    def test_exception(self, caplog):
        with caplog.at_level(logging.ERROR, logger="typeforge.test_exc"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                ForgeLogger("test_exc").exception("failed")

        assert caplog.records[-1].exc_info is not None

    def test_timed_context_manager(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="typeforge.test_timed"):
            logger = ForgeLogger("test_timed")

            with logger.timed("test_operation") as result:
                _sum = sum(range(100))

            assert "elapsed_ms" in result
            assert result["elapsed_ms"] >= 0

        assert "test_operation completed" in caplog.text


class TestFormatters:
    """Tests for TextFormatter and StructuredFormatter."""

    def test_text_prefix(self):
        ctx = LogContext(component="factory", operation="new_type", namespace="app")
        text = TextFormatter("%(message)s").format(make_record("hello", ctx))

        assert text == "[factory] (new_type) ns:app hello"

    def test_text_extra(self):
        ctx = LogContext(extra={"type": "app.Widget"})
        text = TextFormatter("%(message)s").format(make_record("hello", ctx))

        assert text == "hello type=app.Widget"

    def test_text_without_context(self):
        assert TextFormatter("%(message)s").format(make_record("plain")) == "plain"

    def test_json(self):
        ctx = LogContext(component="factory", extra={"type": "app.Widget"})
        data = json.loads(StructuredFormatter().format(make_record("hello", ctx)))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["component"] == "factory"
        assert data["type"] == "app.Widget"
        assert "operation" not in data


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self):
        logger = get_logger("my_component")
        assert logger.context.component == "my_component"

    def test_get_logger_cached(self):
        assert get_logger("cached_component") is get_logger("cached_component")


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_text_format(self, restore_root_logger):
        configure_logging(level=logging.DEBUG, log_format=LogFormat.TEXT)

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)

    def test_configure_json_format(self, restore_root_logger):
        configure_logging(level=logging.INFO, log_format=LogFormat.JSON)

        assert restore_root_logger.level == logging.INFO
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)
