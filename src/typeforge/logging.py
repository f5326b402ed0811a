"""Structured logging for typeforge.

Components log through a ForgeLogger, which attaches a LogContext (component,
operation, factory namespace and extra fields) to every record. Records are
rendered as human-readable text or as JSON lines.

Low-level modules (registry, blueprint) use plain ``logging.getLogger``;
the factory uses this module so each synthesized type is logged with its
namespace and operation.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LogFormat(Enum):
    """Log output format."""

    TEXT = "text"
    JSON = "json"


@dataclass
class LogContext:
    """Context information for structured logging."""

    component: str = ""
    operation: str = ""
    namespace: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def with_extra(self, **kwargs: Any) -> "LogContext":
        """Create new context with additional fields."""
        return LogContext(
            component=self.component,
            operation=self.operation,
            namespace=self.namespace,
            extra={**self.extra, **kwargs},
        )


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        ctx = getattr(record, "context", None)
        if isinstance(ctx, LogContext):
            if ctx.component:
                log_data["component"] = ctx.component
            if ctx.operation:
                log_data["operation"] = ctx.operation
            if ctx.namespace:
                log_data["namespace"] = ctx.namespace
            if ctx.extra:
                log_data.update(ctx.extra)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Formatter that outputs human-readable logs with context."""

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []

        ctx = getattr(record, "context", None)
        if isinstance(ctx, LogContext):
            if ctx.component:
                prefix_parts.append(f"[{ctx.component}]")
            if ctx.operation:
                prefix_parts.append(f"({ctx.operation})")
            if ctx.namespace:
                prefix_parts.append(f"ns:{ctx.namespace}")

        prefix = " ".join(prefix_parts)
        if prefix:
            prefix = f"{prefix} "

        base = super().format(record)

        extra_str = ""
        if isinstance(ctx, LogContext) and ctx.extra:
            extra_str = " " + " ".join(f"{k}={v}" for k, v in ctx.extra.items())

        return f"{prefix}{base}{extra_str}"


def _make_handler(level: int, log_format: LogFormat) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if log_format == LogFormat.JSON:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter("%(asctime)s %(levelname)s %(message)s"))
    return handler


class ForgeLogger:
    """Structured logger for typeforge components."""

    def __init__(self, name: str, level: int | None = None):
        """Initialize the logger.

        Args:
            name: Component name, logged under ``typeforge.<name>``
            level: Logging level; inherited from ``typeforge`` when None
        """
        self._logger = logging.getLogger(f"typeforge.{name}")
        if level is not None:
            self._logger.setLevel(level)
        self._context = LogContext(component=name)

    @property
    def context(self) -> LogContext:
        return self._context

    def _derive(self, context: LogContext) -> "ForgeLogger":
        new_logger = ForgeLogger.__new__(ForgeLogger)
        new_logger._logger = self._logger
        new_logger._context = context
        return new_logger

    def with_context(self, **kwargs: Any) -> "ForgeLogger":
        """Create a new logger with additional context fields."""
        return self._derive(self._context.with_extra(**kwargs))

    def with_operation(self, operation: str) -> "ForgeLogger":
        """Create a new logger for a specific operation."""
        return self._derive(
            LogContext(
                component=self._context.component,
                operation=operation,
                namespace=self._context.namespace,
                extra=self._context.extra,
            )
        )

    def with_namespace(self, namespace: str) -> "ForgeLogger":
        """Create a new logger bound to a factory namespace."""
        return self._derive(
            LogContext(
                component=self._context.component,
                operation=self._context.operation,
                namespace=namespace,
                extra=self._context.extra,
            )
        )

    def _log(self, level: int, msg: str, exc_info: Any = None, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if exc_info is True:
            exc_info = sys.exc_info()
        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(unknown file)",
            0,
            msg,
            (),
            exc_info,
        )
        record.context = self._context.with_extra(**kwargs) if kwargs else self._context
        self._logger.handle(record)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an error with the exception currently being handled."""
        self._log(logging.ERROR, msg, exc_info=True, **kwargs)

    @contextmanager
    def timed(self, operation: str, **kwargs: Any):
        """Context manager for timing operations.

        Args:
            operation: Name of the operation being timed
            **kwargs: Additional context fields

        Yields:
            Dict where 'elapsed_ms' will be set after completion
        """
        start = time.perf_counter()
        result: dict[str, Any] = {}
        try:
            yield result
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            result["elapsed_ms"] = elapsed_ms
            self.debug(
                f"{operation} completed",
                operation=operation,
                elapsed_ms=f"{elapsed_ms:.2f}",
                **kwargs,
            )


_loggers: dict[str, ForgeLogger] = {}


def get_logger(name: str, level: int | None = None) -> ForgeLogger:
    """Get or create the logger of a component.

    Args:
        name: Component name
        level: Logging level, applied when the logger is first created

    Returns:
        ForgeLogger instance
    """
    if name not in _loggers:
        _loggers[name] = ForgeLogger(name, level)
    return _loggers[name]


def configure_logging(
    level: int = logging.INFO,
    log_format: LogFormat = LogFormat.TEXT,
) -> None:
    """Configure the ``typeforge`` logger hierarchy.

    Args:
        level: Logging level
        log_format: Output format
    """
    root = logging.getLogger("typeforge")
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_make_handler(level, log_format))


__all__ = [
    "ForgeLogger",
    "LogContext",
    "LogFormat",
    "StructuredFormatter",
    "TextFormatter",
    "configure_logging",
    "get_logger",
]
