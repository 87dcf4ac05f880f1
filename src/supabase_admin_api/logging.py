"""
Structured logging for the Supabase admin API.

This module provides:
- Structured JSON or text logging with consistent fields
- Per-request context (request id, route) for correlation
- Timing helpers for external calls
- Key redaction for startup diagnostics
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

# =============================================================================
# Log Context
# =============================================================================


@dataclass
class LogContext:
    """Context information attached to log records."""

    request_id: str | None = None
    method: str | None = None
    route: str | None = None
    probe: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = {k: v for k, v in asdict(self).items() if v is not None and k != "extra"}
        d.update(self.extra)
        return d

    def with_update(self, **kwargs) -> LogContext:
        """Create a new context with updated values."""
        return LogContext(
            request_id=kwargs.get("request_id", self.request_id),
            method=kwargs.get("method", self.method),
            route=kwargs.get("route", self.route),
            probe=kwargs.get("probe", self.probe),
            extra={**self.extra, **kwargs.get("extra", {})},
        )


# =============================================================================
# Logger
# =============================================================================


class StructuredLogger:
    """
    Logger with structured output and context tracking.

    Example:
        ```python
        logger = StructuredLogger("supabase_admin_api")

        with logger.request_context("GET", "/api/test-db"):
            logger.info("query finished", duration_ms=12.5)
        ```
    """

    def __init__(
        self,
        name: str = "supabase_admin_api",
        level: str = "INFO",
        json_output: bool = False,
    ):
        self.name = name
        self.json_output = json_output

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper()))

        # Per-task context so concurrent requests do not share fields
        self._context: ContextVar[LogContext] = ContextVar(f"{name}.log_context", default=LogContext())

        formatter = JSONFormatter() if json_output else TextFormatter()
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            self._logger.addHandler(handler)
        for handler in self._logger.handlers:
            handler.setFormatter(formatter)

    @property
    def context(self) -> LogContext:
        return self._context.get()

    def set_context(self, **kwargs) -> None:
        """Update the current log context."""
        self._context.set(self.context.with_update(**kwargs))

    @contextmanager
    def bind(self, **kwargs) -> Iterator[LogContext]:
        """Temporarily extend the log context."""
        token = self._context.set(self.context.with_update(**kwargs))
        try:
            yield self.context
        finally:
            self._context.reset(token)

    @contextmanager
    def request_context(self, method: str, route: str) -> Iterator[str]:
        """
        Context manager for a single HTTP request.

        Yields:
            The request ID
        """
        request_id = generate_request_id()
        with self.bind(request_id=request_id, method=method, route=route):
            yield request_id

    def _log(
        self,
        level: int,
        message: str,
        event_type: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        record_data = {
            "message": message,
            **self.context.to_dict(),
        }

        if event_type:
            record_data["event_type"] = event_type

        if data:
            record_data.update(data)

        if self.json_output:
            self._logger.log(level, json.dumps(record_data, default=str))
        else:
            extras = " ".join(f"{k}={v}" for k, v in record_data.items() if k != "message")
            self._logger.log(level, f"{message} {extras}".rstrip())

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, data=kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, data=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, data=kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, data=kwargs)

    def log_error(self, message: str, error: BaseException, **kwargs) -> None:
        """Log an exception with its type and text."""
        self._log(
            logging.ERROR,
            message,
            event_type="error",
            data={
                "error_type": error.__class__.__name__,
                "error": str(error),
                **kwargs,
            },
        )


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        try:
            message_data = json.loads(record.getMessage())
            if isinstance(message_data, dict):
                log_data.update(message_data)
            else:
                log_data["message"] = record.getMessage()
        except (json.JSONDecodeError, TypeError):
            log_data["message"] = record.getMessage()

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        color = self.LEVEL_COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""

        return f"{timestamp} {color}{record.levelname:8}{reset} {record.getMessage()}"


# =============================================================================
# Utilities
# =============================================================================


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return f"req_{uuid.uuid4().hex[:12]}"


def redact_api_key(key: str | None) -> str:
    """Redact a secret for safe logging."""
    if not key:
        return "<not set>"
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}...{key[-4:]}"


@dataclass
class Timer:
    """Simple timer for measuring durations."""

    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    def stop(self) -> float:
        """Stop the timer and return duration in milliseconds."""
        self.end_time = time.perf_counter()
        return self.elapsed_ms

    @property
    def elapsed_ms(self) -> float:
        end = self.end_time or time.perf_counter()
        return (end - self.start_time) * 1000


@contextmanager
def timed() -> Iterator[Timer]:
    """Context manager for timing operations."""
    timer = Timer()
    try:
        yield timer
    finally:
        timer.stop()


# =============================================================================
# Global Logger
# =============================================================================

_default_logger: StructuredLogger | None = None


def get_logger(name: str = "supabase_admin_api") -> StructuredLogger:
    """Get or create a structured logger."""
    global _default_logger
    if _default_logger is None or _default_logger.name != name:
        _default_logger = StructuredLogger(name)
    return _default_logger


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    **kwargs: Any,
) -> StructuredLogger:
    """Configure the default logger."""
    global _default_logger
    _default_logger = StructuredLogger(level=level, json_output=json_output, **kwargs)
    return _default_logger


__all__ = [
    "LogContext",
    "StructuredLogger",
    "JSONFormatter",
    "TextFormatter",
    "Timer",
    "timed",
    "generate_request_id",
    "redact_api_key",
    "get_logger",
    "configure_logging",
]
