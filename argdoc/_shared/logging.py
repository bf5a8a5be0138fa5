"""Structured logging helpers with correlation IDs.

Every module in :mod:`argdoc` obtains its logger through :func:`get_logger`,
which returns a :class:`LoggerAdapter` injecting ``operation``, ``status`` and
``correlation_id`` fields into each record. Library loggers carry a
``NullHandler``; handlers are configured once at the CLI boundary through
:func:`setup_logging`.

Examples
--------
>>> from argdoc._shared.logging import get_logger, with_fields
>>> logger = get_logger(__name__)
>>> logger.info("Run started", extra={"operation": "docgen", "status": "started"})
>>> adapter = with_fields(logger, operation="render", program="Filter")
>>> adapter.info("Rendering page")
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from types import TracebackType

__all__ = [
    "CorrelationContext",
    "JsonFormatter",
    "LogValue",
    "LoggerAdapter",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "setup_logging",
    "with_fields",
]

type LogValue = Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "argdoc_correlation_id", default=None
)

_STRUCTURED_FIELDS = ("correlation_id", "operation", "status", "duration_ms")

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    The payload carries ``ts``, ``level``, ``name`` and ``message`` plus the
    structured fields and any JSON-compatible ``extra`` values attached to the
    record. The correlation id falls back to the context variable when the
    record does not carry one.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Return ``record`` encoded as a JSON document."""
        data: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if "correlation_id" not in data:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                data["correlation_id"] = ctx_correlation_id
        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_ATTRIBUTES
                and key not in data
                and not key.startswith("_")
                and value is not None
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class LoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter that injects structured context fields.

    Fields bound at construction (see :func:`with_fields`) are merged into the
    ``extra`` mapping of each call without overriding values supplied by the
    caller. ``operation`` defaults to ``"unknown"`` and ``status`` is inferred
    from the level when absent.
    """

    def process(
        self, msg: object, kwargs: MutableMapping[str, Any]
    ) -> tuple[object, MutableMapping[str, Any]]:
        """Merge adapter fields and the correlation id into ``kwargs['extra']``."""
        extra = dict(kwargs.get("extra") or {})
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        if "correlation_id" not in extra:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                extra["correlation_id"] = ctx_correlation_id
        extra.setdefault("operation", "unknown")
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg`` at ``level`` with a level-derived default ``status``."""
        if not self.isEnabledFor(level):
            return
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("status", _status_for_level(level))
        kwargs["extra"] = extra
        msg, kwargs = self.process(msg, kwargs)
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log a debug message with structured fields."""
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log an info message with structured fields."""
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log a warning message with structured fields."""
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log an error message with structured fields."""
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(
        self, msg: object, *args: object, exc_info: object = True, **kwargs: Any
    ) -> None:
        """Log an error with traceback using structured fields."""
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def critical(self, msg: object, *args: object, **kwargs: Any) -> None:
        """Log a critical message with structured fields."""
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    def log_success(
        self,
        message: str,
        *,
        operation: str | None = None,
        duration_ms: float | None = None,
        **fields: object,
    ) -> None:
        """Log a successful operation with structured fields.

        Parameters
        ----------
        message : str
            Success message.
        operation : str | None, optional
            Operation name. Defaults to ``None``.
        duration_ms : float | None, optional
            Operation duration in milliseconds. Defaults to ``None``.
        **fields : object
            Additional structured fields to include in the log record.
        """
        extra: dict[str, object] = {"status": "success"}
        if operation is not None:
            extra["operation"] = operation
        if duration_ms is not None:
            extra["duration_ms"] = duration_ms
        extra.update(fields)
        self.info(message, extra=extra)

    def log_failure(
        self,
        message: str,
        *,
        exception: BaseException | None = None,
        operation: str | None = None,
        **fields: object,
    ) -> None:
        """Log a failure, recording the exception type and message when given."""
        extra: dict[str, object] = {"status": "error"}
        if operation is not None:
            extra["operation"] = operation
        if exception is not None:
            extra["error_type"] = exception.__class__.__name__
            extra["error_detail"] = str(exception)
        extra.update(fields)
        self.error(message, extra=extra)


def _status_for_level(level: int) -> str:
    if level >= logging.ERROR:
        return "error"
    if level >= logging.WARNING:
        return "warning"
    return "success"


def get_logger(name: str) -> LoggerAdapter:
    """Return a logger adapter with structured logging support.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__``).

    Returns
    -------
    LoggerAdapter
        Adapter over ``logging.getLogger(name)``. A ``NullHandler`` is attached
        when the logger has no handlers yet.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


def with_fields(logger: logging.Logger | LoggerAdapter, **fields: LogValue) -> LoggerAdapter:
    """Return a structured adapter bound to ``fields``.

    Fields already bound on ``logger`` (when it is an adapter) are kept unless
    overridden by ``fields``.
    """
    if isinstance(logger, LoggerAdapter):
        merged: dict[str, object] = dict(logger.extra or {})
        merged.update(fields)
        return LoggerAdapter(logger.logger, merged)
    return LoggerAdapter(logger, dict(fields))


def setup_logging(level: int = logging.INFO, *, json_output: bool = True) -> None:
    """Configure the root logger for command-line use.

    Parameters
    ----------
    level : int, optional
        Logging level threshold. Defaults to ``logging.INFO``.
    json_output : bool, optional
        Emit JSON lines through :class:`JsonFormatter` when ``True``; plain
        ``levelname name: message`` lines otherwise.
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation id injected into subsequent log records."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    """Return the correlation id from the current context, if any."""
    return _correlation_id.get()


class CorrelationContext:
    """Context manager binding a correlation id for the duration of a block.

    Examples
    --------
    >>> from argdoc._shared.logging import CorrelationContext, get_correlation_id
    >>> with CorrelationContext("run-42"):
    ...     assert get_correlation_id() == "run-42"
    """

    def __init__(self, correlation_id: str | None) -> None:
        self.correlation_id = correlation_id
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> Self:
        self._token = _correlation_id.set(self.correlation_id)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
        del exc_type, exc_val, exc_tb
