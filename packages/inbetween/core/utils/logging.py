"""Logging setup for inbetween.

Output goes to stdout or a file, as text or as JSON lines. Engine code logs
through ``get_logger(__name__, sample_id=...)`` so every record it emits
carries the identifier being rebuilt; the JSON formatter moves such fields
into the record's ``context``.
"""

from __future__ import annotations

from datetime import UTC, datetime
import functools
import json
import logging
import sys
import time
from typing import Any

TIMING_LOGGER_NAME = "inbetween.timing"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredJSONFormatter(logging.Formatter):
    """Render a record as ``{"level", "message", "timestamp", "context"}``.

    ``context`` names the emitting logger, function and line, followed by the
    record's extra fields (``sample_id``, ``keyframe_index``, ``elapsed_ms``...)
    and, for exceptions, ``error_type``, ``error_message`` and ``stack_trace``.
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "function": record.funcName,
            "line": record.lineno,
        }
        context.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info and record.exc_info[0] is not None:
            error_type, error, _ = record.exc_info
            context["error_type"] = error_type.__name__
            context["error_message"] = str(error)
            context["stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "context": context,
            },
            default=str,
        )


class ContextAdapter(logging.LoggerAdapter):
    """Adapter whose bound context is merged with any per-call ``extra``."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Replace the root handlers with a single stdout or file handler.

    Args:
        level: Level name, case-insensitive.
        format_string: Text format; ignored when ``structured`` is set.
        filename: Log file path. None logs to stdout.
        structured: Emit JSON lines.
    """
    handler = logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str, **context: Any) -> logging.Logger | ContextAdapter:
    """Module logger, bound to ``context`` when any is given.

    Example:
        >>> log = get_logger(__name__, sample_id="L1")
        >>> log.warning("duplicate slot", extra={"keyframe_index": 2})
    """
    logger = logging.getLogger(name)
    if context:
        return ContextAdapter(logger, context)
    return logger


def log_performance(func):
    """Log the wall time of every call at DEBUG on ``inbetween.timing``."""
    timing_logger = logging.getLogger(TIMING_LOGGER_NAME)

    @functools.wraps(func)
    def timed(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            timing_logger.debug(
                f"{func.__qualname__} took {elapsed_ms:.2f} ms",
                extra={"elapsed_ms": round(elapsed_ms, 3)},
            )

    return timed
