"""Structured JSON logging with context-scoped correlation IDs.

Every log line is one JSON object. A batch compute run sets a
correlation_id so all lines it emits, across every compute module, can
be grouped in the log aggregator.
"""

import json
import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

from changemap.config import settings

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Extra fields copied from logger.info("msg", extra={...}) into the JSON line
EXTRA_FIELDS = ("place_id", "resolution", "step", "count", "duration_ms")


def get_correlation_id() -> str:
    """Return the current correlation ID, or empty string if not set."""
    return correlation_id.get()


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        cid = correlation_id.get()
        if cid:
            log_entry["correlation_id"] = cid

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


@contextmanager
def log_step(logger: logging.Logger, step: str, **extra):
    """Log ``step`` at INFO with its wall-clock duration once the block exits."""
    start = time.perf_counter()
    yield
    duration_ms = round((time.perf_counter() - start) * 1000, 1)
    logger.info("%s finished in %.1f ms", step, duration_ms,
                extra={"step": step, "duration_ms": duration_ms, **extra})


def setup_logging(json_format: bool | None = None, level: str | None = None) -> None:
    """Configure root logger with JSON or text format.

    Args:
        json_format: True for JSON (production), False for text (local dev).
            Defaults to ``settings.log_json``.
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
            Defaults to ``settings.log_level``.
    """
    json_format = settings.log_json if json_format is None else json_format
    level = level or settings.log_level

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(handler)

    # MLflow is chatty at INFO when tracking runs
    logging.getLogger("mlflow").setLevel(logging.WARNING)
