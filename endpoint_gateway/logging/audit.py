"""Structured JSON audit logging for endpoint initialization.

Logs go to stdout as JSON lines, with optional file output via the
AUDIT_LOG_FILE env var. Every entry carries the request id of the HTTP
request that triggered it, so the lookups, credential reads and model fetches
behind one initialization can be correlated.

Secrets never go into log entries; use mask_secret for anything key-shaped.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from endpoint_gateway.config.settings import get_settings

# Request-scoped context for correlating log entries
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "audit_data"):
            log_entry.update(record.audit_data)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """Configure the audit logger with JSON output."""
    settings = get_settings()

    logger = logging.getLogger("gateway.audit")
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.audit_log_file:
        file_handler = logging.FileHandler(settings.audit_log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoids duplicate output)
    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger("gateway.audit")


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Keep only the last few characters of a secret, e.g. `***abcd`."""
    if not value:
        return ""
    if len(value) <= visible * 2:
        return "***"
    return f"***{value[-visible:]}"


class RequestTimer:
    """Context manager to measure call latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
