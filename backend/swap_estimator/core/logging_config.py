"""
Centralized logging configuration.

Implements structured JSON logging with daily rotation, trace IDs,
and separate error-only logs for quick triage.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Trace ID for the request currently being handled
_trace_id_context: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

_SENSITIVE_PATTERNS = (
    "key", "secret", "password", "passphrase", "private", "mnemonic", "jwt",
)


def get_trace_id() -> str:
    """
    Get or generate a trace ID for the current context.

    Returns:
        str: UUID trace ID for request tracking
    """
    trace_id = _trace_id_context.get()
    if trace_id is None:
        trace_id = str(uuid.uuid4())
        _trace_id_context.set(trace_id)
    return trace_id


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """
    Set a new trace ID for the current context.

    Args:
        trace_id: Optional trace ID to set (generates new if None)

    Returns:
        str: The trace ID that was set
    """
    trace_id = trace_id or str(uuid.uuid4())
    _trace_id_context.set(trace_id)
    return trace_id


def reset_trace_id() -> None:
    """Reset the trace ID context."""
    _trace_id_context.set(None)


class StructuredJSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs structured JSON logs.

    Includes trace_id, timestamps, and the ``extra_data`` dict passed
    to the logger, with sensitive-looking keys redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as structured JSON.

        Args:
            record: LogRecord to format

        Returns:
            str: JSON-formatted log line
        """
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "trace_id": get_trace_id(),
            "module": record.name,
            "message": record.getMessage(),
        }

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            for key, value in extra_data.items():
                log_obj[key] = self._redact_sensitive(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }

        return json.dumps(log_obj, default=str)

    @staticmethod
    def _redact_sensitive(key: str, value: Any) -> Any:
        if any(pattern in key.lower() for pattern in _SENSITIVE_PATTERNS):
            return "[REDACTED]"
        return value


class DailyRotatingJSONHandler(logging.handlers.TimedRotatingFileHandler):
    """
    Handler for daily rotating JSON logs.

    Creates new log files each day and keeps them for
    the configured retention period.
    """

    def __init__(
        self,
        filename: str,
        when: str = "midnight",
        interval: int = 1,
        backup_count: int = 30,
        encoding: str = "utf-8"
    ):
        log_path = Path(filename)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=str(log_path),
            when=when,
            interval=interval,
            backupCount=backup_count,
            encoding=encoding,
            utc=True
        )
        self.setFormatter(StructuredJSONFormatter())


def setup_logging(
    log_level: str = "INFO",
    console_output: bool = True,
    log_dir: str = "data/logs",
    log_to_file: bool = True
) -> None:
    """
    Configure application-wide logging.

    Sets up:
    - Daily rotating JSON log file (all levels)
    - Separate error-only log for quick triage
    - Optional console output

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        console_output: Whether to also log to console
        log_dir: Directory for log files
        log_to_file: Whether to write JSONL files at all
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        main_handler = DailyRotatingJSONHandler(filename=str(log_path / "app.jsonl"))
        main_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(main_handler)

        error_handler = DailyRotatingJSONHandler(filename=str(log_path / "errors.jsonl"))
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(console_handler)

    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging system initialized",
        extra={
            'extra_data': {
                "log_level": log_level,
                "log_dir": log_dir if log_to_file else None,
                "console_output": console_output
            }
        }
    )
