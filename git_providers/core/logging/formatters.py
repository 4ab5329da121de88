"""
Log formatters for console output.

This module provides a text formatter and a JSON formatter; both append any
``extra`` fields passed to the logging call, such as the repository a facade
was operating on.
"""

from datetime import datetime
import json
import logging
from typing import Any

from ..exceptions import GitProviderError

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class TextFormatter(logging.Formatter):
    """Human readable formatter with trailing key=value context."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        """Initialize the text formatter.

        Args:
            fmt: Log format string.
            datefmt: Date format string.
        """
        if fmt is None:
            fmt = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra = _extra_fields(record)
        if extra:
            context_str = " | ".join(f"{key}={value}" for key, value in extra.items())
            return f"{message} | {context_str}"
        return message


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_exception: bool = True):
        super().__init__()
        self.include_exception = include_exception

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON formatted log message.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_exception and record.exc_info:
            error = record.exc_info[1]
            log_data["exception"] = {
                "type": type(error).__name__ if error else None,
                "message": getattr(error, "message", None) or (str(error) if error else None),
                "traceback": self.formatException(record.exc_info),
            }
            if isinstance(error, GitProviderError):
                log_data["exception"]["error_code"] = error.error_code
                log_data["exception"]["details"] = error.details

        for key, value in _extra_fields(record).items():
            log_data.setdefault(key, value)

        return json.dumps(log_data, default=str, ensure_ascii=False)
