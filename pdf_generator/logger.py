"""
Logging configuration for the PDF generator.

Concurrent renders interleave in the journal, so workflow messages carry a
short request id prefix that ties every line back to one request.
"""

import json
import logging
import sys
import uuid
from typing import Optional


class RequestLogger:
    """
    Logger that tags every message with a request id.

    Wraps a standard library logger; the request id is shortened to eight
    characters to keep lines readable.
    """

    def __init__(self, name: str, request_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.request_id = request_id

    def _format_message(self, message: str) -> str:
        if self.request_id:
            return f"[req:{self.request_id[:8]}] {message}"
        return message

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message), **kwargs)


def new_request_id() -> str:
    """Generate an identifier for one inbound request."""
    return uuid.uuid4().hex


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter: logging.Formatter
    if format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    # stdout lands in journald under systemd; replace whatever was installed
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)
    root_logger.setLevel(log_level)


def get_logger(name: str, request_id: Optional[str] = None) -> RequestLogger:
    """
    Get a request-scoped logger instance.

    Args:
        name: Logger name (usually __name__)
        request_id: Optional request identifier for correlation

    Returns:
        RequestLogger instance
    """
    return RequestLogger(name, request_id)
