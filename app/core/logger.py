"""
Centralized logging configuration for the Product Catalog Service.

Provides a structured logging interface with:
- Correlation IDs taken from the current request context
- Console (coloured) or JSON output
- Optional JSON file output
- Error metadata extracted from exceptions
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from app.core.config import config
from app.middleware.correlation_id import get_correlation_id


class StructuredLogger:
    """
    Logger with structured metadata and correlation ID support.
    Wraps the root Python logger so third-party output shares the same handlers.
    """

    def __init__(self, service_name: str, environment: str):
        self.service_name = service_name
        self.environment = environment
        self.log_level = config.log_level.upper()
        self.log_format = config.log_format
        self._setup_logging()

    def _setup_logging(self):
        """Configure Python logging with handlers"""
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(getattr(logging, self.log_level))

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, self.log_level))

            if self.log_format == "json":
                console_handler.setFormatter(JSONFormatter(self.service_name))
            else:
                console_handler.setFormatter(ConsoleFormatter())

            root.addHandler(console_handler)

        if config.log_to_file:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setLevel(getattr(logging, self.log_level))
            file_handler.setFormatter(JSONFormatter(self.service_name))  # Always JSON for files

            root.addHandler(file_handler)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Build structured log entry"""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "service": self.service_name,
            "environment": self.environment,
            "message": message,
            "correlationId": get_correlation_id(),
        }

        if user_id:
            entry["userId"] = user_id

        if metadata:
            entry["metadata"] = metadata

        return entry

    def _log(
        self,
        level: str,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        entry = self._build_log_entry(level, message, user_id, metadata)
        log_method = getattr(logging.getLogger(), level.lower())

        if self.log_format == "json":
            log_method(json.dumps(entry, default=str))
        else:
            # 'message' clashes with the LogRecord attribute of the same name
            extra_data = {k: v for k, v in entry.items() if k != "message"}
            log_method(message, extra=extra_data)

    def debug(self, message: str, user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        """Debug level logging"""
        self._log("DEBUG", message, user_id, metadata)

    def info(self, message: str, user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        """Info level logging"""
        self._log("INFO", message, user_id, metadata)

    def warning(self, message: str, user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        """Warning level logging"""
        self._log("WARNING", message, user_id, metadata)

    def error(
        self,
        message: str,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Error level logging"""
        if metadata is None:
            metadata = {}

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log("ERROR", message, user_id, metadata)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    RESERVED = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        correlation_id = getattr(record, "correlationId", None)
        suffix = f" [{correlation_id}]" if correlation_id else ""

        return f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}{suffix}"


# Create and export the logger instance
logger = StructuredLogger(config.service_name, config.environment)
