"""
Structured Logger implementation providing well-formatted logs.

This implementation uses Python's built-in logging module to generate structured logs
that include action name, message, source information, and additional data. Each
entry is written as a single JSON line.
"""

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from sieve.core.interfaces.logger import Logger
from sieve.core.exceptions import LoggerError


class _JsonFormatter(logging.Formatter):
    """Render structured records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = getattr(record, "structured", None)
        if log_data is None:
            log_data = {"action": "LOG", "message": record.getMessage()}

        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "action": log_data.get("action", "LOG"),
            "message": log_data.get("message", ""),
        }
        if "data" in log_data:
            entry["data"] = log_data["data"]

        exception = log_data.get("exception")
        if isinstance(exception, BaseException):
            entry["exception"] = {
                "type": type(exception).__name__,
                "message": str(exception),
                "traceback": traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                ),
            }

        return json.dumps(entry, default=str)


class StructuredLogger(Logger):
    """Structured logger writing JSON lines to the console and/or a file."""

    def __init__(
        self,
        name: str = "sieve",
        level: Optional[Union[str, int]] = None,
        log_file: Optional[str] = None,
        console_output: bool = True,
    ):
        """
        Initialize the logger.

        Loggers are shared by name. The level is only changed when ``level``
        is given (a fresh logger defaults to INFO), and ``log_file`` and
        ``console_output`` only take effect on the first construction for a
        name; later instances reuse the handlers already attached.

        Args:
            name: Logger name, shared by every StructuredLogger with the same name
            level: Minimum level as a name ("DEBUG") or a logging constant
            log_file: Optional path of a file to append entries to
            console_output: Whether to write entries to stdout

        Raises:
            LoggerError: If the level is unknown or the log file cannot be opened
        """
        self.name = name
        self.logger = logging.getLogger(name)
        if level is not None:
            self.set_level(level)
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        # Handlers are attached once per logger name
        if not self.logger.handlers:
            formatter = _JsonFormatter()
            if console_output:
                console = logging.StreamHandler(sys.stdout)
                console.setFormatter(formatter)
                self.logger.addHandler(console)
            if log_file:
                try:
                    directory = os.path.dirname(log_file)
                    if directory:
                        os.makedirs(directory, exist_ok=True)
                    file_handler = logging.FileHandler(log_file)
                except OSError as e:
                    raise LoggerError(f"Cannot open log file {log_file}: {str(e)}") from e
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)
            if not self.logger.handlers:
                self.logger.addHandler(logging.NullHandler())

    def set_level(self, level: Union[str, int]) -> None:
        """Change the minimum level for every StructuredLogger sharing this name."""
        self.logger.setLevel(self._resolve_level(level))

    @staticmethod
    def _resolve_level(level: Union[str, int]) -> int:
        if isinstance(level, int):
            return level
        resolved = logging.getLevelName(str(level).upper())
        if not isinstance(resolved, int):
            raise LoggerError(f"Unknown log level: {level}")
        return resolved

    def _log(self, level: int, log_data: Any) -> None:
        """Internal logging method."""
        if not isinstance(log_data, dict):
            log_data = {"action": "LOG", "message": str(log_data)}
        self.logger.log(level, log_data.get("message", ""), extra={"structured": log_data})

    def debug(self, log_data: Dict[str, Any]) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, log_data)

    def info(self, log_data: Dict[str, Any]) -> None:
        """Log info message."""
        self._log(logging.INFO, log_data)

    def warning(self, log_data: Dict[str, Any]) -> None:
        """Log warning message."""
        self._log(logging.WARNING, log_data)

    def error(self, log_data: Dict[str, Any]) -> None:
        """Log error message."""
        self._log(logging.ERROR, log_data)

    def critical(self, log_data: Dict[str, Any]) -> None:
        """Log critical message."""
        self._log(logging.CRITICAL, log_data)
