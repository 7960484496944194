"""
Structured logging for crudkit.
Uses Python's standard logging with JSON formatting for production.

Loggers created through get_logger() accept keyword context:

    logger = get_logger(__name__)
    logger.info("Entity saved", entity="User", entity_id=42)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from crudkit.config.settings import settings


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Context keys in PROMOTED_KEYS are lifted to the top level.
    Everything else stays under "data".
    """

    PROMOTED_KEYS = ("kind", "operation", "entity")

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        data = dict(getattr(record, "extra_data", None) or {})
        for key in self.PROMOTED_KEYS:
            if data.get(key) is not None:
                log_data[key] = data.pop(key)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable colored formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")

        extra_data = dict(getattr(record, "extra_data", None) or {})
        kind = extra_data.pop("kind", None)
        tag = f" [{kind}]" if kind else ""

        message = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}{tag}: {record.getMessage()}"

        if extra_data:
            data_str = " | ".join(f"{k}={v}" for k, v in extra_data.items())
            message += f" ({data_str})"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


class StructuredLogger(logging.Logger):
    """Logger that turns keyword arguments into structured data."""

    def _log_with_data(
        self,
        level: int,
        msg: str,
        args: tuple,
        exc_info: Any = None,
        extra: dict | None = None,
        **kwargs: Any,
    ) -> None:
        if not self.isEnabledFor(level):
            return
        extra = dict(extra) if extra else {}
        extra["extra_data"] = kwargs or None
        super()._log(level, msg, args, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.INFO, msg, args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.WARNING, msg, args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.ERROR, msg, args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.CRITICAL, msg, args, **kwargs)


logging.setLoggerClass(StructuredLogger)


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger for a host application.
    Call this once at startup; the library itself never calls it.
    """
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    log_level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if settings.environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # SQL echo goes through the engine logger
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Usage:
        from crudkit.config.logging import get_logger
        logger = get_logger(__name__)
        logger.error("Repository call failed", operation="save", exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore
