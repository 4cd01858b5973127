"""
Centralized logging configuration for QueryRelay.

Structured JSON logs go to rotating files:
- app.log   INFO and above
- error.log ERROR and above
- debug.log everything, only when LOG_LEVEL=DEBUG

A human-readable stderr handler is added when LOG_TO_CONSOLE=true.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class JsonFormatter(logging.Formatter):
    """
    Render each record as a single JSON object.
    Fields passed through extra={"extra_fields": {...}} are merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Centralized logger configuration and management.
    """

    LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "false").lower() == "true"
    CONSOLE_LEVEL = os.getenv("LOG_CONSOLE_LEVEL", "WARNING").upper()
    MAX_BYTES = 10 * 1024 * 1024  # 10MB per file
    BACKUP_COUNT = 5

    _initialized = False

    @classmethod
    def _file_handler(cls, filename: str, level: int, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            cls.LOG_DIR / filename,
            maxBytes=cls.MAX_BYTES,
            backupCount=cls.BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    @classmethod
    def setup_logging(cls) -> None:
        """
        Configure the root logger once for the whole process.
        """
        if cls._initialized:
            return

        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))
        root_logger.handlers.clear()

        json_formatter = JsonFormatter()
        root_logger.addHandler(cls._file_handler("app.log", logging.INFO, json_formatter))
        root_logger.addHandler(cls._file_handler("error.log", logging.ERROR, json_formatter))

        if cls.LOG_LEVEL == "DEBUG":
            root_logger.addHandler(cls._file_handler("debug.log", logging.DEBUG, json_formatter))

        if cls.LOG_TO_CONSOLE:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, cls.CONSOLE_LEVEL, logging.WARNING))
            console_handler.setFormatter(
                logging.Formatter(
                    fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(console_handler)

        cls._initialized = True

        logging.getLogger(__name__).info(
            "Logging system initialized",
            extra={
                "extra_fields": {
                    "log_level": cls.LOG_LEVEL,
                    "log_dir": str(cls.LOG_DIR),
                    "console_logging": cls.LOG_TO_CONSOLE,
                }
            },
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()
        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.warning("Provider failed", extra={"extra_fields": {"provider": "Rebix-Ai"}})
    """
    return LoggerConfig.get_logger(name)


LoggerConfig.setup_logging()
