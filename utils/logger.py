"""JSON file logging plus console progress output for the collector."""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

CONSOLE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Fields passed as ``extra={"extra_fields": {...}}`` are merged into the
    top level of the emitted object.
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
    """Process-wide logger setup, configured from LOG_DIR, LOG_LEVEL and LOG_TO_CONSOLE."""

    LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "true").lower() == "true"
    MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
    BACKUP_COUNT = 3

    _initialized = False

    @classmethod
    def file_handlers(cls) -> list[tuple[str, int]]:
        """(filename, level) pairs for the JSON log files under LOG_DIR."""
        files = [("app.log", logging.INFO), ("error.log", logging.ERROR)]
        if cls.LOG_LEVEL == "DEBUG":
            # raw progress bodies are logged at DEBUG
            files.append(("debug.log", logging.DEBUG))
        return files

    @classmethod
    def setup_logging(cls) -> None:
        """Attach handlers to the root logger once per process."""
        if cls._initialized:
            return

        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))
        root_logger.handlers.clear()

        json_formatter = JsonFormatter()
        for filename, level in cls.file_handlers():
            handler = logging.handlers.RotatingFileHandler(
                cls.LOG_DIR / filename,
                maxBytes=cls.MAX_BYTES,
                backupCount=cls.BACKUP_COUNT,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(json_formatter)
            root_logger.addHandler(handler)

        if cls.LOG_TO_CONSOLE:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
            root_logger.addHandler(console_handler)

        # httpx logs every request at INFO; keep it out of the console
        logging.getLogger("httpx").setLevel(logging.WARNING)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()
        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        Configured logger instance

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Snapshot ready", extra={"extra_fields": {"job_id": "s_123"}})
    """
    return LoggerConfig.get_logger(name)
