"""
Global logging configuration for ModelBridge.

Features:
- Log level control via MODELBRIDGE_LOG_LEVEL or setup_logging()
- Human-readable console output
- Optional structured JSON file output with size-based rotation
- Context propagation (translation pair, bridge id, domain type)
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGS_DIR = Path(os.getenv("MODELBRIDGE_LOG_DIR", Path.cwd() / "logs"))
MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB
BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = os.getenv("MODELBRIDGE_LOG_LEVEL", "INFO")

_current_log_level = DEFAULT_LOG_LEVEL.upper()


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if getattr(record, "context", None):
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "") if self.use_color else ""
        reset = self.RESET if self.use_color else ""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        base_msg = f"[{timestamp}] {color}{record.levelname:8}{reset} | {record.name:36} | {record.getMessage()}"

        if getattr(record, "context", None):
            base_msg += f" | context={json.dumps(record.context, ensure_ascii=False, default=str)}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        return base_msg


class LogContext:
    """
    Context manager for adding context to logs.

    Backed by a ContextVar so concurrent asyncio tasks each see their own context.
    """

    _current_context: ContextVar[dict[str, Any] | None] = ContextVar("modelbridge_log_context", default=None)

    def __init__(self, **kwargs: Any):
        self._new_context = kwargs
        self._token: Token | None = None

    def __enter__(self) -> "LogContext":
        self._token = LogContext._current_context.set({**self.get_context(), **self._new_context})
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            LogContext._current_context.reset(self._token)
            self._token = None

    @classmethod
    def get_context(cls) -> dict[str, Any]:
        return dict(cls._current_context.get() or {})


class ModelBridgeLogger(logging.Logger):
    """Logger with structured context support."""

    def _log_with_context(
        self,
        level: int,
        msg: str,
        args: tuple,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if not self.isEnabledFor(level):
            return
        extra = kwargs.get("extra", {})
        extra["context"] = {**LogContext.get_context(), **(context or {})}
        kwargs["extra"] = extra
        super()._log(level, msg, args, **kwargs)

    def info_with_context(self, msg: str, context: dict[str, Any] | None = None, *args: Any, **kwargs: Any) -> None:
        self._log_with_context(logging.INFO, msg, args, context, **kwargs)

    def error_with_context(self, msg: str, context: dict[str, Any] | None = None, *args: Any, **kwargs: Any) -> None:
        self._log_with_context(logging.ERROR, msg, args, context, **kwargs)

    def warning_with_context(self, msg: str, context: dict[str, Any] | None = None, *args: Any, **kwargs: Any) -> None:
        self._log_with_context(logging.WARNING, msg, args, context, **kwargs)

    def debug_with_context(self, msg: str, context: dict[str, Any] | None = None, *args: Any, **kwargs: Any) -> None:
        self._log_with_context(logging.DEBUG, msg, args, context, **kwargs)


logging.setLoggerClass(ModelBridgeLogger)


def setup_logging(
    level: str | None = None,
    enable_file: bool = False,
    enable_console: bool = True,
    log_name: str = "modelbridge",
) -> None:
    """
    Configure the root logger.

    Library code never calls this; applications embedding ModelBridge do.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_file: Write structured JSON logs to LOGS_DIR/<log_name>.log
        enable_console: Write human-readable logs to stdout
        log_name: Base name of the log file
    """
    global _current_log_level

    if level:
        _current_log_level = level.upper()

    numeric_level = getattr(logging, _current_log_level, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(HumanFormatter(use_color=sys.stdout.isatty()))
        console_handler.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

    if enable_file:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOGS_DIR / f"{log_name}.log",
            maxBytes=MAX_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        file_handler.setLevel(numeric_level)
        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> ModelBridgeLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        ModelBridgeLogger instance
    """
    return logging.getLogger(name)  # type: ignore


def set_log_level(level: str) -> None:
    """Dynamically set the log level of the root logger and its handlers."""
    global _current_log_level
    _current_log_level = level.upper()

    numeric_level = getattr(logging, _current_log_level, logging.INFO)
    logging.getLogger().setLevel(numeric_level)

    for handler in logging.getLogger().handlers:
        handler.setLevel(numeric_level)


def get_log_level() -> str:
    return _current_log_level


@contextmanager
def log_context(**kwargs: Any):
    """
    Attach context to every log record emitted inside the block.

    Usage:
        with log_context(source="stripe", target="restaurant"):
            logger.info_with_context("Translating")
    """
    with LogContext(**kwargs):
        yield
