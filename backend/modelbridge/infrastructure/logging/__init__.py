"""Logging configuration and utilities."""

from modelbridge.infrastructure.logging.logging_config import (
    LogContext,
    ModelBridgeLogger,
    get_log_level,
    get_logger,
    log_context,
    set_log_level,
    setup_logging,
)

__all__ = [
    "LogContext",
    "ModelBridgeLogger",
    "get_log_level",
    "get_logger",
    "log_context",
    "set_log_level",
    "setup_logging",
]
