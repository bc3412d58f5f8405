"""
Infrastructure Module - Cross-cutting components.

Provides:
- logging: Logging configuration and utilities
"""

from modelbridge.infrastructure.logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]
