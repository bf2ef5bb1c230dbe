"""
Structured logging for the dump pipeline.

Provides JSON-formatted or coloured console logging plus a context-carrying
logger wrapper, so every record emitted while a table is extracted can carry
the table name.

Usage:
    from utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/snakedump/dump.log")

    logger = get_logger(__name__)
    logger.info("Table extracted", extra={"table_name": "customers", "rows": 120})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
