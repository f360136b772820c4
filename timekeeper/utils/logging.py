"""Unified logging configuration for Timekeeper.

Provides consistent logging with console output on the ``timekeeper`` parent
logger and optional rotating file output under ``{workspace}/logs``.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from timekeeper.settings import settings

ROOT_LOGGER_NAME = "timekeeper"

# Default log format
LOG_FORMAT = "[%(asctime)s.%(msecs)03d][%(levelname)s][%(filename)s:%(lineno)d]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _ensure_root_logger_configured() -> logging.Logger:
    """
    Ensure the timekeeper parent logger has a formatted console handler.
    This is called automatically on module import.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    has_formatted_handler = any(
        isinstance(h, logging.StreamHandler)
        and not isinstance(h, RotatingFileHandler)
        and h.formatter is not None
        and "%(asctime)s" in (h.formatter._fmt or "")
        for h in root_logger.handlers
    )

    if not has_formatted_handler:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(console_handler)

        root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

        # Keep library output out of the host application's root logger
        root_logger.propagate = False

    return root_logger


def setup_logging(log_name: str = "timekeeper") -> logging.Logger:
    """
    Setup logging with console and rotating file output.

    Log file path pattern: {workspace}/logs/{log_name}.log

    Args:
        log_name: The name of the log file (without .log extension).

    Returns:
        Configured component logger
    """
    root_logger = _ensure_root_logger_configured()

    logger_name = f"{ROOT_LOGGER_NAME}.{log_name}" if log_name != ROOT_LOGGER_NAME else ROOT_LOGGER_NAME
    logger = logging.getLogger(logger_name)

    log_dir = _get_logs_root()
    if log_dir:
        log_file_path = os.path.join(log_dir, f"{log_name}.log")

        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(log_file_path)
            for h in root_logger.handlers
        ):
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.debug(f"Log file handler added: {log_file_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger in the timekeeper.* namespace
    """
    _ensure_root_logger_configured()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def _get_logs_root() -> Path | None:
    """Return the configured logs directory, or None if it cannot be created."""
    logs_root = settings.get_logs_root()
    if _can_create_dir(logs_root):
        return logs_root
    return None


def _can_create_dir(path: Path) -> bool:
    """Check if a directory can be created."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError:
        return False


_ensure_root_logger_configured()
