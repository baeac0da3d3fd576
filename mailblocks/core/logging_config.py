"""Centralized logging configuration for the application.

Provides structured logging with separate files for:
- info.log: General application logs (INFO level and above)
- error.log: Error logs only (ERROR level and above)
"""

import logging
import sys

from mailblocks.core.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure application logging with file and console handlers.

    Creates separate log files for info and error levels when
    ``settings.log_to_file`` is enabled.

    Args:
        settings: Application settings. If None, uses global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.log_level == "DEBUG" else logging.INFO

    # Create formatters
    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    simple_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    if settings.log_to_file:
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        # File handler for INFO and above (info.log)
        info_handler = logging.FileHandler(log_dir / "info.log", encoding="utf-8")
        info_handler.setLevel(logging.INFO)
        info_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(info_handler)

        # File handler for ERROR and above (error.log)
        error_handler = logging.FileHandler(log_dir / "error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(error_handler)

    # Console handler for development
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    return root_logger
