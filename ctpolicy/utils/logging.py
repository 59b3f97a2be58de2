"""
Logging utilities for the CT enforcement policy tool.

This module provides logging configuration and helper functions.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = 'ctpolicy'

LOG_FORMAT = '%(asctime)s - %(name)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Set up logging for the application.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file path to write logs to
        verbose: Whether to enable verbose logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # Policy output goes to stdout, so keep the log on stderr
    console = Console(stderr=True)
    console_handler = RichHandler(
        console=console,
        show_path=verbose,
        show_time=True,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(logging.DEBUG if verbose else level)
    console_handler.setFormatter(logging.Formatter('%(message)s', datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        Application logger
    """
    return logging.getLogger(LOGGER_NAME)


def log_lookup(
    logger: logging.Logger,
    key: str,
    value: Optional[str],
) -> None:
    """Log a single property lookup.

    Args:
        logger: Logger to use
        key: Property key that was looked up
        value: Value returned by the store, or None when absent
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    if value is None:
        logger.debug(f"  {key}: <absent>")
    else:
        logger.debug(f"  {key} = {value!r}")
