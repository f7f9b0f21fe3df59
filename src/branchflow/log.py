"""Logging configuration for branchflow."""

import logging
import os
from typing import Optional

from rich.logging import RichHandler

LOG_LEVEL_ENV = "BRANCHFLOW_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"branchflow.{name}")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for branchflow.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR). Falls back to
            the BRANCHFLOW_LOG_LEVEL environment variable, then WARNING.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logger = logging.getLogger("branchflow")
    logger.setLevel(getattr(logging, level, logging.WARNING))

    # Repeated CLI invocations in one process must not stack handlers
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        console_handler = RichHandler(
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            show_time=False,
            show_path=False,
        )
        logger.addHandler(console_handler)

    logger.propagate = False
