"""
Logging setup for applications embedding the school bus core.

Library modules only create their own loggers; nothing here runs on import.
"""

import logging
from typing import Optional

from schoolbus.config import config


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Apply a basic root logging configuration from the core config."""
    level_name = (level or config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=fmt or config.LOG_FORMAT,
    )
    logging.getLogger(__name__).debug(f"Logging configured at {level_name}")
