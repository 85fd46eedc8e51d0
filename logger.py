"""
logger.py

Shared logging setup for catchsim.

- One named logger ("catchsim") with a single stderr handler. stdout belongs to reports.
- Modules call get_logger() instead of configuring logging themselves.
- The level comes from config.LoggingConfig.level via set_level().
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAME = "catchsim"


class SimLogger:
    """Singleton holder for the catchsim logger."""

    _instance: Optional["SimLogger"] = None
    _logger: Optional[logging.Logger] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if self._logger is None:
            logger = logging.getLogger(LOGGER_NAME)
            logger.setLevel(logging.WARNING)

            if not logger.handlers:
                handler = logging.StreamHandler(sys.stderr)
                handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
                logger.addHandler(handler)
            type(self)._logger = logger

    @classmethod
    def get_logger(cls) -> logging.Logger:
        instance = cls()
        assert instance._logger is not None
        return instance._logger


def get_logger() -> logging.Logger:
    return SimLogger.get_logger()


def set_level(level_name: str) -> None:
    """Apply a level name such as "debug" or "WARNING" to the catchsim logger."""
    level_value = logging.getLevelName(str(level_name).strip().upper())
    if not isinstance(level_value, int):
        raise ValueError(f"Unknown log level: {level_name!r}")
    get_logger().setLevel(level_value)
