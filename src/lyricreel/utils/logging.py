"""Logging configuration for lyricreel."""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..exceptions import ConfigError

# Libraries that log per frame or per chunk during an export
NOISY_LOGGERS = ("moviepy", "proglog", "imageio", "imageio_ffmpeg", "PIL")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level: {level}")
    return value


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Configure the ``lyricreel`` logger.

    The console gets ``level``. A log file always records DEBUG with
    timestamps, so a failed export can be diagnosed from the file alone.
    """
    console_level = _parse_level(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("lyricreel")
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(DETAILED_FORMAT if verbose else CONSOLE_FORMAT)
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


def get_logger(name: str = "lyricreel") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
