"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    default_output_name,
    sanitize_filename,
    validate_lyric_lines,
    validate_output_path,
)
from .fonts import get_font, get_font_path

__all__ = [
    "setup_logging",
    "get_logger",
    "default_output_name",
    "sanitize_filename",
    "validate_lyric_lines",
    "validate_output_path",
    "get_font",
    "get_font_path",
]
