"""Validation utilities."""

import re
from pathlib import Path
from typing import Sequence

from ..exceptions import ValidationError


def validate_output_path(path: str) -> Path:
    """Validate and normalize output path."""
    output_path = Path(path)

    # Check if parent directory exists or can be created
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Cannot create output directory: {e}")

    if output_path.suffix.lower() not in [".mp4", ".mov"]:
        raise ValidationError("Output file must have .mp4 or .mov extension")

    return output_path


def validate_lyric_lines(lines: Sequence) -> None:
    """Validate that lines are sorted, positive-length and non-overlapping."""
    prev = None
    for idx, line in enumerate(lines):
        start = line.start_time
        end = line.end_time
        if end <= start:
            raise ValidationError(
                f"Line {idx + 1} has end at or before start ({start:.2f}s -> {end:.2f}s)"
            )
        if prev is not None:
            if start < prev.start_time:
                raise ValidationError(
                    f"Line {idx + 1} starts before previous line ({start:.2f}s < {prev.start_time:.2f}s)"
                )
            if start < prev.end_time:
                raise ValidationError(
                    f"Line {idx + 1} overlaps previous line ({start:.2f}s < {prev.end_time:.2f}s)"
                )
        prev = line


def sanitize_filename(name: str) -> str:
    """Remove invalid characters from filename."""
    sanitized = re.sub(r'[<>:"/\\|?*]', "", name)
    # Limit length
    return sanitized[:150].strip()


def default_output_name(title: str, artist: str) -> str:
    """File name for an exported video: ``{title} - {artist} (Lyrics).mp4``."""
    return sanitize_filename(f"{title} - {artist} (Lyrics)") + ".mp4"
