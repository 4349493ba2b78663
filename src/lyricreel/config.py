"""Configuration settings for lyricreel."""

import os
from pathlib import Path
from typing import Tuple

from .exceptions import ConfigError

# Directories
DEFAULT_OUTPUT_DIR = Path.cwd()

# Frame rates (can be overridden via environment variables)
FPS = int(os.getenv("LYRICREEL_FPS", "30"))
PREVIEW_FPS = int(os.getenv("LYRICREEL_PREVIEW_FPS", "60"))

# Resolution presets
RESOLUTION_PRESETS = {
    "720p": (1280, 720),
    "1080p": (1920, 1080),
    "1440p": (2560, 1440),
    "4k": (3840, 2160),
}
DEFAULT_RESOLUTION = "720p"

# Font settings
DEFAULT_FONT_SIZE = 48
FONT_SIZE_RANGE = (20, 100)
STROKE_WIDTH_RANGE = (0.0, 10.0)
LINE_SPACING_FACTOR = 1.5  # Distance between window slots, in font sizes

# Overlay text (title / artist) placement
OVERLAY_X = 40
OVERLAY_Y = 50
OVERLAY_GAP = 10
TITLE_SIZE_FACTOR = 0.6
SUBTITLE_SIZE_FACTOR = 0.45

# Album art
DEFAULT_ALBUM_ART_SIZE = 38  # percent of frame height
ALBUM_ART_SIZE_RANGE = (20, 60)
ALBUM_ART_MARGIN_FACTOR = 0.1  # margin relative to the art's own size

# Background processing
BLUR_RADIUS = 4
BACKGROUND_BRIGHTNESS = 0.75
BACKGROUND_OVERLAY_ALPHA = 0.3

# Highlight
PROGRESS_EPSILON = 1e-6

# Export
JPEG_QUALITY = int(os.getenv("LYRICREEL_JPEG_QUALITY", "80"))
AUDIO_BITRATE = "192k"
VIDEO_CODEC = "libx264"
AUDIO_CODEC = "aac"

# Overall export progress is split into phases (percent ranges)
LOAD_PROGRESS_RANGE = (0.0, 5.0)
FRAME_PROGRESS_RANGE = (5.0, 80.0)
ENCODE_PROGRESS_RANGE = (80.0, 100.0)

# Lyrics input
LRC_LAST_LINE_DURATION = 5.0  # used when the audio duration is unknown

# Preview transport
SEEK_STEP = 5.0


def validate_config() -> None:
    """Validate configuration values."""
    if FPS <= 0 or PREVIEW_FPS <= 0:
        raise ConfigError("Invalid FPS value")

    if not 1 <= JPEG_QUALITY <= 100:
        raise ConfigError("JPEG quality must be between 1 and 100")

    ranges = [LOAD_PROGRESS_RANGE, FRAME_PROGRESS_RANGE, ENCODE_PROGRESS_RANGE]
    for (_, prev_end), (start, end) in zip(ranges, ranges[1:]):
        if start != prev_end or end < start:
            raise ConfigError("Export progress ranges must be contiguous")


# Validate config on import
validate_config()


def parse_resolution(resolution_str: str) -> Tuple[int, int]:
    """
    Parse resolution preset name into (width, height) tuple.

    Args:
        resolution_str: Preset name (e.g., "720p", "1080p", "4k")

    Returns:
        Tuple of (width, height)

    Raises:
        ConfigError: If resolution string is not a known preset
    """
    key = resolution_str.lower().strip()
    if key in RESOLUTION_PRESETS:
        return RESOLUTION_PRESETS[key]

    raise ConfigError(
        f"Invalid resolution: {resolution_str}. "
        f"Use a preset name: {', '.join(RESOLUTION_PRESETS.keys())}"
    )
