"""Audio and image asset loading."""

from pathlib import Path
from typing import Union

from moviepy import AudioFileClip
from PIL import Image, UnidentifiedImageError

from ..exceptions import AssetLoadError
from ..utils.logging import get_logger

logger = get_logger(__name__)


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open and fully decode an image as RGB."""
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGB")
    except (OSError, UnidentifiedImageError) as e:
        raise AssetLoadError(f"Could not load image {path}: {e}") from e


def probe_audio_duration(path: Union[str, Path]) -> float:
    """Return the audio duration in seconds."""
    if not Path(path).is_file():
        raise AssetLoadError(f"Audio file not found: {path}")
    try:
        clip = AudioFileClip(str(path))
    except Exception as e:
        raise AssetLoadError(f"Could not decode audio {path}: {e}") from e
    try:
        duration = float(clip.duration or 0.0)
    finally:
        clip.close()
    if duration <= 0:
        raise AssetLoadError(f"Audio {path} has no playable duration")
    logger.debug(f"Audio duration for {Path(path).name}: {duration:.3f}s")
    return duration
