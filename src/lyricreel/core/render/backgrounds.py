"""Backdrop preparation: blurred, dimmed background and album art crop."""

from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from ...config import BACKGROUND_BRIGHTNESS, BACKGROUND_OVERLAY_ALPHA, BLUR_RADIUS
from ..style import RenderConfiguration
from .layout import album_art_rect


@dataclass
class Backdrop:
    """Static imagery reused for every frame of a session."""

    background: Image.Image
    album_art: Optional[Image.Image]


def process_background(image: Image.Image, width: int, height: int) -> Image.Image:
    """Cover-fit the image to the frame, then blur, dim and darken it."""
    img = ImageOps.fit(image.convert("RGB"), (width, height), Image.Resampling.LANCZOS)

    img = img.filter(ImageFilter.GaussianBlur(radius=BLUR_RADIUS))

    enhancer = ImageEnhance.Brightness(img)
    img = enhancer.enhance(BACKGROUND_BRIGHTNESS)

    # Translucent black layer on top
    black = Image.new("RGB", img.size, (0, 0, 0))
    return Image.blend(img, black, BACKGROUND_OVERLAY_ALPHA)


def crop_album_art(image: Image.Image, size: int) -> Image.Image:
    """Square, cover-fit crop of the artwork."""
    size = max(1, size)
    return ImageOps.fit(image.convert("RGB"), (size, size), Image.Resampling.LANCZOS)


def prepare_backdrop(image: Image.Image, configuration: RenderConfiguration) -> Backdrop:
    """Build the per-session backdrop for ``configuration``."""
    background = process_background(image, configuration.width, configuration.height)
    art = None
    if configuration.include_album_art:
        rect = album_art_rect(
            configuration.width,
            configuration.height,
            configuration.album_art_size,
            configuration.album_art_position,
        )
        art = crop_album_art(image, round(rect.width))
    return Backdrop(background=background, album_art=art)
