"""Geometry helpers shared by both render surfaces."""

from dataclasses import dataclass

from ...config import (
    ALBUM_ART_MARGIN_FACTOR,
    LINE_SPACING_FACTOR,
    OVERLAY_GAP,
    OVERLAY_X,
    OVERLAY_Y,
    SUBTITLE_SIZE_FACTOR,
    TITLE_SIZE_FACTOR,
)
from ..style import AlbumArtPosition


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) box for raster backends."""
        left, top = round(self.x), round(self.y)
        return (left, top, left + round(self.width), top + round(self.height))


def album_art_rect(
    frame_width: int,
    frame_height: int,
    size_percent: int,
    position: AlbumArtPosition,
) -> Rect:
    """Square art sized as a percentage of frame height, centered vertically."""
    size = frame_height * (size_percent / 100)
    margin = size * ALBUM_ART_MARGIN_FACTOR
    if position == AlbumArtPosition.RIGHT:
        x = frame_width - size - margin
    else:
        x = margin
    y = (frame_height - size) / 2
    return Rect(x, y, size, size)


def slot_center_y(frame_height: int, offset: int, font_size: int) -> float:
    """Vertical center of the window slot at ``offset`` (-2..+2)."""
    return frame_height / 2 + offset * font_size * LINE_SPACING_FACTOR


def title_size(font_size: int) -> float:
    return font_size * TITLE_SIZE_FACTOR


def subtitle_size(font_size: int) -> float:
    return font_size * SUBTITLE_SIZE_FACTOR


def overlay_positions(font_size: int) -> tuple[tuple[float, float], tuple[float, float]]:
    """Left, vertically centered anchors of the title and the artist line."""
    title_pos = (float(OVERLAY_X), float(OVERLAY_Y))
    subtitle_pos = (float(OVERLAY_X), OVERLAY_Y + title_size(font_size) + OVERLAY_GAP)
    return title_pos, subtitle_pos
