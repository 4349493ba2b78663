"""Core data model, style options and input loading."""

from .models import LyricLine
from .style import (
    AlbumArtPosition,
    ColorTheme,
    FontFamily,
    FontWeight,
    RenderConfiguration,
    Resolution,
)

__all__ = [
    "LyricLine",
    "AlbumArtPosition",
    "ColorTheme",
    "FontFamily",
    "FontWeight",
    "RenderConfiguration",
    "Resolution",
]
