"""Font utilities for cross-platform font loading."""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from PIL import ImageFont

from ..config import DEFAULT_FONT_SIZE
from ..core.style import FontFamily, FontWeight
from .logging import get_logger

logger = get_logger(__name__)

# Platform-specific font paths per family, in order of preference.
# Each entry maps a family to (regular, bold) candidate lists.
FONT_PATHS: Dict[str, Dict[FontFamily, tuple]] = {
    "darwin": {
        FontFamily.SANS: (
            ["/System/Library/Fonts/Helvetica.ttc", "/Library/Fonts/Arial.ttf"],
            ["/System/Library/Fonts/Supplemental/Arial Bold.ttf", "/Library/Fonts/Arial Bold.ttf"],
        ),
        FontFamily.SERIF: (
            ["/System/Library/Fonts/Supplemental/Times New Roman.ttf", "/System/Library/Fonts/Times.ttc"],
            ["/System/Library/Fonts/Supplemental/Times New Roman Bold.ttf"],
        ),
        FontFamily.CURSIVE: (
            ["/System/Library/Fonts/Supplemental/Comic Sans MS.ttf", "/System/Library/Fonts/Supplemental/Brush Script.ttf"],
            ["/System/Library/Fonts/Supplemental/Comic Sans MS Bold.ttf"],
        ),
        FontFamily.MONOSPACE: (
            ["/System/Library/Fonts/Menlo.ttc", "/System/Library/Fonts/Supplemental/Courier New.ttf"],
            ["/System/Library/Fonts/Supplemental/Courier New Bold.ttf"],
        ),
        FontFamily.NOTO_SANS_JP: (
            ["/System/Library/Fonts/ヒラギノ角ゴシック W3.ttc", "/Library/Fonts/NotoSansJP-Regular.otf"],
            ["/System/Library/Fonts/ヒラギノ角ゴシック W6.ttc", "/Library/Fonts/NotoSansJP-Bold.otf"],
        ),
        FontFamily.NOTO_SANS_KR: (
            ["/System/Library/Fonts/AppleSDGothicNeo.ttc", "/Library/Fonts/NotoSansKR-Regular.otf"],
            ["/Library/Fonts/NotoSansKR-Bold.otf"],
        ),
    },
    "linux": {
        FontFamily.SANS: (
            ["/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf", "/usr/share/fonts/TTF/DejaVuSans.ttf"],
            ["/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf", "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf"],
        ),
        FontFamily.SERIF: (
            ["/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf", "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf"],
            ["/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf", "/usr/share/fonts/truetype/liberation/LiberationSerif-Bold.ttf"],
        ),
        FontFamily.CURSIVE: (
            ["/usr/share/fonts/truetype/comic-neue/ComicNeue-Regular.ttf", "/usr/share/fonts/truetype/freefont/FreeSerifItalic.ttf"],
            ["/usr/share/fonts/truetype/comic-neue/ComicNeue-Bold.ttf", "/usr/share/fonts/truetype/freefont/FreeSerifBoldItalic.ttf"],
        ),
        FontFamily.MONOSPACE: (
            ["/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf"],
            ["/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf", "/usr/share/fonts/truetype/liberation/LiberationMono-Bold.ttf"],
        ),
        FontFamily.NOTO_SANS_JP: (
            ["/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc", "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc"],
            ["/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc", "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc"],
        ),
        FontFamily.NOTO_SANS_KR: (
            ["/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc", "/usr/share/fonts/truetype/nanum/NanumGothic.ttf"],
            ["/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc", "/usr/share/fonts/truetype/nanum/NanumGothicBold.ttf"],
        ),
    },
    "win32": {
        FontFamily.SANS: (["C:/Windows/Fonts/arial.ttf", "C:/Windows/Fonts/segoeui.ttf"], ["C:/Windows/Fonts/arialbd.ttf", "C:/Windows/Fonts/segoeuib.ttf"]),
        FontFamily.SERIF: (["C:/Windows/Fonts/times.ttf"], ["C:/Windows/Fonts/timesbd.ttf"]),
        FontFamily.CURSIVE: (["C:/Windows/Fonts/comic.ttf"], ["C:/Windows/Fonts/comicbd.ttf"]),
        FontFamily.MONOSPACE: (["C:/Windows/Fonts/consola.ttf", "C:/Windows/Fonts/cour.ttf"], ["C:/Windows/Fonts/consolab.ttf", "C:/Windows/Fonts/courbd.ttf"]),
        FontFamily.NOTO_SANS_JP: (["C:/Windows/Fonts/YuGothR.ttc", "C:/Windows/Fonts/meiryo.ttc"], ["C:/Windows/Fonts/YuGothB.ttc", "C:/Windows/Fonts/meiryob.ttc"]),
        FontFamily.NOTO_SANS_KR: (["C:/Windows/Fonts/malgun.ttf"], ["C:/Windows/Fonts/malgunbd.ttf"]),
    },
}


def _get_platform_fonts() -> Dict[FontFamily, tuple]:
    """Get font paths for the current platform."""
    platform = sys.platform
    if platform.startswith("linux"):
        platform = "linux"
    return FONT_PATHS.get(platform, FONT_PATHS["linux"])


def _candidates(family: FontFamily, bold: bool) -> List[str]:
    """Candidate files: requested weight first, then the other weight, then sans."""
    regular, heavy = _get_platform_fonts()[family]
    ordered = (heavy + regular) if bold else (regular + heavy)
    if family != FontFamily.SANS:
        ordered = ordered + _candidates(FontFamily.SANS, bold)
    return ordered


def get_font_path(
    family: FontFamily = FontFamily.SANS, weight: FontWeight = FontWeight.BOLD
) -> Optional[str]:
    """
    Get the path to the font file that will be used for rendering.

    Returns:
        Path to font file, or None if only the default font is available
    """
    for path in _candidates(family, weight.is_bold):
        if Path(path).exists():
            return path
    return None


@lru_cache(maxsize=64)
def get_font(
    size: int = DEFAULT_FONT_SIZE,
    family: FontFamily = FontFamily.SANS,
    weight: FontWeight = FontWeight.BOLD,
) -> ImageFont.FreeTypeFont:
    """
    Get a font for rendering, with cross-platform support.

    Args:
        size: Font size in pixels
        family: Font family option
        weight: Font weight option; 600 and above pick a bold face

    Returns:
        PIL ImageFont object
    """
    for path in _candidates(family, weight.is_bold):
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue

    logger.warning(f"Could not load a {family.value} font, using PIL default")
    return ImageFont.load_default(size)
