"""Render style options: closed option sets and the configuration snapshot."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Tuple, Type, TypeVar, Union

from ..config import (
    ALBUM_ART_SIZE_RANGE,
    DEFAULT_ALBUM_ART_SIZE,
    DEFAULT_FONT_SIZE,
    DEFAULT_RESOLUTION,
    FONT_SIZE_RANGE,
    RESOLUTION_PRESETS,
    STROKE_WIDTH_RANGE,
)
from ..exceptions import ConfigError

RGB = Tuple[int, int, int]

E = TypeVar("E", bound=Enum)


def parse_color(value: Union[str, RGB]) -> RGB:
    """Parse ``#RRGGBB`` / ``#RGB`` strings (or pass through RGB tuples)."""
    if isinstance(value, tuple):
        if len(value) != 3 or not all(0 <= int(c) <= 255 for c in value):
            raise ConfigError(f"Invalid RGB color: {value!r}")
        return (int(value[0]), int(value[1]), int(value[2]))

    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ConfigError(f"Invalid color: {value!r}")
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    except ValueError:
        raise ConfigError(f"Invalid color: {value!r}")


class FontFamily(str, Enum):
    """Named font families offered for lyric text."""

    SANS = "sans-serif"
    SERIF = "serif"
    CURSIVE = "cursive"
    MONOSPACE = "monospace"
    NOTO_SANS_JP = "noto-sans-jp"
    NOTO_SANS_KR = "noto-sans-kr"


class FontWeight(IntEnum):
    LIGHT = 300
    NORMAL = 400
    MEDIUM = 500
    SEMIBOLD = 600
    BOLD = 700
    EXTRABOLD = 800
    BLACK = 900

    @property
    def is_bold(self) -> bool:
        return self >= FontWeight.SEMIBOLD


@dataclass(frozen=True)
class ThemePalette:
    """Five colors used by a color theme."""

    active: RGB
    inactive1: RGB
    inactive2: RGB
    info: RGB
    sub_info: RGB


class ColorTheme(str, Enum):
    """Named color themes."""

    LIGHT = "light"
    DARK = "dark"
    COLORIZED = "colorized"
    SUNSET = "sunset"
    OCEAN = "ocean"
    NEON = "neon"
    SAKURA = "sakura"

    @property
    def palette(self) -> ThemePalette:
        return _THEME_PALETTES[self]


def _palette(active, inactive1, inactive2, info, sub_info) -> ThemePalette:
    return ThemePalette(*(parse_color(c) for c in (active, inactive1, inactive2, info, sub_info)))


_THEME_PALETTES: Dict[ColorTheme, ThemePalette] = {
    ColorTheme.LIGHT: _palette("#FFFFFF", "#E5E7EB", "#D1D5DB", "#FFFFFF", "#E5E7EB"),
    ColorTheme.DARK: _palette("#1F2937", "#4B5563", "#6B7280", "#1F2937", "#4B5563"),
    ColorTheme.COLORIZED: _palette("#FBBF24", "#FFFFFF", "#E5E7EB", "#FBBF24", "#FFFFFF"),
    ColorTheme.SUNSET: _palette("#FDBA74", "#FED7AA", "#FFEDD5", "#FDBA74", "#FED7AA"),
    ColorTheme.OCEAN: _palette("#7DD3FC", "#BAE6FD", "#E0F2FE", "#7DD3FC", "#BAE6FD"),
    ColorTheme.NEON: _palette("#EC4899", "#F9A8D4", "#FBCFE8", "#EC4899", "#F9A8D4"),
    ColorTheme.SAKURA: _palette("#F9A8D4", "#FBCFE8", "#FCE7F3", "#F9A8D4", "#FBCFE8"),
}


class Resolution(str, Enum):
    """Target video resolutions."""

    HD = "720p"
    FULL_HD = "1080p"
    QHD = "1440p"
    UHD = "4k"

    @property
    def size(self) -> Tuple[int, int]:
        return RESOLUTION_PRESETS[self.value]


class AlbumArtPosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"


def coerce_option(enum_cls: Type[E], value: Any) -> E:
    """Convert a user-facing value (member, value or member name) to ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    candidates = [value]
    if isinstance(value, str):
        text = value.strip()
        candidates.append(text.lower())
        if text.isdigit():
            candidates.append(int(text))
        if text.upper().replace("-", "_") in enum_cls.__members__:
            return enum_cls.__members__[text.upper().replace("-", "_")]
    for candidate in candidates:
        try:
            return enum_cls(candidate)
        except ValueError:
            continue
    choices = ", ".join(str(m.value) for m in enum_cls)
    raise ConfigError(f"Invalid {enum_cls.__name__} {value!r}; choose one of: {choices}")


@dataclass(frozen=True)
class RenderConfiguration:
    """Immutable snapshot of every style choice that affects rendering.

    A style change in the surrounding UI builds a new snapshot. Two snapshots
    with equal fields compare equal and render identically.
    """

    font_family: FontFamily = FontFamily.SANS
    font_weight: FontWeight = FontWeight.BOLD
    font_size: int = DEFAULT_FONT_SIZE
    stroke_color: RGB = (0, 0, 0)
    stroke_width: float = 0.0
    color_theme: ColorTheme = ColorTheme.LIGHT
    resolution: Resolution = Resolution(DEFAULT_RESOLUTION)
    include_album_art: bool = True
    album_art_size: int = DEFAULT_ALBUM_ART_SIZE
    album_art_position: AlbumArtPosition = AlbumArtPosition.RIGHT
    # Derived, excluded from comparisons since it follows from ``color_theme``.
    palette: ThemePalette = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        for name, enum_cls in (
            ("font_family", FontFamily),
            ("font_weight", FontWeight),
            ("color_theme", ColorTheme),
            ("resolution", Resolution),
            ("album_art_position", AlbumArtPosition),
        ):
            if not isinstance(getattr(self, name), enum_cls):
                raise ConfigError(f"{name} must be a {enum_cls.__name__}")

        min_size, max_size = FONT_SIZE_RANGE
        if not min_size <= self.font_size <= max_size:
            raise ConfigError(
                f"Font size must be between {min_size} and {max_size} pixels"
            )
        min_stroke, max_stroke = STROKE_WIDTH_RANGE
        if not min_stroke <= self.stroke_width <= max_stroke:
            raise ConfigError(
                f"Stroke width must be between {min_stroke:g} and {max_stroke:g}"
            )
        min_art, max_art = ALBUM_ART_SIZE_RANGE
        if not min_art <= self.album_art_size <= max_art:
            raise ConfigError(
                f"Album art size must be between {min_art}% and {max_art}%"
            )
        object.__setattr__(self, "stroke_color", parse_color(self.stroke_color))
        object.__setattr__(self, "palette", self.color_theme.palette)

    @property
    def width(self) -> int:
        return self.resolution.size[0]

    @property
    def height(self) -> int:
        return self.resolution.size[1]

    @classmethod
    def from_options(cls, **options: Any) -> "RenderConfiguration":
        """Build a configuration from loosely typed options (CLI, JSON)."""
        coerced = dict(options)
        for name, enum_cls in (
            ("font_family", FontFamily),
            ("font_weight", FontWeight),
            ("color_theme", ColorTheme),
            ("resolution", Resolution),
            ("album_art_position", AlbumArtPosition),
        ):
            if coerced.get(name) is not None:
                coerced[name] = coerce_option(enum_cls, coerced[name])
        if coerced.get("stroke_color") is not None:
            coerced["stroke_color"] = parse_color(coerced["stroke_color"])
        return cls(**{k: v for k, v in coerced.items() if v is not None})
