"""Pure, time-indexed visual state shared by the live preview and the export."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..style import FontFamily, FontWeight, RenderConfiguration, RGB
from .layout import (
    Rect,
    album_art_rect,
    overlay_positions,
    slot_center_y,
    subtitle_size,
    title_size,
)
from .lyric_timeline import WINDOW_OFFSETS, LyricTimeline
from .progress import highlight_progress


class SlotStyle(str, Enum):
    CURRENT = "current"
    NEAR = "near"
    FAR = "far"


@dataclass(frozen=True)
class SlotAppearance:
    style: SlotStyle
    opacity: float
    scale: float
    # Which palette entry colors the slot
    color_role: str


# Past lines use inactive2, upcoming lines inactive1.
SLOT_APPEARANCES = {
    -2: SlotAppearance(SlotStyle.FAR, 0.2, 0.9, "inactive2"),
    -1: SlotAppearance(SlotStyle.NEAR, 0.5, 0.95, "inactive2"),
    0: SlotAppearance(SlotStyle.CURRENT, 1.0, 1.0, "active"),
    1: SlotAppearance(SlotStyle.NEAR, 0.8, 0.95, "inactive1"),
    2: SlotAppearance(SlotStyle.FAR, 0.4, 0.9, "inactive1"),
}


@dataclass(frozen=True)
class GradientFill:
    """Left-to-right two-color sweep clipped to the text.

    Text left of ``boundary`` (a 0..1 fraction of the text width) is drawn in
    ``start_color``, the rest in ``end_color``.
    """

    start_color: RGB
    end_color: RGB
    boundary: float


@dataclass(frozen=True)
class LineSlot:
    offset: int
    text: str
    style: SlotStyle
    opacity: float
    scale: float
    color: RGB
    font_size: float
    center_y: float
    gradient: Optional[GradientFill] = None

    @property
    def visible(self) -> bool:
        return bool(self.text) and self.opacity > 0


@dataclass(frozen=True)
class TextOverlay:
    text: str
    color: RGB
    font_size: float
    x: float
    y: float
    bold: bool


@dataclass(frozen=True)
class Stroke:
    color: RGB
    width: float


@dataclass(frozen=True)
class VisualState:
    """Everything needed to draw one instant, independent of the surface."""

    time: float
    width: int
    height: int
    font_family: FontFamily
    font_weight: FontWeight
    slots: Tuple[LineSlot, ...]
    title: TextOverlay
    subtitle: TextOverlay
    album_art: Optional[Rect]
    stroke: Optional[Stroke]
    progress: float

    @property
    def current(self) -> LineSlot:
        return self.slots[WINDOW_OFFSETS.index(0)]


def compute_visual_state(
    time: float,
    timeline: LyricTimeline,
    configuration: RenderConfiguration,
    title: str = "",
    artist: str = "",
) -> VisualState:
    """Resolve the full visual state at ``time``.

    Pure function of its inputs: the same arguments always give an equal
    ``VisualState``.
    """
    palette = configuration.palette
    font_size = configuration.font_size
    window = timeline.resolve_window(time)

    current_line = window[WINDOW_OFFSETS.index(0)]
    progress = 0.0 if current_line.is_sentinel else highlight_progress(current_line, time)

    slots = []
    for offset, line in zip(WINDOW_OFFSETS, window):
        appearance = SLOT_APPEARANCES[offset]
        gradient = None
        if appearance.style == SlotStyle.CURRENT and not line.is_sentinel:
            gradient = GradientFill(palette.active, palette.inactive1, progress)
        slots.append(
            LineSlot(
                offset=offset,
                text=line.text,
                style=appearance.style,
                opacity=appearance.opacity if line.text else 0.0,
                scale=appearance.scale,
                color=getattr(palette, appearance.color_role),
                font_size=font_size * appearance.scale,
                center_y=slot_center_y(configuration.height, offset, font_size),
                gradient=gradient,
            )
        )

    title_pos, subtitle_pos = overlay_positions(font_size)
    title_overlay = TextOverlay(
        title, palette.info, title_size(font_size), *title_pos, bold=True
    )
    subtitle_overlay = TextOverlay(
        artist, palette.sub_info, subtitle_size(font_size), *subtitle_pos, bold=False
    )

    art = None
    if configuration.include_album_art:
        art = album_art_rect(
            configuration.width,
            configuration.height,
            configuration.album_art_size,
            configuration.album_art_position,
        )

    stroke = None
    if configuration.stroke_width > 0:
        stroke = Stroke(configuration.stroke_color, configuration.stroke_width)

    return VisualState(
        time=time,
        width=configuration.width,
        height=configuration.height,
        font_family=configuration.font_family,
        font_weight=configuration.font_weight,
        slots=tuple(slots),
        title=title_overlay,
        subtitle=subtitle_overlay,
        album_art=art,
        stroke=stroke,
        progress=progress,
    )
