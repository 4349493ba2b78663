"""Frame rasterization for exported karaoke videos."""

from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ...utils.fonts import get_font
from ..style import FontWeight, RGB
from .backgrounds import Backdrop
from .render_state import GradientFill, LineSlot, Stroke, TextOverlay, VisualState


def _scaled_mask(mask: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1.0:
        return mask
    return mask.point(lambda v: int(v * opacity))


def _text_masks(
    text: str,
    font: ImageFont.ImageFont | ImageFont.FreeTypeFont,
    anchor: str,
    stroke_width: int,
) -> Tuple[Tuple[int, int, int, int], Image.Image, Optional[Image.Image]]:
    """Render text coverage masks relative to the anchor point.

    Returns the (left, top, right, bottom) box of the masks relative to the
    anchor, the fill mask and, when ``stroke_width`` > 0, the outline mask.
    """
    left, top, right, bottom = font.getbbox(text, anchor=anchor, stroke_width=stroke_width)
    size = (max(1, right - left), max(1, bottom - top))
    origin = (-left, -top)

    fill_mask = Image.new("L", size, 0)
    ImageDraw.Draw(fill_mask).text(origin, text, fill=255, font=font, anchor=anchor)

    stroke_mask = None
    if stroke_width > 0:
        stroke_mask = Image.new("L", size, 0)
        ImageDraw.Draw(stroke_mask).text(
            origin,
            text,
            fill=255,
            font=font,
            anchor=anchor,
            stroke_width=stroke_width,
            stroke_fill=255,
        )
    return (left, top, right, bottom), fill_mask, stroke_mask


def _gradient_fill(
    size: Tuple[int, int],
    text_left: float,
    text_width: float,
    gradient: GradientFill,
) -> Image.Image:
    """Horizontal two-color fill split at the gradient boundary."""
    fill = Image.new("RGB", size, gradient.end_color)
    boundary_x = int(round(text_left + text_width * gradient.boundary))
    if boundary_x > 0:
        ImageDraw.Draw(fill).rectangle(
            [0, 0, boundary_x - 1, size[1]], fill=gradient.start_color
        )
    return fill


def draw_text(
    canvas: Image.Image,
    text: str,
    position: Tuple[float, float],
    font: ImageFont.ImageFont | ImageFont.FreeTypeFont,
    color: RGB,
    *,
    anchor: str = "mm",
    opacity: float = 1.0,
    stroke: Optional[Stroke] = None,
    gradient: Optional[GradientFill] = None,
) -> None:
    """Composite one text run onto ``canvas``.

    The outline goes underneath the fill. With a gradient the text acts as a
    mask over the two-color sweep, measured across the text's own width.
    """
    if not text or opacity <= 0:
        return
    stroke_width = int(round(stroke.width)) if stroke else 0
    box, fill_mask, stroke_mask = _text_masks(text, font, anchor, stroke_width)
    dest = (int(round(position[0] + box[0])), int(round(position[1] + box[1])))

    if stroke_mask is not None:
        outline = Image.new("RGB", stroke_mask.size, stroke.color)
        canvas.paste(outline, dest, _scaled_mask(stroke_mask, opacity))

    if gradient is not None:
        text_left, _, text_right, _ = font.getbbox(text, anchor=anchor)
        fill = _gradient_fill(
            fill_mask.size, text_left - box[0], text_right - text_left, gradient
        )
    else:
        fill = Image.new("RGB", fill_mask.size, color)
    canvas.paste(fill, dest, _scaled_mask(fill_mask, opacity))


def draw_line_slot(canvas: Image.Image, slot: LineSlot, state: VisualState) -> None:
    """Draw one lyric window slot centered horizontally."""
    if not slot.visible:
        return
    font = get_font(int(round(slot.font_size)), state.font_family, state.font_weight)
    draw_text(
        canvas,
        slot.text,
        (state.width / 2, slot.center_y),
        font,
        slot.color,
        opacity=slot.opacity,
        stroke=state.stroke,
        gradient=slot.gradient,
    )


def draw_overlay(canvas: Image.Image, overlay: TextOverlay, state: VisualState) -> None:
    """Draw title / artist text, left aligned and vertically centered."""
    weight = FontWeight.BOLD if overlay.bold else FontWeight.NORMAL
    font = get_font(int(round(overlay.font_size)), state.font_family, weight)
    draw_text(canvas, overlay.text, (overlay.x, overlay.y), font, overlay.color, anchor="lm")


def rasterize(state: VisualState, backdrop: Backdrop) -> Image.Image:
    """Rasterize a visual state on top of the session backdrop."""
    canvas = backdrop.background.copy()
    if canvas.size != (state.width, state.height):
        canvas = canvas.resize((state.width, state.height), Image.Resampling.LANCZOS)

    if state.album_art is not None and backdrop.album_art is not None:
        left, top, right, bottom = state.album_art.box
        art = backdrop.album_art
        if art.size != (right - left, bottom - top):
            art = art.resize((right - left, bottom - top), Image.Resampling.LANCZOS)
        canvas.paste(art, (left, top))

    for slot in state.slots:
        draw_line_slot(canvas, slot, state)

    draw_overlay(canvas, state.title, state)
    draw_overlay(canvas, state.subtitle, state)
    return canvas


def render_frame(state: VisualState, backdrop: Backdrop) -> np.ndarray:
    """Render a single frame as an RGB array."""
    return np.array(rasterize(state, backdrop))
