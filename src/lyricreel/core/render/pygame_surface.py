"""Pygame host for the live preview: audio, window surface and event loop."""

import os
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

# Set environment variable to hide pygame welcome message
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import pygame  # noqa: E402
from PIL import Image  # noqa: E402

from ...config import SEEK_STEP  # noqa: E402
from ...utils.fonts import get_font_path  # noqa: E402
from ...utils.logging import get_logger  # noqa: E402
from ..style import FontFamily, FontWeight, RenderConfiguration  # noqa: E402
from .backgrounds import Backdrop  # noqa: E402
from .lyric_timeline import LyricTimeline  # noqa: E402
from .preview import PreviewDriver  # noqa: E402
from .render_state import LineSlot, TextOverlay, VisualState  # noqa: E402

logger = get_logger(__name__)

_STROKE_DIRECTIONS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]


class PygameAudioContext:
    """Owns ``pygame.mixer`` for one preview session."""

    def __init__(self):
        self._owned = False
        if not pygame.mixer.get_init():
            pygame.mixer.init()
            self._owned = True

    def close(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.stop()
            if self._owned:
                pygame.mixer.quit()


class PygameMediaPlayer:
    """Streams one audio file through ``pygame.mixer.music``.

    ``get_pos()`` restarts from zero on every ``play()``, so the start offset
    of the last (re)start is tracked separately.
    """

    def __init__(self, audio_path: Union[str, Path], duration: float):
        self.audio_path = str(audio_path)
        self._duration = duration
        self._offset = 0.0
        self._loaded = False
        self._started = False
        self._paused = False

    def _load(self) -> None:
        if not self._loaded:
            pygame.mixer.music.load(self.audio_path)
            self._loaded = True

    def play(self) -> None:
        self._load()
        if self._started and self._paused:
            pygame.mixer.music.unpause()
        else:
            pygame.mixer.music.play(start=self._offset)
            self._started = True
        self._paused = False

    def pause(self) -> None:
        if self._started:
            self._offset = self.position()
            pygame.mixer.music.pause()
        self._paused = True

    def seek(self, seconds: float) -> None:
        self._offset = seconds
        if not self._started:
            return
        # A stream that ran to its end stays silent at the new position
        if self.is_finished():
            self._paused = True
        pygame.mixer.music.play(start=seconds)
        if self._paused:
            pygame.mixer.music.pause()

    def position(self) -> float:
        if not self._started:
            return self._offset
        if self._paused:
            return self._offset
        elapsed = pygame.mixer.music.get_pos()
        if elapsed < 0:
            return self._offset
        return min(self._duration, self._offset + elapsed / 1000.0)

    def duration(self) -> float:
        return self._duration

    def is_finished(self) -> bool:
        return self._started and not self._paused and not pygame.mixer.music.get_busy()


def _to_surface(image: Image.Image) -> pygame.Surface:
    image = image.convert("RGB")
    return pygame.image.frombytes(image.tobytes(), image.size, "RGB")


class PygameSurface:
    """Draws a ``VisualState`` into a pygame window."""

    def __init__(self, screen: pygame.Surface, backdrop: Backdrop):
        self.screen = screen
        self.background = _to_surface(backdrop.background)
        if self.background.get_size() != screen.get_size():
            self.background = pygame.transform.smoothscale(self.background, screen.get_size())
        self.album_art = _to_surface(backdrop.album_art) if backdrop.album_art else None
        self._fonts: Dict[Tuple[int, FontFamily, FontWeight], pygame.font.Font] = {}

    def _album_art(self, size: Tuple[int, int]) -> pygame.Surface:
        if self.album_art.get_size() != size:
            self.album_art = pygame.transform.smoothscale(self.album_art, size)
        return self.album_art

    def _font(self, size: float, family: FontFamily, weight: FontWeight) -> pygame.font.Font:
        key = (max(1, int(round(size))), family, weight)
        if key not in self._fonts:
            path = get_font_path(family, weight)
            try:
                self._fonts[key] = pygame.font.Font(path, key[0])
            except (OSError, pygame.error) as e:
                logger.warning(f"Could not load font {path}: {e}; using pygame default")
                self._fonts[key] = pygame.font.Font(None, key[0])
        return self._fonts[key]

    def _blit_text(
        self,
        text_surface: pygame.Surface,
        center: Tuple[float, float],
        opacity: float,
        area: Optional[pygame.Rect] = None,
    ) -> pygame.Rect:
        rect = text_surface.get_rect(center=(int(center[0]), int(center[1])))
        if opacity < 1.0:
            text_surface.set_alpha(int(255 * opacity))
        self.screen.blit(text_surface, rect, area)
        return rect

    def _draw_stroke(
        self, font: pygame.font.Font, text: str, center: Tuple[float, float], state: VisualState, opacity: float
    ) -> None:
        width = int(round(state.stroke.width))
        if width <= 0:
            return
        outline = font.render(text, True, state.stroke.color)
        for dx, dy in _STROKE_DIRECTIONS:
            self._blit_text(outline, (center[0] + dx * width, center[1] + dy * width), opacity)

    def draw_slot(self, slot: LineSlot, state: VisualState) -> None:
        if not slot.visible:
            return
        font = self._font(slot.font_size, state.font_family, state.font_weight)
        center = (state.width / 2, slot.center_y)
        if state.stroke is not None:
            self._draw_stroke(font, slot.text, center, state, slot.opacity)

        if slot.gradient is None:
            self._blit_text(font.render(slot.text, True, slot.color), center, slot.opacity)
            return

        # Two passes: full line in the upcoming color, then the sung part clipped on top
        base = font.render(slot.text, True, slot.gradient.end_color)
        rect = self._blit_text(base, center, slot.opacity)
        sung_width = int(round(rect.width * slot.gradient.boundary))
        if sung_width > 0:
            sung = font.render(slot.text, True, slot.gradient.start_color)
            area = pygame.Rect(0, 0, sung_width, rect.height)
            self._blit_text(sung, center, slot.opacity, area)

    def draw_overlay(self, overlay: TextOverlay, state: VisualState) -> None:
        if not overlay.text:
            return
        weight = FontWeight.BOLD if overlay.bold else FontWeight.NORMAL
        font = self._font(overlay.font_size, state.font_family, weight)
        text_surface = font.render(overlay.text, True, overlay.color)
        rect = text_surface.get_rect(midleft=(int(overlay.x), int(overlay.y)))
        self.screen.blit(text_surface, rect)

    def draw(self, state: VisualState) -> None:
        self.screen.blit(self.background, (0, 0))
        if state.album_art is not None and self.album_art is not None:
            left, top, right, bottom = state.album_art.box
            self.screen.blit(self._album_art((right - left, bottom - top)), (left, top))
        for slot in state.slots:
            self.draw_slot(slot, state)
        self.draw_overlay(state.title, state)
        self.draw_overlay(state.subtitle, state)
        pygame.display.flip()


def _handle_events(driver: PreviewDriver) -> None:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            driver.stop()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                driver.stop()
            elif event.key == pygame.K_SPACE:
                driver.toggle()
            elif event.key == pygame.K_LEFT:
                driver.seek(driver.current_time - SEEK_STEP)
            elif event.key == pygame.K_RIGHT:
                driver.seek(driver.current_time + SEEK_STEP)
            elif event.key == pygame.K_HOME:
                driver.restart()


def run_preview(
    audio_path: Union[str, Path],
    backdrop: Backdrop,
    timeline: LyricTimeline,
    configuration: RenderConfiguration,
    duration: float,
    title: str = "",
    artist: str = "",
    autoplay: bool = True,
) -> None:
    """Open a preview window and run until the user closes it.

    Keys: space play/pause, left/right seek, Home restart, Esc quit.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((configuration.width, configuration.height))
        pygame.display.set_caption(f"{title} - {artist}" if artist else title or "lyricreel")
        surface = PygameSurface(screen, backdrop)
        player = PygameMediaPlayer(audio_path, duration)

        with PreviewDriver(
            timeline,
            configuration,
            player,
            surface,
            audio_context_factory=PygameAudioContext,
            title=title,
            artist=artist,
        ) as driver:
            driver.render()
            if autoplay:
                driver.play()
            driver.run(pygame.time.Clock(), on_frame=_handle_events)
    finally:
        pygame.quit()
