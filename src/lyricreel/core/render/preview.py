"""Live preview driver: sample the media clock each frame and redraw.

The driver is surface-agnostic. The host supplies:

- a media player with ``play()``, ``pause()``, ``seek(seconds)``,
  ``position() -> float``, ``duration() -> float`` and ``is_finished() -> bool``
- a surface with ``draw(visual_state)``
- an optional audio context factory; the context it returns is created on the
  first successful play and released by ``close()``. It must have ``close()``.
"""

from enum import Enum
from typing import Any, Callable, Optional

from ...config import PREVIEW_FPS
from ...utils.logging import get_logger
from ..style import RenderConfiguration
from .lyric_timeline import LyricTimeline
from .render_state import VisualState, compute_visual_state

logger = get_logger(__name__)


class PlaybackState(str, Enum):
    PAUSED = "paused"
    PLAYING = "playing"
    ENDED = "ended"


class PreviewDriver:
    """Transport state machine for an interactive preview session."""

    def __init__(
        self,
        timeline: LyricTimeline,
        configuration: RenderConfiguration,
        player: Any,
        surface: Any,
        audio_context_factory: Optional[Callable[[], Any]] = None,
        title: str = "",
        artist: str = "",
        fps: int = PREVIEW_FPS,
    ):
        self.timeline = timeline
        self.configuration = configuration
        self.player = player
        self.surface = surface
        self.audio_context_factory = audio_context_factory
        self.title = title
        self.artist = artist
        self.fps = fps

        self.state = PlaybackState.PAUSED
        self.current_time = 0.0
        self.audio_context: Optional[Any] = None
        self.last_state: Optional[VisualState] = None
        self._stopped = False

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    @property
    def is_ended(self) -> bool:
        return self.state == PlaybackState.ENDED

    @property
    def stopped(self) -> bool:
        return self._stopped

    def _duration(self) -> float:
        return max(0.0, float(self.player.duration() or 0.0))

    def _ensure_audio_context(self) -> None:
        if self.audio_context is None and self.audio_context_factory is not None:
            self.audio_context = self.audio_context_factory()
            logger.debug("Audio context created")

    def play(self) -> bool:
        """Start or resume playback; from the ended state, restart at zero.

        Returns False when playback could not start. The failure is logged and
        the transport state is left untouched.
        """
        if self.state == PlaybackState.PLAYING:
            return True
        try:
            self._ensure_audio_context()
            if self.state == PlaybackState.ENDED:
                self.player.seek(0.0)
            self.player.play()
        except Exception as e:
            logger.error(f"Could not start playback: {e}")
            return False

        if self.state == PlaybackState.ENDED:
            self.current_time = 0.0
        self.state = PlaybackState.PLAYING
        return True

    def pause(self) -> bool:
        """Pause and sample the position. Returns False when the player failed."""
        if self.state != PlaybackState.PLAYING:
            return True
        try:
            self.player.pause()
            position = self.player.position()
        except Exception as e:
            logger.error(f"Could not pause playback: {e}")
            return False
        self.current_time = position
        self.state = PlaybackState.PAUSED
        return True

    def toggle(self) -> bool:
        if self.state == PlaybackState.PLAYING:
            return self.pause()
        return self.play()

    def seek(self, time: float) -> float:
        """Move the playhead; a seek clears the ended state and redraws at once."""
        duration = self._duration()
        target = max(0.0, float(time))
        if duration > 0:
            target = min(target, duration)
        self.player.seek(target)
        self.current_time = target
        if self.state == PlaybackState.ENDED:
            self.state = PlaybackState.PAUSED
        self.render()
        return target

    def restart(self) -> bool:
        self.seek(0.0)
        return self.play()

    def render(self) -> VisualState:
        state = compute_visual_state(
            self.current_time, self.timeline, self.configuration, self.title, self.artist
        )
        self.surface.draw(state)
        self.last_state = state
        return state

    def tick(self) -> bool:
        """Per-frame callback: sample the player, detect the end and redraw.

        Returns False once the session has been stopped.
        """
        if self._stopped:
            return False
        if self.state == PlaybackState.PLAYING:
            self.current_time = self.player.position()
            duration = self._duration()
            if self.player.is_finished() or (duration > 0 and self.current_time >= duration):
                # Hold the player too, so a later seek does not restart audio
                try:
                    self.player.pause()
                except Exception as e:
                    logger.warning(f"Could not pause finished playback: {e}")
                self.state = PlaybackState.ENDED
                self.current_time = duration
                logger.debug("Playback ended")
        self.render()
        return True

    def stop(self) -> None:
        """Ask the loop to exit before its next frame."""
        self._stopped = True

    def run(self, clock: Any, on_frame: Optional[Callable[["PreviewDriver"], None]] = None) -> None:
        """Loop until stopped, pacing frames with ``clock.tick(fps)``.

        ``on_frame`` runs first in every iteration so the host can pump its
        events (and call ``stop()``).
        """
        while not self._stopped:
            if on_frame is not None:
                on_frame(self)
            if not self.tick():
                break
            clock.tick(self.fps)

    def close(self) -> None:
        self.stop()
        try:
            if self.state == PlaybackState.PLAYING:
                self.player.pause()
                self.state = PlaybackState.PAUSED
        except Exception as e:
            logger.error(f"Could not pause playback while closing: {e}")
        finally:
            if self.audio_context is not None:
                context, self.audio_context = self.audio_context, None
                context.close()
                logger.debug("Audio context released")

    def __enter__(self) -> "PreviewDriver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
