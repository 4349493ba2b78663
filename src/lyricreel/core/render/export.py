"""Offline export: render every frame at a fixed rate, then encode with audio."""

import math
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

from ...config import (
    ENCODE_PROGRESS_RANGE,
    FPS,
    FRAME_PROGRESS_RANGE,
    JPEG_QUALITY,
    LOAD_PROGRESS_RANGE,
)
from ...exceptions import ConfigError, ExportCancelled, LyricReelError, RenderError
from ...utils.logging import get_logger
from ...utils.validation import default_output_name, validate_output_path
from ..assets import load_image, probe_audio_duration
from ..style import RenderConfiguration
from .backgrounds import Backdrop, prepare_backdrop
from .frame_renderer import rasterize
from .lyric_timeline import LyricTimeline
from .progress import (
    PHASE_CANCELLED,
    PHASE_COMPLETE,
    PHASE_ENCODING,
    PHASE_FAILED,
    PHASE_FRAMES,
    PHASE_LOADING,
    ExportProgress,
    ProgressReporter,
)
from .render_state import compute_visual_state
from .video_writer import MoviePyEncoder

logger = get_logger(__name__)


class CancelToken:
    """Thread-safe cancellation flag, safe to set from a signal handler."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class ExportJob:
    """Inputs of one export run."""

    audio_path: Path
    image_path: Path
    title: str
    artist: str
    output_path: Optional[Path] = None

    def resolve_output_path(self) -> Path:
        if self.output_path is not None:
            return Path(self.output_path)
        return Path.cwd() / default_output_name(self.title, self.artist)


def frame_count(total_duration: float, frame_rate: float) -> int:
    """Number of frames covering ``total_duration`` at ``frame_rate``.

    The product is rounded to 6 places first so values like 10.0 * 30 that
    land a hair above an integer do not produce an extra frame.
    """
    if total_duration <= 0:
        raise ConfigError(f"Total duration must be positive, got {total_duration}")
    if frame_rate <= 0:
        raise ConfigError(f"Frame rate must be positive, got {frame_rate}")
    return math.ceil(round(total_duration * frame_rate, 6))


def frame_times(total_duration: float, frame_rate: float) -> Iterator[float]:
    """Timestamps ``i / frame_rate`` for every frame index."""
    for i in range(frame_count(total_duration, frame_rate)):
        yield i / frame_rate


class FrameExportPipeline:
    """Sequential, cancellable frame-by-frame export.

    Progress is reported through ``on_progress`` with overall percentages:
    asset loading 0-5%, frame generation 5-80% and encoding 80-100%. Every
    run ends with exactly one terminal event (complete, cancelled or failed).
    """

    def __init__(
        self,
        job: ExportJob,
        configuration: RenderConfiguration,
        timeline: LyricTimeline,
        encoder: Optional[MoviePyEncoder] = None,
        on_progress: Optional[Callable[[ExportProgress], None]] = None,
        cancel_token: Optional[CancelToken] = None,
        frame_rate: float = FPS,
    ):
        self.job = job
        self.configuration = configuration
        self.timeline = timeline
        self.encoder = encoder or MoviePyEncoder()
        self.cancel_token = cancel_token or CancelToken()
        self.frame_rate = frame_rate
        self.reporter = ProgressReporter(on_progress)
        self.backdrop: Optional[Backdrop] = None

    def _check_cancelled(self, where: str) -> None:
        if self.cancel_token.is_cancelled():
            raise ExportCancelled(f"Export cancelled {where}")

    def load_assets(self) -> Tuple[Backdrop, float]:
        """Decode the background image and probe the audio duration."""
        self.reporter.report(PHASE_LOADING, 0.0, LOAD_PROGRESS_RANGE)
        image = load_image(self.job.image_path)
        self.backdrop = prepare_backdrop(image, self.configuration)
        self.reporter.report(PHASE_LOADING, 0.5, LOAD_PROGRESS_RANGE)
        duration = probe_audio_duration(self.job.audio_path)
        self.reporter.report(PHASE_LOADING, 1.0, LOAD_PROGRESS_RANGE)
        return self.backdrop, duration

    def render_frames(
        self,
        total_duration: float,
        frame_rate: float,
        frame_dir: Union[str, Path],
    ) -> List[Path]:
        """Render every frame to a JPEG in ``frame_dir`` and return the paths in order."""
        total = frame_count(total_duration, frame_rate)
        if self.backdrop is None:
            self.backdrop = prepare_backdrop(
                load_image(self.job.image_path), self.configuration
            )

        frame_dir = Path(frame_dir)
        logger.info(
            f"Rendering {total} frames at {frame_rate:g}fps "
            f"({self.configuration.width}x{self.configuration.height})"
        )
        paths: List[Path] = []
        for i in range(total):
            self._check_cancelled(f"at frame {i}/{total}")
            t = i / frame_rate
            state = compute_visual_state(
                t, self.timeline, self.configuration, self.job.title, self.job.artist
            )
            path = frame_dir / f"frame_{i:06d}.jpg"
            rasterize(state, self.backdrop).save(path, "JPEG", quality=JPEG_QUALITY)
            paths.append(path)
            self.reporter.report(
                PHASE_FRAMES, (i + 1) / total, FRAME_PROGRESS_RANGE, f"{i + 1}/{total}"
            )
        return paths

    def _encode(self, frames: List[Path], duration: float, output_path: Path) -> Path:
        self._check_cancelled("before encoding")
        self.reporter.report(PHASE_ENCODING, 0.0, ENCODE_PROGRESS_RANGE)
        return self.encoder.encode(
            frames,
            self.job.audio_path,
            self.frame_rate,
            duration,
            output_path,
            on_fraction=lambda f: self.reporter.report(
                PHASE_ENCODING, f, ENCODE_PROGRESS_RANGE
            ),
            is_cancelled=self.cancel_token.is_cancelled,
        )

    def export(self) -> Path:
        """Run the whole export and return the written video path."""
        output_path = self.job.resolve_output_path()
        existed = output_path.exists()
        try:
            if self.frame_rate <= 0:
                raise ConfigError(f"Frame rate must be positive, got {self.frame_rate}")
            validate_output_path(output_path)
            self._check_cancelled("before start")

            _, duration = self.load_assets()
            with tempfile.TemporaryDirectory(prefix="lyricreel_frames_") as frame_dir:
                frames = self.render_frames(duration, self.frame_rate, frame_dir)
                result = self._encode(frames, duration, output_path)
        except ExportCancelled as e:
            logger.warning(str(e))
            self._remove_partial(output_path, existed)
            self.reporter.finish(PHASE_CANCELLED, str(e))
            raise
        except LyricReelError as e:
            logger.error(f"Export failed: {e}")
            self._remove_partial(output_path, existed)
            self.reporter.finish(PHASE_FAILED, str(e))
            raise
        except Exception as e:
            logger.error(f"Export failed: {e}")
            self._remove_partial(output_path, existed)
            self.reporter.finish(PHASE_FAILED, str(e))
            raise RenderError(f"Export failed: {e}") from e

        self.reporter.finish(PHASE_COMPLETE, str(result))
        logger.info(f"✅ Video written to {result}")
        return result

    @staticmethod
    def _remove_partial(output_path: Path, existed: bool) -> None:
        if not existed and output_path.exists():
            output_path.unlink()
            logger.debug(f"Removed partial output {output_path}")
