"""Frame-sequence encoding and audio muxing using MoviePy."""

import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from moviepy import AudioFileClip, ImageSequenceClip
from proglog import ProgressBarLogger

from ...config import AUDIO_BITRATE, AUDIO_CODEC, VIDEO_CODEC
from ...exceptions import EncoderError, ExportCancelled
from ...utils.logging import get_logger

logger = get_logger(__name__)


class EncodeProgressLogger(ProgressBarLogger):
    """Proglog logger forwarding MoviePy's frame bar and polling for cancellation."""

    def __init__(
        self,
        on_fraction: Optional[Callable[[float], None]] = None,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ):
        super().__init__()
        self.on_fraction = on_fraction
        self.is_cancelled = is_cancelled

    def bars_callback(self, bar, attr, value, old_value=None):
        """Called by proglog whenever a bar attribute changes."""
        if self.is_cancelled is not None and self.is_cancelled():
            raise ExportCancelled("Export cancelled during encoding")
        if bar != "frame_index" or attr != "index":
            return
        total = self.bars[bar].get("total") or 0
        if total > 0 and self.on_fraction is not None:
            self.on_fraction(min(1.0, (value + 1) / total))


class MoviePyEncoder:
    """Encode an ordered list of still frames plus one audio track."""

    def __init__(
        self,
        codec: str = VIDEO_CODEC,
        audio_codec: str = AUDIO_CODEC,
        audio_bitrate: str = AUDIO_BITRATE,
        preset: str = "medium",
        threads: int = 4,
    ):
        self.codec = codec
        self.audio_codec = audio_codec
        self.audio_bitrate = audio_bitrate
        self.preset = preset
        self.threads = threads

    def encode(
        self,
        frame_paths: Sequence[Union[str, Path]],
        audio_path: Union[str, Path],
        fps: float,
        duration: float,
        output_path: Union[str, Path],
        on_fraction: Optional[Callable[[float], None]] = None,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> Path:
        """Mux ``frame_paths`` at ``fps`` with the audio, hard-trimmed to ``duration``.

        The frame count is a ceiling of ``duration * fps`` so the image
        sequence may be slightly longer than the audio; the output is cut at
        exactly ``duration``.
        """
        if not frame_paths:
            raise EncoderError("No frames to encode")

        output_path = Path(output_path)
        audio = None
        video = None
        try:
            audio = AudioFileClip(str(audio_path))
            video = ImageSequenceClip([str(p) for p in frame_paths], fps=fps)
            trimmed_audio = audio.subclipped(0, min(duration, audio.duration))
            video = video.with_audio(trimmed_audio).with_duration(duration)

            logger.info(
                f"Encoding {len(frame_paths)} frames at {fps:g}fps ({duration:.3f}s) to {output_path}"
            )
            # MoviePy writes its intermediate audio track here and only removes it
            # after a successful write
            with tempfile.TemporaryDirectory(prefix="lyricreel_audio_") as audio_dir:
                video.write_videofile(
                    str(output_path),
                    temp_audiofile_path=audio_dir,
                    fps=fps,
                    codec=self.codec,
                    audio_codec=self.audio_codec,
                    audio_bitrate=self.audio_bitrate,
                    preset=self.preset,
                    threads=self.threads,
                    ffmpeg_params=["-pix_fmt", "yuv420p"],
                    logger=EncodeProgressLogger(on_fraction, is_cancelled),
                )
        except ExportCancelled:
            raise
        except Exception as e:
            raise EncoderError(f"Video encoding failed: {e}") from e
        finally:
            if video is not None:
                video.close()
            if audio is not None:
                audio.close()

        return output_path
