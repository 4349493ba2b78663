"""Tests for video_writer.py module."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from lyricreel.core.render.video_writer import EncodeProgressLogger, MoviePyEncoder
from lyricreel.exceptions import EncoderError, ExportCancelled

MODULE = "lyricreel.core.render.video_writer"


def _mock_clips(mock_sequence_clip, mock_audio_clip, audio_duration=10.0):
    mock_audio = Mock()
    mock_audio.duration = audio_duration
    mock_audio.subclipped.return_value = mock_audio
    mock_audio_clip.return_value = mock_audio

    mock_video = Mock()
    mock_video.with_audio.return_value = mock_video
    mock_video.with_duration.return_value = mock_video
    mock_sequence_clip.return_value = mock_video
    return mock_video, mock_audio


class TestMoviePyEncoder:
    @patch(f"{MODULE}.AudioFileClip")
    @patch(f"{MODULE}.ImageSequenceClip")
    def test_encode_muxes_and_trims(self, mock_sequence_clip, mock_audio_clip):
        mock_video, mock_audio = _mock_clips(mock_sequence_clip, mock_audio_clip)
        frames = [Path(f"/tmp/frame_{i:06d}.jpg") for i in range(301)]

        result = MoviePyEncoder().encode(frames, "/test/audio.mp3", 30, 10.033, "/test/out.mp4")

        assert result == Path("/test/out.mp4")
        mock_audio_clip.assert_called_once_with("/test/audio.mp3")
        paths = mock_sequence_clip.call_args[0][0]
        assert paths[0] == "/tmp/frame_000000.jpg" and len(paths) == 301
        assert mock_sequence_clip.call_args[1]["fps"] == 30
        mock_audio.subclipped.assert_called_once_with(0, 10.0)
        mock_video.with_duration.assert_called_once_with(10.033)

        kwargs = mock_video.write_videofile.call_args[1]
        assert kwargs["codec"] == "libx264"
        assert kwargs["audio_codec"] == "aac"
        assert kwargs["audio_bitrate"] == "192k"
        assert kwargs["ffmpeg_params"] == ["-pix_fmt", "yuv420p"]
        assert isinstance(kwargs["logger"], EncodeProgressLogger)
        assert "lyricreel_audio_" in kwargs["temp_audiofile_path"]

        mock_video.close.assert_called_once()
        mock_audio.close.assert_called_once()

    def test_encode_without_frames_fails(self):
        with pytest.raises(EncoderError):
            MoviePyEncoder().encode([], "/test/audio.mp3", 30, 1.0, "/test/out.mp4")

    @patch(f"{MODULE}.AudioFileClip")
    @patch(f"{MODULE}.ImageSequenceClip")
    def test_write_failure_maps_to_encoder_error(self, mock_sequence_clip, mock_audio_clip):
        mock_video, mock_audio = _mock_clips(mock_sequence_clip, mock_audio_clip)
        mock_video.write_videofile.side_effect = OSError("ffmpeg exploded")

        with pytest.raises(EncoderError, match="ffmpeg exploded"):
            MoviePyEncoder().encode(["a.jpg"], "/test/audio.mp3", 30, 1.0, "/test/out.mp4")

        mock_video.close.assert_called_once()
        mock_audio.close.assert_called_once()

    @patch(f"{MODULE}.AudioFileClip")
    @patch(f"{MODULE}.ImageSequenceClip")
    def test_cancellation_passes_through(self, mock_sequence_clip, mock_audio_clip):
        mock_video, _ = _mock_clips(mock_sequence_clip, mock_audio_clip)
        mock_video.write_videofile.side_effect = ExportCancelled("stop")

        with pytest.raises(ExportCancelled):
            MoviePyEncoder().encode(["a.jpg"], "/test/audio.mp3", 30, 1.0, "/test/out.mp4")

    @patch(f"{MODULE}.AudioFileClip")
    @patch(f"{MODULE}.ImageSequenceClip")
    def test_cancelled_encode_removes_temp_audio(self, mock_sequence_clip, mock_audio_clip, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mock_video, _ = _mock_clips(mock_sequence_clip, mock_audio_clip)
        seen = {}

        def write_then_cancel(filename, **kwargs):
            audio_dir = Path(kwargs["temp_audiofile_path"])
            (audio_dir / "outTEMP_MPY_wvf_snd.mp4").write_bytes(b"partial")
            seen["dir"] = audio_dir
            raise ExportCancelled("stop")

        mock_video.write_videofile.side_effect = write_then_cancel

        with pytest.raises(ExportCancelled):
            MoviePyEncoder().encode(["a.jpg"], "/test/audio.mp3", 30, 1.0, "out.mp4")

        assert seen["dir"] != tmp_path
        assert not seen["dir"].exists()
        assert list(tmp_path.iterdir()) == []

    @patch(f"{MODULE}.AudioFileClip", side_effect=OSError("no such file"))
    def test_audio_failure_maps_to_encoder_error(self, mock_audio_clip):
        with pytest.raises(EncoderError):
            MoviePyEncoder().encode(["a.jpg"], "/missing.mp3", 30, 1.0, "/test/out.mp4")


class TestEncodeProgressLogger:
    def _logger(self, total, **kwargs):
        logger = EncodeProgressLogger(**kwargs)
        logger.bars["frame_index"] = {"total": total, "index": -1, "message": None, "title": "frame_index"}
        return logger

    def test_reports_fraction_of_frames(self):
        seen = []
        logger = self._logger(10, on_fraction=seen.append)
        logger.bars_callback("frame_index", "index", 4)
        assert seen == [0.5]

    def test_ignores_other_bars_and_attrs(self):
        seen = []
        logger = self._logger(10, on_fraction=seen.append)
        logger.bars_callback("chunk", "index", 4)
        logger.bars_callback("frame_index", "total", 10)
        assert seen == []

    def test_zero_total_is_ignored(self):
        seen = []
        logger = self._logger(0, on_fraction=seen.append)
        logger.bars_callback("frame_index", "index", 4)
        assert seen == []

    def test_raises_when_cancelled(self):
        logger = self._logger(10, is_cancelled=lambda: True)
        with pytest.raises(ExportCancelled):
            logger.bars_callback("frame_index", "index", 1)
