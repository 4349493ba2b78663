"""Tests for the click command-line interface."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from lyricreel import __version__
from lyricreel.cli import cli
from lyricreel.core.render.progress import ConsoleProgressBar
from lyricreel.core.style import ColorTheme, FontWeight, Resolution
from lyricreel.exceptions import AssetLoadError, EncoderError, ExportCancelled


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("lyricreel").handlers.clear()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def media(temp_dir, image_file, lyrics_json_file):
    audio = temp_dir / "song.mp3"
    audio.write_bytes(b"id3")
    return [str(audio), str(image_file), str(lyrics_json_file)]


@pytest.fixture
def mock_pipeline():
    with patch("lyricreel.cli.FrameExportPipeline") as pipeline_cls:
        pipeline_cls.return_value.export.return_value = Path("Song - Band (Lyrics).mp4")
        yield pipeline_cls


class TestExportCommand:
    def test_export_success(self, runner, media, mock_pipeline):
        result = runner.invoke(
            cli,
            ["export", *media, "--title", "Song", "--artist", "Band",
             "--theme", "dark", "--font-weight", "300", "--resolution", "1080p", "--fps", "24"],
        )

        assert result.exit_code == 0, result.output
        job, configuration, timeline = mock_pipeline.call_args[0]
        kwargs = mock_pipeline.call_args[1]
        assert job.title == "Song"
        assert job.artist == "Band"
        assert job.output_path is None
        assert configuration.color_theme == ColorTheme.DARK
        assert configuration.font_weight == FontWeight.LIGHT
        assert configuration.resolution == Resolution.FULL_HD
        assert len(timeline) == 3
        assert kwargs["frame_rate"] == 24
        assert isinstance(kwargs["on_progress"], ConsoleProgressBar)
        assert "Lyric video exported" in result.output

    def test_export_output_and_no_progress(self, runner, media, mock_pipeline, temp_dir):
        out = temp_dir / "video.mp4"
        result = runner.invoke(
            cli,
            ["export", *media, "--title", "Song", "--artist", "Band", "-o", str(out), "--no-progress",
             "--no-album-art"],
        )

        assert result.exit_code == 0, result.output
        job, configuration, _ = mock_pipeline.call_args[0]
        assert job.output_path == out
        assert not configuration.include_album_art
        assert mock_pipeline.call_args[1]["on_progress"] is None

    def test_export_cancelled_exit_code(self, runner, media, mock_pipeline):
        mock_pipeline.return_value.export.side_effect = ExportCancelled("Export cancelled at frame 10/300")
        result = runner.invoke(cli, ["export", *media, "--title", "Song", "--artist", "Band"])
        assert result.exit_code == 130
        assert "cancelled" in result.output

    @pytest.mark.parametrize("error", [EncoderError("codec"), AssetLoadError("bad image")])
    def test_export_failure_exit_code(self, runner, media, mock_pipeline, error):
        mock_pipeline.return_value.export.side_effect = error
        result = runner.invoke(cli, ["export", *media, "--title", "Song", "--artist", "Band"])
        assert result.exit_code == 1
        assert str(error) in result.output

    def test_invalid_font_size(self, runner, media, mock_pipeline):
        result = runner.invoke(
            cli, ["export", *media, "--title", "Song", "--artist", "Band", "--font-size", "10"]
        )
        assert result.exit_code == 1
        assert "Font size" in result.output
        mock_pipeline.assert_not_called()

    def test_unknown_theme_is_usage_error(self, runner, media, mock_pipeline):
        result = runner.invoke(
            cli, ["export", *media, "--title", "Song", "--artist", "Band", "--theme", "vaporwave"]
        )
        assert result.exit_code == 2

    def test_title_is_required(self, runner, media):
        result = runner.invoke(cli, ["export", *media, "--artist", "Band"])
        assert result.exit_code == 2

    def test_lrc_lyrics_probe_audio(self, runner, media, mock_pipeline, temp_dir):
        lrc = temp_dir / "song.lrc"
        lrc.write_text("[00:01.00]Hello\n[00:03.00]World\n", encoding="utf-8")
        with patch("lyricreel.cli.probe_audio_duration", return_value=6.0) as probe:
            result = runner.invoke(
                cli, ["export", media[0], media[1], str(lrc), "--title", "Song", "--artist", "Band"]
            )
        assert result.exit_code == 0, result.output
        probe.assert_called_once_with(media[0])
        timeline = mock_pipeline.call_args[0][2]
        assert timeline.lines[-1].end_time == 6.0


class TestPreviewCommand:
    def test_preview_runs_window(self, runner, media):
        with patch("lyricreel.cli.probe_audio_duration", return_value=8.0), patch(
            "lyricreel.core.render.pygame_surface.run_preview"
        ) as run_preview:
            result = runner.invoke(
                cli, ["preview", *media, "--title", "Song", "--artist", "Band", "--paused"]
            )

        assert result.exit_code == 0, result.output
        args, kwargs = run_preview.call_args
        assert args[0] == media[0]
        assert args[4] == 8.0
        assert kwargs["autoplay"] is False
        assert kwargs["title"] == "Song"

    def test_preview_asset_failure(self, runner, media):
        with patch("lyricreel.cli.probe_audio_duration", side_effect=AssetLoadError("cannot decode")):
            result = runner.invoke(cli, ["preview", *media, "--title", "Song", "--artist", "Band"])
        assert result.exit_code == 1
        assert "cannot decode" in result.output


class TestThemesCommand:
    def test_lists_all_themes(self, runner):
        result = runner.invoke(cli, ["themes"])
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == len(ColorTheme)
        assert "colorized" in result.output
        assert "#fbbf24" in result.output

    def test_single_theme(self, runner):
        result = runner.invoke(cli, ["themes", "--theme", "neon"])
        assert result.output.startswith("neon")
        assert len(result.output.strip().splitlines()) == 1


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert __version__ in result.output
