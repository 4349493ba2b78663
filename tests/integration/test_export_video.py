"""End-to-end export with real ffmpeg encoding."""

import wave

import pytest
from moviepy import VideoFileClip

from lyricreel.core.render.export import CancelToken, ExportJob, FrameExportPipeline
from lyricreel.core.render.progress import PHASE_COMPLETE
from lyricreel.core.style import RenderConfiguration
from lyricreel.exceptions import ExportCancelled

pytestmark = pytest.mark.integration


@pytest.fixture
def silent_wav(temp_dir):
    path = temp_dir / "silence.wav"
    rate = 22050
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x00" * int(rate * 1.25))
    return path


def test_export_writes_trimmed_video(temp_dir, silent_wav, image_file, sample_timeline):
    events = []
    job = ExportJob(silent_wav, image_file, "Song", "Band", temp_dir / "out.mp4")
    pipeline = FrameExportPipeline(
        job, RenderConfiguration(), sample_timeline, on_progress=events.append, frame_rate=10
    )

    output = pipeline.export()

    assert output.exists()
    assert events[-1].phase == PHASE_COMPLETE
    clip = VideoFileClip(str(output))
    try:
        assert tuple(clip.size) == (1280, 720)
        assert clip.duration == pytest.approx(1.25, abs=0.15)
    finally:
        clip.close()


def test_cancel_during_encoding(temp_dir, silent_wav, image_file, sample_timeline, tmp_path, monkeypatch):
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    token = CancelToken()

    def on_progress(event):
        if event.phase == "encoding" and event.percent > 85:
            token.cancel()

    job = ExportJob(silent_wav, image_file, "Song", "Band", temp_dir / "out.mp4")
    pipeline = FrameExportPipeline(
        job, RenderConfiguration(), sample_timeline,
        on_progress=on_progress, cancel_token=token, frame_rate=10,
    )

    with pytest.raises(ExportCancelled):
        pipeline.export()
    assert not (temp_dir / "out.mp4").exists()
    assert list(workdir.iterdir()) == []
