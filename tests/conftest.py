"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary files and directories
- Sample lyric lines and timelines
- Render configurations sized for fast tests
- Small background images and backdrops
"""

import json
import os
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from lyricreel.core.models import LyricLine
from lyricreel.core.render.backgrounds import Backdrop
from lyricreel.core.render.lyric_timeline import LyricTimeline
from lyricreel.core.style import RenderConfiguration


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests that encode real video with ffmpeg",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: encodes real media files with ffmpeg")


def pytest_collection_modifyitems(config, items):
    run_integration = config.getoption("--run-integration") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_integration:
        return

    skip_integration = pytest.mark.skip(
        reason="encodes real media (use --run-integration or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Lyrics Fixtures
# =============================================================================


@pytest.fixture
def sample_lines():
    """Three lines with a gap between the second and the third."""
    return [
        LyricLine("Hello", 0.0, 2.0),
        LyricLine("World", 2.0, 4.0),
        LyricLine("Again", 5.0, 7.0),
    ]


@pytest.fixture
def sample_timeline(sample_lines):
    return LyricTimeline(sample_lines)


@pytest.fixture
def lyrics_json_file(temp_dir, sample_lines):
    path = temp_dir / "lyrics.json"
    path.write_text(
        json.dumps(
            [
                {"text": line.text, "startTime": line.start_time, "endTime": line.end_time}
                for line in sample_lines
            ]
        ),
        encoding="utf-8",
    )
    return path


# =============================================================================
# Render Fixtures
# =============================================================================


@pytest.fixture
def configuration():
    return RenderConfiguration()


@pytest.fixture
def background_image():
    """A small two-tone image so crops and blurs have something to work on."""
    img = Image.new("RGB", (64, 36), (200, 40, 40))
    img.paste((40, 40, 200), (32, 0, 64, 36))
    return img


@pytest.fixture
def image_file(temp_dir, background_image):
    path = temp_dir / "cover.png"
    background_image.save(path)
    return path


@pytest.fixture
def tiny_backdrop():
    """Backdrop sized for a 160x90 test frame."""
    return Backdrop(
        background=Image.new("RGB", (160, 90), (10, 10, 10)),
        album_art=Image.new("RGB", (20, 20), (250, 250, 250)),
    )
