"""Render subsystem facade.

The pygame preview host lives in ``pygame_surface`` and is imported on demand.
"""

from .export import CancelToken, ExportJob, FrameExportPipeline, frame_count
from .lyric_timeline import LyricTimeline
from .preview import PlaybackState, PreviewDriver
from .progress import ExportProgress, highlight_progress
from .render_state import VisualState, compute_visual_state

__all__ = [
    "CancelToken",
    "ExportJob",
    "FrameExportPipeline",
    "frame_count",
    "LyricTimeline",
    "PlaybackState",
    "PreviewDriver",
    "ExportProgress",
    "highlight_progress",
    "VisualState",
    "compute_visual_state",
]
