"""Highlight progress for the current line and export progress reporting."""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ...config import PROGRESS_EPSILON
from ..models import LyricLine


def highlight_progress(line: LyricLine, time: float) -> float:
    """Fraction of ``line`` elapsed at ``time``, clamped to [0, 1].

    Zero-length lines are fully highlighted.
    """
    duration = line.end_time - line.start_time
    if duration <= 0:
        return 1.0
    progress = (time - line.start_time) / max(PROGRESS_EPSILON, duration)
    return max(0.0, min(1.0, progress))


# Export phases
PHASE_LOADING = "loading"
PHASE_FRAMES = "frames"
PHASE_ENCODING = "encoding"
PHASE_COMPLETE = "complete"
PHASE_CANCELLED = "cancelled"
PHASE_FAILED = "failed"

PHASE_LABELS = {
    PHASE_LOADING: "Loading assets",
    PHASE_FRAMES: "Generating frames",
    PHASE_ENCODING: "Encoding video",
    PHASE_COMPLETE: "Export complete",
    PHASE_CANCELLED: "Export cancelled",
    PHASE_FAILED: "Export failed",
}

TERMINAL_PHASES = (PHASE_COMPLETE, PHASE_CANCELLED, PHASE_FAILED)


@dataclass(frozen=True)
class ExportProgress:
    """One progress event. ``percent`` is None once an export has ended badly."""

    phase: str
    percent: Optional[float]
    detail: str = ""

    @property
    def label(self) -> str:
        return PHASE_LABELS.get(self.phase, self.phase)


class ProgressReporter:
    """Turn per-phase fractions into monotonic overall percentages."""

    def __init__(self, callback: Optional[Callable[[ExportProgress], None]] = None):
        self.callback = callback
        self.percent = 0.0
        self.last: Optional[ExportProgress] = None

    def report(
        self,
        phase: str,
        fraction: float,
        span: Tuple[float, float],
        detail: str = "",
    ) -> ExportProgress:
        """Report ``fraction`` (0..1) of the phase mapped into ``span``."""
        start, end = span
        fraction = max(0.0, min(1.0, fraction))
        self.percent = max(self.percent, start + (end - start) * fraction)
        return self._emit(ExportProgress(phase, self.percent, detail))

    def finish(self, phase: str, detail: str = "") -> ExportProgress:
        """Emit a terminal event; failures and cancellation clear the percent."""
        if phase == PHASE_COMPLETE:
            self.percent = 100.0
            return self._emit(ExportProgress(phase, 100.0, detail))
        return self._emit(ExportProgress(phase, None, detail))

    def _emit(self, event: ExportProgress) -> ExportProgress:
        self.last = event
        if self.callback is not None:
            self.callback(event)
        return event


class ConsoleProgressBar:
    """Console progress bar for long-running operations."""

    def __init__(self, prefix: str = "Exporting"):
        self.prefix = prefix
        self.last_percent = -1
        self.last_phase: Optional[str] = None

    def __call__(self, event: ExportProgress) -> None:
        if event.phase in TERMINAL_PHASES:
            print(f"\r  {self.prefix}: {event.label}".ljust(60), flush=True)
            return

        percent = int(event.percent or 0)
        # Update every 2% (or on phase change) to reduce I/O churn
        if event.phase == self.last_phase and (
            percent == self.last_percent or percent % 2 != 0
        ):
            return
        bar_len = 30
        filled = int(bar_len * percent / 100)
        bar = "█" * filled + "░" * (bar_len - filled)
        detail = f" {event.detail}" if event.detail else ""
        print(
            f"\r  {self.prefix}: [{bar}] {percent}% {event.label}{detail}",
            end="",
            flush=True,
        )
        self.last_percent = percent
        self.last_phase = event.phase
