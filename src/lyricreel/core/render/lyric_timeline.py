"""Lyric timeline: decide which line is current and which lines are visible."""

from bisect import bisect_right
from typing import List, Sequence, Tuple

from ..models import PADDING, LEADING_SENTINEL, TRAILING_SENTINEL, LyricLine, pad_lines

WINDOW_OFFSETS = (-2, -1, 0, 1, 2)

# Padded index used before the first real line: the second leading sentinel.
BEFORE_FIRST_INDEX = PADDING - 1


class LyricTimeline:
    """Immutable, padded view over a sorted, non-overlapping lyric sequence.

    Lines are active on ``[start_time, end_time)``. When a time falls in a gap
    (or after the last line) the most recently passed line stays current;
    before the first line a leading sentinel is current.
    """

    def __init__(self, lines: Sequence[LyricLine]):
        self._lines: Tuple[LyricLine, ...] = tuple(lines)
        self._padded: Tuple[LyricLine, ...] = tuple(pad_lines(self._lines))
        self._starts: List[float] = [line.start_time for line in self._lines]

    @property
    def lines(self) -> Tuple[LyricLine, ...]:
        return self._lines

    @property
    def padded(self) -> Tuple[LyricLine, ...]:
        return self._padded

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other) -> bool:
        return isinstance(other, LyricTimeline) and self._lines == other._lines

    def __hash__(self) -> int:
        return hash(self._lines)

    def active_index(self, time: float) -> int:
        """Return the padded index of the current line at ``time``.

        ``bisect_right`` on start times gives the last line with
        ``start_time <= time``. Either ``time`` is inside it, or it is the last
        line already passed, since lines do not overlap.
        """
        real_idx = bisect_right(self._starts, time) - 1
        if real_idx < 0:
            return BEFORE_FIRST_INDEX
        return real_idx + PADDING

    def current_line(self, time: float) -> LyricLine:
        return self._padded[self.active_index(time)]

    def is_line_active(self, time: float) -> bool:
        """True when ``time`` lies inside a real line rather than in a gap."""
        line = self.current_line(time)
        return not line.is_sentinel and line.start_time <= time < line.end_time

    def resolve_window(self, time: float) -> Tuple[LyricLine, ...]:
        """Return the five lines at offsets -2..+2 around the current line."""
        center = self.active_index(time)
        window = []
        for offset in WINDOW_OFFSETS:
            idx = center + offset
            if idx < 0:
                window.append(LEADING_SENTINEL)
            elif idx >= len(self._padded):
                window.append(TRAILING_SENTINEL)
            else:
                window.append(self._padded[idx])
        return tuple(window)
