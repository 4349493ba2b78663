"""Data models for timed lyrics."""

import math
from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class LyricLine:
    """A single lyric line shown from ``start_time`` until ``end_time``.

    A line is active on ``[start_time, end_time)``. Empty text is allowed and
    is how padding lines are represented.
    """

    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def is_sentinel(self) -> bool:
        return not self.text and math.isinf(self.start_time)


# Zero-length padding lines, far in the past / far in the future.
LEADING_SENTINEL = LyricLine(text="", start_time=-math.inf, end_time=-math.inf)
TRAILING_SENTINEL = LyricLine(text="", start_time=math.inf, end_time=math.inf)

PADDING = 2


def pad_lines(lines: Sequence[LyricLine]) -> List[LyricLine]:
    """Return ``lines`` with two sentinels on each side."""
    return (
        [LEADING_SENTINEL] * PADDING + list(lines) + [TRAILING_SENTINEL] * PADDING
    )
