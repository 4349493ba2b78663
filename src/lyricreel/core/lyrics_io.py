"""Load timed lyrics from JSON or LRC files.

JSON files hold an array of ``{"text", "startTime", "endTime"}`` objects
(``start_time`` / ``end_time`` are accepted too). LRC files only carry start
timestamps, so each line ends where the next one starts.
"""

import json
import re
from pathlib import Path
from typing import List, Optional, Union

from ..config import LRC_LAST_LINE_DURATION
from ..exceptions import ValidationError
from ..utils.logging import get_logger
from ..utils.validation import validate_lyric_lines
from .models import LyricLine

logger = get_logger(__name__)

# ----------------------
# LRC timestamp regex
# ----------------------
_LRC_TS_RE = re.compile(
    r"""
    \[                      # opening bracket
    (?P<min>\d+)            # minutes
    :
    (?P<sec>[0-5]?\d)       # seconds
    (?:[.:](?P<frac>\d{1,3}))?  # optional fractional seconds
    \]                      # closing bracket
    """,
    re.VERBOSE,
)


def _timestamp_seconds(match: re.Match) -> float:
    frac = match.group("frac") or "0"
    return (
        int(match.group("min")) * 60
        + int(match.group("sec"))
        + int(frac) / (10 ** len(frac))
    )


def lines_from_json(data: list) -> List[LyricLine]:
    """Convert decoded JSON items into LyricLine objects."""
    if not isinstance(data, list):
        raise ValidationError("Lyrics JSON must be an array of lines")
    lines: List[LyricLine] = []
    for idx, item in enumerate(data):
        try:
            start = item["startTime"] if "startTime" in item else item["start_time"]
            end = item["endTime"] if "endTime" in item else item["end_time"]
            lines.append(
                LyricLine(
                    text=str(item.get("text", "")).strip(),
                    start_time=float(start),
                    end_time=float(end),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid lyric entry #{idx + 1}: {e}") from e
    return lines


def parse_lrc(lrc_text: str, duration: Optional[float] = None) -> List[LyricLine]:
    """Parse LRC text into lines that end where the next line starts.

    Lines sharing several timestamps (``[00:10.00][00:42.00]chorus``) are
    expanded. Blank timed lines act as end markers and are dropped. The last
    line ends at ``duration`` when known.
    """
    timed: List[tuple[float, str]] = []
    for raw in lrc_text.splitlines():
        stamps = list(_LRC_TS_RE.finditer(raw))
        if not stamps:
            continue
        text = raw[stamps[-1].end():].strip()
        for stamp in stamps:
            timed.append((_timestamp_seconds(stamp), text))

    timed.sort(key=lambda item: item[0])

    lines: List[LyricLine] = []
    for i, (start, text) in enumerate(timed):
        if not text:
            continue
        if i + 1 < len(timed):
            end = timed[i + 1][0]
        elif duration is not None and duration > start:
            end = duration
        else:
            end = start + LRC_LAST_LINE_DURATION
        if end <= start:
            logger.warning(f"Skipping zero-length LRC line at {start:.2f}s: {text!r}")
            continue
        lines.append(LyricLine(text=text, start_time=start, end_time=end))
    return lines


def load_lyrics(
    path: Union[str, Path], duration: Optional[float] = None
) -> List[LyricLine]:
    """Load and validate lyrics from a ``.json`` or ``.lrc`` file."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Cannot read lyrics file {path}: {e}") from e

    if path.suffix.lower() == ".json":
        try:
            lines = lines_from_json(json.loads(content))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid lyrics JSON in {path}: {e}") from e
    else:
        lines = parse_lrc(content, duration)

    validate_lyric_lines(lines)
    logger.info(f"Loaded {len(lines)} lyric lines from {path.name}")
    return lines
