# core/active_line.py
from __future__ import annotations

import math
from bisect import bisect_right
from operator import attrgetter
from typing import List, Sequence

from lyricsync.core.models import LyricLine, RenderLine

DEFAULT_LOOKAHEAD = 0.25        # seconds the highlight runs ahead of the clock
DEFAULT_LOOKAHEAD_AFTER = 1.0   # no lookahead before this point, so line 0 is not skipped

_line_time = attrgetter("time")


def find_active_index(
    lines: Sequence[LyricLine],
    current_time: float,
    *,
    lookahead: float = DEFAULT_LOOKAHEAD,
    lookahead_after: float = DEFAULT_LOOKAHEAD_AFTER,
) -> int:
    """
    Position of the last line starting at or before current_time (+ lookahead),
    or -1 when no line has started yet. Untimed lines are never active.
    """
    if not lines or math.isnan(current_time):
        return -1

    target = current_time + lookahead if current_time >= lookahead_after else current_time

    idx = bisect_right(lines, target, key=_line_time) - 1
    if idx < 0 or lines[idx].time < 0:
        return -1
    return idx


def has_timed_lines(lines: Sequence[LyricLine]) -> bool:
    return any(line.time >= 0 for line in lines)


def project(lines: Sequence[LyricLine], active_index: int) -> List[RenderLine]:
    """Derive the per-line highlight state for a given active index."""
    return [
        RenderLine(line=line, is_active=pos == active_index, is_past=pos < active_index)
        for pos, line in enumerate(lines)
    ]
