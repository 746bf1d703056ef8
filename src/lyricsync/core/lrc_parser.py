# core/lrc_parser.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from lyricsync.core.models import UNTIMED, LyricLine
from lyricsync.core.utils import seconds_to_ts

logger = logging.getLogger(__name__)

# [mm:ss.xx] / [mm:ss.xxx], ASCII digits only; seconds range is checked after matching
_LEADING_TAG_RE = re.compile(r"\[([0-9]{1,2}):([0-9]{1,2})\.([0-9]{2,3})\]")
# karaoke tags inside the text, in either delimiter pair
_INLINE_TAG_RE = re.compile(
    r"\[[0-9]{1,2}:[0-5]?[0-9]\.[0-9]{2,3}\]"
    r"|<[0-9]{1,2}:[0-5]?[0-9]\.[0-9]{2,3}>"
)
_LINE_SPLIT_RE = re.compile(r"[\r\n]+")


class LyricsParseError(ValueError):
    pass


@dataclass(frozen=True)
class ParseOptions:
    ignore_short_empty_lines: bool = False
    min_empty_line_duration: float = 1.0  # seconds


def _tag_to_seconds(mm: str, ss: str, frac: str) -> Optional[float]:
    seconds = int(ss)
    if seconds >= 60:
        return None
    # "12.34" -> 12.34 and "12.345" -> 12.345, exactly as written
    return float(f"{int(mm) * 60 + seconds}.{frac}")


def parse_time_tag(tag: str) -> float:
    """
    Strictly parse a single "[mm:ss.xx]" or "[mm:ss.xxx]" tag into seconds.
    Raises LyricsParseError for anything else.
    """
    m = _LEADING_TAG_RE.fullmatch((tag or "").strip())
    if not m:
        raise LyricsParseError(f"Invalid time format: {tag!r}")

    t = _tag_to_seconds(m.group(1), m.group(2), m.group(3))
    if t is None:
        raise LyricsParseError(f"Invalid seconds value in {tag!r}: seconds must be less than 60")
    return t


def strip_inline_tags(text: str) -> str:
    """Remove karaoke timing tags from text and trim it."""
    # removing one tag can close up another around it: "[0[00:02.00]0:03.00]"
    removed = 1
    while removed:
        text, removed = _INLINE_TAG_RE.subn("", text)
    return text.strip()


def _split_leading_tags(line: str) -> Tuple[List[float], str]:
    """
    Peel consecutive valid timestamp tags off the start of a line.
    Returns (times, remaining_text).
    """
    times: List[float] = []
    pos = 0
    while True:
        m = _LEADING_TAG_RE.match(line, pos)
        if not m:
            break
        t = _tag_to_seconds(m.group(1), m.group(2), m.group(3))
        if t is None:
            break
        times.append(t)
        pos = m.end()
    return times, line[pos:]


def _raw_entries(lines: Iterable[str]) -> List[Tuple[float, str]]:
    entries: List[Tuple[float, str]] = []
    for line in lines:
        times, rest = _split_leading_tags(line)
        if not times:
            continue

        content = strip_inline_tags(rest)
        for t in times:
            entries.append((t, content))

    # stable: equal times keep their input order for translation pairing
    entries.sort(key=lambda e: e[0])
    return entries


def _normalize(entries: List[Tuple[float, str]], options: ParseOptions) -> List[LyricLine]:
    out: List[LyricLine] = []
    n = len(entries)
    i = 0
    while i < n:
        time, content = entries[i]

        if not content:
            # Collapse the whole run of empty entries into one spacer line.
            j = i
            while j < n and not entries[j][1]:
                j += 1

            too_short = (
                options.ignore_short_empty_lines
                and j < n
                and entries[j][0] - time < options.min_empty_line_duration
            )
            if not too_short:
                out.append(LyricLine(index=len(out), time=time, raw_content=""))
            i = j
            continue

        nxt = entries[i + 1] if i + 1 < n else None
        if nxt is not None and nxt[0] == time and nxt[1]:
            out.append(LyricLine(index=len(out), time=time, raw_content=content, trans_content=nxt[1]))
            i += 2
        else:
            out.append(LyricLine(index=len(out), time=time, raw_content=content))
            i += 1

    return out


def _untimed(lines: Iterable[str]) -> List[LyricLine]:
    texts = [t for t in (strip_inline_tags(line) for line in lines) if t]
    if len(texts) == 1:
        return [LyricLine(index=0, time=0.0, raw_content=texts[0])]
    return [LyricLine(index=UNTIMED, time=float(UNTIMED), raw_content=t) for t in texts]


def parse_lyric(raw: Optional[str], options: Optional[ParseOptions] = None) -> List[LyricLine]:
    """
    Parse LRC text into a time-sorted list of LyricLine.

    - Every leading [mm:ss.xx] tag of a line produces an entry; tags after
      the first bit of content are only stripped, never used as cue points.
    - Two entries sharing a timestamp become original + translation.
    - Text without any usable timestamp comes back untimed (time == -1),
      except a single line of text, which is pinned at 0.
    """
    if not raw:
        return []

    options = options or ParseOptions()
    lines = _LINE_SPLIT_RE.split(raw)

    parsed = _normalize(_raw_entries(lines), options)
    if parsed:
        return parsed

    logger.debug("No timestamps found in %d line(s), using untimed lyrics", len(lines))
    return _untimed(lines)


def dump_lrc(lines: Iterable[LyricLine]) -> str:
    """
    Build LRC text from parsed lines. Translations are written as a second
    line carrying the same timestamp, so parse_lyric() pairs them back up.
    """
    out: List[str] = []
    for line in lines:
        tag = f"[{seconds_to_ts(line.time)}]" if line.is_timed else ""
        out.append(f"{tag}{line.raw_content}")
        if line.trans_content:
            out.append(f"{tag}{line.trans_content}")
    return "\n".join(out)
