import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lyricsync.core.active_line import find_active_index, has_timed_lines
from lyricsync.core.config import TrackerConfig
from lyricsync.core.lrc_parser import ParseOptions, parse_lyric
from lyricsync.core.utils import format_time
from lyricsync.library.metadata import read_metadata

TEXT_EXTS = {".lrc", ".txt"}

logger = logging.getLogger("lyricsync")


def load_lyrics_text(path: str) -> str:
    if Path(path).suffix.lower() in TEXT_EXTS:
        return Path(path).read_text(encoding="utf-8", errors="replace")

    meta = read_metadata(path)
    print(f"{meta.artist} - {meta.title} [{meta.album}] {format_time(meta.duration)}")
    return meta.lyrics or ""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Print the lyric timeline of an audio or LRC file.")
    p.add_argument("file", help="audio file with embedded/sidecar lyrics, or a .lrc/.txt file")
    p.add_argument("--at", type=float, default=None, help="mark the active line at this time (seconds)")
    p.add_argument("--ignore-short-empty-lines", action="store_true", default=None)
    p.add_argument("--min-empty-line-duration", type=float, default=None)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if os.getenv("LYRICSYNC_DEBUG") == "1" else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    cfg = TrackerConfig.from_env()
    options = ParseOptions(
        ignore_short_empty_lines=(
            cfg.ignore_short_empty_lines
            if args.ignore_short_empty_lines is None
            else args.ignore_short_empty_lines
        ),
        min_empty_line_duration=(
            cfg.min_empty_line_duration
            if args.min_empty_line_duration is None
            else args.min_empty_line_duration
        ),
    )

    try:
        raw = load_lyrics_text(args.file)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.file, e)
        return 1

    lines = parse_lyric(raw, options)
    if not lines:
        print("No lyrics")
        return 0

    active = -1
    if args.at is not None and has_timed_lines(lines):
        active = find_active_index(
            lines, args.at, lookahead=cfg.lookahead, lookahead_after=cfg.lookahead_after
        )

    for pos, line in enumerate(lines):
        marker = ">" if pos == active else " "
        stamp = format_time(line.time) if line.is_timed else "-:--"
        text = line.raw_content or "..."
        if line.trans_content:
            text = f"{text} / {line.trans_content}"
        print(f"{marker} [{stamp}] {text}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
