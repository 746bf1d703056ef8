from __future__ import annotations

from lyricsync.core.active_line import find_active_index, has_timed_lines, project
from lyricsync.core.lrc_parser import parse_lyric
from lyricsync.core.models import LyricLine


LINES = [
    LyricLine(index=0, time=10, raw_content="First line"),
    LyricLine(index=1, time=20, raw_content="Second line"),
    LyricLine(index=2, time=30, raw_content="Third line"),
]


def test_find_active_index_basic() -> None:
    assert find_active_index([], 15) == -1
    assert find_active_index(LINES, 5) == -1
    assert find_active_index(LINES, 20) == 1
    assert find_active_index(LINES, 25) == 1
    assert find_active_index(LINES, 50) == 2


def test_lookahead_switches_slightly_early() -> None:
    assert find_active_index(LINES, 19.7) == 0
    assert find_active_index(LINES, 19.8) == 1
    assert find_active_index(LINES, 19.8, lookahead=0) == 0


def test_no_lookahead_during_first_second() -> None:
    lines = [
        LyricLine(index=0, time=0.0, raw_content="intro"),
        LyricLine(index=1, time=0.9, raw_content="early"),
    ]
    assert find_active_index(lines, 0.7) == 0
    assert find_active_index(lines, 0.9) == 1


def test_equal_times_resolve_to_last() -> None:
    lines = parse_lyric("[00:05.00]A\n[00:05.00]B\n[00:05.00]C")
    assert find_active_index(lines, 5.0) == 1


def test_untimed_lines_are_never_active() -> None:
    lines = parse_lyric("one\ntwo\nthree")
    assert not has_timed_lines(lines)
    for t in (0, 1, 100, float("inf")):
        assert find_active_index(lines, t) == -1


def test_single_untimed_line_counts_as_timed() -> None:
    lines = parse_lyric("only line")
    assert has_timed_lines(lines)
    assert find_active_index(lines, 0) == 0


def test_nan_time() -> None:
    assert find_active_index(LINES, float("nan")) == -1


def test_monotonic_in_time() -> None:
    lines = parse_lyric(
        "[00:00.00]a\n[00:00.50]b\n[00:01.10]c\n[00:01.20]d\n[00:05.00]e\n[00:05.00]f\n[00:09.99]g"
    )
    prev = -1
    t = -1.0
    while t < 12:
        idx = find_active_index(lines, t)
        assert idx >= prev
        prev = idx
        t += 0.05
    assert prev == len(lines) - 1


def test_project_marks_active_and_past() -> None:
    out = project(LINES, 1)
    assert [(r.is_active, r.is_past) for r in out] == [(False, True), (True, False), (False, False)]
    assert [r.line for r in out] == LINES


def test_project_without_active_line() -> None:
    out = project(LINES, -1)
    assert not any(r.is_active or r.is_past for r in out)
