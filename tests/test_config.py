from __future__ import annotations

import pytest

from lyricsync.core.active_line import find_active_index
from lyricsync.core.config import TrackerConfig
from lyricsync.core.lrc_parser import ParseOptions, parse_lyric


def test_defaults_without_env() -> None:
    cfg = TrackerConfig.from_env({})
    assert cfg == TrackerConfig()
    assert cfg.lookahead == 0.25
    assert cfg.lookahead_after == 1.0
    assert cfg.parse_options == ParseOptions()


def test_env_overrides() -> None:
    cfg = TrackerConfig.from_env(
        {
            "LYRICSYNC_LOOKAHEAD": "0.5",
            "LYRICSYNC_LOOKAHEAD_AFTER": "2",
            "LYRICSYNC_IGNORE_SHORT_EMPTY_LINES": "yes",
            "LYRICSYNC_MIN_EMPTY_LINE_DURATION": "3.5",
        }
    )
    assert cfg.lookahead == 0.5
    assert cfg.lookahead_after == 2.0
    assert cfg.parse_options == ParseOptions(ignore_short_empty_lines=True, min_empty_line_duration=3.5)


def test_invalid_env_values_fall_back(caplog) -> None:
    cfg = TrackerConfig.from_env(
        {"LYRICSYNC_LOOKAHEAD": "soon", "LYRICSYNC_IGNORE_SHORT_EMPTY_LINES": "maybe"}
    )
    assert cfg.lookahead == 0.25
    assert cfg.ignore_short_empty_lines is False
    assert "LYRICSYNC_LOOKAHEAD" in caplog.text


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "-5", "-0.1"])
def test_non_finite_or_negative_durations_fall_back(raw: str, caplog) -> None:
    cfg = TrackerConfig.from_env(
        {
            "LYRICSYNC_LOOKAHEAD": raw,
            "LYRICSYNC_LOOKAHEAD_AFTER": raw,
            "LYRICSYNC_MIN_EMPTY_LINE_DURATION": raw,
        }
    )
    assert cfg == TrackerConfig()
    assert "LYRICSYNC_LOOKAHEAD" in caplog.text


def test_zero_lookahead_is_allowed() -> None:
    cfg = TrackerConfig.from_env({"LYRICSYNC_LOOKAHEAD": "0"})
    assert cfg.lookahead == 0.0


def test_nan_lookahead_does_not_jump_to_last_line() -> None:
    cfg = TrackerConfig.from_env({"LYRICSYNC_LOOKAHEAD": "nan"})
    lines = parse_lyric("[00:10.00]a\n[00:20.00]b\n[00:30.00]c")
    assert find_active_index(lines, 5, lookahead=cfg.lookahead, lookahead_after=cfg.lookahead_after) == -1
