# core/config.py
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from lyricsync.core.active_line import DEFAULT_LOOKAHEAD, DEFAULT_LOOKAHEAD_AFTER
from lyricsync.core.lrc_parser import ParseOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "LYRICSYNC_"


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = None

    # durations: finite and not negative
    if value is None or not math.isfinite(value) or value < 0:
        logger.warning("Ignoring invalid %s%s=%r, using %s", ENV_PREFIX, name, raw, default)
        return default
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    logger.warning("Ignoring invalid %s%s=%r, using %s", ENV_PREFIX, name, raw, default)
    return default


@dataclass(frozen=True)
class TrackerConfig:
    lookahead: float = DEFAULT_LOOKAHEAD
    lookahead_after: float = DEFAULT_LOOKAHEAD_AFTER
    ignore_short_empty_lines: bool = False
    min_empty_line_duration: float = 1.0

    @property
    def parse_options(self) -> ParseOptions:
        return ParseOptions(
            ignore_short_empty_lines=self.ignore_short_empty_lines,
            min_empty_line_duration=self.min_empty_line_duration,
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TrackerConfig":
        """
        Read overrides from LYRICSYNC_* variables:
          LYRICSYNC_LOOKAHEAD, LYRICSYNC_LOOKAHEAD_AFTER,
          LYRICSYNC_IGNORE_SHORT_EMPTY_LINES, LYRICSYNC_MIN_EMPTY_LINE_DURATION
        """
        env = os.environ if env is None else env
        return cls(
            lookahead=_env_float(env, "LOOKAHEAD", DEFAULT_LOOKAHEAD),
            lookahead_after=_env_float(env, "LOOKAHEAD_AFTER", DEFAULT_LOOKAHEAD_AFTER),
            ignore_short_empty_lines=_env_bool(env, "IGNORE_SHORT_EMPTY_LINES", False),
            min_empty_line_duration=_env_float(env, "MIN_EMPTY_LINE_DURATION", 1.0),
        )
