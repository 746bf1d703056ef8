# player/lyrics_tracker.py
from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QObject, Signal, Slot

from lyricsync.core.active_line import find_active_index, has_timed_lines, project
from lyricsync.core.config import TrackerConfig
from lyricsync.core.lrc_parser import parse_lyric
from lyricsync.core.models import LyricLine, RenderLine
from lyricsync.core.utils import ms_to_seconds


class LyricsTracker(QObject):
    """
    Keeps the lyric timeline of the current track in step with the player.

    Wire Player.positionChanged -> on_player_position and
    seekRequested -> Player.seek; views listen to activeIndexChanged and
    pull render_lines() to restyle rows.
    """
    lyricsChanged = Signal(object)      # list[LyricLine]
    activeIndexChanged = Signal(int)    # -1 when nothing is active
    seekRequested = Signal(int)         # ms

    def __init__(self, config: Optional[TrackerConfig] = None, parent=None):
        super().__init__(parent)
        self.config = config or TrackerConfig()

        self._lines: List[LyricLine] = []
        self._timed: bool = False
        self._current_index: int = -1
        self._current_pos_ms: int = 0

    # --- public API ---
    @property
    def lines(self) -> List[LyricLine]:
        return self._lines

    @property
    def active_index(self) -> int:
        return self._current_index

    @property
    def is_synced(self) -> bool:
        return self._timed

    def set_lyrics(self, raw: Optional[str]) -> None:
        lines = parse_lyric(raw or "", self.config.parse_options)

        # swap in one go; the resolver never sees a half-built list
        self._lines = lines
        self._timed = has_timed_lines(lines)

        # a new track starts from the top; listeners never see the old index
        self._current_pos_ms = 0
        self._set_active(-1)
        self.lyricsChanged.emit(lines)

        if self._timed:
            self._resolve()

    def clear(self) -> None:
        self.set_lyrics(None)

    @Slot(int)
    def on_player_position(self, ms: int) -> None:
        self._current_pos_ms = int(ms)
        if not self._timed:
            return
        self._resolve()

    def render_lines(self) -> List[RenderLine]:
        return project(self._lines, self._current_index)

    def request_seek(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            return
        line = self._lines[index]
        if not line.is_timed:
            return
        self.seekRequested.emit(int(round(line.time * 1000)))

    # --- internal helpers ---
    def _resolve(self) -> None:
        idx = find_active_index(
            self._lines,
            ms_to_seconds(self._current_pos_ms),
            lookahead=self.config.lookahead,
            lookahead_after=self.config.lookahead_after,
        )
        self._set_active(idx)

    def _set_active(self, idx: int) -> None:
        if idx == self._current_index:
            return
        self._current_index = idx
        self.activeIndexChanged.emit(idx)
