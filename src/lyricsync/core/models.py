# core/models.py
from __future__ import annotations
from dataclasses import dataclass, field

UNTIMED = -1


@dataclass(frozen=True)
class LyricLine:
    index: int
    time: float          # seconds; -1 when the lyrics carry no timing
    raw_content: str
    trans_content: str = ""

    @property
    def is_timed(self) -> bool:
        return self.time >= 0


@dataclass(frozen=True)
class RenderLine:
    line: LyricLine
    is_active: bool = False
    is_past: bool = False


@dataclass(frozen=True)
class AudioMetadata:
    title: str
    artist: str = "Unknown Artist"
    album: str = "Unknown Album"
    duration: float = 0.0
    lyrics: str | None = None

    # stream properties
    bit_rate: int | None = None      # kbps
    bit_depth: int | None = None
    sample_rate: int | None = None   # Hz
    channels: int | None = None

    # extra tag fields
    genres: list[str] = field(default_factory=list)
    year: int | None = None
    track: int | None = None
    track_total: int | None = None
    disk: int | None = None
    disk_total: int | None = None
    album_artists: list[str] = field(default_factory=list)
    composers: list[str] = field(default_factory=list)
