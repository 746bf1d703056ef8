# library/metadata.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.flac import FLAC
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from lyricsync.core.models import AudioMetadata

logger = logging.getLogger(__name__)

# Where lyrics live inside the containers we read:
#   - synced LRC:      LYRICS
#   - unsynced/plain:  UNSYNCEDLYRICS
VORBIS_SYNCED_KEY = "LYRICS"
VORBIS_PLAIN_KEY = "UNSYNCEDLYRICS"

ID3_SYNCED_DESC = "LYRICS"

MP4_PLAIN_KEY = "\xa9lyr"
MP4_SYNCED_KEY = "----:com.lrclib:LYRICS"

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


def _norm(s) -> Optional[str]:
    """Normalize optional strings (strip + convert empty to None)."""
    if s is None:
        return None
    s2 = str(s).strip()
    return s2 or None


def _first_of(value) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    return _norm(value)


def _vorbis_lyrics(audio) -> Tuple[Optional[str], Optional[str]]:
    return _first_of(audio.get(VORBIS_PLAIN_KEY)), _first_of(audio.get(VORBIS_SYNCED_KEY))


def _id3_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    try:
        tags = ID3(path)
    except ID3NoHeaderError:
        return None, None

    plain = None
    uslt_frames = tags.getall("USLT")
    if uslt_frames:
        plain = getattr(uslt_frames[0], "text", None)

    synced = None
    for frame in tags.getall("TXXX"):
        if getattr(frame, "desc", "") == ID3_SYNCED_DESC:
            synced = _first_of(getattr(frame, "text", None))
            break

    return _norm(plain), synced


def _mp4_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    audio = MP4(path)
    # the freeform atom stores the LRC as bytes
    return _first_of(audio.get(MP4_PLAIN_KEY)), _first_of(audio.get(MP4_SYNCED_KEY))


def read_embedded_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Read embedded plain lyrics and synced LRC (if present) from an audio file.
    Returns (plain_lyrics_or_None, synced_lrc_or_None).

      - MP3: ID3 USLT for plain, TXXX with desc 'LYRICS' for synced.
      - FLAC/Ogg Vorbis/Opus: 'UNSYNCEDLYRICS' and 'LYRICS' comments.
      - MP4/M4A: '\\xa9lyr' and the '----:com.lrclib:LYRICS' atom.
      - Anything else: generic MutagenFile lookup of common keys.
    """
    ext = Path(path).suffix.lower()

    try:
        if ext == ".mp3":
            return _id3_lyrics(path)
        if ext == ".flac":
            return _vorbis_lyrics(FLAC(path))
        if ext in {".ogg", ".oga"}:
            return _vorbis_lyrics(OggVorbis(path))
        if ext == ".opus":
            return _vorbis_lyrics(OggOpus(path))
        if ext in {".m4a", ".mp4"}:
            return _mp4_lyrics(path)

        audio = MutagenFile(path, easy=False)
        tags = getattr(audio, "tags", None) if audio is not None else None
        if tags:
            for key in (VORBIS_SYNCED_KEY, "lyrics", VORBIS_PLAIN_KEY, MP4_PLAIN_KEY):
                value = _first_of(tags.get(key))
                if value:
                    return None, value
    except (MutagenError, OSError) as e:
        logger.warning("Failed to read embedded lyrics from %s: %s", path, e)

    return None, None


def read_sidecar_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Read <stem>.txt / <stem>.lrc next to the audio file.
    Returns (plain_or_None, synced_or_None).
    """
    base, _ = os.path.splitext(path)

    def _read(p: str) -> Optional[str]:
        if not os.path.isfile(p):
            return None
        try:
            return _norm(Path(p).read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning("Failed to read sidecar lyrics %s: %s", p, e)
            return None

    return _read(base + ".txt"), _read(base + ".lrc")


def load_track_lyrics(path: str) -> Optional[str]:
    """
    Pick the lyric text for a track: synced beats plain, sidecar beats embedded.
    """
    txt_sidecar, lrc_sidecar = read_sidecar_lyrics(path)
    txt_embedded, lrc_embedded = read_embedded_lyrics(path)
    return lrc_sidecar or lrc_embedded or txt_sidecar or txt_embedded


def _int_or_none(raw) -> Optional[int]:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def _split_number(raw: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """'3/12' -> (3, 12), '3' -> (3, None)."""
    if not raw:
        return None, None
    head, _, tail = str(raw).partition("/")
    return _int_or_none(head), _int_or_none(tail) if tail else None


def _all_of(easy, key: str) -> list[str]:
    values = easy.get(key) or []
    if not isinstance(values, (list, tuple)):
        values = [values]
    return [s for s in (_norm(v) for v in values) if s]


def fallback_metadata(path: str, lyrics: Optional[str] = None) -> AudioMetadata:
    return AudioMetadata(
        title=Path(path).stem,
        artist=UNKNOWN_ARTIST,
        album=UNKNOWN_ALBUM,
        duration=0.0,
        lyrics=lyrics,
    )


def read_metadata(path: str) -> AudioMetadata:
    """
    Extract tags, stream info and lyrics from an audio file.

    Never raises for unreadable files: the failure is logged and a
    best-effort object (title from the file name, unknown artist/album,
    zero duration) comes back instead.
    """
    lyrics = load_track_lyrics(path)

    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        logger.warning("Failed to parse metadata for %s, using fallback values: %s", path, e)
        return fallback_metadata(path, lyrics)

    if audio is None:
        logger.warning("Unrecognized audio format: %s", path)
        return fallback_metadata(path, lyrics)

    tags = audio.tags or {}
    artists = _all_of(tags, "artist")
    track, track_total = _split_number(_first_of(tags.get("tracknumber")))
    disk, disk_total = _split_number(_first_of(tags.get("discnumber")))

    date = _first_of(tags.get("date"))
    year = _int_or_none(date[:4]) if date else None

    info = getattr(audio, "info", None)
    duration = float(getattr(info, "length", 0.0) or 0.0)
    bitrate = getattr(info, "bitrate", None)

    return AudioMetadata(
        title=_first_of(tags.get("title")) or Path(path).stem,
        artist="; ".join(artists) or UNKNOWN_ARTIST,
        album=_first_of(tags.get("album")) or UNKNOWN_ALBUM,
        duration=duration,
        lyrics=lyrics,
        bit_rate=bitrate // 1000 if bitrate else None,
        bit_depth=getattr(info, "bits_per_sample", None),
        sample_rate=getattr(info, "sample_rate", None),
        channels=getattr(info, "channels", None),
        genres=_all_of(tags, "genre"),
        year=year,
        track=track,
        track_total=track_total,
        disk=disk,
        disk_total=disk_total,
        album_artists=_all_of(tags, "albumartist"),
        composers=_all_of(tags, "composer"),
    )
