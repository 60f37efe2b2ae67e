"""Format-agnostic tag and audio property extraction via mutagen."""

from __future__ import annotations

import logging
import pathlib
from collections.abc import Iterable
from typing import Any

import mutagen
from mutagen.apev2 import APETextValue, APEv2
from mutagen.id3 import ID3

from tagnorm.errors import UnreadableFileError
from tagnorm.numbers import parse_number_pair
from tagnorm.record import RecordBuilder

logger = logging.getLogger(__name__)

# Candidate keys per generic field, covering easy/Vorbis/APE (case-insensitive),
# ID3 frame ids, MP4 atoms and ASF attribute names. First hit wins.
GENERIC_KEYS: dict[str, tuple[str, ...]] = {
    "title": ("title", "TIT2", "\xa9nam", "Title"),
    "artist": ("artist", "TPE1", "\xa9ART", "Author", "Artist"),
    "album": ("album", "TALB", "\xa9alb", "WM/AlbumTitle", "Album"),
    "genre": ("genre", "TCON", "\xa9gen", "WM/Genre", "Genre"),
    "comment": ("comment", "description", "\xa9cmt", "Description", "Comment"),
    "date": ("date", "year", "TDRC", "TYER", "\xa9day", "WM/Year", "Year"),
    "track": ("tracknumber", "track", "TRCK", "trkn", "WM/TrackNumber", "Track"),
}


def tag_strings(value: Any) -> list[str]:
    """Flatten a raw tag value of any mutagen flavour into a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, bytes):
        return [value.decode("utf-8", errors="replace")]
    if isinstance(value, tuple):
        # MP4 (number, total) pairs
        return [str(value[0])] if value else []
    if isinstance(value, APETextValue):
        return list(value)
    if hasattr(value, "text"):
        # ID3 frames and ID3 timestamps
        return tag_strings(value.text)
    if hasattr(value, "value"):
        # ASF attributes
        return tag_strings(value.value)
    if isinstance(value, Iterable):
        result: list[str] = []
        for item in value:
            result.extend(tag_strings(item))
        return result
    return [str(value)]


def lookup(tags: Any, key: str) -> Any:
    """Get a raw value from a tag container, or None if missing."""
    try:
        return tags[key]
    except (KeyError, ValueError, TypeError):
        return None


def first_text(tags: Any, keys: Iterable[str]) -> str | None:
    """Return the first non-empty string stored under any of *keys*."""
    for key in keys:
        for text in tag_strings(lookup(tags, key)):
            if text:
                return text
    return None


def _parse_year(value: str) -> str | None:
    """Return the year of a date string like '2024' or '2024-03-15'."""
    year = value.strip()[:4]
    if len(year) == 4 and year.isdigit() and int(year) > 0:
        return year
    return None


def open_container(path: pathlib.Path) -> mutagen.FileType:
    """Open a file with mutagen's format detection.

    Raises UnreadableFileError if mutagen cannot make sense of it.
    """
    try:
        audio = mutagen.File(path)
    except Exception as exc:
        logger.debug(f"mutagen failed to open {path}: {exc}")
        raise UnreadableFileError(path, "Unable to read file") from exc
    if audio is None:
        raise UnreadableFileError(path, "Unable to read file or no metadata found")
    return audio


def open_tags(path: pathlib.Path) -> ID3 | APEv2 | None:
    """Read a bare ID3v2 or APEv2 tag, ignoring the audio that follows it.

    Returns None if neither tag is present.
    """
    for reader in (ID3, APEv2):
        try:
            return reader(path)
        except Exception as exc:
            logger.debug(f"No {reader.__name__} tag in {path}: {exc}")
    return None


def probe_tags(tags: Any, builder: RecordBuilder) -> None:
    """Fill generic tag fields from any mutagen tag container into *builder*."""
    for name in ("title", "artist", "album", "genre", "comment"):
        builder.set_text(name, first_text(tags, GENERIC_KEYS[name]))

    raw_date = first_text(tags, GENERIC_KEYS["date"])
    if raw_date is not None:
        builder.set_text("year", _parse_year(raw_date))

    raw_track = first_text(tags, GENERIC_KEYS["track"])
    if raw_track is not None:
        number, _ = parse_number_pair(raw_track)
        builder.set_count("track_number", number)


def probe(audio: mutagen.FileType, builder: RecordBuilder) -> None:
    """Fill generic tag fields and audio properties into *builder*."""
    if audio.tags is not None:
        probe_tags(audio.tags, builder)

    info = audio.info
    if info is None:
        return
    builder.set_number("duration", float(getattr(info, "length", 0.0) or 0.0))
    builder.set_count("bitrate", int(getattr(info, "bitrate", 0) or 0) // 1000)
    builder.set_count("sample_rate", int(getattr(info, "sample_rate", 0) or 0))
    builder.set_count("channels", int(getattr(info, "channels", 0) or 0))
