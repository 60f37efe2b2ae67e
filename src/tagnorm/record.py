"""The canonical metadata record and its one-pass builder."""

from __future__ import annotations

import base64
import pathlib
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class MetadataRecord:
    """Format-independent metadata for a single audio file."""

    source_path: pathlib.Path

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    genre: str | None = None
    comment: str | None = None
    year: str | None = None
    codec: str | None = None

    track_number: int = 0
    total_tracks: int = 0
    disc_number: int = 0
    total_discs: int = 0

    sort_title: str | None = None
    sort_artist: str | None = None
    sort_album: str | None = None
    sort_album_artist: str | None = None
    sort_composer: str | None = None

    conductor: str | None = None
    remixer: str | None = None
    producer: str | None = None
    engineer: str | None = None
    lyricist: str | None = None
    label: str | None = None
    encoded_by: str | None = None
    encoder_settings: str | None = None
    subtitle: str | None = None
    grouping: str | None = None
    movement: str | None = None
    mood: str | None = None
    language: str | None = None
    musical_key: str | None = None
    lyrics: str | None = None

    isrc: str | None = None
    copyright: str | None = None
    barcode: str | None = None
    catalog_number: str | None = None
    release_country: str | None = None
    release_type: str | None = None
    artist_type: str | None = None
    musicbrainz_artist_id: str | None = None
    musicbrainz_album_id: str | None = None
    musicbrainz_track_id: str | None = None
    musicbrainz_release_group_id: str | None = None

    release_date: str | None = None
    original_release_date: str | None = None

    replaygain_track: str | None = None
    replaygain_album: str | None = None

    bpm: int = 0
    compilation: bool = False

    duration: float = 0.0
    bitrate: int = 0
    sample_rate: int = 0
    channels: int = 0
    bit_depth: int = 0

    artwork_data: bytes | None = None
    artwork_mime_type: str | None = None

    @property
    def has_artwork(self) -> bool:
        return self.artwork_data is not None

    def to_dict(self, include_artwork: bool = False) -> dict[str, object]:
        """Return a JSON-serializable dict of the record.

        Artwork is summarized by its size unless *include_artwork* is set,
        in which case the bytes are embedded as base64.
        """
        result: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "source_path":
                value = str(value)
            elif f.name == "artwork_data":
                continue
            result[f.name] = value
        data = self.artwork_data
        result["artwork_size"] = len(data) if data is not None else 0
        if include_artwork:
            result["artwork_data"] = base64.b64encode(data).decode("ascii") if data is not None else None
        return result


_FIELD_NAMES = frozenset(f.name for f in fields(MetadataRecord))


class RecordBuilder:
    """Accumulates field values during one extraction pass.

    Absent values (None, empty strings, non-positive counts) never replace
    what is already held. ``build()`` produces the immutable record.
    """

    def __init__(self, source_path: pathlib.Path) -> None:
        self._values: dict[str, object] = {"source_path": source_path}

    def _check(self, name: str) -> None:
        if name not in _FIELD_NAMES or name == "source_path":
            raise ValueError(f"Unknown record field: {name}")

    def get(self, name: str) -> object:
        self._check(name)
        return self._values.get(name)

    def has(self, name: str) -> bool:
        self._check(name)
        return name in self._values

    def set_text(self, name: str, value: str | None) -> None:
        self._check(name)
        if value:
            self._values[name] = value

    def set_text_once(self, name: str, value: str | None) -> None:
        """Set a text field only if nothing is held yet (first value wins)."""
        if not self.has(name):
            self.set_text(name, value)

    def set_count(self, name: str, value: int) -> None:
        self._check(name)
        if value > 0:
            self._values[name] = value

    def set_flag(self, name: str, value: bool) -> None:
        self._check(name)
        self._values[name] = bool(value)

    def set_number(self, name: str, value: float) -> None:
        self._check(name)
        self._values[name] = value

    @property
    def has_artwork(self) -> bool:
        return "artwork_data" in self._values

    def set_artwork(self, data: bytes, mime: str | None) -> bool:
        """Store artwork unless some is already held. Returns True if stored."""
        if self.has_artwork or not data:
            return False
        self._values["artwork_data"] = bytes(data)
        if mime:
            self._values["artwork_mime_type"] = mime
        return True

    def build(self) -> MetadataRecord:
        return MetadataRecord(**self._values)
