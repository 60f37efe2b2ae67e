"""Atom/item maps (MP4 family): m4a, m4b, m4p, mp4, aac."""

from __future__ import annotations

import logging
from typing import Any

from mutagen.mp4 import AtomDataType, MP4Tags

from tagnorm.dialects.base import DialectExtractor
from tagnorm.probe import tag_strings
from tagnorm.record import RecordBuilder

logger = logging.getLogger(__name__)

FREEFORM_PREFIX = "----:com.apple.iTunes:"

STRING_ATOMS: dict[str, str] = {
    "aART": "album_artist",
    "sonm": "sort_title",
    "soar": "sort_artist",
    "soal": "sort_album",
    "soaa": "sort_album_artist",
    "soco": "sort_composer",
    "\xa9grp": "grouping",
    "cprt": "copyright",
    "\xa9lyr": "lyrics",
    "\xa9too": "encoded_by",
    "\xa9mvn": "movement",
}

# field -> freeform names, in priority order
FREEFORM_FIELDS: dict[str, tuple[str, ...]] = {
    "release_type": ("RELEASETYPE", "MusicBrainz Album Type"),
    "barcode": ("BARCODE",),
    "catalog_number": ("CATALOGNUMBER",),
    "release_country": ("MusicBrainz Album Release Country",),
    "artist_type": ("MusicBrainz Artist Type",),
    "label": ("LABEL",),
    "isrc": ("ISRC",),
    "musicbrainz_artist_id": ("MusicBrainz Artist Id",),
    "musicbrainz_album_id": ("MusicBrainz Album Id",),
    "musicbrainz_track_id": ("MusicBrainz Release Track Id", "MusicBrainz Track Id"),
    "musicbrainz_release_group_id": ("MusicBrainz Release Group Id",),
    "replaygain_track": ("replaygain_track_gain", "REPLAYGAIN_TRACK_GAIN"),
    "replaygain_album": ("replaygain_album_gain", "REPLAYGAIN_ALBUM_GAIN"),
}

COVER_MIME_TYPES: dict[int, str] = {
    AtomDataType.JPEG: "image/jpeg",
    AtomDataType.PNG: "image/png",
    AtomDataType.BMP: "image/bmp",
    AtomDataType.GIF: "image/gif",
}
DEFAULT_COVER_MIME = "image/jpeg"


def _pair(value: Any) -> tuple[int, int]:
    """Return the first (number, total) pair of an integer-pair atom."""
    if not value:
        return 0, 0
    first = value[0]
    number = first[0] if len(first) > 0 else 0
    total = first[1] if len(first) > 1 else 0
    return int(number or 0), int(total or 0)


def _text(value: Any) -> str:
    return ", ".join(text for text in tag_strings(value) if text)


class AtomMapExtractor(DialectExtractor):
    """Looks up fixed atom keys in an MP4 item map."""

    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        tags = audio.tags
        if tags is None:
            return
        if not isinstance(tags, MP4Tags):
            logger.debug(f"Expected MP4 tags, got {type(tags).__name__}")
            return

        for atom, (number_field, total_field) in (
            ("trkn", ("track_number", "total_tracks")),
            ("disk", ("disc_number", "total_discs")),
        ):
            if atom in tags:
                number, total = _pair(tags[atom])
                builder.set_count(number_field, number)
                builder.set_count(total_field, total)

        if "tmpo" in tags and tags["tmpo"]:
            builder.set_count("bpm", int(tags["tmpo"][0]))

        if "cpil" in tags:
            builder.set_flag("compilation", bool(tags["cpil"]))

        for atom, field in STRING_ATOMS.items():
            if atom in tags:
                builder.set_text(field, _text(tags[atom]))

        covers = tags.get("covr")
        if covers:
            cover = covers[0]
            mime = COVER_MIME_TYPES.get(getattr(cover, "imageformat", None), DEFAULT_COVER_MIME)
            builder.set_artwork(bytes(cover), mime)

        for field, names in FREEFORM_FIELDS.items():
            for name in names:
                key = FREEFORM_PREFIX + name
                if key in tags:
                    builder.set_text(field, _text(tags[key]))
                    break
