"""Length-prefixed item lists (APEv2): Monkey's Audio, WavPack, Musepack."""

from __future__ import annotations

import logging
from typing import Any

from mutagen.apev2 import APEBinaryValue, APEv2

from tagnorm.dialects.base import DialectExtractor, FieldRule, ValueKind, apply_rules
from tagnorm.pictures import sniff_mime
from tagnorm.probe import lookup, tag_strings
from tagnorm.record import RecordBuilder

logger = logging.getLogger(__name__)

COVER_KEY = "Cover Art (Front)"

# APEv2 keys are case-insensitive in mutagen
ITEM_RULES: tuple[FieldRule, ...] = (
    FieldRule("track", ("TRACK",), ValueKind.POSITION),
    FieldRule("total_tracks", ("TRACKTOTAL", "TOTALTRACKS"), ValueKind.INTEGER),
    FieldRule("disc", ("DISC",), ValueKind.POSITION),
    FieldRule("total_discs", ("DISCTOTAL", "TOTALDISCS"), ValueKind.INTEGER),
    FieldRule("album_artist", ("ALBUM ARTIST", "ALBUMARTIST")),
    FieldRule("bpm", ("BPM",), ValueKind.INTEGER),
    FieldRule("copyright", ("COPYRIGHT",)),
    FieldRule("lyrics", ("LYRICS",), ValueKind.TEXT_ONCE),
    FieldRule("isrc", ("ISRC",)),
    FieldRule("label", ("LABEL",)),
    FieldRule("release_type", ("RELEASETYPE", "RELEASE TYPE")),
    FieldRule("barcode", ("BARCODE", "UPC")),
    FieldRule("catalog_number", ("CATALOGNUMBER", "CATALOG NUMBER")),
    FieldRule("release_country", ("RELEASECOUNTRY", "RELEASE COUNTRY")),
    FieldRule("sort_title", ("TITLESORT", "TITLE SORT")),
    FieldRule("sort_artist", ("ARTISTSORT", "ARTIST SORT")),
    FieldRule("sort_album", ("ALBUMSORT", "ALBUM SORT")),
    FieldRule("sort_album_artist", ("ALBUMARTISTSORT", "ALBUM ARTIST SORT")),
    FieldRule("sort_composer", ("COMPOSERSORT", "COMPOSER SORT")),
    FieldRule("conductor", ("CONDUCTOR",)),
    FieldRule("subtitle", ("SUBTITLE",)),
    FieldRule("mood", ("MOOD",)),
    FieldRule("language", ("LANGUAGE",)),
    FieldRule("musicbrainz_artist_id", ("MUSICBRAINZ_ARTISTID",)),
    FieldRule("musicbrainz_album_id", ("MUSICBRAINZ_ALBUMID",)),
    FieldRule("musicbrainz_track_id", ("MUSICBRAINZ_TRACKID",)),
    FieldRule("musicbrainz_release_group_id", ("MUSICBRAINZ_RELEASEGROUPID",)),
    FieldRule("replaygain_track", ("REPLAYGAIN_TRACK_GAIN",)),
    FieldRule("replaygain_album", ("REPLAYGAIN_ALBUM_GAIN",)),
    FieldRule("compilation", ("COMPILATION",), ValueKind.BOOLEAN),
    FieldRule("comment", ("COMMENT",), ValueKind.TEXT_ONCE),
)


def split_cover_blob(blob: bytes) -> bytes | None:
    """Return the image bytes of an APE cover item.

    The item is a free-text description, a NUL byte, then the image.
    Without a NUL byte there is no image.
    """
    sep = blob.find(b"\x00")
    if sep < 0:
        return None
    image = blob[sep + 1:]
    return image or None


class ItemListExtractor(DialectExtractor):
    """Looks up APEv2 items by key, accepting spaced and joined key variants."""

    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        tags = audio.tags
        if tags is None:
            return
        if not isinstance(tags, APEv2):
            logger.debug(f"Expected APEv2 tags, got {type(tags).__name__}")
            return

        def get(key: str) -> str | None:
            value = lookup(tags, key)
            if value is None or isinstance(value, APEBinaryValue):
                return None
            texts = tag_strings(value)
            return texts[0] if texts else ""

        apply_rules(builder, ITEM_RULES, get)

        cover = lookup(tags, COVER_KEY)
        if isinstance(cover, APEBinaryValue):
            image = split_cover_blob(cover.value)
            if image is not None:
                builder.set_artwork(image, sniff_mime(image))
