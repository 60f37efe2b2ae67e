"""Free-text key/value comment maps (Vorbis comments): FLAC and Ogg family."""

from __future__ import annotations

import base64
import logging
from typing import Any

from mutagen.flac import FLAC
from mutagen.flac import Picture as FlacPicture

from tagnorm.dialects.base import (
    DialectExtractor,
    FieldRule,
    ValueKind,
    apply_rules,
    first_of,
)
from tagnorm.pictures import Picture, resolve_picture
from tagnorm.record import RecordBuilder

logger = logging.getLogger(__name__)

PICTURE_KEY = "METADATA_BLOCK_PICTURE"

COMMENT_RULES: tuple[FieldRule, ...] = (
    FieldRule("track", ("TRACKNUMBER",), ValueKind.POSITION),
    FieldRule("total_tracks", ("TRACKTOTAL", "TOTALTRACKS"), ValueKind.INTEGER),
    FieldRule("disc", ("DISCNUMBER",), ValueKind.POSITION),
    FieldRule("total_discs", ("DISCTOTAL", "TOTALDISCS"), ValueKind.INTEGER),
    FieldRule("album_artist", ("ALBUMARTIST", "ALBUM ARTIST")),
    FieldRule("bpm", ("BPM",), ValueKind.INTEGER),
    FieldRule("sort_title", ("TITLESORT",)),
    FieldRule("sort_artist", ("ARTISTSORT",)),
    FieldRule("sort_album", ("ALBUMSORT",)),
    FieldRule("sort_album_artist", ("ALBUMARTISTSORT",)),
    FieldRule("sort_composer", ("COMPOSERSORT",)),
    FieldRule("conductor", ("CONDUCTOR",)),
    FieldRule("remixer", ("REMIXER",)),
    FieldRule("producer", ("PRODUCER",)),
    FieldRule("engineer", ("ENGINEER",)),
    FieldRule("lyricist", ("LYRICIST",)),
    FieldRule("subtitle", ("SUBTITLE",)),
    FieldRule("grouping", ("GROUPING",)),
    FieldRule("movement", ("MOVEMENT", "MOVEMENTNAME")),
    FieldRule("mood", ("MOOD",)),
    FieldRule("language", ("LANGUAGE",)),
    FieldRule("musical_key", ("INITIALKEY", "KEY")),
    FieldRule("copyright", ("COPYRIGHT",)),
    FieldRule("lyrics", ("LYRICS", "UNSYNCEDLYRICS"), ValueKind.TEXT_ONCE),
    FieldRule("label", ("LABEL", "ORGANIZATION", "PUBLISHER")),
    FieldRule("isrc", ("ISRC",)),
    FieldRule("encoded_by", ("ENCODEDBY", "ENCODED-BY")),
    FieldRule("encoder_settings", ("ENCODERSETTINGS",)),
    FieldRule("release_date", ("RELEASEDATE",)),
    FieldRule("original_release_date", ("ORIGINALDATE", "ORIGINALYEAR")),
    FieldRule("musicbrainz_artist_id", ("MUSICBRAINZ_ARTISTID",)),
    FieldRule("musicbrainz_album_id", ("MUSICBRAINZ_ALBUMID",)),
    FieldRule("musicbrainz_track_id", ("MUSICBRAINZ_TRACKID", "MUSICBRAINZ_RELEASETRACKID")),
    FieldRule("musicbrainz_release_group_id", ("MUSICBRAINZ_RELEASEGROUPID",)),
    FieldRule("release_type", ("RELEASETYPE", "MUSICBRAINZ_ALBUMTYPE")),
    FieldRule("barcode", ("BARCODE", "UPC", "EAN")),
    FieldRule("catalog_number", ("CATALOGNUMBER", "CATALOG")),
    FieldRule("release_country", ("RELEASECOUNTRY", "MUSICBRAINZ_ALBUMRELEASECOUNTRY")),
    FieldRule("artist_type", ("MUSICBRAINZ_ARTISTTYPE", "ARTISTTYPE")),
    FieldRule("replaygain_track", ("REPLAYGAIN_TRACK_GAIN",)),
    FieldRule("replaygain_album", ("REPLAYGAIN_ALBUM_GAIN",)),
    FieldRule("compilation", ("COMPILATION",), ValueKind.BOOLEAN),
    FieldRule("comment", ("COMMENT", "DESCRIPTION"), ValueKind.TEXT_ONCE),
)


def property_map(tags: Any) -> dict[str, list[str]]:
    """Flatten Vorbis comments into a dict keyed by upper-cased field name."""
    result: dict[str, list[str]] = {}
    for key, value in tags.as_dict().items():
        result.setdefault(key.upper(), []).extend(value)
    return result


def _decode_block_pictures(values: list[str]) -> list[Picture]:
    pictures: list[Picture] = []
    for value in values:
        try:
            block = FlacPicture(base64.b64decode(value))
        except Exception as exc:
            logger.debug(f"Skipping unparsable {PICTURE_KEY} entry: {exc}")
            continue
        pictures.append(Picture(kind=int(block.type), data=block.data, mime=block.mime or None))
    return pictures


class CommentMapExtractor(DialectExtractor):
    """Resolves canonical fields from a Vorbis comment block by alias keys.

    Ogg containers carry their pictures inside the comment block as base64
    ``METADATA_BLOCK_PICTURE`` values; those are resolved here too. Native
    FLAC files only take pictures from their PICTURE blocks.
    """

    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        tags = audio.tags
        if tags is None:
            return
        if not hasattr(tags, "as_dict"):
            logger.debug(f"Expected Vorbis comments, got {type(tags).__name__}")
            return
        properties = property_map(tags)
        self.extract_properties(properties, builder)

        if builder.has_artwork or isinstance(audio, FLAC):
            return
        chosen = resolve_picture(_decode_block_pictures(properties.get(PICTURE_KEY, [])))
        if chosen is not None:
            builder.set_artwork(*chosen)

    def extract_properties(self, properties: dict[str, list[str]], builder: RecordBuilder) -> None:
        apply_rules(builder, COMMENT_RULES, lambda key: first_of(properties, key))


class PictureListExtractor(DialectExtractor):
    """Resolves the container's own picture list (FLAC PICTURE blocks)."""

    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        if builder.has_artwork:
            return
        candidates = [
            Picture(kind=int(p.type), data=p.data, mime=p.mime or None)
            for p in getattr(audio, "pictures", None) or []
        ]
        chosen = resolve_picture(candidates)
        if chosen is not None:
            builder.set_artwork(*chosen)
