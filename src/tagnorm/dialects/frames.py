"""Frame-based tags (ID3v2): MP3, WAV, AIFF, TrueAudio, DSF."""

from __future__ import annotations

import logging
from typing import Any

from mutagen.id3 import ID3

from tagnorm.dialects.base import DialectExtractor, ValueKind, apply_value
from tagnorm.pictures import Picture, resolve_picture
from tagnorm.probe import tag_strings
from tagnorm.record import RecordBuilder

logger = logging.getLogger(__name__)

# Text frame id -> (field, kind)
TEXT_FRAMES: dict[str, tuple[str, ValueKind]] = {
    "TRCK": ("track", ValueKind.POSITION),
    "TPOS": ("disc", ValueKind.POSITION),
    "TBPM": ("bpm", ValueKind.INTEGER),
    "TPE2": ("album_artist", ValueKind.TEXT),
    "TSOT": ("sort_title", ValueKind.TEXT),
    "TSOP": ("sort_artist", ValueKind.TEXT),
    "TSOA": ("sort_album", ValueKind.TEXT),
    "TSO2": ("sort_album_artist", ValueKind.TEXT),
    "TSOC": ("sort_composer", ValueKind.TEXT),
    "TDRL": ("release_date", ValueKind.TEXT),
    "TDOR": ("original_release_date", ValueKind.TEXT),
    "TPE3": ("conductor", ValueKind.TEXT),
    "TPE4": ("remixer", ValueKind.TEXT),
    "TEXT": ("lyricist", ValueKind.TEXT),
    "TPUB": ("label", ValueKind.TEXT),
    "TENC": ("encoded_by", ValueKind.TEXT),
    "TSSE": ("encoder_settings", ValueKind.TEXT),
    "TSRC": ("isrc", ValueKind.TEXT),
    "TCOP": ("copyright", ValueKind.TEXT),
    "TIT3": ("subtitle", ValueKind.TEXT),
    "TIT1": ("grouping", ValueKind.TEXT),
    "TLAN": ("language", ValueKind.TEXT),
    "TKEY": ("musical_key", ValueKind.TEXT),
    "TMOO": ("mood", ValueKind.TEXT),
    "MVNM": ("movement", ValueKind.TEXT),
    "TCMP": ("compilation", ValueKind.FLAG),
}

# Upper-cased TXXX description -> field
USER_TEXT_FIELDS: dict[str, str] = {
    "RELEASETYPE": "release_type",
    "MUSICBRAINZ ALBUM TYPE": "release_type",
    "BARCODE": "barcode",
    "UPC": "barcode",
    "EAN": "barcode",
    "CATALOGNUMBER": "catalog_number",
    "CATALOG NUMBER": "catalog_number",
    "RELEASECOUNTRY": "release_country",
    "MUSICBRAINZ ALBUM RELEASE COUNTRY": "release_country",
    "ARTISTTYPE": "artist_type",
    "MUSICBRAINZ ARTIST TYPE": "artist_type",
    "MUSICBRAINZ ARTIST ID": "musicbrainz_artist_id",
    "MUSICBRAINZ ALBUM ID": "musicbrainz_album_id",
    "MUSICBRAINZ RELEASE TRACK ID": "musicbrainz_track_id",
    "MUSICBRAINZ RELEASE GROUP ID": "musicbrainz_release_group_id",
    "REPLAYGAIN_TRACK_GAIN": "replaygain_track",
    "REPLAYGAIN_ALBUM_GAIN": "replaygain_album",
    "PRODUCER": "producer",
    "ENGINEER": "engineer",
}

MUSICBRAINZ_UFID_OWNER = "http://musicbrainz.org"


def _joined(frame: Any) -> str:
    return ", ".join(tag_strings(frame.text))


class FrameTagExtractor(DialectExtractor):
    """Walks the ID3 frame list once, in file order."""

    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        tags = audio.tags
        if tags is None:
            return
        if not isinstance(tags, ID3):
            logger.debug(f"Expected ID3 tags, got {type(tags).__name__}")
            return
        self.extract_frames(tags.values(), builder)

    def extract_frames(self, frames: Any, builder: RecordBuilder) -> None:
        pictures: list[Picture] = []
        for frame in frames:
            frame_id = frame.FrameID
            if frame_id == "TXXX":
                field = USER_TEXT_FIELDS.get(frame.desc.upper())
                if field is not None:
                    builder.set_text(field, _joined(frame))
            elif frame_id == "COMM":
                builder.set_text_once("comment", _joined(frame))
            elif frame_id == "USLT":
                builder.set_text_once("lyrics", _joined(frame))
            elif frame_id == "APIC":
                pictures.append(Picture(kind=int(frame.type), data=frame.data, mime=frame.mime or None))
            elif frame_id == "UFID":
                if frame.owner == MUSICBRAINZ_UFID_OWNER:
                    builder.set_text("musicbrainz_track_id", frame.data.decode("ascii", errors="replace"))
            elif frame_id in TEXT_FRAMES:
                field, kind = TEXT_FRAMES[frame_id]
                text = _joined(frame)
                if text:
                    apply_value(builder, field, kind, text)

        chosen = resolve_picture(pictures)
        if chosen is not None:
            builder.set_artwork(*chosen)
