"""Extension registry: codec labels, containers and tag dialects per format."""

from __future__ import annotations

import enum
import pathlib
from dataclasses import dataclass

from mutagen import FileType
from mutagen.aac import AAC
from mutagen.aiff import AIFF
from mutagen.asf import ASF
from mutagen.dsdiff import DSDIFF
from mutagen.dsf import DSF
from mutagen.flac import FLAC
from mutagen.monkeysaudio import MonkeysAudio
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4
from mutagen.musepack import Musepack
from mutagen.oggflac import OggFLAC
from mutagen.oggopus import OggOpus
from mutagen.oggspeex import OggSpeex
from mutagen.oggvorbis import OggVorbis
from mutagen.trueaudio import TrueAudio
from mutagen.wave import WAVE
from mutagen.wavpack import WavPack

from tagnorm.dialects.atoms import AtomMapExtractor
from tagnorm.dialects.base import DialectExtractor
from tagnorm.dialects.comments import CommentMapExtractor, PictureListExtractor
from tagnorm.dialects.frames import FrameTagExtractor
from tagnorm.dialects.items import ItemListExtractor


class Dialect(enum.Enum):
    """Tagging scheme of a container."""

    FRAME_BASED = "frame"
    ATOM_MAP = "atom"
    COMMENT_MAP = "comment"
    ITEM_LIST = "item"
    PICTURE_LIST = "picture"


@dataclass(frozen=True)
class FormatSpec:
    """How files with one extension are read."""

    extension: str
    codec: str
    containers: tuple[type[FileType], ...]
    dialects: tuple[Dialect, ...] = ()
    reports_bit_depth: bool = False


_FRAME = (Dialect.FRAME_BASED,)
_ATOM = (Dialect.ATOM_MAP,)
_COMMENT = (Dialect.COMMENT_MAP,)
_ITEM = (Dialect.ITEM_LIST,)

_ROWS: list[FormatSpec] = [
    # Lossy
    FormatSpec(".mp3", "MP3", (MP3,), _FRAME),
    FormatSpec(".mp2", "MP3", (MP3,), _FRAME),
    FormatSpec(".m4a", "AAC", (MP4,), _ATOM),
    FormatSpec(".m4b", "AAC", (MP4,), _ATOM),
    FormatSpec(".m4p", "AAC", (MP4,), _ATOM),
    FormatSpec(".mp4", "AAC", (MP4,), _ATOM),
    FormatSpec(".aac", "AAC", (MP4, AAC), _ATOM),
    FormatSpec(".ogg", "Vorbis", (OggVorbis,), _COMMENT),
    FormatSpec(".opus", "Opus", (OggOpus,), _COMMENT),
    FormatSpec(".spx", "Speex", (OggSpeex,), _COMMENT),
    FormatSpec(".mpc", "Musepack", (Musepack,), _ITEM),
    FormatSpec(".wma", "WMA", (ASF,)),
    FormatSpec(".asf", "WMA", (ASF,)),
    # Lossless
    FormatSpec(".flac", "FLAC", (FLAC,), (Dialect.COMMENT_MAP, Dialect.PICTURE_LIST), reports_bit_depth=True),
    FormatSpec(".oga", "OGG FLAC", (OggFLAC,), _COMMENT),
    FormatSpec(".ape", "APE", (MonkeysAudio,), _ITEM),
    FormatSpec(".wv", "WavPack", (WavPack,), _ITEM),
    FormatSpec(".tta", "TrueAudio", (TrueAudio,), _FRAME, reports_bit_depth=True),
    FormatSpec(".wav", "WAV", (WAVE,), _FRAME, reports_bit_depth=True),
    FormatSpec(".aiff", "AIFF", (AIFF,), _FRAME, reports_bit_depth=True),
    FormatSpec(".aif", "AIFF", (AIFF,), _FRAME, reports_bit_depth=True),
    FormatSpec(".dsf", "DSF", (DSF,), _FRAME),
    FormatSpec(".dff", "DSDIFF", (DSDIFF,)),
]

FORMATS: dict[str, FormatSpec] = {row.extension: row for row in _ROWS}

EXTRACTORS: dict[Dialect, DialectExtractor] = {
    Dialect.FRAME_BASED: FrameTagExtractor(),
    Dialect.ATOM_MAP: AtomMapExtractor(),
    Dialect.COMMENT_MAP: CommentMapExtractor(),
    Dialect.ITEM_LIST: ItemListExtractor(),
    Dialect.PICTURE_LIST: PictureListExtractor(),
}


def lookup(path: pathlib.Path) -> FormatSpec | None:
    """Return the format row for a path's extension (case-insensitive)."""
    return FORMATS.get(path.suffix.lower())


def supported_extensions() -> set[str]:
    return set(FORMATS)
