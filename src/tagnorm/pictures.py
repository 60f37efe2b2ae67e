"""Selection of the best embedded picture among candidates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mutagen.id3 import PictureType

FRONT_COVER = int(PictureType.COVER_FRONT)

# (signature, mime type), checked in order
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
]


@dataclass(frozen=True)
class Picture:
    """An embedded picture candidate as found in a tag."""

    kind: int
    data: bytes
    mime: str | None = None

    @property
    def is_front_cover(self) -> bool:
        return self.kind == FRONT_COVER


def resolve_picture(candidates: Iterable[Picture]) -> tuple[bytes, str | None] | None:
    """Pick the front cover if there is one, otherwise the first picture.

    Pictures without data are never selected. Returns (data, mime) or None.
    """
    usable = [p for p in candidates if p.data]
    for picture in usable:
        if picture.is_front_cover:
            return picture.data, picture.mime
    if usable:
        return usable[0].data, usable[0].mime
    return None


def sniff_mime(data: bytes) -> str | None:
    """Guess an image MIME type from its leading bytes."""
    for signature, mime in _SIGNATURES:
        if data.startswith(signature):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None
