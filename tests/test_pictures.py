"""Tests for tagnorm.pictures — embedded picture selection."""

from tagnorm.pictures import FRONT_COVER
from tagnorm.pictures import Picture
from tagnorm.pictures import resolve_picture
from tagnorm.pictures import sniff_mime

import itertools

BACK = 4
OTHER = 0


class TestResolvePicture:
    """Test choosing one picture among candidates."""

    def test_front_cover_constant(self):
        assert FRONT_COVER == 3

    def test_front_cover_wins_in_any_order(self):
        candidates = [
            Picture(BACK, b"b" * 10, "image/jpeg"),
            Picture(FRONT_COVER, b"f" * 20, "image/png"),
            Picture(OTHER, b"o" * 5, "image/gif"),
        ]
        for order in itertools.permutations(candidates):
            assert resolve_picture(order) == (b"f" * 20, "image/png")

    def test_first_picture_without_front_cover(self):
        candidates = [Picture(BACK, b"back", "image/jpeg"), Picture(OTHER, b"other", None)]
        assert resolve_picture(candidates) == (b"back", "image/jpeg")

    def test_empty_pictures_never_selected(self):
        candidates = [Picture(FRONT_COVER, b""), Picture(BACK, b"back")]
        assert resolve_picture(candidates) == (b"back", None)

    def test_first_of_several_front_covers(self):
        candidates = [Picture(FRONT_COVER, b"one"), Picture(FRONT_COVER, b"two")]
        assert resolve_picture(candidates) == (b"one", None)

    def test_nothing_to_choose(self):
        assert resolve_picture([]) is None
        assert resolve_picture([Picture(FRONT_COVER, b"")]) is None


class TestSniffMime:
    """Test image type detection from leading bytes."""

    def test_jpeg(self, jpeg_bytes):
        assert sniff_mime(jpeg_bytes) == "image/jpeg"

    def test_png(self, png_bytes):
        assert sniff_mime(png_bytes) == "image/png"

    def test_gif(self):
        assert sniff_mime(b"GIF89a....") == "image/gif"

    def test_bmp(self):
        assert sniff_mime(b"BM\x00\x00") == "image/bmp"

    def test_webp(self):
        assert sniff_mime(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"

    def test_unknown(self):
        assert sniff_mime(b"not an image") is None
        assert sniff_mime(b"") is None
