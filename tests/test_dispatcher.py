"""Tests for tagnorm.dispatcher — end-to-end single-file extraction."""

from tagnorm.dialects.frames import FrameTagExtractor
from tagnorm.dispatcher import extract
from tagnorm.errors import ExtractionError
from tagnorm.errors import InvalidInputError
from tagnorm.errors import UnreadableFileError
from mutagen.apev2 import APEv2
from mutagen.flac import Picture
from mutagen.id3 import APIC, ID3, TIT2, TPE1, TRCK, TXXX
from unittest.mock import patch

import base64
import logging
import pathlib
import shutil

import pytest


def _picture(kind: int, data: bytes, mime: str) -> Picture:
    pic = Picture()
    pic.type = kind
    pic.mime = mime
    pic.data = data
    return pic


@pytest.fixture
def tagged_wav(make_wav, jpeg_bytes) -> pathlib.Path:
    return make_wav("song.wav", frames=[
        TIT2(encoding=3, text=["Come Together"]),
        TPE1(encoding=3, text=["The Beatles"]),
        TRCK(encoding=3, text=["3/9"]),
        TXXX(encoding=3, desc="BARCODE", text=["0094638246817"]),
        APIC(encoding=3, mime="image/jpeg", type=3, desc="", data=jpeg_bytes),
    ])


class TestWav:
    """Test a frame-based container end to end."""

    def test_generic_and_dialect_fields(self, tagged_wav, jpeg_bytes):
        r = extract(tagged_wav)
        assert r.source_path == tagged_wav
        assert r.title == "Come Together"
        assert r.artist == "The Beatles"
        assert (r.track_number, r.total_tracks) == (3, 9)
        assert r.barcode == "0094638246817"
        assert r.artwork_data == jpeg_bytes
        assert r.artwork_mime_type == "image/jpeg"

    def test_codec_and_properties(self, tagged_wav):
        r = extract(tagged_wav)
        assert r.codec == "WAV"
        assert r.bit_depth == 16
        assert r.sample_rate == 44100
        assert r.channels == 2
        assert r.bitrate == 1411
        assert r.duration == pytest.approx(0.1, abs=0.01)

    def test_accepts_str_path(self, tagged_wav):
        assert extract(str(tagged_wav)).title == "Come Together"

    def test_untagged_file(self, make_wav):
        r = extract(make_wav("plain.wav"))
        assert r.title is None
        assert r.codec == "WAV"
        assert r.sample_rate == 44100

    def test_upper_case_extension(self, tagged_wav):
        renamed = tagged_wav.with_name("SONG.WAV")
        tagged_wav.rename(renamed)
        assert extract(renamed).codec == "WAV"


class TestFlac:
    """Test a comment-map container with a picture list."""

    def test_comments_and_pictures(self, make_flac, jpeg_bytes, png_bytes):
        path = make_flac(
            comments={"title": "Time", "tracknumber": "4/10", "compilation": "1"},
            pictures=[_picture(4, png_bytes, "image/png"), _picture(3, jpeg_bytes, "image/jpeg")],
        )
        r = extract(path)
        assert r.codec == "FLAC"
        assert r.title == "Time"
        assert (r.track_number, r.total_tracks) == (4, 10)
        assert r.compilation is True
        assert r.artwork_data == jpeg_bytes
        assert r.bit_depth == 16
        assert r.duration == pytest.approx(1.0)

    def test_picture_list_wins_over_comment_block(self, make_flac, jpeg_bytes, png_bytes):
        block = base64.b64encode(_picture(3, png_bytes, "image/png").write()).decode("ascii")
        path = make_flac(
            comments={"METADATA_BLOCK_PICTURE": block},
            pictures=[_picture(3, jpeg_bytes, "image/jpeg")],
        )
        r = extract(path)
        assert r.artwork_data == jpeg_bytes
        assert r.artwork_mime_type == "image/jpeg"

    def test_comment_block_picture_ignored(self, make_flac, png_bytes):
        block = base64.b64encode(_picture(3, png_bytes, "image/png").write()).decode("ascii")
        path = make_flac(comments={"title": "Blockonly", "METADATA_BLOCK_PICTURE": block})
        r = extract(path)
        assert r.title == "Blockonly"
        assert r.artwork_data is None


class TestPartialResults:
    """Test generic-only fallbacks."""

    def test_unmapped_extension_keeps_generic_fields(self, tagged_wav):
        other = tagged_wav.with_suffix(".xyz")
        shutil.copy(tagged_wav, other)
        r = extract(other)
        assert r.codec is None
        assert r.title == "Come Together"
        assert r.artist == "The Beatles"
        assert r.duration > 0
        # dialect-only fields need a format row
        assert r.barcode is None

    def test_container_mismatch_skips_dialect(self, make_flac):
        path = make_flac(comments={"title": "Time", "tracknumber": "4/10"})
        mislabeled = path.with_suffix(".ogg")
        path.rename(mislabeled)
        r = extract(mislabeled)
        assert r.codec is None
        assert r.title == "Time"
        assert r.track_number == 4
        assert r.total_tracks == 0

    def test_extractor_failure_absorbed(self, tagged_wav, caplog):
        with patch.object(FrameTagExtractor, "extract", side_effect=RuntimeError("boom")):
            with caplog.at_level(logging.WARNING, logger="tagnorm"):
                r = extract(tagged_wav)
        assert r.title == "Come Together"
        assert r.codec == "WAV"
        assert "boom" in caplog.text


class TestTagOnly:
    """Test files whose tag is readable but whose audio is not."""

    def test_id3_tag_before_garbage_audio(self, tmp_path):
        path = tmp_path / "broken.mp3"
        path.write_bytes(b"")
        tags = ID3()
        tags.add(TIT2(encoding=3, text=["T"]))
        tags.add(TPE1(encoding=3, text=["A"]))
        tags.add(TRCK(encoding=3, text=["2/5"]))
        tags.save(path)
        with path.open("ab") as fh:
            fh.write(b"\x00" * 5000)
        r = extract(path)
        assert r.title == "T"
        assert r.artist == "A"
        assert r.track_number == 2
        assert r.codec is None
        assert r.duration == 0.0

    def test_apev2_tag_after_garbage_audio(self, tmp_path):
        path = tmp_path / "broken.ape"
        path.write_bytes(b"\x01junk" * 100)
        tags = APEv2()
        tags["Title"] = "Item Title"
        tags.save(path)
        r = extract(path)
        assert r.title == "Item Title"
        assert r.codec is None


class TestErrors:
    """Test rejected inputs."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidInputError):
            extract(tmp_path / "missing.mp3")

    def test_directory(self, tmp_path):
        with pytest.raises(InvalidInputError):
            extract(tmp_path)

    def test_empty_path(self):
        with pytest.raises(InvalidInputError):
            extract("")

    def test_url(self):
        with pytest.raises(InvalidInputError):
            extract("http://example.org/song.mp3")

    def test_zero_byte_file(self, tmp_path):
        empty = tmp_path / "empty.mp3"
        empty.write_bytes(b"")
        with pytest.raises(UnreadableFileError):
            extract(empty)

    def test_garbage_file(self, tmp_path):
        junk = tmp_path / "junk.flac"
        junk.write_bytes(b"this is not audio" * 10)
        with pytest.raises(UnreadableFileError):
            extract(junk)

    def test_unknown_content_and_extension(self, tmp_path):
        junk = tmp_path / "notes.xyz"
        junk.write_text("hello")
        with pytest.raises(UnreadableFileError):
            extract(junk)

    def test_errors_share_a_base(self, tmp_path):
        with pytest.raises(ExtractionError) as excinfo:
            extract(tmp_path / "missing.mp3")
        assert excinfo.value.path == tmp_path / "missing.mp3"
