"""Shared fixtures for tagnorm tests."""

import logging
import pathlib
import struct
import wave

import pytest
from mutagen.flac import FLAC
from mutagen.wave import WAVE

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by configure_logging between tests."""
    yield
    package_logger = logging.getLogger("tagnorm")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def tmp_source(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a temporary source directory."""
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A minimal JPEG (valid JFIF header)."""
    return JPEG_BYTES


@pytest.fixture
def png_bytes() -> bytes:
    """The start of a PNG file (signature + IHDR)."""
    return PNG_BYTES


def write_wav(path: pathlib.Path, frames=(), seconds: float = 0.1) -> pathlib.Path:
    """Write a silent 16-bit stereo 44.1 kHz WAV file, optionally with ID3 frames."""
    with wave.open(str(path), "wb") as w:
        w.setnchannels(2)
        w.setsampwidth(2)
        w.setframerate(44100)
        w.writeframes(b"\x00\x00\x00\x00" * int(44100 * seconds))
    if frames:
        audio = WAVE(path)
        audio.add_tags()
        for frame in frames:
            audio.tags.add(frame)
        audio.save()
    return path


def write_flac(path: pathlib.Path, comments=None, pictures=()) -> pathlib.Path:
    """Write a FLAC file holding only metadata blocks (1 s, 44.1 kHz, 16-bit stereo)."""
    packed = (44100 << 44) | (1 << 41) | (15 << 36) | 44100
    streaminfo = (
        struct.pack(">HH", 4096, 4096)
        + b"\x00" * 6
        + struct.pack(">Q", packed)
        + b"\x00" * 16
    )
    path.write_bytes(b"fLaC" + bytes([0x80, 0, 0, len(streaminfo)]) + streaminfo)
    if comments or pictures:
        audio = FLAC(path)
        audio.add_tags()
        for key, value in (comments or {}).items():
            audio[key] = value
        for picture in pictures:
            audio.add_picture(picture)
        audio.save()
    return path


@pytest.fixture
def make_wav(tmp_path: pathlib.Path):
    """Factory for tagged WAV files inside tmp_path."""

    def _make(name: str = "song.wav", frames=(), seconds: float = 0.1) -> pathlib.Path:
        return write_wav(tmp_path / name, frames, seconds)

    return _make


@pytest.fixture
def make_flac(tmp_path: pathlib.Path):
    """Factory for tagged FLAC files inside tmp_path."""

    def _make(name: str = "song.flac", comments=None, pictures=()) -> pathlib.Path:
        return write_flac(tmp_path / name, comments, pictures)

    return _make
