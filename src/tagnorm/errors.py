"""Errors raised by metadata extraction."""

from __future__ import annotations

import pathlib


class ExtractionError(Exception):
    """Base class for extraction failures of a single file."""

    def __init__(self, path: pathlib.Path | str | None, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
        self.message = message


class InvalidInputError(ExtractionError):
    """The path is missing, not local, or not a regular file."""


class UnreadableFileError(ExtractionError):
    """No tags or audio properties could be obtained from the file."""
