"""Single-file extraction: validate, probe, then layer dialect-specific tags."""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Any

from tagnorm import formats
from tagnorm.errors import InvalidInputError, UnreadableFileError
from tagnorm.formats import FormatSpec
from tagnorm.probe import open_container, open_tags, probe, probe_tags
from tagnorm.record import MetadataRecord, RecordBuilder

logger = logging.getLogger(__name__)


def _validate(path: str | os.PathLike[str]) -> pathlib.Path:
    raw = os.fspath(path)
    if not raw:
        raise InvalidInputError(raw, "Empty path")
    if "://" in raw:
        raise InvalidInputError(raw, "Not a local file path")
    resolved = pathlib.Path(raw)
    if not resolved.is_file():
        raise InvalidInputError(resolved, "No such file")
    return resolved


def _open_row_container(path: pathlib.Path, row: FormatSpec, audio: Any) -> Any | None:
    """Return *audio* if it already is one of the row's containers, else open one."""
    if isinstance(audio, row.containers):
        return audio
    for container in row.containers:
        try:
            return container(path)
        except Exception as exc:
            logger.debug(f"{path.name} is not a valid {container.__name__}: {exc}")
    return None


def extract(path: str | os.PathLike[str]) -> MetadataRecord:
    """Extract normalized metadata from a local audio file.

    Raises InvalidInputError for paths that are not readable local files and
    UnreadableFileError if neither the container nor a bare ID3v2 or APEv2
    tag can be read. A tag whose audio cannot be parsed gives a record with
    generic fields and no codec. Failures inside a dialect extractor only
    cost that dialect's fields.
    """
    source = _validate(path)
    builder = RecordBuilder(source)
    try:
        audio = open_container(source)
    except UnreadableFileError:
        tags = open_tags(source)
        if tags is None:
            raise
        logger.debug(f"Audio of {source} unreadable, using its {type(tags).__name__} tag only")
        probe_tags(tags, builder)
        return builder.build()

    probe(audio, builder)

    row = formats.lookup(source)
    if row is None:
        logger.debug(f"No format row for {source.suffix!r}, generic fields only")
        return builder.build()

    container = _open_row_container(source, row, audio)
    if container is None:
        return builder.build()

    builder.set_text("codec", row.codec)
    if row.reports_bit_depth:
        builder.set_count("bit_depth", int(getattr(container.info, "bits_per_sample", 0) or 0))

    for dialect in row.dialects:
        extractor = formats.EXTRACTORS[dialect]
        try:
            extractor.extract(container, builder)
        except Exception as exc:
            logger.warning(f"{dialect.value} tags of {source} could not be read: {exc}")

    return builder.build()
