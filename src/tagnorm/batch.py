"""Concurrent extraction over many files."""

from __future__ import annotations

import logging
import pathlib
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from tagnorm.dispatcher import extract
from tagnorm.errors import ExtractionError
from tagnorm.record import MetadataRecord

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Records and failures of a batch run, keyed by path in input order."""

    records: dict[pathlib.Path, MetadataRecord] = field(default_factory=dict)
    failures: dict[pathlib.Path, ExtractionError] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.records) + len(self.failures)


def _check_workers(workers: int) -> None:
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")


def iter_extract(
    paths: Iterable[pathlib.Path], workers: int = 4,
) -> Iterator[tuple[pathlib.Path, MetadataRecord | ExtractionError]]:
    """Extract files on a thread pool, yielding results as they complete.

    Each item is ``(path, record)`` or ``(path, error)``; a failing file
    never stops the batch.
    """
    _check_workers(workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(extract, p): p for p in paths}
        for future in as_completed(futures):
            path = futures[future]
            try:
                yield path, future.result()
            except ExtractionError as exc:
                logger.warning(f"Skipping {path}: {exc.message}")
                yield path, exc


def extract_batch(paths: Iterable[pathlib.Path], workers: int = 4) -> BatchResult:
    """Extract all *paths* and collect the outcome in input order."""
    _check_workers(workers)
    ordered = list(paths)
    outcomes = dict(iter_extract(ordered, workers))
    result = BatchResult()
    for path in ordered:
        outcome = outcomes.get(path)
        if isinstance(outcome, MetadataRecord):
            result.records[path] = outcome
        elif isinstance(outcome, ExtractionError):
            result.failures[path] = outcome
    return result
