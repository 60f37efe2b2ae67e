"""Recursive discovery of supported audio files."""

from __future__ import annotations

import fnmatch
import pathlib
from dataclasses import dataclass, field

from tagnorm.formats import supported_extensions


@dataclass
class ScanResult:
    """Result of scanning a directory."""

    audios: list[pathlib.Path] = field(default_factory=list)
    unsupported: list[pathlib.Path] = field(default_factory=list)
    excluded: int = 0

    @property
    def total(self) -> int:
        return len(self.audios) + len(self.unsupported) + self.excluded


def is_supported(path: pathlib.Path) -> bool:
    """Check whether a file's extension has a format row."""
    return path.suffix.lower() in supported_extensions()


def _matches_any(name: str, patterns: list[str]) -> bool:
    """Check if name matches any of the glob patterns (case-insensitive)."""
    name_lower = name.lower()
    return any(fnmatch.fnmatch(name_lower, p.lower()) for p in patterns)


def is_excluded(
    path: pathlib.Path,
    root: pathlib.Path,
    exclude_file: list[str],
    exclude_dir: list[str],
) -> bool:
    """Check if a file should be excluded by file or directory patterns."""
    if exclude_file and _matches_any(path.name, exclude_file):
        return True
    if exclude_dir:
        rel = path.relative_to(root)
        for part in rel.parent.parts:
            if _matches_any(part, exclude_dir):
                return True
    return False


def scan(
    directory: pathlib.Path,
    *,
    exclude_file: list[str] | None = None,
    exclude_dir: list[str] | None = None,
) -> ScanResult:
    """Recursively scan a directory for audio files.

    Skips hidden files and directories (names starting with '.').
    """
    if not directory.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")

    exclude_file = exclude_file or []
    exclude_dir = exclude_dir or []
    result = ScanResult()
    for path in sorted(directory.rglob("*")):
        if not path.is_file():
            continue
        # Skip hidden files and files inside hidden directories
        rel = path.relative_to(directory)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if is_excluded(path, directory, exclude_file, exclude_dir):
            result.excluded += 1
            continue

        if is_supported(path):
            result.audios.append(path)
        else:
            result.unsupported.append(path)

    return result
