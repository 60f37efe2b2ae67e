"""CLI argument parsing and subcommand dispatch."""

from __future__ import annotations

import argparse
import collections
import json
import logging
import pathlib
import sys

from tqdm import tqdm

from tagnorm.batch import iter_extract
from tagnorm.config import create_config_interactive, load_config, merge_config_into_args
from tagnorm.dispatcher import extract
from tagnorm.errors import ExtractionError
from tagnorm.formats import FORMATS
from tagnorm.logging import configure_logging
from tagnorm.record import MetadataRecord
from tagnorm.scanner import scan

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagnorm",
        description="Read audio file tags of any common format into one normalized record.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors")
    parser.add_argument(
        "--configure", action="store_true",
        help="Interactively create or update the config file",
    )
    sub = parser.add_subparsers(dest="command")

    # --- show ---
    p_show = sub.add_parser("show", help="Print normalized metadata of files as JSON")
    p_show.add_argument("files", nargs="+", type=pathlib.Path, help="Audio files to read")
    p_show.add_argument(
        "--artwork", action="store_true", default=None,
        help="Embed cover art as base64 instead of its size",
    )
    p_show.add_argument("--output", "-o", type=pathlib.Path, help="Write JSON to this file instead of stdout")

    # --- scan ---
    p_scan = sub.add_parser("scan", help="Extract metadata of all audio files below a directory")
    p_scan.add_argument("source", type=pathlib.Path, help="Directory to scan")
    p_scan.add_argument("--workers", "-j", type=int, default=None, help="Parallel extraction workers (default: 4)")
    p_scan.add_argument(
        "--artwork", action="store_true", default=None,
        help="Embed cover art as base64 in the JSON lines output",
    )
    p_scan.add_argument(
        "--exclude", action="append", metavar="PATTERN",
        help="Exclude files matching glob pattern (repeatable)",
    )
    p_scan.add_argument(
        "--exclude-dir", action="append", metavar="PATTERN",
        help="Exclude directories matching glob pattern (repeatable)",
    )
    p_scan.add_argument("--output", "-o", type=pathlib.Path, help="Write JSON lines to this file instead of stdout")

    # --- formats ---
    sub.add_parser("formats", help="List supported file extensions")

    return parser


def _record_json(record: MetadataRecord, artwork: bool, indent: int | None = None) -> str:
    return json.dumps(record.to_dict(include_artwork=artwork), ensure_ascii=False, indent=indent)


def cmd_show(args: argparse.Namespace) -> int:
    """Extract each file and emit its record. Returns the exit status."""
    documents: list[dict[str, object]] = []
    failed = 0
    for path in args.files:
        try:
            record = extract(path)
        except ExtractionError as exc:
            logger.warning(f"Skipping {path}: {exc.message}")
            failed += 1
            continue
        documents.append(record.to_dict(include_artwork=args.artwork))

    text = json.dumps(documents, ensure_ascii=False, indent=2)
    if args.output is not None:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(documents)} record(s) to {args.output}")
    else:
        print(text)

    if failed:
        logger.warning(f"{failed} of {len(args.files)} file(s) could not be read.")
        return 1
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan a directory and extract all supported audio files concurrently."""
    logger.info(f"Scanning {args.source} ...")
    result = scan(args.source, exclude_file=args.exclude, exclude_dir=args.exclude_dir)
    if result.excluded:
        logger.info(f"Excluded {result.excluded} file(s) by pattern.")
    if result.unsupported:
        logger.debug(f"Ignoring {len(result.unsupported)} unsupported file(s).")

    if not result.audios:
        logger.info("No audio files found.")
        return 0

    logger.info(f"Found {len(result.audios)} audio file(s), extracting with {args.workers} worker(s) ...")
    records: dict[pathlib.Path, MetadataRecord] = {}
    failures: dict[pathlib.Path, ExtractionError] = {}
    for path, outcome in tqdm(
        iter_extract(result.audios, workers=args.workers),
        total=len(result.audios), desc="Extracting", unit="file", disable=args.quiet,
    ):
        if isinstance(outcome, ExtractionError):
            failures[path] = outcome
        else:
            records[path] = outcome

    codecs = collections.Counter(r.codec or "unknown" for r in records.values())
    logger.info(f"\nExtracted {len(records)} file(s), {len(failures)} failed.")
    for codec, count in sorted(codecs.items()):
        logger.info(f"  {codec}: {count}")
    for path in sorted(failures):
        logger.info(f"  failed: {path} ({failures[path].message})")

    lines = [_record_json(records[path], args.artwork) for path in result.audios if path in records]
    if args.output is not None:
        with args.output.open("w", encoding="utf-8") as fh:
            for line in lines:
                fh.write(line + "\n")
        logger.info(f"Wrote {len(records)} record(s) to {args.output}")
    else:
        for line in lines:
            print(line)
    return 0


def cmd_formats(args: argparse.Namespace) -> int:
    """List supported extensions with codec label and tag dialects."""
    for ext, row in sorted(FORMATS.items()):
        dialects = " + ".join(d.value for d in row.dialects) or "generic"
        print(f"{ext:<6} {row.codec:<10} {dialects}")
    return 0


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.configure:
        create_config_interactive()
        return

    commands = {
        "show": cmd_show,
        "scan": cmd_scan,
        "formats": cmd_formats,
    }

    cmd_func = commands.get(args.command)
    if cmd_func is None:
        parser.print_help()
        return

    merge_config_into_args(args, load_config())
    try:
        status = cmd_func(args)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        status = 1
    if status:
        sys.exit(status)
