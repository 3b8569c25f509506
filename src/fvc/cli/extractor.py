"""`fvc-extract`: extract an archive with the same backend `fvc` uses."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from fvc.cli.logging_setup import configure_logging
from fvc.domain.errors import FvcError
from fvc.extract.libarchive_backend import extract_to_directory
from fvc.extract.signatures import sniff_file
from fvc.traversal.staging import StagingArea

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create parser for archive extraction."""
    parser = argparse.ArgumentParser(
        prog="fvc-extract",
        description=(
            "Extract an archive. Without a target the archive is extracted into a temporary "
            "directory that is removed afterwards, which checks that it can be read."
        ),
    )
    parser.add_argument("source", type=Path, help="Archive to extract.")
    parser.add_argument("target", type=Path, nargs="?", default=None, help="Destination directory.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeat for more).",
    )
    return parser


def run_extract_from_args(args: argparse.Namespace) -> int:
    """Extract `args.source` and return the number of files written."""
    source = args.source
    if not source.is_file():
        raise FileNotFoundError(f"archive does not exist: {source}")
    format_hint = sniff_file(source)

    if args.target is not None:
        logger.info("extracting %s to %s", source, args.target)
        return extract_to_directory(source, args.target, format_hint=format_hint)

    with StagingArea(prefix="fvc_extract.") as staging:
        target = staging.new_directory()
        logger.info("extracting %s to %s", source, target)
        return extract_to_directory(source, target, format_hint=format_hint)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        written = run_extract_from_args(args)
    except (FvcError, OSError) as exc:
        print(f"[ERROR] extraction failed: {exc}", file=sys.stderr)
        return 2

    print(f"source: {args.source}")
    print(f"target: {args.target if args.target is not None else '(temporary, removed)'}")
    print(f"files: {written}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
