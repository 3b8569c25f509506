"""`fvc`: calculate the file verification code of files, directories and archives."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import BinaryIO, Sequence, TextIO

from fvc.cli.logging_setup import configure_logging
from fvc.domain.errors import FvcError
from fvc.domain.models import ExtractPolicy, VerificationResult
from fvc.pipeline import FvcConfig, compute_collection_code
from fvc.traversal.walker import DEFAULT_MAX_DEPTH

_EXAMPLES = """\
examples:
  fvc ./dist/pkg-1.0/                  code of an unpacked directory
  fvc pkg-1.0.tar.gz pkg-1.0.zip       one code over both archives
  fvc --extract-policy none pkg.zip    treat the archive as an opaque file
  fvc --json -o report.json ./dist     write a JSON report
"""


def build_parser() -> argparse.ArgumentParser:
    """Create parser for verification code calculation."""
    parser = argparse.ArgumentParser(
        prog="fvc",
        description="Calculate the file verification code of the given files.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files, archives or directories to include in the verification code.",
    )
    parser.add_argument(
        "-b",
        "--binary",
        action="store_true",
        help="Output the code in binary form instead of a hex-encoded string.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON report with the code and any skipped entries.",
    )
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write output to this file.")
    parser.add_argument(
        "--extract-policy",
        choices=tuple(item.value for item in ExtractPolicy),
        default=ExtractPolicy.SIGNATURE.value,
        help=(
            "How archives are recognised: by container signature, by file extension, by trying "
            "every file, or never (archives are hashed as plain files)."
        ),
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum number of nested archive levels to extract.",
    )
    parser.add_argument("--workers", type=int, default=1, help="Number of file hashing threads.")
    parser.add_argument(
        "--staging-dir",
        type=Path,
        default=None,
        help="Directory in which the temporary extraction area is created.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Return exit code 1 if any entry was skipped.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeat for more).",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> FvcConfig:
    return FvcConfig(
        extract_policy=ExtractPolicy(args.extract_policy),
        max_depth=args.max_depth,
        workers=args.workers,
        staging_parent=args.staging_dir,
    )


def write_result(
    result: VerificationResult,
    *,
    binary: bool,
    as_json: bool,
    output: Path | None,
    stdout: TextIO,
) -> None:
    """Render `result` as hex, raw bytes or JSON."""
    if binary:
        payload = result.code.to_bytes()
        if output is not None:
            output.write_bytes(payload)
        else:
            buffer: BinaryIO = stdout.buffer  # type: ignore[attr-defined]
            buffer.write(payload)
            buffer.flush()
        return

    if as_json:
        text = json.dumps(result.to_jsonable(), indent=2, sort_keys=True) + "\n"
    else:
        text = result.code.hex() + "\n"
    if output is not None:
        output.write_text(text, encoding="utf-8")
    else:
        stdout.write(text)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
        result = compute_collection_code(args.paths, config=config)
        write_result(
            result,
            binary=args.binary,
            as_json=args.json,
            output=args.output,
            stdout=sys.stdout,
        )
    except (FvcError, ValueError, OSError) as exc:
        print(f"[ERROR] fvc failed: {exc}", file=sys.stderr)
        return 2

    for entry in result.skipped:
        suffix = f" ({entry.detail})" if entry.detail else ""
        print(f"[WARN] {entry.kind}: {entry.label}{suffix}", file=sys.stderr)
    if args.strict and not result.ok:
        print(f"[ERROR] {len(result.skipped)} entries skipped and --strict is set.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
