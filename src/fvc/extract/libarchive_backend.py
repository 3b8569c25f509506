"""libarchive-backed archive member reader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Iterator

import libarchive  # type: ignore[import-untyped]
from libarchive.exception import ArchiveError  # type: ignore[import-untyped]

from fvc.domain.errors import ExtractionError
from fvc.extract.members import ArchiveMember, safe_relative_path
from fvc.extract.signatures import COMPRESSION_ONLY_FORMATS

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 64 * 1024


class LibarchiveExtractor:
    """Read archive members through libarchive.

    Every format and filter libarchive was built with is enabled. Inputs with
    a compression-only signature (for example a bare `.gz`) that do not wrap
    an archive are retried in raw mode, which yields the decompressed payload
    as a single member named `data`.

    A raw read in which no filter applied would only echo the input back, so
    it is reported as an extraction failure instead.
    """

    def __init__(self, *, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        if block_size <= 0:
            raise ValueError("block_size must be > 0")
        self.block_size = block_size

    def iter_members(
        self,
        source: Path | BinaryIO,
        *,
        format_hint: str | None = None,
        label: str | None = None,
    ) -> Iterator[ArchiveMember]:
        """Yield members of `source`, raising `ExtractionError` on decode failures."""
        label = label if label is not None else _describe(source)
        formats = ["all"]
        if format_hint in COMPRESSION_ONLY_FORMATS:
            formats.append("raw")

        for attempt, format_name in enumerate(formats):
            produced = 0
            try:
                with self._reader(source, format_name) as archive:
                    if format_name == "raw" and not _decompression_filters(archive):
                        raise ExtractionError(label, "no compression filter recognised", opened=False)
                    for entry in archive:
                        produced += 1
                        yield _member_from_entry(entry, label)
                return
            except ArchiveError as exc:
                if produced == 0 and attempt + 1 < len(formats):
                    logger.debug("%s is not a %s archive, retrying as %s", label, format_name, formats[attempt + 1])
                    _rewind(source, label)
                    continue
                raise ExtractionError(label, str(exc), opened=produced > 0) from exc
            except OSError as exc:
                raise ExtractionError(label, str(exc), opened=produced > 0) from exc

    def _reader(self, source: Path | BinaryIO, format_name: str) -> Any:
        if isinstance(source, (str, Path)):
            return libarchive.file_reader(
                str(source),
                format_name=format_name,
                filter_name="all",
                block_size=self.block_size,
            )
        return libarchive.stream_reader(
            source,
            format_name=format_name,
            filter_name="all",
            block_size=self.block_size,
        )


def extract_to_directory(
    source: Path,
    target_dir: Path,
    *,
    extractor: LibarchiveExtractor | None = None,
    format_hint: str | None = None,
) -> int:
    """Extract regular-file members of `source` below `target_dir`.

    Directory structure is kept, links are skipped. Returns the number of files
    written.
    """
    extractor = extractor if extractor is not None else LibarchiveExtractor()
    target_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    for member in extractor.iter_members(source, format_hint=format_hint, label=str(source)):
        if member.symlink_target is not None or member.hardlink_target is not None:
            logger.info("Skipping link member %s in %s", member.name, source)
            continue
        if member.is_directory or not member.is_regular:
            continue
        relative = safe_relative_path(member.name)
        if relative is None:
            logger.warning("Skipping member with unusable name %r in %s", member.name, source)
            continue
        destination = target_dir.joinpath(*relative.parts)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("wb") as handle:
            for block in member.blocks:
                handle.write(block)
        written += 1
    return written


def _member_from_entry(entry: Any, label: str) -> ArchiveMember:
    name = entry.pathname
    if isinstance(name, bytes):
        name = os.fsdecode(name)
    symlink_target = _text(entry.linkpath) if entry.issym else None
    hardlink_target = _text(entry.linkpath) if entry.islnk else None
    return ArchiveMember(
        name=str(name),
        is_directory=bool(entry.isdir),
        is_regular=bool(entry.isfile),
        blocks=_iter_blocks(entry, f"{label}!{name}"),
        symlink_target=symlink_target,
        hardlink_target=hardlink_target,
    )


def _decompression_filters(archive: Any) -> list[str]:
    names = (_text(name) for name in archive.filter_names)
    return [name for name in names if name and name != "none"]


def _iter_blocks(entry: Any, label: str) -> Iterator[bytes]:
    try:
        yield from entry.get_blocks()
    except ArchiveError as exc:
        raise ExtractionError(label, str(exc), opened=True) from exc


def _text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return os.fsdecode(value)
    return str(value)


def _rewind(source: Path | BinaryIO, label: str) -> None:
    if isinstance(source, (str, Path)):
        return
    if not source.seekable():
        raise ExtractionError(label, "stream is not seekable, cannot retry in raw mode")
    source.seek(0)


def _describe(source: Path | BinaryIO) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))
