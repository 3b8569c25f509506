"""Extractor boundary types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, Iterator, Protocol


@dataclass(frozen=True, slots=True)
class ArchiveMember:
    """One member of an archive.

    `blocks` streams the member content and is only valid until the next
    member is requested from the archive.
    """

    name: str
    is_directory: bool
    is_regular: bool
    blocks: Iterable[bytes]
    symlink_target: str | None = None
    hardlink_target: str | None = None


class ArchiveExtractor(Protocol):
    """Anything that can list and stream the members of an archive."""

    def iter_members(
        self,
        source: Path | BinaryIO,
        *,
        format_hint: str | None = None,
        label: str | None = None,
    ) -> Iterator[ArchiveMember]: ...


def safe_relative_path(name: str) -> PurePosixPath | None:
    """Map an archive member name onto a relative path that cannot escape its root."""
    parts = [part for part in name.replace("\\", "/").split("/") if part not in ("", ".", "..")]
    if not parts:
        return None
    return PurePosixPath(*parts)
