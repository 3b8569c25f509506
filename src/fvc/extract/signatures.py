"""Archive recognition by container signature and by file name."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath

from fvc.domain.models import ExtractPolicy

# Enough to reach the ISO 9660 volume descriptor at 0x8001.
SNIFF_LENGTH = 0x8001 + 5

_PREFIX_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"PK\x03\x04", "zip"),
    (b"PK\x05\x06", "zip"),
    (b"PK\x07\x08", "zip"),
    (b"\x1f\x8b", "gzip"),
    (b"\x1f\x9d", "compress"),
    (b"BZh", "bzip2"),
    (b"\xfd7zXZ\x00", "xz"),
    (b"\x28\xb5\x2f\xfd", "zstd"),
    (b"\x04\x22\x4d\x18", "lz4"),
    (b"LZIP", "lzip"),
    (b"7z\xbc\xaf\x27\x1c", "7zip"),
    (b"Rar!\x1a\x07", "rar"),
    (b"MSCF", "cab"),
    (b"070707", "cpio"),
    (b"070701", "cpio"),
    (b"070702", "cpio"),
    (b"\xc7\x71", "cpio"),
    (b"\x71\xc7", "cpio"),
    (b"!<arch>\n", "ar"),
    (b"\xed\xab\xee\xdb", "rpm"),
    (b"xar!", "xar"),
)

COMPRESSION_ONLY_FORMATS = frozenset({"gzip", "compress", "bzip2", "xz", "zstd", "lz4", "lzip"})

# File extensions that mark a file as an archive when guessing by name.
ARCHIVE_EXTENSIONS = frozenset(
    {
        "ar", "arj", "cpio", "dump", "jar", "7z", "zip", "pack", "pack2000", "tar", "bz2", "gz",
        "lzma", "snz", "xz", "z", "tgz", "rpm", "gem", "deb", "whl", "apk", "zst",
    }
)


@dataclass(frozen=True, slots=True)
class ArchiveCandidate:
    """A file that should be offered to the extractor.

    `expected` is True when the file carries a known archive signature, so an
    extraction failure is a real error rather than a wrong guess. Signatures
    of compression-only formats are a few bytes long and also occur at the
    start of plain files, so they never make a candidate expected.
    """

    format_hint: str | None
    expected: bool


def sniff_format(head: bytes) -> str | None:
    """Return a container format name for the leading bytes of a file."""
    for magic, name in _PREFIX_SIGNATURES:
        if head.startswith(magic):
            return name
    if head[257:262] == b"ustar":
        return "tar"
    if head[0x8001:0x8006] == b"CD001":
        return "iso9660"
    return None


def sniff_file(path: Path) -> str | None:
    with path.open("rb") as handle:
        return sniff_format(handle.read(SNIFF_LENGTH))


def extension_confidence(path: PurePath) -> int:
    """Guess from the file name whether `path` is an archive (0, 50 or 100).

    Git object packs share the `.pack` extension with pack200 archives: a
    `.pack` next to a matching `.idx` inside an `objects` directory is not an
    archive, and one with only one of those hints is uncertain.
    """
    suffix = path.suffix[1:].lower()
    if not suffix:
        return 0
    if suffix == "pack":
        has_idx = isinstance(path, Path) and path.with_suffix(".idx").exists()
        in_objects_dir = path.parent.name == "objects"
        if has_idx and in_objects_dir:
            return 0
        if has_idx or in_objects_dir:
            return 50
        return 100
    return 100 if suffix in ARCHIVE_EXTENSIONS else 0


def classify_file(path: Path, policy: ExtractPolicy, *, name: PurePath | None = None) -> ArchiveCandidate | None:
    """Decide whether a regular file should be extracted under `policy`.

    `name` is the logical name used for extension matching when the file on
    disk was staged under a different name.
    """
    if policy is ExtractPolicy.NONE:
        return None
    if path.stat().st_size == 0:
        return None

    format_hint = sniff_file(path)
    if policy is ExtractPolicy.SIGNATURE and format_hint is None:
        return None
    if policy is ExtractPolicy.EXTENSION and extension_confidence(name if name is not None else path) == 0:
        return None
    return ArchiveCandidate(format_hint=format_hint, expected=_is_archive_signature(format_hint))


def _is_archive_signature(format_hint: str | None) -> bool:
    return format_hint is not None and format_hint not in COMPRESSION_ONLY_FORMATS
