"""Archive recognition and the extractor boundary.

`fvc.extract.libarchive_backend` is not imported here because loading it
requires the libarchive shared library.
"""

from fvc.extract.members import ArchiveExtractor, ArchiveMember, safe_relative_path
from fvc.extract.signatures import (
    ARCHIVE_EXTENSIONS,
    COMPRESSION_ONLY_FORMATS,
    ArchiveCandidate,
    classify_file,
    extension_confidence,
    sniff_file,
    sniff_format,
)

__all__ = [
    "ARCHIVE_EXTENSIONS",
    "COMPRESSION_ONLY_FORMATS",
    "ArchiveCandidate",
    "ArchiveExtractor",
    "ArchiveMember",
    "classify_file",
    "extension_confidence",
    "safe_relative_path",
    "sniff_file",
    "sniff_format",
]
