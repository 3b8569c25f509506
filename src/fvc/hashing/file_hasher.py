"""Streaming SHA-256 digests for single files."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from fvc.domain.models import Digest, FileEntry

DEFAULT_CHUNK_SIZE = 1024 * 1024


def sha256_stream(handle: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    """Hash a binary stream in bounded chunks."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    digest = hashlib.sha256()
    for chunk in iter(lambda: handle.read(chunk_size), b""):
        digest.update(chunk)
    return Digest(digest.digest())


def sha256_file(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    """Compute SHA-256 digest for a file."""
    with path.open("rb") as handle:
        return sha256_stream(handle, chunk_size=chunk_size)


def hash_entry(entry: FileEntry, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    with entry.open() as handle:
        return sha256_stream(handle, chunk_size=chunk_size)
