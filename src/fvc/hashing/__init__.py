"""Per-file hashing and collection digest aggregation."""

from fvc.hashing.aggregator import Fvc2Aggregator, verification_code_of
from fvc.hashing.file_hasher import DEFAULT_CHUNK_SIZE, hash_entry, sha256_file, sha256_stream

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "Fvc2Aggregator",
    "hash_entry",
    "sha256_file",
    "sha256_stream",
    "verification_code_of",
]
