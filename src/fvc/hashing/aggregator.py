"""Order-independent combination of per-file digests."""

from __future__ import annotations

import hashlib
from typing import BinaryIO, Iterable

from fvc.domain.models import Digest, VerificationCode
from fvc.hashing.file_hasher import DEFAULT_CHUNK_SIZE, sha256_stream


class Fvc2Aggregator:
    """Accumulate digests and produce the FVC2 verification code.

    The code is the SHA-256 of the byte-lexicographically sorted
    concatenation of every digest added. Duplicate digests are kept, so a
    collection holding the same content twice differs from one holding it
    once. An aggregator with no digests yields the hash of zero bytes.
    """

    def __init__(self) -> None:
        self._digests: list[Digest] = []
        self._sorted = True

    def __len__(self) -> int:
        return len(self._digests)

    def add_digest(self, digest: Digest | bytes) -> None:
        """Add a precomputed SHA-256 digest."""
        if not isinstance(digest, Digest):
            digest = Digest(bytes(digest))
        self._digests.append(digest)
        self._sorted = False

    def extend(self, digests: Iterable[Digest | bytes]) -> None:
        for digest in digests:
            self.add_digest(digest)

    def read(self, handle: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
        """Hash a stream and add its digest."""
        digest = sha256_stream(handle, chunk_size=chunk_size)
        self.add_digest(digest)
        return digest

    def sorted_digests(self) -> tuple[Digest, ...]:
        if not self._sorted:
            self._digests.sort()
            self._sorted = True
        return tuple(self._digests)

    def code(self) -> VerificationCode:
        combined = hashlib.sha256()
        for digest in self.sorted_digests():
            combined.update(digest.value)
        return VerificationCode(Digest(combined.digest()))

    def sum(self) -> bytes:
        """Binary verification code."""
        return self.code().to_bytes()

    def hex(self) -> str:
        return self.code().hex()


def verification_code_of(digests: Iterable[Digest | bytes]) -> VerificationCode:
    """Create the verification code for an iterable of digests."""
    aggregator = Fvc2Aggregator()
    aggregator.extend(digests)
    return aggregator.code()
