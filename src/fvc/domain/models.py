"""Core domain models for file verification codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import BinaryIO

DIGEST_SIZE = 32
FVC2_HEADER = b"FVC2\x00"


class SkipKind(StrEnum):
    """Reasons an entry did not contribute to a verification code."""

    EXTRACTION_FAILURE = "extraction_failure"
    RECURSION_LIMIT_EXCEEDED = "recursion_limit_exceeded"
    IO_ERROR = "io_error"
    SYMLINK = "symlink"


class ExtractPolicy(StrEnum):
    """How candidate archives are recognised during traversal."""

    NONE = "none"
    SIGNATURE = "signature"
    EXTENSION = "extension"
    ALL = "all"


@dataclass(frozen=True, slots=True, order=True)
class Digest:
    """Immutable SHA-256 value ordered byte-lexicographically."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != DIGEST_SIZE:
            raise ValueError(f"digest must be {DIGEST_SIZE} bytes, got {len(self.value)}")

    @classmethod
    def from_hex(cls, text: str) -> Digest:
        return cls(bytes.fromhex(text))

    def hex(self) -> str:
        return self.value.hex()

    def __bytes__(self) -> bytes:
        return self.value


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One discovered regular file.

    `label` records where the content came from (for example
    `dist.tar.gz!pkg/setup.py`) and is only used in diagnostics.
    """

    path: Path
    label: str

    def open(self) -> BinaryIO:
        return self.path.open("rb")


@dataclass(frozen=True, slots=True)
class VerificationCode:
    """Versioned collection digest (FVC2)."""

    digest: Digest

    def to_bytes(self) -> bytes:
        """Binary form: the `FVC2\\x00` header followed by the digest."""
        return FVC2_HEADER + self.digest.value

    def hex(self) -> str:
        return self.to_bytes().hex()

    def __str__(self) -> str:
        return self.hex()


@dataclass(frozen=True, slots=True)
class SkippedEntry:
    """Entry that was reported instead of hashed."""

    label: str
    kind: SkipKind
    detail: str = ""


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of one verification code computation."""

    code: VerificationCode
    file_count: int
    skipped: tuple[SkippedEntry, ...] = ()

    @property
    def ok(self) -> bool:
        """True when every reachable entry contributed to the code."""
        return len(self.skipped) == 0

    def to_jsonable(self) -> dict[str, object]:
        return {
            "fvc": self.code.hex(),
            "file_count": self.file_count,
            "ok": self.ok,
            "skipped": [
                {"label": entry.label, "kind": str(entry.kind), "detail": entry.detail}
                for entry in self.skipped
            ],
        }
