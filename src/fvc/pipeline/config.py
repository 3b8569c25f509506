"""Run configuration for verification code computation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fvc.domain.models import ExtractPolicy
from fvc.hashing.file_hasher import DEFAULT_CHUNK_SIZE
from fvc.traversal.walker import DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class FvcConfig:
    """Configuration for one verification code run.

    `extract_policy` selects the traverser variant: `none` treats archives as
    opaque files, every other policy descends into them.
    """

    extract_policy: ExtractPolicy = ExtractPolicy.SIGNATURE
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = 1
    chunk_size: int = DEFAULT_CHUNK_SIZE
    staging_parent: Path | None = None

    def __post_init__(self) -> None:
        try:
            policy = ExtractPolicy(self.extract_policy)
        except ValueError as exc:
            choices = ", ".join(item.value for item in ExtractPolicy)
            raise ValueError(f"extract_policy must be one of: {choices}") from exc
        object.__setattr__(self, "extract_policy", policy)
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if self.workers <= 0:
            raise ValueError("workers must be > 0")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")

    @property
    def extraction_enabled(self) -> bool:
        return self.extract_policy is not ExtractPolicy.NONE
