"""Traverser variant that descends into archives."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterator

from fvc.domain.errors import (
    ExtractionError,
    ExtractorUnavailableError,
    RecursionLimitExceededError,
    RootUnreadableError,
)
from fvc.domain.models import Digest, ExtractPolicy, FileEntry, SkipKind
from fvc.extract.members import ArchiveExtractor, ArchiveMember, safe_relative_path
from fvc.extract.signatures import ArchiveCandidate, classify_file
from fvc.hashing.file_hasher import DEFAULT_CHUNK_SIZE, sha256_file
from fvc.traversal.staging import StagingArea
from fvc.traversal.walker import DEFAULT_MAX_DEPTH, Traverser

logger = logging.getLogger(__name__)


class ExtractingTraverser(Traverser):
    """Traverser with extraction enabled.

    Every regular file is classified by `policy`. Archives are read member by
    member; each regular member is written to the staging area and handled
    like any other file, so archives nested inside archives are expanded too.
    Descent stops at `max_depth` nested archives, and an archive whose digest
    matches one of its enclosing archives is rejected straight away.

    Staged members stay on disk until the staging area is closed so that
    entries already handed out remain readable.
    """

    def __init__(
        self,
        staging: StagingArea,
        *,
        policy: ExtractPolicy = ExtractPolicy.SIGNATURE,
        max_depth: int = DEFAULT_MAX_DEPTH,
        extractor: ArchiveExtractor | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__()
        if policy is ExtractPolicy.NONE:
            raise ValueError("ExtractingTraverser requires an extracting policy")
        if max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        self.staging = staging
        self.policy = policy
        self.max_depth = max_depth
        self.chunk_size = chunk_size
        self._extractor = extractor

    @property
    def extractor(self) -> ArchiveExtractor:
        """The archive backend, loaded when the first archive is met."""
        if self._extractor is None:
            self._extractor = _load_libarchive_extractor()
        return self._extractor

    def _handle_file(
        self,
        path: Path,
        label: str,
        *,
        depth: int,
        is_root: bool,
        ancestors: frozenset[Digest] = frozenset(),
        logical_name: PurePosixPath | None = None,
    ) -> Iterator[FileEntry]:
        try:
            candidate = classify_file(path, self.policy, name=logical_name)
        except OSError as exc:
            self._read_failure(label, exc, is_root=is_root)
            return
        if candidate is None:
            yield FileEntry(path=path, label=label)
            return
        try:
            yield from self._expand_archive(path, label, candidate, depth=depth, ancestors=ancestors)
        except RecursionLimitExceededError as exc:
            self.skip(label, SkipKind.RECURSION_LIMIT_EXCEEDED, str(exc))
        except ExtractionError as exc:
            if not exc.opened and not candidate.expected:
                if self.policy is ExtractPolicy.ALL:
                    logger.debug("error extracting %s, treating as file: %s", label, exc.reason)
                else:
                    logger.warning("error extracting %s, treating as file: %s", label, exc.reason)
                yield FileEntry(path=path, label=label)
                return
            if is_root and not exc.opened:
                raise RootUnreadableError(label, exc.reason) from exc
            self.skip(label, SkipKind.EXTRACTION_FAILURE, exc.reason)
        except OSError as exc:
            self._read_failure(label, exc, is_root=is_root)

    def _read_failure(self, label: str, exc: OSError, *, is_root: bool) -> None:
        reason = exc.strerror or str(exc)
        if is_root:
            raise RootUnreadableError(label, reason) from exc
        self.skip(label, SkipKind.IO_ERROR, reason)

    def _expand_archive(
        self,
        path: Path,
        label: str,
        candidate: ArchiveCandidate,
        *,
        depth: int,
        ancestors: frozenset[Digest],
    ) -> Iterator[FileEntry]:
        if depth >= self.max_depth:
            raise RecursionLimitExceededError(label, depth + 1)
        archive_digest = sha256_file(path, chunk_size=self.chunk_size)
        if archive_digest in ancestors:
            raise RecursionLimitExceededError(label, depth + 1, cycle=True)

        target_dir = self.staging.new_directory()
        nested_ancestors = ancestors | {archive_digest}
        staged_by_name: dict[str, Path] = {}
        members = self.extractor.iter_members(path, format_hint=candidate.format_hint, label=label)
        for index, member in enumerate(members):
            member_label = f"{label}!{member.name}"
            staged = self._stage_member(member, member_label, target_dir, index, staged_by_name)
            if staged is None:
                continue
            yield from self._handle_file(
                staged,
                member_label,
                depth=depth + 1,
                is_root=False,
                ancestors=nested_ancestors,
                logical_name=PurePosixPath(member.name),
            )
        logger.info("extracted archive %s", label)

    def _stage_member(
        self,
        member: ArchiveMember,
        label: str,
        target_dir: Path,
        index: int,
        staged_by_name: dict[str, Path],
    ) -> Path | None:
        if member.symlink_target is not None:
            self.skip(label, SkipKind.SYMLINK, f"-> {member.symlink_target}")
            return None
        if member.hardlink_target is not None:
            target = staged_by_name.get(_member_key(member.hardlink_target))
            if target is None:
                self.skip(label, SkipKind.EXTRACTION_FAILURE, f"hardlink target {member.hardlink_target} not found")
            return target
        if member.is_directory:
            return None
        if not member.is_regular:
            logger.info("Skipping irregular member %s", label)
            return None

        suffix = PurePosixPath(member.name).suffix[:16]
        staged = target_dir / f"{index:06d}{suffix}"
        try:
            with staged.open("wb") as handle:
                for block in member.blocks:
                    handle.write(block)
        except OSError as exc:
            self.skip(label, SkipKind.IO_ERROR, exc.strerror or str(exc))
            return None
        staged_by_name[_member_key(member.name)] = staged
        return staged


def _load_libarchive_extractor() -> ArchiveExtractor:
    try:
        from fvc.extract.libarchive_backend import LibarchiveExtractor
    except (ImportError, OSError, AttributeError) as exc:
        raise ExtractorUnavailableError(
            "libarchive is required to extract archives. Install the libarchive shared library "
            "or run with extraction disabled (--extract-policy none)."
        ) from exc
    return LibarchiveExtractor()


def _member_key(name: str) -> str:
    relative = safe_relative_path(name)
    return str(relative) if relative is not None else name
