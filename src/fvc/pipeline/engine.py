"""End-to-end verification code computation."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from itertools import chain
from pathlib import Path
from typing import Iterable, Sequence

from fvc.domain.models import Digest, FileEntry, SkipKind, SkippedEntry, VerificationResult
from fvc.hashing.aggregator import Fvc2Aggregator
from fvc.hashing.file_hasher import hash_entry
from fvc.pipeline.config import FvcConfig
from fvc.traversal.extracting import ExtractingTraverser
from fvc.traversal.staging import StagingArea
from fvc.traversal.walker import PlainTraverser, Traverser, check_root

logger = logging.getLogger(__name__)


def compute_verification_code(root: str | Path, *, config: FvcConfig | None = None) -> VerificationResult:
    """Compute the verification code of a single directory or file."""
    return compute_collection_code((root,), config=config)


def compute_collection_code(
    roots: Sequence[str | Path],
    *,
    config: FvcConfig | None = None,
) -> VerificationResult:
    """Compute one verification code over every file reachable from `roots`.

    Raises `RootUnreadableError` when a root cannot be read. Any other failure
    is recorded in `VerificationResult.skipped` and the code covers the files
    that were hashed.
    """
    if not roots:
        raise ValueError("roots must not be empty")
    config = config if config is not None else FvcConfig()
    paths = tuple(Path(raw) for raw in roots)
    for path in paths:
        check_root(path)

    with StagingArea(config.staging_parent) as staging:
        traverser = build_traverser(config, staging)
        entries = chain.from_iterable(traverser.iter_entries(path) for path in paths)
        digests, hash_failures = _hash_entries(entries, config)
        skipped = sorted(
            [*traverser.skipped, *hash_failures],
            key=lambda entry: (entry.label, entry.kind.value),
        )

    aggregator = Fvc2Aggregator()
    aggregator.extend(digests)
    result = VerificationResult(code=aggregator.code(), file_count=len(digests), skipped=tuple(skipped))
    logger.info("FVC %s over %d files, %d skipped", result.code.hex(), result.file_count, len(result.skipped))
    return result


def build_traverser(config: FvcConfig, staging: StagingArea) -> Traverser:
    """Select the traverser variant for `config`."""
    if not config.extraction_enabled:
        return PlainTraverser()
    return ExtractingTraverser(
        staging,
        policy=config.extract_policy,
        max_depth=config.max_depth,
        chunk_size=config.chunk_size,
    )


def _hash_entries(entries: Iterable[FileEntry], config: FvcConfig) -> tuple[list[Digest], list[SkippedEntry]]:
    if config.workers == 1:
        return _hash_inline(entries, config)
    return _hash_parallel(entries, config)


def _hash_inline(entries: Iterable[FileEntry], config: FvcConfig) -> tuple[list[Digest], list[SkippedEntry]]:
    digests: list[Digest] = []
    failures: list[SkippedEntry] = []
    for entry in entries:
        logger.debug("Adding file %s", entry.label)
        try:
            digests.append(hash_entry(entry, chunk_size=config.chunk_size))
        except OSError as exc:
            failures.append(_io_failure(entry, exc))
    return digests, failures


def _hash_parallel(entries: Iterable[FileEntry], config: FvcConfig) -> tuple[list[Digest], list[SkippedEntry]]:
    digests: list[Digest] = []
    failures: list[SkippedEntry] = []
    executor = ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="fvc-hash")
    try:
        future_map: dict[Future[Digest], FileEntry] = {}
        for entry in entries:
            logger.debug("Adding file %s", entry.label)
            future_map[executor.submit(hash_entry, entry, chunk_size=config.chunk_size)] = entry
        for future in as_completed(future_map):
            entry = future_map[future]
            try:
                digests.append(future.result())
            except OSError as exc:
                failures.append(_io_failure(entry, exc))
    except BaseException:
        executor.shutdown(wait=True, cancel_futures=True)
        raise
    executor.shutdown(wait=True)
    return digests, failures


def _io_failure(entry: FileEntry, exc: OSError) -> SkippedEntry:
    detail = exc.strerror or str(exc)
    logger.warning("Skipping %s (%s): %s", entry.label, SkipKind.IO_ERROR, detail)
    return SkippedEntry(label=entry.label, kind=SkipKind.IO_ERROR, detail=detail)
