"""Directory traversal shared by both traverser variants."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from fvc.domain.errors import RootUnreadableError
from fvc.domain.models import FileEntry, SkipKind, SkippedEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


class Traverser(ABC):
    """Discover every regular file reachable from a collection root.

    Symbolic links below the root are never followed; each one is reported as
    a `symlink` skipped entry. The root itself may be a symlink and is
    followed. Sockets, FIFOs and device nodes are ignored. Entries come out in
    no particular order.
    """

    def __init__(self) -> None:
        self.skipped: list[SkippedEntry] = []

    def iter_entries(self, root: Path) -> Iterator[FileEntry]:
        check_root(root)
        label = str(root)
        if root.is_dir():
            logger.info("Adding directory %s", root)
            for path in self._walk(root):
                yield from self._handle_file(path, str(path), depth=0, is_root=False)
        else:
            yield from self._handle_file(root, label, depth=0, is_root=True)

    def skip(self, label: str, kind: SkipKind, detail: str = "") -> None:
        logger.warning("Skipping %s (%s): %s", label, kind, detail)
        self.skipped.append(SkippedEntry(label=label, kind=kind, detail=detail))

    @abstractmethod
    def _handle_file(self, path: Path, label: str, *, depth: int, is_root: bool) -> Iterator[FileEntry]:
        """Yield the entries that `path` contributes."""

    def _walk(self, root: Path) -> Iterator[Path]:
        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                children = list(os.scandir(directory))
            except OSError as exc:
                if directory == root:
                    raise RootUnreadableError(str(root), exc.strerror or str(exc)) from exc
                self.skip(str(directory), SkipKind.IO_ERROR, exc.strerror or str(exc))
                continue
            for child in children:
                child_path = Path(child.path)
                try:
                    if child.is_symlink():
                        self.skip(str(child_path), SkipKind.SYMLINK, f"-> {os.readlink(child_path)}")
                    elif child.is_dir(follow_symlinks=False):
                        pending.append(child_path)
                    elif child.is_file(follow_symlinks=False):
                        yield child_path
                    else:
                        logger.info("Skipping irregular file %s", child_path)
                except OSError as exc:
                    self.skip(str(child_path), SkipKind.IO_ERROR, exc.strerror or str(exc))


class PlainTraverser(Traverser):
    """Traverser with extraction disabled: archives are opaque files."""

    def _handle_file(self, path: Path, label: str, *, depth: int, is_root: bool) -> Iterator[FileEntry]:
        yield FileEntry(path=path, label=label)


def check_root(root: Path) -> None:
    """Raise `RootUnreadableError` unless `root` is a readable file or directory."""
    if not root.exists():
        raise RootUnreadableError(str(root), "path does not exist")
    if root.is_dir():
        if not os.access(root, os.R_OK | os.X_OK):
            raise RootUnreadableError(str(root), "permission denied")
        return
    if not root.is_file():
        raise RootUnreadableError(str(root), "not a regular file or directory")
    try:
        with root.open("rb"):
            pass
    except OSError as exc:
        raise RootUnreadableError(str(root), exc.strerror or str(exc)) from exc
