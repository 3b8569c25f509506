"""Run-scoped temporary storage for extracted archive members."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

STAGING_PREFIX = "fvc_extracted_archive."


class StagingArea:
    """Temporary directory owned by exactly one verification run.

    Use as a context manager; the directory and everything extracted into it
    is removed on exit, including when the run fails or is interrupted.
    """

    def __init__(self, parent: Path | None = None, *, prefix: str = STAGING_PREFIX) -> None:
        self.parent = parent
        self.prefix = prefix
        self._tmp: tempfile.TemporaryDirectory[str] | None = None
        self._counter = 0

    @property
    def root(self) -> Path:
        if self._tmp is None:
            raise RuntimeError("staging area is not open")
        return Path(self._tmp.name)

    @property
    def is_open(self) -> bool:
        return self._tmp is not None

    def open(self) -> StagingArea:
        if self._tmp is not None:
            raise RuntimeError("staging area is already open")
        if self.parent is not None:
            self.parent.mkdir(parents=True, exist_ok=True)
        self._tmp = tempfile.TemporaryDirectory(prefix=self.prefix, dir=self.parent)
        logger.debug("Opened staging area %s", self._tmp.name)
        return self

    def new_directory(self) -> Path:
        """Create a fresh directory for one archive's members."""
        self._counter += 1
        directory = self.root / f"{self._counter:06d}"
        directory.mkdir()
        return directory

    def close(self) -> None:
        if self._tmp is None:
            return
        name = self._tmp.name
        try:
            self._tmp.cleanup()
        finally:
            self._tmp = None
        logger.debug("Removed staging area %s", name)

    def __enter__(self) -> StagingArea:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
