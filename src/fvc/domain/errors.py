"""Exception hierarchy for verification code computation."""

from __future__ import annotations


class FvcError(Exception):
    """Base class for all errors raised by `fvc`."""


class RootUnreadableError(FvcError):
    """The top-level input cannot be opened or read."""

    def __init__(self, root: str, reason: str) -> None:
        super().__init__(f"cannot read collection root {root}: {reason}")
        self.root = root
        self.reason = reason


class ExtractionError(FvcError):
    """An archive could not be decoded.

    `opened` is False when the failure happened before the first member was
    produced, i.e. the archive could not be opened at all.
    """

    def __init__(self, label: str, reason: str, *, opened: bool = False) -> None:
        super().__init__(f"error extracting {label}: {reason}")
        self.label = label
        self.reason = reason
        self.opened = opened


class ExtractorUnavailableError(FvcError):
    """Extraction was requested but the libarchive backend cannot be loaded."""


class RecursionLimitExceededError(FvcError):
    """Nested archive descent went past the configured bound."""

    def __init__(self, label: str, depth: int, *, cycle: bool = False) -> None:
        reason = "archive contains itself" if cycle else f"nesting depth {depth} exceeds limit"
        super().__init__(f"{label}: {reason}")
        self.label = label
        self.depth = depth
        self.cycle = cycle
