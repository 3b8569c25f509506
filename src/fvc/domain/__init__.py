"""Domain models and errors for file verification codes."""

from fvc.domain.errors import (
    ExtractionError,
    ExtractorUnavailableError,
    FvcError,
    RecursionLimitExceededError,
    RootUnreadableError,
)
from fvc.domain.models import (
    DIGEST_SIZE,
    FVC2_HEADER,
    Digest,
    ExtractPolicy,
    FileEntry,
    SkipKind,
    SkippedEntry,
    VerificationCode,
    VerificationResult,
)

__all__ = [
    "DIGEST_SIZE",
    "FVC2_HEADER",
    "Digest",
    "ExtractPolicy",
    "ExtractionError",
    "ExtractorUnavailableError",
    "FileEntry",
    "FvcError",
    "RecursionLimitExceededError",
    "RootUnreadableError",
    "SkipKind",
    "SkippedEntry",
    "VerificationCode",
    "VerificationResult",
]
