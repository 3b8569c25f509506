"""Collection traversal and archive staging."""

from fvc.traversal.extracting import ExtractingTraverser
from fvc.traversal.staging import STAGING_PREFIX, StagingArea
from fvc.traversal.walker import DEFAULT_MAX_DEPTH, PlainTraverser, Traverser, check_root

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "STAGING_PREFIX",
    "ExtractingTraverser",
    "PlainTraverser",
    "StagingArea",
    "Traverser",
    "check_root",
]
