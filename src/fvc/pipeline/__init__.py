"""Verification code pipeline: configuration and orchestration."""

from fvc.pipeline.config import FvcConfig
from fvc.pipeline.engine import build_traverser, compute_collection_code, compute_verification_code

__all__ = [
    "FvcConfig",
    "build_traverser",
    "compute_collection_code",
    "compute_verification_code",
]
