"""Shared pytest fixtures."""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Iterator

import pytest


@pytest.fixture
def libarchive_backend() -> ModuleType:
    """The libarchive backend module, or skip when libarchive cannot be loaded."""
    try:
        return importlib.import_module("fvc.extract.libarchive_backend")
    except (ImportError, OSError, AttributeError) as exc:
        pytest.skip(f"libarchive is not available: {exc}")


@pytest.fixture(autouse=True)
def _reset_fvc_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger("fvc")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
