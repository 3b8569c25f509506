"""Tests for the run-scoped staging area."""

from __future__ import annotations

from pathlib import Path

import pytest

from fvc.traversal import STAGING_PREFIX, StagingArea


def test_staging_area_creates_numbered_directories_and_cleans_up(tmp_path: Path) -> None:
    with StagingArea(tmp_path / "stage") as staging:
        root = staging.root
        assert root.name.startswith(STAGING_PREFIX)
        first = staging.new_directory()
        second = staging.new_directory()
        (first / "member").write_bytes(b"x")
        assert first.name == "000001"
        assert second.name == "000002"
    assert not root.exists()
    assert not staging.is_open


def test_staging_area_cleans_up_on_error(tmp_path: Path) -> None:
    staging = StagingArea(tmp_path)
    with pytest.raises(RuntimeError, match="boom"):
        with staging:
            (staging.new_directory() / "member").write_bytes(b"x")
            root = staging.root
            raise RuntimeError("boom")
    assert not root.exists()
    assert list(tmp_path.iterdir()) == []


def test_staging_area_requires_open() -> None:
    staging = StagingArea()
    with pytest.raises(RuntimeError):
        staging.new_directory()
    staging.close()


def test_staging_area_cannot_open_twice(tmp_path: Path) -> None:
    with StagingArea(tmp_path) as staging:
        with pytest.raises(RuntimeError):
            staging.open()
