"""Tests for plain directory traversal."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from fvc.domain.errors import RootUnreadableError
from fvc.domain.models import SkipKind
from fvc.traversal import PlainTraverser, Traverser, check_root, walker


def test_plain_traverser_finds_nested_files(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "b").mkdir()
    (tmp_path / "empty").mkdir()
    (tmp_path / "top.txt").write_text("top\n", encoding="utf-8")
    (tmp_path / "a" / "b" / "deep.txt").write_text("deep\n", encoding="utf-8")

    traverser = PlainTraverser()
    entries = list(traverser.iter_entries(tmp_path))

    assert sorted(entry.path.relative_to(tmp_path).as_posix() for entry in entries) == [
        "a/b/deep.txt",
        "top.txt",
    ]
    assert traverser.skipped == []


def test_plain_traverser_reports_symlinks_without_following(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("secret\n", encoding="utf-8")
    (root / "file.txt").write_text("file\n", encoding="utf-8")
    os.symlink(outside, root / "dir-link")
    os.symlink(root / "file.txt", root / "file-link")

    traverser = PlainTraverser()
    entries = list(traverser.iter_entries(root))

    assert [entry.path.name for entry in entries] == ["file.txt"]
    assert sorted((Path(item.label).name, item.kind) for item in traverser.skipped) == [
        ("dir-link", SkipKind.SYMLINK),
        ("file-link", SkipKind.SYMLINK),
    ]


def test_plain_traverser_accepts_single_file_root(tmp_path: Path) -> None:
    path = tmp_path / "single.txt"
    path.write_text("single\n", encoding="utf-8")
    entries = list(PlainTraverser().iter_entries(path))
    assert [(entry.path, entry.label) for entry in entries] == [(path, str(path))]


def test_empty_directory_yields_nothing(tmp_path: Path) -> None:
    assert list(PlainTraverser().iter_entries(tmp_path)) == []


def test_check_root_rejects_missing_path(tmp_path: Path) -> None:
    with pytest.raises(RootUnreadableError, match="path does not exist"):
        check_root(tmp_path / "missing")


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires FIFOs")
def test_check_root_rejects_special_files(tmp_path: Path) -> None:
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    with pytest.raises(RootUnreadableError, match="not a regular file or directory"):
        check_root(fifo)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires FIFOs")
def test_plain_traverser_ignores_special_files(tmp_path: Path) -> None:
    os.mkfifo(tmp_path / "pipe")
    (tmp_path / "file.txt").write_text("file\n", encoding="utf-8")
    traverser = PlainTraverser()
    assert [entry.path.name for entry in traverser.iter_entries(tmp_path)] == ["file.txt"]
    assert traverser.skipped == []


def test_unreadable_subdirectory_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("hidden\n", encoding="utf-8")
    (tmp_path / "open.txt").write_text("open\n", encoding="utf-8")
    real_scandir = os.scandir

    def scandir(path):
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", scandir)
    traverser = PlainTraverser()

    assert [entry.path.name for entry in traverser.iter_entries(tmp_path)] == ["open.txt"]
    assert [(item.label, item.kind, item.detail) for item in traverser.skipped] == [
        (str(locked), SkipKind.IO_ERROR, "Permission denied")
    ]


def test_unreadable_root_directory_is_fatal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def scandir(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(walker.os, "scandir", scandir)
    with pytest.raises(RootUnreadableError, match="Permission denied"):
        list(PlainTraverser().iter_entries(tmp_path))


def test_traverser_base_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        Traverser()
