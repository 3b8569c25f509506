"""Tests for the `fvc-extract` command."""

from __future__ import annotations

import importlib
import io
import tarfile
from pathlib import Path
from types import ModuleType

import pytest


@pytest.fixture
def extractor_cli(libarchive_backend: ModuleType) -> ModuleType:
    return importlib.import_module("fvc.cli.extractor")


def _write_tar(path: Path) -> Path:
    with tarfile.open(path, "w") as archive:
        for name, payload in (("pkg/a.txt", b"a\n"), ("pkg/sub/b.txt", b"b\n")):
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            archive.addfile(info, io.BytesIO(payload))
    return path


def test_extract_to_target(tmp_path: Path, capsys: pytest.CaptureFixture[str], extractor_cli: ModuleType) -> None:
    source = _write_tar(tmp_path / "pkg.tar")
    target = tmp_path / "out"

    assert extractor_cli.main([str(source), str(target)]) == 0
    assert (target / "pkg" / "a.txt").read_bytes() == b"a\n"
    assert (target / "pkg" / "sub" / "b.txt").read_bytes() == b"b\n"
    assert "files: 2" in capsys.readouterr().out


def test_extract_without_target_leaves_nothing(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    extractor_cli: ModuleType,
) -> None:
    source = _write_tar(tmp_path / "pkg.tar")

    assert extractor_cli.main([str(source)]) == 0
    out = capsys.readouterr().out
    assert "(temporary, removed)" in out
    assert "files: 2" in out
    assert sorted(path.name for path in tmp_path.iterdir()) == ["pkg.tar"]


def test_extract_missing_source(tmp_path: Path, capsys: pytest.CaptureFixture[str], extractor_cli: ModuleType) -> None:
    assert extractor_cli.main([str(tmp_path / "missing.tar")]) == 2
    assert "[ERROR] extraction failed:" in capsys.readouterr().err
