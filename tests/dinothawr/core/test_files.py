# tests/dinothawr/core/test_files.py
from __future__ import annotations

from pathlib import Path

import pytest

from dinothawr.core.files import atomicWriteBytes, atomicWriteText


def test_atomicWrite_replacesExistingContent(tmp_path: Path) -> None:
    target = tmp_path / "overlay.cfg"
    target.write_bytes(b"old contents that are longer than the new ones")

    atomicWriteBytes(target, b"new")

    assert target.read_bytes() == b"new"
    assert [p.name for p in tmp_path.iterdir()] == ["overlay.cfg"]


def test_atomicWriteText_encodesUtf8(tmp_path: Path) -> None:
    target = tmp_path / "retroarch.cfg"
    atomicWriteText(target, "input_overlay = /home/jürgen/overlay.cfg\n")
    assert target.read_bytes() == "input_overlay = /home/jürgen/overlay.cfg\n".encode("utf-8")


def test_atomicWrite_missingDirectory_raisesAndLeavesNoTemp(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        atomicWriteBytes(tmp_path / "missing" / "file.bin", b"x")
    assert list(tmp_path.iterdir()) == []


def test_atomicWrite_targetIsDirectory_cleansUpTemp(tmp_path: Path) -> None:
    (tmp_path / "assets").mkdir()
    with pytest.raises(OSError):
        atomicWriteBytes(tmp_path / "assets", b"x")
    assert not (tmp_path / "assets.tmp").exists()
