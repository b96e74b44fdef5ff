import sys
import threading
from pathlib import Path

import pytest

from dinothawr.content.catalog import AssetCatalog, DirectoryAssetCatalog
from dinothawr.core.errors import AssetReadError



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



BUNDLE_FILES: dict[str, bytes] = {
    "dinothawr.game": b"GAME\x00payload",
    "overlay.cfg": b"overlay0 = small\n",
    "overlay_big.cfg": b"overlay0 = big\n",
    "assets/levels.tmx": b"<map/>",
    "assets/sfx/jump.ogg": b"OggS\x00jump",
    "assets/sfx/slide.ogg": b"OggS\x00slide",
    "assets/bg/ice.png": b"\x89PNG ice",
}



class SpyCatalog(AssetCatalog):
    """
    Wraps a real catalog and counts calls. Reads of paths in `failOn` raise AssetReadError.
    If `gate` is given, every read waits on it first (lets tests hold the worker mid-copy).
    """
    def __init__(self, inner: AssetCatalog, *, failOn: set[str] | None = None, gate: threading.Event | None = None):
        self.inner = inner
        self.failOn = set(failOn or ())
        self.gate = gate
        self.listCalls: list[str] = []
        self.readCalls: list[str] = []
        self._lock = threading.Lock()

    def list(self, directory: str) -> list[str]:
        with self._lock:
            self.listCalls.append(directory)
        return self.inner.list(directory)

    def read(self, path: str) -> bytes:
        with self._lock:
            self.readCalls.append(path)
        if self.gate is not None:
            assert self.gate.wait(10), "test gate was never released"
        if path in self.failOn:
            raise AssetReadError(path, f"simulated corruption in '{path}'")
        return self.inner.read(path)



def writeTree(root: Path, files: dict[str, bytes]) -> Path:
    for rel, payload in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
    return root



def snapshotTree(root: Path) -> dict[str, bytes]:
    return {
        str(path.relative_to(root).as_posix()): path.read_bytes()
        for path in sorted(root.rglob("*")) if path.is_file()
    }



@pytest.fixture()
def bundleDir(tmp_path: Path) -> Path:
    return writeTree(tmp_path / "bundle", BUNDLE_FILES)



@pytest.fixture()
def catalog(bundleDir: Path) -> DirectoryAssetCatalog:
    return DirectoryAssetCatalog(bundleDir)



@pytest.fixture()
def runtimeDir(tmp_path: Path) -> Path:
    return tmp_path / "runtime"



@pytest.fixture()
def spyFactory():
    return SpyCatalog



@pytest.fixture()
def tree():
    """Helpers for building and comparing file trees."""
    class _Tree:
        write = staticmethod(writeTree)
        snapshot = staticmethod(snapshotTree)
        files = BUNDLE_FILES
    return _Tree
