# dinothawr/content/catalog.py
from __future__ import annotations
import logging
import posixpath
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from dinothawr.core.errors import AssetNotFoundError, AssetReadError

logger = logging.getLogger(__name__)

__all__ = [
    "AssetEntry", "AssetCatalog", "DirectoryAssetCatalog", "ZipAssetCatalog",
    "joinLogical", "normalizeLogical",
]



@dataclass(frozen=True)
class AssetEntry:
    """One bundled resource. Never mutated after it leaves the bundle."""
    path: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)



def normalizeLogical(path: str) -> str:
    """
    Normalizes a logical bundle path: forward slashes, no leading/trailing slash.
    "" is the bundle root. Segments that would escape the bundle are rejected.
    """
    text = str(path or "").replace("\\", "/").strip("/")
    if not text:
        return ""
    parts = [part for part in text.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        raise AssetNotFoundError(path, f"Logical path '{path}' points outside of the bundle")
    return "/".join(parts)



def joinLogical(directory: str, name: str) -> str:
    directory = normalizeLogical(directory)
    return f"{directory}/{name}" if directory else name



class AssetCatalog(ABC):
    """Read-only bundle of resources addressed by logical path."""

    @abstractmethod
    def list(self, directory: str) -> list[str]:
        """
        Returns entry names (files only, sorted) directly inside `directory`.
        Raises AssetNotFoundError if the directory is not in the bundle.
        """

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Returns the payload of `path`. Raises AssetReadError on any failure."""

    def entry(self, path: str) -> AssetEntry:
        logical = normalizeLogical(path)
        return AssetEntry(path=logical, content=self.read(logical))



class DirectoryAssetCatalog(AssetCatalog):
    """Bundle laid out as a plain directory tree (development checkouts, unpacked installs)."""
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _resolve(self, logical: str) -> Path:
        normalized = normalizeLogical(logical)
        return self.root / normalized if normalized else self.root

    def list(self, directory: str) -> list[str]:
        folder = self._resolve(directory)
        if not folder.is_dir():
            raise AssetNotFoundError(directory, f"Bundle directory '{directory}' not found under '{self.root}'")
        try:
            return sorted(child.name for child in folder.iterdir() if child.is_file())
        except OSError as err:
            raise AssetReadError(directory, f"Cannot list bundle directory '{directory}': {err}") from err

    def read(self, path: str) -> bytes:
        try:
            target = self._resolve(path)
            return target.read_bytes()
        except AssetNotFoundError as err:
            raise AssetReadError(path, str(err)) from err
        except OSError as err:
            raise AssetReadError(path, f"Cannot read asset '{path}': {err}") from err

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.root)!r})"



class ZipAssetCatalog(AssetCatalog):
    """
    Bundle packed into a zip archive, optionally below `prefix` inside the archive
    (an Android package keeps its bundle under "assets/").

    The archive index is read once; payloads are read on demand, one archive handle per read.
    """
    def __init__(self, archivePath: str | Path, *, prefix: str = "") -> None:
        self.archivePath = Path(archivePath)
        self.prefix = normalizeLogical(prefix)
        self._files: dict[str, str] = {}                # logical path → archive member name
        self._dirs: dict[str, list[str]] = {"": []}     # logical dir → entry names
        self._index()

    def _index(self) -> None:
        try:
            with zipfile.ZipFile(self.archivePath) as archive:
                members = archive.infolist()
        except (OSError, zipfile.BadZipFile) as err:
            raise AssetReadError(str(self.archivePath), f"Cannot open bundle archive '{self.archivePath}': {err}") from err

        strip = f"{self.prefix}/" if self.prefix else ""
        for member in members:
            name = member.filename.replace("\\", "/")
            if strip and not name.startswith(strip):
                continue
            logical = name[len(strip):].strip("/")
            if not logical:
                continue
            try:
                logical = normalizeLogical(logical)
            except AssetNotFoundError:
                logger.warning("Ignoring archive member with unsafe path: %s", member.filename)
                continue

            # Register every parent directory, including implicit ones
            parent = posixpath.dirname(logical)
            walk = parent
            while walk and walk not in self._dirs:
                self._dirs[walk] = []
                walk = posixpath.dirname(walk)

            if member.is_dir():
                self._dirs.setdefault(logical, [])
                continue
            self._files[logical] = member.filename
            self._dirs.setdefault(parent, []).append(posixpath.basename(logical))

        for names in self._dirs.values():
            names.sort()
        logger.debug("Indexed %d entries in '%s'", len(self._files), self.archivePath)

    def list(self, directory: str) -> list[str]:
        logical = normalizeLogical(directory)
        if logical not in self._dirs:
            raise AssetNotFoundError(directory, f"Bundle directory '{directory}' not found in '{self.archivePath}'")
        return list(self._dirs[logical])

    def read(self, path: str) -> bytes:
        try:
            member = self._files[normalizeLogical(path)]
        except (KeyError, AssetNotFoundError) as err:
            raise AssetReadError(path, f"Asset '{path}' not found in '{self.archivePath}'") from err
        try:
            with zipfile.ZipFile(self.archivePath) as archive:
                return archive.read(member)
        except (OSError, zipfile.BadZipFile, RuntimeError) as err:
            raise AssetReadError(path, f"Cannot read asset '{path}': {err}") from err

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.archivePath)!r}, prefix={self.prefix!r})"
