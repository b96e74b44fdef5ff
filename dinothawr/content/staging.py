# dinothawr/content/staging.py
from __future__ import annotations
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from dinothawr.content.catalog import AssetCatalog, joinLogical, normalizeLogical
from dinothawr.core.errors import AssetNotFoundError, AssetReadError, DirectoryCreateError
from dinothawr.core.files import atomicWriteBytes
from dinothawr.core.logging import setLogContext, unsetLogContext
from dinothawr.core.time import nowMonotonicMs, elapsedMs

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_STAGING_DIRS", "StagingPlan", "StagingResult", "Stager"]



# Bundle root, then the game data, its sound effects and background art
DEFAULT_STAGING_DIRS: tuple[str, ...] = ("", "assets", "assets/sfx", "assets/bg")



@dataclass(frozen=True)
class StagingPlan:
    """Ordered logical directories to stage. Duplicates collapse onto their first position."""
    directories: tuple[str, ...] = DEFAULT_STAGING_DIRS

    def __post_init__(self) -> None:
        seen: list[str] = []
        for directory in self.directories:
            normalized = normalizeLogical(directory)
            if normalized not in seen:
                seen.append(normalized)
        object.__setattr__(self, "directories", tuple(seen))

    @classmethod
    def of(cls, directories: Iterable[str]) -> StagingPlan:
        return cls(tuple(directories))

    def __iter__(self) -> Iterator[str]:
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)



@dataclass
class StagingResult:
    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    missingDirs: list[str] = field(default_factory=list)
    bytesWritten: int = 0
    aborted: bool = False
    durationMs: int = 0

    @property
    def ok(self) -> bool:
        return not self.aborted and not self.skipped and not self.missingDirs

    def summary(self) -> str:
        return (
            f"copied={len(self.copied)} skipped={len(self.skipped)} missingDirs={len(self.missingDirs)}"
            f" bytes={self.bytesWritten} aborted={self.aborted} in {self.durationMs} ms"
        )



class Stager:
    """
    Copies bundle directories into a writable destination tree.

    Policy:
      • a destination directory that cannot be created aborts the whole plan (DirectoryCreateError)
      • a bundle directory that does not exist is logged and skipped
      • a single entry that cannot be read or written is logged and skipped
    Files are overwritten in place, so running the same plan twice is harmless.
    """
    def __init__(self, catalog: AssetCatalog) -> None:
        self.catalog = catalog

    def stage(self, plan: StagingPlan | Iterable[str], destinationRoot: str | Path) -> StagingResult:
        if not isinstance(plan, StagingPlan):
            plan = StagingPlan.of(plan)
        destinationRoot = Path(destinationRoot)
        result = StagingResult()
        startMs = nowMonotonicMs()

        logger.info("Staging %d directories from %r into '%s'", len(plan), self.catalog, destinationRoot)
        try:
            for directory in plan:
                setLogContext(stageDir=directory)
                self._stageDirectory(directory, destinationRoot, result)
        except DirectoryCreateError as err:
            result.aborted = True
            err.result = result
            raise
        finally:
            result.durationMs = elapsedMs(startMs)
            unsetLogContext("stageDir")

        logger.info("Staging finished: %s", result.summary())
        return result

    def _stageDirectory(self, directory: str, destinationRoot: Path, result: StagingResult) -> None:
        target = destinationRoot / directory if directory else destinationRoot
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            logger.error("Cannot create staging directory '%s': %s", target, err)
            raise DirectoryCreateError(str(target), f"Cannot create staging directory '{target}': {err}") from err

        try:
            names = self.catalog.list(directory)
        except (AssetNotFoundError, AssetReadError) as err:
            logger.warning("Bundle directory '%s' unavailable, skipping: %s", directory, err)
            result.missingDirs.append(directory)
            return

        logger.debug("Found %d entries in '%s'", len(names), directory or "<root>")
        for name in names:
            logical = joinLogical(directory, name)
            try:
                payload = self.catalog.read(logical)
            except AssetReadError as err:
                logger.warning("Skipping unreadable asset '%s': %s", logical, err)
                result.skipped.append(logical)
                continue

            outPath = target / name
            try:
                atomicWriteBytes(outPath, payload)
            except OSError as err:
                logger.warning("Failed to write '%s': %s", outPath, err)
                result.skipped.append(logical)
                continue

            logger.debug("%s => %s", logical, outPath)
            result.copied.append(logical)
            result.bytesWritten += len(payload)

