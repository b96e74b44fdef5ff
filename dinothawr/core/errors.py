# dinothawr/core/errors.py
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dinothawr.content.staging import StagingResult

__all__ = [
    "LauncherError", "AssetNotFoundError", "AssetReadError",
    "DirectoryCreateError", "ConfigWriteError", "PlatformQueryError",
    "EngineSpawnError",
]



class LauncherError(Exception):
    """Base class for everything the launcher raises on purpose."""
    pass



class AssetNotFoundError(LauncherError):
    """Bundle directory or entry does not exist."""
    def __init__(self, path: str, message: str | None = None):
        super().__init__(message or f"Asset '{path}' not found in bundle")
        self.path = path



class AssetReadError(LauncherError):
    """Bundle entry exists but could not be read."""
    def __init__(self, path: str, message: str | None = None):
        super().__init__(message or f"Failed to read asset '{path}'")
        self.path = path



class DirectoryCreateError(LauncherError):
    """
    Destination directory could not be created during staging.

    Aborts the whole staging pass. `result` holds whatever was copied before the failure.
    """
    def __init__(self, path: str, message: str | None = None, *, result: StagingResult | None = None):
        super().__init__(message or f"Failed to create directory '{path}'")
        self.path = path
        self.result = result



class ConfigWriteError(LauncherError):
    """Config document could not be written to disk."""
    def __init__(self, path: str, message: str | None = None):
        super().__init__(message or f"Failed to write config '{path}'")
        self.path = path



class PlatformQueryError(LauncherError):
    """A platform capability query is unsupported or failed."""
    pass



class EngineSpawnError(LauncherError):
    """The native engine process could not be started."""
    pass
