# dinothawr/config/providers.py
from __future__ import annotations
import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import json5

from dinothawr.core.dictpath import getByPath, setByPath, deleteByPath

logger = logging.getLogger(__name__)

__all__ = ["ConfigProvider", "OverrideProvider", "DefaultsProvider", "FileProvider"]



class ConfigProvider(ABC):
    """One layer of key/value configuration. Keys are dotted paths."""
    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...


# ----------------------------------------------
#          OverrideProvider (in-memory)
# ----------------------------------------------

class OverrideProvider(ConfigProvider):
    """
    Volatile, writable, topmost override layer (never saved to disk).
    """
    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return getByPath(self._data, key, None)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            deleteByPath(self._data, key, pruneEmptyParents=True)
            return

        setByPath(self._data, key, copy.deepcopy(value), createIfMissing=True)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)



class DefaultsProvider(ConfigProvider):
    """
    Read-only provider for shipped default values.

    Example:
        DefaultsProvider({"overlay_enable": True, "pixel_purist": False})
    """
    def __init__(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise TypeError(f"{type(self).__name__}: 'data' must be a Mapping, not '{type(data).__name__}'")
        self.data = data

    def get(self, key: str) -> Any | None:
        return getByPath(self.data, key, None)

    def to_dict(self) -> dict[str, Any]:
        # Always return a deep copy to prevent accidental mutation
        return copy.deepcopy(dict(self.data))


# ----------------------------------------------
#        File-backed provider JSON/JSON5
# ----------------------------------------------

class FileProvider(ConfigProvider):
    """
    Read-only view of a .json or .json5 file.

    The file is owned by whoever edits preferences (a settings screen, a text editor);
    the launcher only reads it.

    Behavior:
        • Missing file → empty dict
        • Not a regular file, unreadable, undecodable, unparsable or non-object → logs warning, empty dict
    """
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = {}
        self.reload()

    def reload(self) -> None:
        self._data = {}

        if not self.path.exists():
            logger.debug("%s: '%s' is missing → starting as empty dict", type(self).__name__, self.path)
            return

        if not self.path.is_file():
            logger.warning("%s: '%s' exists but is not a file; ignoring it", type(self).__name__, self.path)
            return

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            logger.warning("%s: failed to read '%s': %s", type(self).__name__, self.path, err)
            return

        try:
            parsed = json5.loads(text)
        except ValueError as err:
            logger.warning("%s: parse failed for '%s': %s", type(self).__name__, self.path, err)
            return

        if parsed is None:
            return

        if not isinstance(parsed, Mapping):
            logger.warning("%s: '%s' must hold a JSON object, not '%s'; ignoring it", type(self).__name__, self.path, type(parsed).__name__)
            return

        self._data = dict(cast(Mapping[str, Any], parsed))

    def get(self, key: str) -> Any | None:
        return getByPath(self._data, key, None)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)
