# dinothawr/engine/configfile.py
from __future__ import annotations
import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Union

from dinothawr.core.errors import ConfigWriteError
from dinothawr.core.files import atomicWriteText

logger = logging.getLogger(__name__)

__all__ = ["ConfigValue", "ConfigBuilder", "CoreOptionsBuilder"]

ConfigValue = Union[int, float, bool, str]

_INVALID_KEY = re.compile(r"[\s=#]")



class ConfigBuilder:
    """
    Ordered, typed key/value document for the engine's flat config file.

    Output is one `key = value` line per entry in first-insertion order. The engine
    lets later duplicates win when it reads, so each key is written exactly once:
    setting an existing key replaces its value in place.

        conf = ConfigBuilder()
        conf.setInt("audio_out_rate", 48000)
        conf.setBool("video_smooth", True)
        conf.write(runtimeDir / "retroarch.cfg")
    """
    def __init__(self) -> None:
        self._entries: dict[str, ConfigValue] = {}

    # ----- Typed setters -----

    def setInt(self, key: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"setInt('{key}') expects int, got {type(value).__name__}")
        self._put(key, value)

    def setFloat(self, key: str, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"setFloat('{key}') expects float, got {type(value).__name__}")
        self._put(key, float(value))

    def setBool(self, key: str, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f"setBool('{key}') expects bool, got {type(value).__name__}")
        self._put(key, value)

    def setString(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"setString('{key}') expects str, got {type(value).__name__}")
        if "\n" in value or "\r" in value:
            raise ValueError(f"Value for '{key}' must fit on one line")
        self._put(key, value)

    def _put(self, key: str, value: ConfigValue) -> None:
        if not isinstance(key, str) or not key or _INVALID_KEY.search(key):
            raise ValueError(f"Invalid config key {key!r}")
        # dict keeps the original position when an existing key is reassigned
        self._entries[key] = value

    # ----- Reading back -----

    def get(self, key: str) -> ConfigValue | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[tuple[str, ConfigValue]]:
        return iter(self._entries.items())

    # ----- Output -----

    def renderValue(self, value: ConfigValue) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return repr(value)
        return str(value)

    def serialize(self) -> str:
        lines = [f"{key} = {self.renderValue(value)}" for key, value in self._entries.items()]
        return "".join(line + "\n" for line in lines)

    def write(self, path: str | Path) -> Path:
        path = Path(path)
        try:
            atomicWriteText(path, self.serialize())
        except OSError as err:
            raise ConfigWriteError(str(path), f"Failed to write config '{path}': {err}") from err
        logger.debug("Wrote %d keys to '%s'", len(self._entries), path)
        return path



class CoreOptionsBuilder(ConfigBuilder):
    """Core-options file: same layout, but string values are double-quoted."""
    def renderValue(self, value: ConfigValue) -> str:
        if isinstance(value, str):
            return f'"{value}"'
        return super().renderValue(value)
