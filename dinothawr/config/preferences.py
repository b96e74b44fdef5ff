# dinothawr/config/preferences.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any

from .providers import ConfigProvider, DefaultsProvider, FileProvider, OverrideProvider

logger = logging.getLogger(__name__)

__all__ = [
    "PREFERENCES_FILE_NAME", "PREFERENCE_DEFAULTS", "BGM_OPTIONS",
    "UserPreferences", "parsePreferenceValue",
]

PREFERENCES_FILE_NAME = "preferences.json5"

PREFERENCE_DEFAULTS: dict[str, Any] = {
    "overlay_enable": True,
    "pixel_purist": False,
    "enable_audio": True,
    "audio_thread": True,
    "bgm_option": "Normal",
    "volume": 100,
}

BGM_OPTIONS = ("Normal", "Shuffle", "Original")

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}



def parsePreferenceValue(raw: str) -> Any:
    """Turns a command-line `key=value` right-hand side into bool/int/str."""
    text = raw.strip()
    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(text)
    except ValueError:
        return text



class UserPreferences:
    """
    Read-only lookups over the user's persisted preferences.

    Layers, topmost first: one-shot overrides, the preferences file, shipped defaults.
    Values with the wrong type fall back to the default instead of failing the launch.
    """
    def __init__(self, providers: list[ConfigProvider] | None = None) -> None:
        # Bottom to top, like ConfigStore
        self._providers: list[ConfigProvider] = providers or [DefaultsProvider(PREFERENCE_DEFAULTS)]

    @classmethod
    def load(cls, path: Path | None, *, overrides: dict[str, Any] | None = None) -> UserPreferences:
        providers: list[ConfigProvider] = [DefaultsProvider(PREFERENCE_DEFAULTS)]
        if path is not None:
            providers.append(FileProvider(path))
        override = OverrideProvider()
        for key, value in (overrides or {}).items():
            override.set(key, value)
        providers.append(override)
        return cls(providers)

    @classmethod
    def fromMapping(cls, data: dict[str, Any]) -> UserPreferences:
        return cls([DefaultsProvider(PREFERENCE_DEFAULTS), DefaultsProvider(data)])

    def get(self, key: str, default: Any = None) -> Any:
        for provider in reversed(self._providers): # Topmost first precedence
            value = provider.get(key)
            if value is not None:
                return value
        return default

    def getBool(self, key: str, default: bool) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_WORDS:
                return True
            if lowered in _FALSE_WORDS:
                return False
        if value is not None:
            logger.warning("Preference '%s' has non-boolean value %r; using %s", key, value, default)
        return default

    def getInt(self, key: str, default: int) -> int:
        value = self.get(key)
        if isinstance(value, bool) or value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Preference '%s' has non-integer value %r; using %s", key, value, default)
            return default

    def getString(self, key: str, default: str) -> str:
        value = self.get(key)
        return value if isinstance(value, str) else default

    # ---------- Named preferences ----------

    @property
    def overlayEnabled(self) -> bool:
        return self.getBool("overlay_enable", True)

    @property
    def pixelPurist(self) -> bool:
        return self.getBool("pixel_purist", False)

    @property
    def audioEnabled(self) -> bool:
        return self.getBool("enable_audio", True)

    @property
    def audioThread(self) -> bool:
        return self.getBool("audio_thread", True)

    @property
    def bgmOption(self) -> str:
        value = self.getString("bgm_option", "Normal")
        if value not in BGM_OPTIONS:
            logger.warning("Unknown bgm_option %r; using 'Normal'", value)
            return "Normal"
        return value

    @property
    def volume(self) -> int:
        return min(100, max(0, self.getInt("volume", 100)))

    def snapshot(self) -> dict[str, Any]:
        return {
            "overlay_enable": self.overlayEnabled,
            "pixel_purist": self.pixelPurist,
            "enable_audio": self.audioEnabled,
            "audio_thread": self.audioThread,
            "bgm_option": self.bgmOption,
            "volume": self.volume,
        }
