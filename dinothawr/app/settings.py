# dinothawr/app/settings.py
from __future__ import annotations
import json5
from pathlib import Path
from typing import Any, Literal, cast

from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationError, field_validator

from dinothawr.app.paths import (
    PACKAGE_DIR, DEFAULT_BUNDLE_DIR, DEFAULT_ENGINE_DIR, DEFAULT_RUNTIME_DIR, USER_SETTINGS_PATH,
)
from dinothawr.content.catalog import normalizeLogical
from dinothawr.content.staging import DEFAULT_STAGING_DIRS
from dinothawr.core.errors import AssetNotFoundError

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_DEFAULT_PATH", "SETTINGS_DEFAULTS",
    "PathSettings", "StagingSettings", "PlatformSettings", "SuppressSettings", "DebugSettings",
    "LauncherSettings", "loadUserSettings", "loadSettings", "deepMerge",
]


SETTINGS_DEFAULT_PATH = PACKAGE_DIR / "settings_default.json5"
SETTINGS_DEFAULTS: dict[str, Any] = {
    "paths": {
        "bundle": str(DEFAULT_BUNDLE_DIR),
        "bundlePrefix": "",
        "runtimeDir": str(DEFAULT_RUNTIME_DIR),
        "engine": str(DEFAULT_ENGINE_DIR / "dinothawr_libretro.so"),
        "frontend": "retroarch",
        "payload": "dinothawr.game",
    },
    "staging": {"plan": list(DEFAULT_STAGING_DIRS)},
    "platform": {
        "lowLatencyAudio": True,
        "defaultSampleRate": 48000,
        "refreshRate": 60.0,
        "formFactor": "auto",
        "displayWidthDp": None,
        "displayHeightDp": None,
    },
    "debug": {
        "devModeEnabled": False,
        "suppressRecurringMessages": {"enabled": True, "windowSeconds": 60, "maxPerWindow": 5, "summaryLevel": "INFO"},
    },
}



class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")



def _logicalPath(value: str) -> str:
    """Bundle-relative path, rejected when it would point outside the bundle."""
    try:
        return normalizeLogical(value)
    except AssetNotFoundError as err:
        raise ValueError(str(err)) from err



class PathSettings(_Section):
    bundle: str                 # directory or .zip archive
    bundlePrefix: str = ""      # folder inside a .zip that holds the bundle
    runtimeDir: str
    engine: str
    frontend: str = "retroarch"
    payload: str = "dinothawr.game"

    @field_validator("bundlePrefix")
    @classmethod
    def checkBundlePrefix(cls, value: str) -> str:
        return _logicalPath(value)



class StagingSettings(_Section):
    plan: list[str] = Field(default_factory=lambda: list(DEFAULT_STAGING_DIRS))

    @field_validator("plan")
    @classmethod
    def checkPlan(cls, value: list[str]) -> list[str]:
        return [_logicalPath(directory) for directory in value]



class PlatformSettings(_Section):
    lowLatencyAudio: bool = True
    defaultSampleRate: int = Field(default=48000, gt=0)
    refreshRate: float = Field(default=60.0, gt=0)
    formFactor: Literal["auto", "large", "standard"] = "auto"
    displayWidthDp: int | None = Field(default=None, gt=0)
    displayHeightDp: int | None = Field(default=None, gt=0)



class SuppressSettings(_Section):
    enabled: bool = True
    windowSeconds: int = Field(default=60, ge=1)
    maxPerWindow: int = Field(default=5, ge=1)
    summaryLevel: str = "INFO"



class DebugSettings(_Section):
    devModeEnabled: bool = False
    suppressRecurringMessages: SuppressSettings = Field(default_factory=SuppressSettings)



class LauncherSettings(_Section):
    paths: PathSettings
    staging: StagingSettings = Field(default_factory=StagingSettings)
    platform: PlatformSettings = Field(default_factory=PlatformSettings)
    debug: DebugSettings = Field(default_factory=DebugSettings)

    # ---------- Resolved paths ----------

    @property
    def bundlePath(self) -> Path:
        return Path(self.paths.bundle).expanduser()

    @property
    def runtimeDir(self) -> Path:
        return Path(self.paths.runtimeDir).expanduser()

    @property
    def enginePath(self) -> Path:
        engine = Path(self.paths.engine).expanduser()
        return engine if engine.is_absolute() else DEFAULT_ENGINE_DIR / engine

    @property
    def payloadPath(self) -> Path:
        return self.runtimeDir / self.paths.payload



def _loadDefaults() -> JsonValue:
    if SETTINGS_DEFAULT_PATH.exists():
        try:
            return deepMerge(cast(JsonValue, SETTINGS_DEFAULTS), json5.loads(SETTINGS_DEFAULT_PATH.read_text(encoding="utf-8")))
        except ValueError as err:
            logger.error("Failed to parse '%s': %s", SETTINGS_DEFAULT_PATH, err)
    return cast(JsonValue, SETTINGS_DEFAULTS)



def loadUserSettings(path: Path | None = None) -> JsonValue:
    filePath = (path or USER_SETTINGS_PATH).expanduser()
    if filePath.exists():
        try:
            return json5.loads(filePath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
    elif path is not None:
        logger.warning("Settings file '%s' does not exist; using defaults", filePath)
    return {}



def loadSettings(path: Path | None = None) -> LauncherSettings:
    """
    Shipped defaults deep-merged with the user's json5 file, validated.
    Invalid user settings are logged and dropped rather than blocking a launch.
    """
    defaults = _loadDefaults()
    merged = deepMerge(defaults, loadUserSettings(path))
    try:
        return LauncherSettings.model_validate(merged)
    except ValidationError as err:
        logger.error("Invalid launcher settings, falling back to defaults:\n%s", err)
        return LauncherSettings.model_validate(defaults)



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = dict(first)
        for key, value in second.items():
            out[key] = deepMerge(out[key], value) if key in out else value
        return cast(JsonValue, out)

    return cast(JsonValue, second)

