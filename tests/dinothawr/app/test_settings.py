# tests/dinothawr/app/test_settings.py
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from dinothawr.app.paths import DEFAULT_ENGINE_DIR
from dinothawr.app.settings import (
    SETTINGS_DEFAULTS, LauncherSettings, PlatformSettings, deepMerge, loadSettings, loadUserSettings,
)
from dinothawr.content.staging import DEFAULT_STAGING_DIRS


def test_loadSettings_withoutUserFile_usesDefaults(tmp_path: Path) -> None:
    settings = loadSettings(tmp_path / "missing.json5")

    assert settings.paths.frontend == "retroarch"
    assert settings.staging.plan == list(DEFAULT_STAGING_DIRS)
    assert settings.platform.formFactor == "auto"
    assert settings.debug.suppressRecurringMessages.enabled is True


def test_loadSettings_userFileIsDeepMerged(tmp_path: Path) -> None:
    path = tmp_path / "launcher.json5"
    path.write_text(
        "{\n"
        f"  paths: {{ runtimeDir: '{(tmp_path / 'rt').as_posix()}', engine: 'custom_libretro.so' }},\n"
        "  platform: { refreshRate: 120 },\n"
        "}\n",
        encoding="utf-8",
    )

    settings = loadSettings(path)

    assert settings.runtimeDir == tmp_path / "rt"
    assert settings.payloadPath == tmp_path / "rt" / "dinothawr.game"
    assert settings.enginePath == DEFAULT_ENGINE_DIR / "custom_libretro.so"
    assert settings.paths.frontend == "retroarch"
    assert settings.platform.refreshRate == 120.0
    assert settings.platform.lowLatencyAudio is True


def test_loadSettings_invalidUserFile_fallsBackToDefaults(tmp_path: Path) -> None:
    path = tmp_path / "launcher.json5"
    path.write_text("{ platform: { formFactor: 'huge' }, bogus: 1 }", encoding="utf-8")

    settings = loadSettings(path)

    assert settings.platform.formFactor == "auto"
    assert settings.paths.runtimeDir == SETTINGS_DEFAULTS["paths"]["runtimeDir"]


def test_loadUserSettings_unparsable_isEmpty(tmp_path: Path) -> None:
    path = tmp_path / "launcher.json5"
    path.write_text("{ paths: ", encoding="utf-8")
    assert loadUserSettings(path) == {}


def test_absoluteEnginePath_isKept(tmp_path: Path) -> None:
    merged = deepMerge(SETTINGS_DEFAULTS, {"paths": {"engine": str(tmp_path / "core.so")}})
    assert LauncherSettings.model_validate(merged).enginePath == tmp_path / "core.so"


@pytest.mark.parametrize(
    "data",
    [{"defaultSampleRate": 0}, {"refreshRate": -1}, {"displayWidthDp": 0}, {"unknownKnob": True}],
)
def test_platformSettings_rejectsBadValues(data: dict) -> None:
    with pytest.raises(ValidationError):
        PlatformSettings.model_validate(data)


def test_deepMerge_nestedDictsMergeOtherTypesReplace() -> None:
    first = {"a": {"x": 1, "y": [1, 2]}, "b": 1}
    second = {"a": {"y": [3], "z": True}, "c": None}

    assert deepMerge(first, second) == {"a": {"x": 1, "y": [3], "z": True}, "b": 1, "c": None}
    assert first == {"a": {"x": 1, "y": [1, 2]}, "b": 1}


@pytest.mark.parametrize(
    "userSettings",
    [
        "{ staging: { plan: ['', '../outside'] } }",
        "{ paths: { bundlePrefix: '..' } }",
    ],
)
def test_loadSettings_pathsEscapingBundle_fallBackToDefaults(tmp_path: Path, userSettings: str) -> None:
    path = tmp_path / "launcher.json5"
    path.write_text(userSettings, encoding="utf-8")

    settings = loadSettings(path)

    assert settings.staging.plan == list(DEFAULT_STAGING_DIRS)
    assert settings.paths.bundlePrefix == ""


def test_stagingPlan_isNormalized() -> None:
    merged = deepMerge(SETTINGS_DEFAULTS, {"staging": {"plan": ["/assets/", "assets\\sfx"]}})
    assert LauncherSettings.model_validate(merged).staging.plan == ["assets", "assets/sfx"]
