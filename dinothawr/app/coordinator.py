# dinothawr/app/coordinator.py
from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from dinothawr.app.lifecycle import LifecycleGate
from dinothawr.app.paths import (
    CONFIG_FILE_NAME, CORE_OPTIONS_FILE_NAME, OVERLAY_FILE_NAME, OVERLAY_BIG_FILE_NAME,
)
from dinothawr.config.preferences import UserPreferences
from dinothawr.core.errors import ConfigWriteError
from dinothawr.core.logging import setLogContext
from dinothawr.engine.configfile import ConfigBuilder, CoreOptionsBuilder
from dinothawr.engine.platform import (
    PlatformCapabilities, resolveSampleRate, resolveRefreshRate, resolveInputMethod, resolveLargeScreen,
)
from dinothawr.engine.types import LaunchParameters

logger = logging.getLogger(__name__)

__all__ = ["EngineBoundary", "LaunchCoordinator"]



class EngineBoundary(Protocol):
    """Anything that can start the engine for a set of parameters and return at once."""
    def spawn(self, params: LaunchParameters) -> Any: ...



class LaunchCoordinator:
    """
    Turns user preferences and platform answers into LaunchParameters and hands them
    to the engine once staging is done.

    Nothing here blocks a launch except a failure to start the engine itself:
    an unwritable config file means the engine runs on its defaults.
    """
    def __init__(
        self,
        *,
        gate: LifecycleGate,
        platform: PlatformCapabilities,
        engine: EngineBoundary,
        runtimeDir: Path,
        enginePath: Path,
        payloadPath: Path,
        builderFactory: Callable[[], ConfigBuilder] = ConfigBuilder,
        coreOptionsFactory: Callable[[], ConfigBuilder] = CoreOptionsBuilder,
    ) -> None:
        self.gate = gate
        self.platform = platform
        self.engine = engine
        self.runtimeDir = Path(runtimeDir)
        self.enginePath = Path(enginePath)
        self.payloadPath = Path(payloadPath)
        self._builderFactory = builderFactory
        self._coreOptionsFactory = coreOptionsFactory
        self._attempt = 0

    # ----- Config documents -----

    def overlayPath(self) -> Path:
        overlay = OVERLAY_BIG_FILE_NAME if resolveLargeScreen(self.platform) else OVERLAY_FILE_NAME
        path = self.runtimeDir / overlay
        if not path.exists():
            # Referenced anyway; the engine runs without an overlay if the file is absent
            logger.warning("Overlay '%s' does not exist; referencing it regardless", path)
        return path

    def buildConfig(self, prefs: UserPreferences, sampleRate: int) -> ConfigBuilder:
        conf = self._builderFactory()
        conf.setInt("audio_out_rate", sampleRate)
        conf.setInt("input_back_behavior", 0)
        conf.setFloat("video_aspect_ratio", -1.0)
        conf.setBool("video_font_enable", False)

        conf.setString("input_overlay", str(self.overlayPath()) if prefs.overlayEnabled else "")

        if prefs.pixelPurist:
            conf.setBool("video_scale_integer", True)
            conf.setBool("video_smooth", False)
        else:
            conf.setBool("video_scale_integer", False)
            conf.setBool("video_smooth", True)

        conf.setBool("audio_enable", prefs.audioEnabled)
        return conf

    def buildCoreOptions(self, prefs: UserPreferences) -> ConfigBuilder:
        options = self._coreOptionsFactory()
        options.setString("dino_audio_thread", "enabled" if prefs.audioThread else "disabled")
        options.setString("dino_bgm_option", prefs.bgmOption)
        options.setString("dino_volume", str(prefs.volume))
        return options

    def _writeCoreOptions(self, prefs: UserPreferences) -> str:
        path = self.runtimeDir / CORE_OPTIONS_FILE_NAME
        try:
            self.buildCoreOptions(prefs).write(path)
        except ConfigWriteError as err:
            logger.warning("Core options not written, engine keeps its own: %s", err)
            return ""
        return str(path)

    # ----- Launch -----

    def prepareLaunch(self, prefs: UserPreferences) -> LaunchParameters:
        self._attempt += 1
        setLogContext(launchId=f"launch-{self._attempt}")

        sampleRate = resolveSampleRate(self.platform)
        conf = self.buildConfig(prefs, sampleRate)

        coreOptionsPath = self._writeCoreOptions(prefs)
        if coreOptionsPath:
            conf.setString("core_options_path", coreOptionsPath)

        configPath = self.runtimeDir / CONFIG_FILE_NAME
        try:
            conf.write(configPath)
            configText = str(configPath)
        except ConfigWriteError as err:
            logger.error("Config not written, engine will use built-in defaults: %s", err)
            configText = ""

        params = LaunchParameters(
            enginePath=str(self.enginePath),
            payloadPath=str(self.payloadPath),
            configPath=configText,
            sampleRate=sampleRate,
            refreshRate=resolveRefreshRate(self.platform),
            inputMethod=resolveInputMethod(self.platform),
        )
        logger.debug("Prepared %s", params)
        return params

    def launch(self, params: LaunchParameters) -> Any:
        """
        Joins the staging worker, then starts the engine. The engine is never waited on;
        the returned process handle is for logging only.
        """
        self.gate.awaitCompletion()
        logger.info("Handing off to engine '%s' with payload '%s'", params.enginePath, params.payloadPath)
        return self.engine.spawn(params)
