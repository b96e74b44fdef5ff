# dinothawr/app/shell.py
from __future__ import annotations
import logging
import time
import zipfile
from collections.abc import Mapping
from typing import Any

from dinothawr.app.coordinator import EngineBoundary, LaunchCoordinator
from dinothawr.app.lifecycle import LifecycleGate, STATE_KEY
from dinothawr.app.settings import LauncherSettings
from dinothawr.config.preferences import PREFERENCES_FILE_NAME, UserPreferences
from dinothawr.content.catalog import AssetCatalog, DirectoryAssetCatalog, ZipAssetCatalog
from dinothawr.content.staging import Stager, StagingPlan
from dinothawr.engine.platform import HostPlatform, PlatformCapabilities
from dinothawr.engine.process import EngineProcessLauncher
from dinothawr.engine.types import LaunchParameters

logger = logging.getLogger(__name__)

__all__ = ["LauncherShell", "openCatalog"]



def openCatalog(settings: LauncherSettings) -> AssetCatalog:
    """A .zip bundle is read in place; anything else is treated as an unpacked directory."""
    bundle = settings.bundlePath
    if bundle.is_file() and zipfile.is_zipfile(bundle):
        return ZipAssetCatalog(bundle, prefix=settings.paths.bundlePrefix)
    return DirectoryAssetCatalog(bundle)



class LauncherShell:
    """
    Title-screen side of the launcher: the part a UI would own.

    Owns exactly one LifecycleGate and one LaunchCoordinator. `savedState` is what
    onSaveInstanceState() returned in the previous incarnation, if any.
    """
    def __init__(
        self,
        settings: LauncherSettings,
        *,
        catalog: AssetCatalog | None = None,
        platform: PlatformCapabilities | None = None,
        engine: EngineBoundary | None = None,
        savedState: Mapping[str, Any] | None = None,
    ):
        self.createdTs: float = time.time()
        self.settings = settings
        self.runtimeDir = settings.runtimeDir
        self.plan = StagingPlan.of(settings.staging.plan)

        self.catalog = catalog or openCatalog(settings)
        self.gate = LifecycleGate(Stager(self.catalog))
        if savedState is not None:
            self.gate.restoreState(bool(savedState.get(STATE_KEY, False)))

        self.platform = platform or HostPlatform(settings.platform)
        self.engine = engine or EngineProcessLauncher(settings.paths.frontend, cwd=self.runtimeDir)
        self.coordinator = LaunchCoordinator(
            gate=self.gate,
            platform=self.platform,
            engine=self.engine,
            runtimeDir=self.runtimeDir,
            enginePath=settings.enginePath,
            payloadPath=settings.payloadPath,
        )

    def onCreate(self) -> None:
        """Kicks off staging in the background; returns immediately."""
        logger.info("Runtime folder: %s", self.runtimeDir)
        self.gate.begin(self.plan, self.runtimeDir)

    def onSaveInstanceState(self) -> dict[str, Any]:
        return {STATE_KEY: self.gate.saveState()}

    def loadPreferences(self, overrides: Mapping[str, Any] | None = None) -> UserPreferences:
        return UserPreferences.load(self.runtimeDir / PREFERENCES_FILE_NAME, overrides=dict(overrides or {}))

    def prepare(self, prefs: UserPreferences) -> LaunchParameters:
        """Waits for staging so the overlay and payload are on disk, then builds parameters."""
        self.gate.awaitCompletion()
        return self.coordinator.prepareLaunch(prefs)

    def startNative(self, prefs: UserPreferences) -> Any:
        """Start button: join staging, write config, hand off to the engine."""
        params = self.prepare(prefs)
        return self.coordinator.launch(params)

    def snapshot(self) -> dict[str, Any]:
        result = self.gate.lastResult
        return {
            "createdTs": self.createdTs,
            "bundle": repr(self.catalog),
            "runtimeDir": str(self.runtimeDir),
            "staging": self.gate.state.value,
            "stagingResult": result.summary() if result is not None else None,
        }
