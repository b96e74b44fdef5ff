# dinothawr/engine/process.py
from __future__ import annotations
import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from pathlib import Path

import psutil

from dinothawr.core.errors import EngineSpawnError
from dinothawr.engine.types import LaunchParameters

logger = logging.getLogger(__name__)

__all__ = [
    "ENV_REFRESH_RATE", "ENV_INPUT_METHOD",
    "buildEngineCommand", "buildEngineEnvironment", "EngineProcessLauncher",
]

ENV_REFRESH_RATE = "DINOTHAWR_REFRESHRATE"
ENV_INPUT_METHOD = "DINOTHAWR_IME"



def buildEngineCommand(frontend: str, params: LaunchParameters) -> list[str]:
    """
    Frontend command line for one launch:
        <frontend> -L <engine core> [--config <cfg>] <payload>
    The --config flag is left out when no config file was written.
    """
    cmd = [frontend, "-L", params.enginePath]
    if params.hasConfig:
        cmd += ["--config", params.configPath]
    cmd.append(params.payloadPath)
    return cmd



def buildEngineEnvironment(params: LaunchParameters, base: Mapping[str, str] | None = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env[ENV_REFRESH_RATE] = params.refreshRateText
    env[ENV_INPUT_METHOD] = params.inputMethod
    return env



class EngineProcessLauncher:
    """
    Process boundary to the native engine. Fire-and-forget: the child is detached
    into its own session/process group and never waited on.
    """
    def __init__(self, frontend: str, *, cwd: Path | None = None) -> None:
        self.frontend = frontend
        self.cwd = cwd

    def resolveFrontend(self) -> str:
        found = shutil.which(self.frontend)
        if found is None:
            raise EngineSpawnError(f"Engine frontend '{self.frontend}' not found")
        return found

    def command(self, params: LaunchParameters) -> list[str]:
        return buildEngineCommand(self.frontend, params)

    def spawn(self, params: LaunchParameters) -> psutil.Popen:
        cmd = buildEngineCommand(self.resolveFrontend(), params)
        kwargs: dict = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

        logger.info("Command: %s", " ".join(cmd))
        try:
            proc = psutil.Popen(
                cmd,
                cwd=str(self.cwd) if self.cwd is not None else None,
                env=buildEngineEnvironment(params),
                stdin=subprocess.DEVNULL,
                **kwargs,
            )
        except (OSError, psutil.Error) as err:
            raise EngineSpawnError(f"Failed to start engine: {err}") from err

        logger.info("Engine PID: %s", proc.pid)
        return proc
