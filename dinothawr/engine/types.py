# dinothawr/engine/types.py
from __future__ import annotations
from dataclasses import dataclass

__all__ = ["LaunchParameters"]



@dataclass(frozen=True)
class LaunchParameters:
    """
    Everything the engine is started with. Built once per launch attempt.

    configPath is "" when the config file could not be written; the engine then
    runs on its built-in defaults.
    """
    enginePath: str
    payloadPath: str
    configPath: str
    sampleRate: int
    refreshRate: float
    inputMethod: str

    @property
    def hasConfig(self) -> bool:
        return bool(self.configPath)

    @property
    def refreshRateText(self) -> str:
        return str(float(self.refreshRate))
