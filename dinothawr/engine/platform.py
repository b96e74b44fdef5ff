# dinothawr/engine/platform.py
from __future__ import annotations
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeVar

from dinothawr.core.errors import PlatformQueryError

if TYPE_CHECKING:
    from dinothawr.app.settings import PlatformSettings

logger = logging.getLogger(__name__)

__all__ = [
    "FALLBACK_SAMPLE_RATE", "FALLBACK_REFRESH_RATE",
    "PlatformCapabilities", "HostPlatform",
    "resolveSampleRate", "resolveRefreshRate", "resolveInputMethod", "resolveLargeScreen",
]

T = TypeVar("T")

FALLBACK_SAMPLE_RATE = 48000
FALLBACK_REFRESH_RATE = 60.0

# Android's "large" screen bucket, in dp
LARGE_SCREEN_SHORT_DP = 480
LARGE_SCREEN_LONG_DP = 640



class PlatformCapabilities(ABC):
    """Queries the launcher makes about the device it runs on. Any of them may raise."""

    @abstractmethod
    def supportsLowLatencyAudio(self) -> bool: ...

    @abstractmethod
    def lowLatencySampleRate(self) -> int: ...

    @abstractmethod
    def defaultSampleRate(self) -> int: ...

    @abstractmethod
    def refreshRate(self) -> float: ...

    @abstractmethod
    def inputMethodId(self) -> str: ...

    @abstractmethod
    def isLargeScreen(self) -> bool: ...



class HostPlatform(PlatformCapabilities):
    """
    Desktop host answers:
      - low-latency output rate from PIPEWIRE_QUANTUM ("frames/rate"), when set
      - generic output rate, refresh rate and form factor from launcher settings
      - active input method from the usual IM environment variables
    """
    def __init__(self, settings: PlatformSettings, environ: Mapping[str, str] | None = None) -> None:
        self.settings = settings
        self.environ = os.environ if environ is None else environ

    def supportsLowLatencyAudio(self) -> bool:
        return bool(self.settings.lowLatencyAudio) and bool(self.environ.get("PIPEWIRE_QUANTUM"))

    def lowLatencySampleRate(self) -> int:
        quantum = self.environ.get("PIPEWIRE_QUANTUM", "")
        _frames, sep, rate = quantum.partition("/")
        if not sep:
            raise PlatformQueryError(f"PIPEWIRE_QUANTUM={quantum!r} carries no sample rate")
        try:
            value = int(rate.strip())
        except ValueError as err:
            raise PlatformQueryError(f"PIPEWIRE_QUANTUM={quantum!r} has a malformed sample rate") from err
        if value <= 0:
            raise PlatformQueryError(f"PIPEWIRE_QUANTUM={quantum!r} has a non-positive sample rate")
        return value

    def defaultSampleRate(self) -> int:
        return int(self.settings.defaultSampleRate)

    def refreshRate(self) -> float:
        return float(self.settings.refreshRate)

    def inputMethodId(self) -> str:
        for name in ("GTK_IM_MODULE", "QT_IM_MODULE"):
            value = (self.environ.get(name) or "").strip()
            if value:
                return value
        modifiers = (self.environ.get("XMODIFIERS") or "").strip()
        if modifiers.startswith("@im="):
            return modifiers[len("@im="):]
        return ""

    def isLargeScreen(self) -> bool:
        formFactor = self.settings.formFactor
        if formFactor != "auto":
            return formFactor == "large"
        width, height = self.settings.displayWidthDp, self.settings.displayHeightDp
        if not width or not height:
            return False
        shortSide, longSide = sorted((int(width), int(height)))
        return shortSide >= LARGE_SCREEN_SHORT_DP and longSide >= LARGE_SCREEN_LONG_DP



def _safeQuery(query: Callable[[], T], fallback: T, what: str) -> T:
    try:
        return query()
    except Exception as err:
        logger.warning("Platform query for %s failed (%s); using %r", what, err, fallback)
        return fallback



def resolveSampleRate(platform: PlatformCapabilities) -> int:
    """
    Preferred output sample rate: the low-latency query when the platform has one,
    otherwise (or when it fails) the generic default query. Never raises.
    """
    rate: int | None = None
    if _safeQuery(platform.supportsLowLatencyAudio, False, "low-latency support"):
        try:
            rate = int(platform.lowLatencySampleRate())
        except Exception as err:
            logger.warning("Low-latency sample rate query failed (%s); falling back to default", err)
            rate = None

    if rate is None or rate <= 0:
        rate = _safeQuery(lambda: int(platform.defaultSampleRate()), FALLBACK_SAMPLE_RATE, "default sample rate")
        if rate <= 0:
            rate = FALLBACK_SAMPLE_RATE

    logger.info("Using sampling rate: %d Hz", rate)
    return rate



def resolveRefreshRate(platform: PlatformCapabilities) -> float:
    rate = _safeQuery(lambda: float(platform.refreshRate()), FALLBACK_REFRESH_RATE, "refresh rate")
    return rate if rate > 0 else FALLBACK_REFRESH_RATE



def resolveInputMethod(platform: PlatformCapabilities) -> str:
    return str(_safeQuery(platform.inputMethodId, "", "input method") or "")



def resolveLargeScreen(platform: PlatformCapabilities) -> bool:
    return bool(_safeQuery(platform.isLargeScreen, False, "form factor"))
