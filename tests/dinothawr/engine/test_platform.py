# tests/dinothawr/engine/test_platform.py
from __future__ import annotations

import pytest

from dinothawr.app.settings import PlatformSettings
from dinothawr.core.errors import PlatformQueryError
from dinothawr.engine.platform import (
    FALLBACK_REFRESH_RATE, FALLBACK_SAMPLE_RATE, HostPlatform, PlatformCapabilities,
    resolveInputMethod, resolveLargeScreen, resolveRefreshRate, resolveSampleRate,
)


# ----------------------------
# Helpers
# ----------------------------

class ScriptedPlatform(PlatformCapabilities):
    """Answers from constructor args; an Exception instance is raised instead of returned."""
    def __init__(self, *, lowLatency=True, lowLatencyRate=44100, defaultRate=48000,
                 refresh=60.0, ime="ibus", large=False):
        self.answers = {
            "supportsLowLatencyAudio": lowLatency,
            "lowLatencySampleRate": lowLatencyRate,
            "defaultSampleRate": defaultRate,
            "refreshRate": refresh,
            "inputMethodId": ime,
            "isLargeScreen": large,
        }
        self.calls: list[str] = []

    def _answer(self, name: str):
        self.calls.append(name)
        value = self.answers[name]
        if isinstance(value, Exception):
            raise value
        return value

    def supportsLowLatencyAudio(self): return self._answer("supportsLowLatencyAudio")
    def lowLatencySampleRate(self): return self._answer("lowLatencySampleRate")
    def defaultSampleRate(self): return self._answer("defaultSampleRate")
    def refreshRate(self): return self._answer("refreshRate")
    def inputMethodId(self): return self._answer("inputMethodId")
    def isLargeScreen(self): return self._answer("isLargeScreen")


# ----------------------------
# Sample rate resolution
# ----------------------------

def test_sampleRate_prefersLowLatencyQuery() -> None:
    platform = ScriptedPlatform(lowLatencyRate=44100, defaultRate=48000)
    assert resolveSampleRate(platform) == 44100
    assert "defaultSampleRate" not in platform.calls


def test_sampleRate_withoutLowLatencySupport_usesDefaultQuery() -> None:
    platform = ScriptedPlatform(lowLatency=False, defaultRate=22050)
    assert resolveSampleRate(platform) == 22050
    assert "lowLatencySampleRate" not in platform.calls


def test_sampleRate_lowLatencyQueryThrows_fallsBackToDefault() -> None:
    platform = ScriptedPlatform(lowLatencyRate=PlatformQueryError("unsupported"), defaultRate=32000)
    assert resolveSampleRate(platform) == 32000


def test_sampleRate_supportProbeThrows_fallsBackToDefault() -> None:
    platform = ScriptedPlatform(lowLatency=RuntimeError("probe failed"), defaultRate=32000)
    assert resolveSampleRate(platform) == 32000


def test_sampleRate_everythingFails_usesConstant() -> None:
    platform = ScriptedPlatform(lowLatencyRate=ValueError("x"), defaultRate=OSError("no audio"))
    assert resolveSampleRate(platform) == FALLBACK_SAMPLE_RATE


def test_sampleRate_nonPositiveAnswers_areIgnored() -> None:
    platform = ScriptedPlatform(lowLatencyRate=0, defaultRate=-1)
    assert resolveSampleRate(platform) == FALLBACK_SAMPLE_RATE


def test_otherQueries_fallBackInsteadOfRaising() -> None:
    platform = ScriptedPlatform(refresh=RuntimeError(), ime=RuntimeError(), large=RuntimeError())
    assert resolveRefreshRate(platform) == FALLBACK_REFRESH_RATE
    assert resolveInputMethod(platform) == ""
    assert resolveLargeScreen(platform) is False


# ----------------------------
# HostPlatform
# ----------------------------

def test_hostPlatform_lowLatencyFromPipewireQuantum() -> None:
    host = HostPlatform(PlatformSettings(), environ={"PIPEWIRE_QUANTUM": "256/44100"})
    assert host.supportsLowLatencyAudio() is True
    assert host.lowLatencySampleRate() == 44100
    assert resolveSampleRate(host) == 44100


@pytest.mark.parametrize("quantum", ["256", "256/abc", "256/0"])
def test_hostPlatform_malformedQuantum_raisesQueryError(quantum: str) -> None:
    host = HostPlatform(PlatformSettings(defaultSampleRate=44100), environ={"PIPEWIRE_QUANTUM": quantum})
    with pytest.raises(PlatformQueryError):
        host.lowLatencySampleRate()
    assert resolveSampleRate(host) == 44100


def test_hostPlatform_lowLatencyDisabledInSettings() -> None:
    host = HostPlatform(PlatformSettings(lowLatencyAudio=False, defaultSampleRate=32000),
                        environ={"PIPEWIRE_QUANTUM": "256/44100"})
    assert host.supportsLowLatencyAudio() is False
    assert resolveSampleRate(host) == 32000


@pytest.mark.parametrize(
    "environ, expected",
    [
        ({"GTK_IM_MODULE": "fcitx", "QT_IM_MODULE": "ibus"}, "fcitx"),
        ({"QT_IM_MODULE": "ibus"}, "ibus"),
        ({"XMODIFIERS": "@im=uim"}, "uim"),
        ({"XMODIFIERS": "garbage"}, ""),
        ({}, ""),
    ],
)
def test_hostPlatform_inputMethod(environ: dict[str, str], expected: str) -> None:
    assert HostPlatform(PlatformSettings(), environ=environ).inputMethodId() == expected


@pytest.mark.parametrize(
    "settings, expected",
    [
        (PlatformSettings(formFactor="large"), True),
        (PlatformSettings(formFactor="standard", displayWidthDp=1280, displayHeightDp=800), False),
        (PlatformSettings(), False),
        (PlatformSettings(displayWidthDp=800, displayHeightDp=1280), True),
        (PlatformSettings(displayWidthDp=360, displayHeightDp=640), False),
    ],
)
def test_hostPlatform_formFactor(settings: PlatformSettings, expected: bool) -> None:
    assert HostPlatform(settings, environ={}).isLargeScreen() is expected


def test_hostPlatform_refreshRateFromSettings() -> None:
    assert HostPlatform(PlatformSettings(refreshRate=144.0), environ={}).refreshRate() == 144.0


def test_nonNumericAnswers_fallBackInsteadOfRaising() -> None:
    platform = ScriptedPlatform(lowLatency=False, defaultRate="fast", refresh="smooth")
    assert resolveSampleRate(platform) == FALLBACK_SAMPLE_RATE
    assert resolveRefreshRate(platform) == FALLBACK_REFRESH_RATE
