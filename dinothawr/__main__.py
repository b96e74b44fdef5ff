# dinothawr/__main__.py
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

from dinothawr.app.lifecycle import STATE_KEY
from dinothawr.app.settings import loadSettings
from dinothawr.app.shell import LauncherShell
from dinothawr.config.preferences import parsePreferenceValue
from dinothawr.core.errors import EngineSpawnError
from dinothawr.core.logging import configureLogging
from dinothawr.engine.process import buildEngineCommand

logger = logging.getLogger("dinothawr.launcher")



def _parsePrefs(pairs: list[str], parser: argparse.ArgumentParser) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            parser.error(f"--pref expects KEY=VALUE, got {pair!r}")
        overrides[key.strip()] = parsePreferenceValue(value)
    return overrides



def buildParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dinothawr-launcher", description="Stage Dinothawr assets and start the engine")
    parser.add_argument("--settings", type=Path, default=None, help="launcher settings file (json5)")
    parser.add_argument("--debug", action="store_true", help="verbose console and file logging")
    parser.add_argument("--stage-only", action="store_true", help="stage assets, then exit")
    parser.add_argument("--dry-run", action="store_true", help="print the engine command instead of running it")
    parser.add_argument("--restore-state", action="store_true", help="assets are already staged; skip staging")
    parser.add_argument("--pref", action="append", default=[], metavar="KEY=VALUE",
                        help="override a user preference for this launch (repeatable)")
    return parser



def main(argv: list[str] | None = None) -> int:
    parser = buildParser()
    args = parser.parse_args(argv)
    overrides = _parsePrefs(args.pref, parser)

    configureLogging(devMode=args.debug)
    settings = loadSettings(args.settings)
    configureLogging(settings.debug, logDir=settings.runtimeDir, devMode=args.debug or None)

    shell = LauncherShell(settings, savedState={STATE_KEY: True} if args.restore_state else None)
    shell.onCreate()

    if args.stage_only:
        shell.gate.awaitCompletion()
        print(json.dumps(shell.snapshot(), indent=2))
        return 0

    prefs = shell.loadPreferences(overrides)
    logger.debug("Preferences: %s", prefs.snapshot())

    if args.dry_run:
        params = shell.prepare(prefs)
        print(" ".join(buildEngineCommand(settings.paths.frontend, params)))
        return 0

    try:
        shell.startNative(prefs)
    except EngineSpawnError as err:
        logger.error("Could not start the game: %s", err)
        return 1
    return 0



if __name__ == "__main__":
    sys.exit(main())
