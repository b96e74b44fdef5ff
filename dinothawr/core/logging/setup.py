# dinothawr/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING

from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

if TYPE_CHECKING:
    from dinothawr.app.settings import DebugSettings

__all__ = ["NO_PROPAGATE", "LOG_FILE_NAME", "configureLogging"]



# Disable propagation from chatty libraries
NO_PROPAGATE = [
    "concurrent.futures", "asyncio",
]

LOG_FILE_NAME = "launcher.log"



def configureLogging(debug: DebugSettings | None = None, *, logDir: Path | None = None, devMode: bool | None = None) -> None:
    """
    Initiate the global logging configuration.

    Dev:
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG)

    Normal:
      - Console INFO
      - JSON file log INFO with rotation
      - Optional recurring suppression (toggle)

    `devMode` overrides `debug.devModeEnabled` (the --debug flag). Without `logDir`
    no file handler is attached; the runtime directory may not exist yet on first run.
    """
    if devMode is None:
        devMode = bool(debug.devModeEnabled) if debug is not None else False
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers: list[logging.Handler] = [consoleHandler]

    if logDir is not None:
        try:
            logDir.mkdir(parents=True, exist_ok=True)
            fileHandler = logging.handlers.RotatingFileHandler(
                logDir / LOG_FILE_NAME,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8"
            )
        except OSError as err:
            # Console logging still works; the launch itself must not depend on the log file
            logging.getLogger(__name__).warning("Cannot open log file in '%s': %s", logDir, err)
        else:
            fileHandler.setLevel(rootLevel)
            fileHandler.setFormatter(JsonFormatter())
            handlers.append(fileHandler)

    suppress = debug.suppressRecurringMessages if debug is not None else None
    if suppress is not None and suppress.enabled:
        summaryLevel = getattr(logging, str(suppress.summaryLevel).upper(), logging.INFO)
        suppressFilter = RecurringSuppressFilter(
            windowSeconds=suppress.windowSeconds,
            maxPerWindow=suppress.maxPerWindow,
            summaryLevel=summaryLevel,
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)
