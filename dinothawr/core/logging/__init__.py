# dinothawr/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, unsetLogContext, clearLogContext, getLogContext
from .setup import configureLogging

__all__ = [
    "configureLogging",
    "setLogContext",
    "unsetLogContext",
    "clearLogContext",
    "getLogContext",
]
