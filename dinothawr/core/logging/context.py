# dinothawr/core/logging/context.py
from __future__ import annotations
import contextvars

# All log context lives here. Enrich this from the staging worker and launch path.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("dinothawr.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (launchId, stageDir, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    """Clear context after a staging pass or launch attempt is done."""
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()

def unsetLogContext(*keys: str):
    """Drop individual keys, keeping the rest of the context."""
    current = {key: value for key, value in (_logContextVar.get() or {}).items() if key not in keys}
    _logContextVar.set(current or None)
