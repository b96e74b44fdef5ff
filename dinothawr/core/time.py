# dinothawr/core/time.py
from __future__ import annotations
import time

__all__ = ["nowMonotonicMs", "elapsedMs"]



def nowMonotonicMs() -> int:
    """Returns the current monotonic time in milliseconds."""
    return int(time.perf_counter() * 1000)



def elapsedMs(startMs: int) -> int:
    return max(0, nowMonotonicMs() - startMs)
