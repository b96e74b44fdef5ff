# dinothawr/core/logging/filters.py
from __future__ import annotations
import logging
import time
import threading
from collections import deque, defaultdict
from collections.abc import Callable

__all__ = ["RecurringSuppressFilter"]

# Upper bound for normalized message keys
MAX_KEY_LEN = 512



class RecurringSuppressFilter(logging.Filter):
    """
    Suppresses recurring identical log messages after `maxPerWindow` occurrences
    within a sliding `windowSeconds`. Emits a summary once the window slides and
    logging resumes for that key.

    Key = (logger name, levelno, normalized message)

    A corrupt bundle can produce one skip warning per asset; this keeps the
    console readable while the file log still gets the first few.

    Thread-safe; the staging worker and the caller thread log concurrently.
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
            normalize: Callable[[logging.LogRecord], str] | None = None,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self.normalize = normalize or self._defaultNormalize

        self._buckets: dict[tuple[str, int, str], deque[float]] = defaultdict(deque)
        self._suppressedCounts: dict[tuple[str, int, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    def _defaultNormalize(self, record: logging.LogRecord) -> str:
        # Key on the message template so per-asset paths collapse into one bucket
        norm = " ".join(str(record.msg).split())
        if len(norm) > MAX_KEY_LEN:
            norm = norm[:MAX_KEY_LEN] + "..."
        return norm

    def _keyOf(self, record: logging.LogRecord) -> tuple[str, int, str]:
        return (record.name, record.levelno, self.normalize(record))

    def _pruneOld(self, dq: deque[float], now: float) -> None:
        limit = now - self.windowSeconds
        while dq and dq[0] < limit:
            dq.popleft()

    def _emitSummary(self, key: tuple[str, int, str], suppressedCount: int) -> None:
        loggerName, _levelno, normMessage = key
        # Marked so this filter lets it through
        logging.getLogger(loggerName).log(
            self.summaryLevel,
            "Suppressed %d repeated logs: %s",
            suppressedCount,
            normMessage,
            extra={"_noRecurringSuppress": True}
        )

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        now = time.monotonic()
        key = self._keyOf(record)

        with self._lock:
            dq = self._buckets[key]
            self._pruneOld(dq, now)

            if len(dq) < self.maxPerWindow:
                dq.append(now)
                suppressedCount = self._suppressedCounts.pop(key, 0)
            else:
                # Over the limit -> suppress and count
                self._suppressedCounts[key] += 1
                dq.append(now)
                return False

        if suppressedCount > 0:
            # We are exiting the suppression window; report what we dropped
            self._emitSummary(key, suppressedCount)
        return True
