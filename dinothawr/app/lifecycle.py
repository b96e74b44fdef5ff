# dinothawr/app/lifecycle.py
from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path

from dinothawr.content.staging import Stager, StagingPlan, StagingResult
from dinothawr.core.errors import DirectoryCreateError
from dinothawr.core.logging import setLogContext

logger = logging.getLogger(__name__)

__all__ = ["LifecycleState", "LifecycleGate", "STATE_KEY"]

# Key used when the launcher persists the gate into its instance state
STATE_KEY = "EXTRACTED"



class LifecycleState(str, Enum):
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETE = "complete"



class LifecycleGate:
    """
    Owns the one-time staging pass for this install.

      - begin() starts staging on a single background thread and returns at once
      - awaitCompletion() is the join point used right before the engine starts
      - saveState()/restoreState() carry the COMPLETE flag across a controlled
        teardown-and-recreate of the launcher, so staging is not repeated

    There is no cancellation. If the process dies mid-copy the work is lost and the
    next process simply calls begin() again; staging overwrites in place.
    """
    def __init__(self, stager: Stager) -> None:
        self._stager = stager
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._done.set() # nothing to wait for until begin() runs
        self._state = LifecycleState.NOT_STARTED
        self._worker: threading.Thread | None = None
        self._lastResult: StagingResult | None = None

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def lastResult(self) -> StagingResult | None:
        with self._lock:
            return self._lastResult

    def begin(self, plan: StagingPlan, destinationRoot: str | Path) -> bool:
        """
        Starts staging unless it already ran (or is running) for this install.
        Returns True when a worker was started.
        """
        with self._lock:
            if self._state is LifecycleState.COMPLETE:
                logger.debug("Assets already staged; begin() is a no-op")
                return False
            if self._state is LifecycleState.IN_PROGRESS:
                logger.debug("Staging already in progress; begin() is a no-op")
                return False

            self._state = LifecycleState.IN_PROGRESS
            self._done.clear()
            self._worker = threading.Thread(
                target=self._run,
                args=(plan, Path(destinationRoot)),
                name="asset-staging",
                daemon=True,
            )
            worker = self._worker

        logger.info("Starting asset staging thread ...")
        worker.start()
        return True

    def _run(self, plan: StagingPlan, destinationRoot: Path) -> None:
        setLogContext(task="staging")
        result: StagingResult | None = None
        try:
            result = self._stager.stage(plan, destinationRoot)
        except DirectoryCreateError as err:
            # A broken install must not block an attempt to play
            logger.error("Staging aborted: %s", err)
            result = err.result
        except Exception:
            logger.exception("Staging failed unexpectedly")
        finally:
            with self._lock:
                self._lastResult = result
                self._state = LifecycleState.COMPLETE
                self._done.set()
            logger.info("Staging complete")

    def awaitCompletion(self, timeout: float | None = None) -> bool:
        """
        Blocks until staging is COMPLETE. Returns at once if begin() was never called
        or staging already finished. Safe to call any number of times.
        Returns False only if `timeout` elapsed first.
        """
        with self._lock:
            if self._state is not LifecycleState.IN_PROGRESS:
                return True
            worker = self._worker

        logger.debug("Waiting for asset staging to finish ...")
        if not self._done.wait(timeout):
            return False
        if worker is not None and worker is not threading.current_thread():
            worker.join()
        return True

    def saveState(self) -> bool:
        with self._lock:
            return self._state is LifecycleState.COMPLETE

    def restoreState(self, complete: bool) -> None:
        """
        Applies a flag captured by saveState() in a previous incarnation.
        A running worker keeps ownership of the state; it will mark COMPLETE itself.
        """
        with self._lock:
            if not complete or self._state is not LifecycleState.NOT_STARTED:
                return
            self._state = LifecycleState.COMPLETE
            self._done.set()
        logger.debug("Restored staging state: complete")
