"""PublicationScheduler — periodic background republishing.

Runs a daemon thread that wakes at every epoch boundary (or after a fixed
interval) and invokes a republish callable. The scheduler never touches the
registry itself; the callable goes through the service's locked interface.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from dynamic_status_list.errors import CryptoFailure, StatusListError
from dynamic_status_list.publication.models import Publication

logger = logging.getLogger(__name__)


class PublicationScheduler:
    """Calls *republish* once per epoch until stopped.

    Parameters
    ----------
    republish:
        Callable producing a new publication. Typically
        :meth:`StatusListService.republish`.
    period:
        Fallback interval in seconds, used until the first publication
        reports its ``next_update``.
    clock:
        Returns the current unix time. Injectable for tests.
    """

    def __init__(
        self,
        republish: Callable[[], Publication],
        period: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self._republish = republish
        self._period = period
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._runs = 0
        self._last_error: BaseException | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background thread. Starting twice is a no-op."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run, name="dsl-publication-scheduler", daemon=True
            )
            self._thread.start()
        logger.info("Publication scheduler started (period=%ds)", self._period)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the thread to stop and wait for it to exit."""
        self._stop_event.set()
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is not None:
            thread.join(timeout)
        logger.info("Publication scheduler stopped after %d run(s)", self._runs)

    @property
    def running(self) -> bool:
        """True while the background thread is alive."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def runs(self) -> int:
        """Number of successful republish calls."""
        return self._runs

    @property
    def last_error(self) -> BaseException | None:
        """The most recent error raised by the republish callable."""
        return self._last_error

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the scheduler is stopped; return True if it stopped."""
        return self._stop_event.wait(timeout)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def run_once(self) -> Publication | None:
        """Republish once; return the publication or None on a recoverable error.

        Raises
        ------
        CryptoFailure
            Signing failed. The scheduler cannot recover from this.
        """
        try:
            publication = self._republish()
        except CryptoFailure:
            raise
        except StatusListError as exc:
            self._last_error = exc
            logger.error("Scheduled republish failed: %s", exc)
            return None
        self._runs += 1
        return publication

    def _run(self) -> None:
        delay = self._seconds_until_boundary(None)
        while not self._stop_event.wait(delay):
            try:
                publication = self.run_once()
            except CryptoFailure as exc:
                self._last_error = exc
                logger.critical("Stopping publication scheduler: %s", exc)
                self._stop_event.set()
                return
            delay = self._seconds_until_boundary(publication)

    def _seconds_until_boundary(self, publication: Publication | None) -> float:
        now = self._clock()
        if publication is not None and publication.next_update > now:
            return publication.next_update - now
        remainder = self._period - (now % self._period)
        return remainder if remainder > 0 else float(self._period)


__all__ = ["PublicationScheduler"]
