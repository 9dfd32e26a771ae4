"""Tests for dynamic_status_list.publication.scheduler — PublicationScheduler."""
from __future__ import annotations

import threading
import time

import pytest

from dynamic_status_list.errors import CryptoFailure, StorageError
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.publication.scheduler import PublicationScheduler


def _publication(next_update: int = 0) -> Publication:
    return Publication(
        issuer_thumbprint="ab",
        not_before=0,
        not_after=max(next_update - 1, 0),
        next_update=next_update,
        identifiers=(),
        token="t",
    )


def _wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


# ---------------------------------------------------------------------------
# run_once
# ---------------------------------------------------------------------------


class TestRunOnce:
    def test_success_counts_run(self) -> None:
        scheduler = PublicationScheduler(_publication, period=60)
        assert scheduler.run_once() is not None
        assert scheduler.runs == 1

    def test_recoverable_error_is_recorded(self) -> None:
        def failing() -> Publication:
            raise StorageError("disk full")

        scheduler = PublicationScheduler(failing, period=60)
        assert scheduler.run_once() is None
        assert isinstance(scheduler.last_error, StorageError)
        assert scheduler.runs == 0

    def test_crypto_failure_propagates(self) -> None:
        def failing() -> Publication:
            raise CryptoFailure("signing failed")

        scheduler = PublicationScheduler(failing, period=60)
        with pytest.raises(CryptoFailure):
            scheduler.run_once()

    def test_non_positive_period_rejected(self) -> None:
        with pytest.raises(ValueError):
            PublicationScheduler(_publication, period=0)


# ---------------------------------------------------------------------------
# Background thread
# ---------------------------------------------------------------------------


class TestBackgroundLoop:
    def test_republishes_at_each_boundary(self) -> None:
        # 0.98 s into a 1 s epoch: every wake-up is 20 ms away
        scheduler = PublicationScheduler(_publication, period=1, clock=lambda: 100.98)
        scheduler.start()
        try:
            assert _wait_until(lambda: scheduler.runs >= 3)
            assert scheduler.running
        finally:
            scheduler.stop(timeout=5)
        assert not scheduler.running

    def test_delay_follows_next_update(self) -> None:
        scheduler = PublicationScheduler(_publication, period=60, clock=lambda: 100.5)
        assert scheduler._seconds_until_boundary(_publication(next_update=103)) == pytest.approx(2.5)

    def test_delay_falls_back_to_period_grid(self) -> None:
        scheduler = PublicationScheduler(_publication, period=60, clock=lambda: 100.5)
        assert scheduler._seconds_until_boundary(None) == pytest.approx(19.5)
        # stale next_update
        assert scheduler._seconds_until_boundary(_publication(next_update=90)) == pytest.approx(19.5)

    def test_crypto_failure_stops_loop(self) -> None:
        def failing() -> Publication:
            raise CryptoFailure("signing failed")

        scheduler = PublicationScheduler(failing, period=1, clock=lambda: 100.98)
        scheduler.start()
        assert scheduler.wait(timeout=5)
        assert _wait_until(lambda: not scheduler.running)
        assert isinstance(scheduler.last_error, CryptoFailure)
        scheduler.stop(timeout=5)

    def test_recoverable_errors_keep_loop_alive(self) -> None:
        attempts = threading.Event()
        counter = {"n": 0}

        def flaky() -> Publication:
            counter["n"] += 1
            if counter["n"] >= 3:
                attempts.set()
            if counter["n"] == 1:
                raise StorageError("transient")
            return _publication()

        scheduler = PublicationScheduler(flaky, period=1, clock=lambda: 100.98)
        scheduler.start()
        try:
            assert attempts.wait(timeout=5)
        finally:
            scheduler.stop(timeout=5)
        assert scheduler.runs >= 2
        assert isinstance(scheduler.last_error, StorageError)

    def test_start_twice_is_noop(self) -> None:
        scheduler = PublicationScheduler(_publication, period=60)
        scheduler.start()
        try:
            first = scheduler._thread
            scheduler.start()
            assert scheduler._thread is first
        finally:
            scheduler.stop(timeout=5)

    def test_stop_without_start(self) -> None:
        scheduler = PublicationScheduler(_publication, period=60)
        scheduler.stop()
        assert not scheduler.running
