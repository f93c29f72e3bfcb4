"""Unit tests for the in-memory license redemption register."""

import threading

from sessiongate.adapters.license_store import (
    DEFAULT_LICENSE_RETENTION_SECONDS,
    InMemoryLicenseStore,
)


def test_redeem_once(clock) -> None:
    store = InMemoryLicenseStore(clock=clock)

    assert store.is_used("LIC-1") is False
    assert store.redeem("LIC-1", "buyer@example.com") is True
    assert store.is_used("LIC-1") is True
    assert store.redeem("LIC-1") is False


def test_mark_used_overwrites(clock) -> None:
    store = InMemoryLicenseStore(clock=clock)
    store.mark_used("LIC-1")
    store.mark_used("LIC-1", "later@example.com")

    assert store.stats() == {"total_used": 1}


def test_cleanup_forgets_old_redemptions(clock) -> None:
    store = InMemoryLicenseStore(clock=clock)
    store.redeem("old")
    clock.advance(DEFAULT_LICENSE_RETENTION_SECONDS - 10)
    store.redeem("recent")
    clock.advance(20)

    assert store.cleanup_older_than() == 1
    assert store.is_used("old") is False
    assert store.is_used("recent") is True


def test_concurrent_redeem_succeeds_once() -> None:
    store = InMemoryLicenseStore()
    workers = 16
    barrier = threading.Barrier(workers)
    outcomes: list[bool] = []
    lock = threading.Lock()

    def _redeem() -> None:
        barrier.wait()
        redeemed = store.redeem("shared-key")
        with lock:
            outcomes.append(redeemed)

    threads = [threading.Thread(target=_redeem) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(True) == 1
