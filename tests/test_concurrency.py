"""
Tests for per-key locking and concurrent access to the stores.
"""

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import VIN_A, VIN_B
from core.concurrency import KeyedLocks
from schemas import AlertStatus, ReadingFields


def test_same_key_returns_same_lock():
    locks = KeyedLocks("test")

    assert locks.lock_for("a") is locks.lock_for("a")
    assert locks.lock_for("a") is not locks.lock_for("b")


def test_stats_track_keys_and_held():
    locks = KeyedLocks("test")

    with locks.hold("a"):
        during = locks.stats()
    after = locks.stats()

    assert during == {"name": "test", "keys": 1, "held": 1}
    assert after["held"] == 0


def test_hold_releases_on_error():
    locks = KeyedLocks("test")

    try:
        with locks.hold("a"):
            raise ValueError("boom")
    except ValueError:
        pass

    assert locks.lock_for("a").acquire(blocking=False)


def test_different_keys_do_not_block():
    locks = KeyedLocks("test")
    acquired = threading.Event()

    def other_key():
        with locks.hold("b"):
            acquired.set()

    with locks.hold("a"):
        thread = threading.Thread(target=other_key)
        thread.start()
        assert acquired.wait(timeout=2)
    thread.join()


def test_concurrent_appends_lose_nothing(runtime):
    def ingest(i):
        vin = VIN_A if i % 2 == 0 else VIN_B
        return runtime.ingestion.ingest(vin, ReadingFields(speed=i % 100, odometer=i))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(ingest, range(400)))

    assert all(r.success for r in results)
    assert runtime.store.count() == 400
    assert len(runtime.store.history(VIN_A).value) == 200
    ids = {r.value.reading.id for r in results}
    assert len(ids) == 400

    history = runtime.store.history(VIN_A).value
    timestamps = [r.timestamp for r in history]
    assert timestamps == sorted(timestamps, reverse=True)


def test_concurrent_status_updates_keep_one_value(runtime):
    outcome = runtime.ingestion.ingest(VIN_A, ReadingFields(speed=120)).value
    alert_id = outcome.alerts[0].id
    statuses = [AlertStatus.ACKNOWLEDGED, AlertStatus.RESOLVED] * 50

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda s: runtime.ledger.update_status(alert_id, s), statuses))

    assert all(r.success for r in results)
    assert runtime.ledger.get(alert_id).value.status in (
        AlertStatus.ACKNOWLEDGED,
        AlertStatus.RESOLVED,
    )
    assert runtime.ledger.count() == 1
