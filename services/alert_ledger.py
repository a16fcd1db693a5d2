"""
Alert ledger: storage, filtered retrieval and status transitions.

Events are never deleted. Status updates are read-modify-write under the
alert's own lock; callers only ever receive copies.
"""

import dataclasses
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from core.concurrency import KeyedLocks
from core.structured_logging import get_logger
from schemas import AlertEvent, AlertFilter, AlertStatus, ErrorKind, OperationResult

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlertLedger:
    """In-memory alert ledger keyed by alert id, in insertion order."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._events: Dict[str, AlertEvent] = {}
        self._lock = threading.Lock()
        self._locks = KeyedLocks("alerts")

    def _snapshot(self, event: AlertEvent) -> AlertEvent:
        with self._locks.hold(event.id):
            return dataclasses.replace(event)

    def record(self, event: AlertEvent) -> None:
        """Store an event. Every rule firing is distinct; no dedup."""
        stored = dataclasses.replace(event)
        with self._lock:
            self._events[stored.id] = stored

        logger.info("Alert recorded", context={
            "alert_id": stored.id,
            "vehicle_id": stored.vehicle_id,
            "kind": stored.kind.value,
            "severity": stored.severity.value,
        })

    def list(self, filters: Optional[AlertFilter] = None) -> List[AlertEvent]:
        """
        Matching events, newest first by creation time.

        Python's sort is stable, so events created at the same instant keep
        insertion order.
        """
        with self._lock:
            events = list(self._events.values())

        snapshots = [self._snapshot(e) for e in events]
        if filters is not None:
            snapshots = [e for e in snapshots if filters.matches(e)]
        return sorted(snapshots, key=lambda e: e.created_at, reverse=True)

    def get(self, alert_id: str) -> OperationResult:
        event = self._events.get(alert_id)
        if event is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Alert {alert_id} not found")
        return OperationResult.ok(self._snapshot(event))

    def update_status(self, alert_id: str, status: AlertStatus) -> OperationResult:
        """
        Set the status of an alert.

        Any transition is accepted; deciding who may acknowledge or resolve
        belongs to the caller.
        """
        event = self._events.get(alert_id)
        if event is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Alert {alert_id} not found")

        with self._locks.hold(alert_id):
            previous = event.status
            event.status = status
            event.updated_at = self._clock()
            snapshot = dataclasses.replace(event)

        logger.info("Alert status updated", context={
            "alert_id": alert_id,
            "from": previous.value,
            "to": status.value,
        })
        return OperationResult.ok(snapshot)

    def count(self) -> int:
        return len(self._events)

    def lock_stats(self) -> dict:
        return self._locks.stats()
