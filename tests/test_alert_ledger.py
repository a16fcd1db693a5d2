"""
Tests for the AlertLedger.
"""

import os
import sys
import uuid
from datetime import timedelta

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import VIN_A, VIN_B
from schemas import (
    AlertEvent,
    AlertFilter,
    AlertKind,
    AlertStatus,
    ErrorKind,
    Severity,
)


def _event(clock, vehicle_id=VIN_A, kind=AlertKind.SPEED_VIOLATION, severity=Severity.HIGH):
    return AlertEvent(
        id=str(uuid.uuid4()),
        vehicle_id=vehicle_id,
        reading_id=str(uuid.uuid4()),
        kind=kind,
        message="test",
        severity=severity,
        created_at=clock(),
    )


def test_list_is_newest_first(ledger, clock):
    older = _event(clock)
    ledger.record(older)
    clock.advance(minutes=1)
    newer = _event(clock)
    ledger.record(newer)

    assert [a.id for a in ledger.list()] == [newer.id, older.id]


def test_ties_keep_insertion_order(ledger, clock):
    first = _event(clock)
    second = _event(clock, kind=AlertKind.LOW_FUEL, severity=Severity.MEDIUM)
    ledger.record(first)
    ledger.record(second)

    assert [a.id for a in ledger.list()] == [first.id, second.id]


def test_filters_are_conjunctive(ledger, clock):
    ledger.record(_event(clock, VIN_A, AlertKind.SPEED_VIOLATION, Severity.HIGH))
    ledger.record(_event(clock, VIN_A, AlertKind.LOW_FUEL, Severity.MEDIUM))
    ledger.record(_event(clock, VIN_B, AlertKind.LOW_FUEL, Severity.MEDIUM))

    by_vehicle = ledger.list(AlertFilter(vehicle_id=VIN_A))
    by_both = ledger.list(AlertFilter(vehicle_id=VIN_A, kind=AlertKind.LOW_FUEL))
    by_severity = ledger.list(AlertFilter(severity=Severity.MEDIUM))

    assert len(by_vehicle) == 2
    assert len(by_both) == 1
    assert by_both[0].vehicle_id == VIN_A
    assert len(by_severity) == 2


def test_created_since_filter(ledger, clock):
    ledger.record(_event(clock))
    clock.advance(hours=2)
    recent = _event(clock)
    ledger.record(recent)

    result = ledger.list(AlertFilter(created_since=clock() - timedelta(hours=1)))

    assert [a.id for a in result] == [recent.id]


def test_update_status(ledger, clock):
    event = _event(clock)
    ledger.record(event)
    clock.advance(minutes=5)

    result = ledger.update_status(event.id, AlertStatus.ACKNOWLEDGED)

    assert result.success is True
    assert result.value.status == AlertStatus.ACKNOWLEDGED
    assert result.value.updated_at == clock()
    assert ledger.get(event.id).value.status == AlertStatus.ACKNOWLEDGED
    assert ledger.list(AlertFilter(status=AlertStatus.ACTIVE)) == []


def test_any_transition_is_accepted(ledger, clock):
    event = _event(clock)
    ledger.record(event)

    ledger.update_status(event.id, AlertStatus.RESOLVED)
    result = ledger.update_status(event.id, AlertStatus.ACTIVE)

    assert result.value.status == AlertStatus.ACTIVE


def test_update_unknown_alert_leaves_ledger_unchanged(ledger, clock):
    event = _event(clock)
    ledger.record(event)
    before = ledger.list()

    result = ledger.update_status("missing", AlertStatus.RESOLVED)

    assert result.success is False
    assert result.error == ErrorKind.NOT_FOUND
    assert ledger.list() == before


def test_get_unknown_alert(ledger):
    assert ledger.get("missing").error == ErrorKind.NOT_FOUND


def test_returned_events_are_copies(ledger, clock):
    event = _event(clock)
    ledger.record(event)

    listed = ledger.list()[0]
    listed.status = AlertStatus.RESOLVED
    event.status = AlertStatus.RESOLVED

    assert ledger.get(event.id).value.status == AlertStatus.ACTIVE
