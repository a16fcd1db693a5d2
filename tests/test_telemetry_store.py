"""
Tests for the TelemetryStore.
"""

import os
import sys
from datetime import timedelta

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import VIN_A, VIN_B, VIN_C
from schemas import ErrorKind, ReadingFields


def _append(store, clock, vin, **fields):
    result = store.append(vin, ReadingFields(**fields))
    clock.advance(seconds=30)
    return result


def test_append_rejects_unknown_vehicle(store):
    result = store.append(VIN_C, ReadingFields(speed=10))

    assert result.success is False
    assert result.error == ErrorKind.UNKNOWN_VEHICLE
    assert store.count() == 0


def test_append_assigns_server_timestamp(store, clock):
    result = store.append(VIN_A, ReadingFields(speed=40))

    assert result.success is True
    assert result.value.timestamp == clock.now
    assert result.value.vehicle_id == VIN_A
    assert result.value.id


def test_client_timestamp_is_informational(store, clock):
    client_time = clock.now - timedelta(days=3)
    reading = store.append(VIN_A, ReadingFields(speed=40, client_timestamp=client_time)).value

    assert reading.client_timestamp == client_time
    assert reading.timestamp == clock.now


def test_timestamps_never_move_backwards(store, clock):
    first = store.append(VIN_A, ReadingFields(speed=1)).value
    clock.advance(minutes=-5)
    second = store.append(VIN_A, ReadingFields(speed=2)).value

    assert second.timestamp >= first.timestamp


def test_history_is_newest_first_across_interleaved_vehicles(store, clock):
    for speed in range(5):
        _append(store, clock, VIN_A, speed=speed)
        _append(store, clock, VIN_B, speed=100 + speed)

    history = store.history(VIN_A).value

    assert [r.speed for r in history] == [4, 3, 2, 1, 0]
    timestamps = [r.timestamp for r in history]
    assert timestamps == sorted(timestamps, reverse=True)
    assert all(r.vehicle_id == VIN_A for r in history)


def test_history_limit_and_offset(store, clock):
    for speed in range(6):
        _append(store, clock, VIN_A, speed=speed)

    assert [r.speed for r in store.history(VIN_A, offset=1, limit=2).value] == [4, 3]
    assert [r.speed for r in store.history(VIN_A, limit=3).value] == [5, 4, 3]
    assert [r.speed for r in store.history(VIN_A, offset=4).value] == [1, 0]
    assert store.history(VIN_A, offset=10).value == []


def test_history_known_vehicle_without_readings_is_empty(store):
    result = store.history(VIN_B)

    assert result.success is True
    assert result.value == []


def test_history_unknown_vehicle_fails(store):
    result = store.history(VIN_C)

    assert result.success is False
    assert result.error == ErrorKind.UNKNOWN_VEHICLE


def test_history_survives_vehicle_deletion(store, registry, clock):
    _append(store, clock, VIN_A, speed=10)
    registry.delete(VIN_A)

    assert len(store.history(VIN_A).value) == 1
    assert store.append(VIN_A, ReadingFields(speed=20)).error == ErrorKind.UNKNOWN_VEHICLE


def test_latest_returns_last_appended(store, clock):
    for speed in (10, 20, 30):
        last = _append(store, clock, VIN_A, speed=speed).value

    assert store.latest(VIN_A).value == last


def test_latest_without_readings_is_no_data(store):
    result = store.latest(VIN_B)

    assert result.success is False
    assert result.error == ErrorKind.NO_DATA


def test_latest_unknown_vehicle(store):
    assert store.latest(VIN_C).error == ErrorKind.UNKNOWN_VEHICLE


def test_odometer_decrease_is_flagged_but_stored(store, clock):
    _append(store, clock, VIN_A, odometer=150)
    result = store.append(VIN_A, ReadingFields(odometer=120))

    assert result.success is True
    assert result.warnings == [ErrorKind.ODOMETER_ANOMALY]
    assert result.value.odometer_anomaly is True
    assert store.anomaly_count() == 1
    assert store.count() == 2


def test_all_since_filters_and_is_restartable(store, clock):
    _append(store, clock, VIN_A, speed=1)
    bound = clock.now
    _append(store, clock, VIN_A, speed=2)
    _append(store, clock, VIN_B, speed=3)

    first_pass = list(store.all_since(bound))
    second_pass = list(store.all_since(bound))

    assert first_pass == second_pass
    assert sorted(r.speed for _, r in first_pass) == [2, 3]
    assert all(r.timestamp >= bound for _, r in first_pass)


def test_all_since_is_lazy(store, clock):
    _append(store, clock, VIN_A, speed=1)

    iterator = store.all_since(clock.now - timedelta(days=1))

    assert next(iterator)[0] == VIN_A


def test_count_per_vehicle(store, clock):
    for _ in range(3):
        _append(store, clock, VIN_A, speed=1)
    _append(store, clock, VIN_B, speed=1)

    assert store.count(VIN_A) == 3
    assert store.count(VIN_B) == 1
    assert store.count(VIN_C) == 0
    assert store.count() == 4
