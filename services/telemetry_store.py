"""
Deterministic in-memory telemetry store.

Holds one append-only, timestamp-ordered sequence per vehicle. Each
sequence has its own lock, so appends for different vehicles never block
each other while appends and reads on the same vehicle are linearizable.
"""

import bisect
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from core.concurrency import KeyedLocks
from core.structured_logging import get_logger
from schemas import ErrorKind, OperationResult, Reading, ReadingFields

from .vehicle_registry import VehicleRegistry

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _VehicleTrack:
    """Readings of one vehicle plus the parallel list of their timestamps."""
    readings: List[Reading] = field(default_factory=list)
    timestamps: List[datetime] = field(default_factory=list)
    last_odometer: Optional[float] = None
    anomalies: int = 0


class TelemetryStore:
    """
    In-memory store for vehicle readings.

    Given the same sequence of appends and clock values it produces the
    same histories.
    """

    def __init__(
        self,
        registry: VehicleRegistry,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._registry = registry
        self._clock = clock
        self._tracks: Dict[str, _VehicleTrack] = {}
        self._tracks_lock = threading.Lock()
        self._locks = KeyedLocks("telemetry")

    def _track(self, vehicle_id: str) -> _VehicleTrack:
        track = self._tracks.get(vehicle_id)
        if track is None:
            with self._tracks_lock:
                track = self._tracks.setdefault(vehicle_id, _VehicleTrack())
        return track

    def _unknown(self, vehicle_id: str) -> OperationResult:
        return OperationResult.fail(
            ErrorKind.UNKNOWN_VEHICLE,
            f"Vehicle {vehicle_id} not found",
        )

    # =========================================================================
    # WRITES
    # =========================================================================

    def append(self, vehicle_id: str, fields: ReadingFields) -> OperationResult:
        """
        Store one reading for a registered vehicle.

        The server timestamp never moves backwards within a vehicle, even if
        the wall clock does. An odometer lower than the previous one is
        flagged and reported as a warning; the reading is still stored.
        """
        if not self._registry.exists(vehicle_id):
            logger.warning("Telemetry rejected for unknown vehicle", context={
                "vehicle_id": vehicle_id,
            })
            return self._unknown(vehicle_id)

        track = self._track(vehicle_id)
        warnings: List[ErrorKind] = []

        with self._locks.hold(vehicle_id):
            timestamp = self._clock()
            if track.timestamps and timestamp < track.timestamps[-1]:
                timestamp = track.timestamps[-1]

            anomaly = (
                fields.odometer is not None
                and track.last_odometer is not None
                and fields.odometer < track.last_odometer
            )
            if anomaly:
                warnings.append(ErrorKind.ODOMETER_ANOMALY)
                track.anomalies += 1
                logger.warning("Odometer anomaly detected", context={
                    "vehicle_id": vehicle_id,
                    "previous_odometer": track.last_odometer,
                    "odometer": fields.odometer,
                })
            if fields.odometer is not None:
                track.last_odometer = fields.odometer

            reading = Reading.from_fields(
                reading_id=str(uuid.uuid4()),
                vehicle_id=vehicle_id,
                timestamp=timestamp,
                fields=fields,
                odometer_anomaly=anomaly,
            )
            track.readings.append(reading)
            track.timestamps.append(timestamp)

        return OperationResult.ok(reading, warnings=warnings)

    # =========================================================================
    # READS
    # =========================================================================

    def history(
        self,
        vehicle_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> OperationResult:
        """
        Readings of one vehicle, newest first.

        `offset` skips that many readings from the newest end, `limit` caps
        the count. A vehicle that was deleted from the registry keeps its
        history readable.
        """
        track = self._tracks.get(vehicle_id)
        if track is None:
            if not self._registry.exists(vehicle_id):
                return self._unknown(vehicle_id)
            return OperationResult.ok([])

        with self._locks.hold(vehicle_id):
            newest_first = track.readings[::-1]

        start = offset or 0
        end = start + limit if limit is not None else None
        return OperationResult.ok(newest_first[start:end])

    def latest(self, vehicle_id: str) -> OperationResult:
        """Most recent reading, or NoData if the vehicle has none."""
        track = self._tracks.get(vehicle_id)
        if track is None and not self._registry.exists(vehicle_id):
            return self._unknown(vehicle_id)

        reading = None
        if track is not None:
            with self._locks.hold(vehicle_id):
                if track.readings:
                    reading = track.readings[-1]

        if reading is None:
            return OperationResult.fail(
                ErrorKind.NO_DATA,
                f"No telemetry data found for vehicle {vehicle_id}",
            )
        return OperationResult.ok(reading)

    def all_since(self, since: datetime) -> Iterator[Tuple[str, Reading]]:
        """
        Lazily yield (vehicle_id, reading) pairs with timestamp >= since.

        Every call starts a fresh pass; each vehicle's slice is copied under
        that vehicle's lock just before it is yielded.
        """
        with self._tracks_lock:
            vehicle_ids = list(self._tracks)

        for vehicle_id in vehicle_ids:
            track = self._tracks[vehicle_id]
            with self._locks.hold(vehicle_id):
                start = bisect.bisect_left(track.timestamps, since)
                window = track.readings[start:]
            for reading in window:
                yield vehicle_id, reading

    # =========================================================================
    # STATS
    # =========================================================================

    def count(self, vehicle_id: Optional[str] = None) -> int:
        """Stored readings, fleet-wide or for one vehicle."""
        if vehicle_id is not None:
            track = self._tracks.get(vehicle_id)
            return len(track.readings) if track is not None else 0
        return sum(len(track.readings) for track in list(self._tracks.values()))

    def vehicle_count(self) -> int:
        return len(self._tracks)

    def anomaly_count(self) -> int:
        return sum(track.anomalies for track in list(self._tracks.values()))

    def lock_stats(self) -> dict:
        return self._locks.stats()
