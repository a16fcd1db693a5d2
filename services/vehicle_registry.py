"""
Vehicle registry.

The telemetry core only needs the `VehicleRegistry` boundary
(`exists` / `all_vehicle_ids`). `InMemoryVehicleRegistry` implements it
together with the CRUD operations exposed by the HTTP API.
"""

import copy
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol, Set

from core.concurrency import KeyedLocks
from core.structured_logging import get_logger
from schemas import (
    ErrorKind,
    OperationResult,
    RegistrationStatus,
    Vehicle,
    VehicleUpdate,
)

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VehicleRegistry(Protocol):
    """Boundary consumed by the telemetry store and analytics."""

    def exists(self, vehicle_id: str) -> bool:
        ...

    def all_vehicle_ids(self) -> Set[str]:
        ...


class InMemoryVehicleRegistry:
    """Process-local registry keyed by VIN."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._vehicles: Dict[str, Vehicle] = {}
        self._lock = threading.Lock()
        self._locks = KeyedLocks("vehicles")

    # =========================================================================
    # COLLABORATOR BOUNDARY
    # =========================================================================

    def exists(self, vehicle_id: str) -> bool:
        return vehicle_id in self._vehicles

    def all_vehicle_ids(self) -> Set[str]:
        with self._lock:
            return set(self._vehicles)

    def count(self) -> int:
        return len(self._vehicles)

    # =========================================================================
    # CRUD
    # =========================================================================

    def create(self, vehicle: Vehicle) -> OperationResult:
        """Register a vehicle. Fails with AlreadyExists on a duplicate VIN."""
        with self._lock:
            if vehicle.vin in self._vehicles:
                return OperationResult.fail(
                    ErrorKind.ALREADY_EXISTS,
                    f"Vehicle with VIN {vehicle.vin} already exists",
                )
            now = self._clock()
            stored = copy.copy(vehicle)
            stored.created_at = now
            stored.updated_at = now
            self._vehicles[stored.vin] = stored

        logger.info("Vehicle registered", context={
            "vin": stored.vin,
            "fleet_id": stored.fleet_id,
        })
        return OperationResult.ok(copy.copy(stored))

    def get(self, vin: str) -> OperationResult:
        vehicle = self._vehicles.get(vin)
        if vehicle is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Vehicle {vin} not found")
        with self._locks.hold(vin):
            return OperationResult.ok(copy.copy(vehicle))

    def list(
        self,
        manufacturer: Optional[str] = None,
        fleet_id: Optional[str] = None,
        registration_status: Optional[RegistrationStatus] = None,
    ) -> List[Vehicle]:
        """List vehicles; manufacturer matches case-insensitively."""
        with self._lock:
            vehicles = list(self._vehicles.values())

        if manufacturer:
            wanted = manufacturer.lower()
            vehicles = [v for v in vehicles if v.manufacturer.lower() == wanted]
        if fleet_id:
            vehicles = [v for v in vehicles if v.fleet_id == fleet_id]
        if registration_status:
            vehicles = [v for v in vehicles if v.registration_status == registration_status]

        return [copy.copy(v) for v in vehicles]

    @staticmethod
    def summarize(vehicles: List[Vehicle]) -> dict:
        """Counts grouped by manufacturer, fleet and registration status."""
        return {
            "total": len(vehicles),
            "by_manufacturer": dict(Counter(v.manufacturer for v in vehicles)),
            "by_fleet": dict(Counter(v.fleet_id for v in vehicles)),
            "by_status": dict(Counter(v.registration_status.value for v in vehicles)),
        }

    def update(self, vin: str, update: VehicleUpdate) -> OperationResult:
        vehicle = self._vehicles.get(vin)
        if vehicle is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Vehicle {vin} not found")

        with self._locks.hold(vin):
            if update.apply_to(vehicle):
                vehicle.updated_at = self._clock()
            snapshot = copy.copy(vehicle)

        logger.info("Vehicle updated", context={"vin": vin})
        return OperationResult.ok(snapshot)

    def delete(self, vin: str) -> OperationResult:
        """Remove a vehicle. Its telemetry history is left untouched."""
        with self._lock:
            vehicle = self._vehicles.pop(vin, None)
        if vehicle is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Vehicle {vin} not found")

        logger.info("Vehicle deleted", context={"vin": vin})
        return OperationResult.ok(vehicle)
