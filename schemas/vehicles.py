"""
Vehicle registry records.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RegistrationStatus(str, Enum):
    """Administrative status of a registered vehicle."""
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    DECOMMISSIONED = "Decommissioned"


@dataclass
class Vehicle:
    """A registered vehicle, identified by its VIN."""
    vin: str
    manufacturer: str
    model: str
    fleet_id: str
    owner: str
    registration_status: RegistrationStatus = RegistrationStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class VehicleUpdate:
    """
    Typed update for a vehicle.

    Lists exactly the mutable fields; the VIN is not one of them.
    `None` means "leave unchanged".
    """
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    fleet_id: Optional[str] = None
    owner: Optional[str] = None
    registration_status: Optional[RegistrationStatus] = None

    def apply_to(self, vehicle: Vehicle) -> bool:
        """Apply the set fields to `vehicle`. Returns True if anything changed."""
        changed = False
        if self.manufacturer is not None and self.manufacturer != vehicle.manufacturer:
            vehicle.manufacturer = self.manufacturer
            changed = True
        if self.model is not None and self.model != vehicle.model:
            vehicle.model = self.model
            changed = True
        if self.fleet_id is not None and self.fleet_id != vehicle.fleet_id:
            vehicle.fleet_id = self.fleet_id
            changed = True
        if self.owner is not None and self.owner != vehicle.owner:
            vehicle.owner = self.owner
            changed = True
        if (
            self.registration_status is not None
            and self.registration_status != vehicle.registration_status
        ):
            vehicle.registration_status = self.registration_status
            changed = True
        return changed
