"""
Alert types and the AlertEvent record.
Central enums for every alert the rule engine can raise.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class AlertKind(str, Enum):
    """
    Category of rule that fired.

    Declaration order is the evaluation order of the rule engine and the
    tie-break order when alerts share a creation time.
    """
    SPEED_VIOLATION = "SpeedViolation"
    LOW_FUEL = "LowFuel"
    LOW_BATTERY = "LowBattery"
    HIGH_ENGINE_TEMP = "HighEngineTemp"


class Severity(str, Enum):
    """Alert priority tier."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AlertStatus(str, Enum):
    """Lifecycle status; any value may move to any other."""
    ACTIVE = "Active"
    ACKNOWLEDGED = "Acknowledged"
    RESOLVED = "Resolved"


@dataclass
class AlertEvent:
    """
    One rule firing for one reading.

    Only `status` and `updated_at` change after creation, and only through
    AlertLedger.update_status.
    """
    id: str
    vehicle_id: str
    reading_id: str
    kind: AlertKind
    message: str
    severity: Severity
    created_at: datetime
    status: AlertStatus = AlertStatus.ACTIVE
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AlertFilter:
    """Conjunctive alert filter; unset fields match everything."""
    vehicle_id: Optional[str] = None
    kind: Optional[AlertKind] = None
    severity: Optional[Severity] = None
    status: Optional[AlertStatus] = None
    created_since: Optional[datetime] = None

    def matches(self, event: AlertEvent) -> bool:
        if self.vehicle_id is not None and event.vehicle_id != self.vehicle_id:
            return False
        if self.kind is not None and event.kind != self.kind:
            return False
        if self.severity is not None and event.severity != self.severity:
            return False
        if self.status is not None and event.status != self.status:
            return False
        if self.created_since is not None and event.created_at < self.created_since:
            return False
        return True
