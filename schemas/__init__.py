"""
Domain schemas for the fleet telemetry service.
Organised by domain: telemetry, alerts, vehicles and operation results.
"""

from .telemetry import EngineStatus, GeoLocation, ReadingFields, Reading
from .alerts import AlertKind, Severity, AlertStatus, AlertEvent, AlertFilter
from .vehicles import RegistrationStatus, Vehicle, VehicleUpdate
from .results import (
    ErrorKind,
    OperationResult,
    IngestionOutcome,
    BatchItemResult,
    BatchIngestionResult,
)

__all__ = [
    # Telemetry
    "EngineStatus",
    "GeoLocation",
    "ReadingFields",
    "Reading",
    # Alerts
    "AlertKind",
    "Severity",
    "AlertStatus",
    "AlertEvent",
    "AlertFilter",
    # Vehicles
    "RegistrationStatus",
    "Vehicle",
    "VehicleUpdate",
    # Results
    "ErrorKind",
    "OperationResult",
    "IngestionOutcome",
    "BatchItemResult",
    "BatchIngestionResult",
]
