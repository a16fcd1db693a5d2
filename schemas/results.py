"""
Result values returned by the core.

Core operations never raise for expected conditions (unknown vehicle,
missing alert, no telemetry yet); they return an OperationResult carrying
the error kind, and the transport layer decides the status code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .alerts import AlertEvent
from .telemetry import Reading


class ErrorKind(str, Enum):
    """Error taxonomy shared by every core component."""
    UNKNOWN_VEHICLE = "UnknownVehicle"
    NOT_FOUND = "NotFound"
    NO_DATA = "NoData"
    ODOMETER_ANOMALY = "OdometerAnomaly"
    ALREADY_EXISTS = "AlreadyExists"


@dataclass
class OperationResult:
    """
    Outcome of a single core operation.

    `warnings` holds non-fatal conditions (e.g. OdometerAnomaly) on an
    otherwise successful result.
    """
    success: bool = True
    value: Any = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    warnings: List[ErrorKind] = field(default_factory=list)

    @classmethod
    def ok(cls, value: Any = None, warnings: Optional[List[ErrorKind]] = None) -> "OperationResult":
        return cls(success=True, value=value, warnings=list(warnings or []))

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, error=error, message=message)


@dataclass
class IngestionOutcome:
    """Stored reading plus the alerts it produced."""
    reading: Reading
    alerts: List[AlertEvent] = field(default_factory=list)
    warnings: List[ErrorKind] = field(default_factory=list)


@dataclass
class BatchItemResult:
    """Per-record result of a batch ingestion."""
    index: int
    vehicle_id: str
    success: bool = True
    reading: Optional[Reading] = None
    alerts: List[AlertEvent] = field(default_factory=list)
    warnings: List[ErrorKind] = field(default_factory=list)
    error: Optional[ErrorKind] = None
    message: Optional[str] = None


@dataclass
class BatchIngestionResult:
    """Result of a whole batch; failures of single items are not fatal."""
    items: List[BatchItemResult] = field(default_factory=list)
    alerts: List[AlertEvent] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.success)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.success)
