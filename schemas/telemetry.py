"""
Telemetry domain types.
A Reading is one immutable sample of a vehicle's state, stamped by the
store at ingestion time.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EngineStatus(str, Enum):
    """Engine state reported by the vehicle."""
    RUNNING = "Running"
    IDLE = "Idle"
    OFF = "Off"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class GeoLocation:
    """Position of the vehicle when the sample was captured."""
    latitude: float
    longitude: float
    address: Optional[str] = None


@dataclass(frozen=True)
class ReadingFields:
    """
    Client-supplied part of a reading.

    Everything here is optional except speed; missing fuel, battery,
    odometer or engine temperature are valid input and never fire rules.
    """
    speed: float = 0.0
    fuel_level: Optional[float] = None
    battery_level: Optional[float] = None
    location: Optional[GeoLocation] = None
    engine_status: EngineStatus = EngineStatus.UNKNOWN
    odometer: Optional[float] = None
    engine_temp: Optional[float] = None
    client_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Reading:
    """
    Stored telemetry sample.

    `timestamp` is the server ingestion time and drives ordering and
    windowing; `client_timestamp` is kept for information only.
    """
    id: str
    vehicle_id: str
    timestamp: datetime
    speed: float = 0.0
    fuel_level: Optional[float] = None
    battery_level: Optional[float] = None
    location: Optional[GeoLocation] = None
    engine_status: EngineStatus = EngineStatus.UNKNOWN
    odometer: Optional[float] = None
    engine_temp: Optional[float] = None
    client_timestamp: Optional[datetime] = None
    odometer_anomaly: bool = False

    @classmethod
    def from_fields(
        cls,
        reading_id: str,
        vehicle_id: str,
        timestamp: datetime,
        fields: ReadingFields,
        odometer_anomaly: bool = False,
    ) -> "Reading":
        return cls(
            id=reading_id,
            vehicle_id=vehicle_id,
            timestamp=timestamp,
            speed=fields.speed,
            fuel_level=fields.fuel_level,
            battery_level=fields.battery_level,
            location=fields.location,
            engine_status=fields.engine_status,
            odometer=fields.odometer,
            engine_temp=fields.engine_temp,
            client_timestamp=fields.client_timestamp,
            odometer_anomaly=odometer_anomaly,
        )
