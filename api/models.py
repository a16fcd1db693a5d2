"""
Data models for the API.
Request/response schemas with Pydantic. Bodies accept snake_case or
camelCase keys.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import TelemetryConfig
from schemas import (
    AlertStatus,
    EngineStatus,
    GeoLocation,
    ReadingFields,
    RegistrationStatus,
    Vehicle,
    VehicleUpdate,
)


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# TELEMETRY REQUESTS
# ============================================================================

class LocationPayload(_RequestModel):
    """Geolocation of a reading."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class TelemetryPayload(_RequestModel):
    """Reading fields sent by a vehicle."""

    speed: float = Field(0.0, ge=0, description="km/h")
    fuel_level: Optional[float] = Field(None, ge=0, le=100, description="Percent")
    battery_level: Optional[float] = Field(None, ge=0, le=100, description="Percent")
    location: Optional[LocationPayload] = None
    engine_status: EngineStatus = EngineStatus.UNKNOWN
    odometer: Optional[float] = Field(None, ge=0, description="km")
    engine_temp: Optional[float] = Field(None, description="Celsius")
    timestamp: Optional[datetime] = Field(
        None,
        description="Client capture time; stored for information, ordering uses server time",
    )

    def to_fields(self) -> ReadingFields:
        location = None
        if self.location is not None:
            location = GeoLocation(
                latitude=self.location.latitude,
                longitude=self.location.longitude,
                address=self.location.address,
            )
        return ReadingFields(
            speed=self.speed,
            fuel_level=self.fuel_level,
            battery_level=self.battery_level,
            location=location,
            engine_status=self.engine_status,
            odometer=self.odometer,
            engine_temp=self.engine_temp,
            client_timestamp=self.timestamp,
        )


class BatchTelemetryRecord(TelemetryPayload):
    """One record of a batch, addressed to a vehicle."""

    vehicle_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("vehicle_id", "vehicleId", "vin"),
    )


class BatchTelemetryRequest(_RequestModel):
    """Request body for batch ingestion."""

    records: List[BatchTelemetryRecord] = Field(
        ...,
        max_length=TelemetryConfig.MAX_BATCH_SIZE,
        description="Records in submission order",
    )


# ============================================================================
# ALERT REQUESTS
# ============================================================================

class AlertStatusUpdateRequest(_RequestModel):
    """Request body for an alert status change."""

    status: AlertStatus


# ============================================================================
# VEHICLE REQUESTS
# ============================================================================

class VehicleCreateRequest(_RequestModel):
    """Request body for vehicle registration."""

    vin: str = Field(..., min_length=17, max_length=17, description="17-character VIN")
    manufacturer: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    fleet_id: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)
    registration_status: RegistrationStatus = RegistrationStatus.ACTIVE

    def to_vehicle(self) -> Vehicle:
        return Vehicle(
            vin=self.vin,
            manufacturer=self.manufacturer,
            model=self.model,
            fleet_id=self.fleet_id,
            owner=self.owner,
            registration_status=self.registration_status,
        )


class VehicleUpdateRequest(_RequestModel):
    """
    Request body for a vehicle update.

    Unknown keys, including `vin`, are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    manufacturer: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    fleet_id: Optional[str] = Field(None, min_length=1)
    owner: Optional[str] = Field(None, min_length=1)
    registration_status: Optional[RegistrationStatus] = None

    def to_update(self) -> VehicleUpdate:
        return VehicleUpdate(
            manufacturer=self.manufacturer,
            model=self.model,
            fleet_id=self.fleet_id,
            owner=self.owner,
            registration_status=self.registration_status,
        )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="UTC timestamp")
    stats: dict = Field(default_factory=dict, description="Vehicle, alert and reading counts")
