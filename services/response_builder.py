"""
FleetResponseBuilder: builds structured API responses.
Turns core values (readings, alerts, vehicles, OperationResults) into clean
JSON-ready dicts, and failed results into HTTP errors.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from schemas import (
    AlertEvent,
    BatchIngestionResult,
    BatchItemResult,
    ErrorKind,
    IngestionOutcome,
    OperationResult,
    Reading,
    Vehicle,
)


# Status codes per error kind
_STATUS_BY_ERROR: Dict[ErrorKind, int] = {
    ErrorKind.UNKNOWN_VEHICLE: 404,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NO_DATA: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.ODOMETER_ANOMALY: 422,
}


# ============================================================================
# RESPONSE MODELS (dicts for serialization)
# ============================================================================
def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _build_reading_response(reading: Reading) -> Dict[str, Any]:
    """Response object for one reading."""
    result = {
        "id": reading.id,
        "vehicle_id": reading.vehicle_id,
        "timestamp": _iso(reading.timestamp),
        "speed": reading.speed,
        "fuel_level": reading.fuel_level,
        "battery_level": reading.battery_level,
        "engine_status": reading.engine_status.value,
        "odometer": reading.odometer,
        "engine_temp": reading.engine_temp,
        "location": None,
    }
    if reading.location is not None:
        result["location"] = {
            "latitude": reading.location.latitude,
            "longitude": reading.location.longitude,
            "address": reading.location.address,
        }
    if reading.client_timestamp is not None:
        result["client_timestamp"] = _iso(reading.client_timestamp)
    if reading.odometer_anomaly:
        result["odometer_anomaly"] = True
    return result


def _build_alert_response(alert: AlertEvent) -> Dict[str, Any]:
    """Response object for one alert."""
    return {
        "id": alert.id,
        "vehicle_id": alert.vehicle_id,
        "reading_id": alert.reading_id,
        "kind": alert.kind.value,
        "severity": alert.severity.value,
        "message": alert.message,
        "status": alert.status.value,
        "created_at": _iso(alert.created_at),
        "updated_at": _iso(alert.updated_at),
    }


def _build_vehicle_response(vehicle: Vehicle) -> Dict[str, Any]:
    """Response object for one vehicle."""
    return {
        "vin": vehicle.vin,
        "manufacturer": vehicle.manufacturer,
        "model": vehicle.model,
        "fleet_id": vehicle.fleet_id,
        "owner": vehicle.owner,
        "registration_status": vehicle.registration_status.value,
        "created_at": _iso(vehicle.created_at),
        "updated_at": _iso(vehicle.updated_at),
    }


def _build_batch_item_response(item: BatchItemResult) -> Dict[str, Any]:
    """Response object for one batch record."""
    if not item.success:
        return {
            "index": item.index,
            "vehicle_id": item.vehicle_id,
            "success": False,
            "error": item.error.value if item.error else None,
            "message": item.message,
        }
    result = {
        "index": item.index,
        "vehicle_id": item.vehicle_id,
        "success": True,
        "telemetry": _build_reading_response(item.reading),
        "alerts_generated": len(item.alerts),
    }
    if item.warnings:
        result["warnings"] = [w.value for w in item.warnings]
    return result


# ============================================================================
# FLEET RESPONSE BUILDER
# ============================================================================
class FleetResponseBuilder:
    """
    Builds structured, consistent responses for the API.

    Successful bodies are `{"success": true, "data": ...}`; failures become
    HTTPExceptions whose detail names the error kind.
    """

    @staticmethod
    def success(data: Any, **extra: Any) -> Dict[str, Any]:
        body = {"success": True, "data": data}
        body.update(extra)
        return body

    @staticmethod
    def reading(reading: Reading) -> Dict[str, Any]:
        return _build_reading_response(reading)

    @staticmethod
    def readings(readings: List[Reading]) -> List[Dict[str, Any]]:
        return [_build_reading_response(r) for r in readings]

    @staticmethod
    def alert(alert: AlertEvent) -> Dict[str, Any]:
        return _build_alert_response(alert)

    @staticmethod
    def alerts(alerts: List[AlertEvent]) -> List[Dict[str, Any]]:
        return [_build_alert_response(a) for a in alerts]

    @staticmethod
    def vehicle(vehicle: Vehicle) -> Dict[str, Any]:
        return _build_vehicle_response(vehicle)

    @staticmethod
    def vehicles(vehicles: List[Vehicle]) -> List[Dict[str, Any]]:
        return [_build_vehicle_response(v) for v in vehicles]

    @staticmethod
    def ingestion(outcome: IngestionOutcome) -> Dict[str, Any]:
        """Response for a single ingested reading."""
        body = {
            "success": True,
            "data": _build_reading_response(outcome.reading),
            "alerts_generated": [_build_alert_response(a) for a in outcome.alerts],
        }
        if outcome.warnings:
            body["warnings"] = [w.value for w in outcome.warnings]
        return body

    @staticmethod
    def batch(result: BatchIngestionResult) -> Dict[str, Any]:
        """Response for a batch ingestion."""
        return {
            "success": True,
            "data": [_build_batch_item_response(item) for item in result.items],
            "succeeded": result.succeeded,
            "failed": result.failed,
            "total_alerts_generated": len(result.alerts),
            "alerts": [_build_alert_response(a) for a in result.alerts],
        }

    @staticmethod
    def build_error(result: OperationResult) -> Dict[str, Any]:
        """Error body for a failed result."""
        return {
            "success": False,
            "error": result.error.value if result.error else "Unknown",
            "message": result.message or "Unknown error",
        }

    @staticmethod
    def status_code(error: Optional[ErrorKind]) -> int:
        if error is None:
            return 500
        return _STATUS_BY_ERROR.get(error, 400)

    @staticmethod
    def http_error(result: OperationResult) -> HTTPException:
        """HTTPException for a failed result, ready to raise."""
        return HTTPException(
            status_code=FleetResponseBuilder.status_code(result.error),
            detail=FleetResponseBuilder.build_error(result),
        )
