"""
Vehicle registry API routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from core.runtime import FleetRuntime
from schemas import RegistrationStatus
from services import FleetResponseBuilder
from .dependencies import get_runtime
from .models import VehicleCreateRequest, VehicleUpdateRequest

# ============================================================================
# ROUTER
# ============================================================================
vehicle_router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@vehicle_router.post("", status_code=201)
def create_vehicle(request: VehicleCreateRequest, runtime: FleetRuntime = Depends(get_runtime)):
    result = runtime.registry.create(request.to_vehicle())
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.vehicle(result.value))


@vehicle_router.get("")
def list_vehicles(
    manufacturer: Optional[str] = None,
    fleet_id: Optional[str] = None,
    registration_status: Optional[RegistrationStatus] = None,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Registered vehicles with counts by manufacturer, fleet and status."""
    vehicles = runtime.registry.list(
        manufacturer=manufacturer,
        fleet_id=fleet_id,
        registration_status=registration_status,
    )
    return FleetResponseBuilder.success(
        FleetResponseBuilder.vehicles(vehicles),
        summary=runtime.registry.summarize(vehicles),
    )


@vehicle_router.get("/{vin}")
def get_vehicle(vin: str, runtime: FleetRuntime = Depends(get_runtime)):
    result = runtime.registry.get(vin)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.vehicle(result.value))


@vehicle_router.put("/{vin}")
def update_vehicle(
    vin: str,
    request: VehicleUpdateRequest,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Update the mutable fields of a vehicle; the VIN cannot change."""
    result = runtime.registry.update(vin, request.to_update())
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.vehicle(result.value))


@vehicle_router.delete("/{vin}")
def delete_vehicle(vin: str, runtime: FleetRuntime = Depends(get_runtime)):
    """Remove a vehicle from the registry. Its telemetry history is kept."""
    result = runtime.registry.delete(vin)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return {"success": True, "message": "Vehicle deleted successfully"}
