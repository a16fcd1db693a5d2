"""
Telemetry API routes.
Single and batch ingestion, history and latest reading.

Handlers are plain functions so FastAPI runs them on its thread pool; the
store serialises work per vehicle.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.runtime import FleetRuntime
from core.structured_logging import get_logger, set_vehicle_id
from services import FleetResponseBuilder
from .dependencies import get_runtime
from .models import BatchTelemetryRequest, TelemetryPayload

logger = get_logger(__name__)

# ============================================================================
# ROUTER
# ============================================================================
telemetry_router = APIRouter(prefix="/telemetry", tags=["telemetry"])


# ============================================================================
# ENDPOINT: POST /telemetry/batch
# ============================================================================
@telemetry_router.post("/batch", status_code=201)
def ingest_batch(
    request: BatchTelemetryRequest,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """
    Ingest telemetry for several vehicles.

    Unknown vehicles are reported per record; the rest of the batch is
    still stored and evaluated.
    """
    result = runtime.ingestion.ingest_batch(
        (record.vehicle_id, record.to_fields()) for record in request.records
    )
    return FleetResponseBuilder.batch(result)


# ============================================================================
# ENDPOINT: POST /telemetry/{vehicle_id}
# ============================================================================
@telemetry_router.post("/{vehicle_id}", status_code=201)
def ingest_reading(
    vehicle_id: str,
    payload: TelemetryPayload,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Ingest one reading and return it with the alerts it generated."""
    set_vehicle_id(vehicle_id)

    result = runtime.ingestion.ingest(vehicle_id, payload.to_fields())
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.ingestion(result.value)


# ============================================================================
# ENDPOINT: GET /telemetry/{vehicle_id}
# ============================================================================
@telemetry_router.get("/{vehicle_id}")
def get_history(
    vehicle_id: str,
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Reading history, newest first. `total` counts the whole history, not the page."""
    set_vehicle_id(vehicle_id)

    result = runtime.store.history(vehicle_id, limit=limit, offset=offset)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(
        FleetResponseBuilder.readings(result.value),
        total=runtime.store.count(vehicle_id),
    )


# ============================================================================
# ENDPOINT: GET /telemetry/{vehicle_id}/latest
# ============================================================================
@telemetry_router.get("/{vehicle_id}/latest")
def get_latest(
    vehicle_id: str,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Most recent reading of a vehicle."""
    set_vehicle_id(vehicle_id)

    result = runtime.store.latest(vehicle_id)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.reading(result.value))
