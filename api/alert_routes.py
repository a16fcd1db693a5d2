"""
Alert API routes.
Filtered listing, lookup and status updates.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from core.runtime import FleetRuntime
from schemas import AlertFilter, AlertKind, AlertStatus, Severity
from services import FleetResponseBuilder
from .dependencies import get_runtime
from .models import AlertStatusUpdateRequest

# ============================================================================
# ROUTER
# ============================================================================
alert_router = APIRouter(prefix="/alerts", tags=["alerts"])


# ============================================================================
# ENDPOINT: GET /alerts
# ============================================================================
@alert_router.get("")
def list_alerts(
    vehicle_id: Optional[str] = None,
    kind: Optional[AlertKind] = None,
    severity: Optional[Severity] = None,
    status: Optional[AlertStatus] = None,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Alerts matching every given filter, newest first."""
    alerts = runtime.ledger.list(AlertFilter(
        vehicle_id=vehicle_id,
        kind=kind,
        severity=severity,
        status=status,
    ))
    return FleetResponseBuilder.success(FleetResponseBuilder.alerts(alerts), total=len(alerts))


# ============================================================================
# ENDPOINT: GET /alerts/{alert_id}
# ============================================================================
@alert_router.get("/{alert_id}")
def get_alert(alert_id: str, runtime: FleetRuntime = Depends(get_runtime)):
    result = runtime.ledger.get(alert_id)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.alert(result.value))


# ============================================================================
# ENDPOINT: PUT /alerts/{alert_id}
# ============================================================================
@alert_router.put("/{alert_id}")
def update_alert_status(
    alert_id: str,
    request: AlertStatusUpdateRequest,
    runtime: FleetRuntime = Depends(get_runtime),
):
    """Move an alert to any status."""
    result = runtime.ledger.update_status(alert_id, request.status)
    if not result.success:
        raise FleetResponseBuilder.http_error(result)
    return FleetResponseBuilder.success(FleetResponseBuilder.alert(result.value))
