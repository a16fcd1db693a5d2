"""
Service-level API routes.
Health check and runtime statistics.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from config import ServiceConfig
from core.runtime import FleetRuntime
from core.structured_logging import get_trace_id
from .dependencies import get_runtime
from .models import HealthResponse


# ============================================================================
# ROUTER
# ============================================================================
router = APIRouter()


# ============================================================================
# ENDPOINT: GET /health
# ============================================================================
@router.get("/health", response_model=HealthResponse)
async def health_check(runtime: FleetRuntime = Depends(get_runtime)):
    """Service health plus vehicle, alert and reading counts."""
    return HealthResponse(
        status="healthy",
        service=ServiceConfig.APP_NAME,
        version=ServiceConfig.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        stats=runtime.stats(),
    )


# ============================================================================
# ENDPOINT: GET /stats
# ============================================================================
@router.get("/stats")
async def runtime_stats(runtime: FleetRuntime = Depends(get_runtime)):
    """Counts and lock statistics of the in-memory stores."""
    return {
        "trace_id": get_trace_id(),
        "stats": runtime.stats(),
        "locks": {
            "telemetry": runtime.store.lock_stats(),
            "alerts": runtime.ledger.lock_stats(),
        },
    }
