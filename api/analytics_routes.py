"""
FastAPI routes for fleet analytics.

Provides endpoints for:
- All aggregates at once
- Active / inactive vehicles
- Average fuel and battery
- Distance traveled
- Alert summary

Every endpoint accepts an optional `window_hours` override.
"""

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.analytics_models import (
    ActivityCount,
    AlertSummary,
    DistanceSummary,
    FleetAnalyticsResponse,
    FleetAverages,
)
from config import AnalyticsConfig
from core.runtime import FleetRuntime
from .dependencies import get_runtime


router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _window(
    window_hours: Optional[float] = Query(
        None,
        gt=0,
        le=AnalyticsConfig.MAX_WINDOW_HOURS,
        description="Trailing window in hours (default from configuration)",
    ),
) -> Optional[timedelta]:
    if window_hours is None:
        return None
    return timedelta(hours=window_hours)


@router.get("", response_model=FleetAnalyticsResponse)
def fleet_analytics(
    window: Optional[timedelta] = Depends(_window),
    runtime: FleetRuntime = Depends(get_runtime),
) -> FleetAnalyticsResponse:
    """All four fleet aggregates over the same window."""
    return runtime.analytics.summarize(window)


@router.get("/activity", response_model=ActivityCount)
def fleet_activity(
    window: Optional[timedelta] = Depends(_window),
    runtime: FleetRuntime = Depends(get_runtime),
) -> ActivityCount:
    """
    Active vs inactive registered vehicles.

    A vehicle is active when it reported at least once in the window.
    """
    return runtime.analytics.active_inactive_count(window)


@router.get("/fuel-battery", response_model=FleetAverages)
def fleet_fuel_battery(
    window: Optional[timedelta] = Depends(_window),
    runtime: FleetRuntime = Depends(get_runtime),
) -> FleetAverages:
    """Average latest fuel and battery levels; null when nobody reported."""
    return runtime.analytics.average_fuel_and_battery(window)


@router.get("/distance", response_model=DistanceSummary)
def fleet_distance(
    window: Optional[timedelta] = Depends(_window),
    runtime: FleetRuntime = Depends(get_runtime),
) -> DistanceSummary:
    """Odometer distance; backwards odometer jumps are skipped."""
    return runtime.analytics.total_distance(window)


@router.get("/alerts", response_model=AlertSummary)
def fleet_alert_summary(
    window: Optional[timedelta] = Depends(_window),
    runtime: FleetRuntime = Depends(get_runtime),
) -> AlertSummary:
    """Alerts created in the window by kind and by severity."""
    return runtime.analytics.alert_summary(window)
