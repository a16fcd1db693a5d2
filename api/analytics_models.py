"""
Data models for the Analytics API.
Response schemas for the windowed fleet statistics.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ActivityCount(BaseModel):
    """Active/inactive split of the registered fleet."""

    active: int = Field(..., description="Known vehicles with at least one reading in the window")
    inactive: int = Field(..., description="Known vehicles without readings in the window")
    total: int = Field(..., description="Known vehicles")


class FleetAverages(BaseModel):
    """
    Mean of each vehicle's most recent in-window value.

    A metric is None when no vehicle contributed, which is different from
    a fleet sitting at 0%.
    """

    average_fuel_level: Optional[float] = None
    average_battery_level: Optional[float] = None
    fuel_vehicle_count: int = 0
    battery_vehicle_count: int = 0


class DistanceSummary(BaseModel):
    """Odometer-based distance traveled in the window."""

    total_distance: float = 0.0
    by_vehicle: Dict[str, float] = Field(default_factory=dict)
    skipped_anomalies: int = Field(0, description="Negative odometer deltas left out of the totals")


class AlertSummary(BaseModel):
    """Alerts created in the window, grouped two ways."""

    total: int = 0
    by_kind: Dict[str, int] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)


class FleetAnalyticsResponse(BaseModel):
    """All four aggregates for one window."""

    window_hours: float
    window_start: str
    computed_at: str
    activity: ActivityCount
    averages: FleetAverages
    distance: DistanceSummary
    alerts: AlertSummary
