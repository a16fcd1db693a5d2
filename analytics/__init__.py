"""
Fleet analytics.

Windowed statistics over telemetry and alerts:
- Active / inactive vehicles
- Average fuel and battery
- Distance traveled
- Alert summary
"""

from .engine import FleetAnalyticsAggregator

__all__ = [
    "FleetAnalyticsAggregator",
]
