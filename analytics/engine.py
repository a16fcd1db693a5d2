"""
Fleet Analytics Aggregator.

Computes fleet-wide statistics over a trailing window by scanning the
telemetry store, the alert ledger and the vehicle registry:
- Active / inactive vehicle counts
- Average fuel and battery levels
- Distance traveled (odometer deltas)
- Alert counts by kind and by severity

Every operation is read-only and independent of the others.
"""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from api.analytics_models import (
    ActivityCount,
    AlertSummary,
    DistanceSummary,
    FleetAnalyticsResponse,
    FleetAverages,
)
from config import AnalyticsConfig
from core.structured_logging import get_logger
from schemas import AlertFilter, AlertKind, Severity
from services.alert_ledger import AlertLedger
from services.telemetry_store import TelemetryStore
from services.vehicle_registry import VehicleRegistry

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FleetAnalyticsAggregator:
    """Windowed fleet statistics."""

    def __init__(
        self,
        store: TelemetryStore,
        ledger: AlertLedger,
        registry: VehicleRegistry,
        *,
        default_window: Optional[timedelta] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.ledger = ledger
        self.registry = registry
        if default_window is None:
            default_window = timedelta(hours=AnalyticsConfig.DEFAULT_WINDOW_HOURS)
        self.default_window = default_window
        self._clock = clock

    # =========================================================================
    # AGGREGATES
    # =========================================================================

    def active_inactive_count(self, window: Optional[timedelta] = None) -> ActivityCount:
        """Split the registered fleet by whether it reported in the window."""
        known = self.registry.all_vehicle_ids()
        since = self._window_start(window)

        reporting = {vehicle_id for vehicle_id, _ in self.store.all_since(since)}
        active = len(known & reporting)

        return ActivityCount(active=active, inactive=len(known) - active, total=len(known))

    def average_fuel_and_battery(self, window: Optional[timedelta] = None) -> FleetAverages:
        """Mean of the latest in-window fuel/battery value per vehicle."""
        latest_fuel: Dict[str, float] = {}
        latest_battery: Dict[str, float] = {}

        # Readings arrive oldest-first per vehicle, so later values overwrite.
        for vehicle_id, reading in self.store.all_since(self._window_start(window)):
            if reading.fuel_level is not None:
                latest_fuel[vehicle_id] = reading.fuel_level
            if reading.battery_level is not None:
                latest_battery[vehicle_id] = reading.battery_level

        return FleetAverages(
            average_fuel_level=self._mean(list(latest_fuel.values())),
            average_battery_level=self._mean(list(latest_battery.values())),
            fuel_vehicle_count=len(latest_fuel),
            battery_vehicle_count=len(latest_battery),
        )

    def total_distance(self, window: Optional[timedelta] = None) -> DistanceSummary:
        """
        Sum of positive odometer deltas between consecutive in-window
        readings of each vehicle. Negative deltas are skipped, not
        subtracted: [100, 150, 120, 200] -> 50 + 80 = 130.
        """
        odometers: Dict[str, List[float]] = defaultdict(list)
        for vehicle_id, reading in self.store.all_since(self._window_start(window)):
            if reading.odometer is not None:
                odometers[vehicle_id].append(reading.odometer)

        by_vehicle: Dict[str, float] = {}
        skipped = 0
        for vehicle_id, values in odometers.items():
            distance = 0.0
            for previous, current in zip(values, values[1:]):
                delta = current - previous
                if delta < 0:
                    skipped += 1
                    continue
                distance += delta
            by_vehicle[vehicle_id] = distance

        if skipped:
            logger.warning("Odometer anomalies skipped in distance totals", context={
                "skipped": skipped,
            })

        return DistanceSummary(
            total_distance=sum(by_vehicle.values()),
            by_vehicle=by_vehicle,
            skipped_anomalies=skipped,
        )

    def alert_summary(self, window: Optional[timedelta] = None) -> AlertSummary:
        """Alerts created in the window, counted by kind and by severity."""
        alerts = self.ledger.list(AlertFilter(created_since=self._window_start(window)))

        by_kind = {kind.value: 0 for kind in AlertKind}
        by_severity = {severity.value: 0 for severity in Severity}
        for alert in alerts:
            by_kind[alert.kind.value] += 1
            by_severity[alert.severity.value] += 1

        return AlertSummary(total=len(alerts), by_kind=by_kind, by_severity=by_severity)

    def summarize(self, window: Optional[timedelta] = None) -> FleetAnalyticsResponse:
        """All four aggregates for the same window."""
        window = window if window is not None else self.default_window
        computed_at = self._clock()

        response = FleetAnalyticsResponse(
            window_hours=window.total_seconds() / 3600,
            window_start=(computed_at - window).isoformat(),
            computed_at=computed_at.isoformat(),
            activity=self.active_inactive_count(window),
            averages=self.average_fuel_and_battery(window),
            distance=self.total_distance(window),
            alerts=self.alert_summary(window),
        )

        logger.info("Fleet analytics computed", context={
            "window_hours": response.window_hours,
            "active": response.activity.active,
            "alerts": response.alerts.total,
        })
        return response

    # =========================================================================
    # PRIVATE
    # =========================================================================

    def _window_start(self, window: Optional[timedelta]) -> datetime:
        if window is None:
            window = self.default_window
        return self._clock() - window

    @staticmethod
    def _mean(values: List[float]) -> Optional[float]:
        if not values:
            return None
        return sum(values) / len(values)
