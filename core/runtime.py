"""
Service runtime: the object graph behind one running application.
Built at startup and attached to `app.state.runtime`; nothing here is
module-level state.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from analytics import FleetAnalyticsAggregator
from services import (
    AlertLedger,
    AlertThresholds,
    InMemoryVehicleRegistry,
    RuleEngine,
    TelemetryIngestionService,
    TelemetryStore,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FleetRuntime:
    """Registry, store, ledger, rule engine, ingestion and analytics."""
    registry: InMemoryVehicleRegistry
    store: TelemetryStore
    ledger: AlertLedger
    rule_engine: RuleEngine
    ingestion: TelemetryIngestionService
    analytics: FleetAnalyticsAggregator

    def stats(self) -> dict:
        """Counts reported by the health endpoint."""
        return {
            "total_vehicles": self.registry.count(),
            "total_alerts": self.ledger.count(),
            "total_telemetry_records": self.store.count(),
            "odometer_anomalies": self.store.anomaly_count(),
        }


def build_runtime(
    *,
    clock: Callable[[], datetime] = _utcnow,
    thresholds: Optional[AlertThresholds] = None,
    default_window: Optional[timedelta] = None,
) -> FleetRuntime:
    """
    Wire a fresh runtime.

    Args:
        clock: Time source shared by every component (tests inject their own)
        thresholds: Rule thresholds; defaults to AlertRuleConfig
        default_window: Analytics window; defaults to AnalyticsConfig
    """
    registry = InMemoryVehicleRegistry(clock=clock)
    store = TelemetryStore(registry, clock=clock)
    ledger = AlertLedger(clock=clock)
    rule_engine = RuleEngine(thresholds or AlertThresholds.from_config(), clock=clock)
    analytics = FleetAnalyticsAggregator(
        store,
        ledger,
        registry,
        default_window=default_window,
        clock=clock,
    )
    return FleetRuntime(
        registry=registry,
        store=store,
        ledger=ledger,
        rule_engine=rule_engine,
        ingestion=TelemetryIngestionService(store, rule_engine, ledger),
        analytics=analytics,
    )
