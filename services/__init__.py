"""
Business services of the fleet telemetry core.
Telemetry storage, alert rules, the alert ledger, ingestion and the
vehicle registry, plus response building for the API.
"""

from .vehicle_registry import VehicleRegistry, InMemoryVehicleRegistry
from .telemetry_store import TelemetryStore
from .rule_engine import AlertThresholds, RuleEngine
from .alert_ledger import AlertLedger
from .ingestion import TelemetryIngestionService
from .response_builder import FleetResponseBuilder

__all__ = [
    "VehicleRegistry",
    "InMemoryVehicleRegistry",
    "TelemetryStore",
    "AlertThresholds",
    "RuleEngine",
    "AlertLedger",
    "TelemetryIngestionService",
    "FleetResponseBuilder",
]
