"""
Threshold rule engine.

Maps one Reading to zero or more AlertEvents. Holds no state besides its
thresholds; every applicable rule fires, in AlertKind declaration order.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List

from config import AlertRuleConfig
from schemas import AlertEvent, AlertKind, Reading, Severity


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AlertThresholds:
    """Rule thresholds; defaults come from AlertRuleConfig."""
    speed_limit: float = 80.0
    low_fuel_threshold: float = 15.0
    low_battery_threshold: float = 15.0
    high_engine_temp_threshold: float = 110.0

    @classmethod
    def from_config(cls) -> "AlertThresholds":
        return cls(
            speed_limit=AlertRuleConfig.SPEED_LIMIT,
            low_fuel_threshold=AlertRuleConfig.LOW_FUEL_THRESHOLD,
            low_battery_threshold=AlertRuleConfig.LOW_BATTERY_THRESHOLD,
            high_engine_temp_threshold=AlertRuleConfig.HIGH_ENGINE_TEMP_THRESHOLD,
        )


def _fmt(value: float) -> str:
    """85.0 -> '85', 12.5 -> '12.5'."""
    return f"{value:g}"


class RuleEngine:
    """Evaluates alert rules against single readings."""

    def __init__(
        self,
        thresholds: AlertThresholds | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.thresholds = thresholds or AlertThresholds()
        self._clock = clock

    def evaluate(self, reading: Reading) -> List[AlertEvent]:
        """
        Run every rule against `reading`.

        Absent fuel, battery or engine temperature never fire. The same
        reading always yields the same kinds, severities and messages.
        """
        t = self.thresholds
        vid = reading.vehicle_id
        fired: List[tuple[AlertKind, Severity, str]] = []

        if reading.speed > t.speed_limit:
            fired.append((
                AlertKind.SPEED_VIOLATION,
                Severity.HIGH,
                f"Vehicle {vid} exceeded speed limit: {_fmt(reading.speed)} km/h",
            ))

        if reading.fuel_level is not None and reading.fuel_level < t.low_fuel_threshold:
            fired.append((
                AlertKind.LOW_FUEL,
                Severity.MEDIUM,
                f"Vehicle {vid} has low fuel: {_fmt(reading.fuel_level)}%",
            ))

        if reading.battery_level is not None and reading.battery_level < t.low_battery_threshold:
            fired.append((
                AlertKind.LOW_BATTERY,
                Severity.MEDIUM,
                f"Vehicle {vid} has low battery: {_fmt(reading.battery_level)}%",
            ))

        if reading.engine_temp is not None and reading.engine_temp > t.high_engine_temp_threshold:
            fired.append((
                AlertKind.HIGH_ENGINE_TEMP,
                Severity.HIGH,
                f"Vehicle {vid} engine temperature too high: {_fmt(reading.engine_temp)}°C",
            ))

        if not fired:
            return []

        # Never earlier than the reading that fired them
        created_at = max(self._clock(), reading.timestamp)
        return [
            AlertEvent(
                id=str(uuid.uuid4()),
                vehicle_id=vid,
                reading_id=reading.id,
                kind=kind,
                message=message,
                severity=severity,
                created_at=created_at,
            )
            for kind, severity, message in fired
        ]
