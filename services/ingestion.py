"""
TelemetryIngestionService: store -> evaluate -> record.

Single and batch ingestion. An unknown vehicle is a per-item result, never
an exception, so one bad record cannot abort a batch.
"""

from typing import Iterable, Tuple

from core.structured_logging import get_logger
from schemas import (
    BatchIngestionResult,
    BatchItemResult,
    IngestionOutcome,
    OperationResult,
    ReadingFields,
)

from .alert_ledger import AlertLedger
from .rule_engine import RuleEngine
from .telemetry_store import TelemetryStore

logger = get_logger(__name__)


class TelemetryIngestionService:
    """Runs one reading through the store, the rule engine and the ledger."""

    def __init__(self, store: TelemetryStore, rule_engine: RuleEngine, ledger: AlertLedger):
        self.store = store
        self.rule_engine = rule_engine
        self.ledger = ledger

    def ingest(self, vehicle_id: str, fields: ReadingFields) -> OperationResult:
        """
        Ingest one reading.

        Returns:
            OperationResult whose value is an IngestionOutcome, or an
            UnknownVehicle failure.
        """
        appended = self.store.append(vehicle_id, fields)
        if not appended.success:
            return appended

        reading = appended.value
        alerts = self.rule_engine.evaluate(reading)
        for alert in alerts:
            self.ledger.record(alert)

        logger.info("Telemetry ingested", context={
            "vehicle_id": vehicle_id,
            "reading_id": reading.id,
            "alerts_generated": len(alerts),
            "warnings": [w.value for w in appended.warnings],
        })

        return OperationResult.ok(
            IngestionOutcome(reading=reading, alerts=alerts, warnings=list(appended.warnings)),
            warnings=appended.warnings,
        )

    def ingest_batch(self, records: Iterable[Tuple[str, ReadingFields]]) -> BatchIngestionResult:
        """
        Ingest records in order.

        Failed items are reported with their error kind; the flattened
        alert list only contains alerts of successful items.
        """
        batch = BatchIngestionResult()

        for index, (vehicle_id, fields) in enumerate(records):
            result = self.ingest(vehicle_id, fields)
            if result.success:
                outcome: IngestionOutcome = result.value
                batch.items.append(BatchItemResult(
                    index=index,
                    vehicle_id=vehicle_id,
                    success=True,
                    reading=outcome.reading,
                    alerts=outcome.alerts,
                    warnings=outcome.warnings,
                ))
                batch.alerts.extend(outcome.alerts)
            else:
                batch.items.append(BatchItemResult(
                    index=index,
                    vehicle_id=vehicle_id,
                    success=False,
                    error=result.error,
                    message=result.message,
                ))

        logger.info("Telemetry batch ingested", context={
            "records": len(batch.items),
            "succeeded": batch.succeeded,
            "failed": batch.failed,
            "alerts_generated": len(batch.alerts),
        })
        return batch
