"""
Shared test fixtures for the fleet telemetry test suite.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the project root is on the path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Set env vars before any application imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FILE", "")


VIN_A = "1HGCM82633A123456"
VIN_B = "5YJSA1E26HF000001"
VIN_C = "WDBRF61J43F000002"


class MutableClock:
    """Controllable time source shared by every component under test."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_vehicle(vin: str, manufacturer: str = "Tesla", fleet_id: str = "Corporate"):
    from schemas import Vehicle

    return Vehicle(
        vin=vin,
        manufacturer=manufacturer,
        model="Model S",
        fleet_id=fleet_id,
        owner="Jordan Doe",
    )


@pytest.fixture
def clock():
    return MutableClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def runtime(clock):
    """Runtime with two registered vehicles and default thresholds."""
    from core.runtime import build_runtime
    from services import AlertThresholds

    rt = build_runtime(clock=clock, thresholds=AlertThresholds())
    rt.registry.create(make_vehicle(VIN_A))
    rt.registry.create(make_vehicle(VIN_B, manufacturer="Ford", fleet_id="Logistics"))
    return rt


@pytest.fixture
def registry(runtime):
    return runtime.registry


@pytest.fixture
def store(runtime):
    return runtime.store


@pytest.fixture
def ledger(runtime):
    return runtime.ledger


@pytest.fixture
def sample_telemetry_payload():
    """A realistic reading as sent by a vehicle."""
    return {
        "speed": 65,
        "fuelLevel": 75,
        "batteryLevel": 85,
        "location": {
            "latitude": 40.7128,
            "longitude": -74.0060,
            "address": "New York, NY",
        },
        "engineStatus": "Running",
        "odometer": 12000,
    }


@pytest.fixture
def app_client(runtime):
    """FastAPI test client bound to the test runtime."""
    from httpx import AsyncClient, ASGITransport
    from main import create_app

    transport = ASGITransport(app=create_app(runtime))
    return AsyncClient(transport=transport, base_url="http://test")
