"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

import drivescore.main as main_module
from drivescore.config import AppConfig
from drivescore.core.access import ROLE_OWNER, ROLE_VIEWER, StaticAccessPolicy
from drivescore.core.events import analyze_driving_behavior
from drivescore.core.models import DrivingBehaviorAnalysis, GpsFix, SensorReading
from drivescore.core.service import ReportService
from drivescore.core.stats import ServiceStats
from drivescore.storage.file_storage import FileTelemetryStore

T0 = datetime(2025, 5, 1, 8, 0, 0, tzinfo=timezone.utc)
FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

OWNER_ID = 1
VIEWER_ID = 2


def reading_payload(seconds: int = 0, **overrides) -> dict:
    """A calm-driving SensorReading JSON payload, ``seconds`` after T0."""
    payload = {
        "SensorDataId": f"s-{seconds}",
        "VehicleId": "VIN-TEST",
        "Timestamp": (T0 + timedelta(seconds=seconds)).isoformat(),
        "Latitude": 56.9496 + seconds * 0.0001,
        "Longitude": 24.1052,
        "Altitude": 10.0,
        "GpsAccuracy": 4.0,
        "Heading": 90.0,
        "AccelerationX": 0.0,
        "AccelerationY": 0.0,
        "AccelerationZ": 1.0,
        "SpeedKmh": 40.0,
        "EngineRpm": 2000,
        "EngineTemperature": 90,
        "FuelLevel": 50.0 - seconds * 0.01,
        "OdometerKm": 1000.0 + seconds * 0.01,
        "ThrottlePosition": 20.0,
        "BrakePedal": False,
    }
    payload.update(overrides)
    return payload


def make_reading(seconds: int = 0, **overrides) -> SensorReading:
    """A calm-driving SensorReading, ``seconds`` after T0."""
    values = {
        "sensor_data_id": f"s-{seconds}",
        "vehicle_id": "VIN-TEST",
        "timestamp": T0 + timedelta(seconds=seconds),
        "gps": GpsFix(lat=56.9496 + seconds * 0.0001, lon=24.1052, altitude_m=10.0),
        "speed_kmh": 40.0,
        "engine_rpm": 2000,
        "fuel_level": 50.0 - seconds * 0.01,
        "odometer_km": 1000.0 + seconds * 0.01,
        "throttle_position": 20.0,
    }
    values.update(overrides)
    return SensorReading(**values)


def make_behavior(braking: int = 0, acceleration: int = 0, cornering: int = 0,
                  speeding: int = 0, over_revving: int = 0,
                  smooth: float = 100.0) -> DrivingBehaviorAnalysis:
    """An analysis with the given event counts and smooth percentage."""
    event = analyze_driving_behavior([make_reading(0, acceleration_y=-0.5)]).harsh_braking_events[0]
    return DrivingBehaviorAnalysis(
        harsh_braking_events=(event,) * braking,
        harsh_acceleration_events=(event,) * acceleration,
        harsh_cornering_events=(event,) * cornering,
        speeding_events=(event,) * speeding,
        over_revving_events=(event,) * over_revving,
        smooth_driving_percentage=smooth,
    )


@pytest.fixture
def service(tmp_path) -> ReportService:
    """A standalone service over a temp-dir store with a fixed clock."""
    return ReportService(
        store=FileTelemetryStore(tmp_path / "store"),
        stats=ServiceStats(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture(autouse=True)
def _init_server(tmp_path):
    """Initialize server singletons for every test, using a temp directory."""
    config = AppConfig()
    config.storage.base_dir = str(tmp_path / "data")
    config.logging.level = "warning"

    stats = ServiceStats(active_window_seconds=config.reports.active_window_seconds)
    service = ReportService(
        store=FileTelemetryStore(base_dir=config.storage.base_dir),
        stats=stats,
        thresholds=config.analysis,
        locale=config.reports.locale,
        fetch_timeout=config.fetch.timeout_seconds,
        clock=lambda: FIXED_NOW,
    )
    access = StaticAccessPolicy({
        (OWNER_ID, 1): ROLE_OWNER,
        (OWNER_ID, 2): ROLE_OWNER,
        (VIEWER_ID, 1): ROLE_VIEWER,
    })

    # Patch module-level singletons
    main_module._config = config
    main_module._stats = stats
    main_module._service = service
    main_module._access = access

    yield

    # Cleanup
    main_module._config = None
    main_module._stats = None
    main_module._service = None
    main_module._access = None


@pytest.fixture
async def client():
    from drivescore.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
