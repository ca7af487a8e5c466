"""Raw telemetry payload decoding.

Payloads are the JSON documents the vehicles upload, with PascalCase keys
(``SensorDataId``, ``AccelerationY``, ``SpeedKmh`` ...). Missing numeric
fields default to zero. A record is skipped, never fatal, when it is not a
JSON object, has no usable ``Timestamp``, or carries a field of the wrong
type or a number that is not finite. Skips are returned as
``DecodeFailure`` entries so callers can count them.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

import structlog

from drivescore.core.models import GpsFix, SensorReading, assume_utc

if TYPE_CHECKING:
    from drivescore.core.models import RawTelemetryRecord

log = structlog.get_logger()


class PayloadError(ValueError):
    """A payload that cannot be turned into a SensorReading."""


@dataclass(frozen=True)
class DecodeFailure:
    record_id: int
    reason: str


@dataclass(frozen=True)
class DecodeResult:
    readings: tuple[SensorReading, ...] = ()
    failures: tuple[DecodeFailure, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.readings


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken to be UTC."""
    if not isinstance(value, str) or not value:
        raise PayloadError("Timestamp is missing")
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise PayloadError(f"Timestamp {value!r} is not ISO-8601") from None
    return assume_utc(dt)


def _number(data: dict, key: str) -> float:
    value = data.get(key, 0)
    if value is None:
        return 0.0
    # bool is an int subclass; a boolean speed is still a bad payload.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{key} must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        raise PayloadError(f"{key} is out of range") from None
    # json.loads accepts NaN and Infinity; neither survives JSON output.
    if not math.isfinite(number):
        raise PayloadError(f"{key} must be finite, got {number}")
    return number


def _integer(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{key} must be an integer, got {type(value).__name__}")
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise PayloadError(f"{key} must be an integer, got {value}")
    return int(value)


def _text(data: dict, key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise PayloadError(f"{key} must be a string, got {type(value).__name__}")
    return str(value)


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise PayloadError(f"{key} must be a boolean, got {type(value).__name__}")
    return value


def parse_reading(data: object) -> SensorReading:
    """Build a SensorReading from an already-parsed JSON object."""
    if not isinstance(data, dict):
        raise PayloadError(f"payload must be a JSON object, got {type(data).__name__}")
    return SensorReading(
        sensor_data_id=_text(data, "SensorDataId"),
        vehicle_id=_text(data, "VehicleId"),
        timestamp=parse_timestamp(data.get("Timestamp")),
        gps=GpsFix(
            lat=_number(data, "Latitude"),
            lon=_number(data, "Longitude"),
            altitude_m=_number(data, "Altitude"),
            accuracy_m=_number(data, "GpsAccuracy"),
            heading_deg=_number(data, "Heading"),
        ),
        acceleration_x=_number(data, "AccelerationX"),
        acceleration_y=_number(data, "AccelerationY"),
        acceleration_z=_number(data, "AccelerationZ"),
        speed_kmh=_number(data, "SpeedKmh"),
        engine_rpm=_integer(data, "EngineRpm"),
        engine_temperature=_integer(data, "EngineTemperature"),
        fuel_level=_number(data, "FuelLevel"),
        odometer_km=_number(data, "OdometerKm"),
        throttle_position=_number(data, "ThrottlePosition"),
        brake_pedal=_flag(data, "BrakePedal"),
    )


def decode_payload(car_data: str | bytes) -> SensorReading:
    """Decode one serialized payload. Raises PayloadError."""
    try:
        data = json.loads(car_data)
    except ValueError as exc:
        # JSONDecodeError, UnicodeDecodeError and the int digit limit all land here.
        raise PayloadError(f"invalid JSON: {exc}") from None
    return parse_reading(data)


def decode_records(records: Iterable[RawTelemetryRecord]) -> DecodeResult:
    """Decode raw records in order, skipping the ones that fail."""
    readings: list[SensorReading] = []
    failures: list[DecodeFailure] = []

    for record in records:
        try:
            readings.append(decode_payload(record.car_data))
        except PayloadError as exc:
            failures.append(DecodeFailure(record_id=record.record_id, reason=str(exc)))
            log.warning("telemetry_record_skipped",
                        record_id=record.record_id, car_id=record.car_id,
                        reason=str(exc))

    return DecodeResult(readings=tuple(readings), failures=tuple(failures))
