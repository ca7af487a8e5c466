"""Basic trip statistics over a decoded reading sequence."""

from __future__ import annotations

from typing import Sequence

from drivescore.core.models import BasicStatistics, SensorReading

# Trip segmentation is not implemented; every analysis window counts as one
# trip.
NUMBER_OF_TRIPS = 1


def order_by_time(readings: Sequence[SensorReading]) -> list[SensorReading]:
    """Stable ascending sort on timestamp."""
    return sorted(readings, key=lambda r: r.timestamp)


def average_rpm(readings: Sequence[SensorReading]) -> float:
    return sum(r.engine_rpm for r in readings) / len(readings)


def average_throttle(readings: Sequence[SensorReading]) -> float:
    return sum(r.throttle_position for r in readings) / len(readings)


def calculate_basic_statistics(readings: Sequence[SensorReading]) -> BasicStatistics:
    """Aggregate distance, duration, speed, RPM and fuel figures.

    Requires at least one reading. Distance and fuel consumption are plain
    last-minus-first differences and may come out negative on inconsistent
    data; they are reported as-is.
    """
    if not readings:
        raise ValueError("at least one reading is required")

    ordered = order_by_time(readings)
    first, last = ordered[0], ordered[-1]

    return BasicStatistics(
        total_distance_km=last.odometer_km - first.odometer_km,
        total_driving_time=last.timestamp - first.timestamp,
        average_speed_kmh=sum(r.speed_kmh for r in readings) / len(readings),
        max_speed_kmh=max(r.speed_kmh for r in readings),
        average_rpm=int(average_rpm(readings)),
        max_rpm=max(r.engine_rpm for r in readings),
        fuel_consumption=first.fuel_level - last.fuel_level,
        number_of_trips=NUMBER_OF_TRIPS,
        data_points_analyzed=len(readings),
    )
