"""Component wear and maintenance cost estimates."""

from __future__ import annotations

from typing import Sequence

from drivescore.core.models import (
    DrivingBehaviorAnalysis,
    SensorReading,
    VehicleWearEstimate,
    WearLevel,
)
from drivescore.core.statistics import average_rpm, average_throttle

# Annual maintenance baseline and per-event surcharges (currency units).
BASE_MAINTENANCE_COST = 500.0
BRAKING_COST = 5.0
ACCELERATION_COST = 3.0
OVER_REVVING_COST = 2.0

# Scale for the transmission stress components.
REFERENCE_RPM = 6000.0


def brake_wear(harsh_braking_count: int, total_readings: int) -> WearLevel:
    rate = harsh_braking_count / total_readings * 100
    if rate < 1:
        return WearLevel.Low
    if rate < 3:
        return WearLevel.Moderate
    if rate < 5:
        return WearLevel.High
    return WearLevel.Severe


def engine_wear(over_rev_count: int, readings: Sequence[SensorReading]) -> WearLevel:
    avg = average_rpm(readings)
    rate = over_rev_count / len(readings) * 100
    if avg > 4000 or rate > 5:
        return WearLevel.High
    if avg > 3500 or rate > 3:
        return WearLevel.Moderate
    return WearLevel.Low


def tire_wear(cornering_count: int, acceleration_count: int) -> WearLevel:
    total_stress = cornering_count + acceleration_count
    if total_stress < 10:
        return WearLevel.Low
    if total_stress < 30:
        return WearLevel.Moderate
    if total_stress < 50:
        return WearLevel.High
    return WearLevel.Severe


def transmission_stress(readings: Sequence[SensorReading]) -> float:
    """0-100: half from average RPM, half from average throttle."""
    return (average_rpm(readings) / REFERENCE_RPM) * 50 + (average_throttle(readings) / 100.0) * 50


def maintenance_cost(behavior: DrivingBehaviorAnalysis) -> float:
    return (
        BASE_MAINTENANCE_COST
        + len(behavior.harsh_braking_events) * BRAKING_COST
        + len(behavior.harsh_acceleration_events) * ACCELERATION_COST
        + len(behavior.over_revving_events) * OVER_REVVING_COST
    )


def estimate_vehicle_wear(readings: Sequence[SensorReading],
                          behavior: DrivingBehaviorAnalysis) -> VehicleWearEstimate:
    if not readings:
        raise ValueError("at least one reading is required")
    return VehicleWearEstimate(
        brake_wear_level=brake_wear(len(behavior.harsh_braking_events), len(readings)),
        engine_wear_level=engine_wear(len(behavior.over_revving_events), readings),
        tire_wear_level=tire_wear(len(behavior.harsh_cornering_events),
                                  len(behavior.harsh_acceleration_events)),
        transmission_stress=transmission_stress(readings),
        estimated_maintenance_cost=maintenance_cost(behavior),
    )
