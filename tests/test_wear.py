"""Tests for component wear estimates."""

from __future__ import annotations

import pytest

from conftest import make_behavior, make_reading
from drivescore.core.models import WearLevel
from drivescore.core.wear import (
    brake_wear,
    engine_wear,
    estimate_vehicle_wear,
    maintenance_cost,
    tire_wear,
    transmission_stress,
)


@pytest.mark.parametrize("braking,total,expected", [
    (0, 100, WearLevel.Low),
    (1, 100, WearLevel.Moderate),
    (2, 100, WearLevel.Moderate),
    (3, 100, WearLevel.High),
    (5, 100, WearLevel.Severe),
    (1, 1, WearLevel.Severe),
])
def test_brake_wear(braking, total, expected):
    assert brake_wear(braking, total) == expected


def test_engine_wear_by_average_rpm():
    assert engine_wear(0, [make_reading(0, engine_rpm=4100)]) == WearLevel.High
    assert engine_wear(0, [make_reading(0, engine_rpm=3600)]) == WearLevel.Moderate
    assert engine_wear(0, [make_reading(0, engine_rpm=3500)]) == WearLevel.Low


def test_engine_wear_by_over_rev_rate():
    readings = [make_reading(i, engine_rpm=2000) for i in range(100)]
    assert engine_wear(6, readings) == WearLevel.High
    assert engine_wear(4, readings) == WearLevel.Moderate
    assert engine_wear(3, readings) == WearLevel.Low


@pytest.mark.parametrize("cornering,acceleration,expected", [
    (0, 9, WearLevel.Low),
    (5, 5, WearLevel.Moderate),
    (20, 10, WearLevel.High),
    (25, 25, WearLevel.Severe),
])
def test_tire_wear(cornering, acceleration, expected):
    assert tire_wear(cornering, acceleration) == expected


def test_transmission_stress():
    readings = [
        make_reading(0, engine_rpm=3000, throttle_position=40.0),
        make_reading(1, engine_rpm=3000, throttle_position=60.0),
    ]
    # 3000/6000*50 + 50/100*50
    assert transmission_stress(readings) == pytest.approx(50.0)


def test_maintenance_cost_is_not_clamped():
    assert maintenance_cost(make_behavior()) == 500.0
    behavior = make_behavior(braking=100, acceleration=100, over_revving=100, cornering=100)
    assert maintenance_cost(behavior) == 500 + 500 + 300 + 200


def test_single_reading_does_not_divide_by_zero():
    reading = make_reading(0, acceleration_y=-0.5, engine_rpm=5200)
    estimate = estimate_vehicle_wear([reading], make_behavior(braking=1, over_revving=1))
    assert estimate.brake_wear_level == WearLevel.Severe
    assert estimate.engine_wear_level == WearLevel.High
