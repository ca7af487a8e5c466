"""Tests for report assembly and the derived views."""

from __future__ import annotations

import json
import random
from datetime import timedelta

import pytest

from conftest import FIXED_NOW, T0, make_reading
from drivescore.core.models import EmptyDataset, EventSeverity, RiskLevel, WearLevel
from drivescore.core.report import (
    build_report,
    build_route,
    condition_rating,
    insurance_summary,
    reseller_summary,
)


def _mixed_readings(n: int = 200, seed: int = 7) -> list:
    rng = random.Random(seed)
    readings = []
    for i in range(n):
        readings.append(make_reading(
            i,
            acceleration_x=rng.uniform(-0.4, 0.4),
            acceleration_y=rng.uniform(-0.6, 0.6),
            speed_kmh=rng.uniform(0, 90),
            engine_rpm=rng.randint(800, 6500),
            throttle_position=rng.uniform(0, 100),
        ))
    return readings


def test_report_composes_all_stages():
    readings = [make_reading(i) for i in range(20)]
    readings[3] = make_reading(3, acceleration_y=-0.5)
    report = build_report(42, readings, generated_at=FIXED_NOW)

    assert report.car_id == 42
    assert report.report_generated_at == FIXED_NOW
    assert report.basic_statistics.data_points_analyzed == 20
    assert len(report.driving_behavior.harsh_braking_events) == 1
    assert report.driving_behavior.smooth_driving_percentage == pytest.approx(95.0)
    assert report.overall_driving_score == pytest.approx(99.5)
    assert report.risk_assessment.overall_risk_level == RiskLevel.VeryLow
    assert report.vehicle_wear_estimate.brake_wear_level == WearLevel.Severe  # 5%
    assert report.recommendations[0].startswith("Izcila braukšana")


def test_analysis_period_is_observed_not_requested():
    readings = [make_reading(30), make_reading(5), make_reading(90), make_reading(60)]
    report = build_report(1, readings, generated_at=FIXED_NOW)
    assert report.analysis_period.start_date == T0 + timedelta(seconds=5)
    assert report.analysis_period.end_date == T0 + timedelta(seconds=90)
    assert report.analysis_period.duration == timedelta(seconds=85)


def test_score_always_within_bounds():
    for seed in range(20):
        readings = _mixed_readings(n=50 + seed * 10, seed=seed)
        score = build_report(1, readings, generated_at=FIXED_NOW).overall_driving_score
        assert 0.0 <= score <= 100.0


def test_report_is_reproducible():
    readings = _mixed_readings()
    first = build_report(1, readings, generated_at=FIXED_NOW).to_dict()
    second = build_report(1, list(readings), generated_at=FIXED_NOW).to_dict()
    assert json.dumps(first) == json.dumps(second)


def test_extra_harsh_braking_never_raises_score():
    readings = [make_reading(i, speed_kmh=55.0) for i in range(30)]
    base = build_report(1, readings, generated_at=FIXED_NOW).overall_driving_score
    for extra in range(1, 10):
        more = readings + [make_reading(30 + k, acceleration_y=-0.7) for k in range(extra)]
        score = build_report(1, more, generated_at=FIXED_NOW).overall_driving_score
        assert score <= base
        base = score


def test_single_reading_report():
    report = build_report(1, [make_reading(0, acceleration_y=-0.5)], generated_at=FIXED_NOW)
    assert report.basic_statistics.total_distance_km == 0
    assert report.basic_statistics.total_driving_time == timedelta(0)
    assert report.driving_behavior.smooth_driving_percentage == 0.0
    assert report.vehicle_wear_estimate.brake_wear_level == WearLevel.Severe


def test_half_g_braking_scenario():
    n = 12
    report = build_report(1, [make_reading(i, acceleration_y=-0.5) for i in range(n)],
                          generated_at=FIXED_NOW)
    events = report.driving_behavior.harsh_braking_events
    assert len(events) == n
    assert {e.severity for e in events} == {EventSeverity.Medium}
    assert report.overall_driving_score == 100 - 0.5 * n


def test_speeding_scenario_insurance_incidents():
    readings = [make_reading(i, speed_kmh=65.0) for i in range(8)]
    report = build_report(1, readings, generated_at=FIXED_NOW)
    assert {e.severity for e in report.driving_behavior.speeding_events} == {EventSeverity.Medium}
    assert insurance_summary(report).safety_incidents == len(readings)


def test_insurance_summary_excludes_cornering_and_over_revving():
    readings = [
        make_reading(0, acceleration_y=-0.5),
        make_reading(1, acceleration_y=0.5),
        make_reading(2, acceleration_x=0.5),
        make_reading(3, engine_rpm=6000),
        make_reading(4, speed_kmh=80.0),
    ]
    report = build_report(9, readings, generated_at=FIXED_NOW)
    summary = insurance_summary(report)
    assert summary.vehicle_id == 9
    assert summary.safety_incidents == 3
    assert summary.driving_score == report.overall_driving_score
    assert summary.risk_level == report.risk_assessment.overall_risk_level
    assert summary.recommended_premium_multiplier == report.risk_assessment.insurance_premium_multiplier
    assert summary.smooth_driving_percentage == pytest.approx(40.0)
    assert summary.analysis_period == report.analysis_period


def test_reseller_summary():
    readings = [make_reading(i, odometer_km=100.0 + i) for i in range(10)]
    report = build_report(3, readings, generated_at=FIXED_NOW)
    summary = reseller_summary(report)
    assert summary.total_distance_km == pytest.approx(9.0)
    assert summary.vehicle_condition_rating == "Excellent"
    assert summary.estimated_depreciation_rate == 15.0
    assert summary.brake_condition == WearLevel.Low
    assert summary.estimated_maintenance_cost == 500.0
    assert summary.recommended_actions == report.recommendations


@pytest.mark.parametrize("score,rating", [
    (95.0, "Excellent"), (90.0, "Excellent"), (85.0, "Good"),
    (70.0, "Fair"), (65.0, "Poor"), (59.0, "Very Poor"),
])
def test_condition_rating(score, rating):
    assert condition_rating(score) == rating


def test_route_is_sorted_projection():
    readings = [make_reading(20, speed_kmh=33.0), make_reading(0), make_reading(10)]
    route = build_route(5, readings)
    assert route.car_id == 5
    assert route.total_points == 3
    assert [p.timestamp for p in route.points] == sorted(r.timestamp for r in readings)
    assert route.start_time == T0
    assert route.end_time == T0 + timedelta(seconds=20)
    assert route.points[-1].speed_kmh == 33.0
    assert route.points[0].altitude_m == 10.0


def test_route_of_nothing_is_empty_dataset():
    outcome = build_route(5, [])
    assert isinstance(outcome, EmptyDataset)
    assert outcome.car_id == 5


def test_report_dict_shape():
    data = build_report(1, [make_reading(0), make_reading(60)], generated_at=FIXED_NOW).to_dict()
    assert data["report_generated_at"] == FIXED_NOW.isoformat()
    assert data["basic_statistics"]["total_driving_time_seconds"] == 60.0
    assert data["analysis_period"]["duration_seconds"] == 60.0
    assert data["risk_assessment"]["overall_risk_level"] == "VeryLow"
    assert data["vehicle_wear_estimate"]["tire_wear_level"] == "Low"
