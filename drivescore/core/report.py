"""Report assembly: runs the analysis stages in order and derives the
insurance, reseller and route views.

Everything here is a pure function of the decoded readings; fetching and
decoding live in ``drivescore.core.service``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from drivescore.core.events import analyze_driving_behavior
from drivescore.core.models import (
    DateRange,
    DrivingReport,
    EmptyDataset,
    InsuranceSummary,
    ResellerSummary,
    RouteData,
    RoutePoint,
    SensorReading,
)
from drivescore.core.recommendations import DEFAULT_LOCALE, generate_recommendations
from drivescore.core.risk import assess_risk
from drivescore.core.scoring import calculate_driving_score
from drivescore.core.statistics import calculate_basic_statistics, order_by_time
from drivescore.core.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds
from drivescore.core.wear import estimate_vehicle_wear

_CONDITION_RATINGS: tuple[tuple[float, str], ...] = (
    (90.0, "Excellent"),
    (80.0, "Good"),
    (70.0, "Fair"),
    (60.0, "Poor"),
)


def condition_rating(score: float) -> str:
    for minimum, label in _CONDITION_RATINGS:
        if score >= minimum:
            return label
    return "Very Poor"


def observed_period(readings: Sequence[SensorReading]) -> DateRange:
    """Min/max timestamp actually present, not the requested window."""
    timestamps = [r.timestamp for r in readings]
    return DateRange(start_date=min(timestamps), end_date=max(timestamps))


def build_report(
    car_id: int,
    readings: Sequence[SensorReading],
    generated_at: datetime,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
    locale: str = DEFAULT_LOCALE,
) -> DrivingReport:
    """Run statistics, detection, scoring, risk, wear and recommendations.

    ``readings`` must be non-empty; the service returns EmptyDataset before
    ever getting here.
    """
    if not readings:
        raise ValueError("at least one reading is required")

    statistics = calculate_basic_statistics(readings)
    behavior = analyze_driving_behavior(readings, thresholds)
    score = calculate_driving_score(behavior)
    risk = assess_risk(behavior, score)
    wear = estimate_vehicle_wear(readings, behavior)
    recommendations = generate_recommendations(behavior, score, wear, locale)

    return DrivingReport(
        car_id=car_id,
        report_generated_at=generated_at,
        analysis_period=observed_period(readings),
        basic_statistics=statistics,
        driving_behavior=behavior,
        overall_driving_score=score,
        risk_assessment=risk,
        vehicle_wear_estimate=wear,
        recommendations=tuple(recommendations),
    )


def insurance_summary(report: DrivingReport) -> InsuranceSummary:
    behavior = report.driving_behavior
    # Cornering and over-revving are not counted as safety incidents.
    incidents = (
        len(behavior.harsh_braking_events)
        + len(behavior.harsh_acceleration_events)
        + len(behavior.speeding_events)
    )
    return InsuranceSummary(
        vehicle_id=report.car_id,
        analysis_period=report.analysis_period,
        driving_score=report.overall_driving_score,
        risk_level=report.risk_assessment.overall_risk_level,
        recommended_premium_multiplier=report.risk_assessment.insurance_premium_multiplier,
        safety_incidents=incidents,
        total_distance_km=report.basic_statistics.total_distance_km,
        smooth_driving_percentage=behavior.smooth_driving_percentage,
    )


def reseller_summary(report: DrivingReport) -> ResellerSummary:
    wear = report.vehicle_wear_estimate
    return ResellerSummary(
        vehicle_id=report.car_id,
        analysis_period=report.analysis_period,
        total_distance_km=report.basic_statistics.total_distance_km,
        driving_score=report.overall_driving_score,
        vehicle_condition_rating=condition_rating(report.overall_driving_score),
        estimated_depreciation_rate=report.risk_assessment.vehicle_depreciation_rate,
        brake_condition=wear.brake_wear_level,
        engine_condition=wear.engine_wear_level,
        tire_condition=wear.tire_wear_level,
        estimated_maintenance_cost=wear.estimated_maintenance_cost,
        recommended_actions=report.recommendations,
    )


def build_route(car_id: int, readings: Sequence[SensorReading]) -> RouteData | EmptyDataset:
    """Project readings to a time-ordered GPS + speed polyline."""
    if not readings:
        return EmptyDataset(car_id=car_id, reason="no route data found for the specified period")

    points = tuple(
        RoutePoint(
            timestamp=r.timestamp,
            lat=r.gps.lat,
            lon=r.gps.lon,
            altitude_m=r.gps.altitude_m,
            speed_kmh=r.speed_kmh,
        )
        for r in order_by_time(readings)
    )
    return RouteData(
        car_id=car_id,
        start_time=points[0].timestamp,
        end_time=points[-1].timestamp,
        points=points,
    )
