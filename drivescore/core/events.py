"""Threshold-crossing event detection.

Every reading is classified independently in five categories. One reading
can raise events in several categories at once; each category keeps the
original reading order.
"""

from __future__ import annotations

from typing import Callable, Sequence

from drivescore.core.models import (
    DrivingBehaviorAnalysis,
    DrivingEvent,
    EventSeverity,
    SensorReading,
)
from drivescore.core.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds


def g_force_severity(measured: float, threshold: float,
                     thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS) -> EventSeverity:
    diff = abs(measured) - abs(threshold)
    if diff < thresholds.g_severity_medium:
        return EventSeverity.Low
    if diff < thresholds.g_severity_high:
        return EventSeverity.Medium
    return EventSeverity.High


def speeding_severity(speed_kmh: float,
                      thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS) -> EventSeverity:
    excess = speed_kmh - thresholds.speed_limit_kmh
    if excess < thresholds.speeding_medium_excess_kmh:
        return EventSeverity.Low
    if excess < thresholds.speeding_high_excess_kmh:
        return EventSeverity.Medium
    return EventSeverity.High


def rpm_severity(rpm: int,
                 thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS) -> EventSeverity:
    if rpm < thresholds.over_rev_medium_rpm:
        return EventSeverity.Low
    if rpm < thresholds.over_rev_high_rpm:
        return EventSeverity.Medium
    return EventSeverity.High


def _collect(
    readings: Sequence[SensorReading],
    triggered: Callable[[SensorReading], bool],
    severity: Callable[[SensorReading], EventSeverity],
    describe: Callable[[SensorReading], str],
) -> tuple[DrivingEvent, ...]:
    return tuple(
        DrivingEvent(
            timestamp=r.timestamp,
            lat=r.gps.lat,
            lon=r.gps.lon,
            severity=severity(r),
            speed_kmh=r.speed_kmh,
            description=describe(r),
        )
        for r in readings
        if triggered(r)
    )


def smooth_driving_percentage(harsh_count: int, total_readings: int) -> float:
    """Share of readings without a braking, acceleration or cornering event.

    Speeding and over-revving do not count against smoothness.
    """
    return 100.0 - (harsh_count / total_readings) * 100.0


def analyze_driving_behavior(
    readings: Sequence[SensorReading],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> DrivingBehaviorAnalysis:
    """Scan readings for harsh, speeding and over-revving events."""
    if not readings:
        raise ValueError("at least one reading is required")

    t = thresholds

    braking = _collect(
        readings,
        lambda r: r.acceleration_y < t.harsh_braking_g,
        lambda r: g_force_severity(r.acceleration_y, t.harsh_braking_g, t),
        lambda r: f"Harsh braking: {r.acceleration_y:.2f}g",
    )
    acceleration = _collect(
        readings,
        lambda r: r.acceleration_y > t.harsh_acceleration_g,
        lambda r: g_force_severity(r.acceleration_y, t.harsh_acceleration_g, t),
        lambda r: f"Harsh acceleration: {r.acceleration_y:.2f}g",
    )
    cornering = _collect(
        readings,
        lambda r: abs(r.acceleration_x) > t.harsh_cornering_g,
        lambda r: g_force_severity(r.acceleration_x, t.harsh_cornering_g, t),
        lambda r: f"Harsh cornering: {r.acceleration_x:.2f}g",
    )
    speeding = _collect(
        readings,
        lambda r: r.speed_kmh > t.speed_limit_kmh,
        lambda r: speeding_severity(r.speed_kmh, t),
        lambda r: f"Speeding: {r.speed_kmh:.1f} km/h (limit: {t.speed_limit_kmh:g} km/h)",
    )
    over_revving = _collect(
        readings,
        lambda r: r.engine_rpm > t.over_rev_rpm,
        lambda r: rpm_severity(r.engine_rpm, t),
        lambda r: f"Over-revving: {r.engine_rpm} RPM",
    )

    harsh_count = len(braking) + len(acceleration) + len(cornering)

    return DrivingBehaviorAnalysis(
        harsh_braking_events=braking,
        harsh_acceleration_events=acceleration,
        harsh_cornering_events=cornering,
        speeding_events=speeding,
        over_revving_events=over_revving,
        smooth_driving_percentage=smooth_driving_percentage(harsh_count, len(readings)),
    )
