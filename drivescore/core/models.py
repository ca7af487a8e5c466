"""drivescore — core internal data models.

These are plain dataclasses with no framework dependencies.
JSON payloads are converted to/from these at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import IntEnum


class EventSeverity(IntEnum):
    Low = 0
    Medium = 1
    High = 2


class RiskLevel(IntEnum):
    VeryLow = 0
    Low = 1
    Moderate = 2
    High = 3
    VeryHigh = 4


class WearLevel(IntEnum):
    """Ordinal, so ``level > WearLevel.Moderate`` reads naturally."""
    Low = 0
    Moderate = 1
    High = 2
    Severe = 3


def _iso(dt: datetime) -> str:
    return dt.isoformat()


@dataclass(frozen=True)
class RawTelemetryRecord:
    """A cached telemetry row as the store hands it out (payload undecoded)."""
    record_id: int
    car_id: int
    car_data: str
    insert_time: datetime
    delete_time: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.delete_time is not None


@dataclass(frozen=True)
class GpsFix:
    lat: float = 0.0
    lon: float = 0.0
    altitude_m: float = 0.0
    accuracy_m: float = 0.0
    heading_deg: float = 0.0


@dataclass(frozen=True)
class SensorReading:
    """One decoded telemetry sample."""
    sensor_data_id: str
    vehicle_id: str
    timestamp: datetime
    gps: GpsFix
    acceleration_x: float = 0.0   # lateral g, positive = right turn
    acceleration_y: float = 0.0   # longitudinal g, negative = braking
    acceleration_z: float = 0.0   # vertical g
    speed_kmh: float = 0.0
    engine_rpm: int = 0
    engine_temperature: int = 0
    fuel_level: float = 0.0
    odometer_km: float = 0.0
    throttle_position: float = 0.0
    brake_pedal: bool = False


@dataclass(frozen=True)
class DrivingEvent:
    timestamp: datetime
    lat: float
    lon: float
    severity: EventSeverity
    speed_kmh: float
    description: str

    def to_dict(self) -> dict:
        return {
            "timestamp": _iso(self.timestamp),
            "lat": self.lat,
            "lon": self.lon,
            "severity": self.severity.name,
            "speed_kmh": self.speed_kmh,
            "description": self.description,
        }


@dataclass(frozen=True)
class DateRange:
    start_date: datetime
    end_date: datetime

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start_date

    def to_dict(self) -> dict:
        return {
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "duration_seconds": self.duration.total_seconds(),
        }


@dataclass(frozen=True)
class BasicStatistics:
    total_distance_km: float
    total_driving_time: timedelta
    average_speed_kmh: float
    max_speed_kmh: float
    average_rpm: int
    max_rpm: int
    fuel_consumption: float
    number_of_trips: int
    data_points_analyzed: int

    def to_dict(self) -> dict:
        return {
            "total_distance_km": self.total_distance_km,
            "total_driving_time_seconds": self.total_driving_time.total_seconds(),
            "average_speed_kmh": self.average_speed_kmh,
            "max_speed_kmh": self.max_speed_kmh,
            "average_rpm": self.average_rpm,
            "max_rpm": self.max_rpm,
            "fuel_consumption": self.fuel_consumption,
            "number_of_trips": self.number_of_trips,
            "data_points_analyzed": self.data_points_analyzed,
        }


@dataclass(frozen=True)
class DrivingBehaviorAnalysis:
    harsh_braking_events: tuple[DrivingEvent, ...]
    harsh_acceleration_events: tuple[DrivingEvent, ...]
    harsh_cornering_events: tuple[DrivingEvent, ...]
    speeding_events: tuple[DrivingEvent, ...]
    over_revving_events: tuple[DrivingEvent, ...]
    smooth_driving_percentage: float

    def to_dict(self) -> dict:
        return {
            "harsh_braking_events": [e.to_dict() for e in self.harsh_braking_events],
            "harsh_acceleration_events": [e.to_dict() for e in self.harsh_acceleration_events],
            "harsh_cornering_events": [e.to_dict() for e in self.harsh_cornering_events],
            "speeding_events": [e.to_dict() for e in self.speeding_events],
            "over_revving_events": [e.to_dict() for e in self.over_revving_events],
            "smooth_driving_percentage": self.smooth_driving_percentage,
        }


@dataclass(frozen=True)
class RiskAssessment:
    overall_risk_level: RiskLevel
    insurance_premium_multiplier: float
    accident_risk_score: float
    vehicle_depreciation_rate: float
    risk_factors: tuple[str, ...] = ()
    positive_factors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "overall_risk_level": self.overall_risk_level.name,
            "insurance_premium_multiplier": self.insurance_premium_multiplier,
            "accident_risk_score": self.accident_risk_score,
            "vehicle_depreciation_rate": self.vehicle_depreciation_rate,
            "risk_factors": list(self.risk_factors),
            "positive_factors": list(self.positive_factors),
        }


@dataclass(frozen=True)
class VehicleWearEstimate:
    brake_wear_level: WearLevel
    engine_wear_level: WearLevel
    tire_wear_level: WearLevel
    transmission_stress: float
    estimated_maintenance_cost: float

    def to_dict(self) -> dict:
        return {
            "brake_wear_level": self.brake_wear_level.name,
            "engine_wear_level": self.engine_wear_level.name,
            "tire_wear_level": self.tire_wear_level.name,
            "transmission_stress": self.transmission_stress,
            "estimated_maintenance_cost": self.estimated_maintenance_cost,
        }


@dataclass(frozen=True)
class DrivingReport:
    car_id: int
    report_generated_at: datetime
    analysis_period: DateRange
    basic_statistics: BasicStatistics
    driving_behavior: DrivingBehaviorAnalysis
    overall_driving_score: float
    risk_assessment: RiskAssessment
    vehicle_wear_estimate: VehicleWearEstimate
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "car_id": self.car_id,
            "report_generated_at": _iso(self.report_generated_at),
            "analysis_period": self.analysis_period.to_dict(),
            "basic_statistics": self.basic_statistics.to_dict(),
            "driving_behavior": self.driving_behavior.to_dict(),
            "overall_driving_score": self.overall_driving_score,
            "risk_assessment": self.risk_assessment.to_dict(),
            "vehicle_wear_estimate": self.vehicle_wear_estimate.to_dict(),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class InsuranceSummary:
    vehicle_id: int
    analysis_period: DateRange
    driving_score: float
    risk_level: RiskLevel
    recommended_premium_multiplier: float
    safety_incidents: int
    total_distance_km: float
    smooth_driving_percentage: float

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "analysis_period": self.analysis_period.to_dict(),
            "driving_score": self.driving_score,
            "risk_level": self.risk_level.name,
            "recommended_premium_multiplier": self.recommended_premium_multiplier,
            "safety_incidents": self.safety_incidents,
            "total_distance_km": self.total_distance_km,
            "smooth_driving_percentage": self.smooth_driving_percentage,
        }


@dataclass(frozen=True)
class ResellerSummary:
    vehicle_id: int
    analysis_period: DateRange
    total_distance_km: float
    driving_score: float
    vehicle_condition_rating: str
    estimated_depreciation_rate: float
    brake_condition: WearLevel
    engine_condition: WearLevel
    tire_condition: WearLevel
    estimated_maintenance_cost: float
    recommended_actions: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "analysis_period": self.analysis_period.to_dict(),
            "total_distance_km": self.total_distance_km,
            "driving_score": self.driving_score,
            "vehicle_condition_rating": self.vehicle_condition_rating,
            "estimated_depreciation_rate": self.estimated_depreciation_rate,
            "brake_condition": self.brake_condition.name,
            "engine_condition": self.engine_condition.name,
            "tire_condition": self.tire_condition.name,
            "estimated_maintenance_cost": self.estimated_maintenance_cost,
            "recommended_actions": list(self.recommended_actions),
        }


@dataclass(frozen=True)
class RoutePoint:
    timestamp: datetime
    lat: float
    lon: float
    altitude_m: float
    speed_kmh: float

    def to_dict(self) -> dict:
        return {
            "timestamp": _iso(self.timestamp),
            "lat": self.lat,
            "lon": self.lon,
            "altitude_m": self.altitude_m,
            "speed_kmh": self.speed_kmh,
        }


@dataclass(frozen=True)
class RouteData:
    car_id: int
    start_time: datetime
    end_time: datetime
    points: tuple[RoutePoint, ...] = field(default_factory=tuple)

    @property
    def total_points(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict:
        return {
            "car_id": self.car_id,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "total_points": self.total_points,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass(frozen=True)
class EmptyDataset:
    """No decodable readings in the requested window.

    Returned, not raised: an empty window is a normal client-correctable
    outcome.
    """
    car_id: int
    reason: str = "no telemetry data found for the specified period"

    def to_dict(self) -> dict:
        return {"error": self.reason, "car_id": self.car_id}


def assume_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes. Aware values are left untouched."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
