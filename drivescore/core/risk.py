"""Risk assessment derived from the driving score and event profile."""

from __future__ import annotations

from drivescore.core.models import DrivingBehaviorAnalysis, RiskAssessment, RiskLevel

# Score bins, evaluated high to low. Each entry: (minimum score, risk level,
# premium multiplier).
_SCORE_BINS: tuple[tuple[float, RiskLevel, float], ...] = (
    (90.0, RiskLevel.VeryLow, 0.8),
    (80.0, RiskLevel.Low, 1.0),
    (70.0, RiskLevel.Moderate, 1.2),
    (60.0, RiskLevel.High, 1.5),
)
_BOTTOM_BIN = (RiskLevel.VeryHigh, 2.0)

MAX_ACCIDENT_RISK = 10.0

BASE_DEPRECIATION_RATE = 15.0
MAX_DEPRECIATION_RATE = 30.0


def _bin(score: float) -> tuple[RiskLevel, float]:
    for minimum, level, multiplier in _SCORE_BINS:
        if score >= minimum:
            return level, multiplier
    return _BOTTOM_BIN


def determine_risk_level(score: float) -> RiskLevel:
    return _bin(score)[0]


def insurance_premium_multiplier(score: float) -> float:
    """0.8x for 90+, standard 1.0x for 80+, rising to 2.0x below 60."""
    return _bin(score)[1]


def accident_risk_score(behavior: DrivingBehaviorAnalysis) -> float:
    """0 (no risk) to 10 (extreme)."""
    risk = (
        len(behavior.harsh_braking_events) * 0.1
        + len(behavior.harsh_acceleration_events) * 0.08
        + len(behavior.harsh_cornering_events) * 0.12
        + len(behavior.speeding_events) * 0.3
    )
    return min(MAX_ACCIDENT_RISK, risk)


def depreciation_rate(behavior: DrivingBehaviorAnalysis, score: float) -> float:
    """Annual depreciation, in percent."""
    rate = BASE_DEPRECIATION_RATE
    if score < 70:
        rate += 5.0
    if len(behavior.over_revving_events) > 50:
        rate += 2.0
    if len(behavior.harsh_braking_events) > 30:
        rate += 2.0
    return min(MAX_DEPRECIATION_RATE, rate)


def risk_factors(behavior: DrivingBehaviorAnalysis) -> list[str]:
    braking = len(behavior.harsh_braking_events)
    acceleration = len(behavior.harsh_acceleration_events)
    speeding = len(behavior.speeding_events)
    over_revving = len(behavior.over_revving_events)
    smooth = behavior.smooth_driving_percentage

    factors = []
    if braking > 10:
        factors.append(f"High frequency of harsh braking ({braking} events)")
    if acceleration > 15:
        factors.append(f"Aggressive acceleration patterns ({acceleration} events)")
    if speeding > 5:
        factors.append(f"Frequent speeding violations ({speeding} events)")
    if over_revving > 20:
        factors.append(f"Excessive engine stress ({over_revving} over-revving events)")
    if smooth < 85:
        factors.append(f"Below average smooth driving ({smooth:.1f}%)")
    return factors


def positive_factors(behavior: DrivingBehaviorAnalysis) -> list[str]:
    smooth = behavior.smooth_driving_percentage

    factors = []
    if smooth > 95:
        factors.append(f"Excellent smooth driving ({smooth:.1f}%)")
    if len(behavior.harsh_braking_events) < 5:
        factors.append("Minimal harsh braking incidents")
    if not behavior.speeding_events:
        factors.append("No speeding violations detected")
    return factors


def assess_risk(behavior: DrivingBehaviorAnalysis, score: float) -> RiskAssessment:
    level, multiplier = _bin(score)
    return RiskAssessment(
        overall_risk_level=level,
        insurance_premium_multiplier=multiplier,
        accident_risk_score=accident_risk_score(behavior),
        vehicle_depreciation_rate=depreciation_rate(behavior, score),
        risk_factors=tuple(risk_factors(behavior)),
        positive_factors=tuple(positive_factors(behavior)),
    )
