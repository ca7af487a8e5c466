"""Driving score: 100 minus weighted event counts, plus a smoothness bonus."""

from __future__ import annotations

from drivescore.core.models import DrivingBehaviorAnalysis

PERFECT_SCORE = 100.0

# Points deducted per event.
HARSH_BRAKING_PENALTY = 0.5
HARSH_ACCELERATION_PENALTY = 0.5
HARSH_CORNERING_PENALTY = 0.3
SPEEDING_PENALTY = 1.0
OVER_REVVING_PENALTY = 0.2

SMOOTH_DRIVING_BONUS = 5.0
SMOOTH_DRIVING_BONUS_ABOVE = 95.0


def calculate_driving_score(behavior: DrivingBehaviorAnalysis) -> float:
    """Return a score in [0, 100].

    Penalties are applied first, then the bonus, then the clamp, so a nearly
    clean window that earns the bonus still tops out at 100.
    """
    score = PERFECT_SCORE
    score -= len(behavior.harsh_braking_events) * HARSH_BRAKING_PENALTY
    score -= len(behavior.harsh_acceleration_events) * HARSH_ACCELERATION_PENALTY
    score -= len(behavior.harsh_cornering_events) * HARSH_CORNERING_PENALTY
    score -= len(behavior.speeding_events) * SPEEDING_PENALTY
    score -= len(behavior.over_revving_events) * OVER_REVVING_PENALTY

    if behavior.smooth_driving_percentage > SMOOTH_DRIVING_BONUS_ABOVE:
        score += SMOOTH_DRIVING_BONUS

    return max(0.0, min(PERFECT_SCORE, score))
