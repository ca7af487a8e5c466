"""Tests for risk assessment."""

from __future__ import annotations

import pytest

from conftest import make_behavior as _behavior
from drivescore.core.models import RiskLevel
from drivescore.core.risk import (
    accident_risk_score,
    assess_risk,
    depreciation_rate,
    determine_risk_level,
    insurance_premium_multiplier,
    positive_factors,
    risk_factors,
)


@pytest.mark.parametrize("score,level,multiplier", [
    (100.0, RiskLevel.VeryLow, 0.8),
    (90.0, RiskLevel.VeryLow, 0.8),
    (89.9, RiskLevel.Low, 1.0),
    (80.0, RiskLevel.Low, 1.0),
    (75.0, RiskLevel.Moderate, 1.2),
    (60.0, RiskLevel.High, 1.5),
    (59.9, RiskLevel.VeryHigh, 2.0),
    (0.0, RiskLevel.VeryHigh, 2.0),
])
def test_score_bins(score, level, multiplier):
    assert determine_risk_level(score) == level
    assert insurance_premium_multiplier(score) == multiplier


def test_accident_risk_weights():
    behavior = _behavior(braking=10, acceleration=10, cornering=10, speeding=10, over_revving=99)
    # 1.0 + 0.8 + 1.2 + 3.0; over-revving does not count
    assert accident_risk_score(behavior) == pytest.approx(6.0)


def test_accident_risk_capped_at_ten():
    assert accident_risk_score(_behavior(speeding=100)) == 10.0


def test_depreciation_rate():
    assert depreciation_rate(_behavior(), 95.0) == 15.0
    assert depreciation_rate(_behavior(), 69.9) == 20.0
    assert depreciation_rate(_behavior(over_revving=51, braking=31), 50.0) == 24.0
    assert depreciation_rate(_behavior(over_revving=50, braking=30), 50.0) == 20.0


def test_all_matching_risk_factors_are_listed():
    behavior = _behavior(braking=11, acceleration=16, speeding=6, over_revving=21, smooth=80.0)
    factors = risk_factors(behavior)
    assert factors == [
        "High frequency of harsh braking (11 events)",
        "Aggressive acceleration patterns (16 events)",
        "Frequent speeding violations (6 events)",
        "Excessive engine stress (21 over-revving events)",
        "Below average smooth driving (80.0%)",
    ]


def test_positive_factors():
    assert positive_factors(_behavior(smooth=97.5)) == [
        "Excellent smooth driving (97.5%)",
        "Minimal harsh braking incidents",
        "No speeding violations detected",
    ]
    assert positive_factors(_behavior(braking=5, speeding=1, smooth=90.0)) == []


def test_assess_risk_composes_parts():
    behavior = _behavior(braking=2, speeding=1, smooth=96.0)
    assessment = assess_risk(behavior, 98.0)
    assert assessment.overall_risk_level == RiskLevel.VeryLow
    assert assessment.insurance_premium_multiplier == 0.8
    assert assessment.accident_risk_score == pytest.approx(0.5)
    assert assessment.vehicle_depreciation_rate == 15.0
    assert assessment.risk_factors == ()
    assert "Minimal harsh braking incidents" in assessment.positive_factors
