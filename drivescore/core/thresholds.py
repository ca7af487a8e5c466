"""Event detection thresholds.

Defaults describe an urban passenger car. Alternate vehicle classes or
jurisdictions get their own instance through the ``analysis`` config section.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class AnalysisThresholds:
    # Longitudinal / lateral g-force limits.
    harsh_braking_g: float = -0.30
    harsh_acceleration_g: float = 0.30
    harsh_cornering_g: float = 0.25

    # Severity bands on (|measured| - |threshold|) for the g-force categories.
    g_severity_medium: float = 0.1
    g_severity_high: float = 0.3

    speed_limit_kmh: float = 50.0
    speeding_medium_excess_kmh: float = 10.0
    speeding_high_excess_kmh: float = 20.0

    over_rev_rpm: int = 5000
    over_rev_medium_rpm: int = 5500
    over_rev_high_rpm: int = 6000

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_THRESHOLDS = AnalysisThresholds()
