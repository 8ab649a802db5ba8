"""Solar suitability score (0-100)."""
from __future__ import annotations

from solarsite.core.numeric import round_half_up

RADIATION_WEIGHT = 0.4
SHADOW_WEIGHT = 0.3
PAYBACK_WEIGHT = 0.3


def radiation_tier(annual_radiation_kwh_m2: float) -> int:
    if annual_radiation_kwh_m2 >= 1600:
        return 100
    if annual_radiation_kwh_m2 >= 1400:
        return 80
    if annual_radiation_kwh_m2 >= 1200:
        return 60
    if annual_radiation_kwh_m2 >= 1000:
        return 40
    return 20


def payback_tier(payback_period_years: float) -> int:
    if payback_period_years < 7:
        return 100
    if payback_period_years < 10:
        return 80
    if payback_period_years < 15:
        return 60
    if payback_period_years < 20:
        return 40
    return 20


def calculate_solar_score(annual_radiation_kwh_m2: float, shadow_factor: float, payback_period_years: float) -> int:
    """Weighted blend: 40% radiation tier, 30% shadow factor, 30% payback tier.

    An infinite payback (no savings) falls into the lowest payback tier.
    """
    score = (
        radiation_tier(annual_radiation_kwh_m2) * RADIATION_WEIGHT
        + shadow_factor * 100.0 * SHADOW_WEIGHT
        + payback_tier(payback_period_years) * PAYBACK_WEIGHT
    )
    return round_half_up(score)


__all__ = ["radiation_tier", "payback_tier", "calculate_solar_score"]
