"""Irradiance acquisition with a deterministic latitude/longitude fallback."""
from __future__ import annotations

import math
from typing import Optional

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import GeoPoint, IrradianceProfile, ProviderResult
from solarsite.core.numeric import clamp, round_half_up
from solarsite.providers.base import IrradianceProvider

MIN_FALLBACK_RADIATION = 800.0
MAX_FALLBACK_RADIATION = 1800.0
MIN_SEASONAL_FACTOR = 0.2

# Latitude bands: (upper |lat| bound, seasonal amplitude)
_TROPICAL = (10.0, 0.15)
_TEMPERATE = (40.0, 0.40)
_POLAR_AMPLITUDE = 0.80


def fallback_base_radiation(lat: float) -> float:
    """Piecewise-linear annual radiation (kWh/m2/yr) by latitude band, before clamping."""
    lat_abs = abs(lat)
    if lat_abs < _TROPICAL[0]:
        return 1700.0 - lat_abs * 30.0
    if lat_abs < _TEMPERATE[0]:
        return 1600.0 - lat_abs * 20.0
    return 1400.0 - lat_abs * 10.0


def longitude_variation(lon: float) -> float:
    """Deterministic +/-25 kWh/m2 spread standing in for coastal vs inland climate."""
    return (abs(lon) % 10.0) * 5.0 - 25.0


def seasonal_amplitude(lat: float) -> float:
    lat_abs = abs(lat)
    if lat_abs < _TROPICAL[0]:
        return _TROPICAL[1]
    if lat_abs < _TEMPERATE[0]:
        return _TEMPERATE[1]
    return _POLAR_AMPLITUDE


def seasonal_factor(lat: float, month_index: int) -> float:
    """Cosine seasonal weight for a 0-based month; peaks in July (north) or January (south)."""
    if lat >= 0:
        angle = (month_index - 6) * (math.pi / 6.0)
    else:
        angle = month_index * (math.pi / 6.0)
    return max(MIN_SEASONAL_FACTOR, 1.0 + seasonal_amplitude(lat) * math.cos(angle))


def fallback_irradiance(lat: float, lon: float) -> IrradianceProfile:
    annual = clamp(
        fallback_base_radiation(lat) + longitude_variation(lon),
        MIN_FALLBACK_RADIATION,
        MAX_FALLBACK_RADIATION,
    )
    monthly = tuple(annual / 12.0 * seasonal_factor(lat, m) for m in range(12))
    lat_abs = abs(lat)
    return IrradianceProfile(
        annual_radiation_kwh_m2=float(round_half_up(annual)),
        monthly_radiation_kwh_m2=monthly,
        optimal_tilt_deg=min(60.0, max(10.0, lat_abs)),
        average_sun_hours=max(3.0, 6.0 - lat_abs * 0.05),
        source="fallback",
    )


def resolve_irradiance(
    point: GeoPoint,
    provider: Optional[IrradianceProvider],
    debug: DebugCollector | None = None,
) -> ProviderResult[IrradianceProfile]:
    """Ask ``provider`` for irradiance; fall back to the synthetic model on any failure.

    Never raises for provider problems. The returned result records why the
    fallback was used so callers can surface reduced precision.
    """
    debug = debug or NullDebugCollector()
    if provider is None:
        reason = "no irradiance provider configured"
    else:
        try:
            profile = provider.get_irradiance(point)
            if not isinstance(profile, IrradianceProfile):
                raise TypeError(f"provider returned {type(profile).__name__}, expected IrradianceProfile")
            return ProviderResult(value=profile)
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"

    profile = fallback_irradiance(point.lat, point.lon)
    debug.emit(
        "irradiance.fallback",
        {"reason": reason, "annual_kwh_m2": profile.annual_radiation_kwh_m2, "lat": point.lat, "lon": point.lon},
        component="irradiance",
    )
    return ProviderResult(value=profile, fallback_reason=reason)


__all__ = [
    "fallback_base_radiation",
    "longitude_variation",
    "seasonal_amplitude",
    "seasonal_factor",
    "fallback_irradiance",
    "resolve_irradiance",
]
