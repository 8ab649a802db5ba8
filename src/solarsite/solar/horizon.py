"""Terrain horizon sampling along the 8 compass bearings."""
from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

import numpy as np

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import COMPASS_BEARINGS, COMPASS_DIRECTIONS, ElevationSample, GeoPoint, HorizonProfile, ProviderResult
from solarsite.providers.base import ElevationProvider

EARTH_RADIUS_KM = 6371.0


def sample_points(point: GeoPoint, bearing_deg: float, radius_km: float = 1.0, count: int = 10) -> List[GeoPoint]:
    """Equally spaced points along a great circle, ``radius_km/count`` apart.

    The origin itself is not included; the last point sits at ``radius_km``.
    """
    lat1 = math.radians(point.lat)
    lon1 = math.radians(point.lon)
    bearing = math.radians(bearing_deg)
    dist = np.arange(1, count + 1) * (radius_km / count) / EARTH_RADIUS_KM

    lat2 = np.arcsin(np.sin(lat1) * np.cos(dist) + np.cos(lat1) * np.sin(dist) * np.cos(bearing))
    lon2 = lon1 + np.arctan2(
        np.sin(bearing) * np.sin(dist) * np.cos(lat1),
        np.cos(dist) - np.sin(lat1) * np.sin(lat2),
    )
    lats = np.degrees(lat2)
    # normalize longitude into [-180, 180) so points across the antimeridian validate
    lons = (np.degrees(lon2) + 180.0) % 360.0 - 180.0
    return [GeoPoint(lat=float(la), lon=float(lo)) for la, lo in zip(lats, lons)]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 1000.0 * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def horizon_angle(point: GeoPoint, origin_elevation_m: float, samples: Sequence[ElevationSample]) -> float:
    """Maximum angle above horizontal over ``samples``, floored at 0 degrees."""
    max_angle = 0.0
    for sample in samples:
        if not isinstance(sample.elevation_m, (int, float)) or not math.isfinite(sample.elevation_m):
            raise ValueError(f"unusable elevation {sample.elevation_m!r} at {sample.lat:.6f},{sample.lon:.6f}")
        distance = haversine_m(point.lat, point.lon, sample.lat, sample.lon)
        angle = math.degrees(math.atan2(sample.elevation_m - origin_elevation_m, distance))
        if angle > max_angle:
            max_angle = angle
    return max_angle


def _direction_angle(
    point: GeoPoint,
    origin_elevation_m: float,
    direction: str,
    provider: ElevationProvider,
    radius_km: float,
    count: int,
) -> ProviderResult[float]:
    points = sample_points(point, COMPASS_BEARINGS[direction], radius_km=radius_km, count=count)
    try:
        samples = provider.get_elevations(points)
        if len(samples) != len(points):
            raise ValueError(f"expected {len(points)} elevations, got {len(samples)}")
        angle = horizon_angle(point, origin_elevation_m, samples)
    except Exception as exc:
        # A failed or unusable batch only flattens its own direction.
        return ProviderResult(value=0.0, fallback_reason=f"{type(exc).__name__}: {exc}")
    return ProviderResult(value=angle)


def sample_horizon(
    point: GeoPoint,
    origin_elevation_m: float,
    provider: Optional[ElevationProvider],
    samples_per_direction: int = 10,
    radius_km: float = 1.0,
    max_workers: int = 8,
    debug: DebugCollector | None = None,
) -> HorizonProfile:
    """Build the horizon profile around ``point``.

    One batch elevation request per compass direction; with ``max_workers`` > 1
    the directions are fetched concurrently. Provider failures never propagate:
    the affected direction is treated as unobstructed and listed in
    ``HorizonProfile.fallback_directions``.
    """
    debug = debug or NullDebugCollector()
    if provider is None:
        debug.emit("horizon.fallback", {"direction": "*", "reason": "no elevation provider configured"}, component="horizon")
        return HorizonProfile.flat(fallback=True)

    def run(direction: str) -> ProviderResult[float]:
        return _direction_angle(point, origin_elevation_m, direction, provider, radius_km, samples_per_direction)

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(COMPASS_DIRECTIONS))) as pool:
            results = dict(zip(COMPASS_DIRECTIONS, pool.map(run, COMPASS_DIRECTIONS)))
    else:
        results = {direction: run(direction) for direction in COMPASS_DIRECTIONS}

    angles: Dict[str, float] = {}
    fallbacks: List[str] = []
    for direction in COMPASS_DIRECTIONS:
        result = results[direction]
        angles[direction] = max(0.0, result.value)
        if result.is_fallback:
            fallbacks.append(direction)
            debug.emit("horizon.fallback", {"direction": direction, "reason": result.fallback_reason}, component="horizon")
        else:
            debug.emit("horizon.direction", {"direction": direction, "angle_deg": angles[direction]}, component="horizon")

    return HorizonProfile(angles=angles, fallback_directions=tuple(fallbacks))


__all__ = ["EARTH_RADIUS_KM", "sample_points", "haversine_m", "horizon_angle", "sample_horizon"]
