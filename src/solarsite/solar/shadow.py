"""Annual terrain shadow factor from the sun path and a horizon profile."""
from __future__ import annotations

import datetime as dt

import pandas as pd

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import COMPASS_DIRECTIONS, GeoPoint, HorizonProfile, ShadowAnalysis
from solarsite.core.numeric import round_half_up
from solarsite.solar.position import sun_position

SAMPLE_DAY = 15
SAMPLE_HOURS = tuple(range(6, 19))  # 06:00-18:00 inclusive, local mean solar time
BLOCKED_HOURS_PER_DEGREE = 0.05
MAX_BLOCKED_HOURS = 4.0
NO_OBSTACLES = "No significant terrain obstacles"


def azimuth_to_direction(azimuth: float) -> str:
    """Nearest of the 8 compass points (+/-22.5 degree sectors)."""
    normalized = azimuth % 360.0
    index = int(((normalized + 22.5) % 360.0) // 45.0)
    return COMPASS_DIRECTIONS[index]


def sun_path_samples(
    point: GeoPoint,
    horizon: HorizonProfile,
    year: int = 2024,
    min_elevation_deg: float = 10.0,
) -> pd.DataFrame:
    """Evaluate the fixed annual sampling grid (12 months x 13 hours).

    Hours are local mean solar time, i.e. UTC shifted by ``lon/15``, so the
    grid covers the same part of the solar day at every longitude.
    """
    rows = []
    for month in range(1, 13):
        midnight = dt.datetime(year, month, SAMPLE_DAY, tzinfo=dt.timezone.utc)
        for hour in SAMPLE_HOURS:
            ts = midnight + dt.timedelta(hours=hour - point.lon / 15.0)
            pos = sun_position(point, ts)
            direction = azimuth_to_direction(pos.azimuth_deg)
            horizon_deg = horizon.angles[direction]
            daylight = pos.elevation_deg > min_elevation_deg
            rows.append(
                {
                    "month": month,
                    "hour": hour,
                    "timestamp": ts,
                    "azimuth": pos.azimuth_deg,
                    "elevation": pos.elevation_deg,
                    "direction": direction,
                    "horizon_deg": horizon_deg,
                    "daylight": daylight,
                    "visible": daylight and pos.elevation_deg > horizon_deg,
                }
            )
    return pd.DataFrame(rows)


def obstacle_labels(horizon: HorizonProfile, threshold_deg: float = 5.0) -> tuple[str, ...]:
    labels = [
        f"{direction} ({round_half_up(angle)}°)"
        for direction, angle in ((d, horizon.angles[d]) for d in COMPASS_DIRECTIONS)
        if angle > threshold_deg
    ]
    return tuple(labels) if labels else (NO_OBSTACLES,)


def estimate_blocked_hours(horizon: HorizonProfile) -> float:
    """Linear heuristic: 0.05 h/day per degree of mean horizon angle, capped at 4 h."""
    return min(MAX_BLOCKED_HOURS, horizon.mean_angle * BLOCKED_HOURS_PER_DEGREE)


def analyze_shadow(
    point: GeoPoint,
    horizon: HorizonProfile,
    year: int = 2024,
    min_elevation_deg: float = 10.0,
    obstacle_threshold_deg: float = 5.0,
    debug: DebugCollector | None = None,
) -> ShadowAnalysis:
    """Fraction of sampled daylight hours with line of sight to the sun.

    A sample counts as daylight when the sun is above ``min_elevation_deg`` and
    as available when it is also above the horizon angle of the sector it sits
    in. Without any daylight samples the factor is 1.0.
    """
    debug = debug or NullDebugCollector()
    samples = sun_path_samples(point, horizon, year=year, min_elevation_deg=min_elevation_deg)
    daylight = int(samples["daylight"].sum())
    available = int(samples["visible"].sum())
    shadow_factor = available / daylight if daylight > 0 else 1.0

    analysis = ShadowAnalysis(
        shadow_factor=shadow_factor,
        blocked_hours_per_day=estimate_blocked_hours(horizon),
        terrain_obstacles=obstacle_labels(horizon, obstacle_threshold_deg),
        horizon=horizon,
        daylight_samples=daylight,
        available_samples=available,
    )
    debug.emit(
        "shadow.summary",
        {
            "samples": len(samples),
            "daylight": daylight,
            "available": available,
            "shadow_factor": shadow_factor,
            "blocked_hours_per_day": analysis.blocked_hours_per_day,
            "fallback_directions": list(horizon.fallback_directions),
        },
        component="shadow",
    )
    return analysis


__all__ = [
    "azimuth_to_direction",
    "sun_path_samples",
    "obstacle_labels",
    "estimate_blocked_hours",
    "analyze_shadow",
    "NO_OBSTACLES",
]
