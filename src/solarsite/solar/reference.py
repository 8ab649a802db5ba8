"""Cross-check of the approximate sun model against pvlib's SPA."""
from __future__ import annotations

import pandas as pd
import pvlib

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import GeoPoint
from solarsite.solar.position import sun_position


def _wrap_delta(delta: pd.Series) -> pd.Series:
    """Map azimuth differences into [-180, 180)."""
    return (delta + 180.0) % 360.0 - 180.0


def compare_with_pvlib(
    point: GeoPoint,
    times: pd.DatetimeIndex,
    debug: DebugCollector | None = None,
) -> pd.DataFrame:
    """Evaluate both sun models at ``times`` and return per-sample deltas.

    Parameters
    ----------
    point: GeoPoint
        Observer location.
    times: pandas.DatetimeIndex
        Must be timezone-aware; pvlib would silently assume UTC otherwise.

    Returns
    -------
    pandas.DataFrame
        Columns ``elevation``, ``azimuth`` (approximate model),
        ``elevation_spa``, ``azimuth_spa`` (pvlib) and the deltas
        ``elevation_delta``/``azimuth_delta`` (approx minus SPA).
    """
    if times.tz is None:
        raise ValueError("times must be timezone-aware (tzinfo set)")

    debug = debug or NullDebugCollector()

    approx = [sun_position(point, ts.to_pydatetime()) for ts in times]
    df = pd.DataFrame(
        {
            "elevation": [p.elevation_deg for p in approx],
            "azimuth": [p.azimuth_deg for p in approx],
        },
        index=times,
    )

    pvloc = pvlib.location.Location(latitude=point.lat, longitude=point.lon, altitude=point.elevation_m or 0.0)
    spa = pvloc.get_solarposition(times)
    df["elevation_spa"] = spa["elevation"].astype(float)
    df["azimuth_spa"] = spa["azimuth"].astype(float)
    df["elevation_delta"] = df["elevation"] - df["elevation_spa"]
    df["azimuth_delta"] = _wrap_delta(df["azimuth"] - df["azimuth_spa"])

    debug.emit(
        "reference.summary",
        {
            "samples": len(df),
            "elevation_delta_max_abs": float(df["elevation_delta"].abs().max()) if not df.empty else 0.0,
            "elevation_delta_mean": float(df["elevation_delta"].mean()) if not df.empty else 0.0,
        },
        ts=times[0] if len(times) else None,
        component="reference",
    )
    return df


__all__ = ["compare_with_pvlib"]
