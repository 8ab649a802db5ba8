"""Approximate sun position model.

A closed-form declination/hour-angle model: cheap enough to evaluate a few
hundred times per location analysis and fully deterministic for a given
timestamp. Accuracy is a few degrees (no equation of time, no refraction);
see :mod:`solarsite.solar.reference` for a comparison against pvlib's SPA.
"""
from __future__ import annotations

import datetime as dt
import math

from solarsite.core.models import GeoPoint, SunPosition
from solarsite.core.numeric import clamp

# Used when the sun never crosses the horizon on a date (polar day/night).
_POLAR_SUNRISE_HOUR = 6.0
_POLAR_SUNSET_HOUR = 18.0
_EPS = 1e-12


def _as_utc(when: dt.datetime) -> dt.datetime:
    if when.tzinfo is None:
        raise ValueError("when must be timezone-aware (tzinfo set)")
    return when.astimezone(dt.timezone.utc)


def solar_declination(day_of_year: int) -> float:
    """Solar declination in degrees for a 1-based day of year."""
    return -23.45 * math.cos(math.radians(360.0 / 365.0 * (day_of_year + 10)))


def hour_angle(when_utc: dt.datetime, lon: float) -> float:
    """Hour angle in degrees, wrapped into (-180, 180]; positive after solar noon."""
    utc_hours = when_utc.hour + when_utc.minute / 60.0 + when_utc.second / 3600.0
    local_solar_time = utc_hours + lon / 15.0
    angle = (local_solar_time - 12.0) * 15.0
    angle = (angle + 180.0) % 360.0 - 180.0
    if angle == -180.0:
        angle = 180.0
    return angle


def sunrise_sunset(lat: float, lon: float, date: dt.date, declination_deg: float) -> tuple[dt.datetime, dt.datetime]:
    """Sunrise/sunset (UTC) for ``date``; 06:00-18:00 UTC when the sun never rises or sets."""
    midnight = dt.datetime(date.year, date.month, date.day, tzinfo=dt.timezone.utc)
    lat_rad = math.radians(clamp(lat, -90.0, 90.0))
    cos_h = -math.tan(lat_rad) * math.tan(math.radians(declination_deg))
    if cos_h < -1.0 or cos_h > 1.0:
        return (
            midnight + dt.timedelta(hours=_POLAR_SUNRISE_HOUR),
            midnight + dt.timedelta(hours=_POLAR_SUNSET_HOUR),
        )
    h_hours = math.degrees(math.acos(cos_h)) / 15.0
    sunrise_hour = 12.0 - h_hours - lon / 15.0
    sunset_hour = 12.0 + h_hours - lon / 15.0
    return midnight + dt.timedelta(hours=sunrise_hour), midnight + dt.timedelta(hours=sunset_hour)


def sun_position(point: GeoPoint, when: dt.datetime) -> SunPosition:
    """Compute solar azimuth/elevation and sunrise/sunset for a location.

    Parameters
    ----------
    point: GeoPoint
        Observer location; only latitude/longitude are used.
    when: datetime.datetime
        Must be timezone-aware. Converted to UTC before any calculation so the
        result does not depend on the caller's local timezone.

    Returns
    -------
    SunPosition
        Azimuth in [0, 360) clockwise from north, elevation in [-90, 90].
    """
    when_utc = _as_utc(when)
    lat = clamp(point.lat, -90.0, 90.0)
    lat_rad = math.radians(lat)

    day_of_year = when_utc.timetuple().tm_yday
    declination = solar_declination(day_of_year)
    dec_rad = math.radians(declination)

    ha = hour_angle(when_utc, point.lon)
    ha_rad = math.radians(ha)

    sin_elev = math.sin(lat_rad) * math.sin(dec_rad) + math.cos(lat_rad) * math.cos(dec_rad) * math.cos(ha_rad)
    elev_rad = math.asin(clamp(sin_elev, -1.0, 1.0))
    elevation = math.degrees(elev_rad)

    denom = math.cos(lat_rad) * math.cos(elev_rad)
    if abs(denom) < _EPS:
        # Pole or sun at zenith: azimuth is undefined, pick the equator-facing bearing.
        azimuth = 180.0 if lat >= 0 else 0.0
    else:
        cos_az = (math.sin(dec_rad) - math.sin(lat_rad) * sin_elev) / denom
        azimuth = math.degrees(math.acos(clamp(cos_az, -1.0, 1.0)))
        if ha > 0:
            azimuth = 360.0 - azimuth
    azimuth %= 360.0

    sunrise, sunset = sunrise_sunset(lat, point.lon, when_utc.date(), declination)
    return SunPosition(
        azimuth_deg=azimuth,
        elevation_deg=clamp(elevation, -90.0, 90.0),
        sunrise=sunrise,
        sunset=sunset,
    )


def average_sun_hours(point: GeoPoint, year: int = 2024) -> float:
    """Mean day length (hours) over the 15th of each month."""
    total = 0.0
    for month in range(1, 13):
        noon = dt.datetime(year, month, 15, 12, tzinfo=dt.timezone.utc)
        pos = sun_position(point, noon)
        total += (pos.sunset - pos.sunrise).total_seconds() / 3600.0
    return total / 12.0


__all__ = ["sun_position", "solar_declination", "hour_angle", "sunrise_sunset", "average_sun_hours"]
