import pandas as pd
import pytest

from solarsite.core.models import GeoPoint
from solarsite.solar.reference import compare_with_pvlib


def test_elevation_tracks_spa_during_the_day():
    times = pd.date_range("2024-03-20 08:00", "2024-03-20 16:00", freq="1h", tz="UTC")
    df = compare_with_pvlib(GeoPoint(lat=0.0, lon=0.0), times)
    assert len(df) == len(times)
    assert (df["elevation_delta"].abs() < 5.0).all()


def test_azimuth_tracks_spa_away_from_noon():
    times = pd.DatetimeIndex(["2024-06-15 09:00", "2024-06-15 15:00"], tz="UTC")
    df = compare_with_pvlib(GeoPoint(lat=45.0, lon=0.0), times)
    assert (df["azimuth_delta"].abs() < 10.0).all()
    assert ((df["azimuth_delta"] >= -180.0) & (df["azimuth_delta"] < 180.0)).all()


def test_naive_times_rejected():
    times = pd.date_range("2024-03-20 08:00", periods=2, freq="1h")
    with pytest.raises(ValueError):
        compare_with_pvlib(GeoPoint(lat=0.0, lon=0.0), times)
