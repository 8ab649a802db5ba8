import pytest

from solarsite.core.debug import ListDebugCollector
from solarsite.core.models import COMPASS_DIRECTIONS, GeoPoint, HorizonProfile
from solarsite.solar.shadow import (
    NO_OBSTACLES,
    analyze_shadow,
    azimuth_to_direction,
    estimate_blocked_hours,
    obstacle_labels,
    sun_path_samples,
)


def _horizon(**angles):
    base = {d: 0.0 for d in COMPASS_DIRECTIONS}
    base.update(angles)
    return HorizonProfile(angles=base)


@pytest.mark.parametrize(
    "azimuth,expected",
    [(0, "N"), (22.4, "N"), (22.5, "NE"), (180, "S"), (202.5, "SW"), (337.4, "NW"), (337.5, "N"), (359.9, "N"), (-45, "NW")],
)
def test_azimuth_to_direction(azimuth, expected):
    assert azimuth_to_direction(azimuth) == expected


def test_sample_grid_shape():
    df = sun_path_samples(GeoPoint(lat=-6.2, lon=106.8), HorizonProfile.flat())
    assert len(df) == 12 * 13
    assert {"month", "hour", "azimuth", "elevation", "direction", "horizon_deg", "daylight", "visible"} <= set(df.columns)
    assert not (df["visible"] & ~df["daylight"]).any()


def test_flat_horizon_is_fully_available():
    debug = ListDebugCollector()
    result = analyze_shadow(GeoPoint(lat=-6.2, lon=106.8), HorizonProfile.flat(), debug=debug)
    assert result.shadow_factor == 1.0
    assert result.blocked_hours_per_day == 0.0
    assert result.terrain_obstacles == (NO_OBSTACLES,)
    assert result.daylight_samples > 0
    assert debug.stages() == ["shadow.summary"]


def test_walls_higher_than_the_sun_block_everything():
    walls = HorizonProfile(angles={d: 80.0 for d in COMPASS_DIRECTIONS})
    result = analyze_shadow(GeoPoint(lat=45.0, lon=0.0), walls)
    assert result.shadow_factor == 0.0
    assert result.blocked_hours_per_day == 4.0
    assert len(result.terrain_obstacles) == 8
    assert result.terrain_obstacles[0] == "N (80°)"


def test_equator_facing_hill_partially_blocks():
    point = GeoPoint(lat=45.0, lon=0.0)
    low = analyze_shadow(point, _horizon(S=10.0)).shadow_factor
    high = analyze_shadow(point, _horizon(S=30.0)).shadow_factor
    assert 0.0 < high < 1.0
    assert high <= low


def test_poleward_hill_never_blocks_in_southern_hemisphere():
    result = analyze_shadow(GeoPoint(lat=-45.0, lon=0.0), _horizon(S=30.0))
    assert result.shadow_factor == 1.0


def test_longitude_does_not_shift_the_sampled_solar_day():
    horizon = _horizon(S=30.0)
    west = analyze_shadow(GeoPoint(lat=45.0, lon=-120.0), horizon)
    east = analyze_shadow(GeoPoint(lat=45.0, lon=120.0), horizon)
    assert west.shadow_factor == pytest.approx(east.shadow_factor, abs=0.05)


def test_obstacle_labels_threshold_and_rounding():
    labels = obstacle_labels(_horizon(NE=12.5, E=5.0, W=5.1), threshold_deg=5.0)
    assert labels == ("NE (13°)", "W (5°)")


def test_blocked_hours_linear_then_capped():
    assert estimate_blocked_hours(_horizon(N=16.0)) == pytest.approx(0.1)
    assert estimate_blocked_hours(HorizonProfile(angles={d: 200.0 for d in COMPASS_DIRECTIONS})) == 4.0
