import datetime as dt

import pytest

from solarsite.core.models import (
    COMPASS_DIRECTIONS,
    CRITERIA_WEIGHTS,
    CriteriaScores,
    GeoPoint,
    HorizonProfile,
    IrradianceProfile,
    LocationInput,
    ProviderResult,
    ShadowAnalysis,
    SunPosition,
    ValidationError,
)


def test_geopoint_bounds():
    GeoPoint(lat=90, lon=-180)
    with pytest.raises(ValidationError):
        GeoPoint(lat=91, lon=0)
    with pytest.raises(ValidationError):
        GeoPoint(lat=0, lon=180.5)
    with pytest.raises(ValidationError):
        GeoPoint(lat=0, lon=0, elevation_m=-1000)


def test_sun_position_rejects_azimuth_360():
    now = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)
    with pytest.raises(ValidationError):
        SunPosition(azimuth_deg=360.0, elevation_deg=0.0, sunrise=now, sunset=now)


def test_horizon_profile_clamps_negative_and_requires_all_directions():
    angles = {d: -3.0 for d in COMPASS_DIRECTIONS}
    angles["E"] = 7.5
    profile = HorizonProfile(angles=angles)
    assert profile.angles["N"] == 0.0
    assert profile.angles["E"] == 7.5
    assert profile.mean_angle == pytest.approx(7.5 / 8)

    partial = {d: 0.0 for d in COMPASS_DIRECTIONS if d != "SW"}
    with pytest.raises(ValidationError):
        HorizonProfile(angles=partial)


def test_horizon_profile_flat_fallback_lists_every_direction():
    flat = HorizonProfile.flat(fallback=True)
    assert flat.fallback_directions == COMPASS_DIRECTIONS
    assert all(v == 0.0 for v in flat.angles.values())
    assert HorizonProfile.flat().fallback_directions == ()


def test_shadow_analysis_bounds():
    flat = HorizonProfile.flat()
    with pytest.raises(ValidationError):
        ShadowAnalysis(shadow_factor=1.2, blocked_hours_per_day=0, terrain_obstacles=("x",), horizon=flat)
    with pytest.raises(ValidationError):
        ShadowAnalysis(shadow_factor=0.5, blocked_hours_per_day=5, terrain_obstacles=("x",), horizon=flat)
    with pytest.raises(ValidationError):
        ShadowAnalysis(shadow_factor=0.5, blocked_hours_per_day=1, terrain_obstacles=(), horizon=flat)


def test_irradiance_profile_requires_twelve_months():
    with pytest.raises(ValidationError):
        IrradianceProfile(
            annual_radiation_kwh_m2=1500,
            monthly_radiation_kwh_m2=(100.0,) * 11,
            optimal_tilt_deg=10,
            average_sun_hours=4,
        )
    with pytest.raises(ValidationError):
        IrradianceProfile(
            annual_radiation_kwh_m2=0,
            monthly_radiation_kwh_m2=(0.0,) * 12,
            optimal_tilt_deg=10,
            average_sun_hours=4,
        )


@pytest.mark.parametrize("bad", [-1, 100.5, True, "80"])
def test_criteria_scores_reject_out_of_range_and_non_numeric(bad):
    with pytest.raises(ValidationError):
        CriteriaScores(demand=bad, grid=50, accessibility=50, competition=50)


def test_criteria_scores_as_dict_includes_overall():
    scores = CriteriaScores(demand=85, grid=40, accessibility=75, competition=55)
    data = scores.as_dict()
    assert data["overall"] == 65
    assert list(data) == ["demand", "grid", "accessibility", "competition", "overall"]


def test_overall_weights_sum_to_one_and_round_half_up():
    assert sum(CRITERIA_WEIGHTS.values()) == pytest.approx(1.0)
    # 0.3*55 + 0.25*50 + 0.25*50 + 0.2*50 = 51.5
    assert CriteriaScores(demand=55, grid=50, accessibility=50, competition=50).overall == 52


def test_location_input_requires_address():
    scores = CriteriaScores(demand=50, grid=50, accessibility=50, competition=50)
    with pytest.raises(ValidationError):
        LocationInput(address="", scores=scores)


def test_provider_result_fallback_flag():
    assert not ProviderResult(value=1).is_fallback
    assert ProviderResult(value=1, fallback_reason="timeout").is_fallback
