import json

import pytest

from solarsite.core.config import DEFAULT_ASSUMPTIONS, ConfigError, SolarAssumptions, load_sites, parse_assumptions
from solarsite.core.models import ValidationError


def _write_yaml(tmp_path, text):
    path = tmp_path / "sites.yaml"
    path.write_text(text)
    return path


def test_load_sites_yaml_with_scores_and_overrides(tmp_path):
    path = _write_yaml(
        tmp_path,
        "assumptions:\n"
        "  electricity_rate_idr_kwh: 1700\n"
        "  lifetime_years: 20\n"
        "locations:\n"
        "- id: jkt-1\n"
        "  address: Jl. Sudirman, Jakarta\n"
        "  lat: -6.2\n"
        "  lon: 106.8\n"
        "  elevation_m: 8\n"
        "  panel_area_m2: 30\n"
        "  scores: {demand: 85, grid: 40, accessibility: 75, competition: 55}\n"
        "- address: Bandung\n"
        "  lat: -6.9\n"
        "  lon: 107.6\n",
    )
    sites, assumptions = load_sites(path)

    assert assumptions.electricity_rate_idr_kwh == 1700.0
    assert assumptions.lifetime_years == 20
    assert assumptions.panel_area_m2 == DEFAULT_ASSUMPTIONS.panel_area_m2

    first, second = sites
    assert first.location_id == "jkt-1"
    assert first.point.elevation_m == 8.0
    assert first.panel_area_m2 == 30.0
    assert first.scores.demand == 85
    assert second.scores is None
    assert second.point.elevation_m is None


def test_load_sites_json(tmp_path):
    path = tmp_path / "sites.json"
    path.write_text(json.dumps({"locations": [{"address": "A", "lat": 1, "lon": 2}]}))
    sites, assumptions = load_sites(path)
    assert sites[0].point.lat == 1.0
    assert assumptions is DEFAULT_ASSUMPTIONS


def test_missing_locations_key_rejected(tmp_path):
    path = _write_yaml(tmp_path, "assumptions: {}\n")
    with pytest.raises(ConfigError):
        load_sites(path)


def test_missing_site_fields_rejected(tmp_path):
    path = _write_yaml(tmp_path, "locations:\n- address: A\n  lat: 1\n")
    with pytest.raises(ConfigError, match="lon"):
        load_sites(path)


def test_invalid_coordinates_become_config_error(tmp_path):
    path = _write_yaml(tmp_path, "locations:\n- address: A\n  lat: 95\n  lon: 0\n")
    with pytest.raises(ConfigError):
        load_sites(path)


def test_partial_scores_rejected(tmp_path):
    path = _write_yaml(tmp_path, "locations:\n- address: A\n  lat: 1\n  lon: 1\n  scores: {demand: 50}\n")
    with pytest.raises(ConfigError, match="Missing score fields"):
        load_sites(path)


def test_unparseable_yaml_is_config_error(tmp_path):
    path = _write_yaml(tmp_path, "locations: [unclosed\n")
    with pytest.raises(ConfigError):
        load_sites(path)


def test_unsupported_extension(tmp_path):
    path = tmp_path / "sites.toml"
    path.write_text("x = 1")
    with pytest.raises(ConfigError):
        load_sites(path)


def test_parse_assumptions_unknown_and_invalid_values():
    with pytest.raises(ConfigError, match="Unknown"):
        parse_assumptions({"panel_colour": "blue"})
    with pytest.raises(ConfigError):
        parse_assumptions({"panel_efficiency": 1.5})
    with pytest.raises(ConfigError):
        parse_assumptions({"panel_area_m2": "big"})


def test_assumptions_validation():
    with pytest.raises(ValidationError):
        SolarAssumptions(panel_area_m2=0)
    with pytest.raises(ValidationError):
        SolarAssumptions(lifetime_years=0)
