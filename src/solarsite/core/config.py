"""Configuration: solar assumptions and the site list loader.

Supports YAML and JSON files with an optional ``assumptions`` mapping that
overrides :class:`SolarAssumptions` and a ``locations`` list of sites to score.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import yaml
except ModuleNotFoundError as exc:  # pragma: no cover - defensive import
    raise ImportError("PyYAML is required to load YAML configs") from exc

from .models import CRITERIA, CriteriaScores, GeoPoint, ValidationError


class ConfigError(ValueError):
    """Raised when configuration cannot be parsed into domain models."""


@dataclass(frozen=True)
class SolarAssumptions:
    """Fixed regional constants for panel, tariff and terrain sampling."""

    panel_area_m2: float = 50.0  # ~20 panels of 2.5 m2
    panel_efficiency: float = 0.20
    panel_degradation: float = 0.005  # per year
    electricity_rate_idr_kwh: float = 1500.0
    installation_cost_per_m2_idr: float = 1_500_000.0
    lifetime_years: int = 25

    terrain_sample_radius_km: float = 1.0
    terrain_samples_per_direction: int = 10
    min_sun_elevation_deg: float = 10.0
    obstacle_threshold_deg: float = 5.0

    roi_excellent_years: float = 7.0
    roi_good_years: float = 10.0
    roi_fair_years: float = 15.0

    def __post_init__(self):
        if self.panel_area_m2 <= 0:
            raise ValidationError("panel_area_m2 must be positive")
        if not (0 < self.panel_efficiency <= 1):
            raise ValidationError("panel_efficiency must be in (0, 1]")
        if not (0 <= self.panel_degradation < 1):
            raise ValidationError("panel_degradation must be in [0, 1)")
        if self.electricity_rate_idr_kwh < 0:
            raise ValidationError("electricity_rate_idr_kwh must be non-negative")
        if self.installation_cost_per_m2_idr <= 0:
            raise ValidationError("installation_cost_per_m2_idr must be positive")
        if self.lifetime_years < 1:
            raise ValidationError("lifetime_years must be at least 1")
        if self.terrain_sample_radius_km <= 0:
            raise ValidationError("terrain_sample_radius_km must be positive")
        if self.terrain_samples_per_direction < 1:
            raise ValidationError("terrain_samples_per_direction must be at least 1")


DEFAULT_ASSUMPTIONS = SolarAssumptions()


@dataclass(frozen=True)
class SiteRequest:
    """One location entry from a config file."""

    address: str
    point: GeoPoint
    location_id: Optional[str] = None
    scores: Optional[CriteriaScores] = None
    panel_area_m2: Optional[float] = None


_DEF_REQUIRED_SITE_KEYS = {"address", "lat", "lon"}


def _load_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text()
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text) or {}
        if path.suffix.lower() == ".json":
            return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not parse {path.name}: {exc}") from exc
    raise ConfigError(f"Unsupported config extension: {path.suffix}")


def parse_assumptions(raw: Optional[Dict[str, Any]]) -> SolarAssumptions:
    if not raw:
        return DEFAULT_ASSUMPTIONS
    if not isinstance(raw, dict):
        raise ConfigError("assumptions must be a mapping")
    known = {f.name: f.type for f in fields(SolarAssumptions)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ConfigError(f"Unknown assumption keys: {unknown}")
    overrides: Dict[str, Any] = {}
    for key, value in raw.items():
        try:
            overrides[key] = int(value) if key in {"lifetime_years", "terrain_samples_per_direction"} else float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Assumption {key} must be numeric") from exc
    try:
        return replace(DEFAULT_ASSUMPTIONS, **overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid assumptions: {exc}") from exc


def _parse_scores(raw: Any) -> Optional[CriteriaScores]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigError("scores must be a mapping of demand/grid/accessibility/competition")
    missing = set(CRITERIA) - raw.keys()
    if missing:
        raise ConfigError(f"Missing score fields: {sorted(missing)}")
    try:
        return CriteriaScores(**{name: float(raw[name]) for name in CRITERIA})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid scores: {exc}") from exc


def _parse_site(raw: Dict[str, Any]) -> SiteRequest:
    if not isinstance(raw, dict):
        raise ConfigError("Each location must be a mapping")
    missing = _DEF_REQUIRED_SITE_KEYS - raw.keys()
    if missing:
        raise ConfigError(f"Missing location fields: {sorted(missing)}")
    try:
        elevation = raw.get("elevation_m")
        point = GeoPoint(
            lat=float(raw["lat"]),
            lon=float(raw["lon"]),
            elevation_m=float(elevation) if elevation is not None else None,
        )
        area = raw.get("panel_area_m2")
        return SiteRequest(
            address=str(raw["address"]),
            point=point,
            location_id=str(raw["id"]) if raw.get("id") is not None else None,
            scores=_parse_scores(raw.get("scores")),
            panel_area_m2=float(area) if area is not None else None,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid location {raw.get('address')!r}: {exc}") from exc


def load_sites(path: str | Path) -> tuple[List[SiteRequest], SolarAssumptions]:
    """Load the location list and assumption overrides from a YAML/JSON file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    raw = _load_raw(path)
    if not isinstance(raw, dict) or "locations" not in raw:
        raise ConfigError("Config must contain 'locations' list")
    if not isinstance(raw["locations"], list):
        raise ConfigError("'locations' must be a list")
    assumptions = parse_assumptions(raw.get("assumptions"))
    sites = [_parse_site(site) for site in raw["locations"]]
    return sites, assumptions


__all__ = [
    "ConfigError",
    "SolarAssumptions",
    "DEFAULT_ASSUMPTIONS",
    "SiteRequest",
    "parse_assumptions",
    "load_sites",
]
