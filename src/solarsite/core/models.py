"""Domain models for the location suitability and solar feasibility engine.

Provides immutable records with validation for geographic points, sun
positions, horizon/shadow analyses, irradiance profiles, ROI results, criteria
scores and location comparisons.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from solarsite.core.numeric import round_half_up


class ValidationError(ValueError):
    """Raised when model inputs violate constraints."""


# Ordered compass sectors (bearing in degrees clockwise from north).
COMPASS_BEARINGS: Dict[str, float] = {
    "N": 0.0,
    "NE": 45.0,
    "E": 90.0,
    "SE": 135.0,
    "S": 180.0,
    "SW": 225.0,
    "W": 270.0,
    "NW": 315.0,
}
COMPASS_DIRECTIONS: Tuple[str, ...] = tuple(COMPASS_BEARINGS)

CRITERIA: Tuple[str, ...] = ("demand", "grid", "accessibility", "competition")
# Weights of the overall suitability score; they sum to 1.
CRITERIA_WEIGHTS: Dict[str, float] = {
    "demand": 0.30,
    "grid": 0.25,
    "accessibility": 0.25,
    "competition": 0.20,
}
METRICS: Tuple[str, ...] = CRITERIA + ("overall",)


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float
    elevation_m: Optional[float] = None

    def __post_init__(self):
        if not (-90.0 <= self.lat <= 90.0):
            raise ValidationError("Latitude must be between -90 and 90 degrees")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValidationError("Longitude must be between -180 and 180 degrees")
        if self.elevation_m is not None and self.elevation_m < -430.0:
            raise ValidationError("Elevation seems invalid (below Dead Sea floor)")


@dataclass(frozen=True)
class SunPosition:
    azimuth_deg: float
    elevation_deg: float
    sunrise: dt.datetime
    sunset: dt.datetime

    def __post_init__(self):
        if not (0.0 <= self.azimuth_deg < 360.0):
            raise ValidationError("azimuth_deg must be in [0, 360)")
        if not (-90.0 <= self.elevation_deg <= 90.0):
            raise ValidationError("elevation_deg must be in [-90, 90]")


@dataclass(frozen=True)
class ElevationSample:
    lat: float
    lon: float
    elevation_m: float


@dataclass(frozen=True)
class HorizonProfile:
    """Horizon angle (deg above horizontal) for each of the 8 compass sectors.

    ``fallback_directions`` lists sectors whose elevation lookup failed and were
    assumed flat.
    """

    angles: Mapping[str, float]
    fallback_directions: Tuple[str, ...] = ()

    def __post_init__(self):
        if set(self.angles) != set(COMPASS_DIRECTIONS):
            raise ValidationError(f"Horizon profile needs exactly the directions {list(COMPASS_DIRECTIONS)}")
        cleaned = {}
        for direction in COMPASS_DIRECTIONS:
            try:
                value = float(self.angles[direction])
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"Horizon angle for {direction} is not numeric") from exc
            if math.isnan(value):
                raise ValidationError(f"Horizon angle for {direction} is NaN")
            cleaned[direction] = max(0.0, value)
        object.__setattr__(self, "angles", cleaned)
        unknown = [d for d in self.fallback_directions if d not in COMPASS_BEARINGS]
        if unknown:
            raise ValidationError(f"Unknown fallback directions: {unknown}")
        object.__setattr__(self, "fallback_directions", tuple(self.fallback_directions))

    @classmethod
    def flat(cls, fallback: bool = False) -> "HorizonProfile":
        return cls(
            angles={d: 0.0 for d in COMPASS_DIRECTIONS},
            fallback_directions=COMPASS_DIRECTIONS if fallback else (),
        )

    @property
    def mean_angle(self) -> float:
        return sum(self.angles.values()) / len(COMPASS_DIRECTIONS)


@dataclass(frozen=True)
class ShadowAnalysis:
    shadow_factor: float
    blocked_hours_per_day: float
    terrain_obstacles: Tuple[str, ...]
    horizon: HorizonProfile
    daylight_samples: int = 0
    available_samples: int = 0

    def __post_init__(self):
        if not (0.0 <= self.shadow_factor <= 1.0):
            raise ValidationError("shadow_factor must be between 0 and 1")
        if not (0.0 <= self.blocked_hours_per_day <= 4.0):
            raise ValidationError("blocked_hours_per_day must be between 0 and 4")
        if not self.terrain_obstacles:
            raise ValidationError("terrain_obstacles must not be empty")
        object.__setattr__(self, "terrain_obstacles", tuple(self.terrain_obstacles))


@dataclass(frozen=True)
class IrradianceProfile:
    annual_radiation_kwh_m2: float
    monthly_radiation_kwh_m2: Tuple[float, ...]
    optimal_tilt_deg: float
    average_sun_hours: float
    source: str = "pvgis"

    def __post_init__(self):
        if not (self.annual_radiation_kwh_m2 > 0):
            raise ValidationError("annual_radiation_kwh_m2 must be positive")
        monthly = tuple(float(v) for v in self.monthly_radiation_kwh_m2)
        if len(monthly) != 12:
            raise ValidationError("monthly_radiation_kwh_m2 must contain 12 values (Jan..Dec)")
        if any(v < 0 or math.isnan(v) for v in monthly):
            raise ValidationError("monthly_radiation_kwh_m2 values must be non-negative")
        object.__setattr__(self, "monthly_radiation_kwh_m2", monthly)
        if self.average_sun_hours < 0:
            raise ValidationError("average_sun_hours must be non-negative")


@dataclass(frozen=True)
class PanelConfig:
    area_m2: float = 50.0
    efficiency: float = 0.20
    annual_production_kwh: float = 0.0

    def __post_init__(self):
        if not (self.area_m2 > 0):
            raise ValidationError("area_m2 must be positive")
        if not (0 < self.efficiency <= 1):
            raise ValidationError("efficiency must be in (0, 1]")
        if self.annual_production_kwh < 0:
            raise ValidationError("annual_production_kwh must be non-negative")


@dataclass(frozen=True)
class ROIAnalysis:
    installation_cost_idr: float
    annual_savings_idr: float
    payback_period_years: float
    roi_25_years_percent: float
    net_profit_25_years_idr: float


@dataclass(frozen=True)
class SolarROIResult:
    panel_config: PanelConfig
    roi_analysis: ROIAnalysis
    monthly_production_kwh: Tuple[float, ...]
    recommendation: str


@dataclass(frozen=True)
class CriteriaScores:
    demand: float
    grid: float
    accessibility: float
    competition: float

    def __post_init__(self):
        for name in CRITERIA:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{name} score must be numeric")
            if not (0 <= value <= 100):
                raise ValidationError(f"{name} score must be between 0 and 100")

    @property
    def overall(self) -> int:
        """Weighted sum of the four criteria, rounded half up."""
        return round_half_up(sum(getattr(self, name) * CRITERIA_WEIGHTS[name] for name in CRITERIA))

    def as_dict(self) -> Dict[str, float]:
        data = {name: getattr(self, name) for name in CRITERIA}
        data["overall"] = self.overall
        return data


class InfrastructureType(str, Enum):
    HYBRID = "hybrid"
    FAST_CHARGING = "fast-charging"
    BATTERY_SWAP = "battery-swap"


@dataclass(frozen=True)
class TechnicalSpecs:
    type: InfrastructureType
    space_requirement: str
    chargers: Optional[int] = None
    power_requirement: Optional[str] = None
    swap_stations: Optional[int] = None
    battery_inventory: Optional[int] = None


@dataclass(frozen=True)
class FinancialEstimates:
    capital_investment_idr: int
    monthly_operational_cost_idr: int
    monthly_revenue_projection_idr: int
    payback_period_months: Optional[int]
    currency: str = "IDR"


@dataclass(frozen=True)
class InfrastructureRecommendation:
    type: InfrastructureType
    rationale: str
    technical_specs: TechnicalSpecs
    financial_estimates: FinancialEstimates


@dataclass(frozen=True)
class LocationInput:
    address: str
    scores: CriteriaScores
    location_id: Optional[str] = None
    recommendation: Optional[str] = None

    def __post_init__(self):
        if not self.address:
            raise ValidationError("Location address is required")
        if not isinstance(self.scores, CriteriaScores):
            raise ValidationError("scores must be a CriteriaScores instance")


@dataclass(frozen=True)
class LocationComparison:
    address: str
    location_id: Optional[str]
    scores: Dict[str, float]
    rankings: Dict[str, int]
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    recommendation: str = InfrastructureType.FAST_CHARGING.value


@dataclass(frozen=True)
class ComparisonResult:
    locations: List[LocationComparison]
    best_overall: str
    best_in_categories: Dict[str, str]
    recommendations: str


T = TypeVar("T")


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Value produced by a provider lookup, or by its documented fallback.

    ``fallback_reason`` is ``None`` when the provider answered; otherwise it
    carries the reason the fallback was used.
    """

    value: T
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


__all__ = [
    "ValidationError",
    "COMPASS_BEARINGS",
    "COMPASS_DIRECTIONS",
    "CRITERIA",
    "CRITERIA_WEIGHTS",
    "METRICS",
    "GeoPoint",
    "SunPosition",
    "ElevationSample",
    "HorizonProfile",
    "ShadowAnalysis",
    "IrradianceProfile",
    "PanelConfig",
    "ROIAnalysis",
    "SolarROIResult",
    "CriteriaScores",
    "InfrastructureType",
    "TechnicalSpecs",
    "FinancialEstimates",
    "InfrastructureRecommendation",
    "LocationInput",
    "LocationComparison",
    "ComparisonResult",
    "ProviderResult",
]
