"""End-to-end location analysis: solar feasibility plus criteria scoring."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from solarsite.core.config import DEFAULT_ASSUMPTIONS, SiteRequest, SolarAssumptions
from solarsite.core.debug import DebugCollector, ListDebugCollector, NullDebugCollector, ScopedDebugCollector
from solarsite.core.models import (
    CriteriaScores,
    GeoPoint,
    HorizonProfile,
    InfrastructureRecommendation,
    IrradianceProfile,
    ProviderResult,
    ShadowAnalysis,
    SolarROIResult,
)
from solarsite.finance.roi import calculate_roi_for_profile
from solarsite.providers.base import ElevationProvider, IrradianceProvider
from solarsite.scoring.criteria import calculate_overall_score, generate_recommendation, summarize_insights
from solarsite.scoring.solar import calculate_solar_score
from solarsite.solar.horizon import sample_horizon
from solarsite.solar.irradiance import resolve_irradiance
from solarsite.solar.shadow import analyze_shadow


@dataclass(frozen=True)
class SolarAnalysis:
    point: GeoPoint
    irradiance: IrradianceProfile
    shadow: ShadowAnalysis
    roi: SolarROIResult
    solar_score: int
    irradiance_fallback_reason: Optional[str] = None
    origin_elevation_m: Optional[float] = None

    @property
    def degraded(self) -> bool:
        """True when any provider lookup fell back to a default."""
        return self.irradiance_fallback_reason is not None or bool(self.shadow.horizon.fallback_directions)


@dataclass(frozen=True)
class LocationReport:
    address: str
    point: GeoPoint
    location_id: Optional[str] = None
    scores: Optional[CriteriaScores] = None
    overall_score: Optional[int] = None
    recommendation: Optional[InfrastructureRecommendation] = None
    insights: Optional[str] = None
    solar: Optional[SolarAnalysis] = None


def resolve_origin_elevation(
    point: GeoPoint,
    provider: Optional[ElevationProvider],
) -> ProviderResult[Optional[float]]:
    """Origin elevation from the point itself, else one provider lookup."""
    if point.elevation_m is not None:
        return ProviderResult(value=float(point.elevation_m))
    if provider is None:
        return ProviderResult(value=None, fallback_reason="no elevation provider configured")
    try:
        samples = provider.get_elevations([point])
        if not samples:
            raise ValueError("provider returned no elevation for origin")
        return ProviderResult(value=float(samples[0].elevation_m))
    except Exception as exc:
        return ProviderResult(value=None, fallback_reason=f"{type(exc).__name__}: {exc}")


def _horizon_for(
    point: GeoPoint,
    provider: Optional[ElevationProvider],
    assumptions: SolarAssumptions,
    max_workers: int,
    debug: DebugCollector,
) -> tuple[HorizonProfile, Optional[float]]:
    origin = resolve_origin_elevation(point, provider)
    if origin.is_fallback:
        # Without an origin height every sample angle is meaningless; assume flat.
        debug.emit("horizon.fallback", {"direction": "*", "reason": origin.fallback_reason}, component="horizon")
        return HorizonProfile.flat(fallback=True), None
    profile = sample_horizon(
        point,
        origin.value,
        provider,
        samples_per_direction=assumptions.terrain_samples_per_direction,
        radius_km=assumptions.terrain_sample_radius_km,
        max_workers=max_workers,
        debug=debug,
    )
    return profile, origin.value


def analyze_solar(
    point: GeoPoint,
    elevation_provider: Optional[ElevationProvider] = None,
    irradiance_provider: Optional[IrradianceProvider] = None,
    area_m2: Optional[float] = None,
    assumptions: SolarAssumptions | None = None,
    max_workers: int = 8,
    debug: DebugCollector | None = None,
) -> SolarAnalysis:
    """Irradiance -> horizon/shadow -> ROI -> solar score for one point.

    The irradiance lookup and the terrain sampling are independent and run
    concurrently. Provider failures degrade precision (fallback irradiance,
    flat horizon sectors) but never raise.
    """
    assumptions = assumptions or DEFAULT_ASSUMPTIONS
    debug = debug or NullDebugCollector()

    if max_workers > 1:
        irradiance_events = ListDebugCollector()
        horizon_events = ListDebugCollector()
        with ThreadPoolExecutor(max_workers=2) as pool:
            irradiance_future = pool.submit(resolve_irradiance, point, irradiance_provider, irradiance_events)
            horizon_future = pool.submit(_horizon_for, point, elevation_provider, assumptions, max_workers, horizon_events)
            irradiance = irradiance_future.result()
            horizon, origin_elevation = horizon_future.result()
        # same event order as the sequential path
        irradiance_events.replay(debug)
        horizon_events.replay(debug)
    else:
        irradiance = resolve_irradiance(point, irradiance_provider, debug)
        horizon, origin_elevation = _horizon_for(point, elevation_provider, assumptions, 1, debug)

    shadow = analyze_shadow(
        point,
        horizon,
        min_elevation_deg=assumptions.min_sun_elevation_deg,
        obstacle_threshold_deg=assumptions.obstacle_threshold_deg,
        debug=debug,
    )
    roi = calculate_roi_for_profile(irradiance.value, shadow.shadow_factor, area_m2=area_m2, assumptions=assumptions, debug=debug)
    score = calculate_solar_score(
        irradiance.value.annual_radiation_kwh_m2,
        shadow.shadow_factor,
        roi.roi_analysis.payback_period_years,
    )

    analysis = SolarAnalysis(
        point=point,
        irradiance=irradiance.value,
        shadow=shadow,
        roi=roi,
        solar_score=score,
        irradiance_fallback_reason=irradiance.fallback_reason,
        origin_elevation_m=origin_elevation,
    )
    debug.emit(
        "analysis.summary",
        {
            "lat": point.lat,
            "lon": point.lon,
            "solar_score": score,
            "irradiance_source": irradiance.value.source,
            "shadow_factor": shadow.shadow_factor,
            "degraded": analysis.degraded,
        },
        component="engine",
    )
    return analysis


def analyze_location(
    site: SiteRequest,
    elevation_provider: Optional[ElevationProvider] = None,
    irradiance_provider: Optional[IrradianceProvider] = None,
    assumptions: SolarAssumptions | None = None,
    include_solar: bool = True,
    max_workers: int = 8,
    debug: DebugCollector | None = None,
) -> LocationReport:
    """Bundle criteria scoring (when scores are present) with the solar analysis."""
    scoped = ScopedDebugCollector(debug or NullDebugCollector(), site=site.location_id or site.address)

    solar = None
    if include_solar:
        solar = analyze_solar(
            site.point,
            elevation_provider=elevation_provider,
            irradiance_provider=irradiance_provider,
            area_m2=site.panel_area_m2,
            assumptions=assumptions,
            max_workers=max_workers,
            debug=scoped,
        )

    overall = recommendation = insights = None
    if site.scores is not None:
        overall = calculate_overall_score(site.scores)
        recommendation = generate_recommendation(site.scores)
        insights = summarize_insights(site.scores, recommendation.type)

    return LocationReport(
        address=site.address,
        point=site.point,
        location_id=site.location_id,
        scores=site.scores,
        overall_score=overall,
        recommendation=recommendation,
        insights=insights,
        solar=solar,
    )


__all__ = ["SolarAnalysis", "LocationReport", "resolve_origin_elevation", "analyze_solar", "analyze_location"]
