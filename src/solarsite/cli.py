"""Command line entrypoint for solarsite.

Commands:

* ``solar``: solar feasibility (irradiance, terrain shadow, ROI, score) for one point.
* ``score``: aggregate four criteria sub-scores into an infrastructure recommendation.
* ``analyze``: run both analyses for every location in a config file.
* ``compare``: rank 2-10 scored locations from a config file.
* ``validate-sun``: audit the approximate sun model against pvlib's SPA.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from solarsite.cli_utils import frame_to_records, write_json
from solarsite.core.config import ConfigError, SiteRequest, load_sites
from solarsite.core.debug import DebugCollector, NullDebugCollector, build_debug_collector
from solarsite.core.models import CriteriaScores, GeoPoint, LocationInput, ValidationError
from solarsite.engine.analyze import SolarAnalysis, analyze_location, analyze_solar
from solarsite.providers.elevation import GoogleElevationProvider, OpenMeteoElevationProvider
from solarsite.providers.pvgis import PVGISIrradianceProvider
from solarsite.scoring.comparison import compare_locations, comparison_table
from solarsite.scoring.criteria import calculate_overall_score, determine_infrastructure_type, generate_recommendation, summarize_insights
from solarsite.solar.reference import compare_with_pvlib

__version__ = "0.1.0"

app = typer.Typer(add_completion=False, help="Location suitability and solar feasibility CLI")


def default_elevation_provider(debug) -> OpenMeteoElevationProvider:
    """Factory separated for easy monkeypatching in tests."""

    return OpenMeteoElevationProvider(debug=debug)


def default_irradiance_provider(debug) -> PVGISIrradianceProvider:
    """Factory separated for easy monkeypatching in tests."""

    return PVGISIrradianceProvider(debug=debug)


def _exit_with_error(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(code=1)


def _open_debug(path: Optional[Path]) -> DebugCollector:
    return build_debug_collector(path) if path else NullDebugCollector()


def _close_debug(collector: DebugCollector) -> None:
    close = getattr(collector, "close", None)
    if close is not None:
        close()


def _providers(offline: bool, google_api_key: Optional[str], debug: DebugCollector):
    if offline:
        return None, None
    if google_api_key:
        elevation = GoogleElevationProvider(api_key=google_api_key, debug=debug)
    else:
        elevation = default_elevation_provider(debug=debug)
    return elevation, default_irradiance_provider(debug=debug)


def _solar_summary(analysis: SolarAnalysis) -> pd.DataFrame:
    roi = analysis.roi.roi_analysis
    return pd.DataFrame(
        [
            {
                "annual_kwh_m2": round(analysis.irradiance.annual_radiation_kwh_m2, 1),
                "source": analysis.irradiance.source,
                "shadow_factor": round(analysis.shadow.shadow_factor, 3),
                "production_kwh": round(analysis.roi.panel_config.annual_production_kwh, 1),
                "payback_years": round(roi.payback_period_years, 2),
                "roi_25y_pct": round(roi.roi_25_years_percent, 1),
                "solar_score": analysis.solar_score,
            }
        ]
    )


@app.command()
def solar(
    lat: float = typer.Option(..., help="Latitude in degrees (-90..90)"),
    lon: float = typer.Option(..., help="Longitude in degrees (-180..180)"),
    elevation: Optional[float] = typer.Option(None, help="Site elevation in meters; looked up when omitted"),
    area: Optional[float] = typer.Option(None, help="Panel area in m2 (default 50)"),
    offline: bool = typer.Option(False, "--offline", help="Skip network providers and use fallbacks"),
    google_api_key: Optional[str] = typer.Option(
        None, envvar="GOOGLE_ELEVATION_API_KEY", help="Use Google Elevation instead of Open-Meteo"
    ),
    workers: int = typer.Option(8, help="Concurrent terrain direction lookups"),
    output: Optional[Path] = typer.Option(None, help="Write the full analysis as JSON"),
    debug: Optional[Path] = typer.Option(None, help="Write debug events (.jsonl, or .json array)"),
):
    """Solar feasibility for a single coordinate."""

    try:
        point = GeoPoint(lat=lat, lon=lon, elevation_m=elevation)
    except ValidationError as exc:
        _exit_with_error(str(exc))

    debug_collector = _open_debug(debug)
    try:
        elevation_provider, irradiance_provider = _providers(offline, google_api_key, debug_collector)
        analysis = analyze_solar(
            point,
            elevation_provider=elevation_provider,
            irradiance_provider=irradiance_provider,
            area_m2=area,
            max_workers=workers,
            debug=debug_collector,
        )
    except ValueError as exc:
        _exit_with_error(str(exc))
    finally:
        _close_debug(debug_collector)

    typer.echo(_solar_summary(analysis).to_string(index=False))
    typer.echo(analysis.roi.recommendation)
    typer.echo(f"Terrain: {', '.join(analysis.shadow.terrain_obstacles)}")
    if analysis.irradiance_fallback_reason:
        typer.echo(f"Irradiance fallback: {analysis.irradiance_fallback_reason}", err=True)
    if analysis.shadow.horizon.fallback_directions:
        typer.echo(f"Horizon fallback: {', '.join(analysis.shadow.horizon.fallback_directions)}", err=True)
    if output:
        write_json(output, analysis)
        typer.echo(f"Wrote results to {output}")
    if debug:
        typer.echo(f"Debug events -> {debug}")


@app.command()
def score(
    demand: float = typer.Option(..., help="Demand sub-score (0-100)"),
    grid: float = typer.Option(..., help="Grid readiness sub-score (0-100)"),
    accessibility: float = typer.Option(..., help="Accessibility sub-score (0-100)"),
    competition: float = typer.Option(..., help="Competition sub-score (0-100, higher = less competition)"),
    output: Optional[Path] = typer.Option(None, help="Write the recommendation as JSON"),
):
    """Overall suitability score and EV infrastructure recommendation."""

    try:
        scores = CriteriaScores(demand=demand, grid=grid, accessibility=accessibility, competition=competition)
    except ValidationError as exc:
        _exit_with_error(str(exc))

    overall = calculate_overall_score(scores)
    recommendation = generate_recommendation(scores)
    specs = recommendation.technical_specs
    money = recommendation.financial_estimates

    typer.echo(f"Overall score: {overall}/100")
    typer.echo(f"Infrastructure: {recommendation.type.value}")
    typer.echo(recommendation.rationale)
    if specs.chargers is not None:
        typer.echo(f"Chargers: {specs.chargers} x {specs.power_requirement}")
    if specs.swap_stations is not None:
        typer.echo(f"Swap stations: {specs.swap_stations} ({specs.battery_inventory} batteries)")
    payback = f"{money.payback_period_months} months" if money.payback_period_months is not None else "n/a"
    typer.echo(f"Capex: {money.capital_investment_idr:,} IDR, payback: {payback}")
    typer.echo(summarize_insights(scores, recommendation.type))

    if output:
        write_json(output, {"scores": scores, "overall": overall, "recommendation": recommendation})
        typer.echo(f"Wrote results to {output}")


def _load_sites(config: Path):
    try:
        return load_sites(config)
    except (ConfigError, ValidationError) as exc:
        _exit_with_error(str(exc))


@app.command()
def analyze(
    config: Path = typer.Argument(..., exists=True, readable=True, help="Locations YAML/JSON file"),
    offline: bool = typer.Option(False, "--offline", help="Skip network providers and use fallbacks"),
    no_solar: bool = typer.Option(False, "--no-solar", help="Only run criteria scoring"),
    google_api_key: Optional[str] = typer.Option(
        None, envvar="GOOGLE_ELEVATION_API_KEY", help="Use Google Elevation instead of Open-Meteo"
    ),
    workers: int = typer.Option(8, help="Concurrent terrain direction lookups"),
    output: Path = typer.Option(Path("analysis.json"), help="Output JSON path"),
    debug: Optional[Path] = typer.Option(None, help="Write debug events (.jsonl, or .json array)"),
):
    """Analyze every location listed in CONFIG."""

    sites, assumptions = _load_sites(config)
    debug_collector = _open_debug(debug)
    try:
        elevation_provider, irradiance_provider = (None, None)
        if not no_solar:
            elevation_provider, irradiance_provider = _providers(offline, google_api_key, debug_collector)
        reports = [
            analyze_location(
                site,
                elevation_provider=elevation_provider,
                irradiance_provider=irradiance_provider,
                assumptions=assumptions,
                include_solar=not no_solar,
                max_workers=workers,
                debug=debug_collector,
            )
            for site in sites
        ]
    except ValueError as exc:
        _exit_with_error(str(exc))
    finally:
        _close_debug(debug_collector)

    rows = []
    for report in reports:
        rows.append(
            {
                "address": report.address,
                "overall": report.overall_score,
                "infrastructure": report.recommendation.type.value if report.recommendation else None,
                "solar_score": report.solar.solar_score if report.solar else None,
                "payback_years": round(report.solar.roi.roi_analysis.payback_period_years, 2) if report.solar else None,
            }
        )
    typer.echo(pd.DataFrame(rows).to_string(index=False))
    write_json(output, {"generated_at": dt.datetime.now(dt.timezone.utc), "locations": reports})
    typer.echo(f"Wrote results to {output}")


def _comparison_inputs(sites: List[SiteRequest]) -> List[LocationInput]:
    inputs = []
    for site in sites:
        if site.scores is None:
            _exit_with_error(f"Location {site.address!r} has no scores to compare")
        inputs.append(
            LocationInput(
                address=site.address,
                scores=site.scores,
                location_id=site.location_id,
                recommendation=determine_infrastructure_type(site.scores).value,
            )
        )
    return inputs


@app.command()
def compare(
    config: Path = typer.Argument(..., exists=True, readable=True, help="Locations YAML/JSON file with scores"),
    output: Optional[Path] = typer.Option(None, help="Write the comparison as JSON"),
):
    """Rank the scored locations in CONFIG against each other."""

    sites, _ = _load_sites(config)
    try:
        result = compare_locations(_comparison_inputs(sites))
    except ValidationError as exc:
        _exit_with_error(str(exc))

    typer.echo(comparison_table(result).to_string(index=False))
    typer.echo(f"Best overall: {result.best_overall}")
    for criterion, address in result.best_in_categories.items():
        typer.echo(f"Best {criterion}: {address}")
    typer.echo(result.recommendations)
    if output:
        write_json(output, result)
        typer.echo(f"Wrote results to {output}")


@app.command("validate-sun")
def validate_sun(
    lat: float = typer.Option(..., help="Latitude in degrees"),
    lon: float = typer.Option(..., help="Longitude in degrees"),
    date: str = typer.Option(..., help="UTC date to sample (YYYY-MM-DD)"),
    freq: str = typer.Option("1h", help="Sampling frequency (pandas offset alias)"),
    output: Optional[Path] = typer.Option(None, help="Write per-sample deltas as JSON"),
):
    """Compare the fast sun model with pvlib's SPA over one UTC day."""

    try:
        point = GeoPoint(lat=lat, lon=lon)
    except ValidationError as exc:
        _exit_with_error(str(exc))
    try:
        date_obj = dt.date.fromisoformat(date)
    except ValueError:
        _exit_with_error("date must be YYYY-MM-DD")

    start = pd.Timestamp(date_obj, tz="UTC")
    times = pd.date_range(start, start + pd.Timedelta(days=1), freq=freq, inclusive="left")
    df = compare_with_pvlib(point, times)

    daytime = df[df["elevation_spa"] > 0]
    typer.echo(df.round(2).to_string())
    if daytime.empty:
        typer.echo("Sun stays below the horizon; no daytime samples")
    else:
        typer.echo(f"Max |elevation delta| (daytime): {daytime['elevation_delta'].abs().max():.2f} deg")
        typer.echo(f"Max |azimuth delta| (daytime): {daytime['azimuth_delta'].abs().max():.2f} deg")
    if output:
        records = frame_to_records(df.reset_index(names="timestamp"))
        write_json(output, {"lat": lat, "lon": lon, "date": date, "samples": records})
        typer.echo(f"Wrote results to {output}")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def version_callback(
    version: bool = typer.Option(False, "--version", callback=_print_version, is_eager=True, help="Show version and exit"),
):
    """Location suitability and solar feasibility CLI."""


def main() -> None:  # pragma: no cover - thin wrapper for console_script
    app()


__all__ = ["app", "main", "default_elevation_provider", "default_irradiance_provider"]


if __name__ == "__main__":  # pragma: no cover
    main()
