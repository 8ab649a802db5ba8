"""PVGIS irradiance provider (PVcalc JSON service)."""

from __future__ import annotations

from typing import Any, Dict

import requests

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import GeoPoint, IrradianceProfile, ValidationError
from .base import IrradianceProvider
from .http import get_json

# Reference system: 1 kWp, 14% system losses, horizontal plane.
_REFERENCE_PARAMS = {
    "peakpower": "1",
    "loss": "14",
    "angle": "0",
    "aspect": "0",
    "outputformat": "json",
    "browser": "0",
}


def parse_pvcalc(payload: Dict[str, Any], lat: float) -> IrradianceProfile:
    """Validate a PVcalc response into an :class:`IrradianceProfile`.

    Uses the in-plane irradiation fields (``H(i)_m`` per month, ``H(i)_y`` per
    year, kWh/m2). With ``angle=0`` the plane is horizontal, so these are
    global horizontal values. Raises ``ValueError`` on any shape drift.
    """
    if not isinstance(payload, dict):
        raise ValueError("PVGIS response is not a JSON object")
    outputs = payload.get("outputs")
    if not isinstance(outputs, dict):
        raise ValueError("PVGIS response missing outputs block")

    monthly = (outputs.get("monthly") or {}).get("fixed")
    if not isinstance(monthly, list) or len(monthly) != 12:
        raise ValueError("PVGIS response must contain 12 monthly.fixed entries")
    try:
        rows = sorted(monthly, key=lambda row: int(row["month"]))
        monthly_values = [float(row["H(i)_m"]) for row in rows]
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"PVGIS monthly entry malformed: {exc}") from exc
    if [int(row["month"]) for row in rows] != list(range(1, 13)):
        raise ValueError("PVGIS monthly entries must cover months 1..12")

    totals = (outputs.get("totals") or {}).get("fixed")
    if not isinstance(totals, dict) or "H(i)_y" not in totals:
        raise ValueError("PVGIS response missing totals.fixed.H(i)_y")
    try:
        annual = float(totals["H(i)_y"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"PVGIS annual irradiation malformed: {exc}") from exc

    try:
        return IrradianceProfile(
            annual_radiation_kwh_m2=annual,
            monthly_radiation_kwh_m2=tuple(monthly_values),
            optimal_tilt_deg=min(15.0, abs(lat)),
            # Peak sun hours: daily kWh/m2 equals hours at 1 kW/m2.
            average_sun_hours=annual / 365.0,
            source="pvgis",
        )
    except ValidationError as exc:
        raise ValueError(f"PVGIS values out of range: {exc}") from exc


class PVGISIrradianceProvider(IrradianceProvider):
    """Fetch monthly/annual irradiation from the PVGIS PVcalc endpoint.

    Notes
    -----
    * The request models a fixed 1 kWp horizontal reference system; tilt is
      handled separately by the caller.
    * ``attempts`` defaults to 1. Retrying is left to callers that want it.
    """

    def __init__(
        self,
        base_url: str = "https://re.jrc.ec.europa.eu/api/v5_2/PVcalc",
        debug: DebugCollector | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        attempts: int = 1,
    ):
        self.base_url = base_url
        self.debug = debug or NullDebugCollector()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.attempts = attempts

    def _build_params(self, point: GeoPoint) -> Dict[str, str]:
        params = {"lat": str(point.lat), "lon": str(point.lon)}
        params.update(_REFERENCE_PARAMS)
        return params

    def get_irradiance(self, point: GeoPoint) -> IrradianceProfile:
        params = self._build_params(point)
        self.debug.emit("irradiance.request", {"url": self.base_url, "params": params}, component="pvgis")
        data = get_json(
            self.session,
            self.base_url,
            params,
            timeout=self.timeout,
            attempts=self.attempts,
            debug=self.debug,
            stage="irradiance",
        )
        profile = parse_pvcalc(data, point.lat)
        self.debug.emit(
            "irradiance.response_meta",
            {
                "annual_kwh_m2": profile.annual_radiation_kwh_m2,
                "radiation_db": ((data.get("inputs") or {}).get("meteo_data") or {}).get("radiation_db"),
            },
            component="pvgis",
        )
        return profile


__all__ = ["PVGISIrradianceProvider", "parse_pvcalc"]
