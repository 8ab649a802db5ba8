"""Terrain elevation providers (Open-Meteo and Google Elevation API)."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import requests

from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import ElevationSample, GeoPoint
from .base import ElevationProvider
from .http import get_json


class OpenMeteoElevationProvider(ElevationProvider):
    """Keyless batch elevation lookup (Copernicus DEM 90 m via Open-Meteo)."""

    _MAX_BATCH = 100

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1/elevation",
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

    def _build_params(self, points: Sequence[GeoPoint]) -> Dict[str, str]:
        return {
            "latitude": ",".join(f"{p.lat:.6f}" for p in points),
            "longitude": ",".join(f"{p.lon:.6f}" for p in points),
        }

    @staticmethod
    def _parse(payload: Any, points: Sequence[GeoPoint]) -> List[ElevationSample]:
        if not isinstance(payload, dict) or not isinstance(payload.get("elevation"), list):
            raise ValueError("Open-Meteo elevation response missing 'elevation' list")
        values = payload["elevation"]
        if len(values) != len(points):
            raise ValueError(f"Open-Meteo returned {len(values)} elevations for {len(points)} points")
        samples = []
        for point, value in zip(points, values):
            if value is None:
                raise ValueError("Open-Meteo returned null elevation")
            samples.append(ElevationSample(lat=point.lat, lon=point.lon, elevation_m=float(value)))
        return samples

    def get_elevations(self, points: Sequence[GeoPoint]) -> List[ElevationSample]:
        if len(points) > self._MAX_BATCH:
            raise ValueError(f"Open-Meteo elevation accepts at most {self._MAX_BATCH} points per call")
        if not points:
            return []
        params = self._build_params(points)
        self.debug.emit("elevation.request", {"url": self.base_url, "points": len(points)}, component="open-meteo")
        data = get_json(
            self.session,
            self.base_url,
            params,
            timeout=self.timeout,
            attempts=self.attempts,
            debug=self.debug,
            stage="elevation",
        )
        return self._parse(data, points)


class GoogleElevationProvider(ElevationProvider):
    """Google Maps Elevation API; the API key is injected by the caller."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api/elevation/json",
        debug: DebugCollector | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        attempts: int = 1,
    ):
        if not api_key:
            raise ValueError("Google Elevation API key is required")
        self.api_key = api_key
        self.base_url = base_url
        self.debug = debug or NullDebugCollector()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.attempts = attempts

    def _build_params(self, points: Sequence[GeoPoint]) -> Dict[str, str]:
        return {
            "locations": "|".join(f"{p.lat:.6f},{p.lon:.6f}" for p in points),
            "key": self.api_key,
        }

    @staticmethod
    def _parse(payload: Any, points: Sequence[GeoPoint]) -> List[ElevationSample]:
        if not isinstance(payload, dict):
            raise ValueError("Google elevation response is not a JSON object")
        status = payload.get("status")
        if status != "OK":
            raise ValueError(f"Elevation API status: {status}")
        results = payload.get("results")
        if not isinstance(results, list) or len(results) != len(points):
            count = len(results) if isinstance(results, list) else 0
            raise ValueError(f"Google returned {count} elevations for {len(points)} points")
        try:
            return [
                ElevationSample(
                    lat=float(row["location"]["lat"]),
                    lon=float(row["location"]["lng"]),
                    elevation_m=float(row["elevation"]),
                )
                for row in results
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Google elevation result malformed: {exc}") from exc

    def get_elevations(self, points: Sequence[GeoPoint]) -> List[ElevationSample]:
        if not points:
            return []
        params = self._build_params(points)
        # never log the key
        self.debug.emit("elevation.request", {"url": self.base_url, "points": len(points)}, component="google")
        data = get_json(
            self.session,
            self.base_url,
            params,
            timeout=self.timeout,
            attempts=self.attempts,
            debug=self.debug,
            stage="elevation",
        )
        return self._parse(data, points)


__all__ = ["OpenMeteoElevationProvider", "GoogleElevationProvider"]
