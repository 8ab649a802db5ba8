"""External data provider protocols."""

from __future__ import annotations

from typing import List, Protocol, Sequence

from solarsite.core.models import ElevationSample, GeoPoint, IrradianceProfile


class ElevationProvider(Protocol):
    """Batch terrain elevation lookup."""

    def get_elevations(self, points: Sequence[GeoPoint]) -> List[ElevationSample]:
        """Return one sample per requested point (meters above sea level).

        Implementations raise on any failure; a batch either succeeds or fails
        as a unit.
        """
        ...


class IrradianceProvider(Protocol):
    """Annual/monthly solar radiation lookup."""

    def get_irradiance(self, point: GeoPoint) -> IrradianceProfile:
        """Return a validated irradiance profile for ``point`` or raise."""
        ...


__all__ = ["ElevationProvider", "IrradianceProvider"]
