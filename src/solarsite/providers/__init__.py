"""External elevation and irradiance provider interfaces and implementations."""

from .base import ElevationProvider, IrradianceProvider
from .elevation import GoogleElevationProvider, OpenMeteoElevationProvider
from .pvgis import PVGISIrradianceProvider, parse_pvcalc

__all__ = [
    "ElevationProvider",
    "IrradianceProvider",
    "OpenMeteoElevationProvider",
    "GoogleElevationProvider",
    "PVGISIrradianceProvider",
    "parse_pvcalc",
]
