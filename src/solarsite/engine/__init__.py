"""Engine package orchestrating end-to-end location analyses."""

from .analyze import LocationReport, SolarAnalysis, analyze_location, analyze_solar

__all__ = ["analyze_solar", "analyze_location", "SolarAnalysis", "LocationReport"]
