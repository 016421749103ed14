"""Station metadata.

Re-exports StationInfo and the registry lookup for convenience.
"""

from noaa_temps.weather.stations import STATION_REGISTRY, StationInfo, station_for_id

__all__ = ["STATION_REGISTRY", "StationInfo", "station_for_id"]
