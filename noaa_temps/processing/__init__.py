"""Raw payload → daily temperature table."""

from noaa_temps.processing.normalize import (
    CANONICAL_COLUMNS,
    normalize,
    normalize_long,
    normalize_tabular,
    temperature_column,
)

__all__ = [
    "CANONICAL_COLUMNS",
    "normalize",
    "normalize_long",
    "normalize_tabular",
    "temperature_column",
]
