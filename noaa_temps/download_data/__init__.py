"""NOAA daily-summary fetchers.

Two interchangeable strategies behind ``StationDataFetcher``; pick one with
``build_fetcher(config)``.
"""

from __future__ import annotations

from noaa_temps.core.config import PipelineConfig
from noaa_temps.core.errors import ConfigError
from noaa_temps.download_data.cdo_api import CDOApiFetcher
from noaa_temps.download_data.fetcher_base import (
    LONG_LAYOUT,
    TABULAR_LAYOUT,
    StationDataFetcher,
)
from noaa_temps.download_data.ncei_access import NCEIAccessFetcher


def build_fetcher(config: PipelineConfig) -> StationDataFetcher:
    """Return the fetcher strategy selected by ``config.source``."""
    if config.source == CDOApiFetcher.SOURCE_NAME:
        if not config.token:
            raise ConfigError("The cdo_api source needs a CDO API token")
        return CDOApiFetcher(config.token, timeout=config.timeout)
    if config.source == NCEIAccessFetcher.SOURCE_NAME:
        return NCEIAccessFetcher(timeout=config.timeout)
    raise ConfigError(f"Unknown source {config.source!r}")


__all__ = [
    "CDOApiFetcher",
    "LONG_LAYOUT",
    "NCEIAccessFetcher",
    "StationDataFetcher",
    "TABULAR_LAYOUT",
    "build_fetcher",
]
