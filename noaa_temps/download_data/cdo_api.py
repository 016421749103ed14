"""Download GHCN-Daily temperatures from the NOAA Climate Data Online (CDO) API.

Data source: https://www.ncdc.noaa.gov/cdo-web/api/v2/data

Token-authenticated JSON endpoint (request a token at
https://www.ncdc.noaa.gov/cdo-web/token). Returns one record per
(date, datatype) pair inside a ``{"metadata": ..., "results": [...]}``
envelope. Values are integers in tenths of a degree. A single request is
capped at 1000 records; longer ranges come back truncated.
"""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd

from noaa_temps.core.errors import MalformedEnvelopeError
from noaa_temps.download_data.fetcher_base import LONG_LAYOUT, StationDataFetcher
from noaa_temps.weather.stations import StationInfo

logger = logging.getLogger(__name__)

CDO_DATA_URL = "https://www.ncdc.noaa.gov/cdo-web/api/v2/data"
DATASET_ID = "GHCND"
MAX_RESULTS = 1000

RAW_COLUMNS = ["date", "datatype", "value"]


class CDOApiFetcher(StationDataFetcher):
    """Fetch long-form daily summaries from the token-based CDO API."""

    SOURCE_NAME = "cdo_api"
    LAYOUT = LONG_LAYOUT

    UNITS = "metric"

    def __init__(self, token: str, timeout: int = 60):
        super().__init__(timeout)
        self.token = token

    def build_params(
        self,
        station: StationInfo,
        start_date: date,
        end_date: date,
        variables: list[str] | tuple[str, ...],
    ) -> dict:
        return {
            "datasetid": DATASET_ID,
            "stationid": station.cdo_id,
            "startdate": start_date.isoformat(),
            "enddate": end_date.isoformat(),
            "datatypeid": ",".join(variables),
            "limit": MAX_RESULTS,
            "units": self.UNITS,
        }

    def fetch(
        self,
        station: StationInfo,
        start_date: date,
        end_date: date,
        variables: list[str] | tuple[str, ...],
    ) -> pd.DataFrame:
        self._check_range(start_date, end_date)
        params = self.build_params(station, start_date, end_date, variables)

        logger.info("Requesting %s from CDO for %s (%s): %s → %s",
                    params["datatypeid"], station.cdo_id, station.name, start_date, end_date)

        resp = self._get(CDO_DATA_URL, params=params, headers={"token": self.token})

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedEnvelopeError(f"CDO response is not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or "results" not in data:
            raise MalformedEnvelopeError(
                "No 'results' found in the CDO response. Check your parameters.",
                missing_key="results",
            )

        results = data["results"]
        if not isinstance(results, list):
            raise MalformedEnvelopeError("CDO 'results' is not a list", missing_key="results")

        _warn_if_truncated(data.get("metadata"), len(results), station)

        if not results:
            logger.warning("CDO returned no records for %s (%s → %s)",
                           station.cdo_id, start_date, end_date)
            return pd.DataFrame(columns=RAW_COLUMNS)

        df = pd.DataFrame(results)
        logger.info("Got %d CDO records for %s", len(df), station.cdo_id)
        return df


def _warn_if_truncated(metadata, returned: int, station: StationInfo) -> None:
    try:
        available = int(metadata["resultset"]["count"])
    except (TypeError, KeyError, ValueError):
        return
    if available > returned:
        logger.warning(
            "CDO result for %s truncated: %d of %d records returned (limit=%d); "
            "narrow the date range to get everything",
            station.cdo_id, returned, available, MAX_RESULTS,
        )
