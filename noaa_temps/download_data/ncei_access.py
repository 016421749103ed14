"""Download GHCN-Daily temperatures from the NCEI Access Data Service (no API key).

Data source: https://www.ncei.noaa.gov/access/services/data/v1

Returns the daily-summaries dataset directly as CSV: one row per date with
``STATION``, ``DATE`` and one column per requested datatype. Temperature
values are in tenths of a degree Celsius; missing values are empty fields.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from urllib.parse import quote

import pandas as pd

from noaa_temps.core.errors import MalformedEnvelopeError
from noaa_temps.download_data.fetcher_base import TABULAR_LAYOUT, StationDataFetcher
from noaa_temps.weather.stations import StationInfo

logger = logging.getLogger(__name__)

NCEI_ACCESS_URL = "https://www.ncei.noaa.gov/access/services/data/v1"
DATASET = "daily-summaries"
OUTPUT_FORMAT = "csv"


class NCEIAccessFetcher(StationDataFetcher):
    """Fetch tabular daily summaries from the NCEI Access Data Service."""

    SOURCE_NAME = "ncei_access"
    LAYOUT = TABULAR_LAYOUT

    def build_url(
        self,
        station: StationInfo,
        start_date: date,
        end_date: date,
        variables: list[str] | tuple[str, ...],
    ) -> str:
        """Full download URL with the station id percent-encoded."""
        return (
            f"{NCEI_ACCESS_URL}"
            f"?dataset={DATASET}"
            f"&stations={quote(station.ghcnd_id, safe='')}"
            f"&startDate={start_date.isoformat()}"
            f"&endDate={end_date.isoformat()}"
            f"&dataTypes={','.join(variables)}"
            f"&format={OUTPUT_FORMAT}"
        )

    def fetch(
        self,
        station: StationInfo,
        start_date: date,
        end_date: date,
        variables: list[str] | tuple[str, ...],
    ) -> pd.DataFrame:
        self._check_range(start_date, end_date)
        url = self.build_url(station, start_date, end_date, variables)

        logger.info("Downloading daily summaries for %s (%s): %s → %s",
                    station.ghcnd_id, station.name, start_date, end_date)
        logger.info("Constructed download URL: %s", url)

        resp = self._get(url)

        try:
            df = pd.read_csv(io.StringIO(resp.text), dtype={"STATION": str, "DATE": str})
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise MalformedEnvelopeError(f"NCEI response is not valid CSV: {exc}") from exc

        if "DATE" not in df.columns:
            raise MalformedEnvelopeError(
                "NCEI CSV has no 'DATE' column. Check your parameters.",
                missing_key="DATE",
            )

        if df.empty:
            logger.warning("Download succeeded but no rows were returned for %s (%s → %s)",
                           station.ghcnd_id, start_date, end_date)
            return df

        logger.info("Got %d daily rows for %s", len(df), station.ghcnd_id)
        return df
