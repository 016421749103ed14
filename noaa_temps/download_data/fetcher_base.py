"""Abstract base for the NOAA station-data fetchers.

Provides:
  - The single ``fetch(station, start_date, end_date, variables)`` interface
  - ``LAYOUT`` tag telling the normalizer which shape the raw frame has
  - One guarded HTTP GET helper that turns transport failures into
    ``TransportError``
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import pandas as pd
import requests

from noaa_temps.core.errors import EmptyResultError, TransportError
from noaa_temps.weather.stations import StationInfo

logger = logging.getLogger(__name__)

LONG_LAYOUT = "long"
TABULAR_LAYOUT = "tabular"


class StationDataFetcher(ABC):
    """Base class for daily-summary fetchers.

    Subclasses must implement:
      - SOURCE_NAME (class attribute)  – e.g. "cdo_api"
      - LAYOUT (class attribute)       – LONG_LAYOUT or TABULAR_LAYOUT
      - fetch(station, start_date, end_date, variables) -> pd.DataFrame
    """

    SOURCE_NAME: str = ""  # override in subclass
    LAYOUT: str = ""

    def __init__(self, timeout: int = 60):
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    def fetch(
        self,
        station: StationInfo,
        start_date: date,
        end_date: date,
        variables: list[str] | tuple[str, ...],
    ) -> pd.DataFrame:
        """Fetch raw daily records for one station over an inclusive range.

        The returned frame is the service payload with transport framing
        removed; values are still in tenths of a degree.
        """

    # ------------------------------------------------------------------
    # Concrete helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValueError(f"start_date {start_date} is after end_date {end_date}")

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Issue one GET; raise TransportError / EmptyResultError on failure."""
        try:
            resp = requests.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{self.SOURCE_NAME} request failed: {exc}", url=url) from exc

        if not resp.ok:
            raise TransportError(
                f"{self.SOURCE_NAME} request failed with status {resp.status_code} {resp.reason}",
                url=resp.url or url,
                status_code=resp.status_code,
                body=resp.text,
            )

        if not resp.text.strip():
            raise EmptyResultError(
                f"{self.SOURCE_NAME} returned an empty response body",
                {"url": resp.url or url},
            )
        return resp
