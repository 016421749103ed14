"""Shared fixtures for the noaa_temps test suite."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import Mock

import pytest

from noaa_temps.core.config import PipelineConfig
from noaa_temps.weather.stations import STATION_REGISTRY

SANTA_BARBARA = STATION_REGISTRY["USW00023190"]

NCEI_CSV = (
    '"STATION","DATE","TAVG","TMAX","TMIN"\n'
    '"USW00023190","2024-01-02","140","200","80"\n'
    '"USW00023190","2024-01-01","","250","100"\n'
    '"USW00023190","2024-01-03","155","211",""\n'
)


def make_response(
    status_code: int = 200,
    *,
    payload=None,
    text: str | None = None,
    url: str = "https://example.test/data",
) -> Mock:
    """Build a stand-in for ``requests.Response``."""
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = "OK" if resp.ok else "Bad Request"
    resp.url = url
    resp.text = text
    if payload is not None:
        resp.json.return_value = payload
    else:
        resp.json.side_effect = ValueError("Expecting value")
    return resp


@pytest.fixture
def station():
    return SANTA_BARBARA


@pytest.fixture
def long_records():
    """CDO-style long-form records for three days, TAVG missing on day one."""
    return [
        {"date": "2024-01-02T00:00:00", "datatype": "TMAX", "station": "GHCND:USW00023190",
         "attributes": ",,W,2400", "value": 200},
        {"date": "2024-01-01T00:00:00", "datatype": "TMAX", "station": "GHCND:USW00023190",
         "attributes": ",,W,2400", "value": 250},
        {"date": "2024-01-01T00:00:00", "datatype": "TMIN", "station": "GHCND:USW00023190",
         "attributes": ",,W,2400", "value": 100},
        {"date": "2024-01-02T00:00:00", "datatype": "TMIN", "station": "GHCND:USW00023190",
         "attributes": ",,W,2400", "value": 80},
        {"date": "2024-01-02T00:00:00", "datatype": "TAVG", "station": "GHCND:USW00023190",
         "attributes": "H,,S,", "value": 140},
        {"date": "2024-01-03T00:00:00", "datatype": "TMAX", "station": "GHCND:USW00023190",
         "attributes": ",,W,2400", "value": -15},
    ]


@pytest.fixture
def cdo_payload(long_records):
    return {
        "metadata": {"resultset": {"offset": 1, "count": len(long_records), "limit": 1000}},
        "results": long_records,
    }


@pytest.fixture
def ncei_csv():
    return NCEI_CSV


@pytest.fixture
def pipeline_config(tmp_path):
    return PipelineConfig(
        station=SANTA_BARBARA,
        source="ncei_access",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 3),
        variables=("TMAX", "TMIN", "TAVG"),
        output_dir=tmp_path / "out",
        plot_variable="TMAX",
        trend_window=0,
        timeout=5,
    )
