"""Normalize raw NOAA daily summaries into a tidy daily temperature table.

Two raw shapes arrive from the fetchers:

* **long**  (CDO API): one row per (date, datatype) with an integer ``value``.
  Pivoted to one row per date with ``max_temp_c / min_temp_c / avg_temp_c``.
* **tabular** (NCEI Access): already one row per date with ``TMAX / TMIN /
  TAVG`` columns. Scaled in place; column names are kept.

In both cases raw values are tenths of a degree Celsius and are divided by
10. Missing observations stay NaN, never 0. Output has one row per date
(repeats: last wins), sorted by date.
"""

from __future__ import annotations

import logging

import pandas as pd

from noaa_temps.core.errors import MalformedDateError, MalformedEnvelopeError, MalformedValueError
from noaa_temps.download_data.fetcher_base import LONG_LAYOUT, TABULAR_LAYOUT

logger = logging.getLogger(__name__)

TENTHS_PER_DEGREE = 10.0

TEMPERATURE_VARIABLES = ("TMAX", "TMIN", "TAVG")

CANONICAL_NAMES = {
    "TAVG": "avg_temp_c",
    "TMAX": "max_temp_c",
    "TMIN": "min_temp_c",
}
CANONICAL_COLUMNS = ["date", "max_temp_c", "min_temp_c", "avg_temp_c"]

RAW_LONG_COLUMNS = ["date", "datatype", "value"]
TABULAR_DATE_COLUMN = "DATE"


# ======================================================================
# Field helpers
# ======================================================================

def _parse_dates(values: pd.Series, field: str) -> pd.Series:
    """Truncate to YYYY-MM-DD and parse to ``datetime.date``."""
    text = values.astype(str).str.slice(0, 10)
    parsed = pd.to_datetime(text, format="%Y-%m-%d", errors="coerce")
    bad = parsed.isna()
    if bad.any():
        raise MalformedDateError(values[bad].iloc[0], field)
    return parsed.dt.date


def _scale_tenths(values: pd.Series, field: str) -> pd.Series:
    """Tenths of a degree → degrees. Nulls stay NaN; anything non-numeric raises."""
    numeric = pd.to_numeric(values, errors="coerce")
    bad = numeric.isna() & values.notna()
    if bad.any():
        raise MalformedValueError(values[bad].iloc[0], field)
    return numeric.astype("float64") / TENTHS_PER_DEGREE


def _empty_canonical() -> pd.DataFrame:
    return pd.DataFrame({
        "date": pd.Series(dtype="object"),
        "max_temp_c": pd.Series(dtype="float64"),
        "min_temp_c": pd.Series(dtype="float64"),
        "avg_temp_c": pd.Series(dtype="float64"),
    })


# ======================================================================
# Normalizers
# ======================================================================

def normalize_long(raw: pd.DataFrame) -> pd.DataFrame:
    """Pivot long-form (date, datatype, value) records into one row per date."""
    if raw.empty:
        return _empty_canonical()

    missing = [c for c in RAW_LONG_COLUMNS if c not in raw.columns]
    if missing:
        raise MalformedEnvelopeError(
            f"Long-form records are missing the {missing[0]!r} field",
            missing_key=missing[0],
        )

    df = raw[RAW_LONG_COLUMNS].copy()
    untyped = df["datatype"].isna()
    if untyped.any():
        logger.warning("Dropping %d records with no datatype", int(untyped.sum()))
        df = df[~untyped].copy()
        if df.empty:
            return _empty_canonical()

    df["date"] = _parse_dates(df["date"], "date")
    df["value"] = _scale_tenths(df["value"], "value")
    df["datatype"] = df["datatype"].astype(str)

    # last write wins for repeated (date, datatype) pairs
    dupes = df.duplicated(subset=["date", "datatype"], keep="last")
    if dupes.any():
        logger.warning("Dropping %d duplicate (date, datatype) observations; keeping the last",
                       int(dupes.sum()))
        df = df[~dupes]

    wide = df.pivot(index="date", columns="datatype", values="value")
    wide = wide.rename(columns=CANONICAL_NAMES)
    wide.columns.name = None
    wide = wide.sort_index().reset_index()

    extra = [c for c in wide.columns if c not in CANONICAL_COLUMNS]
    wide = wide.reindex(columns=CANONICAL_COLUMNS + extra)

    logger.info("Normalized %d long-form records into %d daily rows", len(df), len(wide))
    return wide


def normalize_tabular(raw: pd.DataFrame) -> pd.DataFrame:
    """Scale TMAX/TMIN/TAVG to degrees and parse DATE; other columns pass through."""
    df = raw.copy()
    if df.empty:
        return df

    if TABULAR_DATE_COLUMN not in df.columns:
        raise MalformedEnvelopeError(
            f"Tabular rows have no {TABULAR_DATE_COLUMN!r} column",
            missing_key=TABULAR_DATE_COLUMN,
        )

    for col in TEMPERATURE_VARIABLES:
        if col in df.columns:
            df[col] = _scale_tenths(df[col], col)

    df[TABULAR_DATE_COLUMN] = _parse_dates(df[TABULAR_DATE_COLUMN], TABULAR_DATE_COLUMN)

    # one row per date, last write wins
    dupes = df.duplicated(subset=[TABULAR_DATE_COLUMN], keep="last")
    if dupes.any():
        logger.warning("Dropping %d duplicate %s rows; keeping the last",
                       int(dupes.sum()), TABULAR_DATE_COLUMN)
        df = df[~dupes]

    df = df.sort_values(TABULAR_DATE_COLUMN, kind="stable").reset_index(drop=True)

    logger.info("Normalized %d tabular rows", len(df))
    return df


def normalize(raw: pd.DataFrame, layout: str) -> pd.DataFrame:
    if layout == LONG_LAYOUT:
        return normalize_long(raw)
    if layout == TABULAR_LAYOUT:
        return normalize_tabular(raw)
    raise ValueError(f"Unknown raw layout {layout!r}")


def date_column(layout: str) -> str:
    return "date" if layout == LONG_LAYOUT else TABULAR_DATE_COLUMN


def temperature_column(layout: str, variable: str) -> str:
    """Column holding ``variable`` (e.g. 'TAVG') in a table of the given layout."""
    if layout == LONG_LAYOUT:
        return CANONICAL_NAMES.get(variable, variable)
    return variable
