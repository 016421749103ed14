"""CSV persistence for the daily temperature table."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def write_csv(df: pd.DataFrame, path: Path | str) -> Path:
    """Write ``df`` as comma-separated text with a header row.

    Dates are written in ISO-8601 form and missing values as empty fields.
    An empty table still produces a header-only file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, na_rep="")
    logger.info("Saved %d rows → %s", len(df), path)
    return path


def read_csv(path: Path | str, date_column: str = "date") -> pd.DataFrame:
    """Read back a file written by ``write_csv``, restoring ``datetime.date`` values."""
    df = pd.read_csv(path)
    if date_column in df.columns and not df.empty:
        df[date_column] = pd.to_datetime(df[date_column], format="%Y-%m-%d").dt.date
    return df
