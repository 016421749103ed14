"""Time-series chart of one daily temperature column.

Renders with the non-interactive Agg backend so it works headless.
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

logger = logging.getLogger(__name__)

FIGSIZE = (10, 6)

VARIABLE_LABELS = {
    "TAVG": "Average",
    "TMAX": "Maximum",
    "TMIN": "Minimum",
}


def plot_series(
    df: pd.DataFrame,
    column: str,
    path: Path | str,
    *,
    date_column: str = "date",
    title: str = "",
    subtitle: str = "",
    ylabel: str = "Temperature (°C)",
    color: str = "steelblue",
    trend_window: int = 0,
) -> Path | None:
    """Plot ``column`` against ``date_column`` and save a PNG to ``path``.

    Rows where ``column`` is missing are dropped first. Returns ``None``
    without writing anything when no values are left to plot.
    """
    if column not in df.columns:
        logger.warning("Nothing to plot: column %r not in table", column)
        return None

    data = df[[date_column, column]].dropna(subset=[column])
    if data.empty:
        logger.warning("Nothing to plot: no %s values", column)
        return None

    dates = pd.to_datetime(data[date_column])
    values = data[column].astype(float)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=FIGSIZE)
    try:
        ax.plot(dates, values, color=color, linewidth=1.0, label=column)

        if trend_window and trend_window > 1:
            trend = (
                pd.Series(values.to_numpy(), index=dates)
                .rolling(f"{trend_window}D", center=True, min_periods=1)
                .mean()
            )
            ax.plot(trend.index, trend.to_numpy(), color="red", linestyle="--",
                    linewidth=1.5, label=f"{trend_window}-day mean")
            ax.legend(loc="best")

        if title:
            fig.suptitle(title, fontsize=14, fontweight="bold")
        if subtitle:
            ax.set_title(subtitle, fontsize=10)
        ax.set_xlabel("Date")
        ax.set_ylabel(ylabel)
        ax.grid(True, alpha=0.3)
        fig.autofmt_xdate()

        fig.savefig(path, format="png")
    finally:
        plt.close(fig)

    logger.info("Plot saved → %s (%d points)", path, len(data))
    return path
