"""Download, save, and plot daily station temperatures from NOAA.

One pass: fetch → normalize → write CSV → plot. All settings come from
``noaa_temps/config.yaml``; flags override single values.

Usage:
    python -m noaa_temps.run_daily_temps
    python -m noaa_temps.run_daily_temps --source ncei_access
    python -m noaa_temps.run_daily_temps --start 2024-06-01 --end 2024-08-31 --no-plot
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from noaa_temps.core.config import (
    PipelineConfig,
    SUPPORTED_SOURCES,
    configure_logging,
    load_config,
    pipeline_config_from_dict,
    standard_argparser,
)
from noaa_temps.core.errors import NoaaTempsError
from noaa_temps.download_data import StationDataFetcher, build_fetcher
from noaa_temps.output import plot_series, write_csv
from noaa_temps.output.plots import VARIABLE_LABELS
from noaa_temps.processing.normalize import date_column, normalize, temperature_column

logger = logging.getLogger(__name__)

SOURCE_LABELS = {
    "cdo_api": "NOAA CDO (GHCND)",
    "ncei_access": "NOAA NCEI daily-summaries",
}
PLOT_COLORS = {"TAVG": "steelblue", "TMAX": "firebrick", "TMIN": "navy"}


@dataclass
class PipelineResult:
    table: pd.DataFrame
    csv_path: Path
    plot_path: Path | None


def run_pipeline(
    config: PipelineConfig,
    fetcher: StationDataFetcher | None = None,
) -> PipelineResult:
    """Run fetch → normalize → sink once. Errors propagate to the caller."""
    if fetcher is None:
        fetcher = build_fetcher(config)

    station = config.station
    print(f"Requesting {','.join(config.variables)} for {station.name} ({station.ghcnd_id})")
    print(f"  Range: {config.start_date} → {config.end_date}")
    print(f"  Source: {fetcher.SOURCE_NAME}")

    raw = fetcher.fetch(station, config.start_date, config.end_date, config.variables)
    print(f"Data received ({len(raw)} raw rows). Processing...")

    table = normalize(raw, fetcher.LAYOUT)
    if table.empty:
        print("The service returned no data for the specified parameters.")

    csv_path = write_csv(table, config.csv_path)
    print(f"Data saved to: {csv_path}")

    if not table.empty:
        print("First rows:\n")
        print(table.head().to_string(index=False))
        print()

    plot_path = None
    if config.plot_variable and config.plot_path is not None:
        plot_path = _plot(table, config, fetcher.LAYOUT)

    return PipelineResult(table=table, csv_path=csv_path, plot_path=plot_path)


def _plot(table: pd.DataFrame, config: PipelineConfig, layout: str) -> Path | None:
    variable = config.plot_variable
    column = temperature_column(layout, variable)
    label = VARIABLE_LABELS.get(variable, variable)

    plot_path = plot_series(
        table,
        column,
        config.plot_path,
        date_column=date_column(layout),
        title=f"Daily {label} Temperature - {config.station.name}",
        subtitle=(
            f"{config.start_date} to {config.end_date} (missing values removed) · "
            f"Data source: {SOURCE_LABELS.get(config.source, config.source)}"
        ),
        ylabel=f"{label} Temperature (°C)",
        color=PLOT_COLORS.get(variable, "steelblue"),
        trend_window=config.trend_window,
    )
    if plot_path is None:
        print(f"No {variable} data available to plot.")
    else:
        print(f"Plot saved as {plot_path}")
    return plot_path


def main(argv: list[str] | None = None) -> int:
    parser = standard_argparser(
        "Download daily TMAX/TMIN/TAVG for one NOAA station, save CSV, plot one series",
    )
    parser.add_argument("--source", choices=SUPPORTED_SOURCES, default=None,
                        help="cdo_api (token) or ncei_access (no token). Default: from config")
    parser.add_argument("--station", default=None, help="GHCND station id (e.g. USW00023190)")
    parser.add_argument("--start", default=None, help="Start date YYYY-MM-DD")
    parser.add_argument("--end", default=None, help="End date YYYY-MM-DD")
    parser.add_argument("--output-dir", default=None, help="Directory for CSV/PNG output")
    parser.add_argument("--no-plot", action="store_true", help="Skip the chart")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        raw_config, config_path = load_config(args.config)
        config = pipeline_config_from_dict(
            raw_config,
            config_path,
            source=args.source,
            station=args.station,
            start_date=args.start,
            end_date=args.end,
            output_dir=args.output_dir,
            plot_variable="" if args.no_plot else None,
        )
        run_pipeline(config)
    except NoaaTempsError as exc:
        logger.error("Run aborted: %s", exc)
        print(f"\nError: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
