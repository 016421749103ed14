"""Sinks for the normalized table: CSV file and PNG chart."""

from noaa_temps.output.plots import plot_series
from noaa_temps.output.storage import read_csv, write_csv

__all__ = ["plot_series", "read_csv", "write_csv"]
