"""Daily station temperatures from NOAA: fetch, normalize, save, plot."""

__version__ = "0.1.0"
