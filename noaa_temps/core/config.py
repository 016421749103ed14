"""Configuration loading, credential lookup, and CLI helpers.

Centralized so the pipeline and its entry points share one config
resolution. Settings live in ``config.yaml``; the CDO API token comes from
the ``NOAA_CDO_TOKEN`` environment variable (a ``.env`` file is honoured)
or from a credential file under ``credentials.dir``.
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from noaa_temps.core.errors import ConfigError
from noaa_temps.weather.stations import DEFAULT_STATION_ID, StationInfo, station_for_id

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "NOAA_CDO_TOKEN"
SUPPORTED_VARIABLES = ("TMAX", "TMIN", "TAVG")
SUPPORTED_SOURCES = ("cdo_api", "ncei_access")
METRIC_UNITS = "metric"

DEFAULT_PLOT_VARIABLE = {"cdo_api": "TAVG", "ncei_access": "TMAX"}


@dataclass(frozen=True)
class PipelineConfig:
    """Everything one pipeline run needs, resolved and validated."""

    station: StationInfo
    source: str
    start_date: date
    end_date: date
    variables: tuple[str, ...]
    output_dir: Path
    units: str = METRIC_UNITS
    plot_variable: str | None = "TAVG"
    trend_window: int = 0
    timeout: int = 60
    token: str | None = None

    def __post_init__(self):
        if self.source not in SUPPORTED_SOURCES:
            raise ConfigError(
                f"Unknown source {self.source!r}; expected one of {SUPPORTED_SOURCES}"
            )
        if self.start_date > self.end_date:
            raise ConfigError(
                "start_date must not be after end_date",
                {"start_date": self.start_date.isoformat(), "end_date": self.end_date.isoformat()},
            )
        unknown = [v for v in self.variables if v not in SUPPORTED_VARIABLES]
        if unknown or not self.variables:
            raise ConfigError(
                f"variables must be a non-empty subset of {SUPPORTED_VARIABLES}",
                {"variables": list(self.variables)},
            )
        if self.units != METRIC_UNITS:
            raise ConfigError(
                f"units must be {METRIC_UNITS!r}; temperatures are stored in degrees Celsius",
                {"units": self.units},
            )

    @property
    def year_span(self) -> str:
        if self.start_date.year == self.end_date.year:
            return str(self.start_date.year)
        return f"{self.start_date.year}-{self.end_date.year}"

    @property
    def csv_path(self) -> Path:
        return self.output_dir / f"{self.station.slug}_{self.source}_temp_{self.year_span}.csv"

    @property
    def plot_path(self) -> Path | None:
        if not self.plot_variable:
            return None
        name = f"{self.station.slug}_{self.source}_{self.plot_variable.lower()}_plot.png"
        return self.output_dir / name


def _credentials_dir(config: dict) -> Path:
    """Resolve credentials base directory. CREDENTIALS_DIR env overrides config."""
    creds_cfg = config.get("credentials", {})
    dir_path = os.environ.get("CREDENTIALS_DIR") or creds_cfg.get("dir", "~/.noaa")
    return Path(os.path.expanduser(dir_path))


def _read_credential(config: dict, key: str) -> str:
    """Read a credential from a file. Returns stripped content."""
    creds_dir = _credentials_dir(config)
    creds_cfg = config.get("credentials", {})
    filename = creds_cfg.get(key, key)
    path = creds_dir / filename
    if not path.exists():
        raise ConfigError(
            f"Credential file not found: {path}. "
            f"Create it, set CREDENTIALS_DIR, or export {TOKEN_ENV_VAR}."
        )
    return path.read_text().strip()


def get_cdo_token(config: dict) -> str:
    """Return the NOAA CDO API token (env var first, then credential file)."""
    load_dotenv()
    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        return token.strip()
    return _read_credential(config, "cdo_token")


# ======================================================================
# Config loading
# ======================================================================

def load_config(config_path: Optional[str] = None) -> tuple[dict, Path]:
    """Load and return the YAML config dictionary and its path.

    Falls back to the ``config.yaml`` shipped inside the package when no
    path is given.
    """
    if config_path:
        path = Path(config_path)
    else:
        path = Path(__file__).resolve().parent.parent / "config.yaml"
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}, path


def _as_date(value: Any, key: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"{key} must be an ISO date (YYYY-MM-DD)", {key: value}) from None


def pipeline_config_from_dict(
    config: dict,
    config_path: Path | None = None,
    **overrides: Any,
) -> PipelineConfig:
    """Build a validated ``PipelineConfig`` from the YAML dict.

    Keyword overrides (``source``, ``station``, ``start_date``, ``end_date``,
    ``output_dir``, ``plot_variable``) win over file values when not None.
    """
    settings = {**config, **{k: v for k, v in overrides.items() if v is not None}}

    station_id = str(settings.get("station", DEFAULT_STATION_ID))
    try:
        station = station_for_id(station_id)
    except KeyError as exc:
        raise ConfigError(str(exc.args[0])) from None

    source = settings.get("source", "cdo_api")

    if overrides.get("output_dir"):
        output_dir = Path(os.path.expanduser(str(overrides["output_dir"]))).resolve()
    else:
        base_dir = config_path.parent if config_path else Path.cwd()
        output_dir = config.get("storage", {}).get("output_dir", ".")
        output_dir = (base_dir / Path(os.path.expanduser(str(output_dir)))).resolve()

    plot_cfg = config.get("plot", {})
    if "plot_variable" in settings:
        plot_variable = settings["plot_variable"] or None
    else:
        per_source = plot_cfg.get("variable", DEFAULT_PLOT_VARIABLE)
        if isinstance(per_source, dict):
            plot_variable = per_source.get(source, DEFAULT_PLOT_VARIABLE.get(source))
        else:
            plot_variable = per_source

    variables = settings.get("variables", list(SUPPORTED_VARIABLES))
    if isinstance(variables, str):
        variables = [v.strip() for v in variables.split(",") if v.strip()]

    token = None
    if source == "cdo_api":
        token = get_cdo_token(config)

    return PipelineConfig(
        station=station,
        source=source,
        start_date=_as_date(settings.get("start_date"), "start_date"),
        end_date=_as_date(settings.get("end_date"), "end_date"),
        variables=tuple(str(v).upper() for v in variables),
        output_dir=output_dir,
        units=settings.get("units", METRIC_UNITS),
        plot_variable=plot_variable,
        trend_window=int(plot_cfg.get("trend_window", 0) or 0),
        timeout=int(config.get("request", {}).get("timeout", 60)),
        token=token,
    )


# ======================================================================
# CLI helpers
# ======================================================================

def standard_argparser(description: str) -> argparse.ArgumentParser:
    """Return an ``ArgumentParser`` with common flags."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: the packaged config)",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser


def configure_logging(level_name: str = "INFO") -> None:
    """Set up root logging with a consistent format."""
    logging.basicConfig(
        level=getattr(logging, level_name.upper()),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )
