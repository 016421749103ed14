"""Station registry for the NOAA daily-summary fetchers.

Both NOAA endpoints key stations by their GHCN-Daily identifier; the CDO
web-services API additionally wants the ``GHCND:`` dataset prefix.
Add new stations to ``STATION_REGISTRY``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StationInfo:
    """Immutable metadata for a single GHCN-Daily station (id, name, file slug)."""

    ghcnd_id: str
    name: str
    slug: str

    @property
    def cdo_id(self) -> str:
        """Station id as the CDO API expects it, e.g. 'GHCND:USW00023190'."""
        return f"GHCND:{self.ghcnd_id}"


STATION_REGISTRY: dict[str, StationInfo] = {
    "USW00023190": StationInfo(
        ghcnd_id="USW00023190",
        name="Santa Barbara Municipal Airport",
        slug="santa_barbara",
    ),
}

DEFAULT_STATION_ID = "USW00023190"


def station_for_id(station_id: str) -> StationInfo:
    """Look up a StationInfo by GHCND id, with or without the 'GHCND:' prefix."""
    key = station_id.removeprefix("GHCND:")
    try:
        return STATION_REGISTRY[key]
    except KeyError:
        raise KeyError(f"No station with GHCND id {station_id!r} in registry") from None


__all__ = [
    "DEFAULT_STATION_ID",
    "STATION_REGISTRY",
    "StationInfo",
    "station_for_id",
]
