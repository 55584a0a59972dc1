# armillary/core/values.py
"""Value types passed between the engine layers. All frozen, no identity."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, Optional

from armillary.core.errors import InvalidInstantError, InvalidLocationError
from armillary.core.jd import days_in_year, julian_date

MINUTES_PER_DAY = 1440.0


@dataclass(frozen=True)
class Instant:
    """A UTC moment: (year, day-of-year, minutes since 00:00 UTC)."""

    year: int
    day_of_year: int  # 1..365/366
    minutes_utc: float = 0.0  # wraps at 1440

    def __post_init__(self):
        if not 1 <= int(self.day_of_year) <= days_in_year(self.year):
            raise InvalidInstantError(
                f"day_of_year {self.day_of_year} is not valid for year {self.year}"
            )
        if not math.isfinite(self.minutes_utc) or self.minutes_utc < 0:
            raise InvalidInstantError(f"minutes_utc must be finite and >= 0, got {self.minutes_utc}")
        object.__setattr__(self, "minutes_utc", float(self.minutes_utc) % MINUTES_PER_DAY)

    @cached_property
    def julian_date(self) -> float:
        return julian_date(self.year, self.day_of_year, self.minutes_utc)

    def at_minutes(self, minutes_utc: float) -> "Instant":
        return Instant(self.year, self.day_of_year, minutes_utc)


@dataclass(frozen=True)
class GeoLocation:
    latitude_deg: float  # -90..90
    longitude_deg: float  # -180..180, east positive

    def __post_init__(self):
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise InvalidLocationError(f"latitude {self.latitude_deg} outside [-90, 90]")
        if not -180.0 <= self.longitude_deg <= 180.0:
            raise InvalidLocationError(f"longitude {self.longitude_deg} outside [-180, 180]")

    @property
    def latitude_rad(self) -> float:
        return math.radians(self.latitude_deg)


@dataclass(frozen=True)
class AnglesBundle:
    """MC/IC/ASC/DSC/VTX/AVX in degrees [0, 360)."""

    mc: float
    ic: float
    asc: float
    dsc: float
    vtx: float
    avx: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "MC": self.mc,
            "IC": self.ic,
            "ASC": self.asc,
            "DSC": self.dsc,
            "VTX": self.vtx,
            "AVX": self.avx,
        }


@dataclass(frozen=True)
class LunarPhase:
    name: str
    illumination: int  # percent 0..100


@dataclass(frozen=True)
class RiseSetResult:
    """HH:MM strings, or the polar sentinels from riseset.py."""

    sunrise: str
    sunset: str
    transit: str


@dataclass(frozen=True)
class MoonPosition:
    longitude: float  # radians [0, 2pi)
    latitude: float  # radians


@dataclass(frozen=True)
class HeliocentricPosition:
    longitude: float  # radians [0, 2pi)
    latitude: float  # radians
    distance: float  # AU


@dataclass(frozen=True)
class PlanetPosition:
    name: str
    geocentric_longitude: float  # radians, for the zodiac wheel
    geocentric_latitude: float
    heliocentric_longitude: Optional[float]  # radians, for 3D placement
    heliocentric_latitude: float
    heliocentric_distance: Optional[float]  # AU


@dataclass(frozen=True)
class NodePair:
    ascending: float  # degrees
    descending: float


@dataclass(frozen=True)
class Apsides:
    perihelion: float  # degrees
    aphelion: float
    perihelion_distance: float  # AU
    aphelion_distance: float


@dataclass(frozen=True)
class SphereState:
    """Everything the scene layer needs for one frame."""

    julian_date: float
    lst_deg: float
    lst_time: str
    obliquity_rad: float
    angles: AnglesBundle
    sun_lon_rad: float
    moon: MoonPosition
    lunar_phase: LunarPhase
    lunar_nodes: NodePair
    ayanamsha_deg: float
    planets: Dict[str, PlanetPosition] = field(default_factory=dict)
    zodiac: Dict[str, str] = field(default_factory=dict)
    rise_set: Optional[RiseSetResult] = None
    # orbit geometry for the 3D scene (J2000 elements, heliocentric)
    planetary_nodes: Dict[str, NodePair] = field(default_factory=dict)
    planetary_apsides: Dict[str, Apsides] = field(default_factory=dict)
    earth: Optional[HeliocentricPosition] = None
    lunar_perigee_deg: float = 0.0
