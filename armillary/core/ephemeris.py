# armillary/core/ephemeris.py
"""
Ecliptic longitude lookups for the Sun, Moon and planets.

Providers answer one question, "ecliptic longitude (degrees) of body X
at JD", and report None when they cannot. They never raise. The lookups
at the bottom of this module compose a provider answer with an analytic
fallback explicitly (or_else), and log when the fallback is taken.
"""

import logging
import math
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from armillary.core import settings
from armillary.core.coords import DEG2RAD, normalize_degrees, normalize_radians
from armillary.core.errors import UnknownBodyError
from armillary.core.jd import J2000
from armillary.core.kepler import PLANETS, geocentric_estimate, heliocentric_position
from armillary.core.lunar import lunar_nodes, moon_latitude_deg
from armillary.core.values import HeliocentricPosition, Instant, MoonPosition, PlanetPosition

logger = logging.getLogger(__name__)


def _jd_T(jd: float) -> float:
    # Julian centuries from J2000.0
    return (jd - J2000) / 36525.0


def _numeric(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    v = float(v)
    return v if math.isfinite(v) else None


# ---------------------------------------------------------
# Providers
# ---------------------------------------------------------
class EphemerisProvider:
    """Base provider: subclasses implement _longitude/_latitude (degrees)."""

    name = "base"

    def longitude_of(self, body: str, jd: float) -> Optional[float]:
        try:
            lon = _numeric(self._longitude(body.lower(), jd))
        except Exception as exc:
            logger.debug("%s provider: longitude of %s failed: %s", self.name, body, exc)
            return None
        return None if lon is None else normalize_degrees(lon)

    def latitude_of(self, body: str, jd: float) -> Optional[float]:
        try:
            return _numeric(self._latitude(body.lower(), jd))
        except Exception as exc:
            logger.debug("%s provider: latitude of %s failed: %s", self.name, body, exc)
            return None

    def lunar_node(self, jd: float) -> Optional[float]:
        """Ascending node longitude if the provider publishes one."""
        return None

    def _longitude(self, body: str, jd: float) -> Optional[float]:
        return None

    def _latitude(self, body: str, jd: float) -> Optional[float]:
        return None


class UnavailableProvider(EphemerisProvider):
    """Always unavailable: forces every lookup onto its fallback."""

    name = "unavailable"


class AnalyticProvider(EphemerisProvider):
    """
    Offline low-precision series:
    * Sun: mean longitude + equation of centre, apparent (Meeus ch. 25)
    * Moon: main periodic terms of the lunar theory (Meeus ch. 47, truncated)
    * planets: Keplerian heliocentric vectors differenced with Earth's
    """

    name = "analytic"

    def _longitude(self, body: str, jd: float) -> Optional[float]:
        if body == "sun":
            return self._sun(jd)
        if body == "moon":
            return self._moon(jd)[0]
        est = geocentric_estimate(body, jd)
        return None if est is None else math.degrees(est[0])

    def _latitude(self, body: str, jd: float) -> Optional[float]:
        if body == "sun":
            return 0.0
        if body == "moon":
            return self._moon(jd)[1]
        est = geocentric_estimate(body, jd)
        return None if est is None else math.degrees(est[1])

    @staticmethod
    def _sun(jd: float) -> float:
        T = _jd_T(jd)
        L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
        M = (357.52911 + 35999.05029 * T - 0.0001537 * T * T) * DEG2RAD
        C = (
            (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
            + (0.019993 - 0.000101 * T) * math.sin(2 * M)
            + 0.000289 * math.sin(3 * M)
        )
        omega = (125.04 - 1934.136 * T) * DEG2RAD
        return L0 + C - 0.00569 - 0.00478 * math.sin(omega)

    @staticmethod
    def _moon(jd: float):
        T = _jd_T(jd)
        Lp = 218.3164477 + 481267.88123421 * T
        D = (297.8501921 + 445267.1114034 * T) * DEG2RAD
        M = (357.5291092 + 35999.0502909 * T) * DEG2RAD
        Mp = (134.9633964 + 477198.8675055 * T) * DEG2RAD
        F = (93.2720950 + 483202.0175233 * T) * DEG2RAD

        lon = (
            Lp
            + 6.288774 * math.sin(Mp)
            + 1.274027 * math.sin(2 * D - Mp)
            + 0.658314 * math.sin(2 * D)
            + 0.213618 * math.sin(2 * Mp)
            - 0.185116 * math.sin(M)
            - 0.114332 * math.sin(2 * F)
            + 0.058793 * math.sin(2 * D - 2 * Mp)
            + 0.057066 * math.sin(2 * D - M - Mp)
            + 0.053322 * math.sin(2 * D + Mp)
            + 0.045758 * math.sin(2 * D - M)
        )
        lat = (
            5.128122 * math.sin(F)
            + 0.280602 * math.sin(Mp + F)
            + 0.277693 * math.sin(Mp - F)
            + 0.173237 * math.sin(2 * D - F)
        )
        return lon, lat


class SkyfieldProvider(EphemerisProvider):
    """Apparent geocentric ecliptic positions from a JPL kernel via skyfield."""

    name = "skyfield"

    TARGETS = {
        "sun": "sun",
        "moon": "moon",
        "mercury": "mercury",
        "venus": "venus",
        "mars": "mars barycenter",
        "jupiter": "jupiter barycenter",
        "saturn": "saturn barycenter",
        "uranus": "uranus barycenter",
        "neptune": "neptune barycenter",
        "pluto": "pluto barycenter",
    }

    def __init__(self, de_file: str = settings.DE_FILE, directory: Optional[str] = settings.SKYFIELD_DIR):
        self.de_file = de_file
        self.directory = directory
        self._ts = None
        self._eph = None

    def _ensure_loaded(self):
        if self._ts is not None and self._eph is not None:
            return
        # imported lazily: the analytic path must work without kernels
        from skyfield.api import Loader, load

        loader = Loader(self.directory) if self.directory else load
        if self._ts is None:
            self._ts = loader.timescale()
        if self._eph is None:
            self._eph = loader(self.de_file)

    def _latlon(self, body: str, jd: float):
        target = self.TARGETS.get(body)
        if target is None:
            return None

        from skyfield.framelib import ecliptic_frame

        self._ensure_loaded()
        t = self._ts.ut1_jd(jd)
        astrometric = self._eph["earth"].at(t).observe(self._eph[target]).apparent()
        lat, lon, _ = astrometric.frame_latlon(ecliptic_frame)
        return float(lat.degrees), float(lon.degrees)

    def _longitude(self, body: str, jd: float) -> Optional[float]:
        ll = self._latlon(body, jd)
        return None if ll is None else ll[1]

    def _latitude(self, body: str, jd: float) -> Optional[float]:
        ll = self._latlon(body, jd)
        return None if ll is None else ll[0]


LONGITUDE_FIELDS = ("apparentLongitudeDd", "longitude", "lon", "lambda")
LATITUDE_FIELDS = ("apparentLatitudeDd", "latitude", "lat", "beta")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def first_number(record: Any, fields: Iterable[str]) -> Optional[float]:
    """First numeric, non-NaN value among the candidate field names."""
    if record is None:
        return None
    for name in fields:
        v = _numeric(_field(record, name))
        if v is not None:
            return v
    return None


class RecordProvider(EphemerisProvider):
    """
    Adapter for ephemeris libraries that return one record per body,
    e.g. {"observed": {"sun": {"apparentLongitudeDd": 280.1, ...}}}.
    The shape of those records varies between libraries and versions,
    so field names are searched here and nowhere else.
    """

    name = "record"

    def __init__(self, fetch: Callable[[float], Any]):
        self.fetch = fetch

    def _record(self, body: str, jd: float) -> Any:
        result = self.fetch(jd)
        observed = _field(result, "observed") if result is not None else None
        record = _field(observed, body) if observed is not None else None
        if record is None and result is not None:
            record = _field(result, body)
        return record

    def _longitude(self, body: str, jd: float) -> Optional[float]:
        return first_number(self._record(body, jd), LONGITUDE_FIELDS)

    def _latitude(self, body: str, jd: float) -> Optional[float]:
        return first_number(self._record(body, jd), LATITUDE_FIELDS)

    def lunar_node(self, jd: float) -> Optional[float]:
        try:
            node = _field(self._record("moon", jd), "node")
        except Exception as exc:
            logger.debug("record provider: lunar node failed: %s", exc)
            return None
        v = _numeric(node)
        if v is None and node is not None:
            v = first_number(node, ("longitude",))
        return None if v is None else normalize_degrees(v)


def build_provider(backend: str) -> EphemerisProvider:
    if backend == "skyfield":
        return SkyfieldProvider()
    if backend != "analytic":
        logger.warning("unknown ephemeris backend %r, using analytic", backend)
    return AnalyticProvider()


@lru_cache(maxsize=1)
def default_provider() -> EphemerisProvider:
    return build_provider(settings.EPHEMERIS_BACKEND)


# ---------------------------------------------------------
# Fallback formulas (degrees)
# ---------------------------------------------------------
def mean_sun_longitude_deg(day_of_year: int) -> float:
    return (280.0 + (day_of_year - 1) * 360.0 / 365.2425) % 360.0


def mean_moon_longitude_deg(day_of_year: int) -> float:
    return (day_of_year * 13.176) % 360.0


def or_else(value: Optional[float], fallback: Callable[[], float]) -> float:
    return value if value is not None else fallback()


# ---------------------------------------------------------
# Lookups (radians)
# ---------------------------------------------------------
def sun_longitude(instant: Instant, provider: Optional[EphemerisProvider] = None, log_fallback: bool = True) -> float:
    """Sun apparent ecliptic longitude, radians [0, 2pi)."""
    provider = provider or default_provider()

    def fallback() -> float:
        lon = mean_sun_longitude_deg(instant.day_of_year)
        if log_fallback:
            logger.warning("ephemeris unavailable for Sun, using mean longitude %.4f deg", lon)
        return lon

    lon_deg = or_else(provider.longitude_of("sun", instant.julian_date), fallback)
    return normalize_radians(lon_deg * DEG2RAD)


def moon_position(instant: Instant, provider: Optional[EphemerisProvider] = None) -> MoonPosition:
    """
    Moon ecliptic longitude and latitude (radians).
    Latitude is i·sin(λ − Ω) from the true node; 0 on the fallback path.
    """
    provider = provider or default_provider()
    jd = instant.julian_date

    lon_deg = provider.longitude_of("moon", jd)
    if lon_deg is None:
        lon_deg = mean_moon_longitude_deg(instant.day_of_year)
        logger.warning("ephemeris unavailable for Moon, using mean motion %.4f deg", lon_deg)
        return MoonPosition(longitude=normalize_radians(lon_deg * DEG2RAD), latitude=0.0)

    node = lunar_nodes(jd, provider).ascending
    lat_deg = moon_latitude_deg(lon_deg, node)
    return MoonPosition(longitude=normalize_radians(lon_deg * DEG2RAD), latitude=lat_deg * DEG2RAD)


def planet_position(name: str, instant: Instant, provider: Optional[EphemerisProvider] = None) -> PlanetPosition:
    key = name.lower()
    if key not in PLANETS:
        raise UnknownBodyError(f"unknown planet: {name}")

    provider = provider or default_provider()
    jd = instant.julian_date
    helio = heliocentric_position(key, jd)

    lon_deg = provider.longitude_of(key, jd)
    if lon_deg is not None:
        lat_deg = or_else(provider.latitude_of(key, jd), lambda: 0.0)
        geo_lon = normalize_radians(lon_deg * DEG2RAD)
        geo_lat = lat_deg * DEG2RAD
    else:
        geo_lon, geo_lat = geocentric_estimate(key, jd)
        logger.warning(
            "ephemeris unavailable for %s, using Keplerian estimate %.4f deg", key, math.degrees(geo_lon)
        )

    return PlanetPosition(
        name=key,
        geocentric_longitude=geo_lon,
        geocentric_latitude=geo_lat,
        heliocentric_longitude=helio.longitude if helio else None,
        heliocentric_latitude=helio.latitude if helio else 0.0,
        heliocentric_distance=helio.distance if helio else None,
    )


def all_planet_positions(instant: Instant, provider: Optional[EphemerisProvider] = None) -> Dict[str, PlanetPosition]:
    return {name: planet_position(name, instant, provider) for name in PLANETS}


def earth_heliocentric(
    instant: Instant,
    provider: Optional[EphemerisProvider] = None,
    sun_lon: Optional[float] = None,
) -> HeliocentricPosition:
    """Earth sits opposite the Sun, on the ecliptic, at ~1 AU. Pass `sun_lon` to reuse a computed Sun."""
    sun = sun_longitude(instant, provider) if sun_lon is None else sun_lon
    return HeliocentricPosition(longitude=normalize_radians(sun + math.pi), latitude=0.0, distance=1.0)
