# armillary/core/riseset.py
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from armillary.core import settings
from armillary.core.coords import DEG2RAD, ecliptic_to_equatorial, equatorial_to_horizontal
from armillary.core.ephemeris import EphemerisProvider, default_provider, sun_longitude
from armillary.core.jd import utc_minutes_to_local_hm
from armillary.core.sidereal import lst_deg, obliquity
from armillary.core.values import Instant, RiseSetResult

logger = logging.getLogger(__name__)

SUN_ANGULAR_RADIUS_DEG = 0.267
ATMOSPHERIC_REFRACTION_DEG = 0.567
# about -0.833°
ALTITUDE_AT_RISE_SET = -(SUN_ANGULAR_RADIUS_DEG + ATMOSPHERIC_REFRACTION_DEG) * DEG2RAD

NO_SUNRISE = "No sunrise"
NO_SUNSET = "No sunset"
ALWAYS_UP = "24h sun"
NO_TIME = "--:--"

MINUTES_PER_DAY = 1440

SunSource = Callable[[Instant], float]


def _sun_altitude_fn(
    day: Instant, latitude: float, longitude: float, source: SunSource
) -> Callable[[int], float]:
    eps = obliquity(day.julian_date)
    phi = latitude * DEG2RAD

    def altitude(minute: int) -> float:
        inst = day.at_minutes(minute)
        lam = source(inst)
        ra, dec = ecliptic_to_equatorial(lam, 0.0, eps)
        lst = lst_deg(inst.julian_date, longitude) * DEG2RAD
        alt, _ = equatorial_to_horizontal(ra, dec, lst, phi)
        return alt

    return altitude


def scan_day(altitude: Callable[[int], float]) -> Tuple[Optional[int], Optional[int], int]:
    """
    Minute-resolution scan over one UTC day.
    Returns (sunrise, sunset, transit) as minute-of-day; a crossing that
    is not found is None. Transit is the highest sampled minute.

    Stops as soon as both crossings are seen. A sunset seen before the
    sunrise (sun already up at 00:00 UTC) is returned as found; the
    previous day's sunrise is not searched for.
    """
    sunrise = sunset = None
    prev = altitude(0)
    max_alt, transit = prev, 0

    for minute in range(1, MINUTES_PER_DAY):
        alt = altitude(minute)

        if alt > max_alt:
            max_alt = alt
            transit = minute

        if sunrise is None and prev < ALTITUDE_AT_RISE_SET <= alt:
            sunrise = minute

        if sunset is None and prev > ALTITUDE_AT_RISE_SET >= alt:
            sunset = minute

        prev = alt
        if sunrise is not None and sunset is not None:
            break

    return sunrise, sunset, transit


def rise_set_transit(
    latitude: float,
    longitude: float,
    day_of_year: int,
    year: int,
    timezone: Optional[str] = None,
    provider: Optional[EphemerisProvider] = None,
    sun_longitude_source: Optional[SunSource] = None,
) -> RiseSetResult:
    """
    Sunrise / sunset / transit for a UTC day at (latitude, longitude east).

    Output: "HH:MM" strings in `timezone` when given, else UTC.
    Polar night -> ("No sunrise", "No sunset", "--:--")
    Polar day   -> ("24h sun", "24h sun", "--:--")

    The polar verdict samples 12:00 UT rather than local noon. With no
    crossing in the scan the altitude stays on one side of the threshold
    all day, so any sampled minute gives the same answer.
    """
    day = Instant(year, day_of_year, 0.0)

    if sun_longitude_source is None:
        provider = provider or default_provider()
        if provider.longitude_of("sun", day.julian_date) is None:
            logger.warning("ephemeris unavailable for Sun, rise/set uses the mean longitude")

        def sun_longitude_source(inst: Instant) -> float:
            return sun_longitude(inst, provider, log_fallback=False)

    altitude = _sun_altitude_fn(day, latitude, longitude, sun_longitude_source)
    sunrise, sunset, transit = scan_day(altitude)

    if sunrise is None and sunset is None:
        if altitude(12 * 60) < ALTITUDE_AT_RISE_SET:
            return RiseSetResult(sunrise=NO_SUNRISE, sunset=NO_SUNSET, transit=NO_TIME)
        return RiseSetResult(sunrise=ALWAYS_UP, sunset=ALWAYS_UP, transit=NO_TIME)

    # one crossing only: the other keeps the nominal 06:00 / 18:00 UT
    sunrise = 6 * 60 if sunrise is None else sunrise
    sunset = 18 * 60 if sunset is None else sunset

    def fmt(minute: int) -> str:
        return utc_minutes_to_local_hm(year, day_of_year, minute, timezone, longitude)

    return RiseSetResult(sunrise=fmt(sunrise), sunset=fmt(sunset), transit=fmt(transit))


# ----------------- Rise/set result cache -----------------
CacheKey = Tuple[int, int, float, float, Optional[str], str]


class RiseSetCache:
    """
    Rise/set results keyed by (day, year, lat, lon, timezone, provider).
    Lat/lon are rounded to 0.01° so that dragging the time slider or
    jittering the location does not trigger the 1440-step scan again.
    The provider name is part of the key: a result computed from one
    ephemeris is never served to a caller using another.
    A different key replaces the oldest entry; maxsize=1 is the
    "last computed" memo.
    """

    def __init__(self, maxsize: int = settings.RISESET_CACHE_SIZE):
        self.maxsize = max(1, int(maxsize))
        self._entries: "OrderedDict[CacheKey, RiseSetResult]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(
        day_of_year: int,
        year: int,
        latitude: float,
        longitude: float,
        timezone: Optional[str] = None,
        provider: Optional[EphemerisProvider] = None,
    ) -> CacheKey:
        provider = provider or default_provider()
        return (
            int(day_of_year),
            int(year),
            round(float(latitude), 2),
            round(float(longitude), 2),
            timezone or None,
            provider.name,
        )

    def get(self, key: CacheKey) -> Optional[RiseSetResult]:
        with self._lock:
            hit = self._entries.get(key)
            if hit is not None:
                self._entries.move_to_end(key)
            return hit

    def put(self, key: CacheKey, result: RiseSetResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def get_or_compute(
        self,
        latitude: float,
        longitude: float,
        day_of_year: int,
        year: int,
        timezone: Optional[str] = None,
        provider: Optional[EphemerisProvider] = None,
    ) -> RiseSetResult:
        provider = provider or default_provider()
        key = self.make_key(day_of_year, year, latitude, longitude, timezone, provider)
        hit = self.get(key)
        if hit is not None:
            return hit

        logger.debug("recalculating sunrise/sunset for %s", key)
        result = rise_set_transit(latitude, longitude, day_of_year, year, timezone, provider)
        self.put(key, result)
        return result

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries
