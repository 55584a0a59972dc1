# armillary/core/engine.py
"""
One call per frame: (instant, location) -> SphereState.

The Julian Date is computed once from the Instant and threaded through
every formula below; nothing here keeps state between calls except the
optional RiseSetCache the caller hands in.
"""

from typing import Dict, Optional

from armillary.core.angles import compute_angles
from armillary.core.coords import DEG2RAD, RAD2DEG, normalize_degrees
from armillary.core.ephemeris import (
    EphemerisProvider,
    all_planet_positions,
    default_provider,
    earth_heliocentric,
    moon_position,
    sun_longitude,
)
from armillary.core.kepler import planetary_apsides, planetary_nodes
from armillary.core.lunar import lunar_argument_of_perigee, lunar_nodes, lunar_phase
from armillary.core.riseset import RiseSetCache, rise_set_transit
from armillary.core.sidereal import lst_deg, lst_to_time_string, obliquity
from armillary.core.values import GeoLocation, Instant, SphereState
from armillary.core.zodiac import ayanamsha, to_zodiac_string


def compute_sphere_state(
    instant: Instant,
    location: GeoLocation,
    provider: Optional[EphemerisProvider] = None,
    sidereal: bool = False,
    timezone: Optional[str] = None,
    rise_set_cache: Optional[RiseSetCache] = None,
    include_planets: bool = True,
    include_rise_set: bool = True,
) -> SphereState:
    provider = provider or default_provider()

    jd = instant.julian_date
    lst = lst_deg(jd, location.longitude_deg)
    eps = obliquity(jd)

    angles = compute_angles(lst * DEG2RAD, location.latitude_rad, eps)

    sun = sun_longitude(instant, provider)
    moon = moon_position(instant, provider)
    phase = lunar_phase(sun, moon.longitude)
    nodes = lunar_nodes(jd, provider)

    planets = all_planet_positions(instant, provider) if include_planets else {}
    orbit_nodes = planetary_nodes() if include_planets else {}
    orbit_apsides = planetary_apsides() if include_planets else {}
    earth = earth_heliocentric(instant, provider, sun_lon=sun)

    ayan_deg = ayanamsha(instant.year) * RAD2DEG if sidereal else 0.0

    def zod(deg: float) -> str:
        return to_zodiac_string(normalize_degrees(deg - ayan_deg))

    zodiac: Dict[str, str] = {
        "MC": zod(angles.mc),
        "ASC": zod(angles.asc),
        "Sun": zod(sun * RAD2DEG),
        "Moon": zod(moon.longitude * RAD2DEG),
        "NorthNode": zod(nodes.ascending),
    }
    for name, p in planets.items():
        zodiac[name.capitalize()] = zod(p.geocentric_longitude * RAD2DEG)

    rise_set = None
    if include_rise_set:
        if rise_set_cache is not None:
            rise_set = rise_set_cache.get_or_compute(
                location.latitude_deg, location.longitude_deg, instant.day_of_year, instant.year, timezone, provider
            )
        else:
            rise_set = rise_set_transit(
                location.latitude_deg, location.longitude_deg, instant.day_of_year, instant.year, timezone, provider
            )

    return SphereState(
        julian_date=jd,
        lst_deg=lst,
        lst_time=lst_to_time_string(lst),
        obliquity_rad=eps,
        angles=angles,
        sun_lon_rad=sun,
        moon=moon,
        lunar_phase=phase,
        lunar_nodes=nodes,
        ayanamsha_deg=ayan_deg,
        planets=planets,
        zodiac=zodiac,
        rise_set=rise_set,
        planetary_nodes=orbit_nodes,
        planetary_apsides=orbit_apsides,
        earth=earth,
        lunar_perigee_deg=lunar_argument_of_perigee(jd),
    )
