# armillary/core/kepler.py
"""
Heliocentric planet positions from J2000 Keplerian elements.

Elements are the JPL approximate set (valid ~1800-2050) held fixed; only
the mean longitude advances, at (360/365.25) / a^1.5 degrees per day.
Good enough for placing planets in a scene, not for ephemeris work.
"""

import math
from typing import Dict, Optional, Tuple

from armillary.core.coords import DEG2RAD, normalize_degrees, normalize_radians
from armillary.core.jd import J2000
from armillary.core.values import Apsides, HeliocentricPosition, NodePair

# a: AU, e, I: deg, L: mean longitude deg, pomega: long. of perihelion deg, Omega: asc. node deg
ORBITAL_ELEMENTS: Dict[str, Dict[str, float]] = {
    "mercury": {"a": 0.38709927, "e": 0.20563593, "I": 7.00497902, "L": 252.25032350, "pomega": 77.45779628, "Omega": 48.33076593},
    "venus": {"a": 0.72333566, "e": 0.00677672, "I": 3.39467605, "L": 181.97909950, "pomega": 131.60246718, "Omega": 76.67984255},
    "earth": {"a": 1.00000261, "e": 0.01671123, "I": -0.00001531, "L": 100.46457166, "pomega": 102.93768193, "Omega": 0.0},
    "mars": {"a": 1.52371034, "e": 0.09339410, "I": 1.84969142, "L": -4.55343205, "pomega": -23.94362959, "Omega": 49.55953891},
    "jupiter": {"a": 5.20288700, "e": 0.04838624, "I": 1.30439695, "L": 34.39644051, "pomega": 14.72847983, "Omega": 100.47390909},
    "saturn": {"a": 9.53667594, "e": 0.05386179, "I": 2.48599187, "L": 49.95424423, "pomega": 92.59887831, "Omega": 113.66242448},
    "uranus": {"a": 19.18916464, "e": 0.04725744, "I": 0.77263783, "L": 313.23810451, "pomega": 170.95427630, "Omega": 74.01692503},
    "neptune": {"a": 30.06992276, "e": 0.00859048, "I": 1.77004347, "L": -55.12002969, "pomega": 44.96476227, "Omega": 131.78422574},
    "pluto": {"a": 39.48211675, "e": 0.24882730, "I": 17.14001206, "L": 238.92903833, "pomega": 224.06891629, "Omega": 110.30393684},
}

PLANETS = ["mercury", "venus", "mars", "jupiter", "saturn", "uranus", "neptune", "pluto"]


def solve_kepler(M: float, e: float, tolerance: float = 1e-8, max_iterations: int = 30) -> float:
    """Newton-Raphson on M = E - e sin E. Returns E (radians), best guess if not converged."""
    E = M
    for _ in range(max_iterations):
        dE = (E - e * math.sin(E) - M) / (1.0 - e * math.cos(E))
        E -= dE
        if abs(dE) < tolerance:
            break
    return E


def heliocentric_xyz(name: str, jd: float) -> Optional[Tuple[float, float, float]]:
    """Heliocentric ecliptic cartesian position (AU), None for unknown bodies."""
    el = ORBITAL_ELEMENTS.get(name)
    if el is None:
        return None

    a = el["a"]
    e = el["e"]
    inc = el["I"] * DEG2RAD
    pomega = el["pomega"] * DEG2RAD
    node = el["Omega"] * DEG2RAD
    omega = pomega - node  # argument of perihelion

    n = (360.0 / 365.25) * DEG2RAD / a ** 1.5  # rad/day
    L = el["L"] * DEG2RAD + n * (jd - J2000)
    M = normalize_radians(L - pomega)

    E = solve_kepler(M, e)
    nu = 2.0 * math.atan2(math.sqrt(1 + e) * math.sin(E / 2), math.sqrt(1 - e) * math.cos(E / 2))
    r = a * (1 - e * math.cos(E))

    # orbital plane -> rotate ω (z), I (x), Ω (z)
    x_orb = r * math.cos(nu)
    y_orb = r * math.sin(nu)

    x1 = x_orb * math.cos(omega) - y_orb * math.sin(omega)
    y1 = x_orb * math.sin(omega) + y_orb * math.cos(omega)

    y2 = y1 * math.cos(inc)
    z2 = y1 * math.sin(inc)

    x3 = x1 * math.cos(node) - y2 * math.sin(node)
    y3 = x1 * math.sin(node) + y2 * math.cos(node)
    return x3, y3, z2


def _to_spherical(x: float, y: float, z: float) -> Tuple[float, float, float]:
    lon = normalize_radians(math.atan2(y, x))
    lat = math.atan2(z, math.hypot(x, y))
    return lon, lat, math.sqrt(x * x + y * y + z * z)


def heliocentric_position(name: str, jd: float) -> Optional[HeliocentricPosition]:
    xyz = heliocentric_xyz(name, jd)
    if xyz is None:
        return None
    lon, lat, dist = _to_spherical(*xyz)
    return HeliocentricPosition(longitude=lon, latitude=lat, distance=dist)


def geocentric_estimate(name: str, jd: float) -> Optional[Tuple[float, float]]:
    """
    Geocentric ecliptic (lon, lat) in radians from planet minus Earth
    heliocentric vectors. Used when no ephemeris answers for a planet.
    """
    planet = heliocentric_xyz(name, jd)
    earth = heliocentric_xyz("earth", jd)
    if planet is None or earth is None:
        return None
    lon, lat, _ = _to_spherical(planet[0] - earth[0], planet[1] - earth[1], planet[2] - earth[2])
    return lon, lat


def planetary_nodes() -> Dict[str, NodePair]:
    """J2000 ascending/descending node longitudes (deg). Earth defines the ecliptic, so no nodes."""
    return {
        name: NodePair(
            ascending=normalize_degrees(el["Omega"]),
            descending=normalize_degrees(el["Omega"] + 180.0),
        )
        for name, el in ORBITAL_ELEMENTS.items()
        if name != "earth"
    }


def planetary_apsides() -> Dict[str, Apsides]:
    return {
        name: Apsides(
            perihelion=normalize_degrees(el["pomega"]),
            aphelion=normalize_degrees(el["pomega"] + 180.0),
            perihelion_distance=el["a"] * (1 - el["e"]),
            aphelion_distance=el["a"] * (1 + el["e"]),
        )
        for name, el in ORBITAL_ELEMENTS.items()
    }
