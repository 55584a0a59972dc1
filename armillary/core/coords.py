# armillary/core/coords.py
"""
Ecliptic <-> equatorial -> horizontal transforms (all radians).

These are closed-form and only approximately invertible (atan2 branch
cuts, asin rounding); compare round trips with a tolerance.
"""

import math
from typing import Tuple

DEG2RAD = math.pi / 180.0
RAD2DEG = 180.0 / math.pi
TWO_PI = 2.0 * math.pi


# ----------------- helpers -----------------

def normalize_degrees(x: float) -> float:
    """Canonical [0, 360)."""
    x = float(x) % 360.0
    # tiny negatives round up to exactly 360.0
    return 0.0 if x >= 360.0 else x


def normalize_radians(x: float) -> float:
    x = float(x) % TWO_PI
    return 0.0 if x >= TWO_PI else x


def _clamp_unit(v: float) -> float:
    return max(-1.0, min(1.0, v))


# ----------------- transforms -----------------

def ecliptic_to_equatorial(lam: float, beta: float, eps: float) -> Tuple[float, float]:
    """Ecliptic (lon, lat) -> equatorial (ra, dec). ra is atan2-ranged (-pi, pi]."""
    sin_dec = math.sin(beta) * math.cos(eps) + math.cos(beta) * math.sin(eps) * math.sin(lam)
    dec = math.asin(_clamp_unit(sin_dec))

    y = math.sin(lam) * math.cos(eps) - math.tan(beta) * math.sin(eps)
    x = math.cos(lam)
    ra = math.atan2(y, x)

    return ra, dec


def equatorial_to_ecliptic(ra: float, dec: float, eps: float) -> Tuple[float, float]:
    """Equatorial (ra, dec) -> ecliptic (lon, lat)."""
    y = math.sin(ra) * math.cos(eps) + math.tan(dec) * math.sin(eps)
    x = math.cos(ra)
    lon = math.atan2(y, x)

    sin_lat = math.sin(dec) * math.cos(eps) - math.cos(dec) * math.sin(eps) * math.sin(ra)
    lat = math.asin(_clamp_unit(sin_lat))

    return lon, lat


def equatorial_to_horizontal(ra: float, dec: float, lst: float, phi: float) -> Tuple[float, float]:
    """
    Equatorial -> horizontal (alt, az).
    Hour angle H = LST - RA; azimuth is measured from the south, westwards.
    """
    h = lst - ra

    sin_alt = math.sin(dec) * math.sin(phi) + math.cos(dec) * math.cos(phi) * math.cos(h)
    alt = math.asin(_clamp_unit(sin_alt))

    az = math.atan2(
        math.sin(h),
        math.cos(h) * math.sin(phi) - math.tan(dec) * math.cos(phi),
    )

    return alt, az
