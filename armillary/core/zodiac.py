# armillary/core/zodiac.py
import math
from typing import NamedTuple

from armillary.core.coords import DEG2RAD, equatorial_to_ecliptic

# text presentation (U+FE0E) so browsers do not draw emoji glyphs
SIGN_GLYPHS = [
    "♈︎", "♉︎", "♊︎", "♋︎", "♌︎", "♍︎",
    "♎︎", "♏︎", "♐︎", "♑︎", "♒︎", "♓︎",
]

SIGN_NAMES = [
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]


class ZodiacPosition(NamedTuple):
    sign_index: int  # 0..11
    degrees: int  # 0..29
    minutes: int  # 0..59


def zodiac_position(longitude: float) -> ZodiacPosition:
    """
    Split an ecliptic longitude (deg) into sign / degree / arcminute.
    Residual arcseconds >= 30 round the minute up, carrying into the
    degree and then the sign (29°59'31" of Aries -> 0°00' Taurus).
    """
    lon = longitude % 360.0
    sign = int(lon // 30) % 12
    degree = lon % 30
    whole = int(math.floor(degree))
    decimal_minutes = (degree - whole) * 60
    minutes = int(math.floor(decimal_minutes))
    seconds = (decimal_minutes - minutes) * 60

    if seconds >= 30:
        minutes += 1
        if minutes >= 60:
            minutes = 0
            whole += 1
            if whole >= 30:
                whole = 0
                sign = (sign + 1) % 12

    return ZodiacPosition(sign, whole, minutes)


def to_zodiac_string(longitude: float) -> str:
    """e.g. 40.0833 -> "10♉︎05" """
    pos = zodiac_position(longitude)
    return f"{pos.degrees:02d}{SIGN_GLYPHS[pos.sign_index]}{pos.minutes:02d}"


def sign_name(longitude: float) -> str:
    return SIGN_NAMES[zodiac_position(longitude).sign_index]


# ---------------------------------------------------------
# Fagan/Bradley ayanamsha (Aldebaran at 15° Taurus)
# ---------------------------------------------------------
ALDEBARAN_RA_HOURS = 4.599
ALDEBARAN_DEC_DEG = 16.51
OBLIQUITY_J2000_DEG = 23.43929
PRECESSION_ARCSEC_PER_YEAR = 50.29


def ayanamsha(year: int) -> float:
    """Tropical minus sidereal longitude, radians."""
    ra = ALDEBARAN_RA_HOURS * 15 * DEG2RAD
    dec = ALDEBARAN_DEC_DEG * DEG2RAD
    lon, _ = equatorial_to_ecliptic(ra, dec, OBLIQUITY_J2000_DEG * DEG2RAD)

    precession = (year - 2000) * (PRECESSION_ARCSEC_PER_YEAR / 3600.0) * DEG2RAD
    return lon + precession - 45.0 * DEG2RAD
