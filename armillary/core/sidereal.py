# armillary/core/sidereal.py
import logging
import math
from typing import Callable, Dict, Tuple, Union

from armillary.core import settings
from armillary.core.coords import normalize_degrees as wrap360
from armillary.core.jd import J2000, julian_date

logger = logging.getLogger(__name__)

# nominal mean obliquity (radians); used whenever the polynomial misbehaves
NOMINAL_OBLIQUITY = 23.44 * math.pi / 180.0

ARCSEC = 4.8481368110953599359e-6  # radians per arcsecond

ObliquityModel = Callable[[float], float]


def _jd_T(jd: float) -> float:
    # Julian centuries from J2000.0
    return (jd - J2000) / 36525.0


# ---------------------------------------------------------
# Greenwich mean sidereal time (deg) + local sidereal
# ---------------------------------------------------------
def gmst_deg(jd_ut: float) -> float:
    T = _jd_T(jd_ut)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd_ut - J2000)
        + 0.000387933 * (T * T)
        - (T * T * T) / 38710000.0
    )
    return wrap360(gmst)


def lst_deg(jd_ut: float, lon_deg_east: float) -> float:
    return wrap360(gmst_deg(jd_ut) + lon_deg_east)


def local_sidereal_time(
    year: int, day_of_year: int, minutes_utc: float, lon_deg_east: float
) -> Tuple[float, float]:
    """
    Returns (LST degrees 0..360, julian date).
    minutes_utc is minutes since 00:00 UTC; longitude east positive.
    """
    jd = julian_date(year, day_of_year, minutes_utc)
    return lst_deg(jd, lon_deg_east), jd


def lst_to_time_string(lst: float) -> str:
    """LST degrees -> sidereal clock "HH:MM"."""
    lst = wrap360(lst)
    hours = int(lst // 15)
    minutes = int((lst % 15) * 4)
    return f"{hours:02d}:{minutes:02d}"


# ---------------------------------------------------------
# Obliquity of the ecliptic
# ---------------------------------------------------------
def obliquity_polynomial(jd: float) -> float:
    """High-precision obliquity (radians): ten-term series in T/10 (arcsec)."""
    t = _jd_T(jd) / 10.0
    eps = (((((((((2.45e-10 * t + 5.79e-9) * t + 2.787e-7) * t
                 + 7.12e-7) * t - 3.905e-5) * t - 2.4967e-3) * t
              - 5.138e-3) * t + 1.9989) * t - 0.0175) * t - 468.33960) * t + 84381.406173
    return eps * ARCSEC


def obliquity_iau1980(jd: float) -> float:
    """IAU 1980 mean obliquity (radians): Meeus cubic in T (arcsec)."""
    T = _jd_T(jd)
    eps = 84381.448 + T * (-46.8150 + T * (-0.00059 + T * 0.001813))
    return eps * ARCSEC


OBLIQUITY_MODELS: Dict[str, ObliquityModel] = {
    "laskar": obliquity_polynomial,
    "iau1980": obliquity_iau1980,
}


def obliquity_model(name: str) -> ObliquityModel:
    model = OBLIQUITY_MODELS.get(name.strip().lower())
    if model is None:
        logger.warning("unknown obliquity model %r, using laskar", name)
        return obliquity_polynomial
    return model


# resolved once; ARMILLARY_OBLIQUITY_MODEL
DEFAULT_OBLIQUITY_MODEL = obliquity_model(settings.OBLIQUITY_MODEL)


def obliquity(jd: float, model: Union[str, ObliquityModel, None] = None) -> float:
    """
    Obliquity in radians for the given JD. `model` is a callable or a key
    of OBLIQUITY_MODELS (default: the configured one). Never NaN: a model
    that raises or returns something non-numeric falls back to
    NOMINAL_OBLIQUITY.
    """
    if model is None:
        model = DEFAULT_OBLIQUITY_MODEL
    elif isinstance(model, str):
        model = obliquity_model(model)

    try:
        eps = model(jd)
        if isinstance(eps, (int, float)) and not isinstance(eps, bool) and math.isfinite(eps):
            return float(eps)
        logger.warning("obliquity model returned %r, using nominal obliquity", eps)
    except Exception as exc:
        logger.warning("obliquity model failed (%s), using nominal obliquity", exc)
    return NOMINAL_OBLIQUITY
