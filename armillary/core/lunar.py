# armillary/core/lunar.py
import math

from armillary.core.coords import DEG2RAD, RAD2DEG, normalize_degrees
from armillary.core.jd import J2000
from armillary.core.values import LunarPhase, NodePair

MOON_INCLINATION_DEG = 5.145  # mean inclination to the ecliptic

# 45° buckets centred on 0°, 45°, ... (edges at 22.5, 67.5, ..., 337.5)
PHASE_NAMES = [
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
]


def _jd_T(jd: float) -> float:
    return (jd - J2000) / 36525.0


def elongation_deg(sun_lon_rad: float, moon_lon_rad: float) -> float:
    return normalize_degrees((moon_lon_rad - sun_lon_rad) * RAD2DEG)


def lunar_phase(sun_lon_rad: float, moon_lon_rad: float) -> LunarPhase:
    """
    Phase name + illuminated percentage from Sun/Moon ecliptic longitudes (radians).
    """
    e = elongation_deg(sun_lon_rad, moon_lon_rad)
    illumination = (1.0 - math.cos(e * DEG2RAD)) / 2.0 * 100.0

    idx = int(((e + 22.5) % 360.0) // 45.0) % 8
    return LunarPhase(name=PHASE_NAMES[idx], illumination=int(math.floor(illumination + 0.5)))


# ---------------------------------------------------------
# Mean lunar node (Meeus) + main perturbations -> true node
# ---------------------------------------------------------
def mean_lunar_node_deg(jd: float) -> float:
    T = _jd_T(jd)
    # Ω = 125.04452 - 1934.136261*T + 0.0020708*T^2 + T^3/450000
    Om = (
        125.04452
        - 1934.136261 * T
        + 0.0020708 * (T * T)
        + (T * T * T) / 450000.0
    )
    return normalize_degrees(Om)


def true_lunar_node_deg(jd: float) -> float:
    d = jd - J2000  # days

    M_sun = 357.5291092 + 0.98560028 * d
    M_moon = 134.9633964 + 13.06499295 * d
    F = 93.2720950 + 13.22935024 * d  # argument of latitude
    L = 218.3164477 + 13.17639648 * d  # mean longitude

    perturbation = (
        -1.4979 * math.sin(2 * (L - F) * DEG2RAD)
        - 0.1500 * math.sin(M_sun * DEG2RAD)
        - 0.1226 * math.sin(2 * L * DEG2RAD)
        + 0.1176 * math.sin(2 * F * DEG2RAD)
        - 0.0801 * math.sin(2 * (F + M_moon) * DEG2RAD)
    )
    return normalize_degrees(mean_lunar_node_deg(jd) + perturbation)


def lunar_nodes(jd: float, provider=None) -> NodePair:
    """
    Ascending/descending node (deg). Uses the provider's node when it
    publishes one, else the computed true node.
    """
    node = provider.lunar_node(jd) if provider is not None else None
    if node is None:
        node = true_lunar_node_deg(jd)
    node = normalize_degrees(node)
    return NodePair(ascending=node, descending=normalize_degrees(node + 180.0))


def lunar_argument_of_perigee(jd: float) -> float:
    """Mean argument of perigee ω (deg): 318.0634 + 6003.1498 T - 0.0128 T²"""
    T = _jd_T(jd)
    return normalize_degrees(318.0634 + 6003.1498 * T - 0.0128 * T * T)


def moon_latitude_deg(moon_lon_deg: float, node_deg: float) -> float:
    """β ≈ i · sin(λ − Ω)"""
    return MOON_INCLINATION_DEG * math.sin((moon_lon_deg - node_deg) * DEG2RAD)
