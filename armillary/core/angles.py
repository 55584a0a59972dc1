# armillary/core/angles.py
"""
Astrological angles (TROPICAL) via pure math.

CONVENTIONS
-----------
* Inputs: LST, latitude, obliquity in RADIANS.
* Outputs: ecliptic longitudes in DEGREES, normalized to [0, 360).
* Longitude east positive (LST already includes it).

NOTES
-----
1) The ascendant expression below, atan2(-cos θ, sin θ cos ε + tan φ sin ε),
   lands on the DESCENDANT in this algebraic arrangement; ASC is +180°.
2) Southern hemisphere: ASC and DSC are both rotated by 180°
   (compute_angles only). MC/IC and VTX/AVX are untouched.
3) No clamping near the poles: tan(φ) blows up and atan2 returns
   whatever IEEE arithmetic gives. Callers keep |lat| sane.
"""

import math
from typing import Tuple

from armillary.core.coords import RAD2DEG, normalize_degrees
from armillary.core.values import AnglesBundle


def _opposite(deg: float) -> float:
    return normalize_degrees(deg + 180.0)


def _raw_descendant(theta: float, eps: float, tan_phi: float) -> float:
    y = -math.cos(theta)
    x = math.sin(theta) * math.cos(eps) + tan_phi * math.sin(eps)
    return normalize_degrees(math.atan2(y, x) * RAD2DEG)


# ----------------- angles -----------------

def midheaven(theta: float, eps: float) -> float:
    """MC = atan2(sin θ, cos θ · cos ε)"""
    lam = math.atan2(math.sin(theta), math.cos(theta) * math.cos(eps))
    return normalize_degrees(lam * RAD2DEG)


def ascendant(theta: float, phi: float, eps: float) -> Tuple[float, float]:
    """Returns (ASC, DSC) without the hemisphere correction."""
    dsc = _raw_descendant(theta, eps, math.tan(phi))
    return _opposite(dsc), dsc


def vertex(theta: float, phi: float, eps: float) -> Tuple[float, float]:
    """
    Returns (VTX, AVX).

    Prime vertical ∩ ecliptic: the ascendant formula taken at the
    co-latitude (tan -> cot) and θ + 180°. That yields the eastern
    crossing (anti-vertex); the vertex is the western one.
    """
    tan_phi = math.tan(phi)
    if tan_phi == 0.0:
        cot_phi = math.copysign(math.inf, phi)
    else:
        cot_phi = 1.0 / tan_phi

    avx = _raw_descendant(theta + math.pi, eps, cot_phi)
    return _opposite(avx), avx


def compute_angles(theta: float, phi: float, eps: float) -> AnglesBundle:
    """All six angles from one (LST, latitude, obliquity) triple."""
    mc = midheaven(theta, eps)
    asc, dsc = ascendant(theta, phi, eps)
    vtx, avx = vertex(theta, phi, eps)

    # southern hemisphere: swap which cusp is labelled ASC
    if phi < 0:
        asc = _opposite(asc)
        dsc = _opposite(dsc)

    return AnglesBundle(
        mc=mc,
        ic=_opposite(mc),
        asc=asc,
        dsc=dsc,
        vtx=vtx,
        avx=avx,
    )
