import math

import pytest

from armillary.core.angles import ascendant, compute_angles, midheaven, vertex
from armillary.core.coords import DEG2RAD, ecliptic_to_equatorial, equatorial_to_horizontal

EPS = 23.4392794 * DEG2RAD

THETAS = [0.0, 0.4, 1.3, 2.2, 3.1, 3.9, 4.7, 5.6]
LATS = [-60.0, -33.9, -5.0, 5.0, 40.0, 51.5, 65.0]


def _sep(a, b):
    """Smallest angular separation, degrees."""
    d = (a - b) % 360.0
    return min(d, 360.0 - d)


def _horizontal(lam_deg, theta, phi):
    ra, dec = ecliptic_to_equatorial(lam_deg * DEG2RAD, 0.0, EPS)
    return equatorial_to_horizontal(ra, dec, theta, phi)


def test_midheaven_cardinal_points():
    assert midheaven(0.0, EPS) == pytest.approx(0.0, abs=1e-9)
    assert midheaven(math.pi / 2, EPS) == pytest.approx(90.0)
    assert midheaven(math.pi, EPS) == pytest.approx(180.0)
    assert midheaven(3 * math.pi / 2, EPS) == pytest.approx(270.0)


def test_ascendant_at_equator_with_aries_culminating():
    asc, dsc = ascendant(0.0, 0.0, EPS)
    assert asc == pytest.approx(90.0)
    assert dsc == pytest.approx(270.0)


def test_london_ramc_zero():
    # about 26-27 degrees of Cancer
    asc, _ = ascendant(0.0, 51.5 * DEG2RAD, EPS)
    assert 115.0 < asc < 118.0


@pytest.mark.parametrize("theta", THETAS)
@pytest.mark.parametrize("lat", LATS)
def test_complements_are_opposite(theta, lat):
    a = compute_angles(theta, lat * DEG2RAD, EPS)
    assert _sep(a.ic, a.mc + 180.0) < 1e-9
    assert _sep(a.dsc, a.asc + 180.0) < 1e-9
    assert _sep(a.avx, a.vtx + 180.0) < 1e-9
    for value in a.as_dict().values():
        assert 0.0 <= value < 360.0


@pytest.mark.parametrize("theta", THETAS)
def test_northern_ascendant_rises_in_the_east(theta):
    phi = 40.0 * DEG2RAD
    asc, dsc = ascendant(theta, phi, EPS)

    alt, az = _horizontal(asc, theta, phi)
    assert alt == pytest.approx(0.0, abs=1e-7)
    assert math.sin(az) < 0  # east of the meridian

    alt, az = _horizontal(dsc, theta, phi)
    assert alt == pytest.approx(0.0, abs=1e-7)
    assert math.sin(az) > 0


@pytest.mark.parametrize("theta", THETAS)
@pytest.mark.parametrize("lat", LATS)
def test_southern_hemisphere_swaps_asc_and_dsc(theta, lat):
    phi = lat * DEG2RAD
    asc, dsc = ascendant(theta, phi, EPS)
    a = compute_angles(theta, phi, EPS)
    if lat < 0:
        assert _sep(a.asc, asc + 180.0) < 1e-9
        assert _sep(a.dsc, dsc + 180.0) < 1e-9
    else:
        assert a.asc == asc
        assert a.dsc == dsc


def test_southern_flip_leaves_meridian_and_vertex_alone():
    theta = 2.0
    north = compute_angles(theta, 30.0 * DEG2RAD, EPS)
    south = compute_angles(theta, -30.0 * DEG2RAD, EPS)
    assert north.mc == south.mc
    vtx, avx = vertex(theta, -30.0 * DEG2RAD, EPS)
    assert (south.vtx, south.avx) == (vtx, avx)


@pytest.mark.parametrize("theta", THETAS)
def test_vertex_lies_on_the_prime_vertical(theta):
    phi = 45.0 * DEG2RAD
    vtx, avx = vertex(theta, phi, EPS)
    for lam in (vtx, avx):
        _, az = _horizontal(lam, theta, phi)
        assert math.cos(az) == pytest.approx(0.0, abs=1e-7)


def test_vertex_at_equator_does_not_divide_by_zero():
    vtx, avx = vertex(1.0, 0.0, EPS)
    assert math.isfinite(vtx)
    assert math.isfinite(avx)
    assert _sep(avx, vtx + 180.0) < 1e-9


def test_as_dict_keys():
    a = compute_angles(1.0, 0.7, EPS)
    assert list(a.as_dict()) == ["MC", "IC", "ASC", "DSC", "VTX", "AVX"]
