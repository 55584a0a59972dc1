import math

import pytest

from armillary.core.jd import J2000
from armillary.core.kepler import (
    ORBITAL_ELEMENTS,
    PLANETS,
    geocentric_estimate,
    heliocentric_position,
    planetary_apsides,
    planetary_nodes,
    solve_kepler,
)


def test_circular_orbit_is_identity():
    assert solve_kepler(1.234, 0.0) == pytest.approx(1.234)


@pytest.mark.parametrize("M,e", [(0.1, 0.2), (1.0, 0.0934), (3.0, 0.2488), (5.5, 0.0484)])
def test_solution_satisfies_keplers_equation(M, e):
    E = solve_kepler(M, e)
    assert E - e * math.sin(E) == pytest.approx(M, abs=1e-9)


@pytest.mark.parametrize("name", PLANETS + ["earth"])
def test_heliocentric_distance_between_apsides(name):
    el = ORBITAL_ELEMENTS[name]
    pos = heliocentric_position(name, J2000 + 2000.0)
    assert el["a"] * (1 - el["e"]) - 1e-9 <= pos.distance <= el["a"] * (1 + el["e"]) + 1e-9
    assert 0.0 <= pos.longitude < 2 * math.pi
    assert abs(pos.latitude) <= math.radians(abs(el["I"])) + 1e-9


def test_earth_opposite_sun_at_j2000():
    # Sun ~280.4 deg geocentric -> Earth ~100.4 deg heliocentric
    earth = heliocentric_position("earth", J2000)
    assert math.degrees(earth.longitude) == pytest.approx(100.4, abs=0.5)


def test_unknown_body():
    assert heliocentric_position("vulcan", J2000) is None
    assert geocentric_estimate("vulcan", J2000) is None


def test_geocentric_estimate_ranges():
    lon, lat = geocentric_estimate("jupiter", J2000)
    # Jupiter ~25 deg (Aries) in January 2000
    assert math.degrees(lon) == pytest.approx(25.0, abs=3.0)
    assert abs(lat) < math.radians(2.0)


def test_planetary_nodes_skip_earth():
    nodes = planetary_nodes()
    assert "earth" not in nodes
    assert set(nodes) == set(PLANETS)
    assert nodes["mars"].ascending == pytest.approx(49.55953891)
    assert nodes["mars"].descending == pytest.approx(229.55953891)


def test_planetary_apsides():
    aps = planetary_apsides()
    mercury = aps["mercury"]
    assert mercury.perihelion_distance == pytest.approx(0.38709927 * (1 - 0.20563593))
    assert mercury.aphelion_distance == pytest.approx(0.38709927 * (1 + 0.20563593))
    assert (mercury.aphelion - mercury.perihelion) % 360.0 == pytest.approx(180.0)
    # negative element normalized
    assert aps["mars"].perihelion == pytest.approx(360.0 - 23.94362959)
