import logging
import math
from types import SimpleNamespace

import pytest

from armillary.core import ephemeris
from armillary.core.coords import DEG2RAD, RAD2DEG
from armillary.core.errors import UnknownBodyError
from armillary.core.ephemeris import (
    AnalyticProvider,
    EphemerisProvider,
    RecordProvider,
    SkyfieldProvider,
    all_planet_positions,
    build_provider,
    earth_heliocentric,
    mean_moon_longitude_deg,
    mean_sun_longitude_deg,
    moon_position,
    or_else,
    planet_position,
    first_number,
    sun_longitude,
)
from armillary.core.kepler import PLANETS, geocentric_estimate
from armillary.core.values import Instant


def _records(payload):
    return RecordProvider(lambda jd: payload)


# ----------------- fallbacks -----------------

def test_mean_sun_formula():
    assert mean_sun_longitude_deg(1) == 280.0
    assert mean_sun_longitude_deg(100) == pytest.approx((280.0 + 99 * 360.0 / 365.2425) % 360.0)


def test_mean_moon_formula():
    assert mean_moon_longitude_deg(10) == pytest.approx(131.76)
    assert mean_moon_longitude_deg(30) == pytest.approx((30 * 13.176) % 360.0)


def test_sun_fallback_is_logged_not_raised(unavailable, caplog):
    with caplog.at_level(logging.WARNING):
        lon = sun_longitude(Instant(2024, 1, 0.0), unavailable)
    assert lon == pytest.approx(280.0 * DEG2RAD)
    assert "ephemeris unavailable for Sun" in caplog.text


def test_sun_fallback_can_be_quiet(unavailable, caplog):
    with caplog.at_level(logging.WARNING):
        sun_longitude(Instant(2024, 1, 0.0), unavailable, log_fallback=False)
    assert "ephemeris unavailable" not in caplog.text


def test_moon_fallback(unavailable, caplog):
    with caplog.at_level(logging.WARNING):
        moon = moon_position(Instant(2024, 10, 0.0), unavailable)
    assert moon.longitude == pytest.approx(131.76 * DEG2RAD)
    assert moon.latitude == 0.0
    assert "ephemeris unavailable for Moon" in caplog.text


def test_or_else_only_calls_fallback_when_missing():
    calls = []

    def fallback():
        calls.append(1)
        return 5.0

    assert or_else(0.0, fallback) == 0.0
    assert calls == []
    assert or_else(None, fallback) == 5.0
    assert calls == [1]


# ----------------- providers never raise -----------------

class _Exploding(EphemerisProvider):
    name = "exploding"

    def _longitude(self, body, jd):
        raise RuntimeError("kernel missing")

    def _latitude(self, body, jd):
        raise RuntimeError("kernel missing")


def test_provider_exception_becomes_none():
    p = _Exploding()
    assert p.longitude_of("sun", 2451545.0) is None
    assert p.latitude_of("sun", 2451545.0) is None


def test_provider_exception_falls_back(j2000):
    assert sun_longitude(j2000, _Exploding()) == pytest.approx(mean_sun_longitude_deg(1) * DEG2RAD)


def test_skyfield_unknown_body_is_none():
    assert SkyfieldProvider().longitude_of("vulcan", 2451545.0) is None


# ----------------- record probing -----------------

def test_record_observed_field():
    p = _records({"observed": {"sun": {"apparentLongitudeDd": 123.5}}})
    assert p.longitude_of("sun", 0.0) == 123.5
    assert sun_longitude(Instant(2024, 1), p) == pytest.approx(123.5 * DEG2RAD)


def test_record_body_at_top_level():
    p = _records({"moon": {"longitude": 10, "latitude": -2.5}})
    assert p.longitude_of("Moon", 0.0) == 10.0
    assert p.latitude_of("moon", 0.0) == -2.5


def test_record_attribute_access():
    p = _records(SimpleNamespace(observed=SimpleNamespace(mars=SimpleNamespace(lon=45.0, beta=1.5))))
    assert p.longitude_of("mars", 0.0) == 45.0
    assert p.latitude_of("mars", 0.0) == 1.5


def test_record_lookup_skips_nan_and_non_numbers():
    record = {"apparentLongitudeDd": float("nan"), "longitude": "12", "lon": True, "lambda": 12.0}
    assert first_number(record, ephemeris.LONGITUDE_FIELDS) == 12.0
    assert first_number(None, ephemeris.LONGITUDE_FIELDS) is None
    assert first_number({"longitude": None}, ephemeris.LONGITUDE_FIELDS) is None


def test_record_longitude_is_normalized():
    assert _records({"sun": {"lon": -10.0}}).longitude_of("sun", 0.0) == 350.0


def test_record_missing_body():
    assert _records({"observed": {}}).longitude_of("sun", 0.0) is None
    assert RecordProvider(lambda jd: None).longitude_of("sun", 0.0) is None


def test_record_fetch_raising_is_none():
    def fetch(jd):
        raise ConnectionError("offline")

    assert RecordProvider(fetch).longitude_of("sun", 0.0) is None


def test_record_lunar_node():
    assert _records({"observed": {"moon": {"node": 100.0}}}).lunar_node(0.0) == 100.0
    assert _records({"observed": {"moon": {"node": {"longitude": 370.0}}}}).lunar_node(0.0) == pytest.approx(10.0)
    assert _records({"observed": {"moon": {}}}).lunar_node(0.0) is None


# ----------------- analytic series -----------------

def test_analytic_sun_at_j2000(analytic, j2000):
    assert sun_longitude(j2000, analytic) * RAD2DEG == pytest.approx(280.37, abs=0.05)


def test_analytic_sun_near_equinox(analytic):
    # 2024-03-20 03:06 UTC
    lon = sun_longitude(Instant(2024, 80, 186.0), analytic) * RAD2DEG
    assert min(lon, 360.0 - lon) < 0.05


def test_analytic_moon_at_j2000(analytic, j2000):
    moon = moon_position(j2000, analytic)
    assert moon.longitude * RAD2DEG == pytest.approx(223.3, abs=0.5)
    assert abs(moon.latitude) <= math.radians(5.2)


# ----------------- planets -----------------

def test_unknown_planet_raises(j2000, analytic):
    with pytest.raises(UnknownBodyError):
        planet_position("vulcan", j2000, analytic)
    with pytest.raises(UnknownBodyError):
        planet_position("earth", j2000, analytic)


def test_planet_fallback_uses_keplerian_estimate(j2000, unavailable, caplog):
    with caplog.at_level(logging.WARNING):
        mars = planet_position("Mars", j2000, unavailable)
    lon, lat = geocentric_estimate("mars", j2000.julian_date)
    assert mars.name == "mars"
    assert mars.geocentric_longitude == lon
    assert mars.geocentric_latitude == lat
    assert 1.38 < mars.heliocentric_distance < 1.67
    assert "ephemeris unavailable for mars" in caplog.text


def test_planet_from_records(j2000):
    p = _records({"observed": {"venus": {"apparentLongitudeDd": 271.0}}})
    venus = planet_position("venus", j2000, p)
    assert venus.geocentric_longitude == pytest.approx(271.0 * DEG2RAD)
    assert venus.geocentric_latitude == 0.0
    assert venus.heliocentric_longitude is not None


def test_all_planets(j2000, analytic):
    planets = all_planet_positions(j2000, analytic)
    assert list(planets) == PLANETS
    for p in planets.values():
        assert 0.0 <= p.geocentric_longitude < 2 * math.pi


def test_earth_sits_opposite_the_sun(j2000, analytic):
    sun = sun_longitude(j2000, analytic)
    earth = earth_heliocentric(j2000, analytic)
    assert (earth.longitude - sun) % (2 * math.pi) == pytest.approx(math.pi)
    assert earth.distance == 1.0


# ----------------- backend selection -----------------

def test_build_provider():
    assert isinstance(build_provider("analytic"), AnalyticProvider)
    assert isinstance(build_provider("skyfield"), SkyfieldProvider)


def test_unknown_backend_logs_and_uses_analytic(caplog):
    with caplog.at_level(logging.WARNING):
        provider = build_provider("horizons")
    assert isinstance(provider, AnalyticProvider)
    assert "unknown ephemeris backend" in caplog.text
