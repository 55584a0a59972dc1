import pytest

from armillary.core.ephemeris import AnalyticProvider, UnavailableProvider
from armillary.core.values import Instant


@pytest.fixture
def analytic():
    return AnalyticProvider()


@pytest.fixture
def unavailable():
    return UnavailableProvider()


@pytest.fixture
def j2000():
    # 2000-01-01 12:00 UTC
    return Instant(2000, 1, 720.0)
