from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from engine.core_types import GeoLocation
from engine.sunrise import SwissSunriseSolver, horizon_altitude
from interfaces import SunriseSolver

KELOWNA = GeoLocation(latitude=49.8880, longitude=-119.4960, timezone="America/Vancouver")
GREENWICH = GeoLocation(latitude=51.4769, longitude=0.0)
LONGYEARBYEN = GeoLocation(latitude=78.2232, longitude=15.6267)


@pytest.fixture(scope="module")
def solver():
    return SwissSunriseSolver()


def test_solver_satisfies_protocol(solver):
    assert isinstance(solver, SunriseSolver)


def test_horizon_altitude_includes_dip():
    assert horizon_altitude(GREENWICH) == pytest.approx(-0.8333)
    high = GeoLocation(latitude=0.0, longitude=0.0, altitude=400.0)
    assert horizon_altitude(high) == pytest.approx(-0.8333 - 0.0347 * 20.0)


def test_kelowna_midsummer(solver):
    times = solver.sunrise_sunset(date(2025, 7, 20), KELOWNA)
    assert times.is_complete
    # About 05:10 and 20:55 Pacific Daylight Time
    assert datetime(2025, 7, 20, 11, 50, tzinfo=UTC) <= times.sunrise <= datetime(2025, 7, 20, 12, 35, tzinfo=UTC)
    assert datetime(2025, 7, 21, 3, 30, tzinfo=UTC) <= times.sunset <= datetime(2025, 7, 21, 4, 25, tzinfo=UTC)
    assert timedelta(hours=15) < times.day_length < timedelta(hours=16, minutes=30)


def test_greenwich_equinox_day_length(solver):
    times = solver.sunrise_sunset(date(2025, 3, 20), GREENWICH)
    assert timedelta(hours=12) < times.day_length < timedelta(hours=12, minutes=20)
    assert times.sunrise.hour == 6


def test_sun_is_up_between_rise_and_set(solver):
    times = solver.sunrise_sunset(date(2025, 3, 20), GREENWICH)
    threshold = horizon_altitude(GREENWICH)
    before = solver.sun_altitude(times.sunrise - timedelta(minutes=5), GREENWICH)
    after = solver.sun_altitude(times.sunrise + timedelta(minutes=5), GREENWICH)
    assert before < threshold < after


def test_altitude_brings_sunrise_forward(solver):
    summit = GeoLocation(latitude=51.4769, longitude=0.0, altitude=2000.0)
    low = solver.sunrise_sunset(date(2025, 3, 20), GREENWICH)
    high = solver.sunrise_sunset(date(2025, 3, 20), summit)
    assert high.sunrise < low.sunrise
    assert high.sunset > low.sunset


@pytest.mark.parametrize("day", [date(2025, 6, 21), date(2025, 12, 21)])
def test_polar_day_and_night_have_no_crossings(solver, day):
    times = solver.sunrise_sunset(day, LONGYEARBYEN)
    assert times.sunrise is None
    assert times.sunset is None
    assert not times.is_complete
    assert times.day_length is None


def test_moon_horizon_sits_above_sun_horizon():
    assert horizon_altitude(GREENWICH, "moon") == pytest.approx(0.125)
    assert horizon_altitude(GREENWICH, "moon") > horizon_altitude(GREENWICH)


@pytest.mark.parametrize("day", [date(2025, 7, 19), date(2025, 7, 20), date(2025, 7, 21)])
def test_moonrise_and_moonset_cross_the_horizon(solver, day):
    times = solver.moonrise_moonset(day, KELOWNA)
    assert times.moonrise is not None or times.moonset is not None

    threshold = horizon_altitude(KELOWNA, "moon")
    margin = timedelta(minutes=5)
    if times.moonrise is not None:
        assert solver.altitude("moon", times.moonrise - margin, KELOWNA) < threshold
        assert solver.altitude("moon", times.moonrise + margin, KELOWNA) > threshold
    if times.moonset is not None:
        assert solver.altitude("moon", times.moonset - margin, KELOWNA) > threshold
        assert solver.altitude("moon", times.moonset + margin, KELOWNA) < threshold


def test_moonrise_drifts_later_each_day(solver):
    first = solver.moonrise_moonset(date(2025, 7, 8), GREENWICH).moonrise
    second = solver.moonrise_moonset(date(2025, 7, 9), GREENWICH).moonrise
    assert first is not None and second is not None
    assert timedelta(hours=24, minutes=5) < second - first < timedelta(hours=26)
