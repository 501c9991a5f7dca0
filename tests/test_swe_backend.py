"""
Swiss Ephemeris backend: scoped release of library state and sidereal
agreement with the library's own sidereal mode.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
import swisseph as swe

from engine import swe_backend
from engine.errors import AyanamsaNotFoundError, EphemerisUnavailableError
from engine.facade import ephemeris_session
from engine.numerics import normalize_angle
from engine.swe_backend import SwissEphemerisProvider, close_ephemeris
from engine.time_utils import datetime_to_julian_day

INSTANT = datetime(2025, 7, 20, 12, 11, tzinfo=UTC)


@pytest.fixture
def closes(monkeypatch):
    calls = []
    monkeypatch.setattr(swe_backend, "close_ephemeris", lambda: calls.append("closed"))
    return calls


def test_provider_block_closes_on_error(closes):
    with pytest.raises(RuntimeError):
        with SwissEphemerisProvider():
            raise RuntimeError("caller failed")
    assert closes == ["closed"]


def test_session_closes_when_block_raises(closes):
    with pytest.raises(RuntimeError):
        with ephemeris_session():
            raise RuntimeError("caller failed")
    assert closes == ["closed"]


def test_session_closes_when_compute_fails(closes, greenwich):
    with pytest.raises(AyanamsaNotFoundError):
        with ephemeris_session() as engine:
            engine.compute(INSTANT, greenwich, ayanamsa="nonexistent")
    assert closes == ["closed"]


def test_session_closes_on_success(closes):
    with ephemeris_session() as engine:
        assert isinstance(engine.provider, SwissEphemerisProvider)
    assert closes == ["closed"]


def test_close_releases_library_state(monkeypatch):
    calls = []
    monkeypatch.setattr(swe_backend.swe, "close", lambda: calls.append("swe.close"))
    close_ephemeris()
    assert calls == ["swe.close"]


def test_unknown_body_is_unavailable():
    with pytest.raises(EphemerisUnavailableError):
        SwissEphemerisProvider().position_of("pluto", INSTANT)


@pytest.mark.parametrize("body, swe_id", [("sun", swe.SUN), ("moon", swe.MOON), ("saturn", swe.SATURN)])
def test_sidereal_longitude_matches_library_sidereal_mode(body, swe_id):
    provider = SwissEphemerisProvider()
    tropical = provider.position_of(body, INSTANT).longitude
    ayanamsa = provider.ayanamsa_degree(swe.SIDM_LAHIRI, INSTANT)

    jd = datetime_to_julian_day(INSTANT)
    swe.set_sid_mode(swe.SIDM_LAHIRI, 0, 0)
    (expected, *_), _flags = swe.calc_ut(jd, swe_id, swe.FLG_SWIEPH | swe.FLG_SIDEREAL)

    # Within a third of an arcsecond
    diff = abs(normalize_angle(tropical - ayanamsa - expected + 180.0) - 180.0)
    assert diff < 1e-4


def test_positions_carry_daily_motion():
    provider = SwissEphemerisProvider()
    assert provider.position_of("sun", INSTANT).speed == pytest.approx(0.955, abs=0.01)
    assert 11.0 < provider.position_of("moon", INSTANT).speed < 15.5
    # Mercury and Saturn were both retrograde in late July 2025
    assert provider.position_of("mercury", INSTANT).speed < 0
    assert provider.position_of("saturn", INSTANT).speed < 0
