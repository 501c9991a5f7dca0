import os

from datetime import UTC, date, datetime, time, timedelta

import pytest


# Keep app startup light in tests
os.environ.setdefault("PANCHANG_SKIP_WARMUP", "1")
os.environ.setdefault("LOG_FORMAT", "text")

from engine.core_types import EclipticPosition, GeoLocation, MoonTimes, SunTimes  # noqa: E402
from engine.numerics import normalize_angle  # noqa: E402


# Linear motion fitted to mean daily rates
SUN_RATE = 0.9856
MOON_RATE = 13.1764
EPOCH = datetime(2025, 1, 1, tzinfo=UTC)

# Other bodies: (longitude at EPOCH, daily motion); Mercury runs retrograde
PLANET_MOTION = {
    "mercury": (300.0, -0.5),
    "venus": (330.0, 1.2),
    "mars": (120.0, 0.5),
    "jupiter": (75.0, 0.08),
    "saturn": (345.0, 0.03),
}


class FakeLinearProvider:
    """Bodies moving uniformly from fixed longitudes at EPOCH.

    ``ayanamsa`` is returned for every system; None makes the registry fall
    back to its approximation.
    """

    def __init__(self, sun0: float = 100.0, moon0: float = 200.0, ayanamsa: float | None = 24.0):
        self.sun0 = sun0
        self.moon0 = moon0
        self.ayanamsa = ayanamsa

    def _days(self, instant: datetime) -> float:
        return (instant - EPOCH).total_seconds() / 86400.0

    def position_of(self, body: str, instant: datetime) -> EclipticPosition:
        days = self._days(instant)
        if body == "sun":
            lon0, rate = self.sun0, SUN_RATE
        elif body == "moon":
            lon0, rate = self.moon0, MOON_RATE
        else:
            lon0, rate = PLANET_MOTION[body]
        return EclipticPosition(longitude=normalize_angle(lon0 + rate * days), speed=rate)

    def ayanamsa_degree(self, system_id: int, instant: datetime) -> float | None:
        return self.ayanamsa


class FakeSunriseSolver:
    """Rise and set at fixed UTC clock times, or none at all."""

    def __init__(
        self,
        sunrise: time | None = time(6, 0),
        sunset: time | None = time(18, 0),
        moonrise: time | None = time(14, 0),
        moonset: time | None = time(2, 0),
    ):
        self.sunrise = sunrise
        self.sunset = sunset
        self.moonrise = moonrise
        self.moonset = moonset

    @staticmethod
    def _at(day: date, t: time | None) -> datetime | None:
        return datetime.combine(day, t, tzinfo=UTC) if t is not None else None

    def sunrise_sunset(self, day: date, location: GeoLocation) -> SunTimes:
        return SunTimes(sunrise=self._at(day, self.sunrise), sunset=self._at(day, self.sunset))

    def moonrise_moonset(self, day: date, location: GeoLocation) -> MoonTimes:
        return MoonTimes(moonrise=self._at(day, self.moonrise), moonset=self._at(day, self.moonset))


@pytest.fixture
def fake_provider():
    return FakeLinearProvider()


@pytest.fixture
def fake_engine(fake_provider):
    from app.core.config import TransitionSettings
    from engine.facade import PanchangaEngine

    return PanchangaEngine(
        provider=fake_provider,
        sunrise_solver=FakeSunriseSolver(),
        settings=TransitionSettings(
            step=timedelta(minutes=30),
            precision=timedelta(seconds=1),
            horizon=timedelta(hours=72),
        ),
        default_ayanamsa="Lahiri",
    )


@pytest.fixture
def greenwich():
    return GeoLocation(latitude=51.4769, longitude=0.0, timezone="Europe/London")


@pytest.fixture
def clean_flags(monkeypatch):
    """Feature flags re-read from a clean environment, restored afterwards."""
    from config.feature_flags import reset_feature_flags

    for name in (
        "ENABLE_PANCHANGA_FULL",
        "ENABLE_DAILY_WINDOWS",
        "ENABLE_MUHURTA_WINDOWS",
        "ENABLE_TRANSITION_TIMES",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_feature_flags()
    yield monkeypatch
    reset_feature_flags()


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from apps.api.main import app

    return TestClient(app)


@pytest.fixture
def fake_client(client, fake_engine):
    """API client whose routes compute with the deterministic fake engine."""
    from api.routers.panchanga import get_panchanga_engine
    from apps.api.main import app

    app.dependency_overrides[get_panchanga_engine] = lambda: fake_engine
    yield client
    app.dependency_overrides.pop(get_panchanga_engine, None)


@pytest.fixture(scope="session")
def openapi_spec(client):
    r = client.get("/openapi.json")
    r.raise_for_status()
    return r.json()
