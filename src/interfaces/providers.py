"""
Provider Protocols for the Panchanga engine

The engine never talks to an ephemeris library directly; it consumes these
two contracts. engine.swe_backend and engine.sunrise supply the Swiss
Ephemeris implementations, and tests substitute deterministic fakes.
"""

from datetime import date, datetime
from typing import Protocol, runtime_checkable

from engine.core_types import EclipticPosition, GeoLocation, MoonTimes, SunTimes


@runtime_checkable
class PositionProvider(Protocol):
    """
    Protocol for tropical position sources

    Implementations must be deterministic for a given instant.
    """

    def position_of(self, body: str, instant: datetime) -> EclipticPosition:
        """
        Tropical ecliptic position of a body

        Args:
            body: Body key ("sun", "moon" or a classical planet)
            instant: UTC instant

        Returns:
            EclipticPosition with longitude in [0, 360)

        Raises:
            EphemerisUnavailableError: when no position can be produced
        """
        ...

    def ayanamsa_degree(self, system_id: int, instant: datetime) -> float | None:
        """
        Live ayanamsa value for a registry system id

        Returns None when the provider has no live value for that system.
        """
        ...


@runtime_checkable
class SunriseSolver(Protocol):
    """Protocol for sunrise/sunset and moonrise/moonset sources"""

    def sunrise_sunset(self, day: date, location: GeoLocation) -> SunTimes:
        """
        Sunrise and sunset of the local solar day ``day``

        Either instant is None when the Sun does not cross the horizon
        (polar day or polar night).
        """
        ...

    def moonrise_moonset(self, day: date, location: GeoLocation) -> MoonTimes:
        """
        First moonrise and moonset of the local solar day ``day``

        Either instant is None when it falls outside that day.
        """
        ...
