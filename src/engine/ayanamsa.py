#!/usr/bin/env python3
"""
Ayanamsa Registry
Catalogue of sidereal reference systems (Swiss Ephemeris sidereal modes 0-46),
selector resolution by id or name, and live-or-approximate degree readings.

The table is immutable module data; a registry instance only adds an optional
live provider, so one registry can be shared freely across threads.
"""

import logging

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import singledispatchmethod
from types import MappingProxyType

from .time_utils import decimal_year, ensure_utc

logger = logging.getLogger(__name__)

# ============================================================================
# PRECESSION POLYNOMIAL
# ============================================================================

# General precession in longitude, degrees per Julian century and its drift
PRECESSION_RATE = 1.3915817
PRECESSION_DRIFT = -0.0130125


@dataclass(frozen=True)
class AyanamsaSystem:
    """A sidereal zodiac reference system"""

    id: int  # Swiss Ephemeris sidereal mode
    name: str
    description: str
    j2000_degree: float  # Value at 2000.0, calibrates the fallback polynomial

    def approximate_degree(self, instant: datetime) -> float:
        """Polynomial approximation used when no live value is available

        c0 + rate·t + drift·t² with t in centuries from 1900, where c0 is
        chosen so the curve passes through j2000_degree at t = 1.
        """
        t = (decimal_year(instant) - 1900.0) / 100.0
        return (
            self.j2000_degree
            + PRECESSION_RATE * (t - 1.0)
            + PRECESSION_DRIFT * (t * t - 1.0)
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "description": self.description}


class AyanamsaSource(str, Enum):
    LIVE = "live"
    APPROXIMATE = "approximate"


@dataclass(frozen=True)
class AyanamsaReading:
    """An ayanamsa degree tagged with where it came from"""

    system: AyanamsaSystem
    degree: float
    source: AyanamsaSource

    @property
    def is_approximate(self) -> bool:
        return self.source is AyanamsaSource.APPROXIMATE

    def to_dict(self) -> dict:
        return {
            **self.system.to_dict(),
            "degree": round(self.degree, 6),
            "source": self.source.value,
            "is_approximate": self.is_approximate,
        }


# ============================================================================
# SYSTEM TABLE
# ============================================================================

# J2000 values for ids 30 and above are coarse estimates; they only matter
# when the live provider is unavailable.
AYANAMSA_SYSTEMS: tuple[AyanamsaSystem, ...] = (
    AyanamsaSystem(0, "Fagan/Bradley", "Western sidereal, Fagan and Bradley", 24.7403),
    AyanamsaSystem(1, "Lahiri", "Chitrapaksha, Indian national standard", 23.857),
    AyanamsaSystem(2, "De Luce", "Robert De Luce", 27.815),
    AyanamsaSystem(3, "Raman", "B. V. Raman", 22.4108),
    AyanamsaSystem(4, "Ushashashi", "Ushashashi", 20.0575),
    AyanamsaSystem(5, "Krishnamurti", "K. S. Krishnamurti (KP)", 23.7602),
    AyanamsaSystem(6, "Djwhal Khul", "Djwhal Khul", 28.3597),
    AyanamsaSystem(7, "Yukteshwar", "Sri Yukteshwar", 22.4788),
    AyanamsaSystem(8, "JN Bhasin", "J. N. Bhasin", 22.7621),
    AyanamsaSystem(9, "Babylonian/Kugler 1", "Babylonian, Kugler variant 1", 23.5336),
    AyanamsaSystem(10, "Babylonian/Kugler 2", "Babylonian, Kugler variant 2", 24.9336),
    AyanamsaSystem(11, "Babylonian/Kugler 3", "Babylonian, Kugler variant 3", 25.7836),
    AyanamsaSystem(12, "Babylonian/Huber", "Babylonian, Huber", 24.7336),
    AyanamsaSystem(13, "Babylonian/Eta Piscium", "Babylonian, Eta Piscium", 24.5225),
    AyanamsaSystem(14, "Babylonian/Aldebaran 15 Tau", "Aldebaran at 15 Taurus", 24.7586),
    AyanamsaSystem(15, "Hipparchos", "Hipparchos", 20.2478),
    AyanamsaSystem(16, "Sassanian", "Sassanian", 19.993),
    AyanamsaSystem(17, "Galactic Center 0 Sag", "Galactic center at 0 Sagittarius", 26.8461),
    AyanamsaSystem(18, "J2000", "Tropical at J2000", 0.0),
    AyanamsaSystem(19, "J1900", "Tropical at J1900", 1.3966),
    AyanamsaSystem(20, "B1950", "Tropical at B1950", 0.6984),
    AyanamsaSystem(21, "Suryasiddhanta", "Surya Siddhanta", 20.8951),
    AyanamsaSystem(22, "Suryasiddhanta, mean Sun", "Surya Siddhanta, mean Sun", 20.6804),
    AyanamsaSystem(23, "Aryabhata", "Aryabhata", 20.8951),
    AyanamsaSystem(24, "Aryabhata, mean Sun", "Aryabhata, mean Sun", 20.6574),
    AyanamsaSystem(25, "SS Revati", "Surya Siddhanta, Revati", 20.1034),
    AyanamsaSystem(26, "SS Citra", "Surya Siddhanta, Citra", 23.0058),
    AyanamsaSystem(27, "True Citra", "Spica at 0 Libra (true)", 23.8458),
    AyanamsaSystem(28, "True Revati", "Zeta Piscium at 29°50' Pisces (true)", 20.0412),
    AyanamsaSystem(29, "True Pushya", "Delta Cancri at 16 Cancer (true)", 22.7283),
    AyanamsaSystem(30, "Galactic Center (Gil Brand)", "Galactic center, Rafael Gil Brand", 22.469),
    AyanamsaSystem(31, "Galactic Equator (IAU1958)", "Galactic equator, IAU 1958", 30.1),
    AyanamsaSystem(32, "Galactic Equator", "Galactic equator (true)", 30.1),
    AyanamsaSystem(33, "Galactic Equator mid-Mula", "Galactic equator at middle of Mula", 23.4),
    AyanamsaSystem(34, "Skydram (Mardyks)", "Galactic alignment, Mardyks", 30.1),
    AyanamsaSystem(35, "True Mula (Chandra Hari)", "Lambda Scorpii at 0 Sagittarius", 24.58),
    AyanamsaSystem(36, "Dhruva/Gal.Center/Mula (Wilhelm)", "Galactic center, Ernst Wilhelm", 20.04),
    AyanamsaSystem(37, "Aryabhata 522", "Aryabhata, epoch 522", 20.58),
    AyanamsaSystem(38, "Babylonian/Britton", "Babylonian, Britton", 24.6),
    AyanamsaSystem(39, "Vedic/Sheoran", "Sunil Sheoran", 22.2),
    AyanamsaSystem(40, "Cochrane (Gal.Center = 0 Cap)", "Galactic center at 0 Capricorn", -3.15),
    AyanamsaSystem(41, "Galactic Equator (Fiorenza)", "Galactic equator, Nick Anthony Fiorenza", 25.0),
    AyanamsaSystem(42, "Vettius Valens", "Vettius Valens, Moon based", 22.8),
    AyanamsaSystem(43, "Lahiri 1940", "Lahiri, 1940 definition", 23.86),
    AyanamsaSystem(44, "Lahiri VP285", "Lahiri, VP285 epoch", 23.80),
    AyanamsaSystem(45, "Krishnamurti VP291", "Krishnamurti, VP291 epoch", 23.72),
    AyanamsaSystem(46, "Lahiri ICRC", "Lahiri, Indian Calendar Reform Committee", 23.86),
)


# ============================================================================
# REGISTRY
# ============================================================================


class AyanamsaRegistry:
    """Resolve ayanamsa selectors and read their degree at an instant

    Args:
        provider: Optional live source with ``ayanamsa_degree(system_id, instant)``
        systems: System table, defaults to AYANAMSA_SYSTEMS
    """

    def __init__(self, provider=None, systems: tuple[AyanamsaSystem, ...] = AYANAMSA_SYSTEMS):
        self._provider = provider
        self._systems = tuple(systems)
        self._by_id = MappingProxyType({s.id: s for s in self._systems})

    @property
    def systems(self) -> tuple[AyanamsaSystem, ...]:
        return self._systems

    def names(self) -> list[str]:
        return [s.name for s in self._systems]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @singledispatchmethod
    def resolve(self, selector) -> AyanamsaSystem | None:
        """Resolve an id or a name to a system; None when nothing matches"""
        return None

    @resolve.register
    def _(self, selector: int) -> AyanamsaSystem | None:
        return self._by_id.get(selector)

    @resolve.register
    def _(self, selector: str) -> AyanamsaSystem | None:
        key = selector.strip().lower()
        if not key:
            return None
        if key.isdigit():
            return self._by_id.get(int(key))

        # Exact name wins over a partial match
        for system in self._systems:
            if system.name.lower() == key:
                return system
        for system in self._systems:
            if key in system.name.lower():
                return system
        return None

    # ------------------------------------------------------------------
    # Readings
    # ------------------------------------------------------------------

    def read(self, system: AyanamsaSystem, instant: datetime) -> AyanamsaReading:
        """Degree of a resolved system, live when possible"""
        instant = ensure_utc(instant)
        live = None
        if self._provider is not None:
            try:
                live = self._provider.ayanamsa_degree(system.id, instant)
            except Exception as e:
                logger.warning(
                    "Ayanamsa provider failed, using approximation",
                    extra={"ayanamsa_id": system.id, "error": str(e)},
                )
                live = None

        if live is not None:
            return AyanamsaReading(system=system, degree=float(live), source=AyanamsaSource.LIVE)

        logger.debug(
            "Approximate ayanamsa in use",
            extra={"ayanamsa_id": system.id, "ayanamsa_name": system.name},
        )
        return AyanamsaReading(
            system=system,
            degree=system.approximate_degree(instant),
            source=AyanamsaSource.APPROXIMATE,
        )

    def degree(self, selector: int | str, instant: datetime) -> AyanamsaReading | None:
        """Resolve ``selector`` and read it at ``instant``; None when unknown"""
        system = self.resolve(selector)
        if system is None:
            return None
        return self.read(system, instant)

    def list_at(self, instant: datetime) -> list[AyanamsaReading]:
        """Every system read at ``instant``, sorted by degree ascending"""
        readings = [self.read(system, instant) for system in self._systems]
        return sorted(readings, key=lambda r: r.degree)
