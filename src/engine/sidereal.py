#!/usr/bin/env python3
"""
Sidereal Snapshot
Where tropical Sun/Moon provider output becomes sidereal longitude.
"""

from __future__ import annotations

from datetime import datetime

from .ayanamsa import AyanamsaReading, AyanamsaRegistry, AyanamsaSystem
from .constants import MOON, SUN
from .core_types import SiderealPair
from .numerics import normalize_angle
from .time_utils import ensure_utc


def sidereal_longitude(provider, instant: datetime, body: str, ayanamsa_degree: float) -> float:
    """Tropical longitude of ``body`` minus the ayanamsa, in [0, 360)."""
    tropical = provider.position_of(body, ensure_utc(instant)).longitude
    return normalize_angle(tropical - ayanamsa_degree)


class SiderealSnapshot:
    """Sun/Moon sidereal longitudes for one ayanamsa system at any instant.

    The ayanamsa is re-read at every instant so transition searches spanning
    days see the same drift the provider does.
    """

    def __init__(self, provider, registry: AyanamsaRegistry, system: AyanamsaSystem):
        self.provider = provider
        self.registry = registry
        self.system = system

    def ayanamsa_at(self, instant: datetime) -> AyanamsaReading:
        return self.registry.read(self.system, instant)

    def at(self, instant: datetime) -> SiderealPair:
        instant = ensure_utc(instant)
        ayanamsa = self.ayanamsa_at(instant).degree
        return SiderealPair(
            instant=instant,
            sun_longitude=sidereal_longitude(self.provider, instant, SUN, ayanamsa),
            moon_longitude=sidereal_longitude(self.provider, instant, MOON, ayanamsa),
            ayanamsa_degree=ayanamsa,
        )
