"""
Planetary positions module.
Sidereal longitudes of the seven classical planets with rashi, nakshatra and
pada, read from the same position provider and ayanamsa as the five limbs.
"""

from dataclasses import dataclass
from datetime import datetime

from engine.constants import CLASSICAL_PLANETS, RASHI_SPAN
from engine.core_types import EclipticPosition
from engine.numerics import fraction_in_span, normalize_angle

from .calendar_info import rashi_name
from .elements import calculate_nakshatra


@dataclass(frozen=True)
class PlanetPosition:
    """Sidereal position of one planet"""

    body: str
    longitude: float  # sidereal, degrees
    latitude: float
    speed: float  # degrees per day
    rashi: str
    degree_in_rashi: float
    nakshatra: str
    pada: int

    @property
    def name(self) -> str:
        return self.body.capitalize()

    @property
    def retrograde(self) -> bool:
        return self.speed < 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "longitude": round(self.longitude, 6),
            "latitude": round(self.latitude, 6),
            "speed": round(self.speed, 6),
            "retrograde": self.retrograde,
            "rashi": self.rashi,
            "degree_in_rashi": round(self.degree_in_rashi, 4),
            "nakshatra": self.nakshatra,
            "pada": self.pada,
        }


def planet_position(body: str, tropical: EclipticPosition, ayanamsa_degree: float) -> PlanetPosition:
    """Classify a tropical position after subtracting the ayanamsa."""
    longitude = normalize_angle(tropical.longitude - ayanamsa_degree)
    nakshatra = calculate_nakshatra(longitude)
    return PlanetPosition(
        body=body,
        longitude=longitude,
        latitude=tropical.latitude,
        speed=tropical.speed,
        rashi=rashi_name(longitude),
        degree_in_rashi=fraction_in_span(longitude, RASHI_SPAN) * RASHI_SPAN,
        nakshatra=nakshatra.name,
        pada=nakshatra.pada,
    )


def calculate_planet_positions(
    provider,
    instant: datetime,
    ayanamsa_degree: float,
    bodies: tuple[str, ...] = CLASSICAL_PLANETS,
) -> list[PlanetPosition]:
    """Sidereal positions of ``bodies`` at ``instant``, in weekday-lord order.

    Raises:
        EphemerisUnavailableError: the provider cannot place a body
    """
    return [
        planet_position(body, provider.position_of(body, instant), ayanamsa_degree)
        for body in bodies
    ]
