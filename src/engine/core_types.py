#!/usr/bin/env python3
"""
Core data types for the Panchanga engine
Immutable value objects shared by providers, partitioners and the facade
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any

from .numerics import normalize_angle

# ============================================================================
# LOCATION
# ============================================================================


@dataclass(frozen=True)
class GeoLocation:
    """Observer location

    Timezone is carried for display only; every computation runs in UTC.
    """

    latitude: float  # Degrees, north positive
    longitude: float  # Degrees, east positive
    altitude: float = 0.0  # Metres above sea level
    timezone: str | None = None  # IANA zone name
    name: str | None = None

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}


# ============================================================================
# POSITIONS
# ============================================================================


@dataclass(frozen=True)
class EclipticPosition:
    """Tropical ecliptic position as returned by a position provider"""

    longitude: float
    latitude: float = 0.0
    speed: float = 0.0  # degrees per day in longitude


@dataclass(frozen=True)
class SiderealPair:
    """Sidereal Sun and Moon longitudes at one instant"""

    instant: datetime
    sun_longitude: float
    moon_longitude: float
    ayanamsa_degree: float

    @property
    def elongation(self) -> float:
        """Moon minus Sun, in [0, 360)"""
        return normalize_angle(self.moon_longitude - self.sun_longitude)

    @property
    def combined(self) -> float:
        """Sun plus Moon, in [0, 360)"""
        return normalize_angle(self.sun_longitude + self.moon_longitude)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "instant": self.instant.isoformat(),
            "sun_longitude": round(self.sun_longitude, 6),
            "moon_longitude": round(self.moon_longitude, 6),
            "ayanamsa_degree": round(self.ayanamsa_degree, 6),
            "elongation": round(self.elongation, 6),
        }


# ============================================================================
# SUN TIMES
# ============================================================================


@dataclass(frozen=True)
class SunTimes:
    """Sunrise and sunset for one local day; either may be None near the poles"""

    sunrise: datetime | None
    sunset: datetime | None

    @property
    def is_complete(self) -> bool:
        return self.sunrise is not None and self.sunset is not None

    @property
    def day_length(self) -> timedelta | None:
        if not self.is_complete:
            return None
        return self.sunset - self.sunrise

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "sunrise": self.sunrise.isoformat() if self.sunrise else None,
            "sunset": self.sunset.isoformat() if self.sunset else None,
        }


@dataclass(frozen=True)
class MoonTimes:
    """Moonrise and moonset within one local day; the Moon skips one of them about monthly"""

    moonrise: datetime | None
    moonset: datetime | None

    def to_dict(self) -> dict:
        return {
            "moonrise": self.moonrise.isoformat() if self.moonrise else None,
            "moonset": self.moonset.isoformat() if self.moonset else None,
        }


# ============================================================================
# TIME WINDOWS
# ============================================================================


@dataclass(frozen=True)
class TimeWindow:
    """Named time window derived from sunrise/sunset partitions"""

    name: str
    start: datetime
    end: datetime
    period: str = "day"  # "day" or "night"
    quality: str = "avoid"  # "avoid" for kalams, "good" for muhurtas
    segment: int | None = None  # 1-based segment number, None for offset windows
    description: str | None = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = {
            "name": self.name,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "period": self.period,
            "quality": self.quality,
            "duration_minutes": round(self.duration.total_seconds() / 60.0, 2),
        }
        if self.segment is not None:
            data["segment"] = self.segment
        if self.description:
            data["description"] = self.description
        return data


# ============================================================================
# STEP CHANGE EVENT
# ============================================================================


@dataclass(frozen=True)
class StepChange:
    """A refined change of a step function's value"""

    instant: datetime
    old_value: Any
    new_value: Any

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "instant": self.instant.isoformat(),
            "old_value": self.old_value,
            "new_value": self.new_value,
        }
