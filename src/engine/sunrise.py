#!/usr/bin/env python3
"""
Sunrise / Sunset Solver
Rise and set are the instants the Sun's upper limb crosses the apparent
horizon; moonrise and moonset are found the same way. Altitudes are
evaluated from Swiss Ephemeris equatorial coordinates and sidereal time,
and the crossings are located with the same step-change search used for
Panchanga transitions.
"""

import logging

from datetime import date, datetime, timedelta
from math import asin, cos, degrees, radians, sin, sqrt

from .change_finder import detect_changes
from .constants import (
    HORIZON_DIP_COEFF,
    MOON,
    MOONRISE_ALTITUDE_DEG,
    SUN,
    SUNRISE_ALTITUDE_DEG,
)
from .core_types import GeoLocation, MoonTimes, SunTimes
from .numerics import clamp_value, normalize_angle
from .swe_backend import SwissEphemerisProvider
from .time_utils import local_mean_midnight

logger = logging.getLogger(__name__)

# ============================================================================
# SEARCH PARAMETERS
# ============================================================================

SEARCH_STEP_MINUTES = 10
SEARCH_PRECISION_SECONDS = 1.0
LOCAL_DAY = timedelta(hours=24)


def horizon_altitude(location: GeoLocation, body: str = SUN) -> float:
    """Altitude of the body's centre at rise/set, lowered by the horizon dip"""
    base = MOONRISE_ALTITUDE_DEG if body == MOON else SUNRISE_ALTITUDE_DEG
    return base - HORIZON_DIP_COEFF * sqrt(max(location.altitude, 0.0))


class SwissSunriseSolver:
    """Sunrise and moonrise solver backed by SwissEphemerisProvider

    Args:
        provider: Provider exposing ``equatorial_of`` and ``sidereal_time_deg``
        step: Coarse search step across the local day
        precision: Width of the final bisection bracket
    """

    def __init__(
        self,
        provider: SwissEphemerisProvider | None = None,
        step: timedelta = timedelta(minutes=SEARCH_STEP_MINUTES),
        precision: timedelta = timedelta(seconds=SEARCH_PRECISION_SECONDS),
    ):
        self.provider = provider or SwissEphemerisProvider()
        self.step = step
        self.precision = precision

    def altitude(self, body: str, instant: datetime, location: GeoLocation) -> float:
        """Geometric altitude of the body's centre in degrees"""
        ra, dec = self.provider.equatorial_of(body, instant)
        local_sidereal = self.provider.sidereal_time_deg(instant) + location.longitude
        hour_angle = radians(normalize_angle(local_sidereal - ra))

        phi = radians(location.latitude)
        delta = radians(dec)
        sin_alt = sin(phi) * sin(delta) + cos(phi) * cos(delta) * cos(hour_angle)
        return degrees(asin(clamp_value(sin_alt, -1.0, 1.0)))

    def sun_altitude(self, instant: datetime, location: GeoLocation) -> float:
        return self.altitude(SUN, instant, location)

    def _rise_set(
        self, body: str, day: date, location: GeoLocation
    ) -> tuple[datetime | None, datetime | None]:
        start = local_mean_midnight(day, location.longitude)
        threshold = horizon_altitude(location, body)

        def is_up(instant: datetime) -> bool:
            return self.altitude(body, instant, location) > threshold

        changes = detect_changes(
            is_up, start, start + LOCAL_DAY, step=self.step, precision=self.precision
        )
        rise = next((c.instant for c in changes if c.new_value), None)
        setting = next((c.instant for c in changes if not c.new_value), None)
        return rise, setting

    def sunrise_sunset(self, day: date, location: GeoLocation) -> SunTimes:
        """Sunrise and sunset within the local mean solar day ``day``

        Returns:
            SunTimes; an instant is None when no crossing happens that day
        """
        sunrise, sunset = self._rise_set(SUN, day, location)

        if sunrise is None or sunset is None:
            logger.info(
                "Sun does not cross the horizon",
                extra={
                    "date": day.isoformat(),
                    "latitude": location.latitude,
                    "sunrise_found": sunrise is not None,
                    "sunset_found": sunset is not None,
                },
            )

        return SunTimes(sunrise=sunrise, sunset=sunset)

    def moonrise_moonset(self, day: date, location: GeoLocation) -> MoonTimes:
        """First moonrise and moonset within the local mean solar day ``day``

        The lunar day runs about 50 minutes longer than the solar one, so on
        roughly one day a month either event falls outside the window.
        """
        moonrise, moonset = self._rise_set(MOON, day, location)
        return MoonTimes(moonrise=moonrise, moonset=moonset)
