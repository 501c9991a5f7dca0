#!/usr/bin/env python3
"""
Swiss Ephemeris backend interface
Thread-safe tropical planet positions, equatorial coordinates and live ayanamsa
values. The library keeps global state (ephemeris path, sidereal mode), so every
call goes through a single process-wide lock.
"""

import logging
import threading

from datetime import datetime

import swisseph as swe

from .constants import BODY_IDS
from .core_types import EclipticPosition
from .errors import EphemerisUnavailableError
from .numerics import normalize_angle
from .time_utils import datetime_to_julian_day, ensure_utc

logger = logging.getLogger(__name__)

# ============================================================================
# SWISS EPHEMERIS CONFIGURATION
# ============================================================================

# Thread lock for Swiss Ephemeris calls (it's not thread-safe)
_swe_lock = threading.Lock()

# Tropical ecliptic flags (with daily motion)
FLAGS = swe.FLG_SWIEPH | swe.FLG_SPEED

# Equatorial flags (right ascension / declination)
FLAGS_EQUATORIAL = swe.FLG_SWIEPH | swe.FLG_EQUATORIAL

# Highest sidereal mode id the registry exposes
MAX_SID_MODE = 46


# ============================================================================
# EPHEMERIS DATA PATH
# ============================================================================


def set_ephemeris_path(path: str | None = None) -> None:
    """Set custom ephemeris data path

    Args:
        path: Path to ephemeris data files (None for the built-in Moshier fallback)
    """
    with _swe_lock:
        swe.set_ephe_path(path)


def close_ephemeris() -> None:
    """Release ephemeris files and reset library state"""
    with _swe_lock:
        swe.close()


# ============================================================================
# POSITION PROVIDER
# ============================================================================


class SwissEphemerisProvider:
    """Position provider backed by pyswisseph.

    Usable as a context manager; leaving the block closes the ephemeris.
    """

    def __init__(self, ephe_path: str | None = None):
        self.ephe_path = ephe_path
        if ephe_path:
            set_ephemeris_path(ephe_path)

    def __enter__(self) -> "SwissEphemerisProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        close_ephemeris()

    def position_of(self, body: str, instant: datetime) -> EclipticPosition:
        """Tropical ecliptic longitude/latitude of ``body`` at ``instant``

        Raises:
            EphemerisUnavailableError: unknown body or Swiss Ephemeris failure
        """
        if body not in BODY_IDS:
            raise EphemerisUnavailableError(body, "unsupported body")

        jd = datetime_to_julian_day(ensure_utc(instant))
        try:
            with _swe_lock:
                (lon, lat, dist, sp_lon, sp_lat, sp_dist), retflag = swe.calc_ut(
                    jd, BODY_IDS[body], FLAGS
                )
        except swe.Error as e:
            raise EphemerisUnavailableError(body, str(e)) from e

        return EclipticPosition(longitude=normalize_angle(lon), latitude=lat, speed=sp_lon)

    def equatorial_of(self, body: str, instant: datetime) -> tuple[float, float]:
        """Apparent right ascension and declination in degrees

        Raises:
            EphemerisUnavailableError: unknown body or Swiss Ephemeris failure
        """
        if body not in BODY_IDS:
            raise EphemerisUnavailableError(body, "unsupported body")

        jd = datetime_to_julian_day(ensure_utc(instant))
        try:
            with _swe_lock:
                (ra, dec, dist, sp_ra, sp_dec, sp_dist), retflag = swe.calc_ut(
                    jd, BODY_IDS[body], FLAGS_EQUATORIAL
                )
        except swe.Error as e:
            raise EphemerisUnavailableError(body, str(e)) from e

        return ra, dec

    def sidereal_time_deg(self, instant: datetime) -> float:
        """Greenwich apparent sidereal time in degrees"""
        jd = datetime_to_julian_day(ensure_utc(instant))
        with _swe_lock:
            hours = swe.sidtime(jd)
        return normalize_angle(hours * 15.0)

    def ayanamsa_degree(self, system_id: int, instant: datetime) -> float | None:
        """Live true ayanamsa for a Swiss Ephemeris sidereal mode

        Nutation is included, matching the apparent longitudes from
        ``position_of``, so their difference equals the library's own
        sidereal positions.

        Returns None for modes the library does not know so the caller can
        fall back to its approximation.
        """
        if not 0 <= system_id <= MAX_SID_MODE:
            return None

        jd = datetime_to_julian_day(ensure_utc(instant))
        try:
            with _swe_lock:
                swe.set_sid_mode(system_id, 0, 0)
                _retflag, value = swe.get_ayanamsa_ex_ut(jd, swe.FLG_SWIEPH)
        except swe.Error as e:
            logger.warning(
                "Live ayanamsa unavailable",
                extra={"system_id": system_id, "error": str(e)},
            )
            return None

        return value
