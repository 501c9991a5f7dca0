#!/usr/bin/env python3
"""
Time utilities for ephemeris calculations.

Provides UTC validation, Julian day conversions, and local solar day helpers.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from math import floor
from zoneinfo import ZoneInfo

import swisseph as swe


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware and in UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def datetime_to_julian_day(dt: datetime) -> float:
    """Convert aware datetime to Julian Day (UT)."""
    dt = ensure_utc(dt)
    y, m, d = dt.year, dt.month, dt.day
    h = dt.hour + dt.minute / 60.0 + dt.second / 3600.0 + dt.microsecond / 3_600_000_000.0
    return swe.julday(y, m, d, h, swe.GREG_CAL)



def decimal_year(dt: datetime) -> float:
    """Fractional Gregorian year, e.g. 2000-07-02 -> ~2000.5."""
    dt = ensure_utc(dt)
    start = datetime(dt.year, 1, 1, tzinfo=UTC)
    end = datetime(dt.year + 1, 1, 1, tzinfo=UTC)
    return dt.year + (dt - start) / (end - start)


def julian_day_fraction(dt: datetime) -> float:
    """Elapsed fraction of the civil UT day (midnight to midnight)."""
    jd = datetime_to_julian_day(dt) + 0.5
    return jd - floor(jd)


def local_mean_midnight(day: date, longitude: float) -> datetime:
    """UTC instant of local mean midnight starting ``day`` at ``longitude``.

    East longitudes reach midnight before Greenwich, so the offset is subtracted.
    """
    midnight_utc = datetime.combine(day, time(0, 0), tzinfo=UTC)
    return midnight_utc - timedelta(hours=longitude / 15.0)


def local_solar_date(dt: datetime, longitude: float) -> date:
    """Calendar date of ``dt`` on the local mean solar clock."""
    return (ensure_utc(dt) + timedelta(hours=longitude / 15.0)).date()


def to_local(dt: datetime, tz_name: str | None) -> datetime:
    """Convert a datetime to the named IANA zone (UTC when no zone given)."""
    if not tz_name:
        return ensure_utc(dt)
    return ensure_utc(dt).astimezone(ZoneInfo(tz_name))
