"""
Daily timing windows module.
Calculates Rahu Kaal, Yamaganda and Gulika by dividing daytime (and night)
into eight equal parts.
"""

from datetime import datetime

from engine.core_types import TimeWindow

KALAM_PARTS = 8

# Daily inauspicious periods by weekday (0=Sunday)
# Each day divided into 8 parts, these indicate which part is inauspicious
RAHU_KAAL_PARTS = {
    0: 5,  # Sunday - 5th part
    1: 2,  # Monday - 2nd part
    2: 7,  # Tuesday - 7th part
    3: 4,  # Wednesday - 4th part
    4: 3,  # Thursday - 3rd part
    5: 6,  # Friday - 6th part
    6: 1,  # Saturday - 1st part
}

YAMAGANDA_PARTS = {
    0: 6,  # Sunday - 6th part
    1: 4,  # Monday - 4th part
    2: 2,  # Tuesday - 2nd part
    3: 5,  # Wednesday - 5th part
    4: 7,  # Thursday - 7th part
    5: 3,  # Friday - 3rd part
    6: 1,  # Saturday - 1st part
}

GULIKA_PARTS = {
    0: 7,  # Sunday - 7th part
    1: 5,  # Monday - 5th part
    2: 3,  # Tuesday - 3rd part
    3: 2,  # Wednesday - 2nd part
    4: 4,  # Thursday - 4th part
    5: 1,  # Friday - 1st part
    6: 6,  # Saturday - 6th part
}

# Night parts start from the lord of the fifth weekday counted from today,
# so Saturn's (Gulika) and Jupiter's (Yamaganda) parts shift accordingly.
NIGHT_GULIKA_PARTS = {
    0: 3,
    1: 2,
    2: 1,
    3: 7,
    4: 6,
    5: 5,
    6: 4,
}

NIGHT_YAMAGANDA_PARTS = {
    0: 1,
    1: 7,
    2: 6,
    3: 5,
    4: 4,
    5: 3,
    6: 2,
}

DESCRIPTIONS = {
    "Rahu Kaal": "Avoid new ventures and important decisions",
    "Yamaganda": "Inauspicious for travel and meetings",
    "Gulikai": "Avoid financial transactions",
}


def partition(start: datetime, end: datetime, parts: int) -> list[tuple[datetime, datetime]]:
    """Split ``[start, end)`` into ``parts`` consecutive equal segments.

    Every boundary is computed from the interval start, and the last segment
    ends exactly at ``end``, so the segments tile the interval with no gap.

    Raises:
        ValueError: if the interval is empty or parts < 1
    """
    if parts < 1:
        raise ValueError(f"parts must be positive: {parts}")
    if end <= start:
        raise ValueError("end must be after start")

    span = end - start
    bounds = [start + span * i / parts for i in range(parts)] + [end]
    return list(zip(bounds[:-1], bounds[1:]))


def calculate_inauspicious_period(
    start: datetime,
    end: datetime,
    weekday: int,
    parts_dict: dict[int, int],
    name: str,
    period: str = "day",
) -> TimeWindow:
    """Calculate an inauspicious period (Rahu Kaal, etc.).

    Args:
        start: Sunrise (day) or sunset (night)
        end: Sunset (day) or next sunrise (night)
        weekday: Day of week (0=Sunday)
        parts_dict: Dictionary mapping weekday to part number
        name: Name of the period
        period: "day" or "night"

    Returns:
        TimeWindow for the inauspicious period
    """
    part_num = parts_dict[weekday]
    seg_start, seg_end = partition(start, end, KALAM_PARTS)[part_num - 1]

    return TimeWindow(
        name=name,
        start=seg_start,
        end=seg_end,
        period=period,
        quality="avoid",
        segment=part_num,
        description=DESCRIPTIONS.get(name),
    )


def calculate_kalam_windows(
    sunrise: datetime | None,
    sunset: datetime | None,
    next_sunrise: datetime | None,
    weekday: int,
) -> list[TimeWindow]:
    """Rahu Kaal, Yamaganda and Gulikai for one day, plus night Gulikai/Yamaganda.

    Returns an empty list when sunrise or sunset is unknown; night windows are
    left out when the next sunrise is unknown.
    """
    if sunrise is None or sunset is None or sunset <= sunrise:
        return []

    windows = [
        calculate_inauspicious_period(sunrise, sunset, weekday, RAHU_KAAL_PARTS, "Rahu Kaal"),
        calculate_inauspicious_period(sunrise, sunset, weekday, YAMAGANDA_PARTS, "Yamaganda"),
        calculate_inauspicious_period(sunrise, sunset, weekday, GULIKA_PARTS, "Gulikai"),
    ]

    if next_sunrise is not None and next_sunrise > sunset:
        windows.append(
            calculate_inauspicious_period(
                sunset, next_sunrise, weekday, NIGHT_GULIKA_PARTS, "Gulikai", period="night"
            )
        )
        windows.append(
            calculate_inauspicious_period(
                sunset, next_sunrise, weekday, NIGHT_YAMAGANDA_PARTS, "Yamaganda", period="night"
            )
        )

    return sorted(windows, key=lambda w: w.start)
