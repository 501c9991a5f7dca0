"""
Muhurta windows module.
Day and night are each divided into 15 muhurtas; named auspicious windows
are picked out by fixed position, plus the twilight windows around sunset.
"""

from datetime import datetime, timedelta

from engine.core_types import TimeWindow

from .daily_windows import partition

MUHURTA_PARTS = 15

# 1-based muhurta positions
AMRIT_SIDDHI_DAY_PART = 3
AMRIT_KALAM_DAY_PART = 7
ABHIJIT_DAY_PART = 8
VIJAYA_DAY_PART = 12
NISHITA_NIGHT_PART = 8
BRAHMA_NIGHT_PART = 14
PRATAH_SANDHYA_NIGHT_PART = 15

# Half-widths of the windows centred on sunset
GODHULI_HALF_WIDTH = timedelta(minutes=24)
SAYAHNA_SANDHYA_HALF_WIDTH = timedelta(minutes=12)

# Sarvartha Siddhi Yoga span by weekday (0=Sunday)
SARVARTHA_SIDDHI_YOGA = {
    0: "Ahoratri",
    1: "Madhyahna",
    2: "Sayahna",
    3: "Pratah",
    4: "Ahoratri",
    5: "Madhyahna",
    6: "Sayahna",
}


def _muhurta(start: datetime, end: datetime, part: int, name: str, period: str) -> TimeWindow:
    seg_start, seg_end = partition(start, end, MUHURTA_PARTS)[part - 1]
    return TimeWindow(
        name=name, start=seg_start, end=seg_end, period=period, quality="good", segment=part
    )


def muhurta_segments(start: datetime, end: datetime, period: str = "day") -> list[TimeWindow]:
    """All 15 muhurtas of ``[start, end)`` as unnamed numbered windows."""
    return [
        TimeWindow(
            name=f"Muhurta {i}", start=s, end=e, period=period, quality="neutral", segment=i
        )
        for i, (s, e) in enumerate(partition(start, end, MUHURTA_PARTS), start=1)
    ]


def calculate_muhurta_windows(
    sunrise: datetime | None,
    sunset: datetime | None,
    next_sunrise: datetime | None = None,
    previous_sunset: datetime | None = None,
) -> list[TimeWindow]:
    """Named auspicious windows for the day starting at ``sunrise``.

    Args:
        sunrise: Today's sunrise
        sunset: Today's sunset
        next_sunrise: Tomorrow's sunrise, bounds the night after sunset
        previous_sunset: Yesterday's sunset, bounds the night before sunrise

    Returns:
        Windows sorted by start; empty when sunrise or sunset is unknown.
        Night windows whose bounding sunrise/sunset is unknown are omitted.
    """
    if sunrise is None or sunset is None or sunset <= sunrise:
        return []

    windows = []

    # Pre-dawn: the night ending at today's sunrise
    if previous_sunset is not None and previous_sunset < sunrise:
        windows.append(
            _muhurta(previous_sunset, sunrise, BRAHMA_NIGHT_PART, "Brahma Muhurta", "night")
        )
        windows.append(
            _muhurta(
                previous_sunset, sunrise, PRATAH_SANDHYA_NIGHT_PART, "Pratah Sandhya", "night"
            )
        )

    windows.append(
        _muhurta(sunrise, sunset, AMRIT_SIDDHI_DAY_PART, "Amrit Siddhi Yoga", "day")
    )
    windows.append(_muhurta(sunrise, sunset, AMRIT_KALAM_DAY_PART, "Amrit Kalam", "day"))
    windows.append(_muhurta(sunrise, sunset, ABHIJIT_DAY_PART, "Abhijit Muhurta", "day"))
    windows.append(_muhurta(sunrise, sunset, VIJAYA_DAY_PART, "Vijaya Muhurta", "day"))

    windows.append(
        TimeWindow(
            name="Godhuli Muhurta",
            start=sunset - GODHULI_HALF_WIDTH,
            end=sunset + GODHULI_HALF_WIDTH,
            period="day",
            quality="good",
        )
    )
    windows.append(
        TimeWindow(
            name="Sayahna Sandhya",
            start=sunset - SAYAHNA_SANDHYA_HALF_WIDTH,
            end=sunset + SAYAHNA_SANDHYA_HALF_WIDTH,
            period="day",
            quality="good",
        )
    )

    if next_sunrise is not None and next_sunrise > sunset:
        windows.append(
            _muhurta(sunset, next_sunrise, NISHITA_NIGHT_PART, "Nishita Muhurta", "night")
        )

    return sorted(windows, key=lambda w: w.start)


def active_windows(windows: list[TimeWindow], instant: datetime) -> list[TimeWindow]:
    """Windows containing ``instant``."""
    return [w for w in windows if w.contains(instant)]


def next_window(windows: list[TimeWindow], instant: datetime) -> TimeWindow | None:
    """The earliest window starting after ``instant``, or None."""
    upcoming = [w for w in windows if w.start > instant]
    return min(upcoming, key=lambda w: w.start, default=None)


def sarvartha_siddhi_yoga(weekday: int) -> str:
    return SARVARTHA_SIDDHI_YOGA[weekday % 7]
