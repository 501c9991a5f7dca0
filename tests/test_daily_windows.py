from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from modules.panchanga.daily_windows import (
    GULIKA_PARTS,
    NIGHT_GULIKA_PARTS,
    RAHU_KAAL_PARTS,
    YAMAGANDA_PARTS,
    calculate_kalam_windows,
    partition,
)

SUNRISE = datetime(2025, 7, 20, 6, 0, tzinfo=UTC)
SUNSET = datetime(2025, 7, 20, 18, 0, tzinfo=UTC)
NEXT_SUNRISE = datetime(2025, 7, 21, 6, 0, tzinfo=UTC)


def _by_name(windows, name, period="day"):
    return next(w for w in windows if w.name == name and w.period == period)


def test_partition_tiles_interval_exactly():
    start = SUNRISE
    end = SUNSET + timedelta(seconds=7, microseconds=3)
    segments = partition(start, end, 8)

    assert len(segments) == 8
    assert segments[0][0] == start
    assert segments[-1][1] == end
    for (_, prev_end), (next_start, _) in zip(segments, segments[1:]):
        assert prev_end == next_start
    assert sum((e - s for s, e in segments), timedelta(0)) == end - start


@pytest.mark.parametrize("parts", [0, -1])
def test_partition_rejects_bad_parts(parts):
    with pytest.raises(ValueError):
        partition(SUNRISE, SUNSET, parts)


def test_partition_rejects_empty_interval():
    with pytest.raises(ValueError):
        partition(SUNSET, SUNRISE, 8)


def test_part_tables_cover_week():
    for table in (RAHU_KAAL_PARTS, YAMAGANDA_PARTS, GULIKA_PARTS, NIGHT_GULIKA_PARTS):
        assert set(table) == set(range(7))
        assert all(1 <= part <= 8 for part in table.values())


def test_sunday_day_windows():
    windows = calculate_kalam_windows(SUNRISE, SUNSET, NEXT_SUNRISE, weekday=0)

    rahu = _by_name(windows, "Rahu Kaal")
    assert rahu.segment == 5
    assert rahu.start == SUNRISE + timedelta(hours=6)
    assert rahu.end == SUNRISE + timedelta(minutes=450)
    assert rahu.duration == timedelta(minutes=90)
    assert rahu.quality == "avoid"

    assert _by_name(windows, "Yamaganda").start == SUNRISE + timedelta(minutes=450)
    assert _by_name(windows, "Gulikai").start == SUNRISE + timedelta(hours=9)


@pytest.mark.parametrize(
    "weekday, rahu, gulikai, yamaganda",
    [
        (0, 4, 6, 5),
        (1, 1, 4, 3),
        (2, 6, 2, 1),
        (3, 3, 1, 4),
        (4, 2, 3, 6),
        (5, 5, 0, 2),
        (6, 0, 5, 0),
    ],
)
def test_day_windows_follow_weekday_table(weekday, rahu, gulikai, yamaganda):
    eighth = (SUNSET - SUNRISE) / 8
    windows = calculate_kalam_windows(SUNRISE, SUNSET, None, weekday)

    assert _by_name(windows, "Rahu Kaal").start == SUNRISE + rahu * eighth
    assert _by_name(windows, "Gulikai").start == SUNRISE + gulikai * eighth
    assert _by_name(windows, "Yamaganda").start == SUNRISE + yamaganda * eighth


def test_monday_rahu_kaal_is_second_part():
    windows = calculate_kalam_windows(SUNRISE, SUNSET, NEXT_SUNRISE, weekday=1)
    rahu = _by_name(windows, "Rahu Kaal")
    assert rahu.start == SUNRISE + timedelta(minutes=90)


def test_night_windows_use_night_tables():
    windows = calculate_kalam_windows(SUNRISE, SUNSET, NEXT_SUNRISE, weekday=0)
    night_gulikai = _by_name(windows, "Gulikai", period="night")
    assert night_gulikai.segment == NIGHT_GULIKA_PARTS[0]
    assert night_gulikai.start == SUNSET + timedelta(hours=3)
    assert len(windows) == 5
    assert [w.start for w in windows] == sorted(w.start for w in windows)


def test_night_windows_omitted_without_next_sunrise():
    windows = calculate_kalam_windows(SUNRISE, SUNSET, None, weekday=3)
    assert {w.period for w in windows} == {"day"}
    assert len(windows) == 3


@pytest.mark.parametrize("sunrise, sunset", [(None, SUNSET), (SUNRISE, None), (None, None)])
def test_no_windows_without_sun_times(sunrise, sunset):
    assert calculate_kalam_windows(sunrise, sunset, NEXT_SUNRISE, weekday=0) == []


def test_window_serialization():
    rahu = _by_name(calculate_kalam_windows(SUNRISE, SUNSET, None, 0), "Rahu Kaal")
    data = rahu.to_dict()
    assert data["duration_minutes"] == 90.0
    assert data["segment"] == 5
    assert data["description"]
