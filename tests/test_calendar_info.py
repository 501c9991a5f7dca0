from __future__ import annotations

from datetime import UTC, datetime

import pytest

from modules.panchanga.calendar_info import (
    calculate_ayana,
    calculate_calendar_info,
    calculate_day_durations,
    calculate_masa,
    calculate_moon_phase,
    calculate_ritu,
    calculate_samvat,
    rashi_name,
)

# Sidereal Sun in early Karka, Moon in Krittika (Krishna Ekadashi)
JULY_SUN = 94.0
JULY_MOON = 35.0
JULY_INSTANT = datetime(2025, 7, 20, 13, 0, tzinfo=UTC)


def test_reference_calendar_context():
    info = calculate_calendar_info(JULY_SUN, JULY_MOON, JULY_INSTANT)
    assert info.paksha == "Krishna"
    assert info.moon_phase == "Last Quarter"
    assert info.sun_rashi == "Karka"
    assert info.moon_rashi == "Vrishabha"
    assert info.surya_nakshatra == "Pushya"
    assert info.masa == {"amanta": "Ashadha", "purnimanta": "Shravana"}
    assert info.ritu == "Grishma"
    assert info.ayana == "Dakshinayana"
    assert info.samvat == {"shaka": 1947, "vikrama": 2082, "gujarati": 2081}

    data = info.to_dict()
    assert data["masa"]["amanta"] == "Ashadha"


def test_masa_same_in_shukla_paksha():
    # Five days after new moon the two reckonings agree
    masa = calculate_masa(sun_longitude=75.0, moon_longitude=135.0)
    assert masa["amanta"] == masa["purnimanta"] == "Ashadha"


def test_chaitra_follows_sun_in_meena():
    masa = calculate_masa(sun_longitude=350.0, moon_longitude=20.0)
    assert masa["amanta"] == "Chaitra"


@pytest.mark.parametrize(
    "elong, phase",
    [(0.0, "New Moon"), (90.0, "First Quarter"), (180.0, "Full Moon"), (350.0, "Waning Crescent")],
)
def test_moon_phase_bins(elong, phase):
    assert calculate_moon_phase(0.0, elong) == phase


@pytest.mark.parametrize(
    "lon, ayana",
    [(270.0, "Uttarayana"), (0.0, "Uttarayana"), (89.9, "Uttarayana"), (90.0, "Dakshinayana"), (269.9, "Dakshinayana")],
)
def test_ayana(lon, ayana):
    assert calculate_ayana(lon) == ayana


def test_ritu_pairs_months():
    assert [calculate_ritu(m) for m in (0, 1, 2, 11)] == ["Vasanta", "Vasanta", "Grishma", "Shishira"]


def test_rashi_names():
    assert rashi_name(0.0) == "Mesha"
    assert rashi_name(359.9) == "Meena"
    assert rashi_name(-1.0) == "Meena"


def test_samvat_before_chaitra():
    # Pausha in January still belongs to the previous Shaka year
    samvat = calculate_samvat(datetime(2026, 1, 10, tzinfo=UTC), month_index=9)
    assert samvat == {"shaka": 1947, "vikrama": 2082, "gujarati": 2082}


@pytest.mark.parametrize(
    "instant",
    [datetime(2023, 12, 20, tzinfo=UTC), datetime(2024, 1, 5, 6, 0, tzinfo=UTC)],
)
def test_margashirsha_keeps_year_across_january(instant):
    samvat = calculate_samvat(instant, month_index=8)
    assert samvat == {"shaka": 1945, "vikrama": 2080, "gujarati": 2080}


def test_early_january_calendar_info():
    # 2024-01-05: Sun in Dhanus, six days before the new moon ending Margashirsha
    info = calculate_calendar_info(260.0, 187.0, datetime(2024, 1, 5, 6, 0, tzinfo=UTC))
    assert info.masa["amanta"] == "Margashirsha"
    assert info.samvat == {"shaka": 1945, "vikrama": 2080, "gujarati": 2080}


def test_day_durations():
    sunrise = datetime(2025, 7, 20, 6, 0, tzinfo=UTC)
    sunset = datetime(2025, 7, 20, 19, 30, tzinfo=UTC)
    next_sunrise = datetime(2025, 7, 21, 6, 1, tzinfo=UTC)

    durations = calculate_day_durations(sunrise, sunset, next_sunrise)
    assert durations["dinamana"] == {"hours": 13, "minutes": 30, "seconds": 0}
    assert durations["ratrimana"] == {"hours": 10, "minutes": 31, "seconds": 0}
    assert durations["madhyahna"] == datetime(2025, 7, 20, 12, 45, tzinfo=UTC).isoformat()


def test_day_durations_without_sunrise():
    durations = calculate_day_durations(None, None, None)
    assert durations == {"dinamana": None, "ratrimana": None, "madhyahna": None}
