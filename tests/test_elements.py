from __future__ import annotations

from datetime import UTC, datetime

import pytest

from modules.panchanga.elements import (
    KRISHNA,
    SHUKLA,
    calculate_karana,
    calculate_nakshatra,
    calculate_tithi,
    calculate_vara,
    calculate_yoga,
    karana_name,
    longitude_from_nakshatra,
    vara_index,
)


@pytest.mark.parametrize(
    "sun, moon, number, paksha, name",
    [
        (0.0, 5.0, 1, SHUKLA, "Pratipada"),
        (350.0, 10.0, 2, SHUKLA, "Dwitiya"),
        (0.0, 179.9, 15, SHUKLA, "Purnima"),
        (0.0, 180.0, 1, KRISHNA, "Pratipada"),
        (0.0, 305.0, 11, KRISHNA, "Ekadashi"),
        (0.0, 359.9, 15, KRISHNA, "Amavasya"),
    ],
)
def test_tithi_folds_into_paksha(sun, moon, number, paksha, name):
    tithi = calculate_tithi(sun, moon)
    assert tithi.number == number
    assert tithi.paksha == paksha
    assert tithi.name == name
    assert 0.0 <= tithi.fraction_complete < 1.0


def test_tithi_extremes():
    assert calculate_tithi(0.0, 179.9).is_purnima
    amavasya = calculate_tithi(0.0, 359.9)
    assert amavasya.is_amavasya
    assert amavasya.deity == "Pitrus"
    assert amavasya.index == 29


def test_tithi_fraction_complete():
    # 6° into a 12° tithi
    assert calculate_tithi(10.0, 16.0).fraction_complete == pytest.approx(0.5)


def test_nakshatra_boundaries():
    first = calculate_nakshatra(0.0)
    assert (first.number, first.name, first.pada, first.lord) == (1, "Ashwini", 1, "Ketu")

    last = calculate_nakshatra(359.99)
    assert (last.number, last.name, last.pada, last.lord) == (27, "Revati", 4, "Mercury")

    # Negative input wraps
    assert calculate_nakshatra(-0.01).number == 27


def test_nakshatra_inverse():
    lon = longitude_from_nakshatra(3, pada=2, offset=1.0)
    assert lon == pytest.approx(31.0)
    nak = calculate_nakshatra(lon)
    assert (nak.name, nak.pada) == ("Krittika", 2)

    for number in (1, 9, 14, 27):
        for pada in (1, 4):
            result = calculate_nakshatra(longitude_from_nakshatra(number, pada, 0.5))
            assert (result.number, result.pada) == (number, pada)


@pytest.mark.parametrize("args", [(0, 1), (28, 1), (1, 0), (1, 5)])
def test_nakshatra_inverse_rejects_out_of_range(args):
    with pytest.raises(ValueError):
        longitude_from_nakshatra(*args)


def test_yoga_from_sum():
    assert calculate_yoga(0.0, 0.0).name == "Vishkumbha"
    # 200 + 200 wraps to 40°, the fourth yoga
    yoga = calculate_yoga(200.0, 200.0)
    assert (yoga.number, yoga.name) == (4, "Saubhagya")
    assert calculate_yoga(180.0, 179.99).name == "Vaidhriti"


@pytest.mark.parametrize(
    "raw, name",
    [
        (0, "Kimstughna"),
        (1, "Bava"),
        (2, "Balava"),
        (7, "Vishti"),
        (8, "Bava"),
        (56, "Vishti"),
        (57, "Shakuni"),
        (58, "Chatushpada"),
        (59, "Naga"),
    ],
)
def test_karana_sequence(raw, name):
    assert karana_name(raw) == name
    karana = calculate_karana(0.0, raw * 6.0 + 3.0)
    assert karana.index == raw
    assert karana.number == raw + 1
    assert karana.name == name
    assert karana.is_fixed == (raw == 0 or raw >= 57)


@pytest.mark.parametrize("raw", [-1, 60])
def test_karana_name_out_of_range(raw):
    with pytest.raises(ValueError):
        karana_name(raw)


def test_vara_known_dates():
    assert calculate_vara(datetime(2000, 1, 1, 12, tzinfo=UTC)).name == "Saturday"
    assert calculate_vara(datetime(2025, 7, 20, 19, tzinfo=UTC), -119.496).name == "Sunday"


def test_vara_follows_local_mean_day():
    late_utc = datetime(2000, 1, 1, 23, tzinfo=UTC)
    assert vara_index(late_utc) == 6
    # 90°E is six hours ahead: already Sunday there
    assert vara_index(late_utc, 90.0) == 0


def test_vara_details():
    vara = calculate_vara(datetime(2000, 1, 1, 12, tzinfo=UTC))
    assert vara.sanskrit == "Shanivara"
    assert vara.lord == "Saturn"
    assert vara.fraction_complete == pytest.approx(0.5, abs=1e-6)


def test_element_serialization():
    data = calculate_tithi(0.0, 305.0).to_dict()
    assert data["kind"] == "tithi"
    assert data["end_instant"] is None

    end = datetime(2025, 7, 21, 3, tzinfo=UTC)
    data = calculate_tithi(0.0, 305.0).with_end(end).to_dict()
    assert data["end_instant"] == end.isoformat()
