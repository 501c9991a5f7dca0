"""
Panchanga element classification.
The five limbs of the Vedic calendar as pure functions of sidereal longitudes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime, timedelta
from math import floor
from typing import ClassVar

from engine.constants import (
    KARANA_COUNT,
    KARANA_SPAN,
    NAKSHATRA_COUNT,
    NAKSHATRA_SPAN,
    PADA_SPAN,
    PADAS_PER_NAKSHATRA,
    TITHI_COUNT,
    TITHI_SPAN,
    VARA_COUNT,
    VIMSHOTTARI_LORDS,
    YOGA_COUNT,
    YOGA_SPAN,
)
from engine.numerics import cyclic_index, fraction_in_span, normalize_angle
from engine.time_utils import datetime_to_julian_day, ensure_utc, julian_day_fraction

SHUKLA = "Shukla"
KRISHNA = "Krishna"

# Tithi (Lunar Day) Names, shared by both pakshas up to the 14th
TITHI_NAMES = {
    1: "Pratipada",
    2: "Dwitiya",
    3: "Tritiya",
    4: "Chaturthi",
    5: "Panchami",
    6: "Shashthi",
    7: "Saptami",
    8: "Ashtami",
    9: "Navami",
    10: "Dashami",
    11: "Ekadashi",
    12: "Dwadashi",
    13: "Trayodashi",
    14: "Chaturdashi",
}

# The 15th tithi is named by paksha
FIFTEENTH_TITHI = {SHUKLA: "Purnima", KRISHNA: "Amavasya"}

# Tithi Lords (Deities), 1-15; the 15th of Krishna paksha belongs to the Pitrus
TITHI_DEITIES = {
    1: "Agni",
    2: "Brahma",
    3: "Gauri",
    4: "Ganesha",
    5: "Naga",
    6: "Kartikeya",
    7: "Surya",
    8: "Shiva",
    9: "Durga",
    10: "Yama",
    11: "Vishvedeva",
    12: "Vishnu",
    13: "Kamadeva",
    14: "Shiva",
    15: "Moon",
}

# Vara (Weekday) Names and Lords, 0 = Sunday
VARA_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}

VARA_SANSKRIT = {
    0: "Ravivara",
    1: "Somavara",
    2: "Mangalavara",
    3: "Budhavara",
    4: "Guruvara",
    5: "Shukravara",
    6: "Shanivara",
}

VARA_LORDS = {
    0: "Sun",
    1: "Moon",
    2: "Mars",
    3: "Mercury",
    4: "Jupiter",
    5: "Venus",
    6: "Saturn",
}

# Nakshatra Names
NAKSHATRA_NAMES = {
    1: "Ashwini",
    2: "Bharani",
    3: "Krittika",
    4: "Rohini",
    5: "Mrigashira",
    6: "Ardra",
    7: "Punarvasu",
    8: "Pushya",
    9: "Ashlesha",
    10: "Magha",
    11: "Purva Phalguni",
    12: "Uttara Phalguni",
    13: "Hasta",
    14: "Chitra",
    15: "Swati",
    16: "Vishakha",
    17: "Anuradha",
    18: "Jyeshtha",
    19: "Mula",
    20: "Purva Ashadha",
    21: "Uttara Ashadha",
    22: "Shravana",
    23: "Dhanishta",
    24: "Shatabhisha",
    25: "Purva Bhadrapada",
    26: "Uttara Bhadrapada",
    27: "Revati",
}

# Nakshatra Deities
NAKSHATRA_DEITIES = {
    1: "Ashwini Kumaras",
    2: "Yama",
    3: "Agni",
    4: "Brahma",
    5: "Soma",
    6: "Rudra",
    7: "Aditi",
    8: "Brihaspati",
    9: "Serpent",
    10: "Pitrus",
    11: "Bhaga",
    12: "Aryama",
    13: "Savitar",
    14: "Twashtar",
    15: "Vayu",
    16: "Indragni",
    17: "Mitra",
    18: "Indra",
    19: "Nirrti",
    20: "Apas",
    21: "Vishvedeva",
    22: "Vishnu",
    23: "Vasus",
    24: "Varuna",
    25: "Ajaikapat",
    26: "Ahirbudhnya",
    27: "Pushan",
}

# Yoga Names (27 Yogas)
YOGA_NAMES = {
    1: "Vishkumbha",
    2: "Priti",
    3: "Ayushman",
    4: "Saubhagya",
    5: "Shobhana",
    6: "Atiganda",
    7: "Sukarman",
    8: "Dhriti",
    9: "Shula",
    10: "Ganda",
    11: "Vriddhi",
    12: "Dhruva",
    13: "Vyaghata",
    14: "Harshana",
    15: "Vajra",
    16: "Siddhi",
    17: "Vyatipata",
    18: "Variyan",
    19: "Parigha",
    20: "Shiva",
    21: "Siddha",
    22: "Sadhya",
    23: "Shubha",
    24: "Shukla",
    25: "Brahma",
    26: "Indra",
    27: "Vaidhriti",
}

# Karanas: 7 movable (chara) repeating through the month, 4 fixed (sthira)
CHARA_KARANAS = ("Bava", "Balava", "Kaulava", "Taitila", "Gara", "Vanija", "Vishti")
FIRST_KARANA = "Kimstughna"  # first half of Shukla Pratipada
CLOSING_KARANAS = ("Shakuni", "Chatushpada", "Naga")  # last three half-tithis
KARANA_NAMES = CHARA_KARANAS + CLOSING_KARANAS + (FIRST_KARANA,)

LAST_CHARA_RAW_INDEX = 56


# ============================================================================
# ELEMENT TYPES
# ============================================================================


@dataclass(frozen=True, kw_only=True)
class PanchangaElement:
    """One classified limb of the Panchanga.

    ``index`` is the raw position in the element's cycle (0-based). ``end_instant``
    is filled in by the transition search and stays None when it did not converge.
    """

    cycle: ClassVar[int] = 0
    kind: ClassVar[str] = "element"

    index: int
    name: str
    fraction_complete: float
    end_instant: datetime | None = None

    def with_end(self, end_instant: datetime | None):
        return replace(self, end_instant=end_instant)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {"kind": self.kind, **asdict(self)}
        data["fraction_complete"] = round(self.fraction_complete, 6)
        data["end_instant"] = self.end_instant.isoformat() if self.end_instant else None
        return data


@dataclass(frozen=True, kw_only=True)
class Tithi(PanchangaElement):
    cycle: ClassVar[int] = TITHI_COUNT
    kind: ClassVar[str] = "tithi"

    number: int  # 1-15 within the paksha
    paksha: str
    deity: str

    @property
    def is_purnima(self) -> bool:
        return self.number == 15 and self.paksha == SHUKLA

    @property
    def is_amavasya(self) -> bool:
        return self.number == 15 and self.paksha == KRISHNA


@dataclass(frozen=True, kw_only=True)
class Nakshatra(PanchangaElement):
    cycle: ClassVar[int] = NAKSHATRA_COUNT
    kind: ClassVar[str] = "nakshatra"

    number: int  # 1-27
    pada: int  # 1-4
    lord: str
    deity: str


@dataclass(frozen=True, kw_only=True)
class Yoga(PanchangaElement):
    cycle: ClassVar[int] = YOGA_COUNT
    kind: ClassVar[str] = "yoga"

    number: int  # 1-27


@dataclass(frozen=True, kw_only=True)
class Karana(PanchangaElement):
    cycle: ClassVar[int] = KARANA_COUNT
    kind: ClassVar[str] = "karana"

    number: int  # 1-60
    is_fixed: bool


@dataclass(frozen=True, kw_only=True)
class Vara(PanchangaElement):
    cycle: ClassVar[int] = VARA_COUNT
    kind: ClassVar[str] = "vara"

    sanskrit: str
    lord: str


# ============================================================================
# CLASSIFIERS
# ============================================================================


def tithi_name(number: int, paksha: str) -> str:
    """Name of tithi ``number`` (1-15) in ``paksha``."""
    if number == 15:
        return FIFTEENTH_TITHI[paksha]
    return TITHI_NAMES[number]


def calculate_tithi(sun_longitude: float, moon_longitude: float) -> Tithi:
    """Calculate Tithi (lunar day) from sidereal Sun-Moon positions.

    Args:
        sun_longitude: Sun's sidereal longitude
        moon_longitude: Moon's sidereal longitude

    Returns:
        Tithi folded into its paksha (Shukla for the first 15 of the month)
    """
    elong = normalize_angle(moon_longitude - sun_longitude)
    raw = cyclic_index(elong, TITHI_SPAN, TITHI_COUNT)

    if raw < 15:
        paksha, number = SHUKLA, raw + 1
    else:
        paksha, number = KRISHNA, raw - 14

    deity = "Pitrus" if number == 15 and paksha == KRISHNA else TITHI_DEITIES[number]

    return Tithi(
        index=raw,
        name=tithi_name(number, paksha),
        fraction_complete=fraction_in_span(elong, TITHI_SPAN),
        number=number,
        paksha=paksha,
        deity=deity,
    )


def calculate_nakshatra(moon_longitude: float) -> Nakshatra:
    """Calculate Nakshatra (lunar mansion) and pada from the Moon's position."""
    lon = normalize_angle(moon_longitude)
    raw = cyclic_index(lon, NAKSHATRA_SPAN, NAKSHATRA_COUNT)
    offset = lon - raw * NAKSHATRA_SPAN
    pada = min(int(floor(offset / PADA_SPAN)), PADAS_PER_NAKSHATRA - 1) + 1
    number = raw + 1

    return Nakshatra(
        index=raw,
        name=NAKSHATRA_NAMES[number],
        fraction_complete=fraction_in_span(lon, NAKSHATRA_SPAN),
        number=number,
        pada=pada,
        lord=VIMSHOTTARI_LORDS[raw % len(VIMSHOTTARI_LORDS)],
        deity=NAKSHATRA_DEITIES[number],
    )


def longitude_from_nakshatra(number: int, pada: int = 1, offset: float = 0.0) -> float:
    """Sidereal longitude at ``offset`` degrees into ``pada`` of nakshatra ``number``.

    Inverse of calculate_nakshatra for offsets inside the pada.
    """
    if not 1 <= number <= NAKSHATRA_COUNT:
        raise ValueError(f"Nakshatra number out of range: {number}")
    if not 1 <= pada <= PADAS_PER_NAKSHATRA:
        raise ValueError(f"Pada out of range: {pada}")
    if not 0.0 <= offset < PADA_SPAN:
        raise ValueError(f"Offset must lie within one pada: {offset}")
    return (number - 1) * NAKSHATRA_SPAN + (pada - 1) * PADA_SPAN + offset


def calculate_yoga(sun_longitude: float, moon_longitude: float) -> Yoga:
    """Calculate Yoga from combined Sun-Moon longitudes."""
    total = normalize_angle(sun_longitude + moon_longitude)
    raw = cyclic_index(total, YOGA_SPAN, YOGA_COUNT)

    return Yoga(
        index=raw,
        name=YOGA_NAMES[raw + 1],
        fraction_complete=fraction_in_span(total, YOGA_SPAN),
        number=raw + 1,
    )


def karana_name(raw_index: int) -> str:
    """Name of the karana at raw half-tithi index 0-59.

    Index 0 is Kimstughna, 1-56 cycle through the seven movable karanas
    starting from Bava, and 57-59 are Shakuni, Chatushpada and Naga.
    """
    if not 0 <= raw_index < KARANA_COUNT:
        raise ValueError(f"Karana index out of range: {raw_index}")
    if raw_index == 0:
        return FIRST_KARANA
    if raw_index <= LAST_CHARA_RAW_INDEX:
        return CHARA_KARANAS[(raw_index - 1) % len(CHARA_KARANAS)]
    return CLOSING_KARANAS[raw_index - LAST_CHARA_RAW_INDEX - 1]


def calculate_karana(sun_longitude: float, moon_longitude: float) -> Karana:
    """Calculate Karana (half-tithi) from the Sun-Moon elongation."""
    elong = normalize_angle(moon_longitude - sun_longitude)
    raw = cyclic_index(elong, KARANA_SPAN, KARANA_COUNT)

    return Karana(
        index=raw,
        name=karana_name(raw),
        fraction_complete=fraction_in_span(elong, KARANA_SPAN),
        number=raw + 1,
        is_fixed=raw == 0 or raw > LAST_CHARA_RAW_INDEX,
    )


def vara_index(instant: datetime, longitude: float = 0.0) -> int:
    """Weekday of the civil day containing ``instant``, 0 = Sunday.

    The day is reckoned on the local mean solar clock at ``longitude``;
    the default of 0 gives the UT day.
    """
    jd = datetime_to_julian_day(instant) + longitude / 360.0
    return int(floor(jd + 1.5)) % VARA_COUNT


def calculate_vara(instant: datetime, longitude: float = 0.0) -> Vara:
    """Calculate Vara (weekday) from the Julian Day of ``instant``.

    Independent of ayanamsa and of the Sun/Moon positions.
    """
    idx = vara_index(instant, longitude)
    local = ensure_utc(instant) + timedelta(hours=longitude / 15.0)
    return Vara(
        index=idx,
        name=VARA_NAMES[idx],
        fraction_complete=julian_day_fraction(local),
        sanskrit=VARA_SANSKRIT[idx],
        lord=VARA_LORDS[idx],
    )
