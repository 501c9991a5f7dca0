"""
Calendar context around the five limbs.
Moon phase, rashis, lunar month, season, ayana, era years and day lengths.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from engine.constants import RASHI_COUNT, RASHI_SPAN
from engine.numerics import cyclic_index, normalize_angle
from engine.time_utils import ensure_utc

from .elements import KRISHNA, SHUKLA, calculate_nakshatra

# Rashi (sidereal sign) names, 0 = Mesha
RASHI_NAMES = [
    "Mesha",
    "Vrishabha",
    "Mithuna",
    "Karka",
    "Simha",
    "Kanya",
    "Tula",
    "Vrischika",
    "Dhanus",
    "Makara",
    "Kumbha",
    "Meena",
]

# Lunar Months, 0 = Chaitra
LUNAR_MONTHS = [
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwina",
    "Kartika",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
]

# Seasons (Ritus), two lunar months each starting from Chaitra
RITUS = [
    "Vasanta",  # Spring (Chaitra-Vaishakha)
    "Grishma",  # Summer (Jyeshtha-Ashadha)
    "Varsha",  # Monsoon (Shravana-Bhadrapada)
    "Sharad",  # Autumn (Ashwina-Kartika)
    "Hemanta",  # Pre-winter (Margashirsha-Pausha)
    "Shishira",  # Winter (Magha-Phalguna)
]

# Eight phases in 45° bins of elongation
MOON_PHASES = [
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
]

# Mean daily motion of the Sun relative to the Moon-Sun elongation rate
SUN_TO_ELONGATION_RATE = 0.9856 / (13.1764 - 0.9856)

# Shaka era offset from the Gregorian year once Chaitra has begun
SHAKA_OFFSET = 78
VIKRAMA_FROM_SHAKA = 135
KARTIKA_INDEX = 7
MARGASHIRSHA_INDEX = 8


@dataclass(frozen=True)
class CalendarInfo:
    """Calendar context for one instant"""

    moon_phase: str
    paksha: str
    sun_rashi: str
    moon_rashi: str
    surya_nakshatra: str
    masa: dict[str, str]  # amanta / purnimanta month names
    ritu: str
    ayana: str
    samvat: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "moon_phase": self.moon_phase,
            "paksha": self.paksha,
            "sun_rashi": self.sun_rashi,
            "moon_rashi": self.moon_rashi,
            "surya_nakshatra": self.surya_nakshatra,
            "masa": dict(self.masa),
            "ritu": self.ritu,
            "ayana": self.ayana,
            "samvat": dict(self.samvat),
        }


def rashi_name(longitude: float) -> str:
    return RASHI_NAMES[cyclic_index(longitude, RASHI_SPAN, RASHI_COUNT)]


def calculate_moon_phase(sun_longitude: float, moon_longitude: float) -> str:
    elong = normalize_angle(moon_longitude - sun_longitude)
    return MOON_PHASES[cyclic_index(elong, 45.0, len(MOON_PHASES))]


def amanta_month_index(sun_longitude: float, moon_longitude: float) -> int:
    """Amanta (new moon ending) month index, 0 = Chaitra.

    The month takes its name from the Sun's rashi at the preceding new moon:
    Sun in Meena gives Chaitra. The Sun's position at that new moon is
    estimated by stepping back along the mean elongation rate.
    """
    elong = normalize_angle(moon_longitude - sun_longitude)
    sun_at_new_moon = normalize_angle(sun_longitude - elong * SUN_TO_ELONGATION_RATE)
    rashi = cyclic_index(sun_at_new_moon, RASHI_SPAN, RASHI_COUNT)
    return (rashi + 1) % RASHI_COUNT


def calculate_masa(sun_longitude: float, moon_longitude: float) -> dict[str, str]:
    """Lunar month in both reckonings.

    The purnimanta month runs a fortnight ahead, so during Krishna paksha it
    already carries the next month's name.
    """
    amanta = amanta_month_index(sun_longitude, moon_longitude)
    krishna = normalize_angle(moon_longitude - sun_longitude) >= 180.0
    purnimanta = (amanta + 1) % RASHI_COUNT if krishna else amanta
    return {"amanta": LUNAR_MONTHS[amanta], "purnimanta": LUNAR_MONTHS[purnimanta]}


def calculate_ritu(month_index: int) -> str:
    return RITUS[(month_index % RASHI_COUNT) // 2]


def calculate_ayana(sun_longitude: float) -> str:
    """Uttarayana from the Sun's entry into Makara until its entry into Karka."""
    lon = normalize_angle(sun_longitude)
    return "Uttarayana" if lon >= 270.0 or lon < 90.0 else "Dakshinayana"


def calculate_samvat(instant: datetime, month_index: int) -> dict[str, int]:
    """Shaka, Vikrama and Gujarati (Kartikadi) era years.

    The Shaka and Vikrama years turn at Chaitra; months from Margashirsha
    to Phalguna seen early in the Gregorian year still belong to the old year.
    The Gujarati year turns at Kartika.
    """
    instant = ensure_utc(instant)
    not_turned = instant.month <= 4 and month_index >= MARGASHIRSHA_INDEX
    shaka = instant.year - SHAKA_OFFSET - (1 if not_turned else 0)
    vikrama = shaka + VIKRAMA_FROM_SHAKA
    gujarati = vikrama if month_index >= KARTIKA_INDEX else vikrama - 1
    return {"shaka": shaka, "vikrama": vikrama, "gujarati": gujarati}


def calculate_calendar_info(
    sun_longitude: float, moon_longitude: float, instant: datetime
) -> CalendarInfo:
    """Calendar context from sidereal Sun/Moon longitudes at ``instant``."""
    month = amanta_month_index(sun_longitude, moon_longitude)
    elong = normalize_angle(moon_longitude - sun_longitude)

    return CalendarInfo(
        moon_phase=calculate_moon_phase(sun_longitude, moon_longitude),
        paksha=SHUKLA if elong < 180.0 else KRISHNA,
        sun_rashi=rashi_name(sun_longitude),
        moon_rashi=rashi_name(moon_longitude),
        surya_nakshatra=calculate_nakshatra(sun_longitude).name,
        masa=calculate_masa(sun_longitude, moon_longitude),
        ritu=calculate_ritu(month),
        ayana=calculate_ayana(sun_longitude),
        samvat=calculate_samvat(instant, month),
    )


# ============================================================================
# DAY LENGTHS
# ============================================================================


def _hms(delta: timedelta) -> dict[str, int]:
    total = int(round(delta.total_seconds()))
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return {"hours": hours, "minutes": minutes, "seconds": seconds}


def calculate_day_durations(
    sunrise: datetime | None,
    sunset: datetime | None,
    next_sunrise: datetime | None,
) -> dict:
    """Dinamana (day length), ratrimana (night length) and madhyahna (solar midday).

    Unknown bounds give None for the affected values.
    """
    dinamana = ratrimana = madhyahna = None
    if sunrise is not None and sunset is not None and sunset > sunrise:
        dinamana = _hms(sunset - sunrise)
        madhyahna = (sunrise + (sunset - sunrise) / 2).isoformat()
    if sunset is not None and next_sunrise is not None and next_sunrise > sunset:
        ratrimana = _hms(next_sunrise - sunset)
    return {"dinamana": dinamana, "ratrimana": ratrimana, "madhyahna": madhyahna}
