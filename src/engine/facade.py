#!/usr/bin/env python3
"""
Panchanga Facade
Orchestration only: sunrise anchor, sidereal snapshot, the five elements,
their end instants, the day's windows, moon times and planet positions.
No astronomy lives here.
"""

import asyncio

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from app.core.config import DEFAULT_AYANAMSA, EPHE_PATH, TransitionSettings
from app.core.logging import get_engine_logger
from config.feature_flags import is_feature_enabled
from interfaces import PositionProvider, SunriseSolver
from modules.panchanga.calendar_info import (
    CalendarInfo,
    calculate_calendar_info,
    calculate_day_durations,
)
from modules.panchanga.daily_windows import calculate_kalam_windows
from modules.panchanga.elements import (
    Karana,
    Nakshatra,
    PanchangaElement,
    Tithi,
    Vara,
    Yoga,
    calculate_karana,
    calculate_nakshatra,
    calculate_tithi,
    calculate_vara,
    calculate_yoga,
    karana_name,
    vara_index,
)
from modules.panchanga.muhurta import (
    calculate_muhurta_windows,
    next_window,
    sarvartha_siddhi_yoga,
)
from modules.panchanga.planets import PlanetPosition, calculate_planet_positions

from .ayanamsa import AyanamsaReading, AyanamsaRegistry
from .change_finder import detect_changes, find_step_change
from .core_types import GeoLocation, MoonTimes, SiderealPair, SunTimes, TimeWindow
from .errors import AyanamsaNotFoundError
from .sidereal import SiderealSnapshot
from .sunrise import SwissSunriseSolver
from .swe_backend import SwissEphemerisProvider
from .time_utils import ensure_utc, local_solar_date, to_local

logger = get_engine_logger("facade")

# Element classifiers over a sidereal pair
_PAIR_CLASSIFIERS: dict[str, Callable[[SiderealPair], PanchangaElement]] = {
    "tithi": lambda p: calculate_tithi(p.sun_longitude, p.moon_longitude),
    "nakshatra": lambda p: calculate_nakshatra(p.moon_longitude),
    "yoga": lambda p: calculate_yoga(p.sun_longitude, p.moon_longitude),
    "karana": lambda p: calculate_karana(p.sun_longitude, p.moon_longitude),
}


# ============================================================================
# RESULT TYPES
# ============================================================================


@dataclass(frozen=True)
class KaranaPeriod:
    """One karana as it runs between sunrise and the next sunrise"""

    number: int
    name: str
    start: datetime
    end: datetime | None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "name": self.name,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class PanchangaResult:
    """Everything computed for one query"""

    instant: datetime
    location: GeoLocation
    anchor: datetime
    anchored_at_sunrise: bool
    ayanamsa: AyanamsaReading
    sidereal: SiderealPair
    tithi: Tithi
    nakshatra: Nakshatra
    yoga: Yoga
    karana: Karana
    vara: Vara
    sun_times: SunTimes
    next_sunrise: datetime | None
    previous_sunset: datetime | None
    calendar: CalendarInfo
    day_durations: dict
    moon_times: MoonTimes
    sarvartha_siddhi_yoga: str
    end_times_computed: bool = False
    kalam_windows: list[TimeWindow] = field(default_factory=list)
    muhurta_windows: list[TimeWindow] = field(default_factory=list)
    karana_schedule: list[KaranaPeriod] = field(default_factory=list)
    planets: list[PlanetPosition] = field(default_factory=list)

    @property
    def elements(self) -> dict[str, PanchangaElement]:
        return {
            "tithi": self.tithi,
            "nakshatra": self.nakshatra,
            "yoga": self.yoga,
            "karana": self.karana,
            "vara": self.vara,
        }

    def next_muhurta(self) -> TimeWindow | None:
        """The first Muhurta window starting after the query instant"""
        return next_window(self.muhurta_windows, self.instant)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        next_muhurta = self.next_muhurta()
        return {
            "instant": self.instant.isoformat(),
            "location": self.location.to_dict(),
            "anchor": self.anchor.isoformat(),
            "anchored_at_sunrise": self.anchored_at_sunrise,
            "ayanamsa": self.ayanamsa.to_dict(),
            "sidereal": self.sidereal.to_dict(),
            "elements": {k: v.to_dict() for k, v in self.elements.items()},
            "sun": {
                **self.sun_times.to_dict(),
                "next_sunrise": self.next_sunrise.isoformat() if self.next_sunrise else None,
                "previous_sunset": (
                    self.previous_sunset.isoformat() if self.previous_sunset else None
                ),
                **self.day_durations,
            },
            "moon": self.moon_times.to_dict(),
            "calendar": self.calendar.to_dict(),
            "kalam_windows": [w.to_dict() for w in self.kalam_windows],
            "muhurta_windows": [w.to_dict() for w in self.muhurta_windows],
            "next_muhurta": next_muhurta.to_dict() if next_muhurta else None,
            "sarvartha_siddhi_yoga": self.sarvartha_siddhi_yoga,
            "karana_schedule": [k.to_dict() for k in self.karana_schedule],
            "planets": [p.to_dict() for p in self.planets],
            "local": self.local_times(),
        }

    def local_times(self) -> dict | None:
        """Anchor and rise/set times on the location's wall clock, when a zone is known"""
        tz = self.location.timezone
        if not tz:
            return None

        def local(t: datetime | None) -> str | None:
            return to_local(t, tz).isoformat() if t else None

        return {
            "timezone": tz,
            "anchor": local(self.anchor),
            "sunrise": local(self.sun_times.sunrise),
            "sunset": local(self.sun_times.sunset),
            "moonrise": local(self.moon_times.moonrise),
            "moonset": local(self.moon_times.moonset),
        }


# ============================================================================
# ENGINE
# ============================================================================


class PanchangaEngine:
    """Compute the Panchanga for an instant and location

    Args:
        provider: PositionProvider; defaults to SwissEphemerisProvider
        sunrise_solver: SunriseSolver; defaults to SwissSunriseSolver
        registry: AyanamsaRegistry; defaults to one reading live values from provider
        settings: Transition search settings; defaults to the environment
        default_ayanamsa: Selector used when compute() receives None
    """

    def __init__(
        self,
        provider: PositionProvider | None = None,
        sunrise_solver: SunriseSolver | None = None,
        registry: AyanamsaRegistry | None = None,
        settings: TransitionSettings | None = None,
        default_ayanamsa: int | str = DEFAULT_AYANAMSA,
    ):
        self.provider = provider or SwissEphemerisProvider(EPHE_PATH)
        if sunrise_solver is None:
            swiss = self.provider if isinstance(self.provider, SwissEphemerisProvider) else None
            sunrise_solver = SwissSunriseSolver(swiss)
        self.sunrise_solver = sunrise_solver
        self.registry = registry or AyanamsaRegistry(self.provider)
        self.settings = settings or TransitionSettings.from_env()
        self.default_ayanamsa = default_ayanamsa

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_end(self, f: Callable[[datetime], int], start: datetime) -> datetime | None:
        return find_step_change(
            f,
            start,
            horizon=self.settings.horizon,
            step=self.settings.step,
            precision=self.settings.precision,
        )

    def sun_times(self, day: date, location: GeoLocation) -> SunTimes:
        return self.sunrise_solver.sunrise_sunset(day, location)

    def _karana_schedule(
        self, snapshot: SiderealSnapshot, start: datetime, end: datetime
    ) -> list[KaranaPeriod]:
        def karana_at(t: datetime) -> int:
            return _PAIR_CLASSIFIERS["karana"](snapshot.at(t)).index

        changes = detect_changes(
            karana_at, start, end, step=self.settings.step, precision=self.settings.precision
        )

        periods = []
        current_index, current_start = karana_at(start), start
        for change in changes:
            periods.append(
                KaranaPeriod(
                    number=current_index + 1,
                    name=karana_name(current_index),
                    start=current_start,
                    end=change.instant,
                )
            )
            current_index, current_start = change.new_value, change.instant

        periods.append(
            KaranaPeriod(
                number=current_index + 1,
                name=karana_name(current_index),
                start=current_start,
                end=self._find_end(karana_at, current_start),
            )
        )
        return periods

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def compute(
        self,
        instant: datetime,
        location: GeoLocation,
        ayanamsa: int | str | None = None,
        compute_end_times: bool = True,
        include_windows: bool = True,
        include_planets: bool = True,
    ) -> PanchangaResult:
        """Compute the Panchanga for the local day containing ``instant``

        Args:
            instant: Query instant (naive values are taken as UTC)
            location: Observer location
            ayanamsa: Registry id or name; None uses the engine default
            compute_end_times: Search for each element's end instant
            include_windows: Produce Kalam/Muhurta windows
            include_planets: Add sidereal positions of the classical planets at ``instant``

        Returns:
            PanchangaResult

        Raises:
            AyanamsaNotFoundError: selector matches no system
            EphemerisUnavailableError: provider could not supply positions
        """
        instant = ensure_utc(instant)
        selector = self.default_ayanamsa if ayanamsa is None else ayanamsa
        system = self.registry.resolve(selector)
        if system is None:
            raise AyanamsaNotFoundError(selector, self.registry.names())

        day = local_solar_date(instant, location.longitude)
        today = self.sun_times(day, location)
        tomorrow = self.sun_times(day + timedelta(days=1), location)
        yesterday = self.sun_times(day - timedelta(days=1), location)

        anchored = today.sunrise is not None
        anchor = today.sunrise if anchored else instant
        if not anchored:
            logger.warning(
                "No sunrise, anchoring at query instant",
                extra={"date": day.isoformat(), "latitude": location.latitude},
            )

        snapshot = SiderealSnapshot(self.provider, self.registry, system)
        pair = snapshot.at(anchor)
        reading = snapshot.ayanamsa_at(anchor)

        elements = {kind: classify(pair) for kind, classify in _PAIR_CLASSIFIERS.items()}
        elements["vara"] = calculate_vara(anchor, location.longitude)

        karana_schedule: list[KaranaPeriod] = []
        end_times_computed = compute_end_times and is_feature_enabled("transitions")
        if end_times_computed:
            for kind in _PAIR_CLASSIFIERS:
                classify = _PAIR_CLASSIFIERS[kind]
                end = self._find_end(lambda t, c=classify: c(snapshot.at(t)).index, anchor)
                elements[kind] = elements[kind].with_end(end)

            end = self._find_end(lambda t: vara_index(t, location.longitude), anchor)
            elements["vara"] = elements["vara"].with_end(end)

            if anchored and tomorrow.sunrise is not None:
                karana_schedule = self._karana_schedule(snapshot, anchor, tomorrow.sunrise)

        kalam_windows: list[TimeWindow] = []
        muhurta_windows: list[TimeWindow] = []
        if include_windows:
            if is_feature_enabled("daily_windows"):
                kalam_windows = calculate_kalam_windows(
                    today.sunrise, today.sunset, tomorrow.sunrise, elements["vara"].index
                )
            if is_feature_enabled("muhurta"):
                muhurta_windows = calculate_muhurta_windows(
                    today.sunrise, today.sunset, tomorrow.sunrise, yesterday.sunset
                )

        planets: list[PlanetPosition] = []
        if include_planets:
            planets = calculate_planet_positions(
                self.provider, instant, snapshot.ayanamsa_at(instant).degree
            )

        logger.debug(
            "Panchanga computed",
            extra={
                "instant": instant.isoformat(),
                "ayanamsa_id": system.id,
                "ayanamsa_source": reading.source.value,
                "anchored_at_sunrise": anchored,
            },
        )

        return PanchangaResult(
            instant=instant,
            location=location,
            anchor=anchor,
            anchored_at_sunrise=anchored,
            ayanamsa=reading,
            sidereal=pair,
            tithi=elements["tithi"],
            nakshatra=elements["nakshatra"],
            yoga=elements["yoga"],
            karana=elements["karana"],
            vara=elements["vara"],
            sun_times=today,
            next_sunrise=tomorrow.sunrise,
            previous_sunset=yesterday.sunset,
            calendar=calculate_calendar_info(pair.sun_longitude, pair.moon_longitude, anchor),
            day_durations=calculate_day_durations(today.sunrise, today.sunset, tomorrow.sunrise),
            moon_times=self.sunrise_solver.moonrise_moonset(day, location),
            sarvartha_siddhi_yoga=sarvartha_siddhi_yoga(elements["vara"].index),
            end_times_computed=end_times_computed,
            kalam_windows=kalam_windows,
            muhurta_windows=muhurta_windows,
            karana_schedule=karana_schedule,
            planets=planets,
        )


# ============================================================================
# MODULE-LEVEL API
# ============================================================================

_ENGINE: PanchangaEngine | None = None


def get_engine() -> PanchangaEngine:
    """Process-wide engine on the Swiss Ephemeris backend"""
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = PanchangaEngine()
    return _ENGINE


@contextmanager
def ephemeris_session(ephe_path: str | None = EPHE_PATH, **engine_kwargs) -> Iterator[PanchangaEngine]:
    """Engine bound to a fresh Swiss Ephemeris provider, closed on exit"""
    with SwissEphemerisProvider(ephe_path) as provider:
        yield PanchangaEngine(provider=provider, **engine_kwargs)


def calculate_panchanga(
    instant: datetime,
    latitude: float,
    longitude: float,
    altitude: float = 0.0,
    timezone: str | None = None,
    ayanamsa: int | str | None = None,
    compute_end_times: bool = True,
    include_windows: bool = True,
    include_planets: bool = True,
) -> PanchangaResult:
    """Compute the Panchanga with the process-wide engine"""
    location = GeoLocation(
        latitude=latitude, longitude=longitude, altitude=altitude, timezone=timezone
    )
    return get_engine().compute(
        instant,
        location,
        ayanamsa=ayanamsa,
        compute_end_times=compute_end_times,
        include_windows=include_windows,
        include_planets=include_planets,
    )


async def calculate_panchanga_async(*args, **kwargs) -> PanchangaResult:
    """calculate_panchanga on a worker thread for async callers"""
    return await asyncio.to_thread(calculate_panchanga, *args, **kwargs)
