"""Panchanga element algorithms on top of Swiss Ephemeris.

Every element is evaluated at a single moment (usually local sunrise) and its
end instant is located by bisecting the relevant angle. Lunar month, leap
month and solar ingress detection live here too.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

import swisseph as swe

from .ephem import backend_flag, jd_to_datetime, sidereal_longitudes, to_jd

TITHI_NAMES = [
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
    "Purnima",
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
    "Amavasya",
]

NAKSHATRA_NAMES = [
    "Ashwini",
    "Bharani",
    "Krittika",
    "Rohini",
    "Mrigashira",
    "Ardra",
    "Punarvasu",
    "Pushya",
    "Ashlesha",
    "Magha",
    "Purva Phalguni",
    "Uttara Phalguni",
    "Hasta",
    "Chitra",
    "Swati",
    "Vishakha",
    "Anuradha",
    "Jyeshtha",
    "Mula",
    "Purva Ashadha",
    "Uttara Ashadha",
    "Shravana",
    "Dhanishta",
    "Shatabhisha",
    "Purva Bhadrapada",
    "Uttara Bhadrapada",
    "Revati",
]

YOGA_NAMES = [
    "Vishkumbha",
    "Priti",
    "Ayushman",
    "Saubhagya",
    "Shobhana",
    "Atiganda",
    "Sukarma",
    "Dhriti",
    "Shula",
    "Ganda",
    "Vriddhi",
    "Dhruva",
    "Vyaghata",
    "Harshana",
    "Vajra",
    "Siddhi",
    "Vyatipata",
    "Variyan",
    "Parigha",
    "Shiva",
    "Siddha",
    "Sadhya",
    "Shubha",
    "Shukla",
    "Brahma",
    "Indra",
    "Vaidhriti",
]

MOBILE_KARANAS = [
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Garaja",
    "Vanija",
    "Vishti",
]

FIXED_KARANAS = [
    "Shakuni",
    "Chatushpada",
    "Naga",
    "Kimstughna",
]

MASA_NAMES = [
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwin",
    "Kartik",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
]


VARA_NAMES = [
    "Somavara",
    "Mangalavara",
    "Budhavara",
    "Guruvara",
    "Shukravara",
    "Shanivara",
    "Ravivara",
]

NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0
YOGA_SPAN = 360.0 / 27.0
KARANA_SPAN = 6.0
TITHI_SPAN = 12.0


# --- K A R A N A ---


def karana_at_delta_deg(delta_deg: float) -> Tuple[int, str]:
    """Resolve the karana number (1..11) and name for a Moon-Sun elongation.

    Movable karanas are 1..7, fixed karanas 8..11.
    """

    d = delta_deg % 360.0
    half_tithi_index = int(d // KARANA_SPAN)

    if half_tithi_index == 0:
        return 11, "Kimstughna"
    if half_tithi_index == 57:
        return 8, "Shakuni"
    if half_tithi_index == 58:
        return 9, "Chatushpada"
    if half_tithi_index == 59:
        return 10, "Naga"

    slot = (half_tithi_index - 1) % len(MOBILE_KARANAS)
    return 1 + slot, MOBILE_KARANAS[slot]


def karana_type(number: int) -> str:
    return "Fixed" if number >= 8 else "Movable"


# --- angles ---


def _sun_longitude(moment: datetime, ayanamsha: str = "lahiri") -> float:
    return sidereal_longitudes(to_jd(moment), ayanamsha)["Sun"]


def _moon_longitude(moment: datetime, ayanamsha: str = "lahiri") -> float:
    return sidereal_longitudes(to_jd(moment), ayanamsha)["Moon"]


def _moon_sun_diff(moment: datetime, ayanamsha: str = "lahiri") -> float:
    """Return the longitudinal separation between Moon and Sun in degrees."""

    lons = sidereal_longitudes(to_jd(moment), ayanamsha)
    return (lons["Moon"] - lons["Sun"]) % 360.0


def _yoga_value(moment: datetime, ayanamsha: str = "lahiri") -> float:
    lons = sidereal_longitudes(to_jd(moment), ayanamsha)
    return (lons["Sun"] + lons["Moon"]) % 360.0


def _unwrap(value: float, reference: float) -> float:
    while value < reference:
        value += 360.0
    return value


def _find_end(
    reference_time: datetime,
    reference_value: float,
    target: float,
    getter: Callable[[datetime], float],
    step_hours: int = 6,
    max_hours: int = 96,
) -> datetime:
    """Locate the moment after ``reference_time`` when ``getter`` reaches ``target``."""

    while target < reference_value:
        target += 360.0

    candidate_time = reference_time + timedelta(hours=max_hours)
    hours = step_hours
    while hours <= max_hours:
        probe = reference_time + timedelta(hours=hours)
        if _unwrap(getter(probe), reference_value) >= target:
            candidate_time = probe
            break
        hours += step_hours

    low_time, high_time = reference_time, candidate_time
    for _ in range(40):
        midpoint = low_time + (high_time - low_time) / 2
        if _unwrap(getter(midpoint), reference_value) < target:
            low_time = midpoint
        else:
            high_time = midpoint

    return high_time


# --- elements at a moment ---


def compute_tithi(moment: datetime, ayanamsha: str = "lahiri") -> Tuple[int, str, datetime]:
    diff = _moon_sun_diff(moment, ayanamsha)
    number = int(diff // TITHI_SPAN) + 1
    end_time = _find_end(moment, diff, number * TITHI_SPAN, lambda dt: _moon_sun_diff(dt, ayanamsha))
    return number, TITHI_NAMES[number - 1], end_time


def compute_nakshatra(moment: datetime, ayanamsha: str = "lahiri") -> Tuple[int, str, int, datetime]:
    moon_lon = _moon_longitude(moment, ayanamsha)
    number = int(moon_lon // NAKSHATRA_SPAN) + 1
    pada = int((moon_lon % NAKSHATRA_SPAN) // PADA_SPAN) + 1
    end_target = (math.floor(moon_lon / NAKSHATRA_SPAN) + 1) * NAKSHATRA_SPAN
    end_time = _find_end(moment, moon_lon, end_target, lambda dt: _moon_longitude(dt, ayanamsha))
    return number, NAKSHATRA_NAMES[number - 1], pada, end_time


def compute_yoga(moment: datetime, ayanamsha: str = "lahiri") -> Tuple[int, str, datetime]:
    yoga_val = _yoga_value(moment, ayanamsha)
    number = int(yoga_val // YOGA_SPAN) + 1
    end_target = (math.floor(yoga_val / YOGA_SPAN) + 1) * YOGA_SPAN
    end_time = _find_end(moment, yoga_val, end_target, lambda dt: _yoga_value(dt, ayanamsha))
    return number, YOGA_NAMES[number - 1], end_time


def compute_karana(moment: datetime, ayanamsha: str = "lahiri") -> Tuple[int, str, datetime]:
    diff = _moon_sun_diff(moment, ayanamsha)
    number, name = karana_at_delta_deg(diff)
    end_target = (int(diff // KARANA_SPAN) + 1) * KARANA_SPAN
    end_time = _find_end(moment, diff, end_target, lambda dt: _moon_sun_diff(dt, ayanamsha))
    return number, name, end_time


def sun_rashi(moment: datetime, ayanamsha: str = "lahiri") -> int:
    return int(_sun_longitude(moment, ayanamsha) // 30.0) % 12


# --- rise and set ---


def _rise_or_set(
    start_of_day: datetime,
    body: int,
    rsmi: int,
    lat: float,
    lon: float,
    elevation: float = 0.0,
) -> Optional[datetime]:
    jd_start = to_jd(start_of_day)
    geopos = (lon, lat, elevation)
    try:
        result, times = swe.rise_trans(
            jd_start, body, rsmi | swe.BIT_DISC_CENTER, geopos, 0.0, 0.0, backend_flag()
        )
    except swe.Error:
        return None
    if result < 0 or not times:
        return None
    event_utc = jd_to_datetime(times[0])
    return event_utc.astimezone(start_of_day.tzinfo or timezone.utc)


def compute_solar_events(
    start_of_day: datetime, lat: float, lon: float, elevation: float = 0.0
) -> Tuple[Optional[datetime], Optional[datetime], Optional[datetime]]:
    """Return sunrise, sunset and next day's sunrise for the location."""

    sunrise = _rise_or_set(start_of_day, swe.SUN, swe.CALC_RISE, lat, lon, elevation)
    sunset = _rise_or_set(start_of_day, swe.SUN, swe.CALC_SET, lat, lon, elevation)
    next_sunrise = _rise_or_set(start_of_day + timedelta(days=1), swe.SUN, swe.CALC_RISE, lat, lon, elevation)
    return sunrise, sunset, next_sunrise


def compute_moon_events(
    start_of_day: datetime, lat: float, lon: float, elevation: float = 0.0
) -> Tuple[Optional[datetime], Optional[datetime]]:
    rise = _rise_or_set(start_of_day, swe.MOON, swe.CALC_RISE, lat, lon, elevation)
    set_ = _rise_or_set(start_of_day, swe.MOON, swe.CALC_SET, lat, lon, elevation)
    return rise, set_


# --- lunar month ---


def find_new_moon(moment: datetime, forward: bool = True, ayanamsha: str = "lahiri") -> Optional[datetime]:
    """Return the nearest new moon strictly after (or before) ``moment``."""

    step = timedelta(days=1) if forward else timedelta(days=-1)
    previous_time, previous = moment, _moon_sun_diff(moment, ayanamsha)
    for _ in range(35):
        current_time = previous_time + step
        current = _moon_sun_diff(current_time, ayanamsha)
        # elongation only grows with time, so a drop marks the 360 -> 0 wrap
        if (current < previous) if forward else (current > previous):
            break
        previous_time, previous = current_time, current
    else:
        return None

    low, high = sorted((previous_time, current_time))
    for _ in range(40):
        midpoint = low + (high - low) / 2
        if _moon_sun_diff(midpoint, ayanamsha) > 180.0:
            low = midpoint
        else:
            high = midpoint
    return high


def compute_masa(moment: datetime, ayanamsha: str = "lahiri") -> Tuple[int, bool]:
    """Return the Amanta month index (0 = Chaitra) and the Adhika flag.

    A lunar month is named after the sign the Sun enters during it. When the
    Sun stays in one sign from new moon to new moon no sankranti falls inside
    the month and it is Adhika; it then carries the name of the month that
    follows it.
    """

    previous_new_moon = find_new_moon(moment, forward=False, ayanamsha=ayanamsha)
    next_new_moon = find_new_moon(moment, forward=True, ayanamsha=ayanamsha)
    start_rashi = sun_rashi(previous_new_moon or moment, ayanamsha)
    index = (start_rashi + 1) % 12
    if previous_new_moon is None or next_new_moon is None:
        return index, False
    return index, start_rashi == sun_rashi(next_new_moon, ayanamsha)


# --- sankranti ---


def detect_sankranti(
    day_start: datetime, day_end: datetime, ayanamsha: str = "lahiri"
) -> Optional[Tuple[int, datetime]]:
    """Return the rashi entered and the ingress moment if the Sun changes sign in the window."""

    rashi_start = sun_rashi(day_start, ayanamsha)
    rashi_end = sun_rashi(day_end, ayanamsha)
    if rashi_start == rashi_end:
        return None

    low, high = day_start, day_end
    while high - low > timedelta(minutes=1):
        midpoint = low + (high - low) / 2
        if sun_rashi(midpoint, ayanamsha) == rashi_start:
            low = midpoint
        else:
            high = midpoint
    return rashi_end, low + (high - low) / 2
