"""Expand event rules into concrete occurrence dates.

Lunar rules are matched against the day-attribute table:

* yearly lunar (and explicit TITHI) rules keep the first matching day per
  calendar year after the leap-month and lunar-month filters;
* monthly lunar rules keep every matching day and mark tithis that run
  across two consecutive civil days;
* explicit SOLAR rules match the day on which the named sankranti falls.

Yearly and monthly solar cadences repeat a reference date seeded by the host
application. Every path ends in the same safety cap.
"""

from __future__ import annotations

import calendar
import logging
import os
import warnings
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from ..errors import InvalidRangeError, MissingRuleDataError, TruncationWarning
from ..schemas.recurrence import (
    CalendarEvent,
    DateWindow,
    DayAttributes,
    EventRule,
    ExplicitSolarRule,
    GeneratedOccurrence,
    GenerationResult,
    MonthlyLunarRule,
    MonthlySolarRule,
    RecommendedWindow,
    RecurrenceOptions,
    YearlySolarRule,
)
from .day_store import DayAttributeStore


logger = logging.getLogger(__name__)


DEFAULT_MAX_OCCURRENCES = int(os.getenv("RECURRENCE_MAX_OCCURRENCES", "1000"))

FULL_DAY_START = "00:00"
FULL_DAY_END = "23:59"


def _check_window(window: DateWindow) -> None:
    if window.start > window.end:
        raise InvalidRangeError(f"Window start {window.start} is after end {window.end}")


def _is_next_day(earlier: date, later: date) -> bool:
    return earlier + timedelta(days=1) == later


def _format_day(day: date) -> str:
    return f"{day.day} {calendar.month_name[day.month]}"


def _by_date(days: Iterable[DayAttributes]) -> List[DayAttributes]:
    return sorted(days, key=lambda row: row.date)


def _adhika_filter(rule) -> Optional[bool]:
    if rule.is_adhika_only:
        return True
    if not rule.include_adhika:
        return False
    return None


def _clamped_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


# --- rule paths ------------------------------------------------------------


def _no_occurrences(rule: EventRule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    return []


def _yearly_lunar(rule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    if not rule.tithi:
        raise MissingRuleDataError(f"{rule.kind} rule has no tithi")

    days = store.find_days(
        window.start,
        window.end,
        tithi=rule.tithi,
        is_adhika=_adhika_filter(rule),
    )

    first_by_year: Dict[int, DayAttributes] = {}
    for day in _by_date(days):
        if rule.maas and day.maas != rule.maas:
            continue
        first_by_year.setdefault(day.date.year, day)

    return [
        GeneratedOccurrence(date=day.date, end_time=day.tithi_end_time)
        for day in _by_date(first_by_year.values())
    ]


def _monthly_lunar(rule: MonthlyLunarRule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    if not rule.tithi:
        raise MissingRuleDataError("monthly_lunar rule has no tithi")

    days = _by_date(store.find_days(window.start, window.end, tithi=rule.tithi))

    occurrences: List[GeneratedOccurrence] = []
    for index, day in enumerate(days):
        following = days[index + 1] if index + 1 < len(days) else None
        previous = days[index - 1] if index > 0 else None

        if following is not None and _is_next_day(day.date, following.date):
            occurrences.append(
                GeneratedOccurrence(
                    date=day.date,
                    start_time=FULL_DAY_START,
                    end_time=FULL_DAY_END,
                    notes=f"Begins on this day, continues until {_format_day(following.date)}",
                )
            )
        elif previous is not None and _is_next_day(previous.date, day.date):
            occurrences.append(
                GeneratedOccurrence(
                    date=day.date,
                    start_time=FULL_DAY_START,
                    end_time=day.tithi_end_time,
                    notes=f"Ends at {day.tithi_end_time or 'unknown time'}",
                )
            )
        else:
            occurrences.append(GeneratedOccurrence(date=day.date, end_time=day.tithi_end_time))
    return occurrences


def _solar_rule(rule: ExplicitSolarRule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    if not rule.sankranti:
        raise MissingRuleDataError("solar_rule has no sankranti")

    days = store.find_days(window.start, window.end, sankranti=rule.sankranti)
    return [GeneratedOccurrence(date=day.date, start_time=day.sankranti_time) for day in _by_date(days)]


def _yearly_solar(rule: YearlySolarRule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    reference = rule.reference_date
    if reference is None:
        logger.debug("recurrence.solar.unseeded", extra={"kind": rule.kind})
        return []

    occurrences: List[GeneratedOccurrence] = []
    for year in range(window.start.year, window.end.year + 1):
        day = _clamped_day(year, reference.month, reference.day)
        if day >= reference and window.start <= day <= window.end:
            occurrences.append(GeneratedOccurrence(date=day))
    return occurrences


def _monthly_solar(rule: MonthlySolarRule, window: DateWindow, store: DayAttributeStore) -> List[GeneratedOccurrence]:
    reference = rule.reference_date
    if reference is None:
        logger.debug("recurrence.solar.unseeded", extra={"kind": rule.kind})
        return []

    occurrences: List[GeneratedOccurrence] = []
    year, month = window.start.year, window.start.month
    while (year, month) <= (window.end.year, window.end.month):
        day = _clamped_day(year, month, reference.day)
        if day >= reference and window.start <= day <= window.end:
            occurrences.append(GeneratedOccurrence(date=day))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return occurrences


_PATHS: Dict[str, Callable[..., List[GeneratedOccurrence]]] = {
    "none": _no_occurrences,
    "solar_rule": _solar_rule,
    "tithi_rule": _yearly_lunar,
    "yearly_lunar": _yearly_lunar,
    "yearly_solar": _yearly_solar,
    "monthly_lunar": _monthly_lunar,
    "monthly_solar": _monthly_solar,
}


# --- public API ------------------------------------------------------------


def generate_occurrences(
    rule: EventRule,
    window: DateWindow,
    store: DayAttributeStore,
    options: Optional[RecurrenceOptions] = None,
) -> GenerationResult:
    """Expand ``rule`` over the inclusive ``window``.

    Missing rule data yields an empty result with ``missing_data`` set.
    Results above the safety limit are cut to the limit and flagged as
    truncated.
    """

    _check_window(window)
    limit = (options.max_occurrences if options else None) or DEFAULT_MAX_OCCURRENCES

    logger.debug(
        "recurrence.generate",
        extra={"kind": rule.kind, "start": window.start.isoformat(), "end": window.end.isoformat()},
    )

    try:
        occurrences = _PATHS[rule.kind](rule, window, store)
    except MissingRuleDataError as exc:
        logger.warning("recurrence.rule.missing_data", extra={"kind": rule.kind, "reason": str(exc)})
        return GenerationResult(missing_data=str(exc))

    matched = len(occurrences)
    truncated = matched > limit
    if truncated:
        logger.warning(
            "recurrence.truncated",
            extra={"kind": rule.kind, "matched": matched, "limit": limit},
        )
        warnings.warn(
            f"Generated {matched} occurrences for a {rule.kind} rule, limiting to {limit}",
            TruncationWarning,
            stacklevel=2,
        )
        occurrences = occurrences[:limit]

    return GenerationResult(occurrences=occurrences, truncated=truncated, matched=matched)


def generate_results_for_events(
    events: Iterable[CalendarEvent],
    window: DateWindow,
    store: DayAttributeStore,
    options: Optional[RecurrenceOptions] = None,
) -> Dict[str, GenerationResult]:
    """Generate per event; one event failing leaves the others untouched."""

    _check_window(window)
    results: Dict[str, GenerationResult] = {}
    for event in events:
        try:
            results[event.id] = generate_occurrences(event.rule, window, store, options)
        except Exception as exc:
            logger.warning(
                "recurrence.event.failed",
                extra={"event_id": event.id, "event_name": event.name},
                exc_info=True,
            )
            results[event.id] = GenerationResult(error=str(exc))
    return results


def generate_occurrences_for_events(
    events: Iterable[CalendarEvent],
    window: DateWindow,
    store: DayAttributeStore,
    options: Optional[RecurrenceOptions] = None,
) -> Dict[str, List[GeneratedOccurrence]]:
    results = generate_results_for_events(events, window, store, options)
    return {event_id: result.occurrences for event_id, result in results.items()}


def get_recommended_window(cadence: str) -> RecommendedWindow:
    if cadence == "NONE":
        return RecommendedWindow(years_ahead=0, description="No recurrence")
    if cadence in ("YEARLY_LUNAR", "YEARLY_SOLAR"):
        return RecommendedWindow(years_ahead=5, description="5 years for yearly events")
    if cadence in ("MONTHLY_LUNAR", "MONTHLY_SOLAR"):
        return RecommendedWindow(years_ahead=2, description="2 years for monthly events (24-48 occurrences)")
    return RecommendedWindow(years_ahead=1, description="1 year default")
