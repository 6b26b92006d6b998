"""Panchanga orchestration: civil-day normalisation in front of a cached engine.

Callers (API routes, precompute jobs) go through :class:`PanchangaService`
and never talk to the ephemeris engine directly. A date is always read as a
calendar day in the requested timezone, never in UTC.
"""

from __future__ import annotations

import logging
from datetime import date as date_cls, datetime, timedelta
from typing import Any, Dict, List, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import EngineComputationError, InvalidDateError, InvalidRangeError
from ..schemas.panchanga import Location, LocationConfig, PanchangaSnapshot
from .panchanga_cache import PanchangaCache


logger = logging.getLogger(__name__)


DateInput = Union[date_cls, datetime, str]


class PanchangaEngine(Protocol):
    def compute_daily(self, date_str: str, location: LocationConfig) -> PanchangaSnapshot:
        ...


def resolve_timezone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise InvalidDateError(f"Unknown timezone: {tz_name!r}") from exc


def civil_date(value: DateInput, tz_name: str) -> date_cls:
    """Reduce ``value`` to the calendar day it falls on in ``tz_name``.

    Aware datetimes are converted into the zone first; naive datetimes and
    plain dates are taken as already local.
    """

    tz = resolve_timezone(tz_name)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    if isinstance(value, date_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date_cls.fromisoformat(text)
            # fromisoformat only accepts a trailing Z from 3.11 on
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {value!r}") from exc
        return civil_date(parsed, tz_name)
    raise InvalidDateError(f"Invalid date: {value!r}")


def civil_date_key(value: DateInput, tz_name: str) -> str:
    return civil_date(value, tz_name).isoformat()


class PanchangaService:
    def __init__(self, engine: PanchangaEngine, cache: PanchangaCache) -> None:
        self.engine = engine
        self.cache = cache

    def get_daily(self, day: DateInput, location: Location, timezone: str) -> PanchangaSnapshot:
        date_str = civil_date_key(day, timezone)
        config = LocationConfig(name=location.name, lat=location.lat, lon=location.lon, tz=timezone)

        def _compute() -> PanchangaSnapshot:
            logger.info(
                "panchanga.compute",
                extra={"date": date_str, "place": location.name, "tz": timezone},
            )
            try:
                return self.engine.compute_daily(date_str, config)
            except Exception as exc:
                raise EngineComputationError(date_str, location.name, exc) from exc

        return self.cache.get_or_compute(date_str, config, _compute)

    def get_range(
        self,
        start: DateInput,
        end: DateInput,
        location: Location,
        timezone: str,
    ) -> List[PanchangaSnapshot]:
        current = civil_date(start, timezone)
        last = civil_date(end, timezone)
        if current > last:
            raise InvalidRangeError(f"Range start {current} is after end {last}")

        logger.debug(
            "panchanga.range",
            extra={"start": current.isoformat(), "end": last.isoformat(), "days": (last - current).days + 1},
        )
        results: List[PanchangaSnapshot] = []
        while current <= last:
            results.append(self.get_daily(current, location, timezone))
            current += timedelta(days=1)
        return results

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("panchanga.cache.cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "size": self.cache.size,
            "max_size": self.cache.max_size,
            "ttl": self.cache.ttl_seconds,
        }
