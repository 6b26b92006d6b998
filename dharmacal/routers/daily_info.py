"""Daily Panchanga endpoint."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_panchanga_service
from ..errors import EngineComputationError, InvalidDateError, InvalidRangeError
from ..schemas.panchanga import Location, PanchangaSnapshot
from ..services.panchanga_service import PanchangaService, civil_date, resolve_timezone
from ..services.util.place_defaults import normalize_place


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["daily-info"])


MAX_RANGE_DAYS = int(os.getenv("DAILY_INFO_MAX_RANGE_DAYS", "90"))


@router.get(
    "/daily-info",
    response_model=Union[PanchangaSnapshot, List[PanchangaSnapshot]],
    summary="Panchanga for one civil day or an inclusive range of days",
)
def daily_info(
    date: Optional[str] = Query(None, description="Single date (YYYY-MM-DD)"),
    start: Optional[str] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Range end (YYYY-MM-DD)"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Longitude"),
    tz: Optional[str] = Query(None, description="IANA timezone"),
    name: Optional[str] = Query(None, description="Optional place label"),
    service: PanchangaService = Depends(get_panchanga_service),
):
    place, flags = normalize_place(lat, lon, tz, name)
    if flags["place_defaults_used"] or flags["tz_inferred"]:
        logger.info("daily_info.place.defaults", extra={"flags": flags, "tz": place["tz"]})

    location = Location(name=place["name"], lat=place["lat"], lon=place["lon"])
    timezone = place["tz"]

    try:
        if date:
            return service.get_daily(date, location, timezone)

        if start and end:
            first = civil_date(start, timezone)
            last = civil_date(end, timezone)
            if first > last:
                raise InvalidRangeError("Start date must be on or before end date")
            if (last - first).days + 1 > MAX_RANGE_DAYS:
                raise InvalidRangeError(f"Maximum range is {MAX_RANGE_DAYS} days")
            return service.get_range(first, last, location, timezone)

        if start or end:
            raise InvalidRangeError("Both start and end are required for a range")

        today = datetime.now(resolve_timezone(timezone))
        return service.get_daily(today, location, timezone)
    except (InvalidDateError, InvalidRangeError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EngineComputationError as exc:
        logger.error("daily_info.engine.failed", extra={"date": exc.date_str, "place": exc.location_name})
        raise HTTPException(status_code=502, detail="Could not compute Panchanga") from exc
