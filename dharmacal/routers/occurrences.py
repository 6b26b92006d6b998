"""Event occurrence generation endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..dependencies import get_day_store, get_panchanga_service
from ..errors import EngineComputationError, InvalidDateError, InvalidRangeError
from ..schemas.panchanga import Location
from ..schemas.recurrence import (
    CalendarEvent,
    DateWindow,
    GenerationResult,
    RecommendedWindow,
    RecurrenceOptions,
)
from ..services.day_store import InMemoryDayAttributeStore
from ..services.panchanga_service import PanchangaService
from ..services.precompute import populate_day_attributes
from ..services.recurrence import generate_results_for_events, get_recommended_window
from ..services.rules import rule_from_fields
from ..services.util.place_defaults import DEF_LAT, DEF_LBL, DEF_LON, DEF_TZ


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/events", tags=["events"])


class EventPayload(BaseModel):
    """An event in the shape it is stored: cadence plus loose rule columns."""

    id: str
    name: str
    recurrence_type: str = "NONE"
    rule_type: Optional[str] = None
    rule_config: Optional[Dict[str, Any]] = None
    tithi: Optional[str] = None
    maas: Optional[str] = None
    sankranti: Optional[str] = None
    is_adhika_only: bool = False
    include_adhika: bool = False
    reference_date: Optional[date] = None

    def to_event(self) -> CalendarEvent:
        rule = rule_from_fields(
            self.recurrence_type,
            rule_type=self.rule_type,
            rule_config=self.rule_config,
            tithi=self.tithi,
            maas=self.maas,
            sankranti=self.sankranti,
            is_adhika_only=self.is_adhika_only,
            include_adhika=self.include_adhika,
            reference_date=self.reference_date,
        )
        return CalendarEvent(id=self.id, name=self.name, rule=rule)


class GeneratePlace(BaseModel):
    name: str = DEF_LBL
    lat: float = Field(default=DEF_LAT, ge=-90.0, le=90.0)
    lon: float = Field(default=DEF_LON, ge=-180.0, le=180.0)


class GenerateRequest(BaseModel):
    start_date: date
    end_date: date
    events: List[EventPayload] = Field(default_factory=list)
    location: GeneratePlace = Field(default_factory=GeneratePlace)
    timezone: str = DEF_TZ
    max_occurrences: Optional[int] = Field(default=None, ge=1)
    precompute: bool = True


class GenerateResponse(BaseModel):
    events_processed: int
    generated: int
    days_populated: int
    results: Dict[str, GenerationResult]


@router.post(
    "/generate-occurrences",
    response_model=GenerateResponse,
    summary="Expand event rules into concrete occurrences for a date window",
)
def generate_occurrences_endpoint(
    req: GenerateRequest = Body(
        ...,
        openapi_examples={
            "diwali": {
                "summary": "Yearly lunar event over three years",
                "value": {
                    "start_date": "2025-01-01",
                    "end_date": "2027-12-31",
                    "events": [
                        {
                            "id": "diwali",
                            "name": "Diwali",
                            "recurrence_type": "YEARLY_LUNAR",
                            "tithi": "AMAVASYA",
                            "maas": "KARTIK",
                        }
                    ],
                },
            },
        },
    ),
    service: PanchangaService = Depends(get_panchanga_service),
    store: InMemoryDayAttributeStore = Depends(get_day_store),
):
    window = DateWindow(start=req.start_date, end=req.end_date)
    if window.start > window.end:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")

    results: Dict[str, GenerationResult] = {}
    events: List[CalendarEvent] = []
    for payload in req.events:
        try:
            events.append(payload.to_event())
        except ValueError as exc:
            logger.warning("occurrences.rule.invalid", extra={"event_id": payload.id, "reason": str(exc)})
            results[payload.id] = GenerationResult(error=str(exc))

    days_populated = 0
    if req.precompute and events:
        # rows for this place and zone stay local to the request
        store = InMemoryDayAttributeStore()
        location = Location(name=req.location.name, lat=req.location.lat, lon=req.location.lon)
        try:
            days_populated = populate_day_attributes(
                service, store, window.start, window.end, location, req.timezone
            )
        except (InvalidDateError, InvalidRangeError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except EngineComputationError as exc:
            logger.error("occurrences.precompute.failed", extra={"date": exc.date_str, "place": exc.location_name})
            raise HTTPException(status_code=502, detail="Could not compute Panchanga") from exc

    options = RecurrenceOptions(max_occurrences=req.max_occurrences)
    results.update(generate_results_for_events(events, window, store, options))

    return GenerateResponse(
        events_processed=len(req.events),
        generated=sum(len(result.occurrences) for result in results.values()),
        days_populated=days_populated,
        results=results,
    )


@router.get(
    "/recommended-window",
    response_model=RecommendedWindow,
    summary="How many years ahead to generate for a recurrence cadence",
)
def recommended_window(cadence: str = Query("NONE", description="Recurrence cadence, e.g. YEARLY_LUNAR")):
    return get_recommended_window(cadence.strip().upper())
