"""Recurrence rule, day-attribute and occurrence schemas."""

from __future__ import annotations

from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..services.constants import Paksha


class DayAttributes(BaseModel):
    """One row of the per-day attribute table."""

    model_config = ConfigDict(frozen=True)

    date: date
    tithi: Optional[str] = None
    tithi_end_time: Optional[str] = None
    nakshatra: Optional[str] = None
    nakshatra_end_time: Optional[str] = None
    yoga: Optional[str] = None
    karana: Optional[str] = None
    maas: Optional[str] = None
    is_adhika: bool = False
    paksha: Optional[Paksha] = None
    sankranti: Optional[str] = None
    sankranti_time: Optional[str] = None


class DateWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: date
    end: date


# --- rules -----------------------------------------------------------------


class _RuleBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class _LunarRule(_RuleBase):
    tithi: Optional[str] = None
    maas: Optional[str] = None
    is_adhika_only: bool = False
    include_adhika: bool = False


class NoneRule(_RuleBase):
    kind: Literal["none"] = "none"


class YearlyLunarRule(_LunarRule):
    kind: Literal["yearly_lunar"] = "yearly_lunar"


class ExplicitTithiRule(_LunarRule):
    kind: Literal["tithi_rule"] = "tithi_rule"


class MonthlyLunarRule(_RuleBase):
    kind: Literal["monthly_lunar"] = "monthly_lunar"
    tithi: Optional[str] = None


class ExplicitSolarRule(_RuleBase):
    kind: Literal["solar_rule"] = "solar_rule"
    sankranti: Optional[str] = None


class YearlySolarRule(_RuleBase):
    kind: Literal["yearly_solar"] = "yearly_solar"
    reference_date: Optional[date] = None


class MonthlySolarRule(_RuleBase):
    kind: Literal["monthly_solar"] = "monthly_solar"
    reference_date: Optional[date] = None


EventRule = Annotated[
    Union[
        NoneRule,
        YearlyLunarRule,
        ExplicitTithiRule,
        MonthlyLunarRule,
        ExplicitSolarRule,
        YearlySolarRule,
        MonthlySolarRule,
    ],
    Field(discriminator="kind"),
]


class CalendarEvent(BaseModel):
    id: str
    name: str
    rule: EventRule


# --- results ---------------------------------------------------------------


class GeneratedOccurrence(BaseModel):
    date: date
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None


class GenerationResult(BaseModel):
    occurrences: List[GeneratedOccurrence] = Field(default_factory=list)
    truncated: bool = False
    matched: int = 0
    missing_data: Optional[str] = None
    error: Optional[str] = None


class RecurrenceOptions(BaseModel):
    max_occurrences: Optional[int] = Field(default=None, ge=1)


class RecommendedWindow(BaseModel):
    years_ahead: int
    description: str
