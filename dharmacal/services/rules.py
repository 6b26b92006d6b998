"""Build typed event rules from the loose fields stored on an event."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ..schemas.recurrence import (
    EventRule,
    ExplicitSolarRule,
    ExplicitTithiRule,
    MonthlyLunarRule,
    MonthlySolarRule,
    NoneRule,
    YearlyLunarRule,
    YearlySolarRule,
)
from .constants import normalize_id


def rule_from_fields(
    recurrence_type: Optional[str] = "NONE",
    *,
    rule_type: Optional[str] = None,
    rule_config: Optional[Dict[str, Any]] = None,
    tithi: Optional[str] = None,
    maas: Optional[str] = None,
    sankranti: Optional[str] = None,
    is_adhika_only: bool = False,
    include_adhika: bool = False,
    reference_date: Optional[date] = None,
) -> EventRule:
    """Translate stored event columns into one :data:`EventRule` variant.

    An explicit ``rule_type`` wins over the recurrence cadence. A SOLAR rule
    reads its ingress from ``rule_config["sankranti"]`` before falling back to
    the ``sankranti`` column.
    """

    tithi = normalize_id(tithi)
    maas = normalize_id(maas)
    lunar = {
        "tithi": tithi,
        "maas": maas,
        "is_adhika_only": bool(is_adhika_only),
        "include_adhika": bool(include_adhika),
    }

    if rule_type:
        kind = rule_type.strip().upper()
        if kind == "SOLAR":
            configured = (rule_config or {}).get("sankranti")
            return ExplicitSolarRule(sankranti=normalize_id(configured or sankranti))
        if kind == "TITHI":
            return ExplicitTithiRule(**lunar)
        raise ValueError(f"Unsupported rule type: {rule_type!r}")

    cadence = (recurrence_type or "NONE").strip().upper()
    if cadence == "NONE":
        return NoneRule()
    if cadence == "YEARLY_LUNAR":
        return YearlyLunarRule(**lunar)
    if cadence == "MONTHLY_LUNAR":
        return MonthlyLunarRule(tithi=tithi)
    if cadence == "YEARLY_SOLAR":
        return YearlySolarRule(reference_date=reference_date)
    if cadence == "MONTHLY_SOLAR":
        return MonthlySolarRule(reference_date=reference_date)
    raise ValueError(f"Unsupported recurrence type: {recurrence_type!r}")
