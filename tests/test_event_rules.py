from datetime import date

import pytest
from pydantic import TypeAdapter

from dharmacal.schemas.recurrence import (
    EventRule,
    ExplicitSolarRule,
    ExplicitTithiRule,
    MonthlyLunarRule,
    MonthlySolarRule,
    NoneRule,
    YearlyLunarRule,
    YearlySolarRule,
)
from dharmacal.services.rules import rule_from_fields


def test_cadence_maps_to_rule_variant():
    assert isinstance(rule_from_fields("NONE"), NoneRule)
    assert isinstance(rule_from_fields(None), NoneRule)
    assert isinstance(rule_from_fields("YEARLY_LUNAR", tithi="PURNIMA"), YearlyLunarRule)
    assert isinstance(rule_from_fields("MONTHLY_LUNAR", tithi="EKADASHI_SHUKLA"), MonthlyLunarRule)
    assert isinstance(rule_from_fields("YEARLY_SOLAR"), YearlySolarRule)
    assert isinstance(rule_from_fields("MONTHLY_SOLAR"), MonthlySolarRule)


def test_rule_type_takes_precedence_over_cadence():
    rule = rule_from_fields("MONTHLY_LUNAR", rule_type="SOLAR", sankranti="MAKARA_SANKRANTI")
    assert isinstance(rule, ExplicitSolarRule)
    assert rule.sankranti == "MAKARA_SANKRANTI"

    rule = rule_from_fields("NONE", rule_type="TITHI", tithi="AMAVASYA", maas="KARTIK")
    assert isinstance(rule, ExplicitTithiRule)
    assert (rule.tithi, rule.maas) == ("AMAVASYA", "KARTIK")


def test_solar_rule_prefers_rule_config_sankranti():
    rule = rule_from_fields(
        "YEARLY_SOLAR",
        rule_type="solar",
        rule_config={"sankranti": "mesha sankranti"},
        sankranti="MAKARA_SANKRANTI",
    )
    assert rule.sankranti == "MESHA_SANKRANTI"


def test_solar_rule_without_any_sankranti_keeps_none():
    rule = rule_from_fields("YEARLY_SOLAR", rule_type="SOLAR")
    assert isinstance(rule, ExplicitSolarRule)
    assert rule.sankranti is None


def test_ids_are_normalised():
    rule = rule_from_fields("yearly_lunar", tithi="ekadashi-shukla", maas=" phalguna ")
    assert rule.tithi == "EKADASHI_SHUKLA"
    assert rule.maas == "PHALGUNA"


def test_lunar_flags_carried_through():
    rule = rule_from_fields("YEARLY_LUNAR", tithi="PURNIMA", is_adhika_only=True)
    assert rule.is_adhika_only is True
    assert rule.include_adhika is False


def test_reference_date_reaches_solar_templates():
    rule = rule_from_fields("MONTHLY_SOLAR", reference_date=date(2025, 1, 31))
    assert rule.reference_date == date(2025, 1, 31)


@pytest.mark.parametrize(
    "cadence, rule_type",
    [("WEEKLY", None), ("YEARLY_LUNAR", "NAKSHATRA")],
)
def test_unknown_values_raise(cadence, rule_type):
    with pytest.raises(ValueError):
        rule_from_fields(cadence, rule_type=rule_type)


def test_rules_round_trip_through_discriminator():
    adapter = TypeAdapter(EventRule)
    rule = adapter.validate_python({"kind": "yearly_lunar", "tithi": "PURNIMA", "maas": "KARTIK"})
    assert isinstance(rule, YearlyLunarRule)
    assert adapter.validate_python(rule.model_dump()) == rule
