from datetime import date

from dharmacal.schemas.recurrence import (
    DateWindow,
    DayAttributes,
    ExplicitSolarRule,
    MonthlySolarRule,
    YearlySolarRule,
)
from dharmacal.services.day_store import InMemoryDayAttributeStore
from dharmacal.services.recurrence import generate_occurrences


WINDOW = DateWindow(start=date(2025, 1, 1), end=date(2026, 12, 31))


def test_solar_rule_matches_sankranti_days_with_ingress_time():
    store = InMemoryDayAttributeStore(
        [
            DayAttributes(date=date(2025, 1, 14), sankranti="MAKARA_SANKRANTI", sankranti_time="09:03"),
            DayAttributes(date=date(2025, 2, 12), sankranti="KUMBHA_SANKRANTI", sankranti_time="22:03"),
            DayAttributes(date=date(2026, 1, 14), sankranti="MAKARA_SANKRANTI", sankranti_time="15:13"),
        ]
    )
    result = generate_occurrences(ExplicitSolarRule(sankranti="MAKARA_SANKRANTI"), WINDOW, store)

    assert [(o.date, o.start_time) for o in result.occurrences] == [
        (date(2025, 1, 14), "09:03"),
        (date(2026, 1, 14), "15:13"),
    ]


def test_solar_rule_without_sankranti_reports_missing_data():
    result = generate_occurrences(ExplicitSolarRule(), WINDOW, InMemoryDayAttributeStore())
    assert result.occurrences == []
    assert result.missing_data


def test_unseeded_solar_cadences_yield_nothing():
    store = InMemoryDayAttributeStore()
    assert generate_occurrences(YearlySolarRule(), WINDOW, store).occurrences == []
    assert generate_occurrences(MonthlySolarRule(), WINDOW, store).occurrences == []


def test_yearly_solar_repeats_reference_month_and_day():
    rule = YearlySolarRule(reference_date=date(2025, 4, 14))
    result = generate_occurrences(rule, WINDOW, InMemoryDayAttributeStore())
    assert [o.date for o in result.occurrences] == [date(2025, 4, 14), date(2026, 4, 14)]


def test_yearly_solar_skips_dates_before_reference():
    rule = YearlySolarRule(reference_date=date(2025, 6, 1))
    window = DateWindow(start=date(2024, 1, 1), end=date(2026, 12, 31))
    result = generate_occurrences(rule, window, InMemoryDayAttributeStore())
    assert [o.date for o in result.occurrences] == [date(2025, 6, 1), date(2026, 6, 1)]


def test_leap_day_reference_clamps_in_common_years():
    rule = YearlySolarRule(reference_date=date(2024, 2, 29))
    window = DateWindow(start=date(2024, 1, 1), end=date(2028, 12, 31))
    result = generate_occurrences(rule, window, InMemoryDayAttributeStore())
    assert [o.date for o in result.occurrences] == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 29),
    ]


def test_monthly_solar_clamps_to_month_length():
    rule = MonthlySolarRule(reference_date=date(2025, 1, 31))
    window = DateWindow(start=date(2025, 1, 1), end=date(2025, 4, 30))
    result = generate_occurrences(rule, window, InMemoryDayAttributeStore())
    assert [o.date for o in result.occurrences] == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]


def test_monthly_solar_respects_window_edges():
    rule = MonthlySolarRule(reference_date=date(2025, 1, 15))
    window = DateWindow(start=date(2025, 1, 20), end=date(2025, 3, 10))
    result = generate_occurrences(rule, window, InMemoryDayAttributeStore())
    assert [o.date for o in result.occurrences] == [date(2025, 2, 15)]
