from datetime import date

from dharmacal.schemas.recurrence import DayAttributes
from dharmacal.services.day_store import InMemoryDayAttributeStore


def _rows():
    return [
        DayAttributes(date=date(2025, 3, 3), tithi="AMAVASYA", maas="PHALGUNA"),
        DayAttributes(date=date(2025, 1, 1), tithi="PURNIMA", maas="PAUSHA"),
        DayAttributes(date=date(2025, 2, 1), tithi="AMAVASYA", maas="MAGHA", is_adhika=True),
        DayAttributes(date=date(2025, 1, 14), sankranti="MAKARA_SANKRANTI", sankranti_time="09:03"),
    ]


def test_find_days_returns_window_in_date_order():
    store = InMemoryDayAttributeStore(_rows())
    found = store.find_days(date(2025, 1, 1), date(2025, 2, 1))
    assert [r.date for r in found] == [date(2025, 1, 1), date(2025, 1, 14), date(2025, 2, 1)]


def test_filters_combine():
    store = InMemoryDayAttributeStore(_rows())
    start, end = date(2025, 1, 1), date(2025, 12, 31)

    assert len(store.find_days(start, end, tithi="AMAVASYA")) == 2
    assert [r.maas for r in store.find_days(start, end, tithi="AMAVASYA", is_adhika=False)] == ["PHALGUNA"]
    assert [r.maas for r in store.find_days(start, end, tithi="AMAVASYA", is_adhika=True)] == ["MAGHA"]
    assert store.find_days(start, end, tithi="AMAVASYA", maas="PAUSHA") == []
    assert [r.date for r in store.find_days(start, end, sankranti="MAKARA_SANKRANTI")] == [date(2025, 1, 14)]


def test_upsert_replaces_row_for_same_day():
    store = InMemoryDayAttributeStore(_rows())
    store.upsert(DayAttributes(date=date(2025, 1, 1), tithi="PRATIPADA_SHUKLA"))
    assert len(store) == 4
    assert store.get(date(2025, 1, 1)).tithi == "PRATIPADA_SHUKLA"


def test_upsert_many_counts_and_clear():
    store = InMemoryDayAttributeStore()
    assert store.upsert_many(_rows()) == 4
    store.clear()
    assert len(store) == 0
    assert store.get(date(2025, 1, 1)) is None
