from datetime import date

from dharmacal.schemas.panchanga import Location, LocationConfig
from dharmacal.services.day_store import InMemoryDayAttributeStore
from dharmacal.services.panchanga_cache import PanchangaCache
from dharmacal.services.panchanga_service import PanchangaService
from dharmacal.services.precompute import populate_day_attributes, snapshot_to_day_attributes

from conftest import make_snapshot


HAGUE = LocationConfig(name="Den Haag", lat=52.0785, lon=4.331, tz="Europe/Amsterdam")


def test_snapshot_maps_to_store_ids():
    snap = make_snapshot("2025-01-14", HAGUE, tithi=11, sankranti="MAKARA_SANKRANTI", is_adhika=True)
    row = snapshot_to_day_attributes(snap)

    assert row.date == date(2025, 1, 14)
    assert row.tithi == "EKADASHI_SHUKLA"
    assert row.tithi_end_time == "14:05"
    assert row.nakshatra == "ASHWINI"
    assert row.nakshatra_end_time == "09:10"
    assert row.maas == "MAGHA"
    assert row.is_adhika is True
    assert row.paksha == "SHUKLA"
    assert snap.tithi.paksha_day == 11
    assert row.sankranti == "MAKARA_SANKRANTI"
    assert row.sankranti_time == "09:03"


def test_krishna_tithis_map_to_krishna_ids():
    row = snapshot_to_day_attributes(make_snapshot("2025-01-28", HAGUE, tithi=29))
    assert row.tithi == "CHATURDASHI_KRISHNA"
    assert row.paksha == "KRISHNA"
    assert row.sankranti is None and row.sankranti_time is None

    assert snapshot_to_day_attributes(make_snapshot("2025-01-29", HAGUE, tithi=30)).tithi == "AMAVASYA"
    assert snapshot_to_day_attributes(make_snapshot("2025-01-13", HAGUE, tithi=15)).tithi == "PURNIMA"


def test_populate_fills_one_row_per_day(fake_engine):
    service = PanchangaService(fake_engine, PanchangaCache(max_size=30, ttl_seconds=60))
    store = InMemoryDayAttributeStore()
    location = Location(name=HAGUE.name, lat=HAGUE.lat, lon=HAGUE.lon)

    count = populate_day_attributes(service, store, "2025-01-01", "2025-01-10", location, HAGUE.tz)

    assert count == 10
    assert len(store) == 10
    assert store.get(date(2025, 1, 5)) is not None

    # a second pass is served from the cache and overwrites rows in place
    populate_day_attributes(service, store, "2025-01-01", "2025-01-10", location, HAGUE.tz)
    assert len(fake_engine.calls) == 10
    assert len(store) == 10
