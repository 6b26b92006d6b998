import threading
from datetime import date

import pytest

from dharmacal.schemas.panchanga import (
    AyanamsaInfo,
    KaranaInfo,
    LocationConfig,
    MaasInfo,
    NakshatraInfo,
    PanchangaSnapshot,
    SankrantiInfo,
    SnapshotMeta,
    TithiInfo,
    YogaInfo,
)


def make_snapshot(date_str, location, tithi=1, sankranti=None, is_adhika=False):
    """A structurally complete snapshot whose values derive from the date."""

    paksha = "Shukla" if tithi <= 15 else "Krishna"
    return PanchangaSnapshot(
        date=date_str,
        location=location,
        sunrise_local="07:30:00",
        sunset_local="17:00:00",
        vara="Somavara",
        tithi=TithiInfo(number=tithi, name="Pratipada", paksha=paksha, end_local="14:05:30"),
        nakshatra=NakshatraInfo(number=1, name="Ashwini", pada=2, end_local="09:10:00"),
        yoga=YogaInfo(number=1, name="Vishkambha"),
        karana=KaranaInfo(number=1, name="Bava", type="Movable"),
        maas=MaasInfo(
            name="Magha",
            id="MAGHA",
            type="Purnimanta",
            lunar_day=tithi + 15 if tithi <= 15 else tithi - 15,
            paksha=paksha,
            is_adhika=is_adhika,
        ),
        ayanamsa=AyanamsaInfo(name="Lahiri", degrees=24.2),
        sankranti=SankrantiInfo(id=sankranti, time="09:03") if sankranti else None,
        meta=SnapshotMeta(engine="fake"),
    )


class FakeEngine:
    """Counts calls and returns snapshots keyed off the civil date."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)
        self._lock = threading.Lock()

    def compute_daily(self, date_str: str, location: LocationConfig) -> PanchangaSnapshot:
        with self._lock:
            self.calls.append((date_str, location.tz))
        if date_str in self.fail_on:
            raise RuntimeError(f"ephemeris unavailable for {date_str}")
        tithi = date.fromisoformat(date_str).toordinal() % 30 + 1
        return make_snapshot(date_str, location, tithi=tithi)


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def delhi_config():
    return LocationConfig(name="New Delhi", lat=28.6139, lon=77.209, tz="Asia/Kolkata")
