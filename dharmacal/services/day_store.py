"""In-memory day-attribute table.

Rows are keyed by civil date and hold the Vedic attributes the recurrence
engine matches on. The store is protected by a threading lock so the
precompute pass and API handlers can share one instance.
"""

from __future__ import annotations

import threading
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol

from ..schemas.recurrence import DayAttributes


class DayAttributeStore(Protocol):
    def find_days(
        self,
        start: date,
        end: date,
        *,
        tithi: Optional[str] = None,
        maas: Optional[str] = None,
        is_adhika: Optional[bool] = None,
        sankranti: Optional[str] = None,
    ) -> List[DayAttributes]:
        ...


class InMemoryDayAttributeStore:
    def __init__(self, rows: Iterable[DayAttributes] = ()) -> None:
        self._rows: Dict[date, DayAttributes] = {}
        self._lock = threading.Lock()
        self.upsert_many(rows)

    def upsert(self, row: DayAttributes) -> None:
        with self._lock:
            self._rows[row.date] = row

    def upsert_many(self, rows: Iterable[DayAttributes]) -> int:
        count = 0
        with self._lock:
            for row in rows:
                self._rows[row.date] = row
                count += 1
        return count

    def get(self, day: date) -> Optional[DayAttributes]:
        with self._lock:
            return self._rows.get(day)

    def find_days(
        self,
        start: date,
        end: date,
        *,
        tithi: Optional[str] = None,
        maas: Optional[str] = None,
        is_adhika: Optional[bool] = None,
        sankranti: Optional[str] = None,
    ) -> List[DayAttributes]:
        """Return rows inside ``[start, end]`` matching every given filter, ordered by date."""

        with self._lock:
            rows = [row for row in self._rows.values() if start <= row.date <= end]
        if tithi is not None:
            rows = [row for row in rows if row.tithi == tithi]
        if maas is not None:
            rows = [row for row in rows if row.maas == maas]
        if is_adhika is not None:
            rows = [row for row in rows if row.is_adhika is is_adhika]
        if sankranti is not None:
            rows = [row for row in rows if row.sankranti == sankranti]
        return sorted(rows, key=lambda row: row.date)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
