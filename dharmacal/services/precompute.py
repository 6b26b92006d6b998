"""Fill the day-attribute table from Panchanga snapshots."""

from __future__ import annotations

import logging
from typing import Optional

from ..schemas.panchanga import Location, PanchangaSnapshot
from ..schemas.recurrence import DayAttributes
from .constants import nakshatra_id, paksha_for_tithi, tithi_id
from .day_store import InMemoryDayAttributeStore
from .panchanga_service import DateInput, PanchangaService


logger = logging.getLogger(__name__)


def _hh_mm(value: Optional[str]) -> Optional[str]:
    return value[:5] if value else None


def snapshot_to_day_attributes(snapshot: PanchangaSnapshot) -> DayAttributes:
    """Reduce a snapshot to the id-keyed row the recurrence engine queries."""

    sankranti = snapshot.sankranti
    return DayAttributes(
        date=snapshot.date,
        tithi=tithi_id(snapshot.tithi.number),
        tithi_end_time=_hh_mm(snapshot.tithi.end_local),
        nakshatra=nakshatra_id(snapshot.nakshatra.number),
        nakshatra_end_time=_hh_mm(snapshot.nakshatra.end_local),
        yoga=snapshot.yoga.name,
        karana=snapshot.karana.name,
        maas=snapshot.maas.id,
        is_adhika=snapshot.maas.is_adhika,
        paksha=paksha_for_tithi(snapshot.tithi.number),
        sankranti=sankranti.id if sankranti else None,
        sankranti_time=sankranti.time if sankranti else None,
    )


def populate_day_attributes(
    service: PanchangaService,
    store: InMemoryDayAttributeStore,
    start: DateInput,
    end: DateInput,
    location: Location,
    timezone: str,
) -> int:
    snapshots = service.get_range(start, end, location, timezone)
    count = store.upsert_many(snapshot_to_day_attributes(snapshot) for snapshot in snapshots)
    logger.info(
        "day_attributes.populated",
        extra={"days": count, "place": location.name, "tz": timezone},
    )
    return count
