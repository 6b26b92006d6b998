"""Swiss Ephemeris backed Panchanga engine.

Builds one :class:`PanchangaSnapshot` per civil day. All elements are read at
local sunrise; when an element ends before the following sunrise the next one
is attached as ``next_*``.
"""

from __future__ import annotations

import logging
import os
from datetime import date as date_cls, datetime, time as time_cls, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..schemas.panchanga import (
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
from . import ephem
from .constants import maas_id, sankranti_id
from .panchang_algos import (
    MASA_NAMES,
    VARA_NAMES,
    compute_karana,
    compute_masa,
    compute_moon_events,
    compute_nakshatra,
    compute_solar_events,
    compute_tithi,
    compute_yoga,
    detect_sankranti,
    karana_type,
)


logger = logging.getLogger(__name__)


def _local_time(moment: Optional[datetime], tz: ZoneInfo, fmt: str = "%H:%M:%S") -> Optional[str]:
    if moment is None:
        return None
    return moment.astimezone(tz).strftime(fmt)


def _utc_iso(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return moment.astimezone(timezone.utc).isoformat()


def _paksha(number: int) -> str:
    return "Shukla" if number <= 15 else "Krishna"


class SwissPanchangaEngine:
    def __init__(
        self,
        ayanamsha: Optional[str] = None,
        maas_system: str = "Purnimanta",
        ephe_path: Optional[str] = None,
    ) -> None:
        self.ayanamsha = (ayanamsha or os.getenv("AYANAMSHA", "lahiri")).lower()
        if maas_system not in ("Amanta", "Purnimanta"):
            raise ValueError(f"Unknown maas system: {maas_system!r}")
        self.maas_system = maas_system
        ephem.init_paths(ephe_path or os.getenv("EPHEMERIS_PATH"))

    # elements -------------------------------------------------------------

    def _tithi(self, moment: datetime, tz: ZoneInfo) -> tuple[TithiInfo, datetime]:
        number, name, end = compute_tithi(moment, self.ayanamsha)
        info = TithiInfo(
            number=number,
            name=name,
            paksha=_paksha(number),
            end_local=_local_time(end, tz),
            end_utc=_utc_iso(end),
        )
        return info, end

    def _nakshatra(self, moment: datetime, tz: ZoneInfo) -> tuple[NakshatraInfo, datetime]:
        number, name, pada, end = compute_nakshatra(moment, self.ayanamsha)
        info = NakshatraInfo(
            number=number,
            name=name,
            pada=pada,
            end_local=_local_time(end, tz),
            end_utc=_utc_iso(end),
        )
        return info, end

    def _yoga(self, moment: datetime, tz: ZoneInfo) -> tuple[YogaInfo, datetime]:
        number, name, end = compute_yoga(moment, self.ayanamsha)
        info = YogaInfo(number=number, name=name, end_local=_local_time(end, tz), end_utc=_utc_iso(end))
        return info, end

    def _karana(self, moment: datetime, tz: ZoneInfo) -> tuple[KaranaInfo, datetime]:
        number, name, end = compute_karana(moment, self.ayanamsha)
        info = KaranaInfo(
            number=number,
            name=name,
            type=karana_type(number),
            end_local=_local_time(end, tz),
            end_utc=_utc_iso(end),
        )
        return info, end

    def _maas(self, moment: datetime, tithi_number: int) -> MaasInfo:
        amanta_index, is_adhika = compute_masa(moment, self.ayanamsha)
        if self.maas_system == "Purnimanta":
            # the Krishna half already belongs to the following Purnimanta month
            index = (amanta_index + 1) % 12 if tithi_number > 15 else amanta_index
            lunar_day = tithi_number + 15 if tithi_number <= 15 else tithi_number - 15
        else:
            index = amanta_index
            lunar_day = tithi_number
        return MaasInfo(
            name=MASA_NAMES[index],
            id=maas_id(index),
            type=self.maas_system,
            lunar_day=lunar_day,
            paksha=_paksha(tithi_number),
            is_adhika=is_adhika,
        )

    # engine interface -----------------------------------------------------

    def compute_daily(self, date_str: str, location: LocationConfig) -> PanchangaSnapshot:
        tz = ZoneInfo(location.tz)
        day = date_cls.fromisoformat(date_str)
        start_of_day = datetime.combine(day, time_cls(0, 0), tzinfo=tz)

        sunrise, sunset, next_sunrise = compute_solar_events(start_of_day, location.lat, location.lon)
        moonrise, moonset = compute_moon_events(start_of_day, location.lat, location.lon)

        # polar day/night: fall back to a nominal 06:00 sunrise
        anchor = sunrise or start_of_day + timedelta(hours=6)
        next_anchor = next_sunrise or anchor + timedelta(days=1)

        tithi, tithi_end = self._tithi(anchor, tz)
        nakshatra, nakshatra_end = self._nakshatra(anchor, tz)
        yoga, yoga_end = self._yoga(anchor, tz)
        karana, karana_end = self._karana(anchor, tz)

        nudge = timedelta(minutes=1)
        next_tithi = self._tithi(tithi_end + nudge, tz)[0] if tithi_end < next_anchor else None
        next_nakshatra = self._nakshatra(nakshatra_end + nudge, tz)[0] if nakshatra_end < next_anchor else None
        next_yoga = self._yoga(yoga_end + nudge, tz)[0] if yoga_end < next_anchor else None
        next_karana = self._karana(karana_end + nudge, tz)[0] if karana_end < next_anchor else None

        sankranti = None
        ingress = detect_sankranti(anchor, next_anchor, self.ayanamsha)
        if ingress is not None:
            rashi_index, moment = ingress
            sankranti = SankrantiInfo(id=sankranti_id(rashi_index), time=_local_time(moment, tz, "%H:%M"))

        logger.debug("panchanga.engine.computed", extra={"date": date_str, "place": location.name})

        return PanchangaSnapshot(
            date=date_str,
            location=location,
            sunrise_local=_local_time(sunrise, tz),
            sunset_local=_local_time(sunset, tz),
            sunrise_utc=_utc_iso(sunrise),
            sunset_utc=_utc_iso(sunset),
            moonrise_local=_local_time(moonrise, tz),
            moonset_local=_local_time(moonset, tz),
            moonrise_utc=_utc_iso(moonrise),
            moonset_utc=_utc_iso(moonset),
            vara=VARA_NAMES[day.weekday()],
            tithi=tithi,
            nakshatra=nakshatra,
            yoga=yoga,
            karana=karana,
            maas=self._maas(anchor, tithi.number),
            ayanamsa=AyanamsaInfo(
                name=self.ayanamsha.capitalize(),
                degrees=round(ephem.ayanamsa_degrees(ephem.to_jd(anchor), self.ayanamsha), 6),
            ),
            next_tithi=next_tithi,
            next_nakshatra=next_nakshatra,
            next_yoga=next_yoga,
            next_karana=next_karana,
            sankranti=sankranti,
            meta=SnapshotMeta(engine=ephem.ENGINE_VERSION, flags=ephem.flag_names(self.ayanamsha)),
        )
