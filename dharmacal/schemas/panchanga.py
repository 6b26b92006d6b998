"""Panchanga snapshot schemas produced by the ephemeris engine."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


PakshaName = Literal["Shukla", "Krishna"]


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class LocationConfig(Location):
    tz: str


class UnitEnd(BaseModel):
    model_config = ConfigDict(frozen=True)

    end_local: Optional[str] = None
    end_utc: Optional[str] = None


class TithiInfo(UnitEnd):
    number: int = Field(ge=1, le=30)
    name: str
    paksha: PakshaName

    @property
    def paksha_day(self) -> int:
        return self.number if self.number <= 15 else self.number - 15


class NakshatraInfo(UnitEnd):
    number: int = Field(ge=1, le=27)
    name: str
    pada: int = Field(ge=1, le=4)


class YogaInfo(UnitEnd):
    number: int = Field(ge=1, le=27)
    name: str


class KaranaInfo(UnitEnd):
    number: int = Field(ge=1, le=11)
    name: str
    type: Literal["Fixed", "Movable"]


class MaasInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    type: Literal["Amanta", "Purnimanta"]
    lunar_day: int = Field(ge=1, le=30)
    paksha: PakshaName
    is_adhika: bool = False


class AyanamsaInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    degrees: float


class SankrantiInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    time: str  # HH:MM local


class SnapshotMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    engine: str
    flags: List[str] = Field(default_factory=list)


class PanchangaSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD, civil day in location.tz
    location: LocationConfig

    sunrise_local: Optional[str] = None
    sunset_local: Optional[str] = None
    sunrise_utc: Optional[str] = None
    sunset_utc: Optional[str] = None
    moonrise_local: Optional[str] = None
    moonset_local: Optional[str] = None
    moonrise_utc: Optional[str] = None
    moonset_utc: Optional[str] = None

    vara: str
    tithi: TithiInfo
    nakshatra: NakshatraInfo
    yoga: YogaInfo
    karana: KaranaInfo
    maas: MaasInfo
    ayanamsa: AyanamsaInfo

    # only populated when the current unit ends before the following sunrise
    next_tithi: Optional[TithiInfo] = None
    next_nakshatra: Optional[NakshatraInfo] = None
    next_yoga: Optional[YogaInfo] = None
    next_karana: Optional[KaranaInfo] = None

    sankranti: Optional[SankrantiInfo] = None
    meta: SnapshotMeta
