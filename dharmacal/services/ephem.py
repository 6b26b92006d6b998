"""Swiss Ephemeris helpers used by the Panchanga engine."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, List

import swisseph as swe


# Engine version for snapshot metadata
try:
    ENGINE_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    ENGINE_VERSION = "swisseph-2.10"

AYANAMSHA_MAP = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
}


def backend_name() -> str:
    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    return raw_backend.strip().lower() if raw_backend else "moseph"


def backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    return swe.FLG_SWIEPH if backend_name() == "swieph" else swe.FLG_MOSEPH


def flag_names(ayanamsha: str) -> List[str]:
    backend = "SEFLG_SWIEPH" if backend_name() == "swieph" else "SEFLG_MOSEPH"
    return ["SEFLG_SIDEREAL", backend, f"SE_SIDM_{ayanamsha.upper()}"]


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def to_jd(moment: datetime) -> float:
    """Convert a timezone-aware datetime into a Julian day (UT)."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).timestamp() / 86400.0 + 2440587.5


def jd_to_datetime(jd: float) -> datetime:
    seconds = (jd - 2440587.5) * 86400.0
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _set_mode(ayanamsha: str) -> None:
    swe.set_sid_mode(AYANAMSHA_MAP.get(ayanamsha.lower(), swe.SIDM_LAHIRI))


def sidereal_longitudes(jd_utc: float, ayanamsha: str = "lahiri") -> Dict[str, float]:
    """Return sidereal longitudes of the Sun and Moon in degrees."""

    _set_mode(ayanamsha)
    flag = backend_flag() | swe.FLG_SIDEREAL
    longitudes: Dict[str, float] = {}
    for name, code in (("Sun", swe.SUN), ("Moon", swe.MOON)):
        values, _ = swe.calc_ut(jd_utc, code, flag)
        longitudes[name] = values[0] % 360.0
    return longitudes


def ayanamsa_degrees(jd_utc: float, ayanamsha: str = "lahiri") -> float:
    _set_mode(ayanamsha)
    return swe.get_ayanamsa_ut(jd_utc)
