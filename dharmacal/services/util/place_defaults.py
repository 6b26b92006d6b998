"""Helpers for normalising daily-info place inputs."""

import os
from typing import Any, Dict, Optional, Tuple

from timezonefinder import TimezoneFinder


_TF = TimezoneFinder()


DEF_LAT = float(os.getenv("DEFAULT_PLACE_LAT", "52.078525871758096"))
DEF_LON = float(os.getenv("DEFAULT_PLACE_LON", "4.331036597783044"))
DEF_TZ = os.getenv("DEFAULT_PLACE_TZ", "Europe/Amsterdam")
DEF_LBL = os.getenv("DEFAULT_PLACE_LABEL", "Den Haag")


def clamp_lat_lon(lat: float, lon: float) -> Tuple[float, float]:
    """Clamp latitude/longitude to safe ranges."""

    lat = max(min(lat, 89.9), -89.9)
    lon = ((lon + 180.0) % 360.0) - 180.0  # wrap to [-180, 180)
    return lat, lon


def infer_tz(lat: float, lon: float) -> Optional[str]:
    return _TF.timezone_at(lng=lon, lat=lat)


def normalize_place(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    tz: Optional[str] = None,
    name: Optional[str] = None,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Resolve an effective place plus flags describing which defaults applied."""

    flags: Dict[str, Any] = {
        "place_defaults_used": False,
        "tz_inferred": False,
        "default_reason": None,
    }

    if lat is None or lon is None:
        reason = "missing_place" if lat is None and lon is None else "missing_latlon"
        flags.update({"place_defaults_used": True, "default_reason": reason})
        place = {"lat": DEF_LAT, "lon": DEF_LON, "tz": tz or DEF_TZ, "name": name or DEF_LBL}
        return place, flags

    lat, lon = clamp_lat_lon(float(lat), float(lon))

    if not tz:
        tz = infer_tz(lat, lon)
        if tz:
            flags.update({"tz_inferred": True, "default_reason": "missing_tz"})
        else:
            tz = DEF_TZ
            flags["default_reason"] = "missing_tz"

    place = {"lat": lat, "lon": lon, "tz": tz, "name": name or f"{lat:.4f}, {lon:.4f}"}
    return place, flags
