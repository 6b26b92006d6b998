"""Stored identifiers for Vedic calendar units.

The day-attribute table and event definitions refer to tithis, months and
solar ingresses by these upper-case ids rather than by display names.
"""

from typing import Literal, Optional

Paksha = Literal["SHUKLA", "KRISHNA"]

# index 0..29 == tithi number 1..30
TITHI_IDS = [
    "PRATIPADA_SHUKLA",
    "DWITIYA_SHUKLA",
    "TRITIYA_SHUKLA",
    "CHATURTHI_SHUKLA",
    "PANCHAMI_SHUKLA",
    "SHASHTHI_SHUKLA",
    "SAPTAMI_SHUKLA",
    "ASHTAMI_SHUKLA",
    "NAVAMI_SHUKLA",
    "DASHAMI_SHUKLA",
    "EKADASHI_SHUKLA",
    "DWADASHI_SHUKLA",
    "TRAYODASHI_SHUKLA",
    "CHATURDASHI_SHUKLA",
    "PURNIMA",
    "PRATIPADA_KRISHNA",
    "DWITIYA_KRISHNA",
    "TRITIYA_KRISHNA",
    "CHATURTHI_KRISHNA",
    "PANCHAMI_KRISHNA",
    "SHASHTHI_KRISHNA",
    "SAPTAMI_KRISHNA",
    "ASHTAMI_KRISHNA",
    "NAVAMI_KRISHNA",
    "DASHAMI_KRISHNA",
    "EKADASHI_KRISHNA",
    "DWADASHI_KRISHNA",
    "TRAYODASHI_KRISHNA",
    "CHATURDASHI_KRISHNA",
    "AMAVASYA",
]

NAKSHATRA_IDS = [
    "ASHWINI",
    "BHARANI",
    "KRITTIKA",
    "ROHINI",
    "MRIGASHIRA",
    "ARDRA",
    "PUNARVASU",
    "PUSHYA",
    "ASHLESHA",
    "MAGHA",
    "PURVA_PHALGUNI",
    "UTTARA_PHALGUNI",
    "HASTA",
    "CHITRA",
    "SWATI",
    "VISHAKHA",
    "ANURADHA",
    "JYESHTHA",
    "MULA",
    "PURVA_ASHADHA",
    "UTTARA_ASHADHA",
    "SHRAVANA",
    "DHANISHTA",
    "SHATABHISHA",
    "PURVA_BHADRAPADA",
    "UTTARA_BHADRAPADA",
    "REVATI",
]

MAAS_IDS = [
    "CHAITRA",
    "VAISHAKHA",
    "JYESHTHA",
    "ASHADHA",
    "SHRAVANA",
    "BHADRAPADA",
    "ASHWIN",
    "KARTIK",
    "MARGASHIRSHA",
    "PAUSHA",
    "MAGHA",
    "PHALGUNA",
]

# named after the rashi the Sun enters
SANKRANTI_IDS = [
    "MESHA_SANKRANTI",
    "VRISHABHA_SANKRANTI",
    "MITHUNA_SANKRANTI",
    "KARKA_SANKRANTI",
    "SIMHA_SANKRANTI",
    "KANYA_SANKRANTI",
    "TULA_SANKRANTI",
    "VRISHCHIKA_SANKRANTI",
    "DHANU_SANKRANTI",
    "MAKARA_SANKRANTI",
    "KUMBHA_SANKRANTI",
    "MEENA_SANKRANTI",
]


def tithi_id(number: int) -> str:
    return TITHI_IDS[(number - 1) % 30]


def nakshatra_id(number: int) -> str:
    return NAKSHATRA_IDS[(number - 1) % 27]


def maas_id(index: int) -> str:
    return MAAS_IDS[index % 12]


def sankranti_id(rashi_index: int) -> str:
    return SANKRANTI_IDS[rashi_index % 12]


def paksha_for_tithi(number: int) -> Paksha:
    return "SHUKLA" if number <= 15 else "KRISHNA"


def normalize_id(value: Optional[str]) -> Optional[str]:
    """Upper-case and underscore a user supplied id ("makara sankranti" -> "MAKARA_SANKRANTI")."""

    if value is None:
        return None
    cleaned = value.strip().upper().replace("-", "_").replace(" ", "_")
    return cleaned or None
