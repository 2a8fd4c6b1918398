"""Reduce a reverse-geocoding payload to a city/state/country record."""
from __future__ import annotations

from typing import Dict, Iterable, Optional

import structlog

from geopick.models import Address

LOGGER = structlog.get_logger(__name__)

LOCALITY_KEYS = ("city", "town", "village", "municipality", "county")
REGION_KEYS = ("state", "province", "region")


def has_non_ascii(value: str) -> bool:
    return any(ord(char) > 0x7F for char in value)


def _first_present(fields: Dict[str, object], keys: Iterable[str]) -> str:
    for key in keys:
        value = fields.get(key)
        if value:
            return str(value)
    return ""


def _prefer_english(value: str, english: str) -> str:
    # Heuristic only: legitimate diacritic names (e.g. "Québec") are swapped too.
    if value and english and has_non_ascii(value):
        return english
    return value


def address_from_payload(payload: object) -> Optional[Address]:
    """Build an `Address` from a Nominatim-style JSON payload.

    Returns ``None`` when the payload carries no ``address`` object at all,
    which is how the service reports points it cannot place.
    """
    if not isinstance(payload, dict):
        return None
    fields = payload.get("address")
    if not isinstance(fields, dict):
        return None

    namedetails = payload.get("namedetails")
    english = ""
    if isinstance(namedetails, dict) and namedetails.get("name:en"):
        english = str(namedetails["name:en"])

    city = _prefer_english(_first_present(fields, LOCALITY_KEYS), english)
    state = _prefer_english(_first_present(fields, REGION_KEYS), english)
    country = str(fields.get("country") or "")

    if has_non_ascii(city) or has_non_ascii(state):
        LOGGER.warning(
            "non_english_address",
            city=city,
            state=state,
            country=country,
            namedetails=namedetails if isinstance(namedetails, dict) else None,
        )
    return Address(city=city, state=state, country=country)
