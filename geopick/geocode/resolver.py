"""Reverse geocoding of a single coordinate."""
from __future__ import annotations

import time
from typing import Dict, Optional, Protocol

import httpx
import orjson
import structlog

from geopick.errors import ResolutionFailure
from geopick.geocode.normalize import address_from_payload
from geopick.geocode.session import GeocodeSession
from geopick.models import Address, Coordinate
from geopick.observability.metrics import MetricsRegistry
from geopick.observability.tracing import log_lookup_result, span

LOGGER = structlog.get_logger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "geopick/0.1 (interactive location picker)"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9"
BUILDING_ZOOM = 18


class AddressResolver(Protocol):
    async def resolve(self, coordinate: Coordinate) -> Optional[Address]:
        ...


def build_reverse_params(coordinate: Coordinate) -> Dict[str, object]:
    """Query parameters for a building-level reverse lookup with English names."""
    return {
        "format": "json",
        "lat": coordinate.latitude,
        "lon": coordinate.longitude,
        "zoom": BUILDING_ZOOM,
        "addressdetails": 1,
        "accept-language": "en",
        "extratags": 1,
        "namedetails": 1,
    }


class GeocodeResolver:
    """Resolves coordinates through a Nominatim-compatible reverse endpoint."""

    def __init__(
        self,
        session: GeocodeSession,
        *,
        base_url: str = NOMINATIM_REVERSE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        metrics: Optional[MetricsRegistry] = None,
    ) -> None:
        self._session = session
        self._base_url = base_url
        self._headers = {"Accept-Language": accept_language, "User-Agent": user_agent}
        self._metrics = metrics or MetricsRegistry()

    async def resolve(self, coordinate: Coordinate) -> Optional[Address]:
        """Return the address for ``coordinate``, or ``None`` if the service has none.

        Raises `ResolutionFailure` on transport errors, non-2xx responses and
        unparsable bodies. No retries are attempted.
        """
        params = build_reverse_params(coordinate)
        self._metrics.incr("lookups")
        start = time.perf_counter()
        try:
            with span(name="reverse_lookup", latitude=coordinate.latitude, longitude=coordinate.longitude):
                response = await self._session.fetch(self._base_url, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            self._metrics.incr("lookup_failures")
            raise ResolutionFailure(
                f"Reverse lookup failed for ({coordinate.latitude}, {coordinate.longitude}): {exc}"
            ) from exc

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        log_lookup_result(
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            status=response.status_code,
            bytes_read=len(response.content or b""),
            elapsed_ms=elapsed_ms,
        )
        self._metrics.incr(f"http_{response.status_code // 100}xx")

        if not response.is_success:
            self._metrics.incr("lookup_failures")
            raise ResolutionFailure(
                f"Reverse lookup for ({coordinate.latitude}, {coordinate.longitude}) "
                f"returned HTTP {response.status_code}"
            )
        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            self._metrics.incr("lookup_failures")
            raise ResolutionFailure(
                f"Reverse lookup for ({coordinate.latitude}, {coordinate.longitude}) returned invalid JSON"
            ) from exc
        return address_from_payload(payload)
