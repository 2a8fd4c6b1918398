"""Factories for the HTTP session used by reverse lookups."""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Dict, Mapping, Optional

import httpx


class GeocodeSession:
    """Thin wrapper over an `httpx.AsyncClient` so lookups can be faked in tests."""

    def __init__(self, client: Optional[httpx.AsyncClient]) -> None:
        self._client = client

    async def fetch(
        self,
        url: str,
        *,
        params: Mapping[str, object],
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Issue a GET request and return the raw response."""
        if self._client is None:
            raise RuntimeError("No geocode session available")
        return await self._client.get(url, params=params, headers=headers)


@contextlib.asynccontextmanager
async def create_geocode_session(
    *,
    user_agent: str,
    max_connections: int = 4,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[GeocodeSession]:
    """Yield a configured `GeocodeSession` for the duration of the context.

    The client is built with ``timeout=None``: a hung lookup only delays its
    own result, which the controller discards once superseded.
    """
    headers = {"User-Agent": user_agent}
    limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections)
    async with httpx.AsyncClient(headers=headers, limits=limits, timeout=None, transport=transport) as client:
        yield GeocodeSession(client)
