"""Translate callback-style platform geolocation into one awaitable result."""
from __future__ import annotations

import asyncio
from typing import Callable, Dict, Optional, Protocol, Type

import structlog

from geopick.errors import (
    GeolocationError,
    GeolocationTimeout,
    GeolocationUnsupported,
    PermissionDenied,
    PositionUnavailable,
)
from geopick.models import Coordinate

LOGGER = structlog.get_logger(__name__)

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

_ERRORS_BY_CODE: Dict[int, Type[GeolocationError]] = {
    PERMISSION_DENIED: PermissionDenied,
    POSITION_UNAVAILABLE: PositionUnavailable,
    TIMEOUT: GeolocationTimeout,
}

SuccessCallback = Callable[[float, float], None]
ErrorCallback = Callable[[int, str], None]


class PositionSource(Protocol):
    """Platform capability that reports the current position once per request.

    Callbacks may be invoked from any thread.
    """

    def request_position(self, on_success: SuccessCallback, on_error: ErrorCallback) -> None:
        ...


class GeolocationAdapter:
    """Obtains the device position on demand. Never retries."""

    def __init__(self, source: Optional[PositionSource]) -> None:
        self._source = source

    @property
    def supported(self) -> bool:
        return self._source is not None

    async def locate(self) -> Coordinate:
        """Return the current position or raise a `GeolocationError` subclass."""
        if self._source is None:
            raise GeolocationUnsupported("No geolocation capability on this platform")

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Coordinate] = loop.create_future()

        def _settle_success(latitude: float, longitude: float) -> None:
            if future.done():
                return
            try:
                future.set_result(Coordinate(latitude, longitude))
            except ValueError as exc:
                future.set_exception(PositionUnavailable(str(exc)))

        def _settle_error(code: int, message: str) -> None:
            if future.done():
                return
            error_cls = _ERRORS_BY_CODE.get(code, GeolocationError)
            future.set_exception(error_cls(message or f"Platform geolocation error {code}"))

        def on_success(latitude: float, longitude: float) -> None:
            loop.call_soon_threadsafe(_settle_success, latitude, longitude)

        def on_error(code: int, message: str = "") -> None:
            loop.call_soon_threadsafe(_settle_error, code, message)

        self._source.request_position(on_success, on_error)
        coordinate = await future
        LOGGER.debug("device_located", latitude=coordinate.latitude, longitude=coordinate.longitude)
        return coordinate
