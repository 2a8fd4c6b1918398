"""Position sources usable without device hardware."""
from __future__ import annotations

import asyncio
from typing import Optional

from geopick.geolocation.adapter import ErrorCallback, SuccessCallback


class StaticPositionSource:
    """Reports a fixed position, or a fixed platform error code, after ``delay`` seconds."""

    def __init__(
        self,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        error_code: Optional[int] = None,
        message: str = "",
        delay: float = 0.0,
    ) -> None:
        if error_code is None and (latitude is None or longitude is None):
            raise ValueError("StaticPositionSource needs a position or an error code")
        self.latitude = latitude
        self.longitude = longitude
        self.error_code = error_code
        self.message = message
        self.delay = delay
        self.requests = 0

    def request_position(self, on_success: SuccessCallback, on_error: ErrorCallback) -> None:
        self.requests += 1
        loop = asyncio.get_running_loop()
        if self.error_code is not None:
            loop.call_later(self.delay, on_error, self.error_code, self.message)
        else:
            loop.call_later(self.delay, on_success, self.latitude, self.longitude)
