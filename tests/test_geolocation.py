import asyncio
import threading

import pytest

from geopick.errors import (
    GeolocationError,
    GeolocationTimeout,
    GeolocationUnsupported,
    PermissionDenied,
    PositionUnavailable,
)
from geopick.geolocation.adapter import GeolocationAdapter
from geopick.geolocation.sources import StaticPositionSource
from geopick.models import Coordinate


def test_locate_returns_coordinate():
    source = StaticPositionSource(latitude=51.5074, longitude=-0.1278)

    async def _run():
        return await GeolocationAdapter(source).locate()

    assert asyncio.run(_run()) == Coordinate(51.5074, -0.1278)
    assert source.requests == 1


def test_missing_capability_is_unsupported():
    adapter = GeolocationAdapter(None)
    assert not adapter.supported
    with pytest.raises(GeolocationUnsupported):
        asyncio.run(adapter.locate())


@pytest.mark.parametrize(
    "code,error_cls",
    [(1, PermissionDenied), (2, PositionUnavailable), (3, GeolocationTimeout), (99, GeolocationError)],
)
def test_platform_error_codes(code, error_cls):
    adapter = GeolocationAdapter(StaticPositionSource(error_code=code, message="platform says no"))
    with pytest.raises(error_cls, match="platform says no"):
        asyncio.run(adapter.locate())


class ChattySource:
    """Calls back twice, the second time with an error."""

    def request_position(self, on_success, on_error):
        on_success(48.8566, 2.3522)
        on_error(3, "late timeout")


def test_only_first_callback_counts():
    async def _run():
        return await GeolocationAdapter(ChattySource()).locate()

    assert asyncio.run(_run()) == Coordinate(48.8566, 2.3522)


class ThreadedSource:
    def __init__(self):
        self.thread = None

    def request_position(self, on_success, on_error):
        self.thread = threading.Thread(target=on_success, args=(35.6762, 139.6503))
        self.thread.start()


def test_callback_from_another_thread():
    source = ThreadedSource()

    async def _run():
        return await asyncio.wait_for(GeolocationAdapter(source).locate(), timeout=5)

    assert asyncio.run(_run()) == Coordinate(35.6762, 139.6503)
    source.thread.join(timeout=5)
    assert not source.thread.is_alive()


def test_out_of_range_fix_is_position_unavailable():
    adapter = GeolocationAdapter(StaticPositionSource(latitude=123.0, longitude=0.0))
    with pytest.raises(PositionUnavailable):
        asyncio.run(adapter.locate())


def test_static_source_needs_position_or_error():
    with pytest.raises(ValueError):
        StaticPositionSource(latitude=1.0)
