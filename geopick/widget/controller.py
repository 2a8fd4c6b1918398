"""State machine driving the location picker."""
from __future__ import annotations

import asyncio
import dataclasses
import math
import uuid
from typing import Callable, Optional, Set

import structlog

from geopick.errors import GeolocationError, ResolutionFailure, ViewportError
from geopick.geocode.resolver import AddressResolver
from geopick.geolocation.adapter import GeolocationAdapter
from geopick.models import Address, Coordinate
from geopick.observability.metrics import MetricsRegistry
from geopick.widget.config import WidgetConfig
from geopick.widget.guard import SyncGuard
from geopick.widget.state import SelectionState
from geopick.widget.viewport import MapViewport, ViewportEvent, ViewportHandle

LOGGER = structlog.get_logger(__name__)

LocationCallback = Callable[[float, float, Optional[Address]], None]
NoticeCallback = Callable[[str], None]


class SelectionController:
    """Sole writer of the selection state.

    Every new selection (click, marker drag, device position) and every clear
    advances the guard's generation. A resolution result is applied, and the
    consumer notified, only while its generation is still current, so each
    accepted selection is reported exactly once and superseded ones never.
    """

    def __init__(
        self,
        *,
        viewport: MapViewport,
        resolver: AddressResolver,
        on_location_select: LocationCallback,
        geolocation: Optional[GeolocationAdapter] = None,
        config: Optional[WidgetConfig] = None,
        on_notice: Optional[NoticeCallback] = None,
        metrics: Optional[MetricsRegistry] = None,
        widget_id: Optional[str] = None,
    ) -> None:
        self._viewport = viewport
        self._resolver = resolver
        self._on_location_select = on_location_select
        self._geolocation = geolocation or GeolocationAdapter(None)
        self._config = config or WidgetConfig()
        self._on_notice = on_notice
        self._metrics = metrics or MetricsRegistry()
        self._state = SelectionState(radius_meters=self._config.radius_meters)
        self._guard = SyncGuard()
        self._handle: Optional[ViewportHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self.widget_id = widget_id or uuid.uuid4().hex[:8]
        self._log = LOGGER.bind(widget_id=self.widget_id)

    @property
    def state(self) -> SelectionState:
        """A copy of the current selection state."""
        return dataclasses.replace(self._state)

    @property
    def generation(self) -> int:
        return self._guard.generation

    @property
    def mounted(self) -> bool:
        return self._handle is not None and not self._guard.closed

    def mount(self) -> ViewportHandle:
        """Create the map at the default overview and wire the input handlers."""
        if self._handle is not None:
            raise ViewportError("Widget is already mounted")
        if self._guard.closed:
            raise ViewportError("Widget has been torn down")
        handle = self._viewport.initialize(self._config.default_center, self._config.overview_zoom)
        self._viewport.on(handle, ViewportEvent.MAP_CLICKED, self.handle_map_click)
        self._viewport.on(handle, ViewportEvent.MARKER_DRAG_ENDED, self.handle_marker_drag)
        self._handle = handle
        self._log.info("widget_mounted", center=self._config.default_center.to_dict())
        return handle

    def teardown(self) -> None:
        """Release the viewport; results still in flight are dropped on arrival."""
        if self._guard.closed:
            return
        self._guard.close()
        if self._handle is not None:
            self._viewport.teardown(self._handle)
        self._log.info("widget_teardown", pending=len(self._tasks))

    async def drain(self) -> None:
        """Wait for every outstanding resolution task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def handle_map_click(self, coordinate: Coordinate) -> None:
        self._select(coordinate, recenter=True, source="map_click")

    def handle_marker_drag(self, coordinate: Coordinate) -> None:
        # The user is already looking at this area; keep the camera where it is.
        self._select(coordinate, recenter=False, source="marker_drag")

    async def locate_device(self) -> Optional[Coordinate]:
        """Select the device position. Failures become a user notice, not an exception."""
        if not self.mounted:
            return None
        if self._state.is_locating_device:
            self._log.info("geolocation_in_progress")
            return None

        self._state.is_locating_device = True
        self._metrics.incr("geolocation_requests")
        try:
            coordinate = await self._geolocation.locate()
        except GeolocationError as exc:
            self._geolocation_failed(exc, exc.notice)
            return None
        except Exception as exc:
            self._log.exception("geolocation_crashed")
            self._geolocation_failed(exc, GeolocationError.notice)
            return None
        finally:
            if not self._guard.closed:
                self._state.is_locating_device = False

        if self._guard.closed:
            self._metrics.incr("post_teardown_discarded")
            self._log.debug("geolocation_after_teardown")
            return None
        self._select(coordinate, recenter=True, source="geolocation")
        return coordinate

    def clear(self) -> None:
        """Drop the selection and return the camera to the default overview."""
        if not self.mounted:
            return
        token = self._guard.advance()
        self._state.reset(token)
        self._viewport.hide_overlays(self._handle)
        self._viewport.set_view(self._handle, self._config.default_center, self._config.overview_zoom)
        self._log.info("selection_cleared", generation=token)

    def set_radius(self, radius_meters: float) -> None:
        """Resize the circle only; the coordinate and address are untouched."""
        if not math.isfinite(radius_meters) or radius_meters <= 0:
            raise ValueError(f"Radius must be a positive number of meters: {radius_meters}")
        self._state.radius_meters = radius_meters
        if self.mounted:
            self._viewport.set_overlay_radius(self._handle, radius_meters)

    def _select(self, coordinate: Coordinate, *, recenter: bool, source: str) -> Optional[int]:
        if not self.mounted:
            self._log.debug("selection_ignored", source=source)
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Lookups run as tasks; without a loop the event cannot be served.
            self._log.warning("selection_without_event_loop", source=source)
            return None
        overlays_shown = self._state.overlays_visible
        token = self._guard.advance()
        self._state.select(coordinate, token)

        if overlays_shown:
            self._viewport.set_marker_position(self._handle, coordinate)
        else:
            self._viewport.show_overlays(self._handle, coordinate, self._state.radius_meters)
        if recenter:
            self._viewport.set_view(self._handle, coordinate, self._config.selected_zoom)

        self._log.info(
            "location_selected",
            source=source,
            generation=token,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )
        self._start_resolution(loop, token, coordinate)
        return token

    def _start_resolution(self, loop: asyncio.AbstractEventLoop, token: int, coordinate: Coordinate) -> None:
        self._metrics.incr("resolutions_started")
        task = loop.create_task(self._resolve(token, coordinate))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _resolve(self, token: int, coordinate: Coordinate) -> None:
        address: Optional[Address] = None
        try:
            address = await self._resolver.resolve(coordinate)
        except ResolutionFailure as exc:
            self._log.warning("resolution_failed", generation=token, error=str(exc))
        except Exception:
            self._log.exception("resolution_crashed", generation=token)
        self._complete(token, coordinate, address)

    def _complete(self, token: int, coordinate: Coordinate, address: Optional[Address]) -> None:
        if self._guard.closed:
            self._metrics.incr("post_teardown_discarded")
            self._log.debug("result_after_teardown", generation=token)
            return
        if not self._guard.is_current(token):
            self._metrics.incr("stale_discarded")
            self._log.debug("stale_result_discarded", generation=token, current=self._guard.generation)
            return
        self._state.resolve(address)
        self._metrics.incr("resolutions_applied")
        self._notify(coordinate, address)

    def _notify(self, coordinate: Coordinate, address: Optional[Address]) -> None:
        self._metrics.incr("notifications")
        try:
            self._on_location_select(coordinate.latitude, coordinate.longitude, address)
        except Exception:
            self._log.exception("consumer_callback_failed", generation=self._guard.generation)

    def _geolocation_failed(self, exc: Exception, notice: str) -> None:
        self._metrics.incr("geolocation_failures")
        self._log.warning("geolocation_failed", error_type=type(exc).__name__, error=str(exc))
        if self._guard.closed or self._on_notice is None:
            return
        try:
            self._on_notice(notice)
        except Exception:
            self._log.exception("notice_callback_failed")
