"""Map viewport capability and a headless implementation of it."""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from geopick.errors import ViewportError, ViewportReleased
from geopick.models import Coordinate

_handle_ids = itertools.count(1)


class ViewportEvent(str, Enum):
    MAP_CLICKED = "map_clicked"
    MARKER_DRAG_ENDED = "marker_drag_ended"


@dataclass(frozen=True)
class ViewportHandle:
    """Opaque reference to an initialized rendering surface."""

    handle_id: int


CoordinateHandler = Callable[[Coordinate], None]


class MapViewport(Protocol):
    """Rendering surface with a draggable marker and a radius circle.

    The marker and circle are added and removed together. After `teardown`
    every other call on the handle raises `ViewportReleased`.
    """

    def initialize(self, center: Coordinate, zoom: int) -> ViewportHandle:
        ...

    def teardown(self, handle: ViewportHandle) -> None:
        ...

    def set_view(self, handle: ViewportHandle, coordinate: Coordinate, zoom: int) -> None:
        ...

    def set_marker_position(self, handle: ViewportHandle, coordinate: Coordinate) -> None:
        ...

    def set_overlay_radius(self, handle: ViewportHandle, radius_meters: float) -> None:
        ...

    def show_overlays(self, handle: ViewportHandle, coordinate: Coordinate, radius_meters: float) -> None:
        ...

    def hide_overlays(self, handle: ViewportHandle) -> None:
        ...

    def on(self, handle: ViewportHandle, kind: ViewportEvent, callback: CoordinateHandler) -> None:
        ...


class InMemoryViewport:
    """Headless viewport that records camera and overlay state.

    `click` and `drag_marker` stand in for user input and dispatch to the
    registered handlers. Every mutation is appended to `calls`.
    """

    def __init__(self) -> None:
        self._handle: Optional[ViewportHandle] = None
        self._released = False
        self._handlers: Dict[ViewportEvent, List[CoordinateHandler]] = {kind: [] for kind in ViewportEvent}
        self.center: Optional[Coordinate] = None
        self.zoom: Optional[int] = None
        self.overlays_visible = False
        self.marker: Optional[Coordinate] = None
        self.circle_center: Optional[Coordinate] = None
        self.radius_meters: Optional[float] = None
        self.marker_draggable = False
        self.calls: List[Tuple[object, ...]] = []

    @property
    def released(self) -> bool:
        return self._released

    def _check(self, handle: ViewportHandle) -> None:
        if self._handle is None or handle != self._handle:
            raise ViewportError(f"Unknown viewport handle: {handle!r}")
        if self._released:
            raise ViewportReleased("Viewport has been torn down")

    def initialize(self, center: Coordinate, zoom: int) -> ViewportHandle:
        if self._handle is not None:
            raise ViewportError("Viewport is already initialized on this mount point")
        self._handle = ViewportHandle(next(_handle_ids))
        self.center = center
        self.zoom = zoom
        self.calls.append(("initialize", center, zoom))
        return self._handle

    def teardown(self, handle: ViewportHandle) -> None:
        if self._handle is None or handle != self._handle:
            raise ViewportError(f"Unknown viewport handle: {handle!r}")
        if self._released:
            return
        self._released = True
        self.overlays_visible = False
        for handlers in self._handlers.values():
            handlers.clear()
        self.calls.append(("teardown",))

    def set_view(self, handle: ViewportHandle, coordinate: Coordinate, zoom: int) -> None:
        self._check(handle)
        self.center = coordinate
        self.zoom = zoom
        self.calls.append(("set_view", coordinate, zoom))

    def set_marker_position(self, handle: ViewportHandle, coordinate: Coordinate) -> None:
        self._check(handle)
        self.marker = coordinate
        self.circle_center = coordinate
        self.calls.append(("set_marker_position", coordinate))

    def set_overlay_radius(self, handle: ViewportHandle, radius_meters: float) -> None:
        self._check(handle)
        self.radius_meters = radius_meters
        self.calls.append(("set_overlay_radius", radius_meters))

    def show_overlays(self, handle: ViewportHandle, coordinate: Coordinate, radius_meters: float) -> None:
        self._check(handle)
        self.overlays_visible = True
        self.marker_draggable = True
        self.marker = coordinate
        self.circle_center = coordinate
        self.radius_meters = radius_meters
        self.calls.append(("show_overlays", coordinate, radius_meters))

    def hide_overlays(self, handle: ViewportHandle) -> None:
        self._check(handle)
        self.overlays_visible = False
        self.calls.append(("hide_overlays",))

    def on(self, handle: ViewportHandle, kind: ViewportEvent, callback: CoordinateHandler) -> None:
        self._check(handle)
        self._handlers[ViewportEvent(kind)].append(callback)

    def click(self, coordinate: Coordinate) -> None:
        """Simulate a click on the map surface."""
        if self._handle is None:
            raise ViewportError("Viewport is not initialized")
        self._check(self._handle)
        for handler in list(self._handlers[ViewportEvent.MAP_CLICKED]):
            handler(coordinate)

    def drag_marker(self, coordinate: Coordinate) -> None:
        """Simulate dropping the marker at ``coordinate``."""
        if self._handle is None:
            raise ViewportError("Viewport is not initialized")
        self._check(self._handle)
        if not self.overlays_visible:
            raise ViewportError("No marker on the map to drag")
        self.marker = coordinate
        for handler in list(self._handlers[ViewportEvent.MARKER_DRAG_ENDED]):
            handler(coordinate)

    def call_names(self) -> List[str]:
        return [str(call[0]) for call in self.calls]

    def snapshot(self) -> Dict[str, object]:
        return {
            "released": self._released,
            "center": self.center.to_dict() if self.center else None,
            "zoom": self.zoom,
            "overlays_visible": self.overlays_visible,
            "marker": self.marker.to_dict() if self.marker else None,
            "radius_meters": self.radius_meters,
        }
