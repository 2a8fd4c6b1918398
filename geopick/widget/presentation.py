"""Display strings and consumer-side field merging for a selection."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from geopick.models import Address, Coordinate
from geopick.widget.state import SelectionState


def format_coordinate(coordinate: Coordinate, places: int = 6) -> str:
    return f"{coordinate.latitude:.{places}f}, {coordinate.longitude:.{places}f}"


def format_radius(radius_meters: float) -> str:
    return f"{radius_meters / 1000:.1f} km"


def selection_summary(state: SelectionState) -> List[str]:
    """Lines shown under the map while a location is selected."""
    if state.coordinate is None:
        return []
    return [
        f"Selected Location: {format_coordinate(state.coordinate)}",
        f"Search radius: {format_radius(state.radius_meters)}",
    ]


def selection_notice(latitude: float, longitude: float, address: Optional[Address]) -> str:
    """Short confirmation text for a delivered selection."""
    if address is None:
        return f"Lat: {latitude:.4f}, Lng: {longitude:.4f}"
    parts = address.parts()
    return ", ".join(parts) if parts else "Coordinates updated"


@dataclass(frozen=True)
class LocationFields:
    """Search-form fields fed by the picker.

    Empty address parts never overwrite values already in the form.
    """

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: str = ""
    state: str = ""
    country: str = ""

    def apply(self, latitude: float, longitude: float, address: Optional[Address]) -> "LocationFields":
        if address is None:
            return replace(self, latitude=latitude, longitude=longitude)
        return replace(
            self,
            latitude=latitude,
            longitude=longitude,
            city=address.city or self.city,
            state=address.state or self.state,
            country=address.country or self.country,
        )
