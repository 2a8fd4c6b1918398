"""Mutable selection record owned by the controller."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from geopick.models import Address, Coordinate


class SelectionPhase(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    RESOLVED = "resolved"


@dataclass
class SelectionState:
    """Current coordinate, its resolved address and the in-progress flags."""

    radius_meters: float
    coordinate: Optional[Coordinate] = None
    address: Optional[Address] = None
    is_resolving: bool = False
    is_locating_device: bool = False
    phase: SelectionPhase = SelectionPhase.IDLE
    generation: int = 0

    @property
    def overlays_visible(self) -> bool:
        return self.coordinate is not None

    def select(self, coordinate: Coordinate, generation: int) -> None:
        """Record a new coordinate; any previous address is dropped."""
        self.coordinate = coordinate
        self.address = None
        self.generation = generation
        self.is_resolving = True
        self.phase = SelectionPhase.SELECTING

    def resolve(self, address: Optional[Address]) -> None:
        self.address = address
        self.is_resolving = False
        self.phase = SelectionPhase.RESOLVED

    def reset(self, generation: int) -> None:
        self.coordinate = None
        self.address = None
        self.generation = generation
        self.is_resolving = False
        self.phase = SelectionPhase.IDLE

    def to_dict(self) -> Dict[str, object]:
        return {
            "phase": self.phase.value,
            "generation": self.generation,
            "coordinate": self.coordinate.to_dict() if self.coordinate else None,
            "address": self.address.to_dict() if self.address else None,
            "is_resolving": self.is_resolving,
            "is_locating_device": self.is_locating_device,
            "radius_meters": self.radius_meters,
        }
