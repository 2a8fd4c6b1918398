"""Value types exchanged between the picker components."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 point. Values are kept exactly as supplied."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinate must be finite: ({self.latitude}, {self.longitude})")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class Address:
    """Resolved place description; missing parts are empty strings."""

    city: str = ""
    state: str = ""
    country: str = ""

    def parts(self) -> list[str]:
        """Return the non-empty components, most specific first."""
        return [part for part in (self.city, self.state, self.country) if part]

    def to_dict(self) -> Dict[str, str]:
        return {"city": self.city, "state": self.state, "country": self.country}
