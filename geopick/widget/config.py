"""Validated widget configuration."""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field

from geopick.models import Coordinate

# Geographic centre of the contiguous United States.
DEFAULT_LATITUDE = 39.8283
DEFAULT_LONGITUDE = -98.5795


class WidgetConfig(BaseModel):
    """Inputs accepted by the location picker."""

    initial_latitude: float = Field(DEFAULT_LATITUDE, ge=-90, le=90)
    initial_longitude: float = Field(DEFAULT_LONGITUDE, ge=-180, le=180)
    radius_meters: float = Field(5000.0, gt=0)
    overview_zoom: int = Field(4, ge=0, le=22)
    selected_zoom: int = Field(13, ge=0, le=22)

    @property
    def default_center(self) -> Coordinate:
        return Coordinate(self.initial_latitude, self.initial_longitude)

    @classmethod
    def from_settings(
        cls,
        settings: Dict[str, object],
        overrides: Optional[Dict[str, object]] = None,
    ) -> "WidgetConfig":
        """Build the config from the ``[widget]`` table of settings.toml."""
        return cls(**{**dict(settings.get("widget", {})), **(overrides or {})})
