"""YAML session scripts replayed against a picker by the simulator."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from geopick.models import Coordinate

ACTIONS = ("click", "drag", "radius", "geolocate", "clear", "wait", "teardown")


def _is_set(value: object) -> bool:
    return value is not None and value is not False


class ScriptStep(BaseModel):
    """One user interaction; exactly one field is set."""

    click: Optional[Tuple[float, float]] = None
    drag: Optional[Tuple[float, float]] = None
    radius: Optional[float] = Field(None, gt=0)
    geolocate: bool = False
    clear: bool = False
    wait: Optional[float] = Field(None, ge=0)
    teardown: bool = False

    @field_validator("click", "drag")
    @classmethod
    def _valid_point(cls, value: Optional[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
        if value is not None:
            Coordinate(*value)
        return value

    @model_validator(mode="after")
    def _one_action(self) -> "ScriptStep":
        chosen = [name for name in ACTIONS if _is_set(getattr(self, name))]
        if len(chosen) != 1:
            raise ValueError(f"Each step needs exactly one of {', '.join(ACTIONS)}; got {chosen or 'none'}")
        return self

    @property
    def action(self) -> str:
        return next(name for name in ACTIONS if _is_set(getattr(self, name)))


class GeolocationSpec(BaseModel):
    """Fixed device position, or platform error code, for the session."""

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    error_code: Optional[int] = None
    message: str = ""
    delay: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def _position_or_error(self) -> "GeolocationSpec":
        if self.error_code is None and (self.latitude is None or self.longitude is None):
            raise ValueError("geolocation needs latitude and longitude, or an error_code")
        return self


class SessionScript(BaseModel):
    widget: Dict[str, object] = Field(default_factory=dict)
    geolocation: Optional[GeolocationSpec] = None
    steps: List[ScriptStep]


def load_script(path: Path) -> SessionScript:
    """Read and validate a session script."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    try:
        return SessionScript(**data)
    except (ValidationError, TypeError) as exc:
        raise ValueError(f"Invalid session script {path}: {exc}") from exc
