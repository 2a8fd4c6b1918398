"""Command-line entrypoints for the location picker."""
from __future__ import annotations

import argparse
import asyncio
import contextlib
import os
import time
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional

import orjson
import tomllib
from dotenv import load_dotenv

try:
    import uvloop
except ImportError:  # pragma: no cover - uvloop is not available on Windows
    uvloop = None

from geopick.errors import ResolutionFailure, ViewportError
from geopick.geocode.resolver import (
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_USER_AGENT,
    NOMINATIM_REVERSE_URL,
    AddressResolver,
    GeocodeResolver,
)
from geopick.geocode.session import create_geocode_session
from geopick.geolocation.adapter import GeolocationAdapter
from geopick.geolocation.sources import StaticPositionSource
from geopick.models import Address, Coordinate
from geopick.observability.log import configure_logging
from geopick.observability.metrics import MetricsRegistry, record_duration
from geopick.observability.tracing import bind_widget, clear_context
from geopick.widget.config import WidgetConfig
from geopick.widget.controller import SelectionController
from geopick.widget.presentation import LocationFields, selection_notice, selection_summary
from geopick.widget.script import load_script
from geopick.widget.viewport import InMemoryViewport

DEFAULT_SETTINGS = Path("config/settings.toml")
DEFAULT_LOGGING = Path("config/logging.yaml")


def load_settings(path: Path) -> Dict[str, object]:
    """Read the TOML configuration file; a missing file means built-in defaults."""
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="geopick", description="Interactive location picker")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Reverse geocode a single coordinate")
    resolve.add_argument("--lat", type=float, required=True, help="Latitude in decimal degrees")
    resolve.add_argument("--lon", type=float, required=True, help="Longitude in decimal degrees")

    simulate = sub.add_parser("simulate", help="Replay a session script against a headless map")
    simulate.add_argument("script", help="Path to a YAML session script")
    simulate.add_argument("--metrics", help="Optional path for a JSON metrics export")

    return parser


def _run(coro):
    if uvloop is not None:
        return uvloop.run(coro)
    return asyncio.run(coro)


def _dump(payload: object) -> str:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()


@contextlib.asynccontextmanager
async def open_resolver(settings: Dict[str, object], metrics: MetricsRegistry) -> AsyncIterator[GeocodeResolver]:
    """Yield a `GeocodeResolver` configured from the ``[geocoder]`` table."""
    geocoder = dict(settings.get("geocoder", {}))
    user_agent = str(geocoder.get("user_agent", DEFAULT_USER_AGENT))
    async with create_geocode_session(
        user_agent=user_agent,
        max_connections=int(geocoder.get("max_connections", 4)),
    ) as session:
        yield GeocodeResolver(
            session,
            base_url=str(geocoder.get("base_url", NOMINATIM_REVERSE_URL)),
            user_agent=user_agent,
            accept_language=str(geocoder.get("accept_language", DEFAULT_ACCEPT_LANGUAGE)),
            metrics=metrics,
        )


def _position_source(spec: Optional[Dict[str, object]]) -> Optional[StaticPositionSource]:
    if not spec:
        return None
    return StaticPositionSource(
        latitude=spec.get("latitude"),
        longitude=spec.get("longitude"),
        error_code=spec.get("error_code"),
        message=str(spec.get("message", "")),
        delay=float(spec.get("delay", 0.0)),
    )


async def run_resolve(args: argparse.Namespace, settings: Dict[str, object]) -> Optional[Address]:
    """Execute the resolve command."""
    try:
        coordinate = Coordinate(args.lat, args.lon)
    except ValueError as exc:
        raise SystemExit(f"Invalid coordinate: {exc}") from exc
    metrics = MetricsRegistry()
    async with open_resolver(settings, metrics) as resolver:
        return await resolver.resolve(coordinate)


async def run_simulation(
    args: argparse.Namespace,
    settings: Dict[str, object],
    *,
    resolver: Optional[AddressResolver] = None,
) -> Dict[str, object]:
    """Replay a session script and report what the consumer received."""
    try:
        script = load_script(Path(args.script))
        config = WidgetConfig.from_settings(settings, script.widget)
    except ValueError as exc:
        raise SystemExit(f"Failed to load session: {exc}") from exc

    geolocation_spec = script.geolocation.model_dump() if script.geolocation else settings.get("geolocation")
    metrics = MetricsRegistry()
    viewport = InMemoryViewport()
    notifications: List[Dict[str, object]] = []
    notices: List[str] = []
    fields = LocationFields()

    def on_location_select(latitude: float, longitude: float, address: Optional[Address]) -> None:
        nonlocal fields
        fields = fields.apply(latitude, longitude, address)
        notifications.append({
            "latitude": latitude,
            "longitude": longitude,
            "address": address.to_dict() if address else None,
            "notice": selection_notice(latitude, longitude, address),
        })

    async with contextlib.AsyncExitStack() as stack:
        if resolver is None:
            resolver = await stack.enter_async_context(open_resolver(settings, metrics))
        controller = SelectionController(
            viewport=viewport,
            resolver=resolver,
            on_location_select=on_location_select,
            geolocation=GeolocationAdapter(_position_source(geolocation_spec)),
            config=config,
            on_notice=notices.append,
            metrics=metrics,
        )
        bind_widget(controller.widget_id)
        try:
            with record_duration(metrics, "session_duration_ms"):
                controller.mount()
                locating: List[asyncio.Task] = []
                for index, step in enumerate(script.steps, start=1):
                    action = step.action
                    if action == "click":
                        viewport.click(Coordinate(*step.click))
                    elif action == "drag":
                        try:
                            viewport.drag_marker(Coordinate(*step.drag))
                        except ViewportError as exc:
                            controller.teardown()
                            raise SystemExit(f"Step {index} ({action}) failed: {exc}") from exc
                    elif action == "radius":
                        controller.set_radius(step.radius)
                    elif action == "geolocate":
                        locating.append(asyncio.create_task(controller.locate_device()))
                    elif action == "clear":
                        controller.clear()
                    elif action == "wait":
                        await asyncio.sleep(step.wait)
                    elif action == "teardown":
                        controller.teardown()
                        break
                    # Let the work scheduled by this step start before the next one.
                    await asyncio.sleep(0)
                if locating:
                    await asyncio.gather(*locating)
                await controller.drain()
                state = controller.state
                controller.teardown()
        finally:
            clear_context()

    if getattr(args, "metrics", None):
        metrics.export(path=Path(args.metrics), run_id=controller.widget_id)

    return {
        "widget_id": controller.widget_id,
        "notifications": notifications,
        "notices": notices,
        "fields": {
            "latitude": fields.latitude,
            "longitude": fields.longitude,
            "city": fields.city,
            "state": fields.state,
            "country": fields.country,
        },
        "state": state.to_dict(),
        "summary": selection_summary(state),
        "viewport": viewport.snapshot(),
        "metrics": metrics.snapshot(),
        "finished_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
    }


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    load_dotenv()
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    settings = load_settings(Path(os.environ.get("GEOPICK_SETTINGS", DEFAULT_SETTINGS)))
    configure_logging(Path(os.environ.get("GEOPICK_LOGGING", DEFAULT_LOGGING)))

    if args.command == "resolve":
        try:
            address = _run(run_resolve(args, settings))
        except ResolutionFailure as exc:
            print(_dump({"error": str(exc)}))
            raise SystemExit(1)
        print(_dump(address.to_dict() if address else None))
        return

    if args.command == "simulate":
        report = _run(run_simulation(args, settings))
        print(_dump(report))


if __name__ == "__main__":
    main()
