"""Tracing helpers for lookups and widget sessions."""
from __future__ import annotations

import contextlib
import time
from typing import Iterator

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars


def _logger():
    return structlog.get_logger("geopick.trace")


def bind_widget(widget_id: str) -> None:
    bind_contextvars(widget_id=widget_id)
    _logger().debug("trace_context", widget_id=widget_id)


def clear_context() -> None:
    clear_contextvars()


@contextlib.contextmanager
def span(*, name: str, **context: object) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        _logger().info("trace_span", span=name, elapsed_ms=elapsed_ms, **context)


def log_lookup_result(*, latitude: float, longitude: float, status: int, bytes_read: int, elapsed_ms: int) -> None:
    _logger().info(
        "lookup_result",
        latitude=latitude,
        longitude=longitude,
        status=status,
        bytes=bytes_read,
        elapsed_ms=elapsed_ms,
    )
