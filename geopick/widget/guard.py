"""Generation tokens that keep late asynchronous results from applying."""
from __future__ import annotations


class SyncGuard:
    """Issues monotonically increasing tokens; only the latest one is current.

    Once closed (widget teardown) no token is ever current again.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._closed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def advance(self) -> int:
        """Start a new generation and return its token."""
        if self._closed:
            raise RuntimeError("SyncGuard is closed")
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return not self._closed and token == self._generation

    def close(self) -> None:
        self._closed = True
