import pytest

from geopick.widget.guard import SyncGuard


def test_only_latest_token_is_current():
    guard = SyncGuard()
    first = guard.advance()
    second = guard.advance()
    assert second > first
    assert guard.is_current(second)
    assert not guard.is_current(first)


def test_closed_guard_rejects_everything():
    guard = SyncGuard()
    token = guard.advance()
    guard.close()
    assert guard.closed
    assert not guard.is_current(token)
    with pytest.raises(RuntimeError):
        guard.advance()
