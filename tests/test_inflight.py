import pytest

from kakuli.inflight import InFlightGuard


def test_acquire_twice_then_release():
    guard = InFlightGuard()
    assert guard.acquire("m1") is True
    assert guard.acquire("m1") is False
    assert "m1" in guard
    guard.release("m1")
    assert "m1" not in guard
    assert guard.acquire("m1") is True


def test_release_is_idempotent():
    guard = InFlightGuard()
    guard.release("never-held")
    guard.acquire("m1")
    guard.release("m1")
    guard.release("m1")
    assert len(guard) == 0


def test_hold_releases_on_exception():
    guard = InFlightGuard()
    with pytest.raises(RuntimeError):
        with guard.hold("m1") as acquired:
            assert acquired
            raise RuntimeError("boom")
    assert "m1" not in guard


def test_hold_does_not_release_someone_elses_claim():
    guard = InFlightGuard()
    guard.acquire("m1")
    with guard.hold("m1") as acquired:
        assert acquired is False
    assert "m1" in guard


def test_independent_ids_do_not_interfere():
    guard = InFlightGuard()
    assert guard.acquire("a")
    assert guard.acquire("b")
    assert len(guard) == 2
