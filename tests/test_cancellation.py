"""Tests for the cancellation token."""

from retouch.orchestrator import CancellationToken


def test_cancel_flips_once_and_keeps_first_reason():
    token = CancellationToken()
    assert not token.cancelled

    assert token.cancel("first")
    assert not token.cancel("second")
    assert token.cancelled
    assert token.reason == "first"


def test_listeners_run_synchronously_in_order():
    token = CancellationToken()
    seen = []
    token.register(lambda reason: seen.append(("a", reason)))
    token.register(lambda reason: seen.append(("b", reason)))

    token.cancel("stop")

    assert seen == [("a", "stop"), ("b", "stop")]


def test_listener_registered_after_cancel_runs_immediately():
    token = CancellationToken()
    token.cancel("late")
    seen = []

    token.register(seen.append)

    assert seen == ["late"]


def test_unregistered_listener_is_not_called():
    token = CancellationToken()
    seen = []
    unregister = token.register(seen.append)

    unregister()
    unregister()
    token.cancel()

    assert seen == []
