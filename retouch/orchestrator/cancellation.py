"""Cooperative cancellation token threaded through submit/poll calls."""

from __future__ import annotations

from typing import Callable


class CancellationToken:
    """One-shot latch with synchronous listeners.

    Listeners run in registration order the moment ``cancel`` flips the
    latch. A listener registered after cancellation runs immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None
        self._listeners: list[Callable[[str | None], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> bool:
        """Flip the latch. Returns False if it was already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        self._reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(reason)
        return True

    def register(self, listener: Callable[[str | None], None]) -> Callable[[], None]:
        """Add a listener; returns a function that removes it again."""
        if self._cancelled:
            listener(self._reason)
            return lambda: None
        self._listeners.append(listener)

        def unregister() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unregister
