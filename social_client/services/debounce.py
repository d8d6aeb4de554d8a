"""Cancellable timers for debouncing work on the running event loop."""
from __future__ import annotations

import asyncio
from typing import Callable


class Debouncer:
    """Runs a callback once ``delay`` seconds pass without another :meth:`schedule`.

    Each call to :meth:`schedule` invalidates the previous handle before
    arming a new one, so only the last callback in a burst ever fires.
    """

    def __init__(self, delay: float, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._delay = delay
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        self.cancel()

        def _fire() -> None:
            self._handle = None
            callback()

        self._handle = self._get_loop().call_later(self._delay, _fire)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


__all__ = ["Debouncer"]
