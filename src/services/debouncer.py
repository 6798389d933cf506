# src/services/debouncer.py

"""Value debouncer: emit only after a quiet period with no new input."""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from src.services.timers import Scheduler, TimerHandle, call_later

logger = logging.getLogger("catalog_client.debounce")

T = TypeVar("T")

_UNSET = object()


class Debouncer(Generic[T]):
    """Mirror a rapidly changing value, lagging by *delay* seconds.

    Each :meth:`push` restarts the timer and cancels the pending
    emission, so *callback* only ever sees the value that was stable
    for a full *delay*.  A stable value equal to the last emitted one
    is not re-emitted.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        initial: T | object = _UNSET,
        schedule: Scheduler | None = None,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._schedule: Scheduler = schedule or call_later
        self._timer: TimerHandle | None = None
        self._pending: T | object = _UNSET
        self._last_emitted: T | object = initial
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def push(self, value: T) -> None:
        """Record *value* and restart the quiet-period timer."""
        if self._closed:
            logger.debug("push() after close ignored")
            return
        self.cancel()
        self._pending = value
        self._timer = self._schedule(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending emission, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = _UNSET

    def close(self) -> None:
        """Cancel and refuse further input (owner teardown)."""
        self.cancel()
        self._closed = True

    def _fire(self) -> None:
        self._timer = None
        value = self._pending
        self._pending = _UNSET
        if value is _UNSET or value == self._last_emitted:
            return
        self._last_emitted = value
        self._callback(value)  # type: ignore[arg-type]
