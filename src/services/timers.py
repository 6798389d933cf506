# src/services/timers.py

"""Single-shot cancellable timers on the running asyncio loop."""

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """Anything with a ``cancel()``; asyncio's TimerHandle qualifies."""

    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def call_later(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule *callback* after *delay* seconds on the running loop."""
    return asyncio.get_running_loop().call_later(delay, callback)
