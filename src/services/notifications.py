# src/services/notifications.py

"""Process-wide channel for transient user notifications (toasts)."""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger("catalog_client.notifications")

NotificationKind = Literal["ok", "err"]

_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class Notification:
    """A single transient message."""

    message: str
    kind: NotificationKind = "ok"


NotificationSink = Callable[[Notification], None]


class NotificationChannel:
    """Routes notifications to whichever sink the UI attached.

    Components receive the channel at construction time and never touch
    the UI directly.  Until a sink is attached (or after it is detached)
    messages are only logged.
    """

    def __init__(self) -> None:
        self._sink: NotificationSink | None = None
        self.history: deque[Notification] = deque(maxlen=_HISTORY_LIMIT)

    def attach(self, sink: NotificationSink) -> None:
        self._sink = sink

    def detach(self) -> None:
        self._sink = None

    def post(self, message: str, kind: NotificationKind = "ok") -> None:
        """Deliver *message* to the sink and record it."""
        note = Notification(message=message, kind=kind)
        self.history.append(note)
        if kind == "err":
            logger.error("Notify: %s", message)
        else:
            logger.info("Notify: %s", message)
        if self._sink is None:
            logger.debug("No notification sink attached; dropped")
            return
        self._sink(note)
