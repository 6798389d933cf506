# src/services/highlight.py

"""Pulse a freshly created/updated row once it shows up after a reload."""

import logging
from typing import Protocol

from src.config.settings import Settings
from src.services.timers import Scheduler, TimerHandle, call_later

logger = logging.getLogger("catalog_client.highlight")


class RowHandle(Protocol):
    """A rendered row the reconciler can emphasise."""

    def set_highlighted(self, active: bool) -> None: ...

    def scroll_into_view(self) -> None: ...


class HighlightReconciler:
    """Owns the pending highlight target and the id → row registry.

    The renderer registers a handle for every row it draws; after each
    successful reload :meth:`reconcile` looks the pending target up by
    id, marks it, scrolls it into view, and clears the mark after
    ``duration`` seconds.  A target that is not on the current page is
    dropped.
    """

    def __init__(
        self,
        schedule: Scheduler | None = None,
        duration: float = Settings.HIGHLIGHT_DURATION,
    ) -> None:
        self.duration = duration
        self._schedule: Scheduler = schedule or call_later
        self._rows: dict[str, RowHandle] = {}
        self._pending: str | None = None
        self._active: RowHandle | None = None
        self._active_id: str | None = None
        self._timer: TimerHandle | None = None

    @property
    def pending_target(self) -> str | None:
        return self._pending

    @property
    def active_id(self) -> str | None:
        return self._active_id

    # ── Row registry ─────────────────────────────────────

    def register(self, row_id: str, handle: RowHandle) -> None:
        self._rows[str(row_id)] = handle

    def clear_rows(self) -> None:
        self._rows.clear()

    # ── Highlight lifecycle ──────────────────────────────

    def request(self, target_id: str | None) -> None:
        """Ask for *target_id* to be highlighted after the next reload."""
        self._pending = str(target_id) if target_id else None

    def reconcile(self) -> str | None:
        """Apply the pending highlight to the current rows.

        Returns the id that was highlighted, or ``None``.
        """
        self._cancel_timer()
        self._active = None
        self._active_id = None

        target = self._pending
        self._pending = None
        if target is None:
            return None

        handle = self._rows.get(target)
        if handle is None:
            logger.debug(
                "Highlight target %s not on this page; dropped", target
            )
            return None

        handle.set_highlighted(True)
        handle.scroll_into_view()
        self._active = handle
        self._active_id = target
        self._timer = self._schedule(self.duration, self._expire)
        logger.debug("Highlighted row %s", target)
        return target

    def close(self) -> None:
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self) -> None:
        self._timer = None
        if self._active is not None:
            self._active.set_highlighted(False)
        self._active = None
        self._active_id = None
