# src/services/catalog_controller.py

"""Query, pagination and reload state for the product listing.

The controller owns the current query parameters and the page that is
on screen.  Every load goes through :meth:`CatalogController.reload`,
tagged with the reason it was requested.  Loads carry a generation
token, and only the newest one is allowed to commit, so a slow
response for an old page can never overwrite a newer one.
"""

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from src.api.errors import GatewayError
from src.api.gateway import ProductGateway
from src.config.settings import Settings
from src.models.product import PageResult, Product
from src.models.query import QueryParameters, SortKey
from src.services.debouncer import Debouncer
from src.services.notifications import NotificationChannel
from src.services.timers import Scheduler

logger = logging.getLogger("catalog_client.controller")

LOAD_FAILED_MESSAGE = "Failed to load products"


class ReloadReason(enum.Enum):
    """Why a reload was requested."""

    INITIAL = "initial"
    PARAMETERS_CHANGED = "parameters-changed"
    MUTATION_COMPLETED = "mutation-completed"
    PAGE_CLAMPED = "page-clamped"
    MANUAL = "manual"


@dataclass(frozen=True)
class CatalogState:
    """Snapshot of everything the listing view renders."""

    page: int = 0
    size: int = Settings.DEFAULT_PAGE_SIZE
    sort: SortKey = field(
        default_factory=lambda: SortKey.parse(Settings.DEFAULT_SORT)
    )
    search_text: str = ""
    debounced_search: str = ""
    content: tuple[Product, ...] = ()
    total: int = 0
    last_page_index: int = 0
    loading: bool = False

    @property
    def params(self) -> QueryParameters:
        return QueryParameters(
            page=self.page,
            size=self.size,
            sort=self.sort,
            search_text=self.debounced_search,
        )

    @property
    def can_go_prev(self) -> bool:
        return self.page > 0

    @property
    def can_go_next(self) -> bool:
        return self.page < self.last_page_index

    @property
    def item_count_label(self) -> str:
        return f"{self.total} item{'' if self.total == 1 else 's'}"

    @property
    def page_label(self) -> str:
        return f"Page {self.page + 1} of {self.last_page_index + 1}"


StateListener = Callable[[CatalogState], None]
LoadedListener = Callable[[PageResult], None]


class CatalogController:
    """Owns query parameters and the displayed page of products."""

    def __init__(
        self,
        gateway: ProductGateway,
        notifier: NotificationChannel,
        schedule: Scheduler | None = None,
        debounce_delay: float = Settings.SEARCH_DEBOUNCE,
    ) -> None:
        self.gateway = gateway
        self.notifier = notifier
        self._state = CatalogState()
        self._generation = 0
        self._tasks: set[asyncio.Task[bool]] = set()
        self._state_listeners: list[StateListener] = []
        self._loaded_listeners: list[LoadedListener] = []
        self._search_debouncer: Debouncer[str] = Debouncer(
            debounce_delay,
            self._on_debounced_search,
            initial="",
            schedule=schedule,
        )

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    # ── Listeners ────────────────────────────────────────

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def add_loaded_listener(self, listener: LoadedListener) -> None:
        self._loaded_listeners.append(listener)

    def _update(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)  # type: ignore[arg-type]
        for listener in list(self._state_listeners):
            listener(self._state)

    # ── Parameter transitions ────────────────────────────

    def set_search_text(self, text: str) -> None:
        """Update the raw search box; the load waits for the debounce."""
        if text == self._state.search_text:
            return
        self._update(search_text=text)
        self._search_debouncer.push(text)

    def _on_debounced_search(self, text: str) -> None:
        if text == self._state.debounced_search:
            return
        logger.debug("Debounced search settled on %r", text)
        self._update(debounced_search=text, page=0)
        self.request_reload(ReloadReason.PARAMETERS_CHANGED)

    def set_size(self, size: int) -> asyncio.Task[bool] | None:
        """Change the page size; resets to the first page."""
        if size not in Settings.PAGE_SIZES:
            msg = f"size must be one of {Settings.PAGE_SIZES}, got {size}"
            raise ValueError(msg)
        if size == self._state.size:
            return None
        self._update(size=size, page=0)
        return self.request_reload(ReloadReason.PARAMETERS_CHANGED)

    def set_sort(self, sort: SortKey | str) -> asyncio.Task[bool] | None:
        """Change the sort order; resets to the first page."""
        key = SortKey.parse(sort) if isinstance(sort, str) else sort
        if key == self._state.sort:
            return None
        self._update(sort=key, page=0)
        return self.request_reload(ReloadReason.PARAMETERS_CHANGED)

    def go_to_page(self, page: int) -> asyncio.Task[bool] | None:
        """Jump to *page*, clamped to the known range."""
        target = min(max(page, 0), self._state.last_page_index)
        if target == self._state.page:
            return None
        self._update(page=target)
        return self.request_reload(ReloadReason.PARAMETERS_CHANGED)

    def prev_page(self) -> asyncio.Task[bool] | None:
        """Step back one page; no-op on the first page."""
        return self.go_to_page(self._state.page - 1)

    def next_page(self) -> asyncio.Task[bool] | None:
        """Step forward one page; no-op on the last page."""
        return self.go_to_page(self._state.page + 1)

    def reset_page(self) -> None:
        """Move to page 0 without triggering a load of its own.

        Used after a create, where the caller issues the single reload
        itself.
        """
        if self._state.page != 0:
            self._update(page=0)

    # ── Loading ──────────────────────────────────────────

    def request_reload(
        self, reason: ReloadReason = ReloadReason.MANUAL
    ) -> asyncio.Task[bool]:
        """Schedule :meth:`reload` on the running loop."""
        task = asyncio.get_running_loop().create_task(self.reload(reason))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def reload(
        self, reason: ReloadReason = ReloadReason.MANUAL
    ) -> bool:
        """Fetch the page for the current parameters.

        Returns ``True`` when this load's result was committed, and
        ``False`` when it failed or was superseded by a newer load.
        """
        self._generation += 1
        token = self._generation
        params = self._state.params
        logger.info(
            "Load #%d (%s): page=%d size=%d sort=%s q=%r",
            token,
            reason.value,
            params.page,
            params.size,
            params.sort,
            params.search_text,
        )
        self._update(loading=True)

        try:
            result: PageResult = await asyncio.to_thread(
                self.gateway.list_products, params
            )
        except GatewayError as exc:
            if token != self._generation:
                logger.debug("Stale load #%d failed; ignored", token)
                return False
            logger.error(
                "Load #%d failed: %s", token, exc, exc_info=True
            )
            self._update(loading=False)
            self.notifier.post(LOAD_FAILED_MESSAGE, "err")
            return False

        if token != self._generation:
            logger.debug(
                "Discarding stale load #%d (current #%d)",
                token,
                self._generation,
            )
            return False

        last_page = result.last_page_index
        if params.page > last_page:
            # e.g. the only row of the last page was deleted
            logger.info(
                "Page %d is past the end; clamped to %d",
                params.page,
                last_page,
            )
            self._update(
                total=result.total_items,
                last_page_index=last_page,
                page=last_page,
            )
            self.request_reload(ReloadReason.PAGE_CLAMPED)
            return True

        self._update(
            content=tuple(result.items),
            total=result.total_items,
            last_page_index=last_page,
            loading=False,
        )
        for listener in list(self._loaded_listeners):
            listener(result)
        return True

    async def wait_idle(self) -> None:
        """Wait until no reload task is outstanding."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel the search debounce and any in-flight loads."""
        self._search_debouncer.close()
        for task in list(self._tasks):
            task.cancel()
