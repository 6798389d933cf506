# src/ui/app.py

"""Terminal UI for browsing and editing the product catalog."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    Select,
    Static,
)
from textual.widgets.data_table import (
    CellDoesNotExist,
    ColumnKey,
    RowDoesNotExist,
    RowKey,
)

from src.api.gateway import ProductGateway
from src.config.settings import Settings
from src.models.product import PageResult, Product
from src.services.catalog_controller import (
    CatalogController,
    CatalogState,
    ReloadReason,
)
from src.services.highlight import HighlightReconciler
from src.services.mutations import MutationOrchestrator
from src.services.notifications import Notification, NotificationChannel
from src.ui.screens import ConfirmDeleteScreen, ProductFormScreen

logger = logging.getLogger("catalog_client.ui")

HIGHLIGHT_STYLE = "bold black on yellow"


class TableRowHandle:
    """Highlight/scroll handle for one DataTable row."""

    def __init__(
        self,
        table: DataTable[str | Text],
        row_key: RowKey,
        columns: list[ColumnKey],
        cells: list[str],
    ) -> None:
        self.table = table
        self.row_key = row_key
        self.columns = columns
        self.cells = cells

    def set_highlighted(self, active: bool) -> None:
        style = HIGHLIGHT_STYLE if active else ""
        try:
            for column, value in zip(self.columns, self.cells):
                self.table.update_cell(
                    self.row_key, column, Text(value, style=style)
                )
        except CellDoesNotExist:
            logger.debug("Row %s no longer rendered", self.row_key.value)

    def scroll_into_view(self) -> None:
        try:
            index = self.table.get_row_index(self.row_key)
        except RowDoesNotExist:
            logger.debug("Row %s no longer rendered", self.row_key.value)
            return
        self.table.move_cursor(row=index, animate=True)


class CatalogApp(App[object]):
    """Terminal UI for the product catalog."""

    CSS_PATH = "styles.tcss"
    TITLE = "Products"
    SUB_TITLE = "Manage your catalog"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "new_product", "New"),
        Binding("e", "edit_product", "Edit"),
        Binding("d", "delete_product", "Delete"),
        Binding("r", "refresh", "Refresh"),
        Binding("left_square_bracket", "prev_page", "Prev"),
        Binding("right_square_bracket", "next_page", "Next"),
    ]

    def __init__(self, gateway: ProductGateway | None = None) -> None:
        super().__init__()
        self.settings = Settings()
        self.gateway = gateway or ProductGateway()
        self.notifier = NotificationChannel()
        self.controller = CatalogController(self.gateway, self.notifier)
        self.highlighter = HighlightReconciler()
        self.mutations = MutationOrchestrator(
            self.gateway,
            self.controller,
            self.highlighter,
            self.notifier,
            confirm=self.confirm,
        )
        self._columns: list[ColumnKey] = []

    # ── Layout ───────────────────────────────────────────

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        sort_options = [
            (opt["label"], opt["value"])
            for opt in self.settings.SORT_OPTIONS
        ]
        size_options = [
            (str(size), size) for size in self.settings.PAGE_SIZES
        ]

        yield Header()
        yield Container(
            Horizontal(
                Input(placeholder="Search by name…", id="search_input"),
                Static("0 items", id="item_count", classes="chip"),
                Button("＋ New Product", variant="primary", id="new_btn"),
                id="search_bar",
            ),
            Horizontal(
                Select(
                    sort_options,
                    value=self.settings.DEFAULT_SORT,
                    allow_blank=False,
                    prompt="Sort",
                    id="sort_select",
                ),
                Select(
                    size_options,
                    value=self.settings.DEFAULT_PAGE_SIZE,
                    allow_blank=False,
                    prompt="Size",
                    id="size_select",
                ),
                Button("◀ Prev", id="prev_btn", disabled=True),
                Static("Page 1 of 1", id="page_label"),
                Button("Next ▶", id="next_btn", disabled=True),
                id="pager",
            ),
            LoadingIndicator(id="loader"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static(
                "📭 No products. Create your first product to get started.",
                id="empty_state",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Wire the controller to the widgets and load the first page."""
        # Cached so renders still work while a modal screen is on top
        self.table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        self.item_count = self.query_one("#item_count", Static)
        self.page_label = self.query_one("#page_label", Static)
        self.prev_button = self.query_one("#prev_btn", Button)
        self.next_button = self.query_one("#next_btn", Button)
        self.loader = self.query_one("#loader", LoadingIndicator)
        self.empty_state = self.query_one("#empty_state", Static)

        self._columns = list(self.table.add_columns("ID", "Name", "Price"))
        self.loader.display = False
        self.empty_state.display = False

        self.notifier.attach(self._show_toast)
        self.controller.add_state_listener(self._render_state)
        self.controller.add_loaded_listener(self._on_page_loaded)
        self.controller.request_reload(ReloadReason.INITIAL)

    def on_unmount(self) -> None:
        self.controller.close()
        self.highlighter.close()
        self.notifier.detach()
        self.gateway.close()
        logger.info("Catalog UI closed")

    # ── Rendering ────────────────────────────────────────

    def _show_toast(self, note: Notification) -> None:
        self.notify(
            note.message,
            severity="error" if note.kind == "err" else "information",
            timeout=self.settings.TOAST_TIMEOUT,
        )

    def _render_state(self, state: CatalogState) -> None:
        """Sync toolbar, pager and loading indicator with *state*."""
        self.item_count.update(state.item_count_label)
        self.page_label.update(state.page_label)
        self.prev_button.disabled = not state.can_go_prev
        self.next_button.disabled = not state.can_go_next
        self.loader.display = state.loading
        self.table.display = not state.loading and bool(state.content)
        self.empty_state.display = (
            not state.loading and not state.content
        )

    def _on_page_loaded(self, result: PageResult) -> None:
        """Redraw the rows, then let the reconciler pulse its target."""
        self.populate_table(result.items)
        self.highlighter.reconcile()

    def populate_table(self, products: list[Product]) -> None:
        """Fill the DataTable and register each row by product id."""
        table = self.table
        table.clear()
        self.highlighter.clear_rows()
        for p in products:
            cells = [f"#{p.id}", p.name[:60], p.display_price]
            row_key = table.add_row(*cells, key=p.id)
            self.highlighter.register(
                p.id, TableRowHandle(table, row_key, self._columns, cells)
            )

    def selected_product(self) -> Product | None:
        content = self.controller.state.content
        row = self.table.cursor_row
        if not content or not 0 <= row < len(content):
            return None
        return content[row]

    # ── Events ───────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search_input":
            self.controller.set_search_text(event.value)

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "sort_select":
            self.controller.set_sort(str(event.value))
        elif event.select.id == "size_select":
            self.controller.set_size(cast(int, event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "new_btn":
            self.action_new_product()
        elif event.button.id == "prev_btn":
            self.action_prev_page()
        elif event.button.id == "next_btn":
            self.action_next_page()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Enter on a row opens it for editing."""
        self.action_edit_product()

    # ── Actions ──────────────────────────────────────────

    def action_new_product(self) -> None:
        self.push_screen(ProductFormScreen(self.mutations))

    def action_edit_product(self) -> None:
        product = self.selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        self.push_screen(ProductFormScreen(self.mutations, product))

    def action_delete_product(self) -> None:
        product = self.selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        self.run_worker(
            self.mutations.delete(product.id), group="mutations"
        )

    def action_refresh(self) -> None:
        self.controller.request_reload(ReloadReason.MANUAL)

    def action_prev_page(self) -> None:
        self.controller.prev_page()

    def action_next_page(self) -> None:
        self.controller.next_page()

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question; must be awaited from a worker."""
        answer = await self.push_screen_wait(ConfirmDeleteScreen(message))
        return bool(answer)
