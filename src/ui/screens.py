# src/ui/screens.py

"""Modal screens: product create/edit form and delete confirmation."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from src.config.settings import Settings
from src.models.product import Product, ProductDraft
from src.services.draft_validator import parse_price
from src.services.mutations import MutationOrchestrator

logger = logging.getLogger("catalog_client.ui")

FIELDS = ("name", "price")


class ProductFormScreen(ModalScreen[bool]):
    """Create a new product, or edit *editing* when given.

    Dismisses with ``True`` once the product is saved; validation
    errors are shown under their fields and keep the form open.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(
        self,
        orchestrator: MutationOrchestrator,
        editing: Product | None = None,
    ) -> None:
        super().__init__()
        self.orchestrator = orchestrator
        self.editing = editing
        self.field_errors: dict[str, str] = {}

    @property
    def title_text(self) -> str:
        if self.editing is None:
            return "New Product"
        return f"Edit #{self.editing.id}"

    def compose(self) -> ComposeResult:
        draft = (
            ProductDraft.from_product(self.editing)
            if self.editing
            else ProductDraft(name="", price=None)
        )
        name = draft.name
        price = "" if draft.price is None else str(draft.price)
        with Container(id="form_card"):
            yield Label(self.title_text, id="form_title")
            yield Label("Name")
            yield Input(
                value=name,
                placeholder="Coffee Mug",
                max_length=Settings.NAME_MAX_LENGTH,
                id="name_input",
            )
            yield Static("", id="name_error", classes="field-error")
            yield Label("Price")
            yield Input(value=price, placeholder="12.99", id="price_input")
            yield Static("", id="price_error", classes="field-error")
            with Horizontal(id="form_actions"):
                yield Button("Cancel", id="cancel_btn")
                yield Button("Save", variant="primary", id="save_btn")

    def on_mount(self) -> None:
        self.query_one("#name_input", Input).focus()

    def show_errors(self, errors: dict[str, str]) -> None:
        """Render *errors* under their inputs; unknown fields are notified."""
        self.field_errors = dict(errors)
        for name in FIELDS:
            self.query_one(f"#{name}_error", Static).update(
                errors.get(name, "")
            )
        extra = [msg for key, msg in errors.items() if key not in FIELDS]
        if extra:
            self.notify("; ".join(extra), severity="error")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save_btn":
            self.run_worker(self.save(), exclusive=True)
        elif event.button.id == "cancel_btn":
            self.dismiss(False)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        self.run_worker(self.save(), exclusive=True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    async def save(self) -> None:
        """Validate, submit, and close on success."""
        self.show_errors({})
        name = self.query_one("#name_input", Input).value
        raw_price = self.query_one("#price_input", Input).value
        try:
            price = parse_price(raw_price)
        except ValueError as exc:
            self.show_errors({"price": str(exc)})
            return

        save_btn = self.query_one("#save_btn", Button)
        save_btn.disabled = True
        try:
            outcome = await self.orchestrator.submit(
                self.editing, ProductDraft(name=name, price=price)
            )
        finally:
            save_btn.disabled = False

        if outcome.saved:
            self.dismiss(True)
        elif outcome.field_errors:
            self.show_errors(outcome.field_errors)


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Yes/no prompt; dismisses with ``True`` to go ahead."""

    BINDINGS = [
        Binding("escape", "answer(False)", "Cancel"),
        Binding("y", "answer(True)", "Yes"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Container(id="confirm_card"):
            yield Label(self.message, id="confirm_message")
            with Horizontal(id="confirm_actions"):
                yield Button("Cancel", id="cancel_btn")
                yield Button("Delete", variant="error", id="confirm_btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm_btn")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)
