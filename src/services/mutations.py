# src/services/mutations.py

"""Create / update / delete sequencing around the catalog controller."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from src.api.errors import GatewayError, ValidationError
from src.api.gateway import ProductGateway
from src.models.product import Product, ProductDraft
from src.services.catalog_controller import CatalogController, ReloadReason
from src.services.draft_validator import DraftValidator
from src.services.highlight import HighlightReconciler
from src.services.notifications import NotificationChannel

logger = logging.getLogger("catalog_client.mutations")

SAVE_FAILED_MESSAGE = "Failed to save product"
DELETE_FAILED_MESSAGE = "Failed to delete product"

ConfirmCallback = Callable[[str], Awaitable[bool]]


@dataclass
class SubmitOutcome:
    """What the form needs to know after a submit attempt."""

    saved: bool
    field_errors: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )
    message: str = ""


class MutationOrchestrator:
    """Runs a mutation, then hands off highlight and reload."""

    def __init__(
        self,
        gateway: ProductGateway,
        controller: CatalogController,
        highlighter: HighlightReconciler,
        notifier: NotificationChannel,
        confirm: ConfirmCallback,
    ) -> None:
        self.gateway = gateway
        self.controller = controller
        self.highlighter = highlighter
        self.notifier = notifier
        self.confirm = confirm

    async def submit(
        self, editing: Product | None, draft: ProductDraft
    ) -> SubmitOutcome:
        """Create (``editing is None``) or update a product.

        Field errors come back in the outcome and leave the form open.
        Any other failure is notified.  On success the listing is
        reloaded once, whether or not the query parameters changed.
        """
        local_errors = DraftValidator.validate(draft)
        if local_errors:
            return SubmitOutcome(saved=False, field_errors=local_errors)

        try:
            if editing is not None:
                await asyncio.to_thread(
                    self.gateway.update_product, editing.id, draft
                )
                self.highlighter.request(editing.id)
                success = "Updated successfully"
            else:
                new_id = await asyncio.to_thread(
                    self.gateway.create_product, draft
                )
                if new_id:
                    self.highlighter.request(new_id)
                # Newest-first ordering puts the new row on page 0
                self.controller.reset_page()
                success = "Created successfully"
        except ValidationError as exc:
            logger.info("Backend rejected draft: %s", exc.field_errors)
            if not exc.field_errors:
                # Undecodable 400 body: nothing to show under the fields
                self.notifier.post(SAVE_FAILED_MESSAGE, "err")
                return SubmitOutcome(saved=False, message=SAVE_FAILED_MESSAGE)
            return SubmitOutcome(saved=False, field_errors=exc.field_errors)
        except GatewayError as exc:
            logger.error("Save failed: %s", exc, exc_info=True)
            message = str(exc) or SAVE_FAILED_MESSAGE
            self.notifier.post(message, "err")
            return SubmitOutcome(saved=False, message=message)

        self.notifier.post(success, "ok")
        await self.controller.reload(ReloadReason.MUTATION_COMPLETED)
        return SubmitOutcome(saved=True, message=success)

    async def delete(self, product_id: str) -> bool:
        """Confirm, then delete *product_id* and reload.

        Returns ``True`` when the product was deleted.
        """
        if not await self.confirm(f"Delete product #{product_id}?"):
            logger.debug("Delete of %s cancelled", product_id)
            return False
        try:
            await asyncio.to_thread(self.gateway.delete_product, product_id)
        except GatewayError as exc:
            logger.error(
                "Delete of %s failed: %s", product_id, exc, exc_info=True
            )
            self.notifier.post(str(exc) or DELETE_FAILED_MESSAGE, "err")
            return False

        self.notifier.post("Deleted product", "ok")
        await self.controller.reload(ReloadReason.MUTATION_COMPLETED)
        return True
