# src/services/draft_validator.py

"""Client-side draft validation: catch what the backend would reject with a 400."""

import logging
from decimal import Decimal, InvalidOperation

from src.config.settings import Settings
from src.models.product import ProductDraft

logger = logging.getLogger("catalog_client.validation")

# Messages match the backend's field-error map so the form reads the same
# whichever side caught the problem.
NAME_REQUIRED = "Name is mandatory"
NAME_TOO_LONG = (
    f"Name must be at most {Settings.NAME_MAX_LENGTH} characters"
)
PRICE_REQUIRED = "Price must be provided"
PRICE_NOT_NUMBER = "Price must be a number"
PRICE_NOT_POSITIVE = "Price must be greater than 0"
PRICE_TOO_PRECISE = (
    f"Price must have at most {Settings.PRICE_MAX_DECIMALS} decimal places"
)


def parse_price(raw: str) -> Decimal | None:
    """Parse the price input box; ``None`` when blank.

    Raises:
        ValueError: the text is not a finite number.
    """
    text = raw.strip().replace(",", ".")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(PRICE_NOT_NUMBER) from exc
    if not value.is_finite():
        raise ValueError(PRICE_NOT_NUMBER)
    return value


class DraftValidator:
    """Validate a product draft before it is sent."""

    @staticmethod
    def validate(draft: ProductDraft) -> dict[str, str]:
        """Return a field → message map; empty when the draft is valid."""
        errors: dict[str, str] = {}

        name = draft.name.strip()
        if not name:
            errors["name"] = NAME_REQUIRED
        elif len(name) > Settings.NAME_MAX_LENGTH:
            errors["name"] = NAME_TOO_LONG

        price = draft.price
        if price is None:
            errors["price"] = PRICE_REQUIRED
        elif price <= 0:
            errors["price"] = PRICE_NOT_POSITIVE
        else:
            exponent = price.normalize().as_tuple().exponent
            integer_digits = max(price.adjusted() + 1, 0)
            if isinstance(exponent, int) and -exponent > (
                Settings.PRICE_MAX_DECIMALS
            ):
                errors["price"] = PRICE_TOO_PRECISE
            elif integer_digits > Settings.PRICE_MAX_INTEGER_DIGITS:
                # Shared message for both digit limits
                errors["price"] = PRICE_TOO_PRECISE

        if errors:
            logger.debug("Draft rejected locally: %s", errors)
        return errors
