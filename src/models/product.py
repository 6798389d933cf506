# src/models/product.py

"""Product data models exchanged with the catalog backend."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any


def _to_decimal(value: Any) -> Decimal:
    """Coerce a JSON number/string into a Decimal (0 on garbage)."""
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def format_price(price: Decimal) -> str:
    """Format a price the Austrian way, e.g. ``€ 1.299,00``."""
    quantized = price.quantize(Decimal("0.01"))
    grouped = f"{quantized:,.2f}"  # 1,299.00
    swapped = (
        grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    )
    return f"€ {swapped}"


@dataclass
class Product:
    """A product as returned by the catalog backend."""

    id: str
    name: str
    price: Decimal

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from one entry of a page's ``content``."""
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            price=_to_decimal(data.get("price")),
        )

    @property
    def display_price(self) -> str:
        return format_price(self.price)


@dataclass
class ProductDraft:
    """Unsaved form values for a create or update request."""

    name: str
    price: Decimal | None

    @classmethod
    def from_product(cls, product: Product) -> "ProductDraft":
        return cls(name=product.name, price=product.price)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent on POST/PUT."""
        return {
            "name": self.name.strip(),
            "price": float(self.price) if self.price is not None else None,
        }


@dataclass
class PageResult:
    """One page of products plus the paging totals."""

    items: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total_items: int = 0
    total_pages: int = 1
    number: int = 0

    @property
    def last_page_index(self) -> int:
        return max(self.total_pages, 1) - 1

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PageResult":
        """Decode a Spring Data ``Page`` JSON object.

        Missing ``content`` becomes an empty list, a missing
        ``totalElements`` becomes 0, and a missing or zero
        ``totalPages`` is treated as a single (empty) page.
        """
        raw_items = data.get("content") or []
        return cls(
            items=[Product.from_json(item) for item in raw_items],
            total_items=int(data.get("totalElements") or 0),
            total_pages=int(data.get("totalPages") or 1),
            number=int(data.get("number") or 0),
        )
