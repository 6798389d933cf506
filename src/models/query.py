# src/models/query.py

"""Query parameters for paginated, sorted, searchable listings."""

from dataclasses import dataclass, field

from src.config.settings import Settings

SORT_FIELDS: frozenset[str] = frozenset({"id", "name", "price"})
SORT_DIRECTIONS: frozenset[str] = frozenset({"asc", "desc"})


@dataclass(frozen=True)
class SortKey:
    """A ``(field, direction)`` pair, encoded as ``"field,direction"``."""

    field: str = "id"
    direction: str = "desc"

    def __post_init__(self) -> None:
        if self.field not in SORT_FIELDS:
            msg = f"Unknown sort field: {self.field!r}"
            raise ValueError(msg)
        if self.direction not in SORT_DIRECTIONS:
            msg = f"Unknown sort direction: {self.direction!r}"
            raise ValueError(msg)

    @classmethod
    def parse(cls, raw: str) -> "SortKey":
        """Parse ``"name,asc"``; a bare field defaults to ascending."""
        sort_field, _, direction = raw.strip().partition(",")
        return cls(
            field=sort_field.strip().lower(),
            direction=(direction.strip().lower() or "asc"),
        )

    def __str__(self) -> str:
        return f"{self.field},{self.direction}"


def _default_sort() -> SortKey:
    return SortKey.parse(Settings.DEFAULT_SORT)


@dataclass(frozen=True)
class QueryParameters:
    """Everything needed to request one page of products."""

    page: int = 0
    size: int = Settings.DEFAULT_PAGE_SIZE
    sort: SortKey = field(default_factory=_default_sort)
    search_text: str = ""

    def __post_init__(self) -> None:
        if self.page < 0:
            msg = f"page must be >= 0, got {self.page}"
            raise ValueError(msg)
        if self.size not in Settings.PAGE_SIZES:
            msg = (
                f"size must be one of {Settings.PAGE_SIZES}, "
                f"got {self.size}"
            )
            raise ValueError(msg)

    @property
    def is_search(self) -> bool:
        return bool(self.search_text.strip())

    def to_query(self) -> dict[str, str | int]:
        """Return the query-string fields, leaving out ``q`` when empty."""
        query: dict[str, str | int] = {
            "page": self.page,
            "size": self.size,
            "sort": str(self.sort),
        }
        if self.is_search:
            query["q"] = self.search_text.strip()
        return query
