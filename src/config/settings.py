# src/config/settings.py

"""Central configuration for the catalog_client application."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the catalog_client application."""

    # --- Backend ---
    API_BASE: str = os.getenv(
        "CATALOG_API_BASE", "http://localhost:8080/api/products"
    )
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    HEALTH_SLOW_MS: float = 2000.0      # Latency above this reports "slow"

    # --- HTTP client ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Timing (seconds) ---
    SEARCH_DEBOUNCE: float = 0.3        # Quiet period before a search fires
    HIGHLIGHT_DURATION: float = 1.8     # Pulse length on a changed row
    TOAST_TIMEOUT: float = 2.5          # Notification lifetime

    # --- Query defaults ---
    PAGE_SIZES: list[int] = [5, 10, 20, 50]
    DEFAULT_PAGE_SIZE: int = 10
    DEFAULT_SORT: str = "id,desc"
    SORT_OPTIONS: list[dict[str, str]] = [
        {"value": "id,desc", "label": "ID ↓ (Newest)"},
        {"value": "id,asc", "label": "ID ↑ (Oldest)"},
        {"value": "name,asc", "label": "Name A→Z"},
        {"value": "name,desc", "label": "Name Z→A"},
        {"value": "price,asc", "label": "Price ↑ (Lowest)"},
        {"value": "price,desc", "label": "Price ↓ (Highest)"},
    ]

    # --- Product constraints (mirrors backend validation) ---
    NAME_MAX_LENGTH: int = 120
    PRICE_MAX_DECIMALS: int = 2
    PRICE_MAX_INTEGER_DIGITS: int = 10

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
