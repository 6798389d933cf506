# src/services/health_checker.py

"""Catalog backend connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.api.errors import GatewayError
from src.api.gateway import ProductGateway
from src.config.settings import Settings
from src.models.query import QueryParameters

logger = logging.getLogger("catalog_client.health")


@dataclass
class HealthResult:
    """Result of probing the catalog backend."""

    base_url: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str
    total_items: int = 0


def probe_backend(gateway: ProductGateway) -> HealthResult:
    """Fetch the smallest possible page and time the round trip."""
    params = QueryParameters(page=0, size=min(Settings.PAGE_SIZES))
    start = time.monotonic()
    try:
        page = gateway.list_products(params)
    except GatewayError as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            base_url=gateway.base_url,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )
    elapsed_ms = (time.monotonic() - start) * 1000

    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            base_url=gateway.base_url,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
            total_items=page.total_items,
        )
    return HealthResult(
        base_url=gateway.base_url,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
        total_items=page.total_items,
    )


class HealthChecker:
    """Runs the backend probe off the event loop."""

    def __init__(self, gateway: ProductGateway) -> None:
        self.gateway = gateway

    async def check(self) -> HealthResult:
        result = await asyncio.to_thread(probe_backend, self.gateway)
        logger.info(
            "Health check %s: %s (%.0fms) %s",
            result.base_url,
            result.status,
            result.latency_ms,
            result.message,
        )
        return result
