# src/cli/runner.py

"""Headless CLI commands: list one page or probe backend health."""

import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.api.errors import GatewayError
from src.api.gateway import ProductGateway
from src.models.product import PageResult, Product
from src.models.query import QueryParameters, SortKey
from src.services.health_checker import HealthChecker

logger = logging.getLogger("catalog_client.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_params(
    search: str | None,
    page: int,
    size: int,
    sort: str,
) -> QueryParameters:
    """Validate CLI flags into QueryParameters.

    Raises ``SystemExit`` on an invalid sort, size or page.
    """
    try:
        return QueryParameters(
            page=page,
            size=size,
            sort=SortKey.parse(sort),
            search_text=search or "",
        )
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        raise SystemExit(2) from exc


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {"id": p.id, "name": p.name, "price": str(p.price)}
        for p in products
    ]


def _print_table(result: PageResult, params: QueryParameters) -> None:
    """Render a Rich table of one page to stdout."""
    table = Table(
        title=(
            f"Products — page {params.page + 1} of "
            f"{result.last_page_index + 1} ({result.total_items} total)"
        ),
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", max_width=60)
    table.add_column("Price", justify="right", style="green")

    for p in result.items:
        table.add_row(f"#{p.id}", p.name, p.display_price)

    Console().print(table)


async def cli_list(
    params: QueryParameters,
    output_format: str,
    gateway: ProductGateway | None = None,
) -> int:
    """Print one page of products and return an exit code (0=ok, 1=fail)."""
    gw = gateway or ProductGateway()
    _err.print(
        f"[bold]Listing:[/bold] {gw.base_url}  "
        f"[dim]page={params.page} size={params.size} "
        f"sort={params.sort} q={params.search_text!r}[/dim]"
    )
    try:
        result = await asyncio.to_thread(gw.list_products, params)
    except GatewayError as exc:
        logger.error("CLI listing failed: %s", exc, exc_info=True)
        _err.print(f"[red]Failed to load products: {exc}[/red]")
        return 1
    finally:
        if gateway is None:
            gw.close()

    if not result.items:
        _err.print("[yellow]No products.[/yellow]")

    if output_format == "table":
        _print_table(result, params)
    else:
        json.dump(
            {
                "content": _products_to_dicts(result.items),
                "totalElements": result.total_items,
                "totalPages": result.total_pages,
                "number": result.number,
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def run_health_check(gateway: ProductGateway | None = None) -> int:
    """Probe the catalog backend and report its health."""
    gw = gateway or ProductGateway()
    _err.print("[bold]Running backend health check...[/bold]")
    try:
        r = await HealthChecker(gw).check()
    finally:
        if gateway is None:
            gw.close()

    table = Table(
        title="Catalog Backend Health",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Products", justify="right")
    table.add_column("Notes", style="dim")

    if r.status == "ok":
        status = "[green]✅ OK[/green]"
    elif r.status == "slow":
        status = "[yellow]⚠️  SLOW[/yellow]"
    else:
        status = "[red]❌ DOWN[/red]"

    latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
    table.add_row(
        r.base_url, status, latency, str(r.total_items), r.message,
    )
    Console().print(table)
    return 1 if r.status == "down" else 0
