"""
Search Command for Content Search CLI

Fetches the configured content source once and runs a query against it.

Example Usage:
    $ content-search search "imprint"
    $ content-search search --limit 5 "car insurance"
    $ content-search search --json "contact"
"""

import asyncio
import json
import logging
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from ...models import RefreshOutcome, SearchResult, Status
from ..loader import load_config, load_service
from ..ui.logging import setup_logging

logger = logging.getLogger(__name__)
console = Console()


async def run_search(config_dir: Optional[str], query: str) -> Tuple[SearchResult, RefreshOutcome]:
    """Refresh once and query the fresh cache."""
    async with load_service(config_dir) as service:
        await service.setup(start_scheduler=False)
        outcome = await service.refresh()
        return service.query(query), outcome


@click.command()
@click.argument("query")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing config.yaml",
)
@click.option("--limit", type=int, default=10, help="Number of results to show")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
@click.option("-v", "--verbose", count=True, help="Increase output verbosity")
def search(
    query: str, config_dir: Optional[str], limit: int, as_json: bool, verbose: int
) -> None:
    """Search the configured content source."""
    setup_logging(verbose, load_config(config_dir).log_level)

    result, outcome = asyncio.run(run_search(config_dir, query))

    if as_json:
        data = result.to_dict()
        data["results"] = data["results"][:limit]
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if outcome.status is Status.ERROR:
        console.print("[yellow]Warning:[/yellow] content could not be fetched")

    if not result.results:
        console.print("No results found.")
        return

    table = Table(
        title=f"Search Results for: {query} ({result.search})",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Rank", justify="right", style="cyan")
    table.add_column("Type", justify="left", style="green")
    table.add_column("Path", justify="left", style="blue")
    table.add_column("Title", justify="left")

    for record in result.results[:limit]:
        table.add_row(
            str(record.search_rank),
            record.type_tag or "",
            str(record.get("path", "")),
            str(record.get("jcr:title") or record.get("title") or ""),
        )

    console.print(table)
    console.print(f"{result.found_items} results (tier {result.tier})", style="dim")
