"""Refresh command."""

import asyncio
import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console

from ...models import RefreshOutcome, Status
from ..loader import load_config, load_service
from ..ui.logging import setup_logging

logger = logging.getLogger(__name__)
console = Console()


async def run_refresh(config_dir: Optional[str]) -> Tuple[RefreshOutcome, int]:
    """Run one refresh cycle."""
    async with load_service(config_dir) as service:
        await service.setup(start_scheduler=False)
        await service.refresh_cycle()
        return service.last_refresh_outcome(), len(service.records)


@click.command()
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing config.yaml",
)
@click.option("-v", "--verbose", count=True, help="Increase output verbosity")
def refresh(config_dir: Optional[str], verbose: int) -> None:
    """Fetch the configured content source once."""
    setup_logging(verbose, load_config(config_dir).log_level)

    outcome, record_count = asyncio.run(run_refresh(config_dir))
    console.print(str(outcome))

    if outcome.status is Status.ERROR:
        console.print("[red]Error:[/red] no mirror returned valid content")
        sys.exit(1)

    console.print(f"Cached {record_count} records")
