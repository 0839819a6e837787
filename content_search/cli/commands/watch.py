"""Watch command: keep the cache refreshed until interrupted."""

import asyncio
import logging
from typing import Optional

import click
from rich.console import Console

from ...monitoring.events import Event
from ..loader import load_config, load_service
from ..ui.logging import setup_logging

logger = logging.getLogger(__name__)
console = Console()


def print_event(event: Event) -> None:
    """Print a refresh event."""
    style = "green" if event.success else "red"
    console.print(
        f"[{style}]{event.type.name}[/{style}] {event.description or ''}",
        highlight=False,
    )


async def run_watch(config_dir: Optional[str]) -> None:
    """Run the refresh scheduler until cancelled."""
    async with load_service(config_dir) as service:
        port = service.config.monitoring.metrics_port
        if port and service.metrics:
            service.metrics.serve(port)

        service.events.subscribe(print_event)
        await service.setup()
        await asyncio.Event().wait()


@click.command()
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing config.yaml",
)
@click.option("-v", "--verbose", count=True, help="Increase output verbosity")
def watch(config_dir: Optional[str], verbose: int) -> None:
    """Refresh the configured content source on its interval."""
    setup_logging(verbose, load_config(config_dir).log_level)
    try:
        asyncio.run(run_watch(config_dir))
    except KeyboardInterrupt:
        console.print("Stopped.")
