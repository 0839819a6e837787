"""Synonyms command."""

import json
from typing import Optional

import click

from ...services.base import SynonymFileError
from ...synonyms import SynonymTable
from ..loader import load_config
from ..ui.logging import setup_logging


@click.command()
@click.argument("words")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing config.yaml",
)
@click.option("-v", "--verbose", count=True, help="Increase output verbosity")
def synonyms(words: str, config_dir: Optional[str], verbose: int) -> None:
    """Show the synonym groups of comma separated WORDS."""
    config = load_config(config_dir)
    setup_logging(verbose, config.log_level)

    try:
        table = SynonymTable.from_file(config.synonyms.path)
    except SynonymFileError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(table.synonyms_of(words), indent=2, ensure_ascii=False))
