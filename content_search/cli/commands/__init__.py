"""CLI commands package."""

import click

from .refresh import refresh
from .search import search
from .synonyms import synonyms
from .watch import watch


@click.group()
def cli():
    """Content Search CLI."""
    pass


cli.add_command(refresh)
cli.add_command(search)
cli.add_command(synonyms)
cli.add_command(watch)
