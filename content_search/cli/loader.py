"""Builds search services for CLI commands."""

from typing import Optional

import click

from ..config import Config, ConfigurationError, get_config
from ..providers import JcrContentProvider
from ..service import SearchService


def load_config(config_dir: Optional[str]) -> Config:
    """Load configuration, turning errors into CLI errors."""
    try:
        return get_config(config_dir=config_dir)
    except ConfigurationError as e:
        raise click.ClickException(str(e))


def load_service(config_dir: Optional[str]) -> SearchService:
    """Build a search service for the configured content source.

    Raises:
        click.ClickException: If configuration is invalid or has no source section
    """
    config = load_config(config_dir)
    if config.source is None:
        raise click.ClickException("No content source configured (missing 'source' section)")
    return SearchService(JcrContentProvider(config.source), config)
