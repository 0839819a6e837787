"""
Main Entry Point for Content Search

This module serves as the main entry point when the package is run as a command-line
application.

Example Usage:
    $ python -m content_search search "imprint"
    $ python -m content_search synonyms "auto,haus"
    $ python -m content_search refresh --config-dir deploy
    $ python -m content_search watch -v

The CLI reads its content source, refresh interval and synonym dictionary from
``config.yaml`` (see content_search.config).
"""

import sys
from typing import Optional, Sequence

import click

from .cli import cli


def main(args: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments.
            Defaults to sys.argv[1:].

    Returns:
        Exit code.
    """
    try:
        cli(args=args, standalone_mode=False)
        return 0

    except click.exceptions.Exit as e:
        return e.exit_code

    except click.ClickException as e:
        e.show()
        return e.exit_code

    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
