"""Command line interface package."""

from dotenv import load_dotenv

from .commands import cli

# Load environment variables
load_dotenv()

__all__ = ["cli"]
