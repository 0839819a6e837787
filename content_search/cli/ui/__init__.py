"""Terminal UI helpers for the CLI."""
