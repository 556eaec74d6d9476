"""CLI command modules."""

from anyapi.cli.commands import config, integration

__all__ = [
    "config",
    "integration",
]
