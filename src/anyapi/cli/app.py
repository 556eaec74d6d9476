"""Main CLI application."""

import os
from pathlib import Path
from typing import Annotated

import typer

from anyapi.cli.commands import config, integration
from anyapi.logging import configure_logging

app = typer.Typer(
    name="anyapi",
    help="anyapi - discover and call any OAuth-connected API",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging",
        ),
    ] = False,
) -> None:
    """Discover capabilities of connected services and call them."""
    level = "DEBUG" if verbose else os.environ.get("ANYAPI_LOG_LEVEL", "WARNING")
    configure_logging(level=level)
    ctx.obj = {"config_path": config_path, "verbose": verbose}


integration.register(app)
config.register(app)


if __name__ == "__main__":
    app()
