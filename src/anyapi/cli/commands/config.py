"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer
from pydantic import ValidationError
from rich.syntax import Syntax
from rich.table import Table

from anyapi.cli.console import console, create_table, error, success, warning
from anyapi.config import AnyApiConfig, load_config
from anyapi.config.paths import get_config_path

ACTIONS = ("show", "validate")


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $ANYAPI_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Inspect the broker and discovery configuration."""
        if action is None:
            click.echo(click.get_current_context().get_help())
            raise typer.Exit(0)

        if action not in ACTIONS:
            error(f"Unknown action: {action}")
            console.print(f"Valid actions: {', '.join(ACTIONS)}")
            raise typer.Exit(1)

        config_path = path.expanduser() if path else get_config_path()
        if not config_path.exists():
            error(f"Config file not found: {config_path}")
            raise typer.Exit(1)

        if action == "show":
            _show(config_path)
        else:
            _validate(config_path)


def _show(config_path: Path) -> None:
    console.print(f"[bold]Config file: {config_path}[/bold]\n")
    console.print(
        Syntax(config_path.read_text(), "toml", theme="monokai", line_numbers=True)
    )


def _validate(config_path: Path) -> None:
    try:
        loaded = load_config(config_path)
    except ValidationError as e:
        error("Configuration validation failed:")
        console.print()
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
        raise typer.Exit(1) from None
    except Exception as e:
        error(f"Error loading config: {e}")
        raise typer.Exit(1) from None

    success("Configuration is valid!")
    if loaded.resolve_secret_key() is None:
        warning("No broker secret key; set broker.secret_key or NANGO_SECRET_KEY")
    console.print()
    console.print(_summary(loaded))


def _summary(config: AnyApiConfig) -> Table:
    discovery = config.discovery
    table = create_table(
        "Configuration Summary", [("Setting", "cyan"), ("Value", "green")]
    )
    table.add_row("Broker", config.broker.host)
    table.add_row(
        "Secret key",
        "configured" if config.resolve_secret_key() else "[yellow]missing[/yellow]",
    )
    table.add_row("Default workspace", config.default_workspace_id)
    table.add_row("Known providers", ", ".join(config.known_providers) or "-")
    table.add_row("Schema paths", str(len(discovery.schema_paths)))
    table.add_row(
        "Probing",
        f"{discovery.probe_concurrency} concurrent, {discovery.probe_timeout}s timeout",
    )
    table.add_row(
        "Provider hints", "enabled" if discovery.provider_hints else "disabled"
    )
    return table
