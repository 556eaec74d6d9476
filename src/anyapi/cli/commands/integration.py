"""Discovery and invocation commands."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from anyapi.broker import ProxyTransportError
from anyapi.capabilities.engine import (
    CapabilityEngine,
    CapabilityError,
    InvokeResult,
    create_capability_engine,
)
from anyapi.cli.console import (
    console,
    create_table,
    dim,
    error,
    parse_json_option,
    plain,
    success,
)
from anyapi.config import (
    AnyApiConfig,
    ConfigError,
    get_default_config,
    load_config,
)
from anyapi.invocation.formatting import describe_capabilities

logger = logging.getLogger(__name__)

T = TypeVar("T")

WorkspaceOption = Annotated[
    str | None,
    typer.Option(
        "--workspace",
        "-w",
        help="Workspace ID (default from config)",
    ),
]


def register(root: typer.Typer) -> None:
    """Register the integration commands."""
    root.command("discover")(discover)
    root.command("call")(call)
    root.command("request")(request)
    root.command("services")(services)


def load_cli_config(path: Path | None) -> AnyApiConfig:
    """Load config from an explicit path, the default locations, or defaults."""
    if path is not None:
        return load_config(path.expanduser())
    try:
        return load_config()
    except FileNotFoundError:
        return get_default_config()


def _config_path(ctx: typer.Context) -> Path | None:
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return obj.get("config_path")


def _run_with_engine(
    ctx: typer.Context,
    operation: Callable[[CapabilityEngine], Awaitable[T]],
) -> T:
    """Build an engine, run one operation, and map failures to exit code 1."""
    try:
        config = load_cli_config(_config_path(ctx))
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except (ConfigError, ValueError) as e:
        error(f"Error loading config: {e}")
        raise typer.Exit(1) from None

    async def _run() -> T:
        engine = create_capability_engine(config)
        try:
            return await operation(engine)
        finally:
            await engine.aclose()

    try:
        return asyncio.run(_run())
    except ProxyTransportError as e:
        error(f"Connection broker request failed: {e}")
        raise typer.Exit(1) from None
    except CapabilityError as e:
        error(f"{e} ({e.code})")
        raise typer.Exit(1) from None


def _print_result(result: InvokeResult) -> None:
    if result.is_error:
        error("Request did not succeed:")
        plain(result.text)
        raise typer.Exit(1)
    plain(result.text)


def discover(
    ctx: typer.Context,
    provider: Annotated[str, typer.Argument(help="Provider config key (e.g. slack)")],
    workspace: WorkspaceOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the discovery record as JSON"),
    ] = False,
) -> None:
    """Discover the capabilities of a connected service."""
    capabilities = _run_with_engine(
        ctx, lambda engine: engine.discover_capabilities(provider, workspace)
    )

    if as_json:
        typer.echo(json.dumps(capabilities.to_dict(), indent=2))
        return

    plain(describe_capabilities(capabilities))
    if capabilities.tools:
        console.print()
        table = create_table(
            "Tools",
            [("Name", "cyan"), ("Action", "green"), ("Endpoint", "white")],
        )
        for tool in capabilities.tools:
            endpoint = tool.primary_endpoint
            table.add_row(
                tool.name, tool.action, f"{endpoint.method.value} {endpoint.path}"
            )
        console.print(table)


def call(
    ctx: typer.Context,
    provider: Annotated[str, typer.Argument(help="Provider config key (e.g. slack)")],
    action: Annotated[
        str, typer.Argument(help="Action in plain words (e.g. 'send message')")
    ],
    workspace: WorkspaceOption = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Action data as a JSON object"),
    ] = None,
) -> None:
    """Perform a free-text action on a connected service."""
    payload = parse_json_option(data, "--data") or {}
    result = _run_with_engine(
        ctx, lambda engine: engine.invoke(provider, workspace, action, payload)
    )
    _print_result(result)
    tool = result.metadata.get("tool")
    if tool:
        dim(f"via {tool}")


def request(
    ctx: typer.Context,
    provider: Annotated[str, typer.Argument(help="Provider config key (e.g. slack)")],
    method: Annotated[str, typer.Argument(help="HTTP method")],
    endpoint: Annotated[str, typer.Argument(help="Endpoint path (e.g. /v2/me)")],
    workspace: WorkspaceOption = None,
    params: Annotated[
        str | None,
        typer.Option("--params", help="Query parameters as a JSON object"),
    ] = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Request body as a JSON object"),
    ] = None,
) -> None:
    """Send a raw request to any endpoint of a connected service."""
    query = parse_json_option(params, "--params")
    body: Any = parse_json_option(data, "--data")
    result = _run_with_engine(
        ctx,
        lambda engine: engine.request(
            provider, workspace, method, endpoint, params=query, data=body
        ),
    )
    _print_result(result)


def services(
    ctx: typer.Context,
    workspace: WorkspaceOption = None,
) -> None:
    """List which known services are connected."""
    statuses = _run_with_engine(
        ctx, lambda engine: engine.list_connected_services(workspace)
    )

    table = create_table(
        "Services",
        [("Service", "cyan"), ("Status", "white"), ("Connection", "dim")],
    )
    for status in statuses:
        table.add_row(
            status.name,
            "[green]connected[/green]" if status.connected else "[dim]not connected[/dim]",
            status.connection_id,
        )
    console.print(table)

    connected = sum(1 for status in statuses if status.connected)
    if connected:
        success(f"{connected} of {len(statuses)} services connected")
    else:
        dim("No services connected")
