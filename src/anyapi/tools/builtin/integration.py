"""Integration tools for connected third-party services."""

import logging
from typing import TYPE_CHECKING, Any

from anyapi.invocation.formatting import describe_capabilities
from anyapi.tools.base import Tool, ToolContext, ToolResult
from anyapi.tools.builtin.discovered import register_discovered_tools
from anyapi.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from anyapi.capabilities.engine import CapabilityEngine, InvokeResult

logger = logging.getLogger(__name__)

_PROVIDER_PROPERTY = {
    "type": "string",
    "description": "Provider config key of the service (e.g. 'slack', 'linkedin').",
}
_WORKSPACE_PROPERTY = {
    "type": "string",
    "description": "Workspace ID (defaults to the configured workspace).",
}


def _to_tool_result(result: "InvokeResult") -> ToolResult:
    if result.is_error:
        return ToolResult.error(result.text, **result.metadata)
    return ToolResult.success(result.text, **result.metadata)


def _missing_provider() -> ToolResult:
    return ToolResult.error("A provider is required (e.g. 'slack').")


class DiscoverCapabilitiesTool(Tool):
    """Discover what a connected service can do.

    Runs schema discovery (falling back to probing) once per provider and
    workspace; later calls are served from the engine's cache. When a
    registry is given, the synthesized tools are registered into it as
    <provider>_<tool> so the agent can call them directly.
    """

    def __init__(
        self,
        engine: "CapabilityEngine",
        registry: ToolRegistry | None = None,
    ):
        self._engine = engine
        self._registry = registry

    @property
    def name(self) -> str:
        return "discover_capabilities"

    @property
    def description(self) -> str:
        return (
            "Discover the API capabilities of a connected service. "
            "Returns the endpoints found, the tools generated from them and "
            "any known limitations. Run this before calling a service you "
            "have not used yet."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "provider": _PROVIDER_PROPERTY,
                "workspaceId": _WORKSPACE_PROPERTY,
            },
        }

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        provider = context.resolve_provider(input_data)
        if not provider:
            return _missing_provider()

        capabilities = await self._engine.discover_capabilities(
            provider, context.resolve_workspace(input_data)
        )
        content = describe_capabilities(capabilities)
        registered: list[str] = []
        if self._registry is not None:
            registered = register_discovered_tools(
                self._registry, self._engine, capabilities
            )
            if registered:
                content += "\n\nRegistered tools: " + ", ".join(registered)

        return ToolResult.success(
            content,
            provider=capabilities.provider,
            endpoint_count=len(capabilities.endpoints),
            tool_count=len(capabilities.tools),
            registered_tools=registered,
        )


class CallServiceTool(Tool):
    """Perform a free-text action on a connected service."""

    def __init__(self, engine: "CapabilityEngine"):
        self._engine = engine

    @property
    def name(self) -> str:
        return "call_service"

    @property
    def description(self) -> str:
        return (
            "Perform an action on a connected service, described in plain words "
            "(e.g. 'send message', 'create post', 'list contacts'). The action is "
            "matched against the service's discovered capabilities."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "provider": _PROVIDER_PROPERTY,
                "action": {
                    "type": "string",
                    "description": "Action to perform (e.g. 'send message to Jane').",
                },
                "data": {
                    "type": "object",
                    "description": "Data for the action.",
                },
                "workspaceId": _WORKSPACE_PROPERTY,
            },
            "required": ["action"],
        }

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        provider = context.resolve_provider(input_data)
        if not provider:
            return _missing_provider()
        action = str(input_data.get("action") or "").strip()
        if not action:
            return ToolResult.error("An action is required.")

        data = input_data.get("data") or {}
        if not isinstance(data, dict):
            return ToolResult.error("'data' must be an object.")

        result = await self._engine.invoke(
            provider, context.resolve_workspace(input_data), action, data
        )
        return _to_tool_result(result)


class UniversalRequestTool(Tool):
    """Send a raw request to any endpoint of a connected service."""

    def __init__(self, engine: "CapabilityEngine"):
        self._engine = engine

    @property
    def name(self) -> str:
        return "universal_request"

    @property
    def description(self) -> str:
        return (
            "Make an authenticated request to any endpoint of a connected "
            "service. Use discover_capabilities first to find endpoints."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "method": {
                    "type": "string",
                    "enum": ["GET", "POST", "PUT", "DELETE", "PATCH"],
                    "description": "HTTP method.",
                },
                "endpoint": {
                    "type": "string",
                    "description": "API endpoint path (e.g. /v2/me).",
                },
                "params": {
                    "type": "object",
                    "description": "Query parameters.",
                },
                "data": {
                    "type": "object",
                    "description": "Request body.",
                },
                "provider": _PROVIDER_PROPERTY,
                "workspaceId": _WORKSPACE_PROPERTY,
            },
            "required": ["method", "endpoint"],
        }

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        provider = context.resolve_provider(input_data)
        if not provider:
            return _missing_provider()

        result = await self._engine.request(
            provider,
            context.resolve_workspace(input_data),
            str(input_data.get("method") or ""),
            str(input_data.get("endpoint") or ""),
            params=input_data.get("params"),
            data=input_data.get("data"),
        )
        return _to_tool_result(result)


class ListConnectedServicesTool(Tool):
    """List which known services are connected for a workspace."""

    def __init__(self, engine: "CapabilityEngine"):
        self._engine = engine

    @property
    def name(self) -> str:
        return "list_connected_services"

    @property
    def description(self) -> str:
        return "List all connected services for a workspace."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"workspaceId": _WORKSPACE_PROPERTY},
        }

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        workspace_id = context.resolve_workspace(input_data)
        statuses = await self._engine.list_connected_services(workspace_id)
        connected = [status for status in statuses if status.connected]
        workspace = statuses[0].connection_id if statuses else workspace_id

        if not connected:
            return ToolResult.success(
                f"No services connected for {workspace}.",
                services=[],
            )

        lines = [f"Connected services for {workspace}:"]
        lines += [f"• {status.name}" for status in connected]
        return ToolResult.success(
            "\n".join(lines),
            services=[status.name for status in connected],
        )
