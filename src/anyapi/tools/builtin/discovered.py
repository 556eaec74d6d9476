"""Agent tools generated from discovered capabilities."""

import logging
from typing import TYPE_CHECKING, Any

from anyapi.capabilities.types import Capabilities, CapabilityTool
from anyapi.tools.base import Tool, ToolContext, ToolResult
from anyapi.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from anyapi.capabilities.engine import CapabilityEngine

logger = logging.getLogger(__name__)


class DiscoveredTool(Tool):
    """Wraps one synthesized capability tool of a provider.

    Registered as ``<provider>_<tool name>`` so tools of different providers
    can live in the same registry. Calls go through the engine, which uses
    the tool's first endpoint.
    """

    def __init__(
        self,
        engine: "CapabilityEngine",
        capabilities: Capabilities,
        tool: CapabilityTool,
    ):
        self._engine = engine
        self._provider = capabilities.provider
        self._workspace_id = capabilities.workspace_id
        self._tool = tool

    @property
    def name(self) -> str:
        return f"{self._provider}_{self._tool.name}"

    @property
    def description(self) -> str:
        return f"{self._tool.description} ({self._provider})"

    @property
    def input_schema(self) -> dict[str, Any]:
        return self._tool.input_schema

    @property
    def provider(self) -> str:
        return self._provider

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        workspace_id = context.resolve_workspace(input_data) or self._workspace_id
        result = await self._engine.call_tool(
            self._provider, workspace_id, self._tool.name, input_data
        )
        if result.is_error:
            return ToolResult.error(result.text, **result.metadata)
        return ToolResult.success(result.text, **result.metadata)


def register_discovered_tools(
    registry: ToolRegistry,
    engine: "CapabilityEngine",
    capabilities: Capabilities,
) -> list[str]:
    """Register one tool per synthesized capability tool.

    Tools previously discovered for the same provider are replaced; other
    tools in the registry are left alone.
    """
    for name in registry.names:
        existing = registry.get(name)
        if (
            isinstance(existing, DiscoveredTool)
            and existing.provider == capabilities.provider
        ):
            registry.unregister(name)

    names: list[str] = []
    for capability_tool in capabilities.tools:
        tool = DiscoveredTool(engine, capabilities, capability_tool)
        registry.replace(tool)
        names.append(tool.name)
    logger.debug(f"Registered {len(names)} discovered tools for {capabilities.provider}")
    return names
