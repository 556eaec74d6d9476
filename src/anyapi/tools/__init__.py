"""Tool system for agents working with connected services."""

from typing import TYPE_CHECKING

from anyapi.tools.base import Tool, ToolContext, ToolResult
from anyapi.tools.builtin import (
    CallServiceTool,
    DiscoverCapabilitiesTool,
    DiscoveredTool,
    ListConnectedServicesTool,
    UniversalRequestTool,
    register_discovered_tools,
)
from anyapi.tools.executor import ToolExecutor
from anyapi.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from anyapi.capabilities.engine import CapabilityEngine


def create_tool_registry(engine: "CapabilityEngine") -> ToolRegistry:
    """Create a registry holding the built-in integration tools.

    Tools synthesized by discover_capabilities are added to the same registry.
    """
    registry = ToolRegistry()
    registry.register(DiscoverCapabilitiesTool(engine, registry))
    registry.register(CallServiceTool(engine))
    registry.register(UniversalRequestTool(engine))
    registry.register(ListConnectedServicesTool(engine))
    return registry


__all__ = [
    "CallServiceTool",
    "DiscoverCapabilitiesTool",
    "DiscoveredTool",
    "ListConnectedServicesTool",
    "Tool",
    "ToolContext",
    "ToolExecutor",
    "ToolRegistry",
    "ToolResult",
    "UniversalRequestTool",
    "create_tool_registry",
    "register_discovered_tools",
]
