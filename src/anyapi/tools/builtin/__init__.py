"""Built-in tools.

Core tools are exported here:
- DiscoverCapabilitiesTool: Discover what a connected service can do
- CallServiceTool: Route a free-text action to a discovered capability
- UniversalRequestTool: Raw request to any endpoint
- ListConnectedServicesTool: Which known services are connected

Tools generated from discovery results live in
anyapi.tools.builtin.discovered.
"""

from anyapi.tools.builtin.discovered import DiscoveredTool, register_discovered_tools
from anyapi.tools.builtin.integration import (
    CallServiceTool,
    DiscoverCapabilitiesTool,
    ListConnectedServicesTool,
    UniversalRequestTool,
)

__all__ = [
    "CallServiceTool",
    "DiscoverCapabilitiesTool",
    "DiscoveredTool",
    "ListConnectedServicesTool",
    "UniversalRequestTool",
    "register_discovered_tools",
]
