"""Capability discovery public API.

The engine itself lives in ``anyapi.capabilities.engine``; it depends on
``anyapi.invocation``, which in turn uses the types exported here.

Types:
- Capabilities
- CapabilityTool
- Endpoint
- ParamSpec
- Category
- HttpMethod
"""

from anyapi.capabilities.cache import CapabilityCache
from anyapi.capabilities.classifier import classify, classify_endpoint
from anyapi.capabilities.discovery import DiscoveryOutcome, DiscoveryStrategy
from anyapi.capabilities.prober import PROBE_TABLE, PROVIDER_HINTS, EndpointProber
from anyapi.capabilities.resolver import ActionResolver
from anyapi.capabilities.schema import SchemaFetcher, parse_schema
from anyapi.capabilities.synthesis import synthesize_tools
from anyapi.capabilities.types import (
    Capabilities,
    CapabilityTool,
    Category,
    Endpoint,
    HttpMethod,
    ParamSpec,
)

__all__ = [
    "PROBE_TABLE",
    "PROVIDER_HINTS",
    "ActionResolver",
    "Capabilities",
    "CapabilityCache",
    "CapabilityTool",
    "Category",
    "DiscoveryOutcome",
    "DiscoveryStrategy",
    "Endpoint",
    "EndpointProber",
    "HttpMethod",
    "ParamSpec",
    "SchemaFetcher",
    "classify",
    "classify_endpoint",
    "parse_schema",
    "synthesize_tools",
]
