"""Capability engine facade.

Owns one capability cache and one proxy client, and wires discovery,
synthesis, action resolution, execution, formatting and advice together.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from anyapi.broker import NangoProxyClient, ProxyClient, ProxyResponse
from anyapi.capabilities.cache import CapabilityCache
from anyapi.capabilities.discovery import DiscoveryOutcome, DiscoveryStrategy
from anyapi.capabilities.resolver import ActionResolver
from anyapi.capabilities.synthesis import synthesize_tools
from anyapi.capabilities.types import Capabilities, CapabilityTool, HttpMethod
from anyapi.config.models import AnyApiConfig
from anyapi.connections import connection_id_for
from anyapi.invocation.advisor import ApiFailure, advise, extract_error_message
from anyapi.invocation.executor import RequestExecutor
from anyapi.invocation.formatting import format_response

logger = logging.getLogger(__name__)

# Argument keys that address the engine rather than the remote API
_ROUTING_KEYS = frozenset({"workspaceId", "workspace_id", "provider"})


class CapabilityError(ValueError):
    """Capability operation error with stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class InvokeResult:
    """Text answer for an agent plus diagnostic metadata."""

    text: str
    is_error: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ServiceStatus:
    name: str
    connected: bool
    connection_id: str


class CapabilityEngine:
    """Async facade for capability discovery and invocation."""

    def __init__(
        self,
        proxy: ProxyClient,
        config: AnyApiConfig | None = None,
        *,
        cache: CapabilityCache | None = None,
        strategy: DiscoveryStrategy | None = None,
        resolver: ActionResolver | None = None,
        executor: RequestExecutor | None = None,
    ) -> None:
        self._proxy = proxy
        self._config = config or AnyApiConfig()
        self._cache = cache if cache is not None else CapabilityCache()
        self._strategy = strategy or DiscoveryStrategy(proxy, self._config.discovery)
        self._resolver = resolver or ActionResolver()
        self._executor = executor or RequestExecutor(proxy)

    @property
    def cache(self) -> CapabilityCache:
        return self._cache

    @property
    def config(self) -> AnyApiConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the proxy client when it holds resources."""
        close = getattr(self._proxy, "aclose", None)
        if close is not None:
            await close()

    async def discover_capabilities(
        self,
        provider: str,
        workspace_id: str | None = None,
    ) -> Capabilities:
        """Return capabilities for a provider connection, discovering on a miss.

        Discovery failures never raise: an empty endpoint list is a valid
        (cached) result.
        """
        provider_key = _required_provider(provider)
        workspace = self._workspace(workspace_id)

        cached = self._cache.get(provider_key, workspace)
        if cached is not None:
            logger.debug(f"Capability cache hit for {provider_key}_{workspace}")
            return cached

        connection_id = connection_id_for(workspace)
        try:
            outcome = await self._strategy.resolve_detailed(provider_key, connection_id)
        except Exception:
            logger.exception(
                "capability_discovery_failed",
                extra={"integration.provider": provider_key},
            )
            outcome = DiscoveryOutcome()

        capabilities = Capabilities(
            provider=provider_key,
            workspace_id=workspace,
            connection_id=connection_id,
            discovered_at=datetime.now(UTC),
            endpoints=list(outcome.endpoints),
            tools=synthesize_tools(outcome.endpoints),
            schema_path=outcome.schema_path,
            limitations=list(outcome.limitations),
        )
        self._cache.set(provider_key, workspace, capabilities)

        logger.info(
            "capabilities_discovered",
            extra={
                "integration.provider": provider_key,
                "workspace.id": workspace,
                "capability.endpoint_count": len(capabilities.endpoints),
                "capability.tool_count": len(capabilities.tools),
                "capability.source": "schema" if outcome.schema_path else "probe",
            },
        )
        return capabilities

    async def invoke(
        self,
        provider: str,
        workspace_id: str | None,
        action: str,
        data: dict[str, Any] | None = None,
    ) -> InvokeResult:
        """Route a free-text action to a discovered tool and call it."""
        provider_key = _required_provider(provider)
        action_text = _required_text(
            value=action,
            code="capability_invalid_input",
            message="action is required",
        )
        capabilities = await self.discover_capabilities(provider_key, workspace_id)

        tool = self._resolver.resolve(action_text, capabilities.tools)
        if tool is None:
            logger.info(
                "action_unresolved",
                extra={"integration.provider": provider_key, "action": action_text},
            )
            return _unresolved(provider_key, action_text, capabilities)

        return await self._call(
            capabilities, tool, _without_routing_keys(data), action=action_text
        )

    async def call_tool(
        self,
        provider: str,
        workspace_id: str | None,
        tool_name: str,
        arguments: dict[str, Any] | None = None,
    ) -> InvokeResult:
        """Call a synthesized tool by name using its first endpoint."""
        provider_key = _required_provider(provider)
        name = _required_text(
            value=tool_name,
            code="capability_invalid_input",
            message="tool name is required",
        )
        capabilities = await self.discover_capabilities(provider_key, workspace_id)

        tool = capabilities.find_tool(name)
        if tool is None:
            return InvokeResult(
                text=(
                    f"Tool {name} not found for {provider_key}. "
                    "Run discover_capabilities first."
                ),
                is_error=True,
                metadata={"provider": provider_key, "tool": name},
            )

        return await self._call(capabilities, tool, _without_routing_keys(arguments))

    async def request(
        self,
        provider: str,
        workspace_id: str | None,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> InvokeResult:
        """Raw proxied call to any endpoint of a connected provider."""
        provider_key = _required_provider(provider)
        verb = _required_method(method)
        path = _required_text(
            value=endpoint,
            code="capability_invalid_input",
            message="endpoint is required",
        )
        if not path.startswith("/"):
            path = f"/{path}"
        workspace = self._workspace(workspace_id)

        response = await self._executor.send(
            method=verb,
            path=path,
            provider=provider_key,
            connection_id=connection_id_for(workspace),
            params=params,
            data=data,
        )
        return _render(response, method=verb, path=path, provider=provider_key)

    async def list_connected_services(
        self,
        workspace_id: str | None = None,
    ) -> list[ServiceStatus]:
        """Check which known providers have a broker connection."""
        connection_id = connection_id_for(self._workspace(workspace_id))
        providers = self._config.known_providers
        connections = await asyncio.gather(
            *(
                self._proxy.get_connection(provider, connection_id)
                for provider in providers
            )
        )
        return [
            ServiceStatus(
                name=provider,
                connected=connection is not None,
                connection_id=connection_id,
            )
            for provider, connection in zip(providers, connections, strict=True)
        ]

    async def _call(
        self,
        capabilities: Capabilities,
        tool: CapabilityTool,
        data: dict[str, Any] | None,
        *,
        action: str | None = None,
    ) -> InvokeResult:
        endpoint = tool.primary_endpoint
        response = await self._executor.execute(
            endpoint,
            data,
            capabilities.provider,
            capabilities.connection_id,
        )
        result = _render(
            response,
            method=endpoint.method.value,
            path=endpoint.path,
            provider=capabilities.provider,
            action=action,
        )
        result.metadata["tool"] = tool.name
        logger.info(
            "tool_invoked" if not result.is_error else "invoke_api_error",
            extra={
                "integration.provider": capabilities.provider,
                "tool.name": tool.name,
                "http.status_code": response.status,
            },
        )
        return result

    def _workspace(self, workspace_id: str | None) -> str:
        return _optional_text(workspace_id) or self._config.default_workspace_id


def _render(
    response: ProxyResponse,
    *,
    method: str,
    path: str,
    provider: str,
    action: str | None = None,
) -> InvokeResult:
    metadata: dict[str, Any] = {
        "provider": provider,
        "method": method,
        "endpoint": path,
        "status": response.status,
    }
    if response.ok:
        return InvokeResult(text=format_response(response.data), metadata=metadata)

    advisory = advise(
        ApiFailure(
            status=response.status,
            message=extract_error_message(response.data, response.status),
            method=method,
            endpoint=path,
            provider=provider,
            action=action,
        )
    )
    metadata["advisory"] = advisory.kind
    return InvokeResult(text=advisory.text, is_error=advisory.is_error, metadata=metadata)


def _unresolved(provider: str, action: str, capabilities: Capabilities) -> InvokeResult:
    if capabilities.tools:
        available = "\n".join(f"• {phrase}" for phrase in capabilities.actions)
        text = (
            f"Could not map action '{action}' to a {provider} capability.\n\n"
            f"Available actions:\n{available}"
        )
    else:
        text = (
            f"No capabilities were discovered for {provider}, so action "
            f"'{action}' cannot be performed. Check that the service is connected."
        )
    return InvokeResult(
        text=text,
        is_error=True,
        metadata={"provider": provider, "available_actions": capabilities.actions},
    )


def _without_routing_keys(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if data is None:
        return None
    return {key: value for key, value in data.items() if key not in _ROUTING_KEYS}


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_text(*, value: str | None, code: str, message: str) -> str:
    text = _optional_text(value)
    if text is None:
        raise CapabilityError(code, message)
    return text


def _required_provider(value: str | None) -> str:
    return _required_text(
        value=value,
        code="capability_invalid_input",
        message="provider is required",
    ).lower()


def _required_method(value: str | None) -> str:
    method = _required_text(
        value=value,
        code="capability_invalid_input",
        message="method is required",
    ).upper()
    if method not in HttpMethod.__members__:
        raise CapabilityError(
            "capability_invalid_input",
            f"unsupported method: {method}",
        )
    return method


def create_capability_engine(
    config: AnyApiConfig | None = None,
    *,
    proxy: ProxyClient | None = None,
) -> CapabilityEngine:
    """Create an engine backed by the configured broker."""
    config = config or AnyApiConfig()
    if proxy is None:
        proxy = NangoProxyClient.from_config(config.broker)
    return CapabilityEngine(proxy, config)
