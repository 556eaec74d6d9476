"""Shared test fixtures and factories."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from anyapi.broker import ProxyRequest, ProxyResponse
from anyapi.capabilities.engine import CapabilityEngine
from anyapi.capabilities.types import (
    CapabilityTool,
    Category,
    Endpoint,
    HttpMethod,
)
from anyapi.config.models import AnyApiConfig
from anyapi.tools.base import Tool, ToolContext, ToolResult

# =============================================================================
# Proxy Fakes
# =============================================================================

Scripted = ProxyResponse | Exception | Sequence[ProxyResponse | Exception]


class FakeProxy:
    """Recording proxy client with scripted responses.

    Responses are keyed by (METHOD, path). A list is consumed in order and
    its last element repeats. Unscripted calls answer 404.
    """

    def __init__(
        self,
        responses: dict[tuple[str, str], Scripted] | None = None,
        connections: dict[str, dict[str, Any]] | None = None,
        connection_error: Exception | None = None,
    ):
        self.responses: dict[tuple[str, str], Scripted] = dict(responses or {})
        self.connections = dict(connections or {})
        self.connection_error = connection_error
        self.calls: list[ProxyRequest] = []
        self.connection_calls: list[tuple[str, str]] = []
        self._cursor: dict[tuple[str, str], int] = {}

    def script(self, method: str, path: str, response: Scripted) -> None:
        self.responses[(method.upper(), path)] = response

    async def proxy(self, request: ProxyRequest) -> ProxyResponse:
        self.calls.append(request)
        key = (request.method.upper(), request.endpoint)
        scripted = self.responses.get(key)
        if scripted is None:
            return ProxyResponse(status=404, data={"message": "Not Found"})

        if isinstance(scripted, Sequence):
            position = self._cursor.get(key, 0)
            self._cursor[key] = position + 1
            scripted = scripted[min(position, len(scripted) - 1)]

        if isinstance(scripted, Exception):
            raise scripted
        return scripted

    async def get_connection(
        self,
        provider_config_key: str,
        connection_id: str,
    ) -> dict[str, Any] | None:
        self.connection_calls.append((provider_config_key, connection_id))
        if self.connection_error is not None:
            raise self.connection_error
        return self.connections.get(provider_config_key)

    def calls_to(self, method: str, path: str) -> list[ProxyRequest]:
        return [
            call
            for call in self.calls
            if call.method == method.upper() and call.endpoint == path
        ]


def ok(data: Any = None, status: int = 200) -> ProxyResponse:
    return ProxyResponse(status=status, data=data)


def fail(status: int, data: Any = None) -> ProxyResponse:
    return ProxyResponse(status=status, data=data)


@pytest.fixture
def fake_proxy() -> FakeProxy:
    """Proxy that answers 404 to everything until scripted."""
    return FakeProxy()


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def config() -> AnyApiConfig:
    """Default configuration."""
    return AnyApiConfig()


@pytest.fixture
def engine(fake_proxy: FakeProxy, config: AnyApiConfig) -> CapabilityEngine:
    """Engine wired to the fake proxy."""
    return CapabilityEngine(fake_proxy, config)


@pytest.fixture
def minimal_openapi() -> dict[str, Any]:
    """OpenAPI document with a single contacts listing."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Contacts API", "version": "1.0"},
        "paths": {
            "/contacts": {
                "get": {"summary": "List contacts"},
            }
        },
    }


# =============================================================================
# Capability Factories
# =============================================================================


def make_endpoint(
    method: str = "GET",
    path: str = "/contacts",
    category: Category = Category.CONTACTS,
    **kwargs: Any,
) -> Endpoint:
    return Endpoint(method=HttpMethod(method), path=path, category=category, **kwargs)


def make_tool(
    name: str,
    action: str,
    category: Category,
    method: str = "POST",
    path: str = "/things",
) -> CapabilityTool:
    endpoint = make_endpoint(method, path, category)
    return CapabilityTool(
        name=name,
        description=f"{name} tool",
        category=category,
        method=HttpMethod(method),
        action=action,
        endpoints=[endpoint],
    )


# =============================================================================
# Tool Fixtures
# =============================================================================


class MockTool(Tool):
    """Mock tool for testing."""

    def __init__(
        self,
        name: str = "mock_tool",
        description: str = "A mock tool for testing",
        result: ToolResult | None = None,
        raises: Exception | None = None,
    ):
        self._name = name
        self._description = description
        self._result = result or ToolResult.success("Mock tool executed")
        self._raises = raises
        self.execute_calls: list[tuple[dict[str, Any], ToolContext]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "arg": {"type": "string", "description": "An argument"},
            },
            "required": ["arg"],
        }

    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        self.execute_calls.append((input_data, context))
        if self._raises is not None:
            raise self._raises
        return self._result


@pytest.fixture
def mock_tool() -> MockTool:
    """Create a mock tool."""
    return MockTool()


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a small config file."""
    path = tmp_path / "config.toml"
    path.write_text(
        """
default_workspace_id = "7"
known_providers = ["slack", "GitHub"]

[broker]
host = "https://broker.example.test"
secret_key = "sk-test-secret"

[discovery]
probe_timeout = 1.5
provider_hints = false
"""
    )
    return path
