"""Capability discovery public types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Literal


class HttpMethod(StrEnum):
    """HTTP verbs the engine discovers and calls."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class Category(StrEnum):
    """Semantic category assigned to an endpoint."""

    MESSAGING = "messaging"
    MESSAGING_ACTION = "messaging_action"
    SOCIAL = "social"
    SOCIAL_ACTION = "social_action"
    CONTACTS = "contacts"
    PROFILE = "profile"
    SEARCH = "search"
    SEARCH_PARAM = "search_param"
    CALENDAR = "calendar"
    CALENDAR_ACTION = "calendar_action"
    FILES = "files"
    FILE_ORGANIZATION = "file_organization"
    GENERAL = "general"

    @property
    def words(self) -> str:
        """Category name as plain words ("file_organization" -> "file organization")."""
        return self.value.replace("_", " ")


EndpointSource = Literal["schema", "probe"]


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One input parameter of an endpoint."""

    name: str
    type: str = "string"
    description: str | None = None
    required: bool = False
    location: str | None = None


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A discovered (method, path) pair.

    `responsive` is True only when a live probe call answered with a
    status below 400.
    """

    method: HttpMethod
    path: str
    category: Category
    description: str | None = None
    parameters: tuple[ParamSpec, ...] = ()
    responsive: bool = False
    source: EndpointSource = "schema"
    # Top-level keys of the probe response, for diagnostics only
    sample_response: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "method": self.method.value,
            "path": self.path,
            "category": self.category.value,
            "responsive": self.responsive,
            "source": self.source,
        }
        if self.description:
            data["description"] = self.description
        if self.parameters:
            data["parameters"] = [
                {
                    "name": p.name,
                    "type": p.type,
                    "description": p.description,
                    "required": p.required,
                }
                for p in self.parameters
            ]
        if self.sample_response:
            data["sample_response"] = list(self.sample_response)
        return data


@dataclass(slots=True)
class CapabilityTool:
    """A named, schema-described operation synthesized from endpoints.

    All endpoints share (category, method). The first endpoint defines the
    input schema and is the one called.
    """

    name: str
    description: str
    category: Category
    method: HttpMethod
    action: str
    endpoints: list[Endpoint] = field(default_factory=list)
    input_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def primary_endpoint(self) -> Endpoint:
        return self.endpoints[0]

    def to_definition(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


@dataclass(slots=True)
class Capabilities:
    """Discovered endpoints and tools for one (provider, workspace) pair."""

    provider: str
    workspace_id: str
    connection_id: str
    discovered_at: datetime
    endpoints: list[Endpoint] = field(default_factory=list)
    tools: list[CapabilityTool] = field(default_factory=list)
    # Discovery path that produced a usable schema, None when probed
    schema_path: str | None = None
    limitations: list[str] = field(default_factory=list)

    @property
    def actions(self) -> list[str]:
        return [tool.action for tool in self.tools]

    @property
    def categories(self) -> list[Category]:
        seen: list[Category] = []
        for endpoint in self.endpoints:
            if endpoint.category not in seen:
                seen.append(endpoint.category)
        return seen

    def find_tool(self, name: str) -> CapabilityTool | None:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "workspace_id": self.workspace_id,
            "connection_id": self.connection_id,
            "discovered_at": self.discovered_at.isoformat().replace("+00:00", "Z"),
            "schema_path": self.schema_path,
            "endpoints": [endpoint.to_dict() for endpoint in self.endpoints],
            "tools": [
                {**tool.to_definition(), "action": tool.action}
                for tool in self.tools
            ],
            "limitations": list(self.limitations),
        }
