"""Tool synthesis: group endpoints by (category, method) into named tools."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from anyapi.capabilities.types import (
    CapabilityTool,
    Category,
    Endpoint,
    HttpMethod,
)

_NAME_VERBS: dict[HttpMethod, str] = {
    HttpMethod.GET: "get",
    HttpMethod.POST: "create",
    HttpMethod.PUT: "update",
    HttpMethod.DELETE: "delete",
}

_DESCRIPTION_VERBS: dict[HttpMethod, str] = {
    HttpMethod.GET: "Retrieve",
    HttpMethod.POST: "Create",
    HttpMethod.PUT: "Update",
    HttpMethod.DELETE: "Delete",
}

# Natural-language phrase per (category, method), matched by the action resolver.
ACTION_PHRASES: dict[tuple[Category, HttpMethod], str] = {
    (Category.MESSAGING, HttpMethod.GET): "list messages",
    (Category.MESSAGING, HttpMethod.POST): "send message",
    (Category.MESSAGING_ACTION, HttpMethod.POST): "send message",
    (Category.SOCIAL, HttpMethod.GET): "list posts",
    (Category.SOCIAL, HttpMethod.POST): "create post",
    (Category.SOCIAL_ACTION, HttpMethod.POST): "react to post",
    (Category.CONTACTS, HttpMethod.GET): "list contacts",
    (Category.CONTACTS, HttpMethod.POST): "add contact",
    (Category.PROFILE, HttpMethod.GET): "get profile",
    (Category.PROFILE, HttpMethod.PUT): "update profile",
    (Category.PROFILE, HttpMethod.PATCH): "update profile",
    (Category.SEARCH, HttpMethod.GET): "search",
    (Category.CALENDAR, HttpMethod.GET): "list events",
    (Category.CALENDAR, HttpMethod.POST): "create event",
    (Category.CALENDAR_ACTION, HttpMethod.POST): "send invite",
    (Category.FILES, HttpMethod.GET): "list files",
    (Category.FILES, HttpMethod.POST): "upload file",
    (Category.FILE_ORGANIZATION, HttpMethod.GET): "list folders",
    (Category.FILE_ORGANIZATION, HttpMethod.POST): "create folder",
}


def tool_name(endpoint: Endpoint) -> str:
    verb = _NAME_VERBS.get(endpoint.method, "manage")
    return f"{verb}_{endpoint.category.value}"


def tool_description(endpoint: Endpoint) -> str:
    if endpoint.description:
        return endpoint.description
    verb = _DESCRIPTION_VERBS.get(endpoint.method, "Manage")
    return f"{verb} {endpoint.category.words}"


def action_phrase(category: Category, method: HttpMethod) -> str:
    if phrase := ACTION_PHRASES.get((category, method)):
        return phrase
    return f"{_NAME_VERBS.get(method, 'manage')} {category.words}"


def input_schema(endpoint: Endpoint) -> dict[str, Any]:
    """JSON Schema for calling `endpoint`."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    if endpoint.method == HttpMethod.GET:
        properties["limit"] = {
            "type": "number",
            "description": "Maximum results",
            "default": 10,
        }
        properties["offset"] = {
            "type": "number",
            "description": "Skip results",
            "default": 0,
        }

    for param in endpoint.parameters:
        prop: dict[str, Any] = {"type": param.type or "string"}
        if param.description:
            prop["description"] = param.description
        properties[param.name] = prop
        if param.required and param.name not in required:
            required.append(param.name)

    properties["workspaceId"] = {
        "type": "string",
        "description": "Workspace ID (auto-detected if not provided)",
    }

    return {"type": "object", "properties": properties, "required": required}


def synthesize_tools(endpoints: Iterable[Endpoint]) -> list[CapabilityTool]:
    """Build one tool per (category, method) group, in first-seen order.

    Endpoints joining an existing group are appended to its tool; the schema
    always comes from the group's first endpoint.
    """
    tools: list[CapabilityTool] = []
    groups: dict[str, CapabilityTool] = {}

    for endpoint in endpoints:
        key = f"{endpoint.category.value}_{endpoint.method.value.lower()}"
        if (existing := groups.get(key)) is not None:
            existing.endpoints.append(endpoint)
            continue
        tool = CapabilityTool(
            name=tool_name(endpoint),
            description=tool_description(endpoint),
            category=endpoint.category,
            method=endpoint.method,
            action=action_phrase(endpoint.category, endpoint.method),
            endpoints=[endpoint],
            input_schema=input_schema(endpoint),
        )
        groups[key] = tool
        tools.append(tool)

    return tools
