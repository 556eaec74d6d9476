"""Human-readable rendering of proxied responses and discovery results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from anyapi.capabilities.types import Capabilities

MAX_LISTED_ITEMS = 10
MAX_FALLBACK_KEYS = 3
MAX_SAMPLE_ENDPOINTS = 5

IMPORTANT_KEYS = (
    "id",
    "name",
    "title",
    "subject",
    "message",
    "text",
    "email",
    "date",
    "created",
    "updated",
)


@dataclass(frozen=True, slots=True)
class EmptyResult:
    pass


@dataclass(frozen=True, slots=True)
class ScalarResult:
    value: Any


@dataclass(frozen=True, slots=True)
class ObjectResult:
    value: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ArrayResult:
    items: list[Any]


ResponseShape = EmptyResult | ScalarResult | ObjectResult | ArrayResult


def classify_response(data: Any) -> ResponseShape:
    if isinstance(data, bytes | bytearray):
        data = bytes(data).decode("utf-8", errors="replace")
    if data is None or (isinstance(data, str) and not data):
        return EmptyResult()
    if isinstance(data, list | tuple):
        return ArrayResult(list(data))
    if isinstance(data, dict):
        return ObjectResult(data)
    return ScalarResult(data)


def _render_value(value: Any) -> str:
    if isinstance(value, dict):
        return "[Object]"
    if isinstance(value, list | tuple):
        return "[Array]"
    return str(value)


def summarize_object(value: Any) -> str:
    """One-line summary favouring well-known identifying keys."""
    if not isinstance(value, dict):
        return _render_value(value)

    summary = [
        f"{key}: {_render_value(value[key])}"
        for key in IMPORTANT_KEYS
        if value.get(key)
    ]
    if not summary:
        summary = [
            f"{key}: {_render_value(item)}"
            for key, item in list(value.items())[:MAX_FALLBACK_KEYS]
        ]
    return ", ".join(summary)


def format_response(data: Any) -> str:
    match classify_response(data):
        case EmptyResult():
            return "No data returned"
        case ArrayResult(items=items):
            lines = [
                f"{index}. {summarize_object(item)}"
                for index, item in enumerate(items[:MAX_LISTED_ITEMS], start=1)
            ]
            return f"Found {len(items)} items:\n\n" + "\n".join(lines)
        case ObjectResult(value=value):
            return f"Response:\n{summarize_object(value)}"
        case ScalarResult(value=value):
            return f"Response: {value}"
    return "No data returned"


def describe_capabilities(capabilities: Capabilities) -> str:
    """Summary of a discovery run suitable for returning to an agent."""
    lines = [
        f"Discovered Capabilities for {capabilities.provider}:",
        "",
        f"Endpoints Found: {len(capabilities.endpoints)}",
        f"Tools Generated: {len(capabilities.tools)}",
    ]
    if capabilities.schema_path:
        lines.append(f"Schema: {capabilities.schema_path}")

    lines += ["", "Categories:"]
    lines += [f"• {category.value}" for category in capabilities.categories]

    lines += ["", "Available Tools:"]
    lines += [f"• {tool.name}: {tool.description}" for tool in capabilities.tools]

    lines += ["", "Sample Endpoints:"]
    lines += [
        f"• {endpoint.method.value} {endpoint.path} ({endpoint.category.value})"
        for endpoint in capabilities.endpoints[:MAX_SAMPLE_ENDPOINTS]
    ]

    if capabilities.limitations:
        lines += ["", "Limitations:"]
        lines += [f"• {limitation}" for limitation in capabilities.limitations]

    if not capabilities.endpoints:
        lines += ["", "No endpoints could be discovered for this connection."]

    lines += ["", "Use 'universal_request' to call any endpoint directly."]
    return "\n".join(lines)
