"""Turn failed API calls into actionable advice for the caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

AdvisoryKind = Literal["not_found", "auth", "bad_request", "generic"]

_MESSAGE_KEYS = ("message", "error_description", "error")
_MAX_MESSAGE_LENGTH = 500


@dataclass(frozen=True, slots=True)
class ApiFailure:
    status: int | None
    message: str
    method: str
    endpoint: str
    provider: str
    action: str | None = None


@dataclass(frozen=True, slots=True)
class Advisory:
    kind: AdvisoryKind
    text: str
    status: int | None
    is_error: bool = True


def extract_error_message(data: Any, status: int | None) -> str:
    """Best-effort error text from a response body."""
    if isinstance(data, dict):
        for key in _MESSAGE_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
            # Some APIs nest {"error": {"message": ...}}
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if isinstance(data, str) and data.strip():
        return data.strip()[:_MAX_MESSAGE_LENGTH]
    return f"HTTP {status}" if status is not None else "Unknown error"


def _suggestions(failure: ApiFailure) -> tuple[AdvisoryKind, list[str]]:
    match failure.status:
        case 404:
            return "not_found", [
                "Run discover_capabilities again to see the available endpoints",
                "The endpoint path might have changed",
                f"Try common variations like /api/v1{failure.endpoint} "
                f"or /v2{failure.endpoint}",
            ]
        case 401 | 403:
            return "auth", [
                "Check if the OAuth connection is still valid",
                "This endpoint might require additional scopes or permissions",
                "Try reconnecting the service to re-authenticate",
            ]
        case 400:
            return "bad_request", [
                "Check the request parameters",
                "Some required fields might be missing",
                "Try again with minimal parameters first",
            ]
        case _:
            return "generic", []


def advise(failure: ApiFailure) -> Advisory:
    kind, suggestions = _suggestions(failure)
    status_text = failure.status if failure.status is not None else "Unknown"

    lines = [f"API Error ({status_text}): {failure.message}"]
    if failure.action:
        lines.append(f"Action: {failure.action}")
    if suggestions:
        lines += ["", "Suggestions:"]
        lines += [f"• {suggestion}" for suggestion in suggestions]
    lines += [
        "",
        "Request Details:",
        f"• Method: {failure.method}",
        f"• Endpoint: {failure.endpoint}",
        f"• Provider: {failure.provider}",
        "",
        "Try 'discover_capabilities' to explore what's available.",
    ]
    return Advisory(kind=kind, text="\n".join(lines), status=failure.status)
