"""Connection broker call shapes.

The broker owns OAuth tokens; everything here only describes how the engine
talks to its authenticated proxy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class ProxyTransportError(Exception):
    """The proxy call itself could not complete (broker unreachable, I/O failure)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class ProxyTimeoutError(ProxyTransportError):
    """The proxy call exceeded its per-call timeout."""


@dataclass(slots=True)
class ProxyRequest:
    """One authenticated call routed through the broker."""

    method: str
    endpoint: str
    connection_id: str
    provider_config_key: str
    params: dict[str, Any] | None = None
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


@dataclass(slots=True)
class ProxyResponse:
    """Upstream status and decoded body, as relayed by the broker."""

    status: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ProxyClient(Protocol):
    """Interface for connection broker backends."""

    async def proxy(self, request: ProxyRequest) -> ProxyResponse:
        """Perform the call and return the upstream status faithfully.

        HTTP error statuses (including 405) are returned, never raised.
        Raises ProxyTransportError when the call cannot complete.
        """

    async def get_connection(
        self,
        provider_config_key: str,
        connection_id: str,
    ) -> dict[str, Any] | None:
        """Return the broker's connection record, or None if it does not exist."""
