"""Connection broker access (authenticated proxy calls)."""

from anyapi.broker.nango import NangoProxyClient
from anyapi.broker.types import (
    ProxyClient,
    ProxyRequest,
    ProxyResponse,
    ProxyTimeoutError,
    ProxyTransportError,
)

__all__ = [
    "NangoProxyClient",
    "ProxyClient",
    "ProxyRequest",
    "ProxyResponse",
    "ProxyTimeoutError",
    "ProxyTransportError",
]
