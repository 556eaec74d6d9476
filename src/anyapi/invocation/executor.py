"""Single proxied call for a resolved endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any

from anyapi.broker import ProxyClient, ProxyRequest, ProxyResponse
from anyapi.capabilities.types import Endpoint, HttpMethod
from anyapi.invocation.payloads import shape_payload

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Performs exactly one proxy call per execution.

    No retries and no compensation: the call either returns a response
    (any status) or raises ProxyTransportError, which is left to propagate.
    """

    def __init__(self, proxy: ProxyClient, *, timeout: float | None = None) -> None:
        self._proxy = proxy
        self._timeout = timeout

    async def execute(
        self,
        endpoint: Endpoint,
        data: dict[str, Any] | None,
        provider: str,
        connection_id: str,
    ) -> ProxyResponse:
        payload = dict(data or {})
        if endpoint.method == HttpMethod.GET:
            params, body = payload or None, None
        else:
            params, body = None, shape_payload(endpoint, payload)
        return await self.send(
            method=endpoint.method.value,
            path=endpoint.path,
            provider=provider,
            connection_id=connection_id,
            params=params,
            data=body,
        )

    async def send(
        self,
        *,
        method: str,
        path: str,
        provider: str,
        connection_id: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> ProxyResponse:
        start_time = time.monotonic()
        response = await self._proxy.proxy(
            ProxyRequest(
                method=method.upper(),
                endpoint=path,
                connection_id=connection_id,
                provider_config_key=provider,
                params=params,
                data=data,
                timeout=self._timeout,
            )
        )
        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(
            "proxy_call",
            extra={
                "integration.provider": provider,
                "http.method": method.upper(),
                "url.path": path,
                "http.status_code": response.status,
                "duration_ms": duration_ms,
            },
        )
        return response
