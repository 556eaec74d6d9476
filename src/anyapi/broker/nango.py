"""httpx client for a Nango-compatible connection broker."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from anyapi.broker.types import (
    ProxyRequest,
    ProxyResponse,
    ProxyTimeoutError,
    ProxyTransportError,
)

if TYPE_CHECKING:
    from anyapi.config.models import BrokerConfig

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.nango.dev"
DEFAULT_TIMEOUT = 30.0


class NangoProxyClient:
    """Routes calls through the broker's `/proxy` endpoint.

    The broker injects the OAuth credentials for the (connection, provider)
    pair, so callers only ever see upstream paths and payloads.
    """

    def __init__(
        self,
        *,
        secret_key: str | None,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._host = host.rstrip("/")
        self._timeout = timeout
        headers = {"Accept": "application/json"}
        if secret_key:
            headers["Authorization"] = f"Bearer {secret_key}"
        else:
            logger.warning("broker_secret_missing", extra={"broker.host": self._host})
        self._client = httpx.AsyncClient(
            base_url=self._host,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: BrokerConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> NangoProxyClient:
        secret = config.secret_key.get_secret_value() if config.secret_key else None
        return cls(
            secret_key=secret,
            host=config.host,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> NangoProxyClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def proxy(self, request: ProxyRequest) -> ProxyResponse:
        endpoint = _normalize_endpoint(request.endpoint)
        headers = {
            "Connection-Id": request.connection_id,
            "Provider-Config-Key": request.provider_config_key,
            **request.headers,
        }
        kwargs: dict[str, Any] = {
            "params": _query_params(request.params),
            "headers": headers,
            "timeout": request.timeout if request.timeout is not None else self._timeout,
        }
        if request.data is not None and request.method.upper() != "GET":
            kwargs["json"] = request.data

        logger.debug(
            f"Proxy {request.method.upper()} {endpoint} "
            f"({request.provider_config_key}/{request.connection_id})"
        )
        try:
            response = await self._client.request(
                request.method.upper(), f"/proxy{endpoint}", **kwargs
            )
        except httpx.TimeoutException as e:
            raise ProxyTimeoutError(
                f"Proxy call timed out: {request.method.upper()} {endpoint}",
                endpoint=endpoint,
            ) from e
        except httpx.HTTPError as e:
            raise ProxyTransportError(
                f"Proxy call failed: {request.method.upper()} {endpoint}: {e}",
                endpoint=endpoint,
            ) from e

        return ProxyResponse(
            status=response.status_code,
            data=_decode_body(response),
            headers=dict(response.headers),
        )

    async def get_connection(
        self,
        provider_config_key: str,
        connection_id: str,
    ) -> dict[str, Any] | None:
        try:
            response = await self._client.get(
                f"/connection/{connection_id}",
                params={"provider_config_key": provider_config_key},
            )
        except httpx.TimeoutException as e:
            raise ProxyTimeoutError(
                f"Connection lookup timed out: {provider_config_key}/{connection_id}"
            ) from e
        except httpx.HTTPError as e:
            raise ProxyTransportError(
                f"Connection lookup failed: {provider_config_key}/{connection_id}: {e}"
            ) from e

        if response.status_code >= 400:
            logger.debug(
                "connection_not_found",
                extra={
                    "broker.provider": provider_config_key,
                    "broker.connection_id": connection_id,
                    "http.status_code": response.status_code,
                },
            )
            return None

        record = _decode_body(response)
        return record if isinstance(record, dict) else {"connection_id": connection_id}


def _normalize_endpoint(endpoint: str) -> str:
    endpoint = endpoint.strip()
    if not endpoint.startswith("/"):
        endpoint = f"/{endpoint}"
    return endpoint


def _query_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop None values and flatten nested values httpx cannot encode."""
    if not params:
        return None
    flattened: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, dict | list) and not _is_scalar_list(value):
            flattened[key] = json.dumps(value)
        else:
            flattened[key] = value
    return flattened or None


def _is_scalar_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, str | int | float | bool) for item in value
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            # Malformed JSON or a body that is not valid UTF-8
            return response.text
    text = response.text
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
