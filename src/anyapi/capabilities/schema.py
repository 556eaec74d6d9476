"""API description retrieval and parsing (OpenAPI 3.x, Swagger 2.x)."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from anyapi.broker import ProxyClient, ProxyRequest, ProxyTransportError
from anyapi.capabilities.classifier import classify_endpoint
from anyapi.capabilities.types import Endpoint, HttpMethod, ParamSpec
from anyapi.config.models import DEFAULT_SCHEMA_PATHS

logger = logging.getLogger(__name__)

_SCHEMA_VERBS = ("get", "post", "put", "delete", "patch")


@dataclass(slots=True)
class FetchedSchema:
    """The first non-empty document found on a discovery path."""

    path: str
    document: Any


class SchemaFetcher:
    """Looks for a machine-readable API description on conventional paths."""

    def __init__(
        self,
        proxy: ProxyClient,
        *,
        paths: Sequence[str] = DEFAULT_SCHEMA_PATHS,
        timeout: float = 5.0,
    ) -> None:
        self._proxy = proxy
        self._paths = list(paths)
        self._timeout = timeout

    async def fetch(self, provider: str, connection_id: str) -> FetchedSchema | None:
        """Return the first usable document, or None when every path fails.

        Stops at the first hit; documents from several paths are never merged.
        """
        for path in self._paths:
            try:
                response = await self._proxy.proxy(
                    ProxyRequest(
                        method="GET",
                        endpoint=path,
                        connection_id=connection_id,
                        provider_config_key=provider,
                        timeout=self._timeout,
                    )
                )
            except ProxyTransportError as e:
                logger.debug(f"Schema path {path} unavailable for {provider}: {e}")
                continue
            except Exception:
                logger.warning(
                    "schema_fetch_failed",
                    exc_info=True,
                    extra={"integration.provider": provider, "schema.path": path},
                )
                continue

            if response.status >= 400:
                logger.debug(
                    f"Schema path {path} returned {response.status} for {provider}"
                )
                continue
            if _is_empty(response.data):
                logger.debug(f"Schema path {path} returned an empty body for {provider}")
                continue

            logger.debug(
                "schema_fetched",
                extra={"integration.provider": provider, "schema.path": path},
            )
            return FetchedSchema(path=path, document=response.data)

        return None


def parse_schema(document: Any) -> list[Endpoint]:
    """Convert an OpenAPI 3.x or Swagger 2.x document into endpoints.

    Unrecognized documents yield an empty list.
    """
    if isinstance(document, str | bytes):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return []
    if not isinstance(document, dict):
        return []

    paths = document.get("paths")
    if not isinstance(paths, dict):
        return []

    if document.get("openapi"):
        dialect = "openapi"
    elif document.get("swagger"):
        dialect = "swagger"
    else:
        return []

    endpoints: list[Endpoint] = []
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        shared_params = path_item.get("parameters") or []
        for verb, operation in path_item.items():
            if verb.lower() not in _SCHEMA_VERBS or not isinstance(operation, dict):
                continue
            summary = _text(operation.get("summary"))
            description = _text(operation.get("description"))
            raw_params = _merge_parameters(
                shared_params, operation.get("parameters") or [], document
            )
            endpoints.append(
                Endpoint(
                    method=HttpMethod(verb.upper()),
                    path=str(path),
                    category=classify_endpoint(str(path), summary, description),
                    description=summary or description,
                    parameters=tuple(
                        spec
                        for raw in raw_params
                        if (spec := _param_spec(raw, dialect)) is not None
                    ),
                    source="schema",
                )
            )
    return endpoints


def _merge_parameters(
    shared: list[Any],
    own: list[Any],
    document: dict[str, Any],
) -> list[dict[str, Any]]:
    """Operation parameters, plus path-level ones the operation does not override."""
    resolved_own = [p for p in (_resolve_ref(raw, document) for raw in own) if p]
    overridden = {(p.get("name"), p.get("in")) for p in resolved_own}
    merged = list(resolved_own)
    for raw in shared:
        param = _resolve_ref(raw, document)
        if param and (param.get("name"), param.get("in")) not in overridden:
            merged.append(param)
    return merged


def _resolve_ref(raw: Any, document: dict[str, Any]) -> dict[str, Any] | None:
    if not isinstance(raw, dict):
        return None
    ref = raw.get("$ref")
    if ref is None:
        return raw
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    node: Any = document
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, dict) else None


def _param_spec(raw: dict[str, Any], dialect: str) -> ParamSpec | None:
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        return None
    location = raw.get("in")
    if dialect == "swagger" and location == "body":
        param_type = "object"
    elif dialect == "swagger":
        param_type = raw.get("type") or "string"
    else:
        schema = raw.get("schema")
        param_type = (schema.get("type") if isinstance(schema, dict) else None) or "string"
    return ParamSpec(
        name=name,
        type=str(param_type),
        description=_text(raw.get("description")),
        required=bool(raw.get("required", False)),
        location=location if isinstance(location, str) else None,
    )


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_empty(data: Any) -> bool:
    if data is None:
        return True
    if isinstance(data, str | bytes | dict | list):
        return len(data) == 0
    return False
