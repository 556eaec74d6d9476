"""Single discovery strategy: published schema first, probing as fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from anyapi.broker import ProxyClient
from anyapi.capabilities.prober import (
    PROVIDER_HINTS,
    EndpointProber,
    build_probe_table,
)
from anyapi.capabilities.schema import SchemaFetcher, parse_schema
from anyapi.capabilities.types import Endpoint
from anyapi.config.models import DiscoveryConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiscoveryOutcome:
    endpoints: list[Endpoint] = field(default_factory=list)
    schema_path: str | None = None
    limitations: list[str] = field(default_factory=list)


class DiscoveryStrategy:
    """Resolves the endpoint surface of one provider connection."""

    def __init__(
        self,
        proxy: ProxyClient,
        config: DiscoveryConfig | None = None,
        *,
        fetcher: SchemaFetcher | None = None,
        prober: EndpointProber | None = None,
    ) -> None:
        self._config = config or DiscoveryConfig()
        self._fetcher = fetcher or SchemaFetcher(
            proxy,
            paths=self._config.schema_paths,
            timeout=self._config.schema_timeout,
        )
        self._prober = prober or EndpointProber(
            proxy,
            timeout=self._config.probe_timeout,
            concurrency=self._config.probe_concurrency,
        )

    async def resolve(self, provider: str, connection_id: str) -> list[Endpoint]:
        outcome = await self.resolve_detailed(provider, connection_id)
        return outcome.endpoints

    async def resolve_detailed(
        self,
        provider: str,
        connection_id: str,
    ) -> DiscoveryOutcome:
        """Discover endpoints; an empty outcome means nothing was found."""
        outcome = DiscoveryOutcome()

        fetched = await self._fetcher.fetch(provider, connection_id)
        if fetched is not None:
            endpoints = parse_schema(fetched.document)
            if endpoints:
                outcome.endpoints = endpoints
                outcome.schema_path = fetched.path
                return outcome
            logger.debug(
                f"Schema at {fetched.path} for {provider} had no usable endpoints"
            )

        probes = build_probe_table(provider, use_hints=self._config.provider_hints)
        report = await self._prober.probe_all(provider, connection_id, probes)
        outcome.endpoints = report.endpoints
        outcome.limitations = report.limitations

        if self._config.provider_hints and (hint := PROVIDER_HINTS.get(provider)):
            for limitation in hint.limitations:
                if limitation not in outcome.limitations:
                    outcome.limitations.append(limitation)

        return outcome
