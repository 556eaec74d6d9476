"""Configuration models using Pydantic."""

from pydantic import BaseModel, Field, SecretStr, field_validator

DEFAULT_SCHEMA_PATHS = [
    "/api/v1/openapi.json",
    "/api/v2/swagger.json",
    "/.well-known/api-endpoints",
    "/api/capabilities",
    "/api/schema",
]

DEFAULT_KNOWN_PROVIDERS = ["linkedin", "slack", "github", "gmail", "shopify"]


class BrokerConfig(BaseModel):
    """Connection broker (Nango-compatible) settings."""

    host: str = "https://api.nango.dev"
    secret_key: SecretStr | None = None
    timeout: float = Field(default=30.0, gt=0)


class DiscoveryConfig(BaseModel):
    """Capability discovery settings.

    Schema paths are tried in order and the first non-empty document wins.
    Probing only runs when no schema yields endpoints.
    """

    schema_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_SCHEMA_PATHS))
    schema_timeout: float = Field(default=5.0, gt=0)
    probe_timeout: float = Field(default=3.0, gt=0)
    probe_concurrency: int = Field(default=8, ge=1)
    # Per-provider probe tables for well-known services
    provider_hints: bool = True

    @field_validator("schema_paths")
    @classmethod
    def _normalize_paths(cls, paths: list[str]) -> list[str]:
        normalized: list[str] = []
        for path in paths:
            path = path.strip()
            if not path:
                continue
            normalized.append(path if path.startswith("/") else f"/{path}")
        return normalized


class ConfigError(Exception):
    """Configuration error."""

    pass


class AnyApiConfig(BaseModel):
    """Root configuration model."""

    broker: BrokerConfig = Field(default_factory=BrokerConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    default_workspace_id: str = "1"
    # Providers checked by list_connected_services
    known_providers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_KNOWN_PROVIDERS)
    )

    @field_validator("known_providers")
    @classmethod
    def _normalize_providers(cls, providers: list[str]) -> list[str]:
        seen: list[str] = []
        for provider in providers:
            key = provider.strip().lower()
            if key and key not in seen:
                seen.append(key)
        return seen

    @field_validator("default_workspace_id")
    @classmethod
    def _require_workspace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("default_workspace_id must not be empty")
        return value

    def resolve_secret_key(self) -> str | None:
        """Return the broker secret as plain text, or None if unset."""
        if self.broker.secret_key is None:
            return None
        return self.broker.secret_key.get_secret_value()
