"""Configuration module."""

from anyapi.config.loader import get_default_config, load_config
from anyapi.config.models import (
    AnyApiConfig,
    BrokerConfig,
    ConfigError,
    DiscoveryConfig,
)
from anyapi.config.paths import get_anyapi_home, get_config_path

__all__ = [
    "AnyApiConfig",
    "BrokerConfig",
    "ConfigError",
    "DiscoveryConfig",
    "get_anyapi_home",
    "get_config_path",
    "get_default_config",
    "load_config",
]
