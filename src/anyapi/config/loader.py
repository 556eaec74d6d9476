"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr

from anyapi.config.models import AnyApiConfig, ConfigError
from anyapi.config.paths import get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.anyapi/config.toml (or ANYAPI_HOME)
        Path("/etc/anyapi/config.toml"),  # System-wide
    ]


def _resolve_env(config: dict[str, Any]) -> dict[str, Any]:
    """Fill broker settings from the environment where the file leaves them unset."""
    broker = config.get("broker")
    if broker is None:
        broker = config["broker"] = {}

    if broker.get("secret_key") is None:
        if secret := os.environ.get("NANGO_SECRET_KEY"):
            broker["secret_key"] = SecretStr(secret)
    if broker.get("host") is None:
        if host := os.environ.get("NANGO_HOST"):
            broker["host"] = host

    return config


def load_config(path: Path | None = None) -> AnyApiConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated AnyApiConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If the file is not valid TOML.
        ValidationError: If values fail validation.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        raise FileNotFoundError(
            f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
        )

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return AnyApiConfig.model_validate(_resolve_env(raw_config))


def get_default_config() -> AnyApiConfig:
    """Get a default configuration, with broker settings from the environment."""
    return AnyApiConfig.model_validate(_resolve_env({}))
