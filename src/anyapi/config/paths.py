"""Centralized path management for anyapi.

Configuration lives under a single base directory, overridable with the
ANYAPI_HOME environment variable.

Default location: ~/.anyapi
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "ANYAPI_HOME"


@lru_cache(maxsize=1)
def get_anyapi_home() -> Path:
    """Get the base directory for anyapi data.

    Resolution order:
    1. ANYAPI_HOME environment variable (if set)
    2. ~/.anyapi

    Returns:
        Path to the anyapi home directory.
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".anyapi"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_anyapi_home() / "config.toml"
