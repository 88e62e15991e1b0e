"""Dashboard configuration management."""

import os
from functools import lru_cache
from pathlib import Path

from .schemas import DashboardConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'dashboard_config.json'

# Environment variable -> config field
ENV_OVERRIDES = {
    'CTFD_BASE_URL': 'base_url',
    'CTFD_PROXY_URL': 'proxy_url',
    'CTFD_TOKEN': 'auth_token',
    'CTFD_SESSION': 'session_cookie',
    'CTFD_AUTH_MODE': 'auth_mode',
}


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> DashboardConfig:
    """
    Load dashboard configuration from a JSON file.

    Values from the environment (see ``ENV_OVERRIDES``) replace the file's
    values, so credentials never need to live in the repository.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the merged settings are invalid
    """
    config = load_json(path, schema=DashboardConfig)

    overrides = {
        field: os.environ[env_key]
        for env_key, field in ENV_OVERRIDES.items()
        if os.environ.get(env_key)
    }
    if not overrides:
        return config

    return DashboardConfig.model_validate({**config.model_dump(), **overrides})


@lru_cache(maxsize=1)
def get_config() -> DashboardConfig:
    """
    Load data/dashboard_config.json once and cache it.

    Example:
        from ctfboard.config import get_config
        config = get_config()
        print(f"Polling {config.base_url} every {config.poll_interval}s")
    """
    return load_config(DEFAULT_CONFIG_PATH)


def clear_config_cache() -> None:
    """Clear the cached configuration so the next get_config() rereads it."""
    get_config.cache_clear()
