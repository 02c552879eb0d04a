"""Configuration for waypoint: defaults and the YAML settings file."""

from .defaults import (
    CONFIG_ENV_VAR,
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_MODEL_ENV_VAR,
    PROFILES_ENV_VAR,
)
from .settings import (
    ModelSettings,
    ProviderSettings,
    Settings,
    active_profiles,
    load_settings,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONCURRENCY_LIMIT",
    "DEFAULT_MODEL_ENV_VAR",
    "PROFILES_ENV_VAR",
    "ModelSettings",
    "ProviderSettings",
    "Settings",
    "active_profiles",
    "load_settings",
]
