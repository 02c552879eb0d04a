"""Settings file loading.

The settings file is YAML. Every section is optional:

    default_model: gpt-4.1-mini
    profiles: [openai]
    run:
      concurrency_limit: 4
      tool_permissions: [web]
      verbosity: {show_prompts: true}
    providers:
      - name: gemini
        profile: gemini
        models:
          - name: gemini-2.5-pro
            knowledge_cutoff: 2025-01-31
            input_price: 1.25     # USD per 1M input tokens
            output_price: 10.0    # USD per 1M output tokens
            capabilities: [reasoning]

Model entries are kept close to the file. Converting them to provider
bindings (date parsing included) happens per model in
``waypoint.llm.providers.loader`` so one bad entry cannot sink the rest.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from waypoint.config.defaults import (
    CONFIG_ENV_VAR,
    DEFAULT_MODEL_ENV_VAR,
    PROFILES_ENV_VAR,
)

logger = logging.getLogger(__name__)


@dataclass
class ModelSettings:
    """One model entry under a provider."""
    name: str
    knowledge_cutoff: Any = None
    input_price: float = 0.0
    output_price: float = 0.0
    capabilities: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ModelSettings":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class ProviderSettings:
    """A provider section: which vendor connector to use and its models."""
    name: str
    vendor: str = ""
    profile: Optional[str] = None
    models: list[ModelSettings] = field(default_factory=list)

    def __post_init__(self):
        if not self.vendor:
            self.vendor = self.name

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderSettings":
        models = [ModelSettings.from_dict(m) for m in data.get("models") or []]
        return cls(
            name=data["name"],
            vendor=data.get("vendor", ""),
            profile=data.get("profile"),
            models=models,
        )


@dataclass
class Settings:
    """Top-level settings."""
    default_model: Optional[str] = None
    profiles: list[str] = field(default_factory=list)
    run: dict[str, Any] = field(default_factory=dict)
    providers: list[ProviderSettings] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        return cls(
            default_model=data.get("default_model"),
            profiles=list(data.get("profiles") or []),
            run=dict(data.get("run") or {}),
            providers=[ProviderSettings.from_dict(p) for p in data.get("providers") or []],
        )


def active_profiles(settings: Optional[Settings] = None) -> set[str]:
    """Profiles enabled by the settings file plus ``WAYPOINT_PROFILES``.

    The environment variable is a comma-separated list.
    """
    profiles = set(settings.profiles) if settings else set()
    for profile in os.environ.get(PROFILES_ENV_VAR, "").split(","):
        profile = profile.strip()
        if profile:
            profiles.add(profile)
    return profiles


def load_settings(path: Optional[Path | str] = None) -> Settings:
    """Load settings from ``path`` or from the file named by ``WAYPOINT_CONFIG``.

    A ``.env`` file found from the working directory is loaded first, so
    either variable can live there.
    An explicit path that does not exist raises FileNotFoundError; a missing
    file named only by the environment is logged and ignored.
    """
    load_dotenv(find_dotenv(usecwd=True))

    explicit = path is not None
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else None
    else:
        path = Path(path)

    settings = Settings()
    if path is not None:
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Settings file {path} must contain a mapping")
            settings = Settings.from_dict(data)
            logger.info(f"Loaded settings from {path} ({len(settings.providers)} providers)")
        elif explicit:
            raise FileNotFoundError(f"Settings file not found: {path}")
        else:
            logger.warning(f"{CONFIG_ENV_VAR} points at missing file {path}, using defaults")

    env_default = os.environ.get(DEFAULT_MODEL_ENV_VAR)
    if env_default:
        settings.default_model = env_default
    return settings
