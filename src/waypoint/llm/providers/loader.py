"""Materialize provider bindings from settings.

A connector is the boundary to a vendor SDK: given the provider name and one
model entry it returns a callable model handle, or raises. Each model is
registered independently; failures are logged and skipped.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from waypoint.config.settings import ModelSettings, ProviderSettings, Settings, active_profiles
from waypoint.llm.pricing import PerTokenPricingModel
from waypoint.llm.providers import ProviderBinding, ProviderRegistry

logger = logging.getLogger(__name__)

Connector = Callable[[str, ModelSettings], Any]


def parse_knowledge_cutoff(value: Any) -> Optional[date]:
    """Accept a date, a datetime or an ISO ``YYYY-MM-DD`` string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def binding_from_settings(provider: ProviderSettings, model: ModelSettings, connector: Connector) -> ProviderBinding:
    """Build one binding. Raises if the entry is invalid or the connector fails."""
    return ProviderBinding(
        name=model.name,
        model=connector(provider.name, model),
        provider=provider.name,
        pricing=PerTokenPricingModel(
            usd_per_1m_input_tokens=float(model.input_price),
            usd_per_1m_output_tokens=float(model.output_price),
        ),
        knowledge_cutoff=parse_knowledge_cutoff(model.knowledge_cutoff),
        capabilities=frozenset(model.capabilities),
    )


def register_models(
    registry: ProviderRegistry,
    provider: ProviderSettings,
    connector: Connector,
    *,
    profiles: Optional[Iterable[str]] = None,
) -> list[str]:
    """Register every model of one provider. Returns the names accepted."""
    if provider.profile and provider.profile not in set(profiles or ()):
        logger.info(
            f"{provider.name} models will not be registered as the "
            f"'{provider.profile}' profile is not active"
        )
        return []

    if not provider.models:
        logger.warning(f"No {provider.name} models configured.")
        return []

    logger.info(f"Registering {provider.name} models: {[m.name for m in provider.models]}")

    registered: list[str] = []
    for model in provider.models:
        try:
            binding = binding_from_settings(provider, model, connector)
        except Exception as e:
            logger.error(f"Failed to register {provider.name} model {model.name}: {e}")
            continue
        if registry.register_provider(binding):
            logger.debug(f"Successfully registered {provider.name} model {model.name}")
            registered.append(model.name)

    if registered:
        logger.info(f"{provider.name} connection: SUCCESS! {len(registered)} model(s) active and registered.")
    else:
        logger.error(f"{provider.name} connection: FAILURE! No models could be registered.")
    return registered


def load_providers(
    registry: ProviderRegistry,
    settings: Settings,
    connectors: Mapping[str, Connector],
) -> list[str]:
    """Register all configured providers, isolating failures per provider."""
    profiles = active_profiles(settings)
    registered: list[str] = []
    for provider in settings.providers:
        connector = connectors.get(provider.vendor)
        if connector is None:
            logger.error(
                f"No connector for vendor '{provider.vendor}'; skipping provider {provider.name}"
            )
            continue
        registered.extend(register_models(registry, provider, connector, profiles=profiles))
    return registered
