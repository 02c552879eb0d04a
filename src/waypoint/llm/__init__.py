"""LLM provider bindings, pricing and model selection."""

from waypoint.llm.pricing import PerTokenPricingModel, calculate_cost
from waypoint.llm.providers import (
    ConnectionStatus,
    ModelResponse,
    ProviderBinding,
    ProviderRegistry,
)
from waypoint.llm.select import (
    ByCapability,
    ByName,
    DefaultModel,
    ModelSelector,
    SelectionCriterion,
    by_capability,
    by_name,
    default_model,
)

__all__ = [
    "PerTokenPricingModel",
    "calculate_cost",
    "ConnectionStatus",
    "ModelResponse",
    "ProviderBinding",
    "ProviderRegistry",
    "ByCapability",
    "ByName",
    "DefaultModel",
    "ModelSelector",
    "SelectionCriterion",
    "by_capability",
    "by_name",
    "default_model",
]
