"""Model Selector.

Provides:
- ByName / ByCapability / DefaultModel: selection criteria
- ModelSelector: resolves a criterion against a ProviderRegistry

Selection policy:
- Only connected bindings are eligible.
- ByName matches exactly.
- ByCapability takes the first match in registration order.
- DefaultModel takes the configured default when it is registered and
  connected, otherwise the first eligible binding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Union

from waypoint.errors import NoMatchingProviderError, NoProvidersRegisteredError
from waypoint.llm.providers import ProviderBinding, ProviderRegistry

logger = logging.getLogger(__name__)


# =============================================================================
# Selection Criteria
# =============================================================================


@dataclass(frozen=True)
class ByName:
    name: str

    def matches(self, binding: ProviderBinding) -> bool:
        return binding.name == self.name

    def describe(self) -> str:
        return f"name '{self.name}'"


@dataclass(frozen=True)
class ByCapability:
    """Match bindings that have every listed capability.

    ``knowledge_cutoff_after`` requires a known cutoff on or after the date.
    ``predicate`` is an extra test for anything the fields don't cover.
    """
    capabilities: frozenset[str] = frozenset()
    knowledge_cutoff_after: Optional[date] = None
    predicate: Optional[Callable[[ProviderBinding], bool]] = field(default=None, compare=False)

    def __post_init__(self):
        if isinstance(self.capabilities, str):
            object.__setattr__(self, "capabilities", frozenset([self.capabilities]))
        elif not isinstance(self.capabilities, frozenset):
            object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    def matches(self, binding: ProviderBinding) -> bool:
        if not self.capabilities <= binding.capabilities:
            return False
        if self.knowledge_cutoff_after is not None:
            if binding.knowledge_cutoff is None or binding.knowledge_cutoff < self.knowledge_cutoff_after:
                return False
        if self.predicate is not None and not self.predicate(binding):
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.capabilities:
            parts.append(f"capabilities {sorted(self.capabilities)}")
        if self.knowledge_cutoff_after is not None:
            parts.append(f"knowledge cutoff >= {self.knowledge_cutoff_after.isoformat()}")
        if self.predicate is not None:
            parts.append("custom predicate")
        return " and ".join(parts) or "any capability"


@dataclass(frozen=True)
class DefaultModel:
    def matches(self, binding: ProviderBinding) -> bool:
        return True

    def describe(self) -> str:
        return "default model"


SelectionCriterion = Union[ByName, ByCapability, DefaultModel]


def by_name(name: str) -> ByName:
    return ByName(name)


def by_capability(*capabilities: str, knowledge_cutoff_after: Optional[date] = None) -> ByCapability:
    return ByCapability(frozenset(capabilities), knowledge_cutoff_after=knowledge_cutoff_after)


def default_model() -> DefaultModel:
    return DefaultModel()


# =============================================================================
# Selector
# =============================================================================


class ModelSelector:
    """Resolves selection criteria to exactly one binding, or fails."""

    def __init__(self, registry: ProviderRegistry, default_model: Optional[str] = None):
        self.registry = registry
        self.default_model = default_model

    def select(self, criterion: SelectionCriterion) -> ProviderBinding:
        bindings = self.registry.all_providers()
        if not bindings:
            logger.error(f"Cannot resolve {criterion.describe()}: no providers registered")
            raise NoProvidersRegisteredError(criterion.describe())

        available = [b.name for b in bindings]
        eligible = [b for b in bindings if b.is_connected]

        if isinstance(criterion, DefaultModel):
            binding = self._select_default(eligible)
        else:
            binding = next((b for b in eligible if criterion.matches(b)), None)

        if binding is None:
            reason = None
            if isinstance(criterion, ByName) and criterion.name in available:
                reason = f"'{criterion.name}' is not connected"
            logger.error(f"No provider matches {criterion.describe()}; available: {available}")
            raise NoMatchingProviderError(criterion.describe(), available, reason=reason)

        logger.debug(f"Selected {binding.name} for {criterion.describe()}")
        return binding

    def _select_default(self, eligible: list[ProviderBinding]) -> Optional[ProviderBinding]:
        if self.default_model:
            for binding in eligible:
                if binding.name == self.default_model:
                    return binding
            logger.warning(
                f"Configured default model '{self.default_model}' is not available; "
                f"falling back to first registered binding"
            )
        return eligible[0] if eligible else None

    def candidates(self, criterion: SelectionCriterion) -> list[ProviderBinding]:
        """All connected bindings matching the criterion, in registration order."""
        return [b for b in self.registry.all_providers() if b.is_connected and criterion.matches(b)]

    def available(self, criterion: SelectionCriterion) -> bool:
        """True if ``select`` would succeed."""
        return bool(self.candidates(criterion))
