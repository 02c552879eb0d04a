"""Tests for model selection."""

import logging
from datetime import date

import pytest

from waypoint.errors import NoMatchingProviderError, NoProvidersRegisteredError
from waypoint.llm.providers import ConnectionStatus, ProviderRegistry
from waypoint.llm.select import ByCapability, ModelSelector, by_capability, by_name, default_model


def test_by_name_exact(registry):
    selector = ModelSelector(registry)
    assert selector.select(by_name("x-small")).name == "x-small"
    assert selector.select(by_name("x-large")).name == "x-large"


def test_by_name_missing_lists_available(registry):
    selector = ModelSelector(registry)
    with pytest.raises(NoMatchingProviderError) as exc_info:
        selector.select(by_name("x-medium"))
    assert exc_info.value.available == ["x-small", "x-large"]
    assert "x-medium" in str(exc_info.value)


def test_default_model_uses_configured_default(registry):
    assert ModelSelector(registry, default_model="x-large").select(default_model()).name == "x-large"


def test_default_model_without_configuration_takes_first(registry):
    assert ModelSelector(registry).select(default_model()).name == "x-small"


def test_missing_configured_default_falls_back(registry, caplog):
    selector = ModelSelector(registry, default_model="x-huge")
    with caplog.at_level(logging.WARNING, logger="waypoint.llm.select"):
        binding = selector.select(default_model())
    assert binding.name == "x-small"
    assert "x-huge" in caplog.text


def test_by_capability_first_match_in_registration_order(registry, binding_factory):
    registry.register_provider(binding_factory("x-reasoner", capabilities={"reasoning"}))
    selector = ModelSelector(registry)

    assert selector.select(by_capability("reasoning")).name == "x-large"
    assert selector.select(by_capability("reasoning", "tools")).name == "x-large"
    assert selector.select(ByCapability("fast")).name == "x-small"
    assert [b.name for b in selector.candidates(by_capability("reasoning"))] == ["x-large", "x-reasoner"]


def test_by_capability_no_match(registry):
    with pytest.raises(NoMatchingProviderError):
        ModelSelector(registry).select(by_capability("vision"))


def test_by_capability_knowledge_cutoff(binding_factory):
    registry = ProviderRegistry()
    registry.register_provider(binding_factory("old", knowledge_cutoff=date(2023, 4, 1)))
    registry.register_provider(binding_factory("unknown"))
    registry.register_provider(binding_factory("new", knowledge_cutoff=date(2025, 1, 31)))
    selector = ModelSelector(registry)

    criterion = by_capability(knowledge_cutoff_after=date(2024, 6, 1))
    assert selector.select(criterion).name == "new"


def test_by_capability_predicate(registry):
    criterion = ByCapability(predicate=lambda b: b.pricing.usd_per_1m_output_tokens > 10)
    assert ModelSelector(registry).select(criterion).name == "x-large"


def test_empty_registry():
    selector = ModelSelector(ProviderRegistry())
    for criterion in (by_name("x"), by_capability("fast"), default_model()):
        with pytest.raises(NoProvidersRegisteredError):
            selector.select(criterion)
    assert not selector.available(default_model())


def test_disconnected_binding_is_ineligible(binding_factory):
    registry = ProviderRegistry()
    registry.register_provider(binding_factory("down", status=ConnectionStatus.UNAVAILABLE))
    registry.register_provider(binding_factory("up"))
    selector = ModelSelector(registry, default_model="down")

    with pytest.raises(NoMatchingProviderError, match="not connected"):
        selector.select(by_name("down"))
    assert selector.select(default_model()).name == "up"
    assert not selector.available(by_name("down"))
    assert selector.available(by_name("up"))


def test_selection_is_stable(registry):
    selector = ModelSelector(registry)
    picks = {selector.select(by_capability("tools")).name for _ in range(10)}
    assert picks == {"x-large"}
