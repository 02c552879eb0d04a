"""Tests for settings-driven provider registration."""

import logging
from datetime import date

import pytest

from waypoint.config.settings import ModelSettings, ProviderSettings, Settings
from waypoint.llm.providers import ProviderRegistry
from waypoint.llm.providers.loader import load_providers, parse_knowledge_cutoff, register_models


def connector(provider, model):
    def call(prompt):
        return f"{model.name}: {prompt}"

    return call


def gemini(**kwargs):
    models = [
        ModelSettings(name="gemini-2.5-pro", knowledge_cutoff="2025-01-31", input_price=1.25, output_price=10.0),
        ModelSettings(name="gemini-2.5-flash", knowledge_cutoff="2025-01-31", input_price=0.3, output_price=2.5),
    ]
    kwargs.setdefault("models", models)
    return ProviderSettings(name="gemini", **kwargs)


def test_parse_knowledge_cutoff():
    assert parse_knowledge_cutoff(None) is None
    assert parse_knowledge_cutoff("") is None
    assert parse_knowledge_cutoff("2024-06-01") == date(2024, 6, 1)
    assert parse_knowledge_cutoff(date(2024, 6, 1)) == date(2024, 6, 1)
    with pytest.raises(ValueError):
        parse_knowledge_cutoff("June 2024")


def test_register_models_builds_bindings(caplog):
    registry = ProviderRegistry()
    with caplog.at_level(logging.INFO, logger="waypoint.llm.providers.loader"):
        names = register_models(registry, gemini(), connector)

    assert names == ["gemini-2.5-pro", "gemini-2.5-flash"]
    pro = registry.provider_by_name("gemini-2.5-pro")
    assert pro.provider == "gemini"
    assert pro.knowledge_cutoff == date(2025, 1, 31)
    assert pro.pricing.usd_per_1m_output_tokens == 10.0
    assert pro.model("hi") == "gemini-2.5-pro: hi"
    assert "gemini connection: SUCCESS!" in caplog.text


def test_inactive_profile_skips_provider(caplog):
    registry = ProviderRegistry()
    with caplog.at_level(logging.INFO, logger="waypoint.llm.providers.loader"):
        names = register_models(registry, gemini(profile="gemini"), connector, profiles={"openai"})

    assert names == []
    assert len(registry) == 0
    assert "profile is not active" in caplog.text


def test_active_profile_registers():
    registry = ProviderRegistry()
    names = register_models(registry, gemini(profile="gemini"), connector, profiles={"gemini"})
    assert len(names) == 2


def test_no_models_warns(caplog):
    registry = ProviderRegistry()
    with caplog.at_level(logging.WARNING, logger="waypoint.llm.providers.loader"):
        assert register_models(registry, gemini(models=[]), connector) == []
    assert "No gemini models configured" in caplog.text


def test_failing_model_is_isolated(caplog):
    """One failing connector call does not block the other models."""
    def flaky(provider, model):
        if model.name == "gemini-2.5-pro":
            raise ConnectionError("quota exceeded")
        return connector(provider, model)

    registry = ProviderRegistry()
    with caplog.at_level(logging.ERROR, logger="waypoint.llm.providers.loader"):
        names = register_models(registry, gemini(), flaky)

    assert names == ["gemini-2.5-flash"]
    assert "quota exceeded" in caplog.text


def test_bad_knowledge_cutoff_is_isolated():
    provider = gemini(
        models=[
            ModelSettings(name="bad", knowledge_cutoff="last spring"),
            ModelSettings(name="good", knowledge_cutoff="2024-10-01"),
        ]
    )
    registry = ProviderRegistry()
    assert register_models(registry, provider, connector) == ["good"]


def test_all_models_failing_logs_failure(caplog):
    def broken(provider, model):
        raise RuntimeError("no credentials")

    registry = ProviderRegistry()
    with caplog.at_level(logging.ERROR, logger="waypoint.llm.providers.loader"):
        assert register_models(registry, gemini(), broken) == []
    assert "gemini connection: FAILURE!" in caplog.text


def test_duplicate_across_providers_keeps_first():
    registry = ProviderRegistry()
    register_models(registry, gemini(), connector)
    mirror = ProviderSettings(
        name="vertex",
        vendor="gemini",
        models=[ModelSettings(name="gemini-2.5-pro"), ModelSettings(name="gemini-2.0")],
    )
    assert register_models(registry, mirror, connector) == ["gemini-2.0"]
    assert registry.provider_by_name("gemini-2.5-pro").provider == "gemini"


def test_load_providers_skips_unknown_vendor(monkeypatch, caplog):
    monkeypatch.delenv("WAYPOINT_PROFILES", raising=False)
    settings = Settings(
        profiles=["gemini"],
        providers=[
            gemini(profile="gemini"),
            ProviderSettings(name="mystery", models=[ModelSettings(name="m-1")]),
        ],
    )
    registry = ProviderRegistry()
    with caplog.at_level(logging.ERROR, logger="waypoint.llm.providers.loader"):
        names = load_providers(registry, settings, {"gemini": connector})

    assert names == ["gemini-2.5-pro", "gemini-2.5-flash"]
    assert "mystery" in caplog.text


def test_load_providers_profiles_from_environment(monkeypatch):
    monkeypatch.setenv("WAYPOINT_PROFILES", "gemini, other")
    settings = Settings(providers=[gemini(profile="gemini")])
    registry = ProviderRegistry()
    assert len(load_providers(registry, settings, {"gemini": connector})) == 2
