"""Pytest configuration and shared fixtures for waypoint tests."""

import pytest

from waypoint.llm.pricing import PerTokenPricingModel
from waypoint.llm.providers import ModelResponse, ProviderBinding, ProviderRegistry


class EchoModel:
    """Model handle that echoes prompts back and counts calls."""

    def __init__(self, name: str, input_tokens: int = 100, output_tokens: int = 50):
        self.name = name
        self.calls = []
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens

    async def __call__(self, prompt: str, **kwargs) -> ModelResponse:
        self.calls.append(prompt)
        return ModelResponse(
            content=f"{self.name}: {prompt}",
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


def make_binding(name: str, **kwargs) -> ProviderBinding:
    kwargs.setdefault("model", EchoModel(name))
    kwargs.setdefault("provider", "test")
    return ProviderBinding(name=name, **kwargs)


@pytest.fixture
def binding_factory():
    return make_binding


@pytest.fixture
def registry():
    """Registry with two providers, 'x-small' registered first."""
    reg = ProviderRegistry()
    reg.register_provider(
        make_binding(
            "x-small",
            pricing=PerTokenPricingModel(0.5, 1.5),
            capabilities=frozenset({"fast"}),
        )
    )
    reg.register_provider(
        make_binding(
            "x-large",
            pricing=PerTokenPricingModel(3.0, 15.0),
            capabilities=frozenset({"reasoning", "tools"}),
        )
    )
    return reg
