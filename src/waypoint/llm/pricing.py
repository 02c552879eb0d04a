"""Pricing descriptors for provider bindings.

Provides:
- PerTokenPricingModel: USD per million input/output tokens
- calculate_cost(): Compute cost from token counts
"""

from dataclasses import dataclass

from waypoint.config.defaults import TOKENS_PER_PRICING_UNIT


@dataclass(frozen=True)
class PerTokenPricingModel:
    """Cost per million input and output tokens, in USD."""
    usd_per_1m_input_tokens: float = 0.0
    usd_per_1m_output_tokens: float = 0.0

    def __post_init__(self):
        if self.usd_per_1m_input_tokens < 0 or self.usd_per_1m_output_tokens < 0:
            raise ValueError("Token prices cannot be negative")

    def cost_of(self, input_tokens: int, output_tokens: int) -> float:
        return calculate_cost(self, input_tokens, output_tokens)

    @property
    def is_free(self) -> bool:
        return self.usd_per_1m_input_tokens == 0.0 and self.usd_per_1m_output_tokens == 0.0


ALL_YOU_CAN_EAT = PerTokenPricingModel()


def calculate_cost(pricing: PerTokenPricingModel, input_tokens: int, output_tokens: int) -> float:
    """Compute total USD cost for a call."""
    return (input_tokens / TOKENS_PER_PRICING_UNIT) * pricing.usd_per_1m_input_tokens + \
           (output_tokens / TOKENS_PER_PRICING_UNIT) * pricing.usd_per_1m_output_tokens
