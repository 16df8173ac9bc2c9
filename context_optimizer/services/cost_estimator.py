"""Input cost estimation from a per-model pricing table."""

from typing import Dict, Optional
from dataclasses import dataclass

from ..config.settings import PricingConfig


@dataclass
class CostEstimate:
    """Estimated input cost of a packed context."""
    input: str
    provider: str


# USD per 1M input tokens. Verify against current provider pricing.
PRICING: Dict[str, PricingConfig] = {
    # Anthropic
    'claude-opus-4-20250514': PricingConfig(15, 'anthropic'),
    'claude-sonnet-4-20250514': PricingConfig(3, 'anthropic'),
    'claude-sonnet-4-5-20250514': PricingConfig(3, 'anthropic'),
    'claude-haiku-3-5-20241022': PricingConfig(0.8, 'anthropic'),
    # OpenAI
    'gpt-4o': PricingConfig(2.5, 'openai'),
    'gpt-4o-mini': PricingConfig(0.15, 'openai'),
    'gpt-4-turbo': PricingConfig(10, 'openai'),
    'o1': PricingConfig(15, 'openai'),
    'o1-mini': PricingConfig(3, 'openai'),
    'o3': PricingConfig(10, 'openai'),
    'o3-mini': PricingConfig(1.1, 'openai'),
    # Google
    'gemini-2.0-flash': PricingConfig(0.1, 'google'),
    'gemini-2.0-pro': PricingConfig(1.25, 'google'),
    'gemini-1.5-pro': PricingConfig(3.5, 'google'),
    'gemini-1.5-flash': PricingConfig(0.075, 'google'),
}


def lookup_pricing(model: str) -> Optional[PricingConfig]:
    """Find pricing by exact model name, then by longest matching prefix."""
    if model in PRICING:
        return PRICING[model]

    matches = [key for key in PRICING if model.startswith(key)]
    if not matches:
        return None
    return PRICING[max(matches, key=len)]


def estimate_cost(tokens: int,
                  model: str,
                  pricing: Optional[PricingConfig] = None) -> Optional[CostEstimate]:
    """
    Estimate input cost for a token count.

    Args:
        tokens: Number of input tokens
        model: Model identifier
        pricing: Explicit pricing; takes precedence over the table

    Returns:
        CostEstimate, or None if the model is not priced
    """
    entry = pricing or lookup_pricing(model)
    if entry is None:
        return None

    cost = tokens / 1_000_000 * entry.input_per_1m
    return CostEstimate(input=f"${cost:.4f}", provider=entry.provider)
