#!/usr/bin/env python3
"""
Example usage of ContextOptimizer package.
"""

import logging

from context_optimizer import ContextOptimizer
from context_optimizer.config.settings import get_default_config
from context_optimizer.utils.message_formatter import MessageFormatter


def keyword_overlap(item, query):
    """Score an item by how many query words it contains."""
    words = set(query.lower().split())
    return 10 + 20 * sum(1 for word in words if word in item.content.lower())


def main():
    """Demonstrate ContextOptimizer functionality."""
    logging.basicConfig(level=logging.INFO)

    print("=== ContextOptimizer Example ===\n")

    config = get_default_config()
    config.context_window = 4400
    optimizer = ContextOptimizer(config)

    optimizer.add("system", "You are a helpful AI assistant specialized in weather analysis.",
                  priority="required")
    optimizer.add("tools", [
        {"name": "get_current_conditions", "description": "Current weather for a location"},
        {"name": "get_forecast", "description": "Multi-day forecast for a location"},
    ], priority="high", requires={"tools_get_forecast": "examples_forecast_demo"})
    optimizer.add("examples", [
        {"name": "forecast_demo", "content": "Q: Weather tomorrow? A: Calls get_forecast(days=1)."},
    ], priority="low")
    optimizer.add("rag", [
        "Recent data shows a low pressure system moving in from the west.",
        "Seasonal averages for San Francisco in autumn are mild and dry.",
        "An unrelated article about stock markets.",
    ], priority="medium", scorer=keyword_overlap)
    optimizer.add("history", [
        {"role": "user", "content": "How warm was it last week?"},
        {"role": "assistant", "content": "Highs were around 21C."},
    ], priority="high", keep_last=1)

    result = optimizer.pack("What will the weather be tomorrow in San Francisco?")

    print("1. Packed items")
    print("-" * 30)
    for item in result.items:
        print(f"  [{item.placement.value:9}] {item.id:32} {item.tokens:5} tokens  score={float(item.score):g}")
    print()

    print("2. Stats")
    print("-" * 30)
    print(f"  Total tokens: {result.stats.total_tokens} / {result.stats.budget}")
    print(f"  Utilization: {result.stats.utilization:.1%}")
    if result.stats.estimated_cost:
        print(f"  Estimated cost: {result.stats.estimated_cost.input} ({result.stats.estimated_cost.provider})")
    print()

    print("3. Dropped and warnings")
    print("-" * 30)
    for dropped in result.dropped:
        print(f"  dropped {dropped.id}: {dropped.reason}")
    for warning in result.warnings:
        print(f"  {warning.type}: {warning.message}")
    print()

    print("4. OpenAI messages")
    print("-" * 30)
    for message in MessageFormatter().to_openai_messages(result):
        print(f"  {message['role']}: {message['content'][:60]}")


if __name__ == "__main__":
    main()
