"""Greedy knapsack packer."""

from typing import List, Sequence, Tuple
import logging

from .types import ContextItem, ExcludedItem, PackDecision

logger = logging.getLogger(__name__)

BUDGET_EXHAUSTED = "budget exhausted"


def admission_order_key(item: ContextItem) -> Tuple[int, float, int, int]:
    """Sort key: score descending, then fewer tokens, then original index."""
    rank, value = item.score.sort_key()
    return (-rank, -value, item.tokens, item.index)


def greedy_pack(items: Sequence[ContextItem], budget: int) -> PackDecision:
    """
    Pack items into a token budget.

    1. Include all required items unconditionally (even past the budget).
    2. Sort the remaining items by score descending.
    3. Greedily add items while they fit.
    4. Record the rest as excluded.

    Args:
        items: Scored items
        budget: Maximum total tokens

    Returns:
        PackDecision with included items in admission order
    """
    required: List[ContextItem] = []
    optional: List[ContextItem] = []

    for item in items:
        if item.is_required:
            required.append(item)
        else:
            optional.append(item)

    total_tokens = 0
    included: List[ContextItem] = []
    excluded: List[ExcludedItem] = []

    for item in required:
        total_tokens += item.tokens
        included.append(item)

    if total_tokens > budget:
        logger.warning(
            "Required items use %d tokens, exceeding the %d token budget",
            total_tokens, budget
        )

    for item in sorted(optional, key=admission_order_key):
        if total_tokens + item.tokens <= budget:
            total_tokens += item.tokens
            included.append(item)
        else:
            excluded.append(ExcludedItem.from_item(item, BUDGET_EXHAUSTED))

    logger.debug(
        "Packed %d items (%d tokens), excluded %d",
        len(included), total_tokens, len(excluded)
    )
    return PackDecision(included=included, excluded=excluded, total_tokens=total_tokens)
