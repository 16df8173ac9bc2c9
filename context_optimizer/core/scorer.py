"""Relevance scoring: priority tiers, recency decay and custom scorers."""

from typing import Callable, Dict, Iterable, List, Optional, Sequence
from dataclasses import dataclass, replace
import logging

from .types import ContextItem, Priority, Score

logger = logging.getLogger(__name__)

ItemScorer = Callable[[ContextItem, str], float]

PRIORITY_SCORES: Dict[Priority, float] = {
    Priority.HIGH: 100.0,
    Priority.MEDIUM: 50.0,
    Priority.LOW: 10.0,
}

DEFAULT_MIN_FACTOR = 0.1


@dataclass
class ScoringGroup:
    """Items from one source, in their original order, with scoring options."""
    items: Sequence[ContextItem]
    recency: bool = False
    scorer: Optional[ItemScorer] = None


def score_priority(priority: Priority) -> Score:
    """Map a priority tier to its base score."""
    if priority is Priority.REQUIRED:
        return Score.unconditional()
    return Score.ranked(PRIORITY_SCORES[priority])


def apply_recency_bias(items: Sequence[ContextItem],
                       min_factor: float = DEFAULT_MIN_FACTOR) -> List[ContextItem]:
    """
    Decay scores linearly across an ordered sequence.

    The oldest item is multiplied by ``min_factor`` and the newest keeps its
    score. Unconditional items are skipped but still count as positions.

    Args:
        items: Items in temporal order (oldest first)
        min_factor: Factor applied to the oldest item

    Returns:
        New list of items with decayed scores
    """
    total = len(items)
    if total <= 1:
        return list(items)

    decayed = []
    for i, item in enumerate(items):
        if item.score.is_unconditional:
            decayed.append(item)
            continue
        factor = min_factor + (1 - min_factor) * i / (total - 1)
        decayed.append(replace(item, score=item.score.scaled(factor)))
    return decayed


def apply_custom_scorer(items: Iterable[ContextItem],
                        scorer: ItemScorer,
                        query: Optional[str]) -> List[ContextItem]:
    """Replace ranked scores with ``scorer(item, query)`` when a query is given."""
    if not query:
        return list(items)

    rescored = []
    for item in items:
        if item.score.is_unconditional:
            rescored.append(item)
        else:
            rescored.append(replace(item, score=Score.ranked(scorer(item, query))))
    return rescored


def score_items(groups: Iterable[ScoringGroup],
                query: Optional[str] = None,
                min_factor: float = DEFAULT_MIN_FACTOR) -> List[ContextItem]:
    """
    Score every item of every group.

    Base score comes from the priority tier, then recency decay is applied
    to temporal groups, then the group's custom scorer (if any) overrides
    ranked scores.
    """
    scored: List[ContextItem] = []

    for group in groups:
        items = [replace(item, score=score_priority(item.priority)) for item in group.items]

        if group.recency:
            items = apply_recency_bias(items, min_factor)

        if group.scorer is not None:
            items = apply_custom_scorer(items, group.scorer, query)

        scored.extend(items)

    logger.debug("Scored %d items", len(scored))
    return scored
