"""Statistics and warnings about a packing decision."""

from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import math

from ..config.settings import PricingConfig, WarningThresholds
from ..core.types import ExcludedItem, PlacedItem
from .cost_estimator import CostEstimate, estimate_cost


@dataclass
class SourceStats:
    """Per-source tally."""
    tokens: int = 0
    items: int = 0
    dropped: int = 0
    reason: Optional[str] = None


@dataclass
class Stats:
    """Aggregate statistics for a packed context."""
    total_tokens: int
    budget: int
    utilization: float
    estimated_cost: Optional[CostEstimate] = None
    breakdown: Dict[str, SourceStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_tokens': self.total_tokens,
            'budget': self.budget,
            'utilization': self.utilization,
            'estimated_cost': (
                {'input': self.estimated_cost.input, 'provider': self.estimated_cost.provider}
                if self.estimated_cost else None
            ),
            'breakdown': {
                source: {
                    'tokens': entry.tokens,
                    'items': entry.items,
                    'dropped': entry.dropped,
                    'reason': entry.reason
                }
                for source, entry in self.breakdown.items()
            }
        }


@dataclass
class PackWarning:
    """An actionable alert about the packed context."""
    type: str
    message: str


def build_stats(placed: Sequence[PlacedItem],
                dropped: Sequence[ExcludedItem],
                budget: int,
                model: str,
                pricing: Optional[PricingConfig] = None) -> Stats:
    """Build a Stats object from packing decisions."""
    breakdown: Dict[str, SourceStats] = {}

    for item in placed:
        entry = breakdown.setdefault(item.source, SourceStats())
        entry.tokens += item.tokens
        entry.items += 1

    for item in dropped:
        entry = breakdown.setdefault(item.source, SourceStats())
        entry.dropped += 1
        if entry.reason is None:
            entry.reason = item.reason

    total_tokens = sum(item.tokens for item in placed)

    return Stats(
        total_tokens=total_tokens,
        budget=budget,
        utilization=total_tokens / budget if budget > 0 else 0.0,
        estimated_cost=estimate_cost(total_tokens, model, pricing),
        breakdown=breakdown
    )


def detect_warnings(placed: Sequence[PlacedItem],
                    dropped: Sequence[ExcludedItem],
                    budget: int,
                    thresholds: Optional[WarningThresholds] = None) -> List[PackWarning]:
    """Detect actionable warnings from packing decisions."""
    thresholds = thresholds or WarningThresholds()
    warnings: List[PackWarning] = []

    required_tokens = sum(item.tokens for item in placed if item.score.is_unconditional)
    if required_tokens > budget:
        warnings.append(PackWarning(
            type='budget-exceeded',
            message=(
                f"Required items alone use {required_tokens} tokens, exceeding the "
                f"{budget} token budget by {required_tokens - budget} tokens."
            )
        ))

    total_items = len(placed)
    if total_items >= thresholds.lost_in_middle_min_items:
        middle_start = math.floor(total_items * 0.3)
        middle_end = math.ceil(total_items * 0.7)
        high_in_middle = [
            item for item in placed[middle_start:middle_end]
            if not item.score.is_unconditional
            and float(item.score) >= thresholds.lost_in_middle_score
        ]
        if high_in_middle:
            warnings.append(PackWarning(
                type='lost-in-middle',
                message=(
                    f"{len(high_in_middle)} high-relevance item(s) placed in the middle 40% "
                    f"of context where LLM attention is weakest."
                )
            ))

    counts: Dict[str, int] = {}
    for item in placed:
        counts[item.source] = counts.get(item.source, 0) + 1
    for source, limit in thresholds.source_item_limits.items():
        count = counts.get(source, 0)
        if count > limit:
            if source == 'tools':
                warnings.append(PackWarning(
                    type='tool-overload',
                    message=(
                        f"{count} tool definitions included. Performance tends to degrade "
                        f"beyond {limit} tools; consider reducing."
                    )
                ))
            else:
                warnings.append(PackWarning(
                    type='source-overload',
                    message=f"{count} items included from '{source}', above the limit of {limit}."
                ))

    total_dropped = len(dropped)
    total_considered = total_items + total_dropped
    if total_considered > 0 and total_dropped / total_considered > thresholds.high_drop_ratio:
        warnings.append(PackWarning(
            type='high-drop-rate',
            message=(
                f"{total_dropped} of {total_considered} items "
                f"({round(total_dropped / total_considered * 100)}%) were dropped. "
                f"Consider increasing the budget or reducing context sources."
            )
        ))

    total_tokens = sum(item.tokens for item in placed)
    if budget > 0 and total_tokens / budget < thresholds.low_utilization and total_dropped == 0:
        warnings.append(PackWarning(
            type='low-utilization',
            message=(
                f"Only {round(total_tokens / budget * 100)}% of the token budget is used. "
                f"The context window may be larger than needed."
            )
        ))

    return warnings
