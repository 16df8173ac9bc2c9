"""
ContextOptimizer: fit prompt context into a token budget.

Scores candidate items, packs them greedily under the budget, enforces
dependency constraints, and arranges the result so the most relevant
content sits at the edges of the context window.
"""

__version__ = "0.1.0"
__author__ = "ContextOptimizer Team"

from .core.types import Priority, Placement, Score, ContextItem, Constraint, PlacedItem
from .core.tokenizer_service import TokenizerService, estimate_tokens
from .core.scorer import score_priority, apply_recency_bias
from .core.packer import greedy_pack
from .core.constraints import enforce_constraints
from .core.placement import apply_placement
from .core.registry import SourceRegistry, DuplicateItemError
from .core.optimizer import ContextOptimizer, PackResult
from .services.content_normalizer import AddOptions
from .services.cost_estimator import estimate_cost
from .config.settings import OptimizerConfig

__all__ = [
    "ContextOptimizer",
    "PackResult",
    "AddOptions",
    "OptimizerConfig",
    "TokenizerService",
    "SourceRegistry",
    "DuplicateItemError",
    "Priority",
    "Placement",
    "Score",
    "ContextItem",
    "Constraint",
    "PlacedItem",
    "estimate_tokens",
    "score_priority",
    "apply_recency_bias",
    "greedy_pack",
    "enforce_constraints",
    "apply_placement",
    "estimate_cost",
]
