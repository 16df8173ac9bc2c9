"""Context optimizer: registers sources and packs them into a token budget."""

from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field
import logging

from ..config.settings import OptimizerConfig
from ..services.content_normalizer import AddOptions, normalize_content
from ..services.reporter import PackWarning, Stats, build_stats, detect_warnings
from .constraints import DEPENDENCY_UNAVAILABLE, enforce_constraints
from .packer import greedy_pack
from .placement import apply_placement, get_placement_map
from .registry import ContextSource, SourceRegistry
from .scorer import ScoringGroup, score_items
from .tokenizer_service import BaseTokenizer, TokenizerService
from .types import (
    QUERY_SOURCE, ContextItem, ExcludedItem, Placement, PlacedItem, Priority, Score
)

logger = logging.getLogger(__name__)

QUERY_ID = "query_0"


@dataclass
class PackResult:
    """Result of a packing call."""
    items: List[PlacedItem]
    stats: Stats
    warnings: List[PackWarning] = field(default_factory=list)
    dropped: List[ExcludedItem] = field(default_factory=list)

    @property
    def placement_map(self) -> Dict[str, List[str]]:
        return get_placement_map(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'stats': self.stats.to_dict(),
            'warnings': [{'type': w.type, 'message': w.message} for w in self.warnings],
            'dropped': [item.to_dict() for item in self.dropped]
        }


class ContextOptimizer:
    """Selects and arranges context sources to fit a model's context window."""

    def __init__(self,
                 config: Optional[OptimizerConfig] = None,
                 tokenizer_service: Optional[Union[TokenizerService, BaseTokenizer]] = None,
                 **config_kwargs):
        """
        Initialize the optimizer.

        Args:
            config: OptimizerConfig; built from ``config_kwargs`` when omitted
            tokenizer_service: Token counter; defaults to the configured backend
            **config_kwargs: OptimizerConfig fields (model, context_window, ...)
        """
        if config is None:
            config = OptimizerConfig(**config_kwargs)
        elif config_kwargs:
            raise ValueError("Pass either a config or config fields, not both")

        issues = config.validate()
        if issues:
            logger.warning("Configuration issues: %s", "; ".join(issues))

        self.config = config
        self.tokenizer = tokenizer_service or TokenizerService(config.tokenizer)
        self.registry = SourceRegistry()

    def add(self,
            source: str,
            content: Any,
            options: Optional[AddOptions] = None,
            **option_kwargs) -> 'ContextOptimizer':
        """
        Register a context source, replacing any source with the same name.

        Args:
            source: Source name (e.g. 'system', 'tools', 'history')
            content: A string, an object, or a list of them
            options: AddOptions; built from ``option_kwargs`` when omitted

        Returns:
            self, for chaining
        """
        if options is None:
            options = AddOptions(**option_kwargs)
        elif option_kwargs:
            raise ValueError("Pass either options or option fields, not both")

        items = normalize_content(source, content, options, self.tokenizer)
        self.registry.register(ContextSource(name=source, items=tuple(items), options=options))
        logger.debug("Registered source '%s' with %d items", source, len(items))
        return self

    def remove(self, source: str) -> 'ContextOptimizer':
        """Remove a previously registered source."""
        self.registry.unregister(source)
        return self

    def clear(self) -> 'ContextOptimizer':
        """Remove all registered sources."""
        self.registry.clear()
        return self

    @property
    def sources(self) -> Tuple[ContextSource, ...]:
        return self.registry.snapshot()

    def pack(self, query: Optional[str] = None) -> PackResult:
        """
        Pack the registered sources into an optimized arrangement.

        Args:
            query: Optional user query; passed to custom scorers and appended
                as a required item at the end of the context

        Returns:
            PackResult with ordered items, stats, warnings and dropped items
        """
        sources = self.registry.snapshot()
        budget = self.config.budget

        all_items = score_items(
            [ScoringGroup(items=s.items,
                          recency=s.options.is_temporal(s.name),
                          scorer=s.options.scorer)
             for s in sources],
            query=query,
            min_factor=self.config.recency_min_factor
        )

        if query:
            all_items.append(self._query_item(query))

        decision = greedy_pack(all_items, budget)

        by_id = {item.id: item for item in all_items}
        available = [by_id[e.id] for e in decision.excluded if e.id in by_id]
        constraints = [c for s in sources for c in s.constraints()]
        reconciled = enforce_constraints(decision.included, available, constraints, budget)

        added_ids = {item.id for item in reconciled.added}
        dropped = [e for e in decision.excluded if e.id not in added_ids]
        dropped.extend(ExcludedItem.from_item(item, DEPENDENCY_UNAVAILABLE)
                       for item in reconciled.removed)

        placed = apply_placement(reconciled.included)

        stats = build_stats(placed, dropped, budget, self.config.model, self.config.pricing)
        warnings = detect_warnings(placed, dropped, budget, self.config.warnings)

        logger.debug(
            "Packed %d items into %d/%d tokens, dropped %d, %d warning(s)",
            len(placed), stats.total_tokens, budget, len(dropped), len(warnings)
        )
        return PackResult(items=placed, stats=stats, warnings=warnings, dropped=dropped)

    def _query_item(self, query: str) -> ContextItem:
        return ContextItem(
            id=QUERY_ID,
            source=QUERY_SOURCE,
            content=query,
            tokens=self.tokenizer.count_tokens(query),
            priority=Priority.REQUIRED,
            index=0,
            value=query,
            score=Score.unconditional(),
            pin=Placement.END,
            role="user"
        )
