"""Dependency constraints between packed items."""

from typing import Dict, List, Sequence, Set
from dataclasses import dataclass
import logging

from .types import Constraint, ContextItem

logger = logging.getLogger(__name__)

DEPENDENCY_UNAVAILABLE = "constraint dependency unavailable"


@dataclass
class ConstraintResult:
    """Outcome of constraint enforcement."""
    included: List[ContextItem]
    added: List[ContextItem]
    removed: List[ContextItem]


def enforce_constraints(included: Sequence[ContextItem],
                        available: Sequence[ContextItem],
                        constraints: Sequence[Constraint],
                        budget: int) -> ConstraintResult:
    """
    Enforce "if A is included, B must be too" rules.

    Constraints are evaluated one by one in declaration order against the
    current state. When a dependency fits it is pulled in from ``available``;
    when it does not, the trigger is removed instead. Required triggers are
    never removed.

    Args:
        included: Items admitted by the packer
        available: Items not admitted (candidates for dependencies)
        constraints: Rules in declaration order
        budget: Maximum total tokens

    Returns:
        ConstraintResult with the new included list and what changed
    """
    final = list(included)
    if not constraints:
        return ConstraintResult(included=final, added=[], removed=[])

    included_ids: Set[str] = {item.id for item in final}
    pool: Dict[str, ContextItem] = {item.id: item for item in available}
    added: List[ContextItem] = []
    removed: List[ContextItem] = []

    current_tokens = sum(item.tokens for item in final)

    for constraint in constraints:
        if constraint.trigger_id not in included_ids:
            continue
        if constraint.dependency_id in included_ids:
            continue

        dependency = pool.get(constraint.dependency_id)
        if dependency is None:
            logger.debug(
                "Constraint %s -> %s has no available dependency",
                constraint.trigger_id, constraint.dependency_id
            )
            continue

        if current_tokens + dependency.tokens <= budget:
            final.append(dependency)
            included_ids.add(dependency.id)
            current_tokens += dependency.tokens
            added.append(dependency)
            continue

        trigger_pos = next(
            (i for i, item in enumerate(final) if item.id == constraint.trigger_id),
            None
        )
        if trigger_pos is None or final[trigger_pos].is_required:
            continue

        trigger = final.pop(trigger_pos)
        if not any(item.id == trigger.id for item in final):
            included_ids.discard(trigger.id)
        current_tokens -= trigger.tokens
        removed.append(trigger)
        logger.debug(
            "Removed %s: dependency %s does not fit",
            trigger.id, constraint.dependency_id
        )

    return ConstraintResult(included=final, added=added, removed=removed)
