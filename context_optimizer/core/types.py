"""Shared data types for the packing pipeline."""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
import math


QUERY_SOURCE = "query"


class Priority(Enum):
    """Priority tier of a context item."""
    REQUIRED = "required"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: Any) -> 'Priority':
        """Accept a Priority or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown priority: {value!r}") from None


class Placement(Enum):
    """Position of an item in the packed context."""
    BEGINNING = "beginning"
    MIDDLE = "middle"
    END = "end"


@total_ordering
@dataclass(frozen=True)
class Score:
    """
    Relevance score of an item.

    Either ``unconditional`` (required items) or ranked by a number. An
    unconditional score compares greater than any ranked score and carries
    no numeric value, so arithmetic adjustments cannot reach it.
    """
    value: Optional[float] = None

    @classmethod
    def unconditional(cls) -> 'Score':
        return cls(None)

    @classmethod
    def ranked(cls, value: float) -> 'Score':
        return cls(float(value))

    @property
    def is_unconditional(self) -> bool:
        return self.value is None

    def scaled(self, factor: float) -> 'Score':
        """Return a ranked score multiplied by ``factor``."""
        if self.value is None:
            raise ValueError("Unconditional scores cannot be scaled")
        return Score(self.value * factor)

    def sort_key(self) -> Tuple[int, float]:
        if self.value is None:
            return (1, 0.0)
        return (0, self.value)

    def __lt__(self, other: 'Score') -> bool:
        if not isinstance(other, Score):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __float__(self) -> float:
        return math.inf if self.value is None else self.value

    def __repr__(self) -> str:
        if self.value is None:
            return "Score(unconditional)"
        return f"Score({self.value:g})"


@dataclass(frozen=True)
class ContextItem:
    """A single unit of content considered for packing."""
    id: str
    source: str
    content: str
    tokens: int
    priority: Priority
    index: int
    value: Any = None
    score: Score = field(default_factory=lambda: Score.ranked(0))
    pin: Optional[Placement] = None
    temporal: bool = False
    role: Optional[str] = None

    @property
    def is_required(self) -> bool:
        return self.priority is Priority.REQUIRED


@dataclass(frozen=True)
class Constraint:
    """If ``trigger_id`` is included, ``dependency_id`` must be too."""
    trigger_id: str
    dependency_id: str


@dataclass
class ExcludedItem:
    """An item left out of the packed context, with the reason why."""
    source: str
    id: str
    tokens: int
    score: Score
    reason: str

    @classmethod
    def from_item(cls, item: ContextItem, reason: str) -> 'ExcludedItem':
        return cls(
            source=item.source,
            id=item.id,
            tokens=item.tokens,
            score=item.score,
            reason=reason
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'id': self.id,
            'tokens': self.tokens,
            'score': float(self.score),
            'reason': self.reason
        }


@dataclass
class PackDecision:
    """Output of the greedy packer."""
    included: List[ContextItem]
    excluded: List[ExcludedItem]
    total_tokens: int


@dataclass
class PlacedItem:
    """An admitted item with its final placement tag."""
    id: str
    source: str
    content: str
    value: Any
    tokens: int
    score: Score
    placement: Placement
    priority: Priority = Priority.MEDIUM
    role: Optional[str] = None

    @classmethod
    def from_item(cls, item: ContextItem, placement: Placement) -> 'PlacedItem':
        return cls(
            id=item.id,
            source=item.source,
            content=item.content,
            value=item.value,
            tokens=item.tokens,
            score=item.score,
            placement=placement,
            priority=item.priority,
            role=item.role
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'source': self.source,
            'content': self.content,
            'tokens': self.tokens,
            'score': float(self.score),
            'placement': self.placement.value
        }
        if self.role is not None:
            data['role'] = self.role
        return data
