"""Turn caller-supplied content into context items."""

from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field, replace
import json

from ..core.scorer import ItemScorer
from ..core.tokenizer_service import TokenizerService
from ..core.types import ContextItem, Placement, Priority

DROP_STRATEGIES = ("relevance", "oldest", "none")
GROUP_BY = (None, "turn")
TEMPORAL_SOURCES = ("history",)
BEGINNING_SOURCES = ("system",)


@dataclass
class AddOptions:
    """
    Options for registering a context source.

    Attributes:
        priority: Priority tier; 'required' items are always included
        drop_strategy: 'relevance' drops lowest-scored first, 'oldest' applies
            recency bias, 'none' treats every item as required
        keep_last: Promote the last N items (or turns) to required
        group_by: 'turn' packs conversation turns atomically
        position: Pin items to the 'beginning' or 'end' of the context
        scorer: Custom scoring function called with (item, query)
        requires: Mapping of item id to the item id it depends on
    """
    priority: Priority = Priority.MEDIUM
    drop_strategy: str = "relevance"
    keep_last: Optional[int] = None
    group_by: Optional[str] = None
    position: Optional[Placement] = None
    scorer: Optional[ItemScorer] = None
    requires: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.priority = Priority.parse(self.priority)
        if self.drop_strategy not in DROP_STRATEGIES:
            raise ValueError(f"Unknown drop strategy: {self.drop_strategy}")
        if self.group_by not in GROUP_BY:
            raise ValueError(f"Unknown group_by: {self.group_by}")
        if self.position is not None:
            self.position = Placement(self.position)
            if self.position is Placement.MIDDLE:
                raise ValueError("Items can only be pinned to 'beginning' or 'end'")
        self.requires = dict(self.requires)
        if self.keep_last is not None and self.keep_last < 0:
            raise ValueError("keep_last must be non-negative")

    def is_temporal(self, source: str) -> bool:
        """Whether items of ``source`` form a temporally ordered group."""
        return self.drop_strategy == "oldest" or source in TEMPORAL_SOURCES

    def pin_for(self, source: str) -> Optional[Placement]:
        if self.position is not None:
            return self.position
        if source in BEGINNING_SOURCES:
            return Placement.BEGINNING
        return None


def to_text(raw: Any) -> str:
    """String form of a raw value, used for token counting."""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False, separators=(',', ':'), default=str)


def derive_item_id(source: str, raw: Any, index: int) -> str:
    """Use a ``name``/``id`` field for readable ids, else the position."""
    if isinstance(raw, dict):
        name = raw.get('name')
        if name is None:
            name = raw.get('id')
        if isinstance(name, (str, int)) and not isinstance(name, bool):
            return f"{source}_{name}"
    return f"{source}_{index}"


def message_text(raw: Any) -> str:
    """Text of a chat message, or its serialized form."""
    if isinstance(raw, dict) and isinstance(raw.get('content'), str):
        return raw['content']
    return to_text(raw)


def extract_role(raw: Any) -> Optional[str]:
    if isinstance(raw, dict) and isinstance(raw.get('role'), str):
        return raw['role']
    return None


def group_turns(messages: Sequence[Any]) -> List[List[Any]]:
    """
    Group consecutive messages into conversation turns.

    A new turn starts at each ``role: 'user'`` message. Messages without a
    role are left in groups of their own.
    """
    turns: List[List[Any]] = []
    current: List[Any] = []

    for message in messages:
        role = extract_role(message)
        if role is None:
            if current:
                turns.append(current)
                current = []
            turns.append([message])
        elif role == 'user' and current:
            turns.append(current)
            current = [message]
        else:
            current.append(message)

    if current:
        turns.append(current)
    return turns


def normalize_content(source: str,
                      content: Any,
                      options: AddOptions,
                      tokenizer: TokenizerService) -> List[ContextItem]:
    """
    Normalize raw content into context items.

    Strings become one item; lists and tuples become one item per element.
    Non-string values are serialized as compact JSON for token counting
    and kept unchanged as the item value.

    Args:
        source: Source name
        content: A single value or a list of values
        options: Registration options
        tokenizer: Tokenizer used to measure each item

    Returns:
        List of items in original order
    """
    values = list(content) if isinstance(content, (list, tuple)) else [content]
    temporal = options.is_temporal(source)
    pin = options.pin_for(source)

    items: List[ContextItem] = []
    if options.group_by == "turn":
        for i, turn in enumerate(group_turns(values)):
            if len(turn) == 1 and extract_role(turn[0]) is None:
                raw = turn[0]
                item_id, text, value, role = derive_item_id(source, raw, i), to_text(raw), raw, None
            else:
                item_id = f"{source}_turn_{i}"
                text = "\n".join(message_text(m) for m in turn)
                value, role = list(turn), extract_role(turn[0])
            items.append(ContextItem(
                id=item_id,
                source=source,
                content=text,
                tokens=tokenizer.count_tokens(text),
                priority=options.priority,
                index=i,
                value=value,
                pin=pin,
                temporal=temporal,
                role=role
            ))
    else:
        for i, raw in enumerate(values):
            text = to_text(raw)
            items.append(ContextItem(
                id=derive_item_id(source, raw, i),
                source=source,
                content=text,
                tokens=tokenizer.count_tokens(text),
                priority=options.priority,
                index=i,
                value=raw,
                pin=pin,
                temporal=temporal,
                role=extract_role(raw)
            ))

    if options.drop_strategy == "none":
        return [replace(item, priority=Priority.REQUIRED) for item in items]

    if options.keep_last:
        start = max(0, len(items) - options.keep_last)
        items = items[:start] + [replace(item, priority=Priority.REQUIRED) for item in items[start:]]

    return items
