"""Position-aware placement to avoid "Lost in the Middle"."""

from typing import Dict, List, Sequence
import logging

from .packer import admission_order_key
from .types import QUERY_SOURCE, ContextItem, Placement, PlacedItem

logger = logging.getLogger(__name__)

PINNED_BEGINNING = "beginning"
TEMPORAL = "temporal"
PINNED_END = "end"
FLOATING = "floating"


def classify(item: ContextItem) -> str:
    """Return the placement bucket for an item."""
    if item.pin is Placement.BEGINNING:
        return PINNED_BEGINNING
    if item.temporal:
        return TEMPORAL
    if item.pin is Placement.END:
        return PINNED_END
    return FLOATING


def edges_first(items: Sequence[ContextItem]) -> Dict[Placement, List[ContextItem]]:
    """
    Split floating items so the best ones sit at the edges.

    Items are ranked by score; even ranks fill the beginning in rank order,
    odd ranks fill the middle in reverse rank order. The lowest-scored
    items end up at the center of the floating block.
    """
    ranked = sorted(items, key=admission_order_key)
    beginning = ranked[0::2]
    middle = ranked[1::2]
    middle.reverse()
    return {Placement.BEGINNING: beginning, Placement.MIDDLE: middle}


def apply_placement(items: Sequence[ContextItem]) -> List[PlacedItem]:
    """
    Arrange admitted items into their final order.

    Order: beginning-pinned, floating (edges-first), temporal by original
    index, end-pinned, and the query last. Pinned items keep their relative
    order.

    Args:
        items: Admitted items in admission order

    Returns:
        Ordered list of PlacedItem
    """
    buckets: Dict[str, List[ContextItem]] = {
        PINNED_BEGINNING: [],
        TEMPORAL: [],
        PINNED_END: [],
        FLOATING: []
    }
    for item in items:
        buckets[classify(item)].append(item)

    temporal = sorted(buckets[TEMPORAL], key=lambda item: item.index)
    floating = edges_first(buckets[FLOATING])
    pinned_end = sorted(buckets[PINNED_END], key=lambda item: item.source == QUERY_SOURCE)

    layout = [
        (buckets[PINNED_BEGINNING], Placement.BEGINNING),
        (floating[Placement.BEGINNING], Placement.BEGINNING),
        (floating[Placement.MIDDLE], Placement.MIDDLE),
        (temporal, Placement.END),
        (pinned_end, Placement.END),
    ]

    placed = [PlacedItem.from_item(item, placement)
              for group, placement in layout
              for item in group]

    logger.debug(
        "Placed %d items: %d pinned-beginning, %d floating, %d temporal, %d pinned-end",
        len(placed), len(buckets[PINNED_BEGINNING]), len(buckets[FLOATING]),
        len(temporal), len(buckets[PINNED_END])
    )
    return placed


def get_placement_map(placed: Sequence[PlacedItem]) -> Dict[str, List[str]]:
    """Group placed item ids by placement tag."""
    placement_map: Dict[str, List[str]] = {p.value: [] for p in Placement}
    for item in placed:
        placement_map[item.placement.value].append(item.id)
    return placement_map
