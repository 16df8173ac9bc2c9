"""Tests for position-aware placement."""

from context_optimizer.core.placement import apply_placement, classify, get_placement_map
from context_optimizer.core.types import ContextItem, Placement, Priority, Score


def make_item(item_id, source="rag", score=50, index=0, pin=None, temporal=False, tokens=10):
    return ContextItem(
        id=item_id, source=source, content=item_id, tokens=tokens,
        priority=Priority.MEDIUM, index=index, value=item_id,
        score=Score.ranked(score), pin=pin, temporal=temporal
    )


class TestApplyPlacement:
    """Test cases for apply_placement."""

    def test_edges_first_floating(self):
        """Test the alternating split puts the best items at the edges."""
        items = [make_item(f"s{s}", score=s) for s in (30, 90, 10, 70, 50)]
        placed = apply_placement(items)

        assert [p.id for p in placed] == ["s90", "s50", "s10", "s30", "s70"]
        assert [p.placement for p in placed] == [
            Placement.BEGINNING, Placement.BEGINNING, Placement.BEGINNING,
            Placement.MIDDLE, Placement.MIDDLE
        ]

    def test_full_layout(self):
        items = [
            make_item("rag_low", score=10),
            make_item("h_1", source="history", score=100, index=1, temporal=True),
            make_item("query", source="query", pin=Placement.END),
            make_item("system", source="system", pin=Placement.BEGINNING),
            make_item("h_0", source="history", score=10, index=0, temporal=True),
            make_item("rag_high", score=90),
        ]
        placed = apply_placement(items)

        assert [p.id for p in placed] == ["system", "rag_high", "rag_low", "h_0", "h_1", "query"]
        assert placed[0].placement is Placement.BEGINNING
        assert placed[2].placement is Placement.MIDDLE
        assert placed[-1].placement is Placement.END
        assert placed[3].placement is Placement.END

    def test_temporal_order_ignores_score(self):
        items = [
            make_item("h_0", score=5, index=0, temporal=True),
            make_item("h_2", score=90, index=2, temporal=True),
            make_item("h_1", score=70, index=1, temporal=True),
        ]
        assert [p.id for p in apply_placement(items)] == ["h_0", "h_1", "h_2"]

    def test_pinned_keep_relative_order(self):
        items = [
            make_item("b2", pin=Placement.BEGINNING, score=1),
            make_item("e1", pin=Placement.END, score=100),
            make_item("b1", pin=Placement.BEGINNING, score=99),
            make_item("e2", pin=Placement.END, score=1),
        ]
        assert [p.id for p in apply_placement(items)] == ["b2", "b1", "e1", "e2"]

    def test_pinned_boundaries(self):
        """Test beginning-pinned lead and end-pinned trail everything else."""
        items = [make_item(f"f{i}", score=i * 10) for i in range(6)]
        items.insert(3, make_item("sys", pin=Placement.BEGINNING))
        items.insert(1, make_item("q", pin=Placement.END))
        items.append(make_item("h", index=0, temporal=True))

        placed = apply_placement(items)
        assert placed[0].id == "sys"
        assert placed[-1].id == "q"
        assert placed[-2].id == "h"

    def test_query_follows_other_end_pinned(self):
        items = [
            make_item("query_0", source="query", pin=Placement.END),
            make_item("notes", source="scratchpad", pin=Placement.END),
        ]
        assert [p.id for p in apply_placement(items)] == ["notes", "query_0"]

    def test_duplicate_ids_are_all_placed(self):
        items = [make_item("dup", score=90), make_item("dup", score=10, pin=Placement.END)]
        placed = apply_placement(items)
        assert [(p.id, p.placement) for p in placed] == [
            ("dup", Placement.BEGINNING), ("dup", Placement.END)
        ]

    def test_classification_precedence(self):
        assert classify(make_item("a", pin=Placement.BEGINNING, temporal=True)) == "beginning"
        assert classify(make_item("b", pin=Placement.END, temporal=True)) == "temporal"
        assert classify(make_item("c", pin=Placement.END)) == "end"
        assert classify(make_item("d")) == "floating"

    def test_empty(self):
        assert apply_placement([]) == []

    def test_placement_map(self):
        placed = apply_placement([make_item("a", score=9), make_item("b", score=1)])
        assert get_placement_map(placed) == {"beginning": ["a"], "middle": ["b"], "end": []}
