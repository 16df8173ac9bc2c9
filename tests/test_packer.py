"""Tests for the greedy packer."""

import logging

from context_optimizer.core.packer import BUDGET_EXHAUSTED, greedy_pack
from context_optimizer.core.types import ContextItem, Priority, Score


def make_item(item_id, tokens, score=50, priority=Priority.MEDIUM, index=0):
    return ContextItem(
        id=item_id, source="rag", content=item_id, tokens=tokens, priority=priority,
        index=index, value=item_id,
        score=Score.unconditional() if priority is Priority.REQUIRED else Score.ranked(score)
    )


class TestGreedyPack:
    """Test cases for greedy_pack."""

    def test_required_items_exceed_budget(self):
        """Test required items are admitted even past the budget."""
        items = [make_item("sys", 500, priority=Priority.REQUIRED)]
        result = greedy_pack(items, 100)

        assert [i.id for i in result.included] == ["sys"]
        assert result.total_tokens == 500
        assert result.excluded == []

    def test_required_overflow_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="context_optimizer.core.packer"):
            greedy_pack([make_item("sys", 500, priority=Priority.REQUIRED)], 100)
        assert "exceeding the 100 token budget" in caplog.text

    def test_drops_lowest_scored(self):
        items = [
            make_item("a", 100, score=80, index=0),
            make_item("b", 100, score=50, index=1),
            make_item("c", 100, score=20, index=2),
        ]
        result = greedy_pack(items, 200)

        assert [i.id for i in result.included] == ["a", "b"]
        assert len(result.excluded) == 1
        assert result.excluded[0].id == "c"
        assert result.excluded[0].reason == BUDGET_EXHAUSTED
        assert result.excluded[0].tokens == 100
        assert result.excluded[0].score == Score.ranked(20)

    def test_tie_prefers_fewer_tokens(self):
        items = [make_item("big", 150, index=0), make_item("small", 50, index=1)]
        result = greedy_pack(items, 100)
        assert [i.id for i in result.included] == ["small"]

    def test_tie_then_original_index(self):
        """Test equal score and cost fall back to original index."""
        items = [make_item("second", 10, index=1), make_item("first", 10, index=0)]
        result = greedy_pack(items, 10)
        assert [i.id for i in result.included] == ["first"]
        assert [e.id for e in result.excluded] == ["second"]

    def test_smaller_item_fills_remaining_space(self):
        items = [
            make_item("a", 60, score=90),
            make_item("b", 60, score=80),
            make_item("c", 30, score=10),
        ]
        result = greedy_pack(items, 100)
        assert [i.id for i in result.included] == ["a", "c"]
        assert result.total_tokens == 90

    def test_empty_input(self):
        result = greedy_pack([], 100)
        assert result.included == []
        assert result.excluded == []
        assert result.total_tokens == 0

    def test_non_positive_budget_keeps_only_required(self):
        items = [
            make_item("req", 5, priority=Priority.REQUIRED),
            make_item("opt", 1),
        ]
        for budget in (0, -10):
            result = greedy_pack(items, budget)
            assert [i.id for i in result.included] == ["req"]
            assert [e.id for e in result.excluded] == ["opt"]

    def test_zero_cost_item_fits_zero_budget(self):
        result = greedy_pack([make_item("free", 0)], 0)
        assert [i.id for i in result.included] == ["free"]

    def test_optional_total_within_budget(self):
        """Test optional items never push the total over the budget."""
        items = [make_item(str(i), 7 * (i % 5 + 1), score=i * 3 % 11, index=i) for i in range(30)]
        result = greedy_pack(items, 120)
        assert result.total_tokens <= 120
        assert result.total_tokens == sum(i.tokens for i in result.included)

    def test_deterministic(self):
        items = [make_item(str(i), 10 + i % 3, score=i % 4, index=i) for i in range(12)]
        first = greedy_pack(items, 50)
        second = greedy_pack(list(reversed(items)), 50)
        assert [i.id for i in first.included] == [i.id for i in second.included]
        assert [e.id for e in first.excluded] == [e.id for e in second.excluded]
