"""Tests for scoring."""

import pytest
from context_optimizer.core.scorer import (
    ScoringGroup, apply_custom_scorer, apply_recency_bias, score_items, score_priority
)
from context_optimizer.core.types import ContextItem, Priority, Score


def make_item(item_id, priority=Priority.HIGH, score=None, index=0, source="history"):
    if score is None:
        score = Score.unconditional() if priority is Priority.REQUIRED else Score.ranked(100)
    return ContextItem(
        id=item_id, source=source, content=item_id, tokens=10,
        priority=priority, index=index, value=item_id, score=score
    )


class TestScore:
    """Test cases for the Score value."""

    def test_unconditional_beats_any_ranked(self):
        """Test that unconditional compares above every ranked score."""
        assert Score.unconditional() > Score.ranked(1e308)
        assert Score.ranked(-5) < Score.unconditional()
        assert Score.unconditional() == Score.unconditional()

    def test_ranked_ordering(self):
        """Test ranked scores compare by value."""
        assert Score.ranked(10) < Score.ranked(50)
        assert sorted([Score.ranked(3), Score.unconditional(), Score.ranked(1)]) == [
            Score.ranked(1), Score.ranked(3), Score.unconditional()
        ]

    def test_unconditional_cannot_be_scaled(self):
        """Test that decay arithmetic is refused on unconditional scores."""
        with pytest.raises(ValueError):
            Score.unconditional().scaled(0.5)
        assert Score.ranked(100).scaled(0.5) == Score.ranked(50)


class TestScorePriority:
    """Test cases for priority scoring."""

    def test_required_is_unconditional(self):
        assert score_priority(Priority.REQUIRED).is_unconditional

    def test_tiers_are_ordered(self):
        """Test high > medium > low > 0."""
        high = score_priority(Priority.HIGH)
        medium = score_priority(Priority.MEDIUM)
        low = score_priority(Priority.LOW)
        assert high > medium > low > Score.ranked(0)


class TestRecencyBias:
    """Test cases for recency decay."""

    def test_linear_decay(self):
        """Test oldest gets min factor and newest keeps full score."""
        items = [make_item(str(i), index=i) for i in range(3)]
        decayed = apply_recency_bias(items)

        assert decayed[0].score.value == pytest.approx(10)
        assert decayed[1].score.value == pytest.approx(55)
        assert decayed[2].score.value == pytest.approx(100)

    def test_monotonic_non_decreasing(self):
        items = [make_item(str(i), index=i) for i in range(7)]
        values = [item.score.value for item in apply_recency_bias(items, min_factor=0.3)]
        assert values == sorted(values)
        assert values[-1] == 100

    def test_required_items_untouched(self):
        """Test required items keep the unconditional score at any position."""
        items = [
            make_item("0", priority=Priority.REQUIRED, index=0),
            make_item("1", index=1),
            make_item("2", priority=Priority.REQUIRED, index=2),
        ]
        decayed = apply_recency_bias(items)

        assert decayed[0].score.is_unconditional
        assert decayed[2].score.is_unconditional
        assert decayed[1].score.value == pytest.approx(55)

    def test_single_item_noop(self):
        items = [make_item("only")]
        assert apply_recency_bias(items)[0].score == Score.ranked(100)

    def test_inputs_not_mutated(self):
        items = [make_item(str(i), index=i) for i in range(3)]
        apply_recency_bias(items)
        assert all(item.score == Score.ranked(100) for item in items)


class TestCustomScorer:
    """Test cases for custom scoring."""

    def test_overrides_ranked_scores(self):
        items = [make_item("cats"), make_item("dogs")]
        rescored = apply_custom_scorer(items, lambda item, q: 200 if q in item.content else 1, "cats")
        assert rescored[0].score == Score.ranked(200)
        assert rescored[1].score == Score.ranked(1)

    def test_skips_required(self):
        items = [make_item("req", priority=Priority.REQUIRED)]
        rescored = apply_custom_scorer(items, lambda item, q: 0, "query")
        assert rescored[0].score.is_unconditional

    def test_no_query_no_override(self):
        """Test the scorer is not applied without a query."""
        items = [make_item("a")]
        assert apply_custom_scorer(items, lambda item, q: 0, None)[0].score == Score.ranked(100)
        assert apply_custom_scorer(items, lambda item, q: 0, "")[0].score == Score.ranked(100)


class TestScoreItems:
    """Test cases for the scoring stage."""

    def test_base_then_recency_then_scorer(self):
        history = [make_item(f"h{i}", priority=Priority.MEDIUM, score=Score.ranked(0), index=i)
                   for i in range(2)]
        rag = [make_item("r0", priority=Priority.LOW, score=Score.ranked(0), source="rag")]

        scored = score_items([
            ScoringGroup(items=history, recency=True),
            ScoringGroup(items=rag, scorer=lambda item, q: 42),
        ], query="anything")

        assert [item.id for item in scored] == ["h0", "h1", "r0"]
        assert scored[0].score.value == pytest.approx(5)
        assert scored[1].score.value == pytest.approx(50)
        assert scored[2].score == Score.ranked(42)

    def test_deterministic(self):
        groups = [ScoringGroup(items=[make_item(str(i), index=i) for i in range(4)], recency=True)]
        assert score_items(groups) == score_items(groups)
