"""Tests for TokenizerService."""

import pytest
from context_optimizer.core.tokenizer_service import (
    HeuristicTokenizer, SimpleTokenizer, TokenizerService, estimate_tokens
)


class TestEstimateTokens:
    """Test cases for the character heuristic."""

    def test_empty_string(self):
        assert estimate_tokens("") == 0

    def test_plain_english(self):
        """Test ~4 chars per token for prose."""
        text = "Hello, this is a simple test sentence for estimation."
        assert estimate_tokens(text) == 14

    def test_structured_content(self):
        """Test JSON uses the tighter 3 chars per token ratio."""
        json_text = '{"name":"search","description":"Search the web","parameters":{"query":{"type":"string"}}}'
        assert estimate_tokens(json_text) == -(-len(json_text) // 3)

    def test_rounds_up(self):
        assert estimate_tokens("a") == 1
        assert estimate_tokens("abcde") == 2


class TestTokenizerService:
    """Test cases for TokenizerService."""

    def test_default_backend_is_heuristic(self):
        service = TokenizerService()
        assert service.backend == "heuristic"
        assert isinstance(service.tokenizer, HeuristicTokenizer)
        assert service.count_tokens("abcde") == 2

    def test_simple_backend(self):
        service = TokenizerService(backend="simple")
        assert isinstance(service.tokenizer, SimpleTokenizer)
        assert service.count_tokens("Hello, world!") == 4

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            TokenizerService(backend="nonexistent")

    def test_empty_text(self):
        assert TokenizerService(backend="simple").count_tokens("") == 0

    def test_deterministic(self):
        service = TokenizerService()
        text = "Same text, same count."
        assert service.count_tokens(text) == service.count_tokens(text)
