"""Tokenizer service for unified token counting."""

import math
import re
from abc import ABC, abstractmethod

import tiktoken


STRUCTURAL_CHARS = frozenset('{}[]()<>;=:,"\'')


def estimate_tokens(text: str) -> int:
    """
    Estimate tokens from character length.

    Plain text runs about 4 characters per token; code and JSON closer to 3.
    Text with more than 10% structural characters uses the tighter ratio.
    Rounds up so the estimate leans towards over-counting.
    """
    if not text:
        return 0

    length = len(text)
    structural = sum(1 for c in text if c in STRUCTURAL_CHARS)
    chars_per_token = 3 if structural / length > 0.1 else 4
    return math.ceil(length / chars_per_token)


class BaseTokenizer(ABC):
    """Abstract base class for tokenizers."""

    @abstractmethod
    def count_tokens(self, text: str) -> int:
        """Count tokens in the given text."""
        pass


class HeuristicTokenizer(BaseTokenizer):
    """Character-ratio tokenizer; the default backend."""

    def count_tokens(self, text: str) -> int:
        return estimate_tokens(text)


class SimpleTokenizer(BaseTokenizer):
    """Simple tokenizer using regex-based word splitting."""

    def __init__(self):
        self.word_pattern = re.compile(r'\w+|[^\w\s]')

    def count_tokens(self, text: str) -> int:
        """Count tokens using word-based splitting."""
        if not text:
            return 0
        return len(self.word_pattern.findall(text))


class TiktokenTokenizer(BaseTokenizer):
    """Tokenizer backed by a tiktoken encoding."""

    def __init__(self, encoding_name: str = "cl100k_base"):
        self.encoding = tiktoken.get_encoding(encoding_name)

    def count_tokens(self, text: str) -> int:
        """Count tokens using tiktoken encoding."""
        if not text:
            return 0
        return len(self.encoding.encode(text))


BACKENDS = {
    "heuristic": HeuristicTokenizer,
    "simple": SimpleTokenizer,
    "tiktoken": TiktokenTokenizer,
}


class TokenizerService:
    """Unified tokenizer service supporting multiple backends."""

    def __init__(self, backend: str = "heuristic", **kwargs):
        """
        Initialize tokenizer service.

        Args:
            backend: Tokenizer backend ('heuristic', 'simple', 'tiktoken')
            **kwargs: Additional arguments for specific backends
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown tokenizer backend: {backend}")
        self.backend = backend
        self.tokenizer: BaseTokenizer = BACKENDS[backend](**kwargs)

    def count_tokens(self, text: str) -> int:
        """Count tokens in text with the configured backend."""
        return self.tokenizer.count_tokens(text)
