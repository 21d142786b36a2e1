"""
LeanPrompt — Tokenizers

Usage:
    from leanprompt.tokenizers import count_tokens, create_tokenizer

    count_tokens("Hello world", "gpt-4")
    tokenizer = create_tokenizer("claude-3-haiku")
    tokenizer.count_tokens("Hello world")
"""

from .base import Tokenizer, estimate_tokens
from .claude import ClaudeTokenizer
from .factory import (
    DEFAULT_MODEL,
    CachedTokenizer,
    TokenizerChoice,
    TokenizerFamily,
    count_tokens,
    create_backend,
    create_tokenizer,
    resolve_tokenizer,
)
from .openai import OpenAITokenizer
from .simple import SimpleTokenizer, heuristic_count

__all__ = [
    "DEFAULT_MODEL",
    "Tokenizer",
    "CachedTokenizer",
    "OpenAITokenizer",
    "ClaudeTokenizer",
    "SimpleTokenizer",
    "TokenizerFamily",
    "TokenizerChoice",
    "resolve_tokenizer",
    "create_backend",
    "create_tokenizer",
    "count_tokens",
    "estimate_tokens",
    "heuristic_count",
]
