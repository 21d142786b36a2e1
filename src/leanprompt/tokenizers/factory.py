"""
LeanPrompt — Tokenizer Resolution

Maps a model name to a tokenizer family. Resolution is a pure,
case-insensitive function of the model string; every tokenizer handed out
by create_tokenizer() consults the shared token cache before counting.
"""

import logging
from enum import Enum
from typing import NamedTuple

from ..cache.token_cache import TokenCache, get_token_cache
from ..errors import ConfigurationError
from .base import Tokenizer
from .claude import ClaudeTokenizer
from .openai import OpenAITokenizer
from .simple import SimpleTokenizer

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"

# Families without a public tokenizer that are close enough to OpenAI's BPE
_OPENAI_APPROXIMATED_PREFIXES = ("gemini", "palm", "bison", "mistral", "mixtral", "llama")
_OPENAI_LEGACY_MARKERS = ("davinci", "curie", "babbage", "ada", "embedding")


class TokenizerFamily(str, Enum):
    OPENAI = "openai"
    CLAUDE = "claude"
    SIMPLE = "simple"


class TokenizerChoice(NamedTuple):
    family: TokenizerFamily
    backend_model: str


def resolve_tokenizer(model: str) -> TokenizerChoice:
    """
    Resolve a model name to a tokenizer family.

    Args:
        model: Model name, e.g. "gpt-4o" or "claude-3-haiku"

    Returns:
        The family and the model name the backend should be built for
    """
    name = model.strip().lower()

    if name.startswith("gpt-") or any(marker in name for marker in _OPENAI_LEGACY_MARKERS):
        return TokenizerChoice(TokenizerFamily.OPENAI, name)

    if name.startswith("claude-"):
        return TokenizerChoice(TokenizerFamily.CLAUDE, name)

    if name.startswith(_OPENAI_APPROXIMATED_PREFIXES):
        return TokenizerChoice(TokenizerFamily.OPENAI, DEFAULT_MODEL)

    return TokenizerChoice(TokenizerFamily.SIMPLE, name)


def _validate_model(model: str) -> str:
    if not isinstance(model, str) or not model.strip():
        raise ConfigurationError("Model must be a non-empty string", details={"model": model})
    return model


class CachedTokenizer(Tokenizer):
    """Tokenizer wrapper that reads and fills a TokenCache."""

    def __init__(self, backend: Tokenizer, model: str, cache: TokenCache):
        super().__init__(model)
        self.backend = backend
        self.cache = cache

    def count_tokens(self, text: str | None) -> int:
        if not text or not isinstance(text, str):
            return 0

        cached = self.cache.get(text, self.model)
        if cached is not None:
            return cached

        count = self.backend.count_tokens(text)
        self.cache.set(text, self.model, count)
        return count

    def _count(self, text: str) -> int:
        return self.backend.count_tokens(text)


def create_backend(model: str) -> Tokenizer:
    """Build the uncached tokenizer for a model."""
    family, backend_model = resolve_tokenizer(_validate_model(model))

    if family == TokenizerFamily.OPENAI:
        return OpenAITokenizer(backend_model)
    if family == TokenizerFamily.CLAUDE:
        return ClaudeTokenizer(backend_model)
    return SimpleTokenizer(backend_model)


def create_tokenizer(model: str = DEFAULT_MODEL, cache: TokenCache | None = None) -> Tokenizer:
    """
    Create a cached tokenizer for a model.

    Args:
        model: Model name
        cache: Token cache to use (default: the shared cache)

    Returns:
        Tokenizer whose counts go through the cache

    Raises:
        ConfigurationError: If model is empty
    """
    backend = create_backend(model)
    logger.debug(f"Resolved tokenizer for {model}: {backend!r}")
    return CachedTokenizer(backend, model, cache if cache is not None else get_token_cache())


def count_tokens(text: str, model: str = DEFAULT_MODEL) -> int:
    """Count tokens for a model using the shared cache."""
    return create_tokenizer(model).count_tokens(text)
