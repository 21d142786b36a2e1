"""
Exact token counting for OpenAI models via tiktoken.

When tiktoken is not installed (or its encoding files cannot be loaded) the
heuristic estimator is used instead.
"""

import logging
from typing import Any

try:
    import tiktoken
except ImportError:
    tiktoken = None

from ..errors import TokenizationError
from .base import Tokenizer
from .simple import heuristic_count

logger = logging.getLogger(__name__)

LEGACY_ENCODINGS: dict[str, str] = {
    "text-davinci-003": "p50k_base",
    "text-davinci-002": "p50k_base",
    "code-davinci-002": "p50k_base",
}
DEFAULT_ENCODING = "cl100k_base"


class OpenAITokenizer(Tokenizer):
    """tiktoken-backed tokenizer."""

    def __init__(self, model: str):
        super().__init__(model)
        self._encoding: Any = None
        self._load_error: Exception | None = None

        if tiktoken is None:
            logger.warning("tiktoken not installed. OpenAI token counting will use estimation.")

    def _get_encoding(self) -> Any:
        if self._encoding is not None:
            return self._encoding

        if tiktoken is None:
            raise TokenizationError(self.model, "tiktoken is not installed")
        if self._load_error is not None:
            raise TokenizationError(self.model, f"encoding unavailable: {self._load_error}")

        try:
            legacy = LEGACY_ENCODINGS.get(self.model.lower())
            if legacy:
                self._encoding = tiktoken.get_encoding(legacy)
            else:
                try:
                    self._encoding = tiktoken.encoding_for_model(self.model)
                except KeyError:
                    # Fall back to cl100k_base for newer or approximated models
                    self._encoding = tiktoken.get_encoding(DEFAULT_ENCODING)
        except Exception as e:
            # Remember the failure so every call does not retry the load
            self._load_error = e
            raise TokenizationError(self.model, str(e)) from e

        return self._encoding

    def _count(self, text: str) -> int:
        encoding = self._get_encoding()
        return len(encoding.encode(text, disallowed_special=()))

    def _fallback_count(self, text: str) -> int:
        return heuristic_count(text)
