"""
LeanPrompt — Tokenizer Interface

Every tokenizer exposes count_tokens(text) and get_model(). Counting never
raises: a failing backend degrades to a cheap estimate and the degradation is
logged and counted.
"""

import logging
from abc import ABC, abstractmethod

from ..observability.monitoring import get_observability

logger = logging.getLogger(__name__)


def estimate_tokens(text: str) -> int:
    """Rough estimate (~4 characters per token)."""
    if not text:
        return 0
    return max(1, len(text) // 4)


class Tokenizer(ABC):
    """Abstract token counter for one model."""

    def __init__(self, model: str):
        self.model = model

    def get_model(self) -> str:
        return self.model

    def count_tokens(self, text: str | None) -> int:
        """
        Count tokens in text.

        Args:
            text: Text to count; None or empty counts as 0

        Returns:
            Non-negative token count
        """
        if not text or not isinstance(text, str):
            return 0

        try:
            return max(0, int(self._count(text)))
        except Exception as e:
            logger.warning(
                f"Token counting failed for {self.model}, using fallback: {e}",
                extra={"model": self.model, "error_type": type(e).__name__},
            )
            get_observability().increment(
                "tokenizer.fallback",
                tags={"tokenizer": type(self).__name__},
            )
            return self._fallback_count(text)

    def _fallback_count(self, text: str) -> int:
        return estimate_tokens(text)

    @abstractmethod
    def _count(self, text: str) -> int:
        """Backend-specific count; may raise."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
