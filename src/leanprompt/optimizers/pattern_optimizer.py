"""
LeanPrompt — Pattern Optimizer

Single-goal optimizer: runs every configured pattern, highest priority
first, ties in the order the patterns were added.
"""

from ..models import Pattern
from .base import BaseOptimizer


def sort_by_priority(patterns: list[Pattern]) -> list[Pattern]:
    """Stable sort, highest priority first."""
    return sorted(patterns, key=lambda p: p.priority, reverse=True)


class PatternOptimizer(BaseOptimizer):
    """
    Applies all patterns in priority order.

    Example:
        >>> optimizer = PatternOptimizer(patterns=filler_patterns(), model="gpt-4")
        >>> result = optimizer.optimize("Please just summarize this.")
        >>> result.tokens_saved
    """

    def _select_patterns(self) -> list[Pattern]:
        return sort_by_priority(self._patterns)
