"""
LeanPrompt — Optimizers
"""

from .base import BaseOptimizer, apply_pattern
from .dual_optimizer import (
    EFFICIENCY_CATEGORIES,
    DualOptimizer,
    SelectionStrategy,
    validate_balance,
)
from .pattern_optimizer import PatternOptimizer, sort_by_priority
from .registry import PatternRegistry, PatternVersion

__all__ = [
    "BaseOptimizer",
    "PatternOptimizer",
    "DualOptimizer",
    "SelectionStrategy",
    "EFFICIENCY_CATEGORIES",
    "PatternRegistry",
    "PatternVersion",
    "apply_pattern",
    "sort_by_priority",
    "validate_balance",
]
