"""
LeanPrompt — Dual-Goal Optimizer

Blends an "efficiency" pattern pool (token reduction) against a "quality"
pool (everything else) using a balance in [0, 1]:

- 0.0 runs only efficiency patterns
- 1.0 runs only quality patterns
- in between, every quality pattern runs plus a share of the efficiency
  pool that shrinks as the balance grows

The share is chosen deterministically by default (top patterns by priority).
A seeded stochastic mode includes each efficiency pattern with probability
``1 - balance``.
"""

import logging
import math
import random
from collections.abc import Iterable
from enum import Enum
from typing import Any

from ..errors import ConfigurationError
from ..models import DualOptimizationResult, Pattern
from .pattern_optimizer import PatternOptimizer, sort_by_priority

logger = logging.getLogger(__name__)

EFFICIENCY_CATEGORIES = frozenset({"efficiency", "redundancy", "verbosity"})


class SelectionStrategy(str, Enum):
    """How efficiency patterns are picked for intermediate balances."""

    PROPORTIONAL = "proportional"
    STOCHASTIC = "stochastic"


def validate_balance(balance: Any) -> float:
    """
    Check that balance is a real number in [0, 1].

    Raises:
        ConfigurationError: For non-numbers, booleans, NaN or out-of-range values
    """
    if isinstance(balance, bool) or not isinstance(balance, (int, float)):
        raise ConfigurationError(
            "Balance must be a number between 0 and 1",
            details={"balance": repr(balance)},
        )
    if math.isnan(balance) or not 0 <= balance <= 1:
        raise ConfigurationError(
            "Balance must be a number between 0 and 1",
            details={"balance": balance},
        )
    return float(balance)


def is_efficiency_pattern(pattern: Pattern) -> bool:
    return pattern.category in EFFICIENCY_CATEGORIES


class DualOptimizer(PatternOptimizer):
    """Optimizer trading token efficiency against quality-preserving patterns."""

    result_type = DualOptimizationResult

    def __init__(
        self,
        patterns: Iterable[Pattern] | None = None,
        balance: float = 0.5,
        *,
        selection: SelectionStrategy | str = SelectionStrategy.PROPORTIONAL,
        seed: int | None = None,
        **kwargs: Any,
    ):
        """
        Initialize dual optimizer.

        Args:
            patterns: Patterns of both pools; partitioned by category
            balance: 0 = pure efficiency, 1 = pure quality
            selection: Strategy for intermediate balances
            seed: Seed for the stochastic strategy
            **kwargs: Passed to PatternOptimizer
        """
        self.balance = validate_balance(balance)
        self.selection = self._coerce_selection(selection)
        self._rng = random.Random(seed)
        super().__init__(patterns, **kwargs)

    @staticmethod
    def _coerce_selection(selection: SelectionStrategy | str) -> SelectionStrategy:
        try:
            return SelectionStrategy(selection)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown selection strategy: {selection}",
                details={"allowed": [s.value for s in SelectionStrategy]},
            ) from e

    def set_balance(self, balance: float) -> None:
        self.balance = validate_balance(balance)

    def get_balance(self) -> float:
        return self.balance

    def set_selection_strategy(self, selection: SelectionStrategy | str, seed: int | None = None) -> None:
        self.selection = self._coerce_selection(selection)
        if seed is not None:
            self._rng.seed(seed)

    def get_efficiency_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns if is_efficiency_pattern(p)]

    def get_quality_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns if not is_efficiency_pattern(p)]

    def _select_patterns(self) -> list[Pattern]:
        efficiency = sort_by_priority(self.get_efficiency_patterns())

        if self.balance == 0:
            return efficiency
        if self.balance == 1:
            return sort_by_priority(self.get_quality_patterns())

        if self.selection == SelectionStrategy.STOCHASTIC:
            chosen = [p for p in efficiency if self._rng.random() > self.balance]
        else:
            # Half-way shares round up
            share = math.floor((1 - self.balance) * len(efficiency) + 0.5)
            chosen = efficiency[:share]

        chosen_ids = {id(p) for p in chosen}
        # Keep registration order so priority ties stay stable
        selected = [p for p in self._patterns if not is_efficiency_pattern(p) or id(p) in chosen_ids]

        logger.debug(
            f"Dual selection at balance {self.balance}: {len(chosen)}/{len(efficiency)} efficiency patterns",
            extra={"selection": self.selection.value},
        )
        return sort_by_priority(selected)

    def _result_extras(self) -> dict[str, Any]:
        return {"balance": self.balance}
