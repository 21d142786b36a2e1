"""
LeanPrompt — Prompt Optimizer Facade

Stable public entry point. Merges caller configuration with defaults,
selects the active pattern subset (aggressiveness, enabled categories,
custom patterns) from a PatternRegistry and delegates to a PatternOptimizer.

Usage:
    optimizer = PromptOptimizer({"model": "gpt-4", "aggressiveness": "high"})
    result = optimizer.optimize("I would like you to please summarize this.")
    print(result.optimized_text, result.tokens_saved)
"""

import logging
from typing import Any

from pydantic import ValidationError

from .cache.token_cache import TokenCache
from .config.schemas import Aggressiveness, OptimizerConfig
from .errors import ConfigurationError, DuplicatePatternError
from .models import EffectivenessMetrics, OptimizationResult, Pattern, validate_pattern
from .optimizers.dual_optimizer import DualOptimizer, SelectionStrategy
from .optimizers.pattern_optimizer import PatternOptimizer
from .optimizers.registry import PatternRegistry
from .patterns import coerce_aggressiveness, get_available_categories, matches_aggressiveness
from .tokenizers import create_tokenizer

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


def build_config(config: OptimizerConfig | dict[str, Any] | None = None) -> OptimizerConfig:
    """
    Merge caller configuration with defaults.

    Raises:
        ConfigurationError: If any value is invalid
        InvalidPatternError: If a custom pattern is malformed
    """
    if config is None:
        merged = OptimizerConfig()
    elif isinstance(config, OptimizerConfig):
        merged = config.model_copy(deep=True)
    elif isinstance(config, dict):
        try:
            merged = OptimizerConfig(**config)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid optimizer configuration",
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e
    else:
        raise ConfigurationError(
            "Optimizer configuration must be a dict or OptimizerConfig",
            details={"type": type(config).__name__},
        )

    seen: set[str] = set()
    for pattern in merged.custom_patterns:
        validate_pattern(pattern)
        if pattern.id in seen:
            raise DuplicatePatternError(pattern.id)
        seen.add(pattern.id)

    return merged


def select_patterns(registry: PatternRegistry, config: OptimizerConfig) -> list[Pattern]:
    """
    Active pattern set for a configuration.

    Registry patterns are filtered by aggressiveness and enabled categories
    and copied; custom patterns are always included and take precedence over
    registry patterns with the same id.
    """
    level = coerce_aggressiveness(config.aggressiveness)
    categories = config.enabled_categories
    custom_ids = {p.id for p in config.custom_patterns}

    selected = [
        p.clone()
        for p in registry.get_all()
        if p.id not in custom_ids
        and matches_aggressiveness(p, level)
        and (ALL_CATEGORIES in categories or p.category in categories)
    ]
    return selected + list(config.custom_patterns)


class PromptOptimizer:
    """Configurable prompt optimizer."""

    def __init__(
        self,
        config: OptimizerConfig | dict[str, Any] | None = None,
        registry: PatternRegistry | None = None,
        token_cache: TokenCache | None = None,
    ):
        """
        Initialize prompt optimizer.

        Args:
            config: Optimizer configuration (defaults for missing values)
            registry: Pattern source (default: a new registry with the built-in libraries)
            token_cache: Token count cache (default: the shared cache)
        """
        self._config = build_config(config)
        self.registry = registry if registry is not None else PatternRegistry.with_builtin_patterns()
        self._token_cache = token_cache

        self._engine = PatternOptimizer(
            model=self._config.model,
            preserve_formatting=self._config.preserve_formatting,
            track_effectiveness=self._config.track_pattern_effectiveness,
            include_performance_metrics=self._config.include_performance_metrics,
            token_cache=token_cache,
        )
        self._update_patterns()

    def _update_patterns(self) -> None:
        """Rebuild the engine's patterns, carrying over collected metrics."""
        previous: dict[str, EffectivenessMetrics] = {
            p.id: p.effectiveness_metrics
            for p in self._engine.get_patterns()
            if p.effectiveness_metrics is not None
        }

        patterns = select_patterns(self.registry, self._config)
        for pattern in patterns:
            if pattern.id in previous and pattern.effectiveness_metrics is None:
                pattern.effectiveness_metrics = previous[pattern.id]

        self._engine.set_patterns(patterns)
        logger.debug(
            f"Active patterns: {len(patterns)}",
            extra={
                "aggressiveness": self._config.aggressiveness,
                "enabled_categories": self._config.enabled_categories,
            },
        )

    def optimize(self, text: str) -> OptimizationResult:
        return self._engine.optimize(text)

    def count_tokens(self, text: str, model: str | None = None) -> int:
        """Count tokens for the configured model, or for ``model`` when given."""
        return create_tokenizer(model or self._config.model, self._token_cache).count_tokens(text)

    def add_pattern(self, pattern: Pattern) -> None:
        """
        Add a custom pattern; it stays active regardless of aggressiveness or categories.

        Raises:
            InvalidPatternError: If the pattern is malformed
            DuplicatePatternError: If an active or custom pattern already uses the id
        """
        validate_pattern(pattern)
        if any(p.id == pattern.id for p in self._engine.get_patterns()) or any(
            p.id == pattern.id for p in self._config.custom_patterns
        ):
            raise DuplicatePatternError(pattern.id)

        self._config.custom_patterns = [*self._config.custom_patterns, pattern]
        self._update_patterns()

    def enable_category(self, category: str) -> None:
        """Enable a category; "all" enables every category."""
        category = self._require_category(category)
        current = self._config.enabled_categories

        if category == ALL_CATEGORIES:
            self._config.enabled_categories = [ALL_CATEGORIES]
        elif ALL_CATEGORIES not in current and category not in current:
            self._config.enabled_categories = [*current, category]
        else:
            return

        self._update_patterns()

    def disable_category(self, category: str) -> None:
        """Disable a category; "all" disables every category."""
        category = self._require_category(category)
        current = self._config.enabled_categories

        if category == ALL_CATEGORIES:
            self._config.enabled_categories = []
        elif ALL_CATEGORIES in current:
            # Expand the sentinel so the remaining categories stay enabled
            self._config.enabled_categories = [c for c in self.get_available_categories() if c != category]
        else:
            self._config.enabled_categories = [c for c in current if c != category]

        self._update_patterns()

    @staticmethod
    def _require_category(category: str) -> str:
        if not isinstance(category, str) or not category.strip():
            raise ConfigurationError("Category must be a non-empty string", details={"category": category})
        return category

    def set_aggressiveness(self, level: Aggressiveness | str) -> None:
        self._config.aggressiveness = coerce_aggressiveness(level)
        self._update_patterns()

    def set_model(self, model: str) -> None:
        self._engine.set_model(model)
        self._config.model = model

    def set_preserve_formatting(self, preserve: bool) -> None:
        self._engine.set_preserve_formatting(preserve)
        self._config.preserve_formatting = preserve

    def set_track_pattern_effectiveness(self, track: bool) -> None:
        self._engine.set_track_effectiveness(track)
        self._config.track_pattern_effectiveness = track

    def get_config(self) -> OptimizerConfig:
        """Copy of the current configuration."""
        return self._config.model_copy(deep=True)

    def get_patterns(self) -> list[Pattern]:
        return self._engine.get_patterns()

    def get_pattern_effectiveness_metrics(self) -> dict[str, EffectivenessMetrics]:
        return self._engine.get_effectiveness_metrics()

    def get_most_effective_patterns(self, limit: int = 10) -> list[Pattern]:
        return self._engine.get_most_effective(limit)

    def get_available_categories(self) -> list[str]:
        categories = get_available_categories()
        for category in self.registry.get_categories():
            if category not in categories:
                categories.append(category)
        return categories


def create_dual_optimizer(
    balance: float = 0.5,
    config: OptimizerConfig | dict[str, Any] | None = None,
    registry: PatternRegistry | None = None,
    selection: SelectionStrategy | str = SelectionStrategy.PROPORTIONAL,
    seed: int | None = None,
    token_cache: TokenCache | None = None,
) -> DualOptimizer:
    """
    Build a DualOptimizer over the pattern set a PromptOptimizer would use.

    Args:
        balance: 0 = pure efficiency, 1 = pure quality
        config: Optimizer configuration
        registry: Pattern source (default: built-in libraries)
        selection: Efficiency pattern selection strategy
        seed: Seed for the stochastic strategy
        token_cache: Token count cache
    """
    merged = build_config(config)
    registry = registry if registry is not None else PatternRegistry.with_builtin_patterns()

    return DualOptimizer(
        select_patterns(registry, merged),
        balance=balance,
        selection=selection,
        seed=seed,
        model=merged.model,
        preserve_formatting=merged.preserve_formatting,
        track_effectiveness=merged.track_pattern_effectiveness,
        include_performance_metrics=merged.include_performance_metrics,
        token_cache=token_cache,
    )
