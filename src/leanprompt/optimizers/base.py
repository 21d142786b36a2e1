"""
LeanPrompt — Optimization Engine Core

Shared machinery for the single-goal and dual-goal optimizers:
- single-pattern application (guard -> transform -> find/replace)
- the sequential application loop with per-pattern token deltas
- effectiveness bookkeeping and performance timing

A failing pattern never aborts an optimization: it is logged, counted as
skipped and the loop moves on.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from ..cache.token_cache import TokenCache
from ..errors import (
    ConfigurationError,
    DuplicatePatternError,
    InvalidInputError,
    PatternApplicationError,
)
from ..models import (
    AppliedPatternInfo,
    EffectivenessMetrics,
    OptimizationResult,
    Pattern,
    PerformanceMetrics,
    Replacement,
    validate_pattern,
)
from ..observability.monitoring import get_observability
from ..tokenizers import DEFAULT_MODEL, Tokenizer, create_tokenizer

logger = logging.getLogger(__name__)


def apply_pattern(pattern: Pattern, text: str) -> str:
    """
    Apply one pattern to text.

    Args:
        pattern: Pattern to apply
        text: Current text

    Returns:
        The rewritten text (identical to ``text`` when the pattern does not apply)

    Raises:
        PatternApplicationError: If the guard, transform or regex raises
    """
    try:
        if pattern.test is not None and not pattern.test(text):
            return text

        if pattern.transform is not None:
            result = pattern.transform(text)
            if not isinstance(result, str):
                raise TypeError(f"transform returned {type(result).__name__}, expected str")
            return result

        regex = pattern.compiled_find()
        if regex is None or not isinstance(pattern.replace, Replacement):
            return text
        return pattern.replace.substitute(regex, text)

    except Exception as e:
        raise PatternApplicationError(pattern.id, e) from e


def _require_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a boolean", details={name: value})
    return value


class BaseOptimizer(ABC):
    """Sequential pattern application engine."""

    result_type: type[OptimizationResult] = OptimizationResult

    def __init__(
        self,
        patterns: Iterable[Pattern] | None = None,
        model: str = DEFAULT_MODEL,
        preserve_formatting: bool = True,
        track_effectiveness: bool = True,
        include_performance_metrics: bool = False,
        token_cache: TokenCache | None = None,
    ):
        """
        Initialize optimizer.

        Args:
            patterns: Initial patterns (validated; ids must be unique)
            model: Model whose tokenizer measures savings
            preserve_formatting: Skip patterns marked preserves_formatting=False
            track_effectiveness: Attach and update per-pattern metrics
            include_performance_metrics: Report timing in results
            token_cache: Cache for token counts (default: shared cache)
        """
        self._token_cache = token_cache
        self._tokenizer: Tokenizer = create_tokenizer(model, token_cache)
        self.model = model
        self.preserve_formatting = _require_bool("preserve_formatting", preserve_formatting)
        self.track_effectiveness = _require_bool("track_effectiveness", track_effectiveness)
        self.include_performance_metrics = _require_bool(
            "include_performance_metrics", include_performance_metrics
        )
        self._patterns: list[Pattern] = []
        self.set_patterns(patterns or [])

    # ------------------------------------------------------------------
    # Pattern management
    # ------------------------------------------------------------------

    def add_pattern(self, pattern: Pattern) -> None:
        """
        Add a pattern.

        Raises:
            InvalidPatternError: If the pattern is malformed
            DuplicatePatternError: If a pattern with the same id exists
        """
        validate_pattern(pattern)
        if any(p.id == pattern.id for p in self._patterns):
            raise DuplicatePatternError(pattern.id)

        self._attach_metrics(pattern)
        self._patterns.append(pattern)

    def set_patterns(self, patterns: Iterable[Pattern]) -> None:
        """Replace all patterns. Nothing changes if any pattern is invalid."""
        try:
            candidates = list(patterns)
        except TypeError as e:
            raise InvalidInputError(
                "Patterns must be an iterable of Pattern",
                details={"type": type(patterns).__name__},
            ) from e

        seen: set[str] = set()
        for pattern in candidates:
            validate_pattern(pattern)
            if pattern.id in seen:
                raise DuplicatePatternError(pattern.id)
            seen.add(pattern.id)

        for pattern in candidates:
            self._attach_metrics(pattern)
        self._patterns = candidates

    def get_patterns(self) -> list[Pattern]:
        return list(self._patterns)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_model(self, model: str) -> None:
        """
        Switch the model used for token counting.

        Raises:
            ConfigurationError: If model is not a non-empty string
        """
        self._tokenizer = create_tokenizer(model, self._token_cache)
        self.model = model

    def set_preserve_formatting(self, preserve: bool) -> None:
        self.preserve_formatting = _require_bool("preserve_formatting", preserve)

    def set_track_effectiveness(self, track: bool) -> None:
        """Enable or disable tracking; disabling drops collected metrics."""
        self.track_effectiveness = _require_bool("track_effectiveness", track)
        for pattern in self._patterns:
            if track:
                self._attach_metrics(pattern)
            else:
                pattern.effectiveness_metrics = None

    def set_include_performance_metrics(self, include: bool) -> None:
        self.include_performance_metrics = _require_bool("include_performance_metrics", include)

    # ------------------------------------------------------------------
    # Effectiveness queries
    # ------------------------------------------------------------------

    def get_effectiveness_metrics(self) -> dict[str, EffectivenessMetrics]:
        """Snapshot of per-pattern metrics keyed by pattern id."""
        if not self.track_effectiveness:
            return {}
        return {
            p.id: p.effectiveness_metrics.copy()
            for p in self._patterns
            if p.effectiveness_metrics is not None
        }

    def get_most_effective(self, limit: int = 10) -> list[Pattern]:
        """
        Patterns that have been applied at least once, best average saving first.

        Args:
            limit: Maximum number of patterns to return
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidInputError("limit must be a non-negative integer", details={"limit": limit})
        if not self.track_effectiveness:
            return []

        applied = [
            p
            for p in self._patterns
            if p.effectiveness_metrics is not None and p.effectiveness_metrics.times_applied > 0
        ]
        applied.sort(key=lambda p: p.effectiveness_metrics.avg_tokens_saved, reverse=True)
        return applied[:limit]

    # ------------------------------------------------------------------
    # Optimization
    # ------------------------------------------------------------------

    @abstractmethod
    def _select_patterns(self) -> list[Pattern]:
        """Patterns to run for one optimize() call, in application order."""
        ...

    def _result_extras(self) -> dict[str, Any]:
        return {}

    def optimize(self, text: str) -> OptimizationResult:
        """
        Optimize text by applying the active patterns in priority order.

        Args:
            text: Prompt text

        Returns:
            OptimizationResult with per-pattern details

        Raises:
            InvalidInputError: If text is not a string
        """
        if not isinstance(text, str):
            raise InvalidInputError(
                "Text to optimize must be a string",
                details={"type": type(text).__name__},
            )

        if not text.strip():
            return self.result_type(
                original_text=text,
                optimized_text=text,
                original_token_count=0,
                optimized_token_count=0,
                tokens_saved=0,
                percent_saved=0.0,
                **self._result_extras(),
            )

        obs = get_observability()
        start_time = time.perf_counter()

        with obs.trace("optimizer.optimize", tags={"optimizer": type(self).__name__}):
            original_token_count = self._tokenizer.count_tokens(text)
            optimized_text, applied, skipped = self._run_patterns(text, self._select_patterns())
            optimized_token_count = self._final_count(optimized_text)

        execution_time_ms = (time.perf_counter() - start_time) * 1000

        tokens_saved = original_token_count - optimized_token_count
        percent_saved = (tokens_saved / original_token_count * 100) if original_token_count > 0 else 0.0

        performance = None
        if self.include_performance_metrics:
            seconds = execution_time_ms / 1000
            performance = PerformanceMetrics(
                execution_time_ms=execution_time_ms,
                tokens_per_second=original_token_count / seconds if seconds > 0 else 0.0,
            )

        obs.increment("optimizer.runs", tags={"optimizer": type(self).__name__})
        obs.histogram("optimizer.tokens_saved", tokens_saved)
        obs.histogram("optimizer.duration_ms", execution_time_ms)

        logger.debug(
            f"Optimized {original_token_count} -> {optimized_token_count} tokens "
            f"({len(applied)} applied, {len(skipped)} skipped)",
            extra={
                "model": self.model,
                "tokens_saved": tokens_saved,
                "applied_patterns": [a.id for a in applied],
            },
        )

        return self.result_type(
            original_text=text,
            optimized_text=optimized_text,
            original_token_count=original_token_count,
            optimized_token_count=optimized_token_count,
            tokens_saved=tokens_saved,
            percent_saved=percent_saved,
            applied_patterns=applied,
            skipped_patterns=skipped,
            performance_metrics=performance,
            **self._result_extras(),
        )

    def _run_patterns(
        self, text: str, patterns: list[Pattern]
    ) -> tuple[str, list[AppliedPatternInfo], list[Pattern]]:
        applied: list[AppliedPatternInfo] = []
        skipped: list[Pattern] = []
        current = text

        for pattern in patterns:
            if pattern.disabled:
                self._record_skip(pattern, skipped)
                continue

            if self.preserve_formatting and pattern.preserves_formatting is False:
                self._record_skip(pattern, skipped)
                continue

            try:
                result = apply_pattern(pattern, current)
            except PatternApplicationError as e:
                logger.warning(
                    f"Skipping pattern {pattern.id}: {e.message}",
                    extra=e.details,
                )
                get_observability().increment("optimizer.pattern_failed", tags={"pattern": pattern.id})
                self._record_skip(pattern, skipped)
                continue

            if result == current:
                self._record_skip(pattern, skipped)
                continue

            before = self._tokenizer.count_tokens(current)
            after = self._tokenizer.count_tokens(result)
            info = AppliedPatternInfo.from_pattern(pattern, before - after)
            applied.append(info)

            if self.track_effectiveness and pattern.effectiveness_metrics is not None:
                pattern.effectiveness_metrics.record_applied(info.tokens_saved)

            current = result

        return current, applied, skipped

    def _record_skip(self, pattern: Pattern, skipped: list[Pattern]) -> None:
        skipped.append(pattern)
        if self.track_effectiveness and pattern.effectiveness_metrics is not None:
            pattern.effectiveness_metrics.record_skipped()

    def _final_count(self, text: str) -> int:
        try:
            return self._tokenizer.count_tokens(text)
        except Exception as e:
            logger.warning(f"Final token count failed, estimating: {e}")
            return len(text) // 4

    def _attach_metrics(self, pattern: Pattern) -> None:
        if self.track_effectiveness and pattern.effectiveness_metrics is None:
            pattern.effectiveness_metrics = EffectivenessMetrics()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r}, patterns={len(self._patterns)})"
