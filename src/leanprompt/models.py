"""
LeanPrompt — Data Model

Pattern definitions, per-pattern effectiveness counters and optimization results.

A pattern rewrites text through one of two strategies:
- find/replace: a regular expression plus a replacement (template or callback)
- transform: an arbitrary text -> text function, optionally gated by a guard
"""

import dataclasses
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import InvalidPatternError

logger = logging.getLogger(__name__)

ReplaceCallback = Callable[[re.Match[str]], str]


class Replacement(ABC):
    """Tagged replacement variant used by find/replace patterns."""

    @abstractmethod
    def substitute(self, regex: re.Pattern[str], text: str) -> str:
        """Replace every match of ``regex`` in ``text``."""
        ...


@dataclass(frozen=True)
class LiteralReplacement(Replacement):
    """Replacement template; supports ``\\1`` / ``\\g<name>`` group references."""

    template: str

    def substitute(self, regex: re.Pattern[str], text: str) -> str:
        return regex.sub(self.template, text)


@dataclass(frozen=True)
class CallbackReplacement(Replacement):
    """
    Replacement computed per match.

    A callback that raises (or returns a non-string) leaves that single match
    unchanged; the rest of the substitution proceeds.
    """

    fn: ReplaceCallback

    def substitute(self, regex: re.Pattern[str], text: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            try:
                replacement = self.fn(match)
            except Exception as e:
                logger.debug(f"Replacer failed for match {match.group(0)!r}: {e}")
                return match.group(0)
            if not isinstance(replacement, str):
                return match.group(0)
            return replacement

        return regex.sub(_replace, text)


def as_replacement(value: Any) -> Any:
    """Normalize a raw ``replace`` value into a Replacement variant."""
    if value is None or isinstance(value, Replacement):
        return value
    if isinstance(value, str):
        return LiteralReplacement(value)
    if callable(value):
        return CallbackReplacement(value)
    # Left as-is so validation can report it
    return value


@dataclass
class EffectivenessMetrics:
    """Running statistics for a single pattern."""

    times_applied: int = 0
    times_skipped: int = 0
    total_tokens_saved: int = 0
    avg_tokens_saved: float = 0.0
    success_rate: float = 0.0
    last_applied: datetime | None = None

    def record_applied(self, tokens_saved: int) -> None:
        self.times_applied += 1
        self.total_tokens_saved += tokens_saved
        self.avg_tokens_saved = self.total_tokens_saved / self.times_applied
        self.last_applied = datetime.now(UTC)
        self._update_success_rate()

    def record_skipped(self) -> None:
        self.times_skipped += 1
        self._update_success_rate()

    def _update_success_rate(self) -> None:
        total = self.times_applied + self.times_skipped
        self.success_rate = self.times_applied / total if total > 0 else 0.0

    def copy(self) -> "EffectivenessMetrics":
        return dataclasses.replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "times_applied": self.times_applied,
            "times_skipped": self.times_skipped,
            "total_tokens_saved": self.total_tokens_saved,
            "avg_tokens_saved": round(self.avg_tokens_saved, 4),
            "success_rate": round(self.success_rate, 4),
            "last_applied": self.last_applied.isoformat() if self.last_applied else None,
        }


@dataclass(eq=False)
class Pattern:
    """
    A single rewrite rule.

    ``replace`` accepts a template string, a callback or a Replacement and is
    normalized to a Replacement on construction. ``test`` is a guard: when it
    returns False the pattern is not applied.
    """

    id: str
    category: str
    description: str
    priority: int = 0
    find: str | re.Pattern[str] | None = None
    replace: Replacement | str | ReplaceCallback | None = None
    transform: Callable[[str], str] | None = None
    test: Callable[[str], bool] | None = None
    disabled: bool = False
    preserves_formatting: bool | None = None
    example: dict[str, str] | None = None
    effectiveness_metrics: EffectivenessMetrics | None = None

    def __post_init__(self) -> None:
        self.replace = as_replacement(self.replace)

    def compiled_find(self) -> re.Pattern[str] | None:
        """Return ``find`` as a compiled regex (strings compile with default flags)."""
        if self.find is None or isinstance(self.find, re.Pattern):
            return self.find
        return re.compile(self.find)

    def clone(self) -> "Pattern":
        """Copy with an independent effectiveness record."""
        metrics = self.effectiveness_metrics.copy() if self.effectiveness_metrics else None
        return dataclasses.replace(self, effectiveness_metrics=metrics)

    def to_dict(self) -> dict[str, Any]:
        find = self.find.pattern if isinstance(self.find, re.Pattern) else self.find
        return {
            "id": self.id,
            "category": self.category,
            "description": self.description,
            "priority": self.priority,
            "disabled": self.disabled,
            "preserves_formatting": self.preserves_formatting,
            "find": find,
            "has_transform": self.transform is not None,
            "example": self.example,
            "effectiveness_metrics": (
                self.effectiveness_metrics.to_dict() if self.effectiveness_metrics else None
            ),
        }


def validate_pattern(pattern: Any) -> Pattern:
    """
    Validate a pattern before it is registered or added to an optimizer.

    Args:
        pattern: Candidate pattern

    Returns:
        The same pattern, for chaining

    Raises:
        InvalidPatternError: If a required field is missing or malformed
    """
    if not isinstance(pattern, Pattern):
        raise InvalidPatternError(
            "Pattern must be a Pattern instance",
            {"type": type(pattern).__name__},
        )

    for name in ("id", "category", "description"):
        value = getattr(pattern, name)
        if not isinstance(value, str) or not value.strip():
            raise InvalidPatternError(
                f"Pattern must have a non-empty {name}",
                {"pattern_id": pattern.id if isinstance(pattern.id, str) else None, "field": name},
            )

    details = {"pattern_id": pattern.id}

    if isinstance(pattern.priority, bool) or not isinstance(pattern.priority, int):
        raise InvalidPatternError("Pattern priority must be an integer", details)

    if pattern.find is None and pattern.transform is None:
        raise InvalidPatternError("Pattern must have either find or transform", details)

    if pattern.find is not None:
        if pattern.replace is None:
            raise InvalidPatternError("Pattern with find must have replace", details)
        if not isinstance(pattern.replace, Replacement):
            raise InvalidPatternError(
                "Pattern replace must be a string or a callable",
                {**details, "type": type(pattern.replace).__name__},
            )
        if isinstance(pattern.find, str):
            try:
                re.compile(pattern.find)
            except re.error as e:
                raise InvalidPatternError(
                    f"Pattern find is not a valid regular expression: {e}", details
                ) from e
        elif not isinstance(pattern.find, re.Pattern):
            raise InvalidPatternError("Pattern find must be a string or compiled regex", details)

    if pattern.transform is not None and not callable(pattern.transform):
        raise InvalidPatternError("Pattern transform must be callable", details)

    if pattern.test is not None and not callable(pattern.test):
        raise InvalidPatternError("Pattern test must be callable", details)

    return pattern


@dataclass(frozen=True)
class AppliedPatternInfo:
    """Record of one pattern that changed the text during an optimization."""

    id: str
    category: str
    description: str
    priority: int
    tokens_saved: int

    @property
    def token_change(self) -> int:
        return -self.tokens_saved

    @classmethod
    def from_pattern(cls, pattern: Pattern, tokens_saved: int) -> "AppliedPatternInfo":
        return cls(
            id=pattern.id,
            category=pattern.category,
            description=pattern.description,
            priority=pattern.priority,
            tokens_saved=tokens_saved,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "description": self.description,
            "priority": self.priority,
            "tokens_saved": self.tokens_saved,
            "token_change": self.token_change,
        }


@dataclass(frozen=True)
class PerformanceMetrics:
    execution_time_ms: float
    tokens_per_second: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "execution_time_ms": round(self.execution_time_ms, 3),
            "tokens_per_second": round(self.tokens_per_second, 2),
        }


@dataclass
class OptimizationResult:
    """Result of a single optimization run."""

    original_text: str
    optimized_text: str
    original_token_count: int
    optimized_token_count: int
    tokens_saved: int
    percent_saved: float
    applied_patterns: list[AppliedPatternInfo] = field(default_factory=list)
    skipped_patterns: list[Pattern] = field(default_factory=list)
    performance_metrics: PerformanceMetrics | None = None

    @classmethod
    def unchanged(cls, text: str) -> "OptimizationResult":
        """Zero-valued result for empty or whitespace-only input."""
        return cls(
            original_text=text,
            optimized_text=text,
            original_token_count=0,
            optimized_token_count=0,
            tokens_saved=0,
            percent_saved=0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "original_text": self.original_text,
            "optimized_text": self.optimized_text,
            "original_token_count": self.original_token_count,
            "optimized_token_count": self.optimized_token_count,
            "tokens_saved": self.tokens_saved,
            "percent_saved": round(self.percent_saved, 2),
            "applied_patterns": [p.to_dict() for p in self.applied_patterns],
            "skipped_patterns": [p.id for p in self.skipped_patterns],
            "performance_metrics": (
                self.performance_metrics.to_dict() if self.performance_metrics else None
            ),
        }


@dataclass
class DualOptimizationResult(OptimizationResult):
    """Optimization result that also records the efficiency/quality balance used."""

    balance: float = 0.5

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["balance"] = self.balance
        return data
