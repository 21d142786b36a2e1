"""
LeanPrompt — Pattern Registry

Versioned store of patterns with a category index. Registries are plain
objects: components that want to share one pass the instance explicitly.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..errors import DuplicatePatternError
from ..models import Pattern, validate_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternVersion:
    """One registered revision of a pattern."""

    id: str
    version: int
    pattern: Pattern
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class PatternRegistry:
    """
    Pattern store with overwrite-with-history semantics.

    Features:
    - Validation on every registration
    - Monotonic version numbers per id; history survives remove()
    - Category index kept consistent with the active set
    - Stable priority ordering (ties in registration order)
    """

    def __init__(self) -> None:
        self._patterns: dict[str, Pattern] = {}
        self._categories: dict[str, list[str]] = {}
        self._history: dict[str, list[PatternVersion]] = {}

    @classmethod
    def with_builtin_patterns(cls) -> "PatternRegistry":
        """Registry pre-loaded with every built-in pattern library."""
        from ..patterns import get_all_patterns

        registry = cls()
        registry.register_all(get_all_patterns())
        return registry

    def register(self, pattern: Pattern, overwrite: bool = False) -> PatternVersion:
        """
        Register a pattern.

        Args:
            pattern: Pattern to store (a copy is kept)
            overwrite: Replace an existing pattern with the same id

        Returns:
            The recorded version

        Raises:
            InvalidPatternError: If the pattern is malformed
            DuplicatePatternError: If the id exists and overwrite is False
        """
        validate_pattern(pattern)
        if pattern.id in self._patterns and not overwrite:
            raise DuplicatePatternError(pattern.id)
        return self._store(pattern)

    def register_all(self, patterns: Iterable[Pattern], overwrite: bool = False) -> list[PatternVersion]:
        """Register several patterns; nothing is stored if any of them is rejected."""
        batch = list(patterns)
        seen: set[str] = set()
        for pattern in batch:
            validate_pattern(pattern)
            if not overwrite and (pattern.id in self._patterns or pattern.id in seen):
                raise DuplicatePatternError(pattern.id)
            seen.add(pattern.id)

        return [self._store(pattern) for pattern in batch]

    def _store(self, pattern: Pattern) -> PatternVersion:
        stored = pattern.clone()
        previous = self._patterns.get(stored.id)
        if previous is not None and previous.category != stored.category:
            self._unindex(previous)

        self._patterns[stored.id] = stored
        ids = self._categories.setdefault(stored.category, [])
        if stored.id not in ids:
            ids.append(stored.id)

        history = self._history.setdefault(stored.id, [])
        version = PatternVersion(
            id=stored.id,
            version=history[-1].version + 1 if history else 1,
            pattern=stored.clone(),
        )
        history.append(version)

        if previous is not None:
            logger.debug(f"Pattern {stored.id} overwritten (version {version.version})")
        return version

    def _unindex(self, pattern: Pattern) -> None:
        ids = self._categories.get(pattern.category)
        if ids is None:
            return
        if pattern.id in ids:
            ids.remove(pattern.id)
        if not ids:
            del self._categories[pattern.category]

    def remove(self, pattern_id: str) -> bool:
        """Remove the active pattern; its version history is retained."""
        pattern = self._patterns.pop(pattern_id, None)
        if pattern is None:
            return False
        self._unindex(pattern)
        return True

    def clear(self, keep_history: bool = True) -> None:
        self._patterns.clear()
        self._categories.clear()
        if not keep_history:
            self._history.clear()

    def get_all(self) -> list[Pattern]:
        return list(self._patterns.values())

    def get_by_id(self, pattern_id: str) -> Pattern | None:
        return self._patterns.get(pattern_id)

    def get_by_category(self, category: str) -> list[Pattern]:
        return [self._patterns[pid] for pid in self._categories.get(category, [])]

    def get_by_priority(self) -> list[Pattern]:
        """Active patterns, highest priority first; ties keep registration order."""
        return sorted(self._patterns.values(), key=lambda p: p.priority, reverse=True)

    def get_categories(self) -> list[str]:
        return list(self._categories)

    def get_version_history(self, pattern_id: str) -> list[PatternVersion]:
        return list(self._history.get(pattern_id, []))

    def get_version(self, pattern_id: str, version: int) -> PatternVersion | None:
        for entry in self._history.get(pattern_id, []):
            if entry.version == version:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns
