"""
LeanPrompt — Built-in Pattern Libraries

Every accessor builds fresh Pattern instances, so effectiveness metrics
attached by one optimizer never leak into another.
"""

from collections.abc import Callable

from ..config.schemas import Aggressiveness
from ..errors import ConfigurationError
from ..models import Pattern
from .filler import filler_patterns
from .formatting import formatting_patterns
from .instructional import instructional_patterns
from .meta import meta_patterns
from .role import role_patterns
from .structural import structural_patterns
from .technical import technical_patterns
from .verbosity import verbosity_patterns

PATTERN_LIBRARIES: dict[str, Callable[[], list[Pattern]]] = {
    "verbosity": verbosity_patterns,
    "filler": filler_patterns,
    "formatting": formatting_patterns,
    "instructional": instructional_patterns,
    "technical": technical_patterns,
    "role": role_patterns,
    "structural": structural_patterns,
    "meta": meta_patterns,
}

LOW_RISK_CATEGORIES = frozenset({"filler", "formatting"})
# Technical and role rewrites at or above this priority restructure the prompt
HIGH_IMPACT_CATEGORIES = frozenset({"technical", "role"})
HIGH_IMPACT_PRIORITY = 80


def get_all_patterns() -> list[Pattern]:
    patterns: list[Pattern] = []
    for library in PATTERN_LIBRARIES.values():
        patterns.extend(library())
    return patterns


def get_patterns_by_category(category: str) -> list[Pattern]:
    """Patterns of one category; "all" returns every library, unknown names return []."""
    if category == "all":
        return get_all_patterns()
    library = PATTERN_LIBRARIES.get(category)
    return library() if library else []


def coerce_aggressiveness(level: Aggressiveness | str) -> Aggressiveness:
    try:
        return Aggressiveness(level)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown aggressiveness level: {level}",
            details={"level": level, "allowed": [a.value for a in Aggressiveness]},
        ) from e


def matches_aggressiveness(pattern: Pattern, level: Aggressiveness) -> bool:
    if level == Aggressiveness.LOW:
        return pattern.category in LOW_RISK_CATEGORIES
    if level == Aggressiveness.MEDIUM:
        return pattern.category not in HIGH_IMPACT_CATEGORIES or pattern.priority < HIGH_IMPACT_PRIORITY
    return True


def get_patterns_by_aggressiveness(level: Aggressiveness | str) -> list[Pattern]:
    """
    Select the built-in patterns for an aggressiveness level.

    - low: filler and formatting only
    - medium: everything except high-priority technical and role rewrites
    - high: everything

    Each level's set is a superset of the level below.

    Raises:
        ConfigurationError: If the level is not low, medium or high
    """
    level = coerce_aggressiveness(level)
    return [p for p in get_all_patterns() if matches_aggressiveness(p, level)]


def get_available_categories() -> list[str]:
    return list(PATTERN_LIBRARIES)


__all__ = [
    "PATTERN_LIBRARIES",
    "get_all_patterns",
    "get_patterns_by_category",
    "get_patterns_by_aggressiveness",
    "get_available_categories",
    "coerce_aggressiveness",
    "matches_aggressiveness",
    "filler_patterns",
    "formatting_patterns",
    "instructional_patterns",
    "meta_patterns",
    "role_patterns",
    "structural_patterns",
    "technical_patterns",
    "verbosity_patterns",
]
