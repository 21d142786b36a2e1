"""
LeanPrompt — Pattern Discovery

Learns new patterns from pairs of prompts and their hand-optimized versions.

- Pairs where the optimized prompt is shorter (in tokens) are aligned word by
  word; phrases that were repeatedly dropped or shortened become
  "efficiency" find/replace patterns.
- Pairs where the optimized prompt is longer contribute "quality" patterns:
  recurring prefixes and suffixes wrapped around the original prompt, and
  recurring enhancements of imperative commands ("Explain X.").
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .cache.token_cache import TokenCache
from .errors import ConfigurationError, InvalidInputError
from .models import Pattern
from .tokenizers import DEFAULT_MODEL, create_tokenizer

logger = logging.getLogger(__name__)

MAX_LOOK_AHEAD = 5
PREFIX_PROBE_LENGTH = 20
COMMAND_ENHANCEMENT = "Provide a comprehensive, detailed response with examples and clear structure."

_COMMAND = re.compile(
    r"^(Explain|Describe|Tell me about|Compare|Write|Create|Implement|Generate|List|Analyze"
    r"|Summarize|Solve|Calculate|Find|Show|Make)(\s+an?\b|\s+)?([\w\s]+)$",
    re.I,
)


@dataclass
class _Candidate:
    pattern: str
    replacement: str = ""
    count: int = 0
    token_delta: int = 0


@dataclass
class DiscoveryResult:
    efficiency_patterns: list[Pattern] = field(default_factory=list)
    quality_patterns: list[Pattern] = field(default_factory=list)

    def all_patterns(self) -> list[Pattern]:
        return [*self.efficiency_patterns, *self.quality_patterns]


def _index_from(words: list[str], word: str, start: int) -> int:
    try:
        return words.index(word, start)
    except ValueError:
        return -1


def _common_prefix_length(a: str, b: str) -> int:
    i = 0
    while i < len(a) and i < len(b) and a[i] == b[i]:
        i += 1
    return i


def _prepend(prefix: str):
    def transform(text: str) -> str:
        return f"{prefix} {text}"

    return transform


def _append(suffix: str):
    def transform(text: str) -> str:
        return f"{text} {suffix}"

    return transform


class PatternDiscovery:
    """Derives candidate patterns from example optimizations."""

    def __init__(
        self,
        min_occurrences: int = 3,
        min_token_impact: int = 2,
        model: str = DEFAULT_MODEL,
        token_cache: TokenCache | None = None,
    ):
        """
        Initialize pattern discovery.

        Args:
            min_occurrences: Times a candidate must be seen to become a pattern
            min_token_impact: Minimum total tokens a reduction candidate must save
            model: Model whose tokenizer measures savings
            token_cache: Token count cache (default: the shared cache)
        """
        if isinstance(min_occurrences, bool) or not isinstance(min_occurrences, int) or min_occurrences < 1:
            raise ConfigurationError(
                "min_occurrences must be a positive integer",
                details={"min_occurrences": min_occurrences},
            )
        self.min_occurrences = min_occurrences
        self.min_token_impact = min_token_impact
        self.tokenizer = create_tokenizer(model, token_cache)

    def discover_patterns(self, dataset: Iterable[Mapping[str, Any]]) -> DiscoveryResult:
        """
        Discover patterns from examples.

        Args:
            dataset: Items with "prompt" and "optimized_prompt" strings

        Returns:
            DiscoveryResult with efficiency and quality patterns

        Raises:
            InvalidInputError: If an item is missing either string
        """
        reductions: dict[tuple[str, str], _Candidate] = {}
        enhancements: dict[tuple[str, str], _Candidate] = {}

        for index, item in enumerate(dataset):
            prompt, optimized = self._unpack(item, index)
            original_tokens = self.tokenizer.count_tokens(prompt)
            optimized_tokens = self.tokenizer.count_tokens(optimized)

            if optimized_tokens < original_tokens:
                self._analyze_reduction(prompt, optimized, reductions)
            elif optimized_tokens > original_tokens:
                self._analyze_enhancement(prompt, optimized, enhancements)

        result = DiscoveryResult(
            efficiency_patterns=self._reduction_patterns(reductions),
            quality_patterns=self._enhancement_patterns(enhancements),
        )
        logger.info(
            f"Discovered {len(result.efficiency_patterns)} efficiency and "
            f"{len(result.quality_patterns)} quality patterns"
        )
        return result

    @staticmethod
    def _unpack(item: Mapping[str, Any], index: int) -> tuple[str, str]:
        if not isinstance(item, Mapping):
            raise InvalidInputError("Dataset items must be mappings", details={"index": index})
        prompt = item.get("prompt")
        optimized = item.get("optimized_prompt")
        if not isinstance(prompt, str) or not isinstance(optimized, str):
            raise InvalidInputError(
                "Dataset items need string 'prompt' and 'optimized_prompt' fields",
                details={"index": index},
            )
        return prompt, optimized

    def _analyze_reduction(
        self, original: str, optimized: str, candidates: dict[tuple[str, str], _Candidate]
    ) -> None:
        original_words = original.split()
        optimized_words = optimized.split()

        i = j = 0
        while i < len(original_words):
            if j < len(optimized_words) and original_words[i] == optimized_words[j]:
                i += 1
                j += 1
                continue

            # Find the next original word that reappears in the optimized text
            for look_ahead in range(1, MAX_LOOK_AHEAD + 1):
                if i + look_ahead >= len(original_words):
                    i += 1
                    break
                found = _index_from(optimized_words, original_words[i + look_ahead], j)
                if found != -1:
                    removed = " ".join(original_words[i : i + look_ahead])
                    replacement = " ".join(optimized_words[j:found])

                    candidate = candidates.setdefault(
                        (removed, replacement), _Candidate(pattern=removed, replacement=replacement)
                    )
                    candidate.count += 1
                    candidate.token_delta += self.tokenizer.count_tokens(removed) - self.tokenizer.count_tokens(
                        replacement
                    )

                    # Both pointers now sit on the realigned word
                    i += look_ahead
                    j = found
                    break
            else:
                i += 1

    def _analyze_enhancement(
        self, original: str, optimized: str, candidates: dict[tuple[str, str], _Candidate]
    ) -> None:
        if optimized.startswith(original[:PREFIX_PROBE_LENGTH]):
            shared = _common_prefix_length(original, optimized)
            original_rest = original[shared:].strip()
            optimized_rest = optimized[shared:].strip()

            if original_rest and optimized_rest and original_rest in optimized_rest:
                position = optimized_rest.index(original_rest)
                before = optimized_rest[:position].strip()
                after = optimized_rest[position + len(original_rest) :].strip()

                if before:
                    candidate = candidates.setdefault(("prefix", before), _Candidate(pattern=before))
                    candidate.count += 1
                    candidate.token_delta += self.tokenizer.count_tokens(before)
                if after:
                    candidate = candidates.setdefault(("suffix", after), _Candidate(pattern=after))
                    candidate.count += 1
                    candidate.token_delta += self.tokenizer.count_tokens(after)

        command = _COMMAND.match(original)
        if command:
            verb, target = command.group(1), command.group(3)
            if verb in optimized and target in optimized:
                candidate = candidates.setdefault(("command", verb.capitalize()), _Candidate(pattern=verb))
                candidate.count += 1
                candidate.token_delta += self.tokenizer.count_tokens(optimized) - self.tokenizer.count_tokens(
                    original
                )

    def _reduction_patterns(self, candidates: dict[tuple[str, str], _Candidate]) -> list[Pattern]:
        accepted = [
            c for c in candidates.values() if c.count >= self.min_occurrences and c.token_delta >= self.min_token_impact
        ]
        accepted.sort(key=lambda c: c.token_delta, reverse=True)

        return [
            Pattern(
                id=f"efficiency-discovered-{index + 1}",
                category="efficiency",
                description=f'Replace "{c.pattern}" with "{c.replacement}"',
                priority=90 - index,
                preserves_formatting=True,
                find=re.compile(rf"(?<!\w){re.escape(c.pattern)}(?!\w)", re.I),
                replace=c.replacement.replace("\\", "\\\\"),
            )
            for index, c in enumerate(accepted)
        ]

    def _enhancement_patterns(self, candidates: dict[tuple[str, str], _Candidate]) -> list[Pattern]:
        def ranked(kind: str) -> list[tuple[str, _Candidate]]:
            entries = [
                (key[1], c) for key, c in candidates.items() if key[0] == kind and c.count >= self.min_occurrences
            ]
            return sorted(entries, key=lambda e: e[1].count, reverse=True)

        patterns: list[Pattern] = []

        for index, (prefix, _) in enumerate(ranked("prefix")):
            patterns.append(
                Pattern(
                    id=f"quality-prefix-{index + 1}",
                    category="quality",
                    description=f'Add prefix: "{prefix}"',
                    priority=95 - index,
                    preserves_formatting=True,
                    test=lambda text, p=prefix: not text.lstrip().startswith(p),
                    transform=_prepend(prefix),
                )
            )

        for index, (suffix, _) in enumerate(ranked("suffix")):
            patterns.append(
                Pattern(
                    id=f"quality-suffix-{index + 1}",
                    category="quality",
                    description=f'Add suffix: "{suffix}"',
                    priority=85 - index,
                    preserves_formatting=True,
                    test=lambda text, s=suffix: not text.rstrip().endswith(s),
                    transform=_append(suffix),
                )
            )

        for index, (command, _) in enumerate(ranked("command")):
            patterns.append(
                Pattern(
                    id=f"quality-command-{command.lower().replace(' ', '-')}-{index + 1}",
                    category="quality",
                    description=f'Enhance "{command}" command',
                    priority=90 - index,
                    preserves_formatting=True,
                    find=re.compile(rf"^{re.escape(command)}\s+(\w[\w\s]+)\.$", re.I | re.M),
                    replace=rf"{command} \1. {COMMAND_ENHANCEMENT}",
                )
            )

        return patterns
