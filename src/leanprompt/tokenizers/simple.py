"""
Heuristic tokenizer used when no model-specific tokenizer applies.

Estimates from character, word and punctuation counts, with separate rules
for code-like text and text dominated by non-ASCII characters.
"""

import math
import re

from .base import Tokenizer

_CODE_INDICATORS = (
    re.compile(r"[{}\[\]()<>:;]"),
    re.compile(r"\b(?:function|return|if|else|for|while|var|let|const|import|class|def)\b"),
    re.compile(r"^[ \t]+\S", re.MULTILINE),
    re.compile(r"//|/\*|\*/|#include|#define"),
)

_SPECIAL_CHAR = re.compile(r"[^\w\s]")

CODE_CHARS_PER_TOKEN = 4.5
NON_ASCII_CHARS_PER_TOKEN = 2
ENGLISH_CHARS_PER_TOKEN = 4
NON_ASCII_THRESHOLD = 0.2


def is_probably_code(text: str) -> bool:
    """True when at least two of the code indicators are present."""
    hits = sum(1 for indicator in _CODE_INDICATORS if indicator.search(text))
    return hits >= 2


def non_ascii_ratio(text: str) -> float:
    if not text:
        return 0.0
    return sum(1 for ch in text if ord(ch) > 127) / len(text)


def heuristic_count(text: str) -> int:
    """Estimate the token count of ``text`` without a real tokenizer."""
    if not text:
        return 0

    if is_probably_code(text):
        count = math.ceil(len(text) / CODE_CHARS_PER_TOKEN) + text.count("\n") * 0.5
    elif non_ascii_ratio(text) > NON_ASCII_THRESHOLD:
        count = math.ceil(len(text) / NON_ASCII_CHARS_PER_TOKEN)
    else:
        words = len(text.split())
        chars = len(text) / ENGLISH_CHARS_PER_TOKEN
        specials = len(_SPECIAL_CHAR.findall(text))
        count = chars * 0.5 + words * 0.5 + specials * 0.3

    return max(1, math.ceil(count))


class SimpleTokenizer(Tokenizer):
    """Model-agnostic heuristic tokenizer."""

    def _count(self, text: str) -> int:
        return heuristic_count(text)
