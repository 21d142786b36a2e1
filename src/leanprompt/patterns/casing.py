"""
Sentence-aware replacement callbacks for the built-in libraries.

A rewrite that lands at the start of a sentence is capitalized; one that
lands mid-sentence is lowercased. Removal patterns capture the first letter
that follows the removed phrase (group ``next``) so it can be capitalized
when it becomes the new sentence start.
"""

import re
from collections.abc import Callable

_SENTENCE_END = frozenset(".!?:\n")

# Appended to removal regexes
NEXT_LETTER = r"(?P<next>\w)?"


def at_sentence_start(match: re.Match[str]) -> bool:
    before = match.string[: match.start()].rstrip(" \t")
    return not before or before[-1] in _SENTENCE_END


def _recase(word: str, upper: bool) -> str:
    if not word:
        return word
    first = word[0].upper() if upper else word[0].lower()
    return first + word[1:]


def sentence_case(replacement: str) -> Callable[[re.Match[str]], str]:
    """Replace with ``replacement``, capitalized only at a sentence start."""

    def _replace(match: re.Match[str]) -> str:
        return _recase(replacement, at_sentence_start(match))

    return _replace


def drop_phrase(match: re.Match[str]) -> str:
    """Remove the match, capitalizing the next letter if it now starts a sentence."""
    following = match.group("next") or ""
    if following and at_sentence_start(match):
        return following.upper()
    return following
