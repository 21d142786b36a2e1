"""
Approximate tokenizer for Anthropic Claude models.

There is no public Claude tokenizer library, so text is split on whitespace and
punctuation and long pieces are chunked at a fixed width. Claude 3 and later
split code operators too and chunk plain words at 5 characters (other pieces at 3);
legacy models chunk everything at 4.
"""

import math
import re

from .base import Tokenizer

_CLAUDE3_SPLIT = re.compile(r"(\s+|[.,!?;:(){}\[\]<>]|//|#|===|!==|==|=>|<=|!=|&&|\|\|)")
_LEGACY_SPLIT = re.compile(r"(\s+|[.,!?;:()])")
_ALPHA = re.compile(r"[A-Za-z]+")


def _is_claude3(model: str) -> bool:
    name = model.lower()
    return any(marker in name for marker in ("claude-3", "claude-4", "claude-opus", "claude-sonnet", "claude-haiku"))


class ClaudeTokenizer(Tokenizer):
    """Split-and-chunk approximation of Claude tokenization."""

    def __init__(self, model: str):
        super().__init__(model)
        self.is_claude3 = _is_claude3(model)

    def _count(self, text: str) -> int:
        splitter = _CLAUDE3_SPLIT if self.is_claude3 else _LEGACY_SPLIT
        pieces = [p for p in splitter.split(text) if p]

        total = 0
        for piece in pieces:
            total += self._piece_tokens(piece)
        return total

    def _piece_tokens(self, piece: str) -> int:
        if not self.is_claude3:
            return 1 if len(piece) <= 4 else math.ceil(len(piece) / 4)

        if len(piece) <= 5:
            return 1
        if _ALPHA.fullmatch(piece):
            return math.ceil(len(piece) / 5)
        # Code, URLs and non-English text
        return math.ceil(len(piece) / 3)
