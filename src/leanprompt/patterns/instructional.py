"""Instructional patterns: task framing and request boilerplate."""

import re

from ..models import Pattern
from .casing import NEXT_LETTER, drop_phrase, sentence_case


def _rx(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.I)


def instructional_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="instructional-task-is-to",
            category="instructional",
            description='Remove "your task is to" framing',
            priority=70,
            preserves_formatting=True,
            find=_rx(
                r"\b(your task is to|you are being asked to|you are tasked with|your job is to|you are requested to)\b\s*"
                + NEXT_LETTER
            ),
            replace=drop_phrase,
        ),
        Pattern(
            id="instructional-act-as",
            category="instructional",
            description='Replace "I want you to act as" with "Act as"',
            priority=70,
            preserves_formatting=True,
            find=_rx(r"\bI want you to act as\b"),
            replace=sentence_case("Act as"),
        ),
        Pattern(
            id="instructional-ai-self-reference",
            category="instructional",
            description="Remove AI self-references",
            priority=65,
            preserves_formatting=True,
            find=_rx(
                r"\b(as an ai language model|as an ai assistant|as a language model|as an assistant)\b,?\s*" + NEXT_LETTER
            ),
            replace=drop_phrase,
        ),
        Pattern(
            id="instructional-request-phrases",
            category="instructional",
            description='Replace complex request phrases with "Please"',
            priority=60,
            preserves_formatting=True,
            find=_rx(r"\b(I (would like|want) (to|you to) (ask|request) (that|if|for) you|my request is that you)\b"),
            replace=sentence_case("Please"),
        ),
        Pattern(
            id="instructional-manner-modifiers",
            category="instructional",
            description="Remove manner modifiers such as 'in a clear manner'",
            priority=50,
            preserves_formatting=True,
            find=_rx(r"\s*\bin (a clear|an organized|a concise|a detailed) (manner|way|format)\b"),
            replace="",
        ),
        Pattern(
            id="instructional-redundant-adverbs",
            category="instructional",
            description="Remove redundant adverbs before explain/describe verbs",
            priority=50,
            preserves_formatting=True,
            find=_rx(r"\b(clearly|carefully|thoroughly) (explain|describe|analyze|summarize)\b"),
            replace=r"\2",
        ),
        Pattern(
            id="instructional-format-instructions",
            category="instructional",
            description="Simplify format instructions",
            priority=45,
            preserves_formatting=True,
            find=_rx(r"\b(provide|include|give) (a|your) (answer|response|reply|output) (in|as|using) (the following|this) format:?"),
            replace="Format:",
        ),
        Pattern(
            id="instructional-include",
            category="instructional",
            description="Simplify inclusion instructions",
            priority=45,
            preserves_formatting=True,
            find=_rx(r"\b(make sure (to|that you)|ensure that you|don't forget to|remember to) (include|provide|add)\b"),
            replace=sentence_case("Include"),
        ),
        Pattern(
            id="instructional-analysis",
            category="instructional",
            description='Replace analysis phrases with "Analyze"',
            priority=40,
            preserves_formatting=True,
            find=_rx(r"\b(perform|conduct|carry out|do) (a|an) (analysis|review|evaluation|assessment) of\b"),
            replace=sentence_case("Analyze"),
        ),
        Pattern(
            id="instructional-explain",
            category="instructional",
            description="Simplify explanation request phrases",
            priority=40,
            preserves_formatting=True,
            find=_rx(r"\b(explain|describe|clarify|elaborate on) (to me|for me|in detail)\b"),
            replace=sentence_case("Explain"),
        ),
    ]
