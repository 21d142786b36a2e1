"""Filler patterns: politeness, hedging and discourse markers that carry no instruction."""

import re

from ..models import Pattern
from .casing import NEXT_LETTER, drop_phrase, sentence_case

COMPOUND_PREPOSITIONS: dict[str, str] = {
    "in order to": "to",
    "for the purpose of": "for",
    "in the process of": "during",
    "in the course of": "during",
    "in the case of": "for",
    "on the subject of": "about",
    "in relation to": "about",
    "with regard to": "about",
    "with respect to": "about",
    "in regards to": "about",
    "on the basis of": "from",
    "on the grounds of": "because",
    "in the event of": "if",
    "in the absence of": "without",
    "with the exception of": "except",
    "by means of": "by",
    "by virtue of": "by",
    "by way of": "by",
    "on account of the fact that": "because",
    "in view of the fact that": "because",
    "on the grounds that": "because",
}

_COMPOUND_PREPOSITION_RE = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in sorted(COMPOUND_PREPOSITIONS, key=len, reverse=True)) + r")\b",
    re.I,
)


def _simplify_preposition(match: re.Match[str]) -> str:
    return COMPOUND_PREPOSITIONS.get(match.group(0).lower(), match.group(0))


def _example(before: str, after: str) -> dict[str, str]:
    return {"before": before, "after": after}


def filler_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="remove-please",
            category="filler",
            description='Remove unnecessary "please" from instructions',
            priority=90,
            preserves_formatting=True,
            find=re.compile(r"\bplease\b,?\s+" + NEXT_LETTER, re.I),
            replace=drop_phrase,
        ),
        Pattern(
            id="remove-redundant-polite-phrases",
            category="filler",
            description="Remove redundant polite phrases",
            priority=85,
            preserves_formatting=True,
            find=re.compile(
                r"\b(I would appreciate it if you could|I would be grateful if you could"
                r"|If you don't mind|If it's not too much trouble|I was wondering if you could"
                r"|Would you mind|Would you be able to|I kindly request you to)\b,?\s*",
                re.I,
            ),
            replace="",
        ),
        Pattern(
            id="remove-filler-words",
            category="filler",
            description="Remove filler words and phrases",
            priority=80,
            preserves_formatting=True,
            find=re.compile(
                r"\b(actually|basically|essentially|really|honestly|frankly|literally|simply|just"
                r"|obviously|needless to say|as you may know|as we all know|as I mentioned earlier"
                r"|as previously stated|as I said before|like I said)\b,?\s*",
                re.I,
            ),
            replace="",
            example=_example(
                "Basically, I just need a summary.",
                "I need a summary.",
            ),
        ),
        Pattern(
            id="remove-hedge-words",
            category="filler",
            description="Remove hedge words and phrases",
            priority=75,
            preserves_formatting=True,
            find=re.compile(
                r"\b(It seems to me that|From my perspective|To some extent|More or less"
                r"|kind of|sort of|somewhat)\b,?\s*",
                re.I,
            ),
            replace="",
            example=_example(
                "It's kind of important to finish this soon.",
                "It's important to finish this soon.",
            ),
        ),
        Pattern(
            id="simplify-compound-prepositions",
            category="filler",
            description="Simplify compound prepositions",
            priority=70,
            preserves_formatting=True,
            find=_COMPOUND_PREPOSITION_RE,
            replace=_simplify_preposition,
            example=_example(
                "We met with regard to the budget.",
                "We met about the budget.",
            ),
        ),
        Pattern(
            id="filler-request-that-you",
            category="filler",
            description='Replace "I would like to request that you" with "Please"',
            priority=60,
            preserves_formatting=True,
            find=re.compile(r"\bI would like to request that you\b", re.I),
            replace=sentence_case("Please"),
        ),
        Pattern(
            id="filler-humble-opinion",
            category="filler",
            description='Remove "in my humble opinion"',
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"\b(in my (humble |personal |honest )?opinion|IMHO)\b,?\s*" + NEXT_LETTER, re.I),
            replace=drop_phrase,
            example=_example(
                "In my humble opinion, we should reconsider this approach.",
                "We should reconsider this approach.",
            ),
        ),
        Pattern(
            id="filler-i-mean",
            category="filler",
            description='Remove "I mean"',
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"\bI mean\b,?\s*" + NEXT_LETTER, re.I),
            replace=drop_phrase,
        ),
        Pattern(
            id="filler-please-note",
            category="filler",
            description='Remove "please note that" style preambles',
            priority=50,
            preserves_formatting=True,
            find=re.compile(
                r"\b(please note that|I would like to mention that|it is worth mentioning that"
                r"|it should be noted that)\b\s*" + NEXT_LETTER,
                re.I,
            ),
            replace=drop_phrase,
        ),
        Pattern(
            id="filler-would-like-you-to",
            category="filler",
            description="Simplify request phrases",
            priority=55,
            preserves_formatting=True,
            find=re.compile(r"\b(I would like you to|I want you to|I'd like you to|I need you to)\b", re.I),
            replace=sentence_case("Please"),
            example=_example(
                "I would like you to analyze this data.",
                "Please analyze this data.",
            ),
        ),
        Pattern(
            id="filler-thank-you",
            category="filler",
            description="Simplify thank you phrases",
            priority=40,
            preserves_formatting=True,
            find=re.compile(
                r"\bthank you (very much |a lot |so much )?for your (help|assistance|time|attention|consideration)\b",
                re.I,
            ),
            replace=sentence_case("Thanks"),
        ),
        Pattern(
            id="filler-thanks-in-advance",
            category="filler",
            description="Remove gratitude in advance",
            priority=35,
            preserves_formatting=True,
            find=re.compile(r"\s*\b(thanks in advance|thank you in advance)\b[.!]?", re.I),
            replace="",
            example=_example(
                "Please send me the report. Thanks in advance.",
                "Please send me the report.",
            ),
        ),
    ]
