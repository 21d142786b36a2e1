"""Verbosity patterns: wordy expressions that have a shorter equivalent."""

import re

from ..models import Pattern
from .casing import NEXT_LETTER, drop_phrase, sentence_case

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_BULLET_LINE = re.compile(r"^[ \t]*[-•*+]\s", re.M)


def _bulletize_sentences(text: str) -> str:
    sentences = _SENTENCE_BREAK.split(text)
    return "\n".join(f"• {s.strip()}" for s in sentences if s.strip())


def _is_instruction_paragraph(text: str) -> bool:
    # Text that already has bullet lines is never re-bulletized
    return len(text) > 200 and len(text.split(".")) > 3 and not _BULLET_LINE.search(text)


def _has_short_sentences(text: str) -> bool:
    sentences = _SENTENCE_BREAK.split(text)
    return len(sentences) > 3 and any(len(s.split(" ")) < 8 for s in sentences)


def _condense_sentences(text: str) -> str:
    return re.sub(r"(?<=[.!?])\s+(?=[A-Z])", ", ", text)


def _compact_role_instructions(text: str) -> str:
    text = re.sub(
        r"\bYou should (be able to|be capable of|have the ability to)\b", sentence_case("You can"), text, flags=re.I
    )
    text = re.sub(r"\bYou should (have|possess|maintain)\b", sentence_case("Have"), text, flags=re.I)
    text = re.sub(
        r"\bYou should (provide|give|offer|create|generate)\b", sentence_case("Provide"), text, flags=re.I
    )
    return re.sub(
        r"\bIt (would be|is) (great|helpful|useful|beneficial) if you could\b",
        sentence_case("Please"),
        text,
        flags=re.I,
    )


def verbosity_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="remove-redundant-i-want-you-to",
            category="verbosity",
            description='Replace "I want you to act as" with "You are"',
            priority=95,
            preserves_formatting=True,
            find=re.compile(r"I want you to (act|serve|function|work|operate) as", re.I),
            replace=sentence_case("You are"),
        ),
        Pattern(
            id="bulletize-instructions",
            category="verbosity",
            description="Convert long paragraphs of instructions into bullet points",
            priority=90,
            preserves_formatting=False,
            test=_is_instruction_paragraph,
            transform=_bulletize_sentences,
        ),
        Pattern(
            id="condense-multiple-sentences",
            category="verbosity",
            description="Condense multiple consecutive short sentences into one",
            priority=85,
            preserves_formatting=True,
            test=_has_short_sentences,
            transform=_condense_sentences,
        ),
        Pattern(
            id="remove-filler-phrases",
            category="verbosity",
            description="Remove common filler phrases that add no value",
            priority=80,
            preserves_formatting=True,
            find=re.compile(
                r"\b(it is (worth|important) (to )?(note|mention|remember|consider) that"
                r"|as you (may|might|can) see|if you think about it|in the final analysis"
                r"|for all intents and purposes|it goes without saying that|it should be noted that"
                r"|despite the fact that|in spite of the fact that|concerning the matter of"
                r"|it would be helpful if you could|I would (like|appreciate) it if you would)\b\s*"
                + NEXT_LETTER,
                re.I,
            ),
            replace=drop_phrase,
        ),
        Pattern(
            id="compact-role-instructions",
            category="verbosity",
            description="Compact lengthy role instructions into concise directives",
            priority=75,
            preserves_formatting=False,
            test=lambda text: "you should" in text and len(text) > 300,
            transform=_compact_role_instructions,
        ),
        Pattern(
            id="verbosity-ask-to-tell",
            category="verbosity",
            description="Replace wordy requests for information with 'Tell me'",
            priority=65,
            preserves_formatting=True,
            find=re.compile(
                r"\b(I would like to|I want to|I'd like to|I need to|I wish to|I desire to) "
                r"(ask|know|understand|learn|inquire|find out)\b",
                re.I,
            ),
            replace=sentence_case("Tell me"),
            example={
                "before": "I would like to know about the weather.",
                "after": "Tell me about the weather.",
            },
        ),
        Pattern(
            id="verbosity-in-order-to",
            category="verbosity",
            description='Replace "in order to" and similar with "to"',
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"\b(in order to|with the objective of|with the goal of)\b", re.I),
            replace="to",
            example={
                "before": "We need to work hard in order to succeed.",
                "after": "We need to work hard to succeed.",
            },
        ),
        Pattern(
            id="verbosity-because",
            category="verbosity",
            description='Replace "due to the fact that" and similar with "because"',
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"\b(due to the fact that|for the reason that|owing to the fact that)\b", re.I),
            replace="because",
            example={
                "before": "The game was cancelled due to the fact that it rained.",
                "after": "The game was cancelled because it rained.",
            },
        ),
        Pattern(
            id="verbosity-the-fact-that",
            category="verbosity",
            description='Replace "the fact that" with "that"',
            priority=40,
            preserves_formatting=True,
            find=re.compile(r"\bthe fact that\b", re.I),
            replace="that",
        ),
        Pattern(
            id="verbosity-at-this-time",
            category="verbosity",
            description='Replace "at this point in time" with "now"',
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"\b(at this point in time|at the present time)\b", re.I),
            replace="now",
        ),
        Pattern(
            id="verbosity-in-the-event",
            category="verbosity",
            description='Replace "in the event that" with "if"',
            priority=45,
            preserves_formatting=True,
            find=re.compile(r"\bin the event that\b", re.I),
            replace="if",
        ),
        Pattern(
            id="verbosity-opinion-that",
            category="verbosity",
            description='Remove "I think that" style preambles',
            priority=30,
            preserves_formatting=True,
            find=re.compile(r"\b(I think|I believe|I feel|In my opinion|I suppose|I guess) that\s*", re.I),
            replace="",
        ),
    ]
