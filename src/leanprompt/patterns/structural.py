"""Structural patterns: markdown section scaffolding in long system prompts."""

import re

from ..models import Pattern

_RESPONSE_STEP = re.compile(r"\d+\.\s*\*\*[^*]+\*\*\s*-\s*[^\n]+")
_RESPONSE_SECTION = re.compile(
    r"(?:^|\n)#+\s*(?:RESPONSE|OUTPUT|ANSWER)\s+(?:STRUCTURE|FORMAT|STYLE)[^\n]*\n"
    r"(?:\d+\.\s*\*\*[^*]+\*\*\s*-\s*[^\n]+\n){3,}"
)
_STEP_PARTS = re.compile(r"(\d+)\.\s*\*\*([^*]+)\*\*")


def _has_response_structure(text: str) -> bool:
    return "RESPONSE" in text and len(_RESPONSE_STEP.findall(text)) >= 3


def _condense_response_structure(text: str) -> str:
    def _condense(match: re.Match[str]) -> str:
        steps = [f"{num}. {title}" for num, title in _STEP_PARTS.findall(match.group(0))]
        return "\n# RESPONSE FORMAT\n" + "\n".join(steps) + "\n"

    return _RESPONSE_SECTION.sub(_condense, text)


def structural_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="simplify-markdown-headers",
            category="structural",
            description="Simplify 'X AND Y' markdown headers",
            priority=100,
            preserves_formatting=True,
            find=re.compile(r"##+ ([A-Z][A-Z ]+?)(?: AND | & )([A-Z][A-Z ]+)(\n|$)"),
            replace=r"# \1 \2\3",
        ),
        Pattern(
            id="condense-role-definitions",
            category="structural",
            description="Condense verbose role definitions",
            priority=95,
            preserves_formatting=True,
            find=re.compile(
                r"(^|\n)#+[ \t]*(?:ROLE|CONTEXT|IDENTITY)[^\n]*\n"
                r"You (?:are|will act as) (?:an? )?([^.,\n]+), (?:an? )?([^.,\n]+) (?:that|who) ([^.\n]{20,100})\."
            ),
            replace=r"\1# ROLE\nYou: \2, \3. \4.",
        ),
        Pattern(
            id="condense-knowledge-sections",
            category="structural",
            description="Drop the boilerplate lead-in of knowledge sections",
            priority=90,
            preserves_formatting=True,
            find=re.compile(
                r"(^|\n)#+[ \t]*(?:KNOWLEDGE|INFORMATION|EXPERTISE)[^\n]*\n"
                r"You (?:have|possess) (?:access to|knowledge of) the following (?:information|knowledge|data):\n"
                r"((?:- [^\n]+\n){3,10})"
            ),
            replace=r"\1# KNOWLEDGE\n\2",
        ),
        Pattern(
            id="condense-response-structure",
            category="structural",
            description="Reduce response structure sections to numbered titles",
            priority=80,
            preserves_formatting=True,
            test=_has_response_structure,
            transform=_condense_response_structure,
        ),
        Pattern(
            id="condense-capabilities-section",
            category="structural",
            description="Condense capabilities sections",
            priority=75,
            preserves_formatting=True,
            find=re.compile(
                r"(^|\n)#+[ \t]*(?:CAPABILITIES|ABILITIES|FUNCTIONS)[^\n]*\n"
                r"###[ \t]*You (?:CAN|SHOULD|MUST|ARE ABLE TO):\n((?:- [^\n]+\n){4,})"
            ),
            replace=r"\1# CAPABILITIES\n\2",
        ),
        Pattern(
            id="condense-limitations-section",
            category="structural",
            description="Condense limitations sections",
            priority=70,
            preserves_formatting=True,
            find=re.compile(r"(^|\n)###[ \t]*You (?:CANNOT|SHOULD NOT|MUST NOT|ARE NOT ABLE TO):\n((?:- [^\n]+\n){4,})"),
            replace=r"\1# LIMITATIONS\n\2",
        ),
        Pattern(
            id="condense-similar-bullet-points",
            category="structural",
            description="Join runs of short bullet points",
            priority=60,
            preserves_formatting=False,
            find=re.compile(r"- ([^\n]{5,30})\n- ([^\n]{5,30})\n- ([^\n]{5,30})\n- ([^\n]{5,30})\n- ([^\n]{5,30})\n"),
            replace="- \\1\n- \\2\n- \\3, \\4, \\5\n",
        ),
        Pattern(
            id="condense-instruction-paragraphs",
            category="structural",
            description="Condense conditional instruction paragraphs",
            priority=55,
            preserves_formatting=True,
            find=re.compile(
                r"(?:If|When) ([^,.]{10,40}), (?:you should|you must|please) ([^.]{10,40})\. "
                r"(?:This will|This helps|This allows) ([^.]{10,40})\."
            ),
            replace=r"\1 → \2. \3.",
        ),
        Pattern(
            id="condense-updates-sections",
            category="structural",
            description="Condense updates sections",
            priority=45,
            preserves_formatting=True,
            find=re.compile(
                r"(^|\n)#+[ \t]*(?:UPDATES?|MAINTENANCE)[^\n]*\n"
                r"This (?:prompt|document|instruction set) will be (?:reviewed|updated) ([^.]+)\. Last updated: ([^.]+)\."
            ),
            replace=r"\1# UPDATES\n\2. Last updated: \3",
        ),
    ]
