"""Formatting patterns: whitespace, list markers, headers and other layout noise."""

import re

from ..models import Pattern


def formatting_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="collapse-blank-runs",
            category="formatting",
            description="Collapse runs of whitespace spanning lines into a single space",
            priority=90,
            preserves_formatting=False,
            find=re.compile(r"\s{2,}"),
            replace=" ",
        ),
        Pattern(
            id="space-after-sentence",
            category="formatting",
            description="Ensure a single space follows sentence punctuation",
            priority=60,
            preserves_formatting=True,
            find=re.compile(r"([.!?])[ \t]{2,}(?=\S)"),
            replace=r"\1 ",
        ),
        Pattern(
            id="formatting-redundant-format-instructions",
            category="formatting",
            description="Remove redundant formatting instructions",
            priority=20,
            preserves_formatting=True,
            find=re.compile(
                r"\b(format the (output|response) as|use the following format|format your (answer|response) like this):\s*",
                re.I,
            ),
            replace="",
        ),
        Pattern(
            id="formatting-text-list-markers",
            category="formatting",
            description='Convert "First," style openers to numbered items',
            priority=15,
            preserves_formatting=False,
            find=re.compile(r"^[ \t]*(First of all|Firstly|First|To begin with)[:,][ \t]*", re.I | re.M),
            replace="1. ",
        ),
        Pattern(
            id="formatting-section-markers",
            category="formatting",
            description="Convert explicit section markers to markdown headers",
            priority=12,
            preserves_formatting=False,
            find=re.compile(r"^[ \t]*(SECTION|HEADING|TITLE):[ \t]*(.+)$", re.I | re.M),
            replace=r"# \2",
        ),
        Pattern(
            id="formatting-equals-headers",
            category="formatting",
            description="Convert equals sign headers to markdown",
            priority=12,
            preserves_formatting=False,
            find=re.compile(r"^=+[ \t]*(.+?)[ \t]*=+$", re.M),
            replace=r"# \1",
        ),
        Pattern(
            id="formatting-step-numbers",
            category="formatting",
            description="Normalize numbered list labels",
            priority=10,
            preserves_formatting=False,
            find=re.compile(r"^[ \t]*(Number|Step|Point)[ \t]+(\d+)[:.-][ \t]+", re.I | re.M),
            replace=r"\2. ",
        ),
        Pattern(
            id="formatting-paren-numbers",
            category="formatting",
            description="Convert parenthesis numbered lists to period format",
            priority=10,
            preserves_formatting=False,
            find=re.compile(r"^[ \t]*(\d+)\)[ \t]+", re.M),
            replace=r"\1. ",
        ),
        Pattern(
            id="formatting-bullets",
            category="formatting",
            description="Normalize bullet points",
            priority=10,
            preserves_formatting=False,
            find=re.compile(r"^[ \t]*[*•+][ \t]+", re.M),
            replace="- ",
        ),
        Pattern(
            id="formatting-blank-lines",
            category="formatting",
            description="Reduce excessive line breaks",
            priority=5,
            preserves_formatting=False,
            find=re.compile(r"\n{3,}"),
            replace="\n\n",
        ),
        Pattern(
            id="formatting-trailing-whitespace",
            category="formatting",
            description="Remove trailing whitespace",
            priority=1,
            preserves_formatting=True,
            find=re.compile(r"[ \t]+$", re.M),
            replace="",
        ),
        Pattern(
            id="formatting-multiple-spaces",
            category="formatting",
            description="Reduce multiple spaces to a single space",
            priority=1,
            preserves_formatting=True,
            find=re.compile(r"(?<=\S)[ \t]{2,}"),
            replace=" ",
        ),
    ]
