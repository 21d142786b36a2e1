"""Meta patterns: instructions about how the model should respond."""

import re

from ..models import Pattern


def meta_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="meta-you-are-a",
            category="meta",
            description='Rewrite "I want you to act as a X." to "You are a X."',
            priority=100,
            preserves_formatting=True,
            find=re.compile(r"I want you to (?:act|behave|function|serve) as an? ([a-z\s-]+)\.", re.I),
            replace=r"You are a \1.",
        ),
        Pattern(
            id="remove-excessive-politeness",
            category="meta",
            description="Remove excessive politeness markers",
            priority=90,
            preserves_formatting=True,
            find=re.compile(r"\b(?:kindly|if you could|if you would)\s+", re.I),
            replace="",
        ),
        Pattern(
            id="shorten-do-not-instructions",
            category="meta",
            description="Convert negative explanation instructions to a concise form",
            priority=85,
            preserves_formatting=True,
            find=re.compile(r"Do not (?:write|provide|include|add|give) (?:any )?explanations\.?", re.I),
            replace="No explanations.",
        ),
        Pattern(
            id="convert-paragraphs-to-bullets",
            category="meta",
            description="Convert a chain of 'You should' sentences to bullet points",
            priority=75,
            preserves_formatting=True,
            find=re.compile(r"You should ([^.]+)\. You should also ([^.]+)\. Additionally, ([^.]+)\.", re.I),
            replace="• \\1\n• \\2\n• \\3",
        ),
        Pattern(
            id="remove-performance-reassurance",
            category="meta",
            description="Remove unnecessary reminders to use expertise",
            priority=70,
            preserves_formatting=True,
            find=re.compile(
                r"\s*You (?:should|must|need to|have to) (?:use|utilize|employ|apply) your "
                r"(?:knowledge|expertise|understanding|skills) of [^.]+\.",
                re.I,
            ),
            replace="",
        ),
        Pattern(
            id="remove-confirmation-requests",
            category="meta",
            description="Remove requests for confirmation",
            priority=60,
            preserves_formatting=True,
            find=re.compile(r"\s*Reply \"?OK\"? (?:to confirm|if you understood)\.?", re.I),
            replace="",
        ),
        Pattern(
            id="compress-formatting-instructions",
            category="meta",
            description="Compress 'only reply with X, and nothing else' instructions",
            priority=55,
            preserves_formatting=True,
            find=re.compile(r"I want you to (?:only reply|respond) with ([^.,]+), and nothing else\.", re.I),
            replace=r"Reply with \1 only.",
        ),
        Pattern(
            id="optimize-role-descriptions",
            category="meta",
            description="Merge a role statement and its follow-up duty",
            priority=50,
            preserves_formatting=True,
            find=re.compile(r"Your (?:role|job|task) (?:is|will be) to ([^.]+)\. You (?:will|should) ([^.]+)\.", re.I),
            replace=r"Role: \1, \2.",
        ),
    ]
