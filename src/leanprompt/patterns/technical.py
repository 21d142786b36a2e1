"""Technical patterns: boilerplate found in coding and tooling prompts."""

import re

from ..models import Pattern

_LANGUAGE = re.compile(r"\b(javascript|python|java|c\+\+|typescript|html|css|ruby|go|bash|shell)\b", re.I)
_NO_EXPLANATIONS = re.compile(
    r"(\b(?:do not|don't) (?:include|add|put|place|write) (?:any )?"
    r"(?:comments|explanations|descriptions|notes|text)[^.]*\.|Do not explain (?:the|your) (?:code|solution)[^.]*\.)",
    re.I,
)
_CODE_BLOCK_REPLY = re.compile(
    r"I (?:want|need) you to (?:only |just )?(?:reply|respond|return|give me|provide) (?:the |your )?"
    r"(?:code|solution|answer) (?:inside|in|within|using) (?:a |one )?(?:single |unique )?code blocks?[^.]*\.",
    re.I,
)


def _mentions_code_block_only(text: str) -> bool:
    lowered = text.lower()
    return "code block" in lowered and "nothing else" in lowered and len(text) > 100


def _compress_code_response_format(text: str) -> str:
    language = _LANGUAGE.search(text)
    code_type = f"{language.group(1)} " if language else ""
    result = _NO_EXPLANATIONS.sub("No explanations.", text)
    return _CODE_BLOCK_REPLY.sub(f"Reply: {code_type}code block only.", result)


def _rx(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.I)


def technical_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="tech-simplify-stack-lists",
            category="technical",
            description="Simplify technology stack listings",
            priority=100,
            preserves_formatting=True,
            find=_rx(
                r"You will develop an? [^.]+ (?:using|with) (?:the )?(?:following|these) "
                r"(?:tools|technologies|stack|libraries|frameworks):\s*([^.]+)\."
            ),
            replace=r"Tech: \1.",
        ),
        Pattern(
            id="tech-code-example-request",
            category="technical",
            description="Optimize code example requests",
            priority=95,
            preserves_formatting=True,
            find=_rx(r"I will (?:provide|give) you with [^.]+ and you will (?:provide|write|create) [^.]+ code [^.]+\."),
            replace="Write code based on my specifications.",
        ),
        Pattern(
            id="tech-code-block-instructions",
            category="technical",
            description="Optimize instructions about code blocks",
            priority=90,
            preserves_formatting=True,
            find=_rx(
                r"I want you to only reply with the (?:code|output|terminal output|result) "
                r"inside one unique code block,? and nothing else"
            ),
            replace="Reply: code block only",
        ),
        Pattern(
            id="tech-code-response-format",
            category="technical",
            description="Optimize code response format instructions",
            priority=85,
            preserves_formatting=True,
            test=_mentions_code_block_only,
            transform=_compress_code_response_format,
        ),
        Pattern(
            id="tech-terminal-instructions",
            category="technical",
            description="Optimize terminal simulation instructions",
            priority=85,
            preserves_formatting=True,
            find=_rx(
                r"I want you to act as a [^.]+ terminal\. I will (?:type|write) commands and "
                r"you will reply with what the [^.]+ terminal should show\."
            ),
            replace="Simulate a terminal. Process my commands and show output only.",
        ),
        Pattern(
            id="tech-file-optimization",
            category="technical",
            description="Optimize file handling instructions",
            priority=80,
            preserves_formatting=True,
            find=_rx(r"You should merge files in(?:to)? (?:a )?(?:single|one) [^.]+ file and nothing else\."),
            replace="Merge into single file.",
        ),
        Pattern(
            id="tech-explanation-removal",
            category="technical",
            description="Shorten requests to omit explanations",
            priority=75,
            preserves_formatting=True,
            find=_rx(r"\bdo not write explanations\."),
            replace="no explanations.",
        ),
        Pattern(
            id="tech-programming-instructions",
            category="technical",
            description="Simplify programming task instructions",
            priority=70,
            preserves_formatting=True,
            find=_rx(
                r"I will provide (?:you with )?(?:some |the )?(?:details|specifications|requirements) "
                r"(?:about|for|related to) [^.]+, and (?:it will be your job|your task is) to [^.]+\."
            ),
            replace="Given requirements, you will create code.",
        ),
        Pattern(
            id="tech-remove-prompt-context",
            category="technical",
            description="Remove speculative context in technical requests",
            priority=60,
            preserves_formatting=True,
            find=_rx(r"\s*This could (?:include|involve) [^.]+\."),
            replace="",
        ),
        Pattern(
            id="tech-api-interaction",
            category="technical",
            description="Remove tool usage justifications",
            priority=55,
            preserves_formatting=True,
            find=_rx(r"\s*You should (?:use|utilize|employ) [^.]+ in order to [^.]+\."),
            replace="",
        ),
    ]
