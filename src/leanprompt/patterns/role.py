"""Role patterns: persona and expertise descriptions."""

import re

from ..models import Pattern

_APPLY_EXPERTISE = re.compile(
    r"You should (?:use|apply|leverage|utilize) your (knowledge|expertise|experience|understanding) "
    r"(?:of|in|with) ([^.]+)\.",
    re.I,
)
_KNOWLEDGE_REQUIREMENT = re.compile(
    r"You should be (?:knowledgeable|familiar|proficient|experienced|an expert) (?:about|in|with) ([^.]+)\.",
    re.I,
)
_EXPERTISE_WORDS = re.compile(r"\b(knowledge|expertise|experience|understanding|familiar|proficient)\b", re.I)

_PERSONA = re.compile(r"\b(?:act as|pretend to be|role-play as|assume the role of) an? ([^.,]+)", re.I)
_TRAITS = re.compile(r"\b(?:you are|you should be) ([^.,]+)", re.I)
_RESPONSIBILITIES = re.compile(r"\b(?:you will|your job is to|your task is to|you need to) ([^.,]+)", re.I)
_FIRST_REQUEST = re.compile(r"\bMy (?:first|initial) (?:request|task|question) is [\"'“]([^\"”]+)[\"'”]", re.I)


def _compress_expertise(text: str) -> str:
    text = _APPLY_EXPERTISE.sub(r"• Apply \1 in \2.", text)
    return _KNOWLEDGE_REQUIREMENT.sub(r"• Knowledge: \1.", text)


def _compress_knowledge(text: str) -> str:
    return _KNOWLEDGE_REQUIREMENT.sub(r"• Knowledge: \1.", text)


def _unique(values: list[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _compress_persona(text: str) -> str:
    role = _PERSONA.search(text)
    if not role:
        return text

    lines = [f"• Role: {role.group(1).strip()}"]

    traits = _unique(_TRAITS.findall(text))
    if traits:
        lines.append(f"• Traits: {', '.join(traits)}")

    responsibilities = _unique(_RESPONSIBILITIES.findall(text))
    if responsibilities:
        lines.append("• Responsibilities:")
        lines.extend(f"  - {r}" for r in responsibilities)

    task = _FIRST_REQUEST.search(text)
    if task:
        lines.append(f'• Task: "{task.group(1).strip()}"')

    return "\n".join(lines)


def role_patterns() -> list[Pattern]:
    return [
        Pattern(
            id="role-expertise-compression",
            category="role",
            description="Compress expertise descriptions into concise bullet points",
            priority=95,
            preserves_formatting=False,
            test=lambda text: len(text) > 300 and _EXPERTISE_WORDS.search(text) is not None,
            transform=_compress_expertise,
        ),
        Pattern(
            id="role-knowledge-compression",
            category="role",
            description="Compress knowledge requirements into concise bullet points",
            priority=90,
            preserves_formatting=False,
            test=lambda text: "knowledgeable about" in text or "familiar with" in text,
            transform=_compress_knowledge,
        ),
        Pattern(
            id="role-simplify-first-request",
            category="role",
            description='Simplify "My first request is" phrasing',
            priority=85,
            preserves_formatting=True,
            find=_FIRST_REQUEST,
            replace=r'Task: "\1"',
        ),
        Pattern(
            id="compress-persona-descriptions",
            category="role",
            description="Compress verbose persona descriptions",
            priority=80,
            preserves_formatting=False,
            test=lambda text: len(text) > 400 and _PERSONA.search(text) is not None,
            transform=_compress_persona,
        ),
        Pattern(
            id="role-you-are-expert",
            category="role",
            description='Shorten "You are an expert who specializes in" openers',
            priority=60,
            preserves_formatting=True,
            find=re.compile(r"\bYou are an? (?:highly )?(?:skilled|experienced|expert) ([^.,]+?) who specializes in\b", re.I),
            replace=r"You are a \1 specializing in",
        ),
    ]
