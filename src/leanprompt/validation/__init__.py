"""
LeanPrompt — Input Validation Module

Pydantic-based validation for MCP tool inputs.
"""

from .decorators import validate_input
from .tool_schemas import (
    CountTokensInput,
    GetStatusInput,
    ListPatternsInput,
    OptimizePromptInput,
    PatternEffectivenessInput,
)

__all__ = [
    # Decorator
    "validate_input",
    # Tool input schemas
    "OptimizePromptInput",
    "CountTokensInput",
    "ListPatternsInput",
    "PatternEffectivenessInput",
    "GetStatusInput",
]
