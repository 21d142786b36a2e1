"""
LeanPrompt — Tool Input Validation Schemas

Pydantic models for validating MCP tool inputs.
"""

from pydantic import BaseModel, Field, field_validator

from ..config.schemas import Aggressiveness


class OptimizePromptInput(BaseModel):
    """Input validation for optimize_prompt tool."""

    text: str = Field(
        ...,
        max_length=200_000,
        description="Prompt text to optimize (up to 200K characters)",
    )
    model: str | None = Field(
        default=None,
        description="Model used for token counting, uses config default if None",
    )
    aggressiveness: Aggressiveness | None = Field(
        default=None,
        description="Pattern aggressiveness (low, medium, high), uses config default if None",
    )
    preserve_formatting: bool | None = Field(
        default=None,
        description="Skip patterns that alter line structure, uses config default if None",
    )
    categories: list[str] | None = Field(
        default=None,
        description="Enabled pattern categories (None = all)",
    )
    balance: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Dual-goal balance (0 = efficiency, 1 = quality); None runs the single-goal optimizer",
    )

    @field_validator("model")
    @classmethod
    def validate_model_not_empty(cls, v: str | None) -> str | None:
        """Ensure model is not just whitespace."""
        if v is not None and not v.strip():
            raise ValueError("Model cannot be empty or only whitespace")
        return v

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v: list[str] | None) -> list[str] | None:
        """Ensure category names are non-empty."""
        if v is not None and any(not c.strip() for c in v):
            raise ValueError("Category names cannot be empty")
        return v


class CountTokensInput(BaseModel):
    """Input validation for count_tokens tool."""

    text: str = Field(
        ...,
        max_length=200_000,
        description="Text to count tokens for (up to 200K characters)",
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        min_length=1,
        max_length=100,
        description="Model name (e.g., 'gpt-4', 'claude-3-haiku')",
    )


class ListPatternsInput(BaseModel):
    """Input validation for list_patterns tool."""

    category: str = Field(
        default="all",
        min_length=1,
        max_length=50,
        description="Pattern category, or 'all'",
    )
    aggressiveness: Aggressiveness | None = Field(
        default=None,
        description="Only list patterns active at this aggressiveness",
    )


class PatternEffectivenessInput(BaseModel):
    """Input validation for pattern_effectiveness tool."""

    limit: int = Field(
        default=10,
        ge=0,
        le=500,
        description="Maximum number of patterns to return (0-500)",
    )


class GetStatusInput(BaseModel):
    """Input validation for get_status tool."""

    include_metrics: bool = Field(
        default=False,
        description="Include collected counters and histograms",
    )
