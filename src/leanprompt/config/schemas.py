"""
LeanPrompt — Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import Pattern


class Aggressiveness(str, Enum):
    """Named policies selecting which built-in patterns are active."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class OptimizerConfig(BaseModel):
    """Configuration of a PromptOptimizer facade."""

    model: str = Field(default="gpt-3.5-turbo", description="Target model for token counting")
    aggressiveness: Aggressiveness = Field(default=Aggressiveness.MEDIUM, description="Pattern subset policy")
    preserve_formatting: bool = Field(
        default=True,
        description="Skip patterns that declare they alter formatting",
    )
    enabled_categories: list[str] = Field(
        default_factory=lambda: ["all"],
        description="Active pattern categories; ['all'] enables every category",
    )
    custom_patterns: list[Pattern] = Field(
        default_factory=list,
        description="Caller-supplied patterns, always active",
    )
    track_pattern_effectiveness: bool = Field(default=True, description="Attach per-pattern metrics")
    include_performance_metrics: bool = Field(default=False, description="Report execution timing")

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("model must be a non-empty string")
        return v

    @field_validator("enabled_categories")
    @classmethod
    def validate_categories(cls, v: list[str]) -> list[str]:
        for category in v:
            if not category.strip():
                raise ValueError("category names must be non-empty")
        return v

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)


class TokenCacheConfig(BaseModel):
    """Shared token cache configuration."""

    max_size: int = Field(default=2000, ge=1, description="Maximum cached token counts")
    hash_threshold: int = Field(
        default=100,
        ge=0,
        description="Texts longer than this are keyed by content hash",
    )


class ObservabilityConfig(BaseModel):
    """Logging and in-process metrics configuration."""

    log_format: LogFormat = Field(default=LogFormat.TEXT, description="Log output format")
    enable_metrics: bool = Field(default=True, description="Collect in-memory metrics")
    enable_tracing: bool = Field(default=True, description="Time traced spans")

    model_config = ConfigDict(use_enum_values=True)


class LeanPromptSettings(BaseModel):
    """Root configuration for LeanPrompt."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)
    token_cache: TokenCacheConfig = Field(default_factory=TokenCacheConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
