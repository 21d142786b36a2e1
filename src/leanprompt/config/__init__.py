"""
LeanPrompt — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    Aggressiveness,
    LeanPromptSettings,
    LogFormat,
    LogLevel,
    ObservabilityConfig,
    OptimizerConfig,
    TokenCacheConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "LeanPromptSettings",
    # Enums
    "Aggressiveness",
    "LogFormat",
    "LogLevel",
    # Config sections
    "OptimizerConfig",
    "TokenCacheConfig",
    "ObservabilityConfig",
]
