"""
LeanPrompt — Prompt Token Optimizer

Pattern-based prompt rewriting that reduces token counts while keeping
intent intact, with per-pattern effectiveness tracking and an MCP server.

The MCP server lives in ``leanprompt.server`` and is not imported here.
"""

__version__ = "1.0.0"

from .discovery import DiscoveryResult, PatternDiscovery
from .errors import (
    ConfigurationError,
    DuplicatePatternError,
    ErrorCode,
    InvalidInputError,
    InvalidPatternError,
    LeanPromptError,
)
from .models import (
    AppliedPatternInfo,
    DualOptimizationResult,
    EffectivenessMetrics,
    OptimizationResult,
    Pattern,
    PerformanceMetrics,
)
from .optimizer import PromptOptimizer, create_dual_optimizer
from .optimizers import DualOptimizer, PatternOptimizer, PatternRegistry, SelectionStrategy
from .tokenizers import count_tokens, create_tokenizer

__all__ = [
    # Facade
    "PromptOptimizer",
    "create_dual_optimizer",
    # Engines
    "PatternOptimizer",
    "DualOptimizer",
    "SelectionStrategy",
    "PatternRegistry",
    "PatternDiscovery",
    "DiscoveryResult",
    # Models
    "Pattern",
    "EffectivenessMetrics",
    "AppliedPatternInfo",
    "PerformanceMetrics",
    "OptimizationResult",
    "DualOptimizationResult",
    # Tokens
    "count_tokens",
    "create_tokenizer",
    # Errors
    "ErrorCode",
    "LeanPromptError",
    "InvalidInputError",
    "ConfigurationError",
    "InvalidPatternError",
    "DuplicatePatternError",
]
