"""
LeanPrompt — Observability Module
"""

from .monitoring import (
    JSONFormatter,
    ObservabilityAdapter,
    get_observability,
    reset_observability,
    setup_logging,
)

__all__ = [
    "ObservabilityAdapter",
    "JSONFormatter",
    "get_observability",
    "reset_observability",
    "setup_logging",
]
